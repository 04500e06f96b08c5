"""Tests for the satjax.config module."""

import jax
import jax.numpy as jnp
import pytest

from satjax.config import get_dtype, set_dtype
from satjax.coordinates import observer_state_eci
from satjax.time import gmst_jd
from satjax.utils import mod2pi

pytestmark = pytest.mark.order("first")


@pytest.fixture(autouse=True)
def reset_dtype():
    """Reset dtype to float64 before and after each test."""
    set_dtype(jnp.float64)
    yield
    set_dtype(jnp.float64)


class TestGetSetDtype:
    def test_default_dtype(self):
        assert get_dtype() == jnp.float64

    def test_set_float32(self):
        set_dtype(jnp.float32)
        assert get_dtype() == jnp.float32

    def test_set_float16(self):
        set_dtype(jnp.float16)
        assert get_dtype() == jnp.float16

    def test_set_bfloat16(self):
        set_dtype(jnp.bfloat16)
        assert get_dtype() == jnp.bfloat16

    def test_roundtrip(self):
        for dtype in (jnp.float16, jnp.bfloat16, jnp.float32, jnp.float64):
            set_dtype(dtype)
            assert get_dtype() == dtype

    def test_invalid_dtype_raises(self):
        with pytest.raises(ValueError, match="Unsupported dtype"):
            set_dtype(jnp.int32)

    def test_invalid_dtype_string_raises(self):
        with pytest.raises(ValueError, match="Unsupported dtype"):
            set_dtype("float64")

    def test_x64_enabled_on_import(self):
        assert jax.config.jax_enable_x64 is True

    def test_float64_enables_x64(self):
        set_dtype(jnp.float64)
        assert jax.config.jax_enable_x64 is True


class TestDtypeSwitchingOutputs:
    """Verify that output dtypes match the configured dtype."""

    def test_gmst_dtype_float64(self):
        assert gmst_jd(2451545.0).dtype == jnp.float64

    def test_gmst_dtype_float32(self):
        set_dtype(jnp.float32)
        assert gmst_jd(2451545.0).dtype == jnp.float32

    def test_observer_dtype_float64(self):
        pos, vel, theta = observer_state_eci(52.467, -2.022, 200.0, 2454938.79)
        assert pos.dtype == jnp.float64
        assert vel.dtype == jnp.float64
        assert theta.dtype == jnp.float64

    def test_mod2pi_keeps_input_dtype(self):
        assert mod2pi(jnp.float32(7.0)).dtype == jnp.float32


class TestFloat64Precision:
    def test_julian_date_fraction(self):
        """A Julian date near 2.45e6 must keep millisecond resolution."""
        jd = jnp.asarray(2454938.5 + 0.001 / 86400.0, dtype=get_dtype())
        assert float(jd) - 2454938.5 == pytest.approx(0.001 / 86400.0, rel=1e-3)
