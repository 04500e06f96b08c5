"""Tests for SGP4/SDP4 propagation against the reference python-sgp4 library."""

import jax
import jax.numpy as jnp
import numpy as np
import pytest
from sgp4.api import WGS72 as SGP4_WGS72
from sgp4.api import Satrec

from satjax.sgp4 import (
    HALF_DAY_RESONANCE,
    MAX_KEPLER_ITERATIONS,
    NO_RESONANCE,
    SYNCHRONOUS_RESONANCE,
    deep_space_init,
    initial_resonance_state,
    integrate_resonance,
    near_earth_init,
    near_earth_propagate,
    parse_tle,
    sgp4_propagate,
    solve_kepler,
)

from .conftest import DEEP_SPACE_TLE, GEOSYNC_TLE, LEO_TLE, MOLNIYA_TLE

# ISS TLE, near-earth LEO (period ~92 min)
ISS_LINE1 = "1 25544U 98067A   08264.51782528 -.00002182  00000-0 -11606-4 0  2927"
ISS_LINE2 = "2 25544  51.6416 247.4627 0006703 130.5360 325.0288 15.72125391563537"


def _get_reference(line1: str, line2: str, tsince_min: float) -> tuple:
    """Get reference position and velocity from python-sgp4."""
    sat = Satrec.twoline2rv(line1, line2, SGP4_WGS72)
    e, r, v = sat.sgp4_tsince(tsince_min)
    return e, r, v


class TestSolveKepler:
    """Test the Newton solver for the modified Kepler equation."""

    def test_converges_for_small_eccentricity(self) -> None:
        solution = solve_kepler(0.01, 0.0, 1.0)
        assert bool(solution.converged)
        assert int(solution.iterations) <= MAX_KEPLER_ITERATIONS

    def test_residual_is_small(self) -> None:
        axn, ayn, capu = 0.3, -0.2, 2.5
        e = float(solve_kepler(axn, ayn, capu).eccentric_anomaly)
        residual = capu - (e - axn * np.sin(e) + ayn * np.cos(e))
        assert abs(residual) < 1e-10

    def test_circular_orbit_is_identity(self) -> None:
        solution = solve_kepler(0.0, 0.0, 1.234)
        assert float(solution.eccentric_anomaly) == pytest.approx(1.234, abs=1e-14)

    def test_iteration_cap(self) -> None:
        solution = solve_kepler(0.99, 0.0, 0.01)
        assert int(solution.iterations) <= MAX_KEPLER_ITERATIONS
        assert jnp.isfinite(solution.eccentric_anomaly)

    def test_jit_compatible(self) -> None:
        eager = solve_kepler(0.1, 0.05, 4.0).eccentric_anomaly
        jitted = jax.jit(solve_kepler)(0.1, 0.05, 4.0).eccentric_anomaly
        assert float(jitted) == pytest.approx(float(eager), abs=1e-14)


class TestNearEarthInit:
    """Test SGP4 initialization for near-earth satellites."""

    def test_params_are_finite(self) -> None:
        params = near_earth_init(parse_tle([ISS_LINE1, ISS_LINE2]))
        for name, value in params._asdict().items():
            assert jnp.all(jnp.isfinite(value)), name

    def test_params_are_arrays(self) -> None:
        params = near_earth_init(parse_tle(LEO_TLE))
        assert params.xnodp.dtype == jnp.float64

    def test_recovered_mean_motion(self) -> None:
        elements = parse_tle(LEO_TLE)
        params = near_earth_init(elements)
        assert float(params.xnodp) == pytest.approx(elements.xnodp, rel=1e-14)


class TestNearEarthPropagation:
    """Test near-earth SGP4 propagation against reference python-sgp4.

    The legacy model differs from the modern reference in small details of
    its constants and periodics, so agreement is checked at the kilometre
    level.
    """

    @pytest.fixture()
    def iss_params(self):
        return near_earth_init(parse_tle([ISS_LINE1, ISS_LINE2]))

    @pytest.mark.parametrize("tsince", [0.0, 60.0, 360.0, -120.0])
    def test_iss_position(self, iss_params, tsince) -> None:
        state, _ = sgp4_propagate(iss_params, tsince, "n")
        e_ref, r_ref, v_ref = _get_reference(ISS_LINE1, ISS_LINE2, tsince)
        assert e_ref == 0
        assert jnp.allclose(state.position, jnp.array(r_ref), atol=2.0), (
            f"Position mismatch at {tsince} min: {state.position} vs {r_ref}"
        )
        assert jnp.allclose(state.velocity, jnp.array(v_ref), atol=2e-3)

    def test_iss_one_day(self, iss_params) -> None:
        state, _ = sgp4_propagate(iss_params, 1440.0, "n")
        _, r_ref, _ = _get_reference(ISS_LINE1, ISS_LINE2, 1440.0)
        assert jnp.allclose(state.position, jnp.array(r_ref), atol=10.0)

    def test_leo_radius(self) -> None:
        params = near_earth_init(parse_tle(LEO_TLE))
        state = near_earth_propagate(params, 100.0)
        radius = float(jnp.linalg.norm(state.position))
        assert 6378.0 + 650.0 < radius < 6378.0 + 1000.0

    def test_phase_range(self) -> None:
        params = near_earth_init(parse_tle(LEO_TLE))
        for tsince in (0.0, 17.0, 83.0, 400.0):
            phase = float(near_earth_propagate(params, tsince).phase)
            assert 0.0 <= phase < 2.0 * np.pi

    def test_repeatable(self) -> None:
        params = near_earth_init(parse_tle(LEO_TLE))
        first = near_earth_propagate(params, 250.0).position
        near_earth_propagate(params, 10.0)
        second = near_earth_propagate(params, 250.0).position
        assert jnp.array_equal(first, second)

    def test_jit_compatible(self) -> None:
        params = near_earth_init(parse_tle(LEO_TLE))
        eager, _ = sgp4_propagate(params, 90.0, "n")
        jitted, _ = jax.jit(sgp4_propagate, static_argnames=("method",))(params, 90.0, "n")
        assert jnp.allclose(eager.position, jitted.position, atol=1e-9)
        assert jnp.allclose(eager.velocity, jitted.velocity, atol=1e-12)

    def test_vmap_over_time(self) -> None:
        params = near_earth_init(parse_tle(LEO_TLE))
        times = jnp.linspace(0.0, 1440.0, 7)
        positions = jax.vmap(lambda t: near_earth_propagate(params, t).position)(times)
        assert positions.shape == (7, 3)
        for i, t in enumerate(times):
            single = near_earth_propagate(params, t).position
            assert jnp.allclose(positions[i], single, atol=1e-9)

    def test_unknown_method_raises(self) -> None:
        params = near_earth_init(parse_tle(LEO_TLE))
        with pytest.raises(ValueError, match="Unknown propagation method"):
            sgp4_propagate(params, 0.0, "x")


class TestDeepSpaceInit:
    """Test SDP4 initialization and resonance classification."""

    def test_geosynchronous_resonance(self) -> None:
        params = deep_space_init(parse_tle(GEOSYNC_TLE))
        assert int(params.irez) == SYNCHRONOUS_RESONANCE

    def test_half_day_resonance(self) -> None:
        params = deep_space_init(parse_tle(MOLNIYA_TLE))
        assert int(params.irez) == HALF_DAY_RESONANCE

    def test_non_resonant(self) -> None:
        params = deep_space_init(parse_tle(DEEP_SPACE_TLE))
        assert int(params.irez) == NO_RESONANCE

    def test_params_are_finite(self) -> None:
        for tle in (GEOSYNC_TLE, MOLNIYA_TLE, DEEP_SPACE_TLE):
            params = deep_space_init(parse_tle(tle))
            for name, value in params._asdict().items():
                assert jnp.all(jnp.isfinite(value)), f"{tle[0]}: {name}"

    def test_initial_resonance_state(self) -> None:
        params = deep_space_init(parse_tle(GEOSYNC_TLE))
        state = initial_resonance_state(params)
        assert float(state.atime) == 0.0
        assert float(state.xli) == pytest.approx(float(params.xlamo), abs=0.0)
        assert float(state.xni) == pytest.approx(float(params.xnq), abs=0.0)


class TestDeepSpacePropagation:
    """Test deep-space SDP4 propagation."""

    @pytest.mark.parametrize("tle", [GEOSYNC_TLE, MOLNIYA_TLE, DEEP_SPACE_TLE])
    @pytest.mark.parametrize("tsince", [0.0, 720.0, 1440.0])
    def test_close_to_reference(self, tle, tsince) -> None:
        params = deep_space_init(parse_tle(tle))
        state, _ = sgp4_propagate(params, tsince, "d")
        e_ref, r_ref, _ = _get_reference(tle[1], tle[2], tsince)
        assert e_ref == 0
        r_ref = jnp.array(r_ref)
        error = float(jnp.linalg.norm(state.position - r_ref))
        assert error < 0.02 * float(jnp.linalg.norm(r_ref))

    def test_geosynchronous_radius(self) -> None:
        params = deep_space_init(parse_tle(GEOSYNC_TLE))
        state, _ = sgp4_propagate(params, 3000.0, "d")
        assert float(jnp.linalg.norm(state.position)) == pytest.approx(42164.0, rel=0.02)

    def test_resonance_state_advances(self) -> None:
        params = deep_space_init(parse_tle(GEOSYNC_TLE))
        _, resonance = sgp4_propagate(params, 2000.0, "d")
        assert float(resonance.atime) == 1440.0

    def test_resume_matches_restart(self) -> None:
        params = deep_space_init(parse_tle(MOLNIYA_TLE))
        fresh, _ = sgp4_propagate(params, 5000.0, "d")

        _, resonance = sgp4_propagate(params, 2500.0, "d")
        resumed, _ = sgp4_propagate(params, 5000.0, "d", resonance)
        assert jnp.allclose(fresh.position, resumed.position, atol=1e-8)

    def test_earlier_time_restarts(self) -> None:
        params = deep_space_init(parse_tle(GEOSYNC_TLE))
        fresh, _ = sgp4_propagate(params, 800.0, "d")

        _, resonance = sgp4_propagate(params, 4000.0, "d")
        restarted, _ = sgp4_propagate(params, 800.0, "d", resonance)
        assert jnp.allclose(fresh.position, restarted.position, atol=1e-8)

    def test_opposite_side_of_epoch_restarts(self) -> None:
        params = deep_space_init(parse_tle(GEOSYNC_TLE))
        fresh, _ = sgp4_propagate(params, -1500.0, "d")

        _, resonance = sgp4_propagate(params, 3000.0, "d")
        restarted, resonance = sgp4_propagate(params, -1500.0, "d", resonance)
        assert jnp.allclose(fresh.position, restarted.position, atol=1e-8)
        assert float(resonance.atime) == -1440.0

    def test_integrate_resonance_short_interval(self) -> None:
        params = deep_space_init(parse_tle(GEOSYNC_TLE))
        state = initial_resonance_state(params)
        xn, _, new_state = integrate_resonance(params, 100.0, state)
        assert float(new_state.atime) == 0.0
        assert float(xn) == pytest.approx(float(params.xnq), rel=1e-3)

    def test_jit_compatible(self) -> None:
        params = deep_space_init(parse_tle(MOLNIYA_TLE))
        eager, _ = sgp4_propagate(params, 1000.0, "d")
        jitted, _ = jax.jit(sgp4_propagate, static_argnames=("method",))(params, 1000.0, "d")
        assert jnp.allclose(eager.position, jitted.position, atol=1e-8)
