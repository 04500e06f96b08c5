"""Tests for the GroundStation description."""

import dataclasses

import pytest

from satjax.station import HORIZON_SECTORS, GroundStation


class TestGroundStation:
    def test_fields(self):
        station = GroundStation(10.0, 11.0, 12.0, "boo")
        assert station.latitude == pytest.approx(10.0)
        assert station.longitude == pytest.approx(11.0)
        assert station.height == pytest.approx(12.0)
        assert station.name == "boo"

    def test_default_horizon_is_flat(self):
        station = GroundStation(52.4670, -2.022, 200.0)
        assert station.horizon_elevations == (0,) * HORIZON_SECTORS

    def test_with_horizon(self):
        mask = [0] * HORIZON_SECTORS
        mask[0] = 12
        mask[1] = 14
        mask[35] = 16
        station = GroundStation.with_horizon(10.0, 11.0, 12.0, mask, name="boo")
        assert station.horizon_elevation(0) == 12
        assert station.horizon_elevation(1) == 14
        assert station.horizon_elevation(35) == 16
        assert station.name == "boo"

    def test_horizon_stored_as_int_tuple(self):
        station = GroundStation(0.0, 0.0, 0.0, horizon_elevations=[5.0] * HORIZON_SECTORS)
        assert station.horizon_elevations == (5,) * HORIZON_SECTORS

    def test_wrong_horizon_length_raises(self):
        with pytest.raises(ValueError, match="Expected 36 horizon elevations, got 2"):
            GroundStation.with_horizon(10.0, 11.0, 12.0, [1, 2])

    def test_frozen(self):
        station = GroundStation(10.0, 11.0, 12.0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            station.latitude = 0.0

    def test_str_uses_name(self):
        assert str(GroundStation(10.0, 11.0, 12.0, "boo")) == "boo"

    def test_str_without_name(self):
        assert str(GroundStation(52.467, -2.022, 200.0)) == "(52.4670, -2.0220, 200 m)"
