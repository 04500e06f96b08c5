"""Tests for pass prediction, Doppler correction and footprints."""

import locale
import math
from datetime import UTC, datetime, timedelta

import pytest

from satjax.prediction import (
    FINE_STEP,
    MEDIUM_STEP,
    MIN_SEARCH_SPAN,
    PassPredictor,
    PolePassed,
    SatelliteNotVisibleError,
    SatPassTime,
    SatPos,
    downlink_frequency,
    footprint_diameter,
    pole_passed,
    range_circle,
    uplink_frequency,
)
from satjax.sgp4 import Satellite, create_orbital_elements, parse_tle
from satjax.station import GroundStation

from .conftest import LEO_TLE


def _utc(*args) -> datetime:
    return datetime(*args, tzinfo=UTC)


def _lon_diff(a: float, b: float) -> float:
    """Smallest separation of two longitudes [deg]."""
    return abs((a - b + 180.0) % 360.0 - 180.0)


@pytest.fixture
def predictor(ground_station) -> PassPredictor:
    return PassPredictor(parse_tle(LEO_TLE), ground_station)


class TestPassPredictorInit:
    def test_none_elements_raise(self, ground_station) -> None:
        with pytest.raises(ValueError, match="Orbital elements"):
            PassPredictor(None, ground_station)

    def test_none_station_raises(self) -> None:
        with pytest.raises(ValueError, match="Ground station"):
            PassPredictor(parse_tle(LEO_TLE), None)

    def test_never_visible_raises(self) -> None:
        elements = create_orbital_elements(
            catnum=99999, year=9, refepoch=100.0, incl=0.0, raan=0.0, eccn=0.0,
            argper=0.0, meanan=0.0, meanmo=15.0, bstar=0.0,
        )
        with pytest.raises(SatelliteNotVisibleError, match="never appear"):
            PassPredictor(elements, GroundStation(80.0, 0.0, 0.0))

    def test_not_visible_is_value_error(self) -> None:
        assert issubclass(SatelliteNotVisibleError, ValueError)

    def test_properties(self, predictor, ground_station) -> None:
        assert predictor.station is ground_station
        assert predictor.satellite.catnum == 28375
        assert predictor.iteration_count == 0


class TestNextSatPass:
    """Consecutive AO-51 passes from the start of 5 January 2009."""

    def test_first_pass(self, predictor) -> None:
        sat_pass = predictor.next_sat_pass(_utc(2009, 1, 5))
        assert sat_pass.start_time == _utc(2009, 1, 5, 4, 28, 10)
        assert sat_pass.end_time == _utc(2009, 1, 5, 4, 32, 15)
        assert sat_pass.tca == _utc(2009, 1, 5, 4, 30, 10)
        assert sat_pass.pole_passed is PolePassed.NONE
        assert sat_pass.aos_azimuth == 52
        assert sat_pass.los_azimuth == 84
        assert f"{sat_pass.max_elevation:3.1f}" == "0.9"

    def test_doppler_at_first_pass(self, predictor) -> None:
        sat_pass = predictor.next_sat_pass(_utc(2009, 1, 5))
        assert predictor.get_downlink_freq(436800000, sat_pass.start_time) == 436802379
        assert predictor.get_uplink_freq(145800000, sat_pass.end_time) == 145800719

    def test_following_passes(self, predictor) -> None:
        sat_pass = predictor.next_sat_pass(_utc(2009, 1, 5))

        sat_pass = predictor.next_sat_pass(sat_pass.start_time)
        assert sat_pass.start_time == _utc(2009, 1, 5, 6, 4, 0)
        assert sat_pass.end_time == _utc(2009, 1, 5, 6, 18, 0)
        assert sat_pass.pole_passed is PolePassed.NONE
        assert sat_pass.aos_azimuth == 22
        assert sat_pass.los_azimuth == 158
        assert sat_pass.max_elevation == pytest.approx(24.42, abs=0.02)

        sat_pass = predictor.next_sat_pass(sat_pass.start_time)
        assert sat_pass.start_time == _utc(2009, 1, 5, 7, 42, 45)
        assert sat_pass.end_time == _utc(2009, 1, 5, 7, 57, 50)
        assert sat_pass.pole_passed is PolePassed.NORTH
        assert sat_pass.aos_azimuth == 11
        assert sat_pass.los_azimuth == 207
        assert f"{sat_pass.max_elevation:5.2f}" == "62.19"

        sat_pass = predictor.next_sat_pass(sat_pass.start_time)
        assert sat_pass.start_time == _utc(2009, 1, 5, 9, 22, 5)
        assert sat_pass.end_time == _utc(2009, 1, 5, 9, 34, 20)
        assert sat_pass.pole_passed is PolePassed.NORTH
        assert sat_pass.aos_azimuth == 4
        assert sat_pass.los_azimuth == 256
        assert sat_pass.max_elevation == pytest.approx(14.3, abs=0.02)

        sat_pass = predictor.next_sat_pass(sat_pass.start_time)
        assert sat_pass.start_time == _utc(2009, 1, 5, 11, 2, 5)
        assert sat_pass.end_time == _utc(2009, 1, 5, 11, 7, 35)
        assert sat_pass.pole_passed is PolePassed.NONE
        assert sat_pass.aos_azimuth == 355
        assert sat_pass.los_azimuth == 312
        assert sat_pass.max_elevation == pytest.approx(1.8, abs=0.05)

    def test_wind_back_finds_pass_in_progress(self, predictor) -> None:
        sat_pass = predictor.next_sat_pass(_utc(2009, 1, 5, 4, 30), wind_back=True)
        assert sat_pass.start_time == _utc(2009, 1, 5, 4, 28, 10)
        assert sat_pass.end_time == _utc(2009, 1, 5, 4, 32, 15)
        assert sat_pass.pole_passed is PolePassed.NONE
        assert sat_pass.aos_azimuth == 52
        assert sat_pass.los_azimuth == 84
        assert sat_pass.max_elevation == pytest.approx(0.9, abs=0.05)
        assert predictor.get_downlink_freq(436800000, sat_pass.start_time) == 436802379
        assert predictor.get_uplink_freq(145800000, sat_pass.end_time) == 145800719

    def test_pass_in_progress_is_skipped(self, predictor) -> None:
        sat_pass = predictor.next_sat_pass(_utc(2009, 1, 5, 4, 30))
        assert sat_pass.start_time > _utc(2009, 1, 5, 4, 32, 15)

    def test_to_string(self, predictor) -> None:
        sat_pass = predictor.next_sat_pass(_utc(2009, 1, 5, 4, 30), wind_back=True)
        assert str(sat_pass) == (
            "Date: January 5, 2009\n"
            "Start Time: 4:28 AM\n"
            "Duration:  4.1 min.\n"
            "AOS Azimuth: 52 deg.\n"
            "Max Elevation:  0.9 deg.\n"
            "LOS Azimuth: 84 deg."
        )

    def test_naive_start_is_utc(self, predictor) -> None:
        sat_pass = predictor.next_sat_pass(datetime(2009, 1, 5))
        assert sat_pass.start_time == _utc(2009, 1, 5, 4, 28, 10)


class TestPolePassed:
    def test_north_and_south_passes(self, predictor) -> None:
        """Walk forward from 07:00 until both a north and a south pass are found."""
        when = _utc(2009, 1, 5, 7)
        north_found = False
        south_found = False

        minute = 0
        while minute < 60 * 24 * 7:
            start = when
            if north_found and south_found:
                break
            sat_pass = predictor.next_sat_pass(when)
            elapsed = int((sat_pass.end_time - start).total_seconds() // 60)
            if not north_found and sat_pass.pole_passed is PolePassed.NORTH:
                assert sat_pass.start_time == _utc(2009, 1, 5, 7, 42, 45)
                north_found = True
                minute += elapsed
            elif not south_found and sat_pass.pole_passed is PolePassed.SOUTH:
                assert sat_pass.start_time == _utc(2009, 1, 6, 7, 3, 20)
                south_found = True
                minute += elapsed

            when += timedelta(minutes=minute)
            minute += 1

        assert north_found
        assert south_found

    @staticmethod
    def _pos(azimuth_deg: float) -> SatPos:
        return SatPos(azimuth=math.radians(azimuth_deg))

    def test_north_clockwise(self) -> None:
        assert pole_passed(self._pos(355.0), self._pos(5.0)) is PolePassed.NORTH

    def test_north_anticlockwise(self) -> None:
        assert pole_passed(self._pos(5.0), self._pos(355.0)) is PolePassed.NORTH

    def test_south_clockwise(self) -> None:
        assert pole_passed(self._pos(175.0), self._pos(185.0)) is PolePassed.SOUTH

    def test_south_anticlockwise(self) -> None:
        assert pole_passed(self._pos(185.0), self._pos(175.0)) is PolePassed.SOUTH

    def test_none(self) -> None:
        assert pole_passed(self._pos(20.0), self._pos(40.0)) is PolePassed.NONE

    def test_str(self) -> None:
        assert str(PolePassed.NORTH) == "north"
        assert PolePassed.SOUTH.as_str() == "south"
        assert repr(PolePassed.NONE) == "PolePassed.NONE"


class TestGetPasses:
    def test_pass_list(self, predictor) -> None:
        passes = predictor.get_passes(_utc(2009, 1, 5, 7), 24)
        assert len(passes) == 10
        starts = [p.start_time for p in passes]
        assert starts == sorted(starts)

    def test_pass_list_with_wind_back(self, predictor) -> None:
        passes = predictor.get_passes(_utc(2009, 1, 5, 7), 24, wind_back=True)
        assert len(passes) == 10
        assert predictor.iteration_count == 1039

    def test_last_pass_starts_after_window(self, predictor) -> None:
        start = _utc(2009, 1, 5, 7)
        passes = predictor.get_passes(start, 24)
        assert passes[-1].start_time >= start + timedelta(hours=24)
        assert all(p.start_time < start + timedelta(hours=24) for p in passes[:-1])

    def test_iteration_count_resets(self, predictor) -> None:
        predictor.get_passes(_utc(2009, 1, 5, 7), 6)
        first = predictor.iteration_count
        predictor.get_passes(_utc(2009, 1, 5, 7), 6)
        assert predictor.iteration_count == first


class TestGetPositions:
    def test_track_length(self, predictor) -> None:
        positions = predictor.get_positions(_utc(2009, 1, 5, 7), 30, 50, 50)
        assert len(positions) == 200

    def test_track_times(self, predictor) -> None:
        positions = predictor.get_positions(_utc(2009, 1, 5, 7), 60, 2, 2)
        assert [p.time for p in positions] == [
            _utc(2009, 1, 5, 6, 58),
            _utc(2009, 1, 5, 6, 59),
            _utc(2009, 1, 5, 7, 0),
            _utc(2009, 1, 5, 7, 1),
        ]


class TestPassInvariants:
    """Every AO-51 pass over 24 hours, resampled on the 5 s search grid."""

    @pytest.fixture
    def passes(self, predictor) -> list[SatPassTime]:
        return predictor.get_passes(_utc(2009, 1, 5, 7), 24)

    def _samples(self, predictor, sat_pass) -> list[SatPos]:
        minutes = math.ceil(sat_pass.duration_minutes)
        track = predictor.get_positions(sat_pass.start_time, FINE_STEP, 0, minutes)
        return [p for p in track if p.time < sat_pass.end_time]

    def test_elevation_non_negative_between_aos_and_los(self, predictor, passes) -> None:
        for sat_pass in passes:
            samples = self._samples(predictor, sat_pass)
            assert samples, sat_pass
            assert all(p.elevation >= 0.0 for p in samples), sat_pass

    def test_los_sample_is_not_above_horizon(self, predictor, passes) -> None:
        for sat_pass in passes:
            assert predictor.get_sat_pos(sat_pass.end_time).elevation <= 0.0

    def test_max_elevation_is_largest_sample(self, predictor, passes) -> None:
        for sat_pass in passes:
            samples = self._samples(predictor, sat_pass)
            at_tca = math.degrees(predictor.get_sat_pos(sat_pass.tca).elevation)
            coarse = [
                math.degrees(p.elevation)
                for p in samples
                if (p.time - sat_pass.start_time).total_seconds() % MEDIUM_STEP == 0
            ]
            fine = [math.degrees(p.elevation) for p in samples]

            assert sat_pass.max_elevation == pytest.approx(at_tca, abs=1e-9)
            assert max(coarse) <= sat_pass.max_elevation + 1e-9
            assert sat_pass.max_elevation <= max(fine) + 1e-9


class TestSearchBounds:
    """A near-stationary object never rises or sets over a fixed station."""

    START = _utc(2009, 12, 22)

    @pytest.fixture
    def elements(self):
        return create_orbital_elements(
            catnum=90001, year=9, refepoch=356.0, incl=0.05, raan=0.0, eccn=0.0002,
            argper=0.0, meanan=0.0, meanmo=1.00273791, bstar=0.0, name="STATIONARY",
        )

    def _station(self, elements, offset_deg: float) -> GroundStation:
        point = Satellite(elements).ground_track(self.START)
        longitude = (math.degrees(float(point.longitude)) + offset_deg) % 360.0
        return GroundStation(10.0, longitude, 0.0)

    def test_search_span(self, elements) -> None:
        predictor = PassPredictor(elements, self._station(elements, 0.0))
        assert predictor.search_span == timedelta(minutes=3 * 1440.0 / elements.meanmo)
        leo = PassPredictor(parse_tle(LEO_TLE), self._station(elements, 0.0))
        assert leo.search_span == MIN_SEARCH_SPAN

    def test_always_up_stops(self, elements) -> None:
        predictor = PassPredictor(elements, self._station(elements, 0.0))
        assert predictor.get_sat_pos(self.START).elevation > 0.0
        with pytest.raises(SatelliteNotVisibleError, match="No complete pass of STATIONARY"):
            predictor.next_sat_pass(self.START)
        assert predictor.iteration_count <= predictor.search_span / timedelta(seconds=60) + 2

    def test_always_down_stops(self, elements) -> None:
        predictor = PassPredictor(elements, self._station(elements, 180.0))
        assert predictor.get_sat_pos(self.START).elevation < 0.0
        with pytest.raises(SatelliteNotVisibleError, match="No complete pass"):
            predictor.next_sat_pass(self.START)

    def test_get_passes_propagates(self, elements) -> None:
        predictor = PassPredictor(elements, self._station(elements, 180.0))
        with pytest.raises(SatelliteNotVisibleError):
            predictor.get_passes(self.START, 24)


class TestSatPassTime:
    def test_default_tca_is_midpoint(self) -> None:
        start = _utc(2009, 1, 5, 4, 28, 10)
        end = _utc(2009, 1, 5, 4, 32, 10)
        sat_pass = SatPassTime(start, end, PolePassed.NONE, 52, 84, 0.9)
        assert sat_pass.tca == _utc(2009, 1, 5, 4, 30, 10)

    def test_duration(self) -> None:
        start = _utc(2009, 1, 5, 4, 28, 10)
        sat_pass = SatPassTime(start, start + timedelta(minutes=12), PolePassed.NORTH, 4, 256, 14.3)
        assert sat_pass.duration_minutes == pytest.approx(12.0)

    def test_afternoon_start_time(self) -> None:
        start = _utc(2009, 1, 5, 13, 5, 0)
        sat_pass = SatPassTime(start, start + timedelta(minutes=10), PolePassed.NONE, 1, 2, 30.0)
        assert "Start Time: 1:05 PM" in str(sat_pass)

    def test_noon_and_midnight(self) -> None:
        noon = _utc(2009, 12, 31, 12, 0, 0)
        midnight = _utc(2009, 3, 1, 0, 7, 0)
        assert "Date: December 31, 2009\nStart Time: 12:00 PM\n" in str(
            SatPassTime(noon, noon + timedelta(minutes=5), PolePassed.NONE, 1, 2, 3.0)
        )
        assert "Date: March 1, 2009\nStart Time: 12:07 AM\n" in str(
            SatPassTime(midnight, midnight + timedelta(minutes=5), PolePassed.NONE, 1, 2, 3.0)
        )

    def test_summary_ignores_time_locale(self) -> None:
        start = _utc(2009, 1, 5, 16, 28, 10)
        sat_pass = SatPassTime(start, start + timedelta(minutes=4), PolePassed.NONE, 52, 84, 0.9)
        expected = str(sat_pass)
        previous = locale.setlocale(locale.LC_TIME)
        try:
            locale.setlocale(locale.LC_TIME, "de_DE.UTF-8")
        except locale.Error:
            pytest.skip("de_DE locale not available")
        try:
            assert str(sat_pass) == expected
            assert "January" in expected and "4:28 PM" in expected
        finally:
            locale.setlocale(locale.LC_TIME, previous)


class TestDoppler:
    def test_no_motion(self) -> None:
        assert downlink_frequency(436800000, 0.0) == 436800000
        assert uplink_frequency(145800000, 0.0) == 145800000

    def test_approaching(self) -> None:
        assert downlink_frequency(436800000, -5.0) > 436800000
        assert uplink_frequency(145800000, -5.0) < 145800000

    def test_receding(self) -> None:
        assert downlink_frequency(436800000, 5.0) < 436800000
        assert uplink_frequency(145800000, 5.0) > 145800000


class TestRangeCircle:
    PRECISION = 0.5

    def _check(self, point, lat, lon) -> None:
        assert point[0] == pytest.approx(lat, abs=self.PRECISION)
        assert _lon_diff(point[1], lon) <= self.PRECISION

    def test_equator(self) -> None:
        circle = range_circle(0.0, 0.0, 1000.0)
        assert len(circle) == 360
        self._check(circle[0], 30, 0)
        self._check(circle[89], 1, 330)
        self._check(circle[179], -30, 359)
        self._check(circle[269], -1, 30)

    def test_ten_degrees(self) -> None:
        circle = range_circle(math.radians(10.0), math.radians(10.0), 1000.0)
        self._check(circle[0], 40, 10)
        self._check(circle[89], 9, 339)
        self._check(circle[179], -20, 9)
        self._check(circle[269], 8, 41)

    def test_leo_observation(self, ground_station) -> None:
        predictor = PassPredictor(parse_tle(LEO_TLE), ground_station)
        circle = predictor.get_sat_pos(_utc(2009, 4, 17, 6, 57, 32)).range_circle()
        assert f"{circle[0][0]:6.1f} {circle[0][1]:6.1f}" == "  59.9  355.6"
        assert f"{circle[89][0]:6.1f} {circle[89][1]:6.1f}" == "  28.8  323.7"
        assert f"{circle[179][0]:6.1f} {circle[179][1]:6.1f}" == "   4.8  355.2"
        assert f"{circle[269][0]:6.1f} {circle[269][1]:6.1f}" == "  27.9   27.2"

    def test_longitudes_in_range(self) -> None:
        for lat, lon in range_circle(math.radians(80.0), math.radians(200.0), 2000.0):
            assert -90.0 <= lat <= 90.0
            assert 0.0 <= lon <= 360.0

    def test_footprint_grows_with_altitude(self) -> None:
        assert footprint_diameter(400.0) < footprint_diameter(1000.0) < footprint_diameter(36000.0)

    def test_below_surface_altitude(self) -> None:
        assert footprint_diameter(0.0) == 0
        assert footprint_diameter(-25.0) == 0
        assert len(range_circle(math.radians(45.0), 1.0, -25.0)) == 360
