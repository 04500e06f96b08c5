"""
Pass prediction for a satellite over a ground station.

The search steps through time at three resolutions: 60 s to find the next
rise, 30 s to follow the pass to its set, and 5 s to refine both horizon
crossings. Maximum elevation and the time of closest approach are tracked
at every sample, and consecutive azimuths are compared to detect the
antenna sweeping through north or south.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from satjax.constants import TWO_PI
from satjax.prediction._doppler import downlink_frequency, uplink_frequency
from satjax.prediction._observation import observe
from satjax.prediction._types import PolePassed, SatPassTime, SatPos
from satjax.sgp4 import OrbitalElements, Satellite
from satjax.station import GroundStation
from satjax.time import as_utc

logger = logging.getLogger(__name__)

# Search step sizes [s]
COARSE_STEP = 60
MEDIUM_STEP = 30
FINE_STEP = 5

# A single pass search gives up after the longer of these spans
MIN_SEARCH_SPAN = timedelta(days=2)
SEARCH_ORBITS = 3


class SatelliteNotVisibleError(ValueError):
    """The satellite cannot be seen passing over the ground station.

    Raised when the satellite can never rise above the horizon, and when a
    pass search finds no complete rise and set within its search span.
    """


def pole_passed(previous: SatPos, current: SatPos) -> PolePassed:
    """Pole crossed by the azimuth between two consecutive samples.

    A northward crossing wraps between above 350 and below 10 degrees; a
    southward one crosses 180 degrees.
    """
    az1 = previous.azimuth / TWO_PI * 360.0
    az2 = current.azimuth / TWO_PI * 360.0

    if az1 > az2:
        if az1 > 350.0 and az2 < 10.0:
            return PolePassed.NORTH
        if az1 > 180.0 and az2 < 180.0:
            return PolePassed.SOUTH
    else:
        if az1 < 10.0 and az2 > 350.0:
            return PolePassed.NORTH
        if az1 < 180.0 and az2 > 180.0:
            return PolePassed.SOUTH
    return PolePassed.NONE


def _azimuth_degrees(pos: SatPos) -> int:
    return int(pos.azimuth / TWO_PI * 360.0)


class PassPredictor:
    """Predicts passes and Doppler shifts of one satellite over one station.

    The predictor owns its :class:`~satjax.sgp4.Satellite` and is not safe
    to share between threads.

    Examples:
        ```python
        from datetime import datetime, UTC
        from satjax.prediction import PassPredictor
        from satjax.sgp4 import parse_tle
        from satjax.station import GroundStation

        predictor = PassPredictor(parse_tle(lines), GroundStation(52.4670, -2.022, 200.0))
        passes = predictor.get_passes(datetime(2009, 1, 5, tzinfo=UTC), 24)
        ```

    Args:
        elements: Orbital elements of the satellite.
        station: Observing ground station.

    Raises:
        ValueError: If ``elements`` or ``station`` is ``None``.
        SatelliteNotVisibleError: If the satellite never rises above the
            station's horizon.
    """

    def __init__(self, elements: OrbitalElements, station: GroundStation) -> None:
        if elements is None:
            raise ValueError("Orbital elements have not been set")
        if station is None:
            raise ValueError("Ground station has not been set")

        self._elements = elements
        self._station = station
        self._satellite = Satellite(elements)
        self._iteration_count = 0
        self._search_span = max(
            MIN_SEARCH_SPAN, timedelta(minutes=SEARCH_ORBITS * 24.0 * 60.0 / elements.meanmo)
        )

        if not self._satellite.will_be_seen(station):
            raise SatelliteNotVisibleError(
                f"Satellite {elements.name or elements.catnum} will never appear above the horizon"
            )

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def satellite(self) -> Satellite:
        return self._satellite

    @property
    def station(self) -> GroundStation:
        return self._station

    @property
    def search_span(self) -> timedelta:
        """Longest stretch of time a single :meth:`next_sat_pass` call scans."""
        return self._search_span

    @property
    def iteration_count(self) -> int:
        """Positions evaluated since the last :meth:`get_passes` call."""
        return self._iteration_count

    # ------------------------------------------------------------------
    # Single observations
    # ------------------------------------------------------------------

    def get_sat_pos(self, when: datetime) -> SatPos:
        """Observe the satellite from the station at ``when``."""
        self._iteration_count += 1
        return observe(self._satellite, self._station, when)

    def get_downlink_freq(self, frequency: int, when: datetime) -> int:
        """Downlink frequency corrected for Doppler at ``when`` [Hz]."""
        return downlink_frequency(frequency, self.get_sat_pos(when).range_rate)

    def get_uplink_freq(self, frequency: int, when: datetime) -> int:
        """Uplink frequency corrected for Doppler at ``when`` [Hz]."""
        return uplink_frequency(frequency, self.get_sat_pos(when).range_rate)

    def get_positions(
        self,
        reference: datetime,
        increment_seconds: int,
        minutes_before: int,
        minutes_after: int,
    ) -> list[SatPos]:
        """Observations on a regular grid around a reference time.

        Args:
            reference: Centre of the track.
            increment_seconds: Step between observations [s].
            minutes_before: Start of the track before ``reference`` [min].
            minutes_after: End of the track after ``reference``, exclusive [min].

        Returns:
            Observations from ``reference - minutes_before`` up to, but not
            including, ``reference + minutes_after``.
        """
        reference = as_utc(reference)
        when = reference - timedelta(minutes=minutes_before)
        end = reference + timedelta(minutes=minutes_after)
        step = timedelta(seconds=increment_seconds)

        positions = []
        while when < end:
            positions.append(self.get_sat_pos(when))
            when += step
        return positions

    # ------------------------------------------------------------------
    # Pass search
    # ------------------------------------------------------------------

    def _three_quarter_orbit(self) -> timedelta:
        return timedelta(minutes=int(24.0 * 60.0 / self._elements.meanmo * 0.75))

    def next_sat_pass(self, start: datetime, wind_back: bool = False) -> SatPassTime:
        """Find the next pass at or after ``start``.

        If the satellite is already up at ``start`` the current pass is
        skipped.

        Args:
            start: Time to start searching from.
            wind_back: Start the search a quarter orbit before ``start`` so
                that a pass in progress is reported from its rise.

        Returns:
            The next :class:`SatPassTime`.

        Raises:
            SatelliteNotVisibleError: If no rise and set are found within
                :attr:`search_span` of the (wound back) start, as for an
                object that stays above or below the horizon.
        """
        when = as_utc(start)
        max_elevation = 0.0
        tca = None
        pole = PolePassed.NONE

        if wind_back:
            when += timedelta(minutes=int(-24.0 * 60.0 / self._elements.meanmo / 4.0))

        deadline = when + self._search_span

        def advance(seconds: int) -> SatPos:
            nonlocal when
            when += timedelta(seconds=seconds)
            if when > deadline:
                raise SatelliteNotVisibleError(
                    f"No complete pass of {self._satellite.name or self._satellite.catnum} "
                    f"found before {deadline.isoformat()}"
                )
            return self.get_sat_pos(when)

        sat_pos = self.get_sat_pos(when)

        # Step out of a pass already in progress, then skip most of an orbit
        if sat_pos.elevation > 0.0:
            while sat_pos.elevation > 0.0:
                sat_pos = advance(COARSE_STEP)
            when += self._three_quarter_orbit()

        def step(seconds: int) -> SatPos:
            nonlocal max_elevation, tca
            pos = advance(seconds)
            if pos.elevation > max_elevation:
                max_elevation = pos.elevation
                tca = when
            return pos

        # Rise
        sat_pos = step(COARSE_STEP)
        while sat_pos.elevation < 0.0:
            sat_pos = step(COARSE_STEP)

        when -= timedelta(seconds=COARSE_STEP)
        sat_pos = step(FINE_STEP)
        while sat_pos.elevation < 0.0:
            sat_pos = step(FINE_STEP)

        start_time = sat_pos.time
        aos_azimuth = _azimuth_degrees(sat_pos)

        # Set
        prev_pos = sat_pos
        while True:
            sat_pos = step(MEDIUM_STEP)
            current = pole_passed(prev_pos, sat_pos)
            if current is not PolePassed.NONE:
                pole = current
                logger.debug("Pole passed: %s at %s", pole, when)
            prev_pos = sat_pos
            if sat_pos.elevation <= 0.0:
                break

        when -= timedelta(seconds=MEDIUM_STEP)
        sat_pos = step(FINE_STEP)
        while sat_pos.elevation > 0.0:
            sat_pos = step(FINE_STEP)

        end_time = sat_pos.time
        los_azimuth = _azimuth_degrees(sat_pos)
        max_elevation_deg = max_elevation / TWO_PI * 360.0

        logger.debug(
            "Pass of %s: AOS %s, LOS %s, max elevation %.1f deg",
            self._satellite.name,
            start_time,
            end_time,
            max_elevation_deg,
        )

        return SatPassTime(
            start_time=start_time,
            end_time=end_time,
            pole_passed=pole,
            aos_azimuth=aos_azimuth,
            los_azimuth=los_azimuth,
            max_elevation=max_elevation_deg,
            tca=tca,
        )

    def get_passes(self, start: datetime, hours_ahead: int, wind_back: bool = False) -> list[SatPassTime]:
        """Find consecutive passes over a period.

        Passes are collected until one starts at or after
        ``start + hours_ahead``; that last pass is included. Each search
        resumes three quarters of an orbit after the previous LOS.

        Args:
            start: Time to start searching from.
            hours_ahead: Length of the search period [h].
            wind_back: Wind back the first search only, see
                :meth:`next_sat_pass`.

        Returns:
            Passes in time order.
        """
        self._iteration_count = 0

        track_start = as_utc(start)
        track_end = track_start + timedelta(hours=hours_ahead)

        passes = []
        while True:
            sat_pass = self.next_sat_pass(track_start, wind_back and not passes)
            passes.append(sat_pass)
            track_start = sat_pass.end_time + self._three_quarter_orbit()
            if sat_pass.start_time >= track_end:
                break

        return passes
