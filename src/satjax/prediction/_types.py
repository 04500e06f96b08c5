"""
Data types produced by observation and pass prediction.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from satjax.prediction._footprint import range_circle

_DEGREES_PER_RAD = 360.0 / (2.0 * math.pi)

# English month names, independent of LC_TIME
_MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


class PolePassed(Enum):
    """Pole the antenna azimuth swept through during a pass."""

    NONE = "none"
    NORTH = "north"
    SOUTH = "south"

    def as_str(self) -> str:
        """Return the lowercase tag for this pole."""
        return self.value

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"PolePassed.{self.name}"


@dataclass(frozen=True)
class SatPos:
    """A single observation of a satellite from a ground station.

    Attributes:
        azimuth: Azimuth clockwise from north, in ``[0, 2pi)`` [rad].
        elevation: Elevation above the horizon [rad].
        range: Distance from the station [km].
        range_rate: Rate of change of the range [km/s].
        latitude: Sub-satellite geodetic latitude [rad].
        longitude: Sub-satellite east longitude [rad].
        altitude: Height above the ellipsoid [km].
        theta: Right ascension of the satellite position [rad].
        phase: Orbital phase [rad].
        eclipsed: ``True`` when the satellite is in the Earth's shadow.
        eclipse_depth: Depth of the Sun behind the Earth's limb [rad].
        above_horizon: ``True`` when the elevation clears the station's
            horizon mask.
        time: Instant of the observation (UTC).
    """

    azimuth: float = 0.0
    elevation: float = 0.0
    range: float = 0.0
    range_rate: float = 0.0
    latitude: float = 0.0
    longitude: float = 0.0
    altitude: float = 0.0
    theta: float = 0.0
    phase: float = 0.0
    eclipsed: bool = False
    eclipse_depth: float = 0.0
    above_horizon: bool = False
    time: datetime | None = None

    def range_circle(self) -> list[tuple[float, float]]:
        """Footprint of the satellite as 360 ``(lat, lon)`` points [deg]."""
        return range_circle(self.latitude, self.longitude, self.altitude)

    def short_str(self) -> str:
        """Compact summary of elevation, azimuth, position and range."""
        return (
            f"Elevation: {self.elevation * _DEGREES_PER_RAD:.0f} deg.\n"
            f"Azimuth: {self.azimuth * _DEGREES_PER_RAD:.0f} deg.\n"
            f"Latitude: {self.latitude * _DEGREES_PER_RAD:.2f} deg.\n"
            f"Longitude: {self.longitude * _DEGREES_PER_RAD:.2f} deg.\n"
            f"Range: {self.range:.0f} Km"
        )

    def __str__(self) -> str:
        return (
            f"Azimuth:    {self.azimuth * _DEGREES_PER_RAD} deg.\n"
            f"Elevation:  {self.elevation * _DEGREES_PER_RAD} deg.\n"
            f"Latitude:   {self.latitude * _DEGREES_PER_RAD} deg.\n"
            f"Longitude:  {self.longitude * _DEGREES_PER_RAD} deg.\n"
            f"Date:       {self.time}\n"
            f"Range:        {self.range} km.\n"
            f"Range rate:   {self.range_rate} km/s.\n"
            f"Phase:        {self.phase} rad\n"
            f"Altitude:     {self.altitude} km\n"
            f"Theta:        {self.theta} rad\n"
            f"Eclipsed:     {self.eclipsed}\n"
            f"Eclipse depth:{self.eclipse_depth} rad\n"
        )


@dataclass(frozen=True)
class SatPassTime:
    """A single pass of a satellite over a ground station.

    Attributes:
        start_time: Acquisition of signal (UTC).
        end_time: Loss of signal (UTC).
        pole_passed: Pole crossed by the azimuth during the pass.
        aos_azimuth: Azimuth at AOS, truncated to whole degrees.
        los_azimuth: Azimuth at LOS, truncated to whole degrees.
        max_elevation: Highest sampled elevation [deg].
        tca: Time of closest approach. Defaults to the midpoint of the pass.

    Examples:
        ```python
        from datetime import datetime, UTC
        from satjax.prediction import PolePassed, SatPassTime

        start = datetime(2009, 1, 5, 4, 28, 10, tzinfo=UTC)
        end = datetime(2009, 1, 5, 4, 32, 15, tzinfo=UTC)
        print(SatPassTime(start, end, PolePassed.NONE, 52, 84, 0.9))
        ```
    """

    start_time: datetime
    end_time: datetime
    pole_passed: PolePassed
    aos_azimuth: int
    los_azimuth: int
    max_elevation: float
    tca: datetime | None = field(default=None)

    def __post_init__(self):
        if self.tca is None:
            object.__setattr__(
                self, "tca", self.start_time + (self.end_time - self.start_time) / 2
            )

    @property
    def duration_minutes(self) -> float:
        return (self.end_time - self.start_time).total_seconds() / 60.0

    def __str__(self) -> str:
        start = self.start_time
        meridiem = "AM" if start.hour < 12 else "PM"
        return (
            f"Date: {_MONTHS[start.month - 1]} {start.day}, {start.year}\n"
            f"Start Time: {start.hour % 12 or 12}:{start.minute:02d} {meridiem}\n"
            f"Duration: {self.duration_minutes:4.1f} min.\n"
            f"AOS Azimuth: {self.aos_azimuth} deg.\n"
            f"Max Elevation: {self.max_elevation:4.1f} deg.\n"
            f"LOS Azimuth: {self.los_azimuth} deg."
        )
