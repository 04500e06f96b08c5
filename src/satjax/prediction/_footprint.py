"""
Footprint (range circle) of a satellite on the Earth's surface.

The circle is the locus of points from which the satellite sits on the
horizon, traced at one-degree azimuth steps around the sub-satellite point.
"""

from __future__ import annotations

import math

from satjax.constants import EARTH_RADIUS_KM

# Mean radius used for the footprint arc [km]
_R0 = 6378.16

# Earth diameter used to scale the horizon angle [km]
_EARTH_DIAMETER = 12756.33

_TWO_PI = 2.0 * math.pi


def footprint_diameter(altitude: float) -> int:
    """Ground diameter of the visibility circle, truncated to whole km."""
    cos_half_angle = min(1.0, max(-1.0, EARTH_RADIUS_KM / (EARTH_RADIUS_KM + altitude)))
    return int(_EARTH_DIAMETER * math.acos(cos_half_angle))


def range_circle(latitude: float, longitude: float, altitude: float) -> list[tuple[float, float]]:
    """Compute the footprint of a satellite.

    Points where the arc crosses a pole take the opposite meridian.
    Longitudes are wrapped into ``[0, 360]`` degrees.

    Args:
        latitude: Sub-satellite latitude [rad].
        longitude: Sub-satellite east longitude [rad].
        altitude: Height above the ellipsoid [km].

    Returns:
        360 ``(latitude, longitude)`` pairs in degrees, one per degree of
        azimuth starting at north.

    Examples:
        ```python
        from satjax.prediction import range_circle

        circle = range_circle(0.0, 0.0, 1000.0)
        circle[0]  # (~30.0, 0.0)
        ```
    """
    beta = 0.5 * footprint_diameter(altitude) / _R0
    sin_lat = math.sin(latitude)
    cos_lat = math.cos(latitude)
    over_pole = beta > (math.pi / 2.0) - latitude

    points = []
    for azi in range(360):
        azimuth = azi / 360.0 * _TWO_PI
        rangelat = math.asin(sin_lat * math.cos(beta) + math.cos(azimuth) * math.sin(beta) * cos_lat)
        num = math.cos(beta) - sin_lat * math.sin(rangelat)
        den = cos_lat * math.cos(rangelat)

        if azi in (0, 180) and over_pole:
            rangelong = longitude + math.pi
        elif abs(num / den) > 1.0:
            rangelong = longitude
        elif azi <= 180:
            rangelong = longitude - math.acos(num / den)
        else:
            rangelong = longitude + math.acos(num / den)

        while rangelong < 0.0:
            rangelong += _TWO_PI
        while rangelong > _TWO_PI:
            rangelong -= _TWO_PI

        points.append((rangelat / _TWO_PI * 360.0, rangelong / _TWO_PI * 360.0))

    return points
