"""Coordinate transformations.

This sub-module provides the observation geometry used by the tracking
model:

- **Geodetic**: ECI position -> sub-satellite latitude, longitude and
  altitude on the WGS '72 ellipsoid
- **Topocentric (SEZ)**: South-East-Zenith local horizontal frame for
  observer-relative azimuth, elevation, range and range-rate
"""

from .geodetic import (
    GeodeticPoint,
    position_eci_to_geodetic,
)
from .topocentric import (
    LookAngles,
    above_horizon,
    look_angles,
    observer_state_eci,
    rotation_eci_to_sez,
)

__all__ = [
    "GeodeticPoint",
    "position_eci_to_geodetic",
    "LookAngles",
    "above_horizon",
    "look_angles",
    "observer_state_eci",
    "rotation_eci_to_sez",
]
