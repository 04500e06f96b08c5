"""South-East-Zenith (SEZ) topocentric observation geometry.

Converts an Earth-centred inertial satellite state into the look angles
seen by a ground observer: azimuth, elevation, range and range-rate.

The observer is placed on the WGS '72 ellipsoid of the legacy tracking
model and rotates with the Earth; its inertial position is obtained from
Greenwich Mean Sidereal Time. The relative position is projected onto the
local South-East-Zenith frame:

- **South** (S): tangent to the surface, pointing geographic south
- **East** (E): tangent to the surface, pointing geographic east
- **Zenith** (Z): normal to the surface, pointing outward

Positions are in *km*, velocities in *km/s*, angles in *rad*; the observer
latitude and longitude are given in *deg* and its height in *m*, as held
by :class:`satjax.station.GroundStation`.
"""

from __future__ import annotations

from typing import NamedTuple

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from satjax.config import get_dtype
from satjax.constants import (
    DEG2RAD,
    EARTH_RADIUS_KM,
    EPSILON,
    FLATTENING_FACTOR,
    MFACTOR,
    PI,
    TWO_PI,
)
from satjax.time import gmst_jd
from satjax.utils import mod2pi


class LookAngles(NamedTuple):
    """Topocentric look angles of a satellite.

    Attributes:
        azimuth: Azimuth clockwise from north, in ``[0, 2pi)`` [rad].
        elevation: Elevation above the local horizon [rad].
        range: Distance from the observer [km].
        range_rate: Rate of change of the range [km/s].
    """

    azimuth: Array
    elevation: Array
    range: Array
    range_rate: Array


def observer_state_eci(
    latitude: ArrayLike, longitude: ArrayLike, height: ArrayLike, jd: ArrayLike
) -> tuple[Array, Array, Array]:
    """Inertial position and velocity of a ground observer.

    Reference: The 1992 Astronomical Almanac, page K11.

    Args:
        latitude: Geodetic latitude, positive north [deg].
        longitude: Longitude, positive east [deg].
        height: Height above mean sea level [m].
        jd: Julian date (UTC).

    Returns:
        Tuple ``(position, velocity, theta)``: observer ECI position [km]
        and velocity [km/s], and its local sidereal angle [rad].

    Examples:
        ```python
        from satjax.coordinates import observer_state_eci
        pos, vel, theta = observer_state_eci(52.467, -2.022, 200.0, 2454938.79)
        ```
    """
    dtype = get_dtype()
    lat = jnp.asarray(latitude, dtype=dtype) * DEG2RAD
    lon = jnp.asarray(longitude, dtype=dtype) * DEG2RAD
    height_km = jnp.asarray(height, dtype=dtype) / 1000.0

    theta = mod2pi(gmst_jd(jd) + lon)
    sin_lat = jnp.sin(lat)
    c = 1.0 / jnp.sqrt(1.0 + FLATTENING_FACTOR * (FLATTENING_FACTOR - 2.0) * sin_lat * sin_lat)
    sq = (1.0 - FLATTENING_FACTOR) ** 2 * c
    achcp = (EARTH_RADIUS_KM * c + height_km) * jnp.cos(lat)

    x = achcp * jnp.cos(theta)
    y = achcp * jnp.sin(theta)
    z = (EARTH_RADIUS_KM * sq + height_km) * sin_lat

    position = jnp.stack([x, y, z])
    velocity = jnp.stack([-MFACTOR * y, MFACTOR * x, jnp.zeros_like(x)])
    return position, velocity, theta


def rotation_eci_to_sez(latitude: ArrayLike, theta: ArrayLike) -> Array:
    """Rotation matrix from ECI to the observer's South-East-Zenith frame.

    Args:
        latitude: Geodetic latitude of the observer [rad].
        theta: Local sidereal angle of the observer [rad].

    Returns:
        3x3 rotation matrix (ECI -> SEZ).
    """
    sin_lat = jnp.sin(latitude)
    cos_lat = jnp.cos(latitude)
    sin_theta = jnp.sin(theta)
    cos_theta = jnp.cos(theta)

    return jnp.array(
        [
            [sin_lat * cos_theta, sin_lat * sin_theta, -cos_lat],
            [-sin_theta, cos_theta, 0.0],
            [cos_lat * cos_theta, cos_lat * sin_theta, sin_lat],
        ]
    )


def look_angles(
    position: ArrayLike,
    velocity: ArrayLike,
    latitude: ArrayLike,
    longitude: ArrayLike,
    height: ArrayLike,
    jd: ArrayLike,
) -> LookAngles:
    """Azimuth, elevation, range and range-rate of a satellite.

    Azimuth is quadrant-corrected from ``atan(-E/S)`` and normalised to
    ``[0, 2pi)``. Range-rate is the relative velocity projected on the line
    of sight.

    Args:
        position: Satellite ECI position [km].
        velocity: Satellite ECI velocity [km/s].
        latitude: Observer latitude [deg].
        longitude: Observer longitude [deg].
        height: Observer height above mean sea level [m].
        jd: Julian date (UTC).

    Returns:
        :class:`LookAngles` of the satellite.
    """
    dtype = get_dtype()
    position = jnp.asarray(position, dtype=dtype)
    velocity = jnp.asarray(velocity, dtype=dtype)

    obs_pos, obs_vel, theta = observer_state_eci(latitude, longitude, height, jd)
    rng = position - obs_pos
    rgvel = velocity - obs_vel
    distance = jnp.linalg.norm(rng)

    lat = jnp.asarray(latitude, dtype=dtype) * DEG2RAD
    top_s, top_e, top_z = rotation_eci_to_sez(lat, theta) @ rng

    azimuth = jnp.arctan(-top_e / top_s)
    azimuth = jnp.where(top_s > 0.0, azimuth + PI, azimuth)
    azimuth = jnp.where(azimuth < 0.0, azimuth + TWO_PI, azimuth)

    return LookAngles(
        azimuth=azimuth,
        elevation=jnp.arcsin(top_z / distance),
        range=distance,
        range_rate=jnp.dot(rng, rgvel) / distance,
    )


def above_horizon(azimuth: ArrayLike, elevation: ArrayLike, horizon_mask: ArrayLike) -> Array:
    """Test an elevation against a 36-sector horizon mask.

    Elevations past the zenith are reflected about 90 degrees first.

    Args:
        azimuth: Azimuth in ``[0, 2pi)`` [rad].
        elevation: Elevation [rad].
        horizon_mask: 36 minimum elevations, one per 10 degree azimuth
            sector starting at north [deg].

    Returns:
        ``True`` when the satellite clears the mask of its sector.
    """
    mask = jnp.asarray(horizon_mask, dtype=get_dtype())
    sector = jnp.clip(jnp.floor(azimuth / TWO_PI * 36.0).astype(jnp.int32), 0, 35)
    elevation_deg = elevation / TWO_PI * 360.0
    elevation_deg = jnp.where(elevation_deg > 90.0, 180.0 - elevation_deg, elevation_deg)
    return (elevation_deg - mask[sector]) > EPSILON
