"""Sub-satellite point on the WGS '72 ellipsoid.

Converts an Earth-Centered Inertial (ECI) satellite position into geodetic
latitude, longitude and altitude. Longitude is measured from the Greenwich
meridian using Greenwich Mean Sidereal Time; latitude is refined with the
fixed-point iteration of the legacy tracking model, implemented with
``jax.lax.while_loop`` for JAX traceability.

Positions are in *km*, angles in *rad*.

References:
    1. T.S. Kelso, *Orbital Coordinate Systems, Part III*, Satellite Times,
       1996.
"""

from __future__ import annotations

from typing import NamedTuple

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from satjax.config import get_dtype
from satjax.constants import EARTH_RADIUS_KM, EPSILON, FLATTENING_FACTOR, PI_OVER_TWO, TWO_PI
from satjax.time import gmst_jd
from satjax.utils import mod2pi

# First eccentricity squared of the ellipsoid
ECC2 = FLATTENING_FACTOR * (2.0 - FLATTENING_FACTOR)

# Upper bound on latitude refinements
MAX_LATITUDE_ITERATIONS = 10


class GeodeticPoint(NamedTuple):
    """Geodetic position beneath a satellite.

    Attributes:
        latitude: Geodetic latitude [rad].
        longitude: East longitude in ``[0, 2pi)`` [rad].
        altitude: Height above the ellipsoid [km].
        theta: Right ascension of the position, ``atan2(y, x)`` [rad].
    """

    latitude: Array
    longitude: Array
    altitude: Array
    theta: Array


def position_eci_to_geodetic(position: ArrayLike, jd: ArrayLike) -> GeodeticPoint:
    """Convert an ECI position to the geodetic sub-satellite point.

    The latitude iteration stops once successive values agree to ``1e-12``
    or after ``MAX_LATITUDE_ITERATIONS`` refinements.

    Args:
        position: ECI position ``[x, y, z]`` in *km*.
        jd: Julian date (UTC) of the position.

    Returns:
        :class:`GeodeticPoint` of the position.

    Examples:
        ```python
        import jax.numpy as jnp
        from satjax.coordinates import position_eci_to_geodetic

        point = position_eci_to_geodetic(jnp.array([7000.0, 0.0, 0.0]), 2451545.0)
        float(point.altitude)  # ~621.9
        ```
    """
    position = jnp.asarray(position, dtype=get_dtype())

    x = position[0]
    y = position[1]
    z = position[2]

    theta = jnp.arctan2(y, x)
    lon = mod2pi(theta - gmst_jd(jd))
    r = jnp.hypot(x, y)

    def curvature(lat):
        sin_lat = jnp.sin(lat)
        return 1.0 / jnp.sqrt(1.0 - ECC2 * sin_lat * sin_lat)

    # State: (lat, lat_prev, iteration_count)
    lat0 = jnp.arctan2(z, r)

    def cond(state):
        lat, lat_prev, i = state
        return (jnp.abs(lat - lat_prev) >= EPSILON) & (i < MAX_LATITUDE_ITERATIONS)

    def body(state):
        lat, _, i = state
        c = curvature(lat)
        lat_new = jnp.arctan2(z + EARTH_RADIUS_KM * c * ECC2 * jnp.sin(lat), r)
        return (lat_new, lat, i + 1)

    # Force the first refinement by starting lat_prev away from lat0
    lat, _, _ = jax.lax.while_loop(cond, body, (lat0, lat0 + 1.0, jnp.int32(0)))

    alt = r / jnp.cos(lat) - EARTH_RADIUS_KM * curvature(lat)
    lat = jnp.where(lat > PI_OVER_TWO, lat - TWO_PI, lat)

    return GeodeticPoint(latitude=lat, longitude=lon, altitude=alt, theta=theta)
