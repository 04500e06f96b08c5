"""Solar illumination of a satellite.

Provides the low-precision solar ephemeris of the legacy tracking model and
the conical Earth-shadow test built on it. The Sun vector is expressed in
the same true-equator inertial frame as the SGP4/SDP4 output, in *km*.

Time system: the ephemeris is evaluated in Ephemeris Time, obtained from
UTC by a least-squares fit of ``ET - UT`` to the 1950-1991 almanac data.
"""

from __future__ import annotations

from typing import NamedTuple

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from satjax.config import get_dtype
from satjax.constants import (
    ASTRONOMICAL_UNIT,
    DEG2RAD,
    EARTH_RADIUS_KM,
    JD_1900,
    SECS_PER_DAY,
    SOLAR_RADIUS_KM,
    TWO_PI,
)
from satjax.utils import modulus


class Eclipse(NamedTuple):
    """Earth-shadow state of a satellite.

    Attributes:
        eclipsed: ``True`` when the Sun is fully hidden by the Earth.
        depth: Angular depth of the Sun's disc behind the Earth's limb.
            Non-negative when eclipsed [rad].
    """

    eclipsed: Array
    depth: Array


def delta_et(year: ArrayLike) -> Array:
    """Difference between Ephemeris Time and Universal Time.

    Args:
        year: Decimal year.

    Returns:
        ``ET - UT`` in seconds.
    """
    year = jnp.asarray(year, dtype=get_dtype())
    return 26.465 + 0.747622 * (year - 1950.0) + 1.886913 * jnp.sin(TWO_PI * (year - 1975.0) / 33.0)


def sun_position(jd: ArrayLike) -> Array:
    """Position of the Sun in the inertial frame (JAX, JIT-compatible).

    Args:
        jd: Julian date (UTC).

    Returns:
        3-element Sun position vector in *km*.

    Examples:
        ```python
        from satjax.illumination import sun_position
        r_sun = sun_position(2454983.5)
        float(jnp.linalg.norm(r_sun))  # ~1.014 AU
        ```
    """
    jd = jnp.asarray(jd, dtype=get_dtype())

    mjd = jd - JD_1900
    year = 1900.0 + mjd / 365.25
    t = (mjd + delta_et(year) / SECS_PER_DAY) / 36525.0

    # Mean anomaly and mean longitude [rad]
    m = DEG2RAD * modulus(
        358.47583 + modulus(35999.04975 * t, 360.0) - (0.000150 + 0.0000033 * t) * t * t, 360.0
    )
    l = DEG2RAD * modulus(
        279.69668 + modulus(36000.76892 * t, 360.0) + 0.0003025 * t * t, 360.0
    )
    e = 0.01675104 - (0.0000418 + 0.000000126 * t) * t

    # Equation of centre
    c = DEG2RAD * (
        (1.919460 - (0.004789 + 0.000014 * t) * t) * jnp.sin(m)
        + (0.020094 - 0.000100 * t) * jnp.sin(2.0 * m)
        + 0.000293 * jnp.sin(3.0 * m)
    )

    # Longitude of the Moon's ascending node, for nutation and aberration
    o = DEG2RAD * modulus(259.18 - 1934.142 * t, 360.0)

    lsa = modulus(l + c - DEG2RAD * (0.00569 - 0.00479 * jnp.sin(o)), TWO_PI)
    nu = modulus(m + c, TWO_PI)
    r = ASTRONOMICAL_UNIT * 1.0000002 * (1.0 - e * e) / (1.0 + e * jnp.cos(nu))

    # Obliquity of the ecliptic
    eps = DEG2RAD * (
        23.452294 - (0.0130125 + (0.00000164 - 0.000000503 * t) * t) * t + 0.00256 * jnp.cos(o)
    )

    return jnp.stack(
        [
            r * jnp.cos(lsa),
            r * jnp.sin(lsa) * jnp.cos(eps),
            r * jnp.sin(lsa) * jnp.sin(eps),
        ]
    )


def eclipse(position: ArrayLike, sun: ArrayLike) -> Eclipse:
    """Test whether a satellite is in the Earth's shadow.

    Compares the angular semi-diameters of the Earth and the Sun seen from
    the satellite with the angle between the Sun and the Earth's centre.
    When the Sun appears larger than the Earth the satellite is never
    reported as eclipsed.

    Args:
        position: Satellite ECI position in *km*.
        sun: Sun ECI position in *km*, from :func:`sun_position`.

    Returns:
        :class:`Eclipse` state and depth.
    """
    dtype = get_dtype()
    position = jnp.asarray(position, dtype=dtype)
    sun = jnp.asarray(sun, dtype=dtype)

    r_sat = jnp.linalg.norm(position)
    sd_earth = jnp.arcsin(EARTH_RADIUS_KM / r_sat)
    sd_sun = jnp.arcsin(SOLAR_RADIUS_KM / jnp.linalg.norm(sun - position))

    cos_delta = jnp.dot(sun, -position) / (jnp.linalg.norm(sun) * r_sat)
    delta = jnp.arccos(jnp.clip(cos_delta, -1.0, 1.0))

    depth = sd_earth - sd_sun - delta
    eclipsed = jnp.where(sd_earth < sd_sun, False, depth >= 0.0)
    return Eclipse(eclipsed=eclipsed, depth=depth)
