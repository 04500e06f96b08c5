"""Julian date and sidereal time helpers.

The legacy tracking model measures time in Julian days held in a single
double.  Civil instants enter through :func:`julian_date_utc`, element-set
epochs through :func:`julian_date_of_epoch`, and Greenwich sidereal time is
evaluated either from a Julian date (:func:`gmst_jd`, JAX-traceable) or from
an element-set epoch (:func:`theta_g_epoch`, used by the deep-space
initialiser).
"""

from __future__ import annotations

import math
from datetime import UTC, datetime, timedelta

import jax
import jax.numpy as jnp
from jax.typing import ArrayLike

from satjax.config import get_dtype
from satjax.constants import (
    EARTH_ROTATIONS_PER_SIDERIAL_DAY,
    JD_1979_12_31,
    JD_J2000,
    SECS_PER_DAY,
    TWO_PI,
)
from satjax.utils import fmod2pi, modulus

# Legacy day-number origin
_DAYNUM_ORIGIN = datetime(1979, 12, 31, tzinfo=UTC)

# Julian date of 1950-01-00 00:00 UTC, origin of the ds50 day count
_JD_1950 = 2433281.5


def as_utc(when: datetime) -> datetime:
    """Return ``when`` as a timezone-aware UTC datetime.

    Naive datetimes are taken to already be in UTC.

    Args:
        when: Civil instant.

    Returns:
        The same instant with ``tzinfo=UTC``.
    """
    if when.tzinfo is None:
        return when.replace(tzinfo=UTC)
    return when.astimezone(UTC)


def julian_date_of_year(year: float) -> float:
    """Julian date of 0h UTC on day zero (31 December) of ``year``.

    Args:
        year: Four-digit calendar year.

    Returns:
        Julian date in days.

    Examples:
        ```python
        from satjax.time import julian_date_of_year
        julian_date_of_year(1990)  # 2447891.5
        ```
    """
    a_year = year - 1
    a = math.floor(a_year / 100)
    b = 2 - a + int(a / 4)
    i = int(math.floor(365.25 * a_year) + 30.6001 * 14)
    return i + 1720994.5 + b


def julian_date_of_epoch(epoch: float) -> float:
    """Julian date of a TLE epoch expressed as ``yyddd.dddddddd``.

    Two-digit years below 57 are in the 21st century.

    Args:
        epoch: Epoch as ``1000 * yy + day_of_year``.

    Returns:
        Julian date in days.
    """
    year = math.floor(epoch * 1.0e-3)
    day = (epoch * 1.0e-3 - year) * 1000.0

    if year < 57:
        year += 2000
    else:
        year += 1900

    return julian_date_of_year(year) + day


def julian_date_utc(when: datetime) -> float:
    """Julian date of a civil instant.

    Counts whole milliseconds since 1979-12-31 00:00 UTC, as the legacy
    model does, then offsets to the Julian date origin.

    Args:
        when: Civil instant.  Naive datetimes are interpreted as UTC.

    Returns:
        Julian date in days.
    """
    millis = (as_utc(when) - _DAYNUM_ORIGIN) // timedelta(milliseconds=1)
    return millis / 1000.0 / 60.0 / 60.0 / 24.0 + JD_1979_12_31


def gmst_jd(jd: ArrayLike) -> jax.Array:
    """Greenwich Mean Sidereal Time of a Julian date (JAX, JIT-compatible).

    Reference: The 1992 Astronomical Almanac, page B6.

    Args:
        jd: Julian date (UT1, approximated by UTC).

    Returns:
        Sidereal angle in radians, in ``[0, 2pi)``.
    """
    jd = jnp.asarray(jd, dtype=get_dtype())
    ut = (jd + 0.5) - jnp.floor(jd + 0.5)
    a_jd = jd - ut
    tu = (a_jd - JD_J2000) / 36525.0
    gmst = 24110.54841 + tu * (8640184.812866 + tu * (0.093104 - tu * 6.2e-6))
    gmst = modulus(gmst + SECS_PER_DAY * EARTH_ROTATIONS_PER_SIDERIAL_DAY * ut, SECS_PER_DAY)
    return TWO_PI * gmst / SECS_PER_DAY


def theta_g_epoch(epoch: float) -> tuple[float, float]:
    """Greenwich sidereal time at a TLE epoch, and days since 1950.

    This is the coarse sidereal-time polynomial used by the SDP4 deep-space
    initialiser; it differs from :func:`gmst_jd` in the last digits and
    must not be substituted for it.

    Args:
        epoch: Epoch as ``1000 * yy + day_of_year``.

    Returns:
        Tuple ``(thgr, ds50)``: sidereal angle [rad] and days since
        1950-01-00 0h.
    """
    year = math.floor(epoch * 1.0e-3)
    day_of_year = (epoch * 1.0e-3 - year) * 1000.0

    if year < 57:
        year += 2000
    else:
        year += 1900

    day_floor = math.floor(day_of_year)
    day_fraction = day_of_year - day_floor

    jd = julian_date_of_year(year) + day_floor
    ds50 = jd - _JD_1950 + day_fraction

    return fmod2pi(6.3003880987 * ds50 + 1.72944494), ds50
