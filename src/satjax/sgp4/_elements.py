"""
Construction of :class:`OrbitalElements` from raw element values.

The catalog mean motion published in a TLE is a Kozai mean motion with the
secular J2 effect folded in. Both propagators start by recovering the
Brouwer mean motion ``xnodp`` and semi-major axis ``aodp`` from it; the same
recovery classifies an element set as near-earth or deep-space.
"""

from __future__ import annotations

import logging
from math import cos as _py_cos
from math import sqrt as _py_sqrt

from satjax.constants import (
    CK2,
    DEG2RAD,
    EARTH_RADIUS_KM,
    MINS_PER_DAY,
    PERIGEE_156_KM,
    QOMS2T,
    TWO_PI,
    TWO_THIRDS,
    XKE,
    S,
)
from satjax.sgp4._types import OrbitalElements

logger = logging.getLogger(__name__)

# Periods at or above 225 minutes are propagated with SDP4
_DEEP_SPACE_THRESHOLD = 0.15625


def recover_mean_motion(
    xno: float, xincl: float, eo: float, truncated: bool = False
) -> tuple[float, float]:
    """Recover the original mean motion and semi-major axis.

    Args:
        xno: Catalog mean motion [rad/min].
        xincl: Inclination [rad].
        eo: Eccentricity.
        truncated: Evaluate the third-order coefficient ``134/81`` with
            integer division (i.e. as ``1``), as the legacy deep-space
            initialiser does. The near-earth model uses the exact ratio.

    Returns:
        Tuple ``(xnodp, aodp)`` in rad/min and earth radii.
    """
    a1 = (XKE / xno) ** TWO_THIRDS
    cosio = _py_cos(xincl)
    x3thm1 = 3.0 * cosio * cosio - 1.0
    betao2 = 1.0 - eo * eo
    betao = _py_sqrt(betao2)

    coefficient = 1.0 if truncated else 134.0 / 81.0
    del1 = 1.5 * CK2 * x3thm1 / (a1 * a1 * betao * betao2)
    ao = a1 * (1.0 - del1 * (0.5 * TWO_THIRDS + del1 * (1.0 + coefficient * del1)))
    delo = 1.5 * CK2 * x3thm1 / (ao * ao * betao * betao2)

    return xno / (1.0 + delo), ao / (1.0 - delo)


def check_perigee(perigee: float) -> tuple[float, float]:
    """Atmospheric density parameters for a given perigee height.

    Below 156 km the fixed ``S`` and ``QOMS2T`` values are replaced by ones
    derived from the perigee itself.

    Args:
        perigee: Perigee height above the equatorial radius [km].

    Returns:
        Tuple ``(s4, qoms24)``.
    """
    if perigee >= PERIGEE_156_KM:
        return S, QOMS2T

    s4 = 20.0 if perigee <= 98.0 else perigee - 78.0
    qoms24 = ((120.0 - s4) / EARTH_RADIUS_KM) ** 4
    return s4 / EARTH_RADIUS_KM + 1.0, qoms24


def create_orbital_elements(
    *,
    catnum: int,
    year: int,
    refepoch: float,
    incl: float,
    raan: float,
    eccn: float,
    argper: float,
    meanan: float,
    meanmo: float,
    bstar: float,
    name: str = "",
    setnum: int = 0,
    drag: float = 0.0,
    nddot6: float = 0.0,
    orbitnum: int = 0,
) -> OrbitalElements:
    """Build :class:`OrbitalElements` from raw element values.

    Angles are given in degrees and the mean motion in revolutions per
    day, exactly as they appear in a TLE.

    Args:
        catnum: NORAD catalog number.
        year: Two-digit epoch year.
        refepoch: Epoch day of year with fractional day.
        incl: Inclination [deg].
        raan: Right ascension of the ascending node [deg].
        eccn: Eccentricity.
        argper: Argument of perigee [deg].
        meanan: Mean anomaly [deg].
        meanmo: Mean motion [rev/day].
        bstar: B* drag term [1/earth_radii].
        name: Object name.
        setnum: Element set number.
        drag: First derivative of mean motion divided by 2 [rev/day^2].
        nddot6: Second derivative of mean motion divided by 6 [rev/day^3].
        orbitnum: Revolution number at epoch.

    Returns:
        The immutable element set with all derived fields filled in.

    Raises:
        ValueError: If the mean motion is not positive or the eccentricity
            is outside ``[0, 1)``.

    Examples:
        ```python
        from satjax.sgp4 import create_orbital_elements

        elements = create_orbital_elements(
            catnum=28375, year=9, refepoch=105.6639197, incl=98.0551,
            raan=118.9086, eccn=0.0084159, argper=315.8041, meanan=43.6444,
            meanmo=14.40638450, bstar=1.3761e-5,
        )
        elements.deepspace  # False
        ```
    """
    if not meanmo > 0.0:
        raise ValueError(f"Mean motion must be positive, got {meanmo} rev/day")
    if not 0.0 <= eccn < 1.0:
        raise ValueError(f"Eccentricity must be in [0, 1), got {eccn}")

    # rev/day -> rad/min, rev/day^2 -> rad/min^2
    temp = TWO_PI / MINS_PER_DAY / MINS_PER_DAY
    xno = meanmo * temp * MINS_PER_DAY
    xndt2o = drag * temp

    xincl = incl * DEG2RAD
    xnodp, aodp = recover_mean_motion(xno, xincl, eccn)

    perigee = (aodp * (1.0 - eccn) - 1.0) * EARTH_RADIUS_KM
    s4, qoms24 = check_perigee(perigee)
    if perigee < PERIGEE_156_KM:
        logger.warning(
            "Perigee of %s (%d) is %.1f km; density parameters adjusted", name, catnum, perigee
        )

    return OrbitalElements(
        name=name,
        catnum=catnum,
        setnum=setnum,
        year=year,
        refepoch=refepoch,
        incl=incl,
        raan=raan,
        eccn=eccn,
        argper=argper,
        meanan=meanan,
        meanmo=meanmo,
        drag=drag,
        nddot6=nddot6,
        bstar=bstar,
        orbitnum=orbitnum,
        epoch=1000.0 * year + refepoch,
        xndt2o=xndt2o,
        xincl=xincl,
        xnodeo=raan * DEG2RAD,
        omegao=argper * DEG2RAD,
        xmo=meanan * DEG2RAD,
        xno=xno,
        xnodp=xnodp,
        aodp=aodp,
        perigee=perigee,
        s4=s4,
        qoms24=qoms24,
        deepspace=TWO_PI / xnodp / MINS_PER_DAY >= _DEEP_SPACE_THRESHOLD,
    )
