"""
Data types for the SGP4/SDP4 propagator.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple

from jax import Array

from satjax.constants import RAD2DEG, TWO_PI
from satjax.time import julian_date_of_epoch


@dataclass(frozen=True)
class OrbitalElements:
    """Pre-processed orbital elements of a single element set.

    This is a plain Python dataclass (not a JAX pytree). It holds the raw
    element values as they appear in the TLE (degrees, revolutions per day)
    together with the quantities derived from them once at construction:
    angles in radians, mean motion in rad/min, the recovered mean motion and
    semi-major axis, the perigee height, the density parameters adjusted for
    low perigees, and the deep-space classification.

    Build instances with :func:`satjax.sgp4.parse_tle` or
    :func:`create_orbital_elements`; all fields are fixed afterwards.

    Attributes:
        name: Object name from line 0 (empty for two-line sets).
        catnum: NORAD catalog number.
        setnum: Element set number.
        year: Two-digit epoch year.
        refepoch: Epoch day of year with fractional day.
        incl: Inclination [deg].
        raan: Right ascension of the ascending node [deg].
        eccn: Eccentricity [dimensionless].
        argper: Argument of perigee [deg].
        meanan: Mean anomaly [deg].
        meanmo: Mean motion [rev/day].
        drag: First derivative of mean motion divided by 2 [rev/day^2].
        nddot6: Second derivative of mean motion divided by 6 [rev/day^3].
        bstar: B* drag term [1/earth_radii].
        orbitnum: Revolution number at epoch.
        epoch: Epoch as ``1000 * yy + refepoch``.
        xndt2o: First derivative of mean motion divided by 2 [rad/min^2].
        xincl: Inclination [rad].
        xnodeo: Right ascension of the ascending node [rad].
        omegao: Argument of perigee [rad].
        xmo: Mean anomaly [rad].
        xno: Mean motion [rad/min].
        xnodp: Recovered (un-Kozai'd) mean motion [rad/min].
        aodp: Recovered semi-major axis [earth radii].
        perigee: Perigee height above the equatorial radius [km].
        s4: Atmospheric density parameter, adjusted below 156 km [earth radii].
        qoms24: Density parameter ``(q0 - s4)^4``, adjusted below 156 km.
        deepspace: ``True`` when the period is 225 minutes or longer.
    """

    name: str
    catnum: int
    setnum: int
    year: int
    refepoch: float
    incl: float
    raan: float
    eccn: float
    argper: float
    meanan: float
    meanmo: float
    drag: float
    nddot6: float
    bstar: float
    orbitnum: int
    epoch: float
    xndt2o: float
    xincl: float
    xnodeo: float
    omegao: float
    xmo: float
    xno: float
    xnodp: float
    aodp: float
    perigee: float
    s4: float
    qoms24: float
    deepspace: bool

    @property
    def eo(self) -> float:
        """Eccentricity [dimensionless]."""
        return self.eccn

    @property
    def julian_epoch(self) -> float:
        """Julian date of the element set epoch [days]."""
        return julian_date_of_epoch(self.epoch)

    @property
    def period(self) -> float:
        """Anomalistic period from the recovered mean motion [min]."""
        return TWO_PI / self.xnodp

    @property
    def inclination_deg(self) -> float:
        """Inclination [deg], recomputed from radians."""
        return self.xincl * RAD2DEG

    def __str__(self) -> str:
        return self.name


class ResonanceState(NamedTuple):
    """Deep-space resonance integrator state.

    The integrator advances ``xli`` and ``xni`` from epoch in fixed steps.
    The state is passed in to and returned from each propagation call so a
    later query further from epoch can resume instead of restarting.

    Attributes:
        atime: Time of the last integration point [min since epoch].
        xli: Integrated mean longitude term [rad].
        xni: Integrated mean motion [rad/min].
    """

    atime: Array
    xli: Array
    xni: Array


class PropagationState(NamedTuple):
    """Output of a single propagation.

    Attributes:
        position: ECI (TEME) position [km], shape ``(3,)``.
        velocity: ECI (TEME) velocity [km/s], shape ``(3,)``.
        phase: Orbital phase (mean anomaly from the ascending node) [rad].
    """

    position: Array
    velocity: Array
    phase: Array
