"""
SGP4 near-earth propagation core in JAX.

This module provides the initialization and propagation routines of the
legacy SGP4 model (NORAD Spacetrack Report #3, WGS '72 constants) and the
long/short-period machinery it shares with the SDP4 deep-space model.

Initialization (``near_earth_init``) runs once at Python time and returns a
``NearEarthParams`` named tuple of coefficients. Propagation
(``near_earth_propagate``) is a pure JAX function of those coefficients and
the time since epoch, suitable for ``jax.jit`` and ``jax.vmap``.
``sgp4_propagate`` dispatches on the method flag (``'n'`` near-earth,
``'d'`` deep-space) fixed when a satellite is built.
"""

from __future__ import annotations

from math import cos as _py_cos
from math import fabs as _py_fabs
from math import sin as _py_sin
from math import sqrt as _py_sqrt
from typing import NamedTuple

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from satjax.config import get_dtype
from satjax.constants import (
    CK2,
    CK4,
    EARTH_RADIUS_KM,
    J3_HARMONIC,
    MINS_PER_DAY,
    SECS_PER_DAY,
    TWO_PI,
    TWO_THIRDS,
    XKE,
)
from satjax.sgp4._kepler import solve_kepler
from satjax.sgp4._types import OrbitalElements, PropagationState, ResonanceState
from satjax.utils import mod2pi

# Velocity scale from earth radii per minute to km/s
_VKMPERSEC = EARTH_RADIUS_KM * MINS_PER_DAY / SECS_PER_DAY

# Below this eccentricity the 1/e drag terms are dropped
_MIN_DRAG_ECCENTRICITY = 1.0e-4


# ---------------------------------------------------------------------------
# Shared initialization
# ---------------------------------------------------------------------------


class SecularCoefficients(NamedTuple):
    """Drag and gravity coefficients common to SGP4 and SDP4 (Python floats)."""

    cosio: float
    sinio: float
    theta2: float
    x3thm1: float
    x1mth2: float
    x7thm1: float
    betao: float
    betao2: float
    eta: float
    coef: float
    coef1: float
    tsi: float
    c1: float
    c4: float
    xmdot: float
    omgdot: float
    xnodot: float
    xnodcf: float
    t2cof: float
    xlcof: float
    aycof: float


def secular_coefficients(
    elements: OrbitalElements, xnodp: float, aodp: float, s4: float, qoms24: float
) -> SecularCoefficients:
    """Compute the secular drag and gravity coefficients.

    Args:
        elements: Pre-processed orbital elements.
        xnodp: Recovered mean motion [rad/min].
        aodp: Recovered semi-major axis [earth radii].
        s4: Density parameter [earth radii].
        qoms24: Density parameter ``(q0 - s4)^4``.

    Returns:
        The coefficients as plain Python floats.
    """
    eo = elements.eo
    omegao = elements.omegao

    cosio = _py_cos(elements.xincl)
    sinio = _py_sin(elements.xincl)
    theta2 = cosio * cosio
    x3thm1 = 3.0 * theta2 - 1.0
    x1mth2 = 1.0 - theta2
    x7thm1 = 7.0 * theta2 - 1.0
    betao2 = 1.0 - eo * eo
    betao = _py_sqrt(betao2)

    pinvsq = 1.0 / (aodp * aodp * betao2 * betao2)
    tsi = 1.0 / (aodp - s4)
    eta = aodp * eo * tsi
    etasq = eta * eta
    eeta = eo * eta
    psisq = _py_fabs(1.0 - etasq)
    coef = qoms24 * tsi**4
    coef1 = coef / psisq**3.5

    c2 = (
        coef1
        * xnodp
        * (
            aodp * (1.0 + 1.5 * etasq + eeta * (4.0 + etasq))
            + 0.75 * CK2 * tsi / psisq * x3thm1 * (8.0 + 3.0 * etasq * (8.0 + etasq))
        )
    )
    c1 = elements.bstar * c2
    a3ovk2 = -J3_HARMONIC / CK2
    c4 = (
        2.0
        * xnodp
        * coef1
        * aodp
        * betao2
        * (
            eta * (2.0 + 0.5 * etasq)
            + eo * (0.5 + 2.0 * etasq)
            - 2.0
            * CK2
            * tsi
            / (aodp * psisq)
            * (
                -3.0 * x3thm1 * (1.0 - 2.0 * eeta + etasq * (1.5 - 0.5 * eeta))
                + 0.75 * x1mth2 * (2.0 * etasq - eeta * (1.0 + etasq)) * _py_cos(2.0 * omegao)
            )
        )
    )

    theta4 = theta2 * theta2
    temp1 = 3.0 * CK2 * pinvsq * xnodp
    temp2 = temp1 * CK2 * pinvsq
    temp3 = 1.25 * CK4 * pinvsq * pinvsq * xnodp
    xmdot = (
        xnodp
        + 0.5 * temp1 * betao * x3thm1
        + 0.0625 * temp2 * betao * (13.0 - 78.0 * theta2 + 137.0 * theta4)
    )
    x1m5th = 1.0 - 5.0 * theta2
    omgdot = (
        -0.5 * temp1 * x1m5th
        + 0.0625 * temp2 * (7.0 - 114.0 * theta2 + 395.0 * theta4)
        + temp3 * (3.0 - 36.0 * theta2 + 49.0 * theta4)
    )
    xhdot1 = -temp1 * cosio
    xnodot = (
        xhdot1 + (0.5 * temp2 * (4.0 - 19.0 * theta2) + 2.0 * temp3 * (3.0 - 7.0 * theta2)) * cosio
    )

    return SecularCoefficients(
        cosio=cosio,
        sinio=sinio,
        theta2=theta2,
        x3thm1=x3thm1,
        x1mth2=x1mth2,
        x7thm1=x7thm1,
        betao=betao,
        betao2=betao2,
        eta=eta,
        coef=coef,
        coef1=coef1,
        tsi=tsi,
        c1=c1,
        c4=c4,
        xmdot=xmdot,
        omgdot=omgdot,
        xnodot=xnodot,
        xnodcf=3.5 * betao2 * xhdot1 * c1,
        t2cof=1.5 * c1,
        xlcof=0.125 * a3ovk2 * sinio * (3.0 + 5.0 * cosio) / (1.0 + cosio),
        aycof=0.25 * a3ovk2 * sinio,
    )


def params_to_jax(params: NamedTuple) -> NamedTuple:
    """Convert every field of a parameter tuple to a JAX scalar of the active dtype."""
    dtype = get_dtype()
    return type(params)(*(jnp.asarray(value, dtype=dtype) for value in params))


# ---------------------------------------------------------------------------
# Near-earth (SGP4) initialization
# ---------------------------------------------------------------------------


class NearEarthParams(NamedTuple):
    """Coefficients of the SGP4 near-earth model.

    A JAX pytree of scalars produced by :func:`near_earth_init`. The
    ``simple`` flag is ``1.0`` for perigees below 220 km, where the
    higher-order drag terms are dropped.
    """

    xmo: Array
    omegao: Array
    xnodeo: Array
    xincl: Array
    eo: Array
    bstar: Array
    xnodp: Array
    aodp: Array
    cosio: Array
    sinio: Array
    x3thm1: Array
    x1mth2: Array
    x7thm1: Array
    xmdot: Array
    omgdot: Array
    xnodot: Array
    xnodcf: Array
    xlcof: Array
    aycof: Array
    c1: Array
    c4: Array
    c5: Array
    t2cof: Array
    t3cof: Array
    t4cof: Array
    t5cof: Array
    d2: Array
    d3: Array
    d4: Array
    omgcof: Array
    xmcof: Array
    eta: Array
    delmo: Array
    sinmo: Array
    simple: Array


def near_earth_init(elements: OrbitalElements) -> NearEarthParams:
    """Initialize the SGP4 near-earth model.

    Runs at Python time on plain floats.

    Args:
        elements: Pre-processed orbital elements (period under 225 minutes).

    Returns:
        SGP4 coefficients as a JAX pytree.
    """
    eo = elements.eo
    bstar = elements.bstar
    xnodp = elements.xnodp
    aodp = elements.aodp
    s4 = elements.s4

    sec = secular_coefficients(elements, xnodp, aodp, s4, elements.qoms24)

    # Truncated equations for perigees below 220 km
    simple = aodp * (1.0 - eo) < 220.0 / EARTH_RADIUS_KM + 1.0

    etasq = sec.eta * sec.eta
    eeta = eo * sec.eta
    a3ovk2 = -J3_HARMONIC / CK2

    if eo > _MIN_DRAG_ECCENTRICITY:
        c3 = sec.coef * sec.tsi * a3ovk2 * xnodp * sec.sinio / eo
        xmcof = -TWO_THIRDS * sec.coef * bstar / eeta
    else:
        c3 = 0.0
        xmcof = 0.0

    c5 = 2.0 * sec.coef1 * aodp * sec.betao2 * (1.0 + 2.75 * (etasq + eeta) + eeta * etasq)

    d2 = d3 = d4 = t3cof = t4cof = t5cof = 0.0
    if not simple:
        c1 = sec.c1
        c1sq = c1 * c1
        d2 = 4.0 * aodp * sec.tsi * c1sq
        temp = d2 * sec.tsi * c1 / 3.0
        d3 = (17.0 * aodp + s4) * temp
        d4 = 0.5 * temp * aodp * sec.tsi * (221.0 * aodp + 31.0 * s4) * c1
        t3cof = d2 + 2.0 * c1sq
        t4cof = 0.25 * (3.0 * d3 + c1 * (12.0 * d2 + 10.0 * c1sq))
        t5cof = 0.2 * (3.0 * d4 + 12.0 * c1 * d3 + 6.0 * d2 * d2 + 15.0 * c1sq * (2.0 * d2 + c1sq))

    params = NearEarthParams(
        xmo=elements.xmo,
        omegao=elements.omegao,
        xnodeo=elements.xnodeo,
        xincl=elements.xincl,
        eo=eo,
        bstar=bstar,
        xnodp=xnodp,
        aodp=aodp,
        cosio=sec.cosio,
        sinio=sec.sinio,
        x3thm1=sec.x3thm1,
        x1mth2=sec.x1mth2,
        x7thm1=sec.x7thm1,
        xmdot=sec.xmdot,
        omgdot=sec.omgdot,
        xnodot=sec.xnodot,
        xnodcf=sec.xnodcf,
        xlcof=sec.xlcof,
        aycof=sec.aycof,
        c1=sec.c1,
        c4=sec.c4,
        c5=c5,
        t2cof=sec.t2cof,
        t3cof=t3cof,
        t4cof=t4cof,
        t5cof=t5cof,
        d2=d2,
        d3=d3,
        d4=d4,
        omgcof=bstar * c3 * _py_cos(elements.omegao),
        xmcof=xmcof,
        eta=sec.eta,
        delmo=(1.0 + sec.eta * _py_cos(elements.xmo)) ** 3,
        sinmo=_py_sin(elements.xmo),
        simple=1.0 if simple else 0.0,
    )
    return params_to_jax(params)


# ---------------------------------------------------------------------------
# Shared periodics
# ---------------------------------------------------------------------------


def orbit_phase(xlt: ArrayLike, xnode: ArrayLike, omgadf: ArrayLike) -> Array:
    """Orbital phase: mean longitude minus node and perigee, in ``[0, 2pi)``."""
    phase = xlt - xnode - omgadf + TWO_PI
    phase = jnp.where(phase < 0.0, phase + TWO_PI, phase)
    return mod2pi(phase)


def periodics(
    params: NamedTuple,
    a: Array,
    e: Array,
    omega: Array,
    xl: Array,
    xn: Array,
    xnode: Array,
    xinc: Array,
    omgadf: Array,
) -> PropagationState:
    """Apply long- and short-period periodics and build the state vectors.

    Shared by the near-earth and deep-space models; ``params`` only needs
    the ``xlcof``, ``aycof``, ``cosio``, ``sinio``, ``x3thm1``, ``x1mth2``
    and ``x7thm1`` fields.

    Args:
        params: Model coefficients.
        a: Semi-major axis [earth radii].
        e: Eccentricity.
        omega: Argument of perigee entering the long-period terms [rad].
        xl: Mean longitude [rad].
        xn: Mean motion [rad/min].
        xnode: Right ascension of the ascending node [rad].
        xinc: Inclination [rad].
        omgadf: Argument of perigee used for the orbital phase [rad].

    Returns:
        Position [km], velocity [km/s] and phase [rad].
    """
    p = params

    # Long period periodics
    beta = jnp.sqrt(1.0 - e * e)
    axn = e * jnp.cos(omega)
    temp = 1.0 / (a * beta * beta)
    xll = temp * p.xlcof * axn
    aynl = temp * p.aycof
    xlt = xl + xll
    ayn = e * jnp.sin(omega) + aynl

    # Kepler's equation
    capu = mod2pi(xlt - xnode)
    kepler = solve_kepler(axn, ayn, capu)
    sin_e = jnp.sin(kepler.eccentric_anomaly)
    cos_e = jnp.cos(kepler.eccentric_anomaly)

    # Short period preliminary quantities
    ecose = axn * cos_e + ayn * sin_e
    esine = axn * sin_e - ayn * cos_e
    elsq = axn * axn + ayn * ayn
    pl = a * (1.0 - elsq)
    r = a * (1.0 - ecose)
    rdot = XKE * jnp.sqrt(a) * esine / r
    rfdot = XKE * jnp.sqrt(pl) / r
    betal = jnp.sqrt(1.0 - elsq)
    temp3 = 1.0 / (1.0 + betal)
    cosu = a / r * (cos_e - axn + ayn * esine * temp3)
    sinu = a / r * (sin_e - ayn - axn * esine * temp3)
    u = jnp.arctan2(sinu, cosu)
    sin2u = 2.0 * sinu * cosu
    cos2u = 2.0 * cosu * cosu - 1.0
    temp1 = CK2 / pl
    temp2 = temp1 / pl

    # Update for short periodics
    rk = r * (1.0 - 1.5 * temp2 * betal * p.x3thm1) + 0.5 * temp1 * p.x1mth2 * cos2u
    uk = u - 0.25 * temp2 * p.x7thm1 * sin2u
    xnodek = xnode + 1.5 * temp2 * p.cosio * sin2u
    xinck = xinc + 1.5 * temp2 * p.cosio * p.sinio * cos2u
    rdotk = rdot - xn * temp1 * p.x1mth2 * sin2u
    rfdotk = rfdot + xn * temp1 * (p.x1mth2 * cos2u + 1.5 * p.x3thm1)

    # Orientation vectors
    sinuk = jnp.sin(uk)
    cosuk = jnp.cos(uk)
    sinik = jnp.sin(xinck)
    cosik = jnp.cos(xinck)
    sinnok = jnp.sin(xnodek)
    cosnok = jnp.cos(xnodek)
    xmx = -sinnok * cosik
    xmy = cosnok * cosik
    u_vec = jnp.stack([xmx * sinuk + cosnok * cosuk, xmy * sinuk + sinnok * cosuk, sinik * sinuk])
    v_vec = jnp.stack([xmx * cosuk - cosnok * sinuk, xmy * cosuk - sinnok * sinuk, sinik * cosuk])

    position = rk * u_vec * EARTH_RADIUS_KM
    velocity = (rdotk * u_vec + rfdotk * v_vec) * _VKMPERSEC

    return PropagationState(position, velocity, orbit_phase(xlt, xnode, omgadf))


# ---------------------------------------------------------------------------
# Near-earth (SGP4) propagation
# ---------------------------------------------------------------------------


def near_earth_propagate(params: NearEarthParams, tsince: ArrayLike) -> PropagationState:
    """Propagate a near-earth satellite with SGP4 (JAX, JIT-compatible).

    Args:
        params: Coefficients from :func:`near_earth_init`.
        tsince: Time since epoch [min].

    Returns:
        Position [km] and velocity [km/s] in the TEME frame, and the
        orbital phase [rad].
    """
    p = params
    t = jnp.asarray(tsince, dtype=get_dtype())

    # Update for secular gravity and atmospheric drag
    xmdf = p.xmo + p.xmdot * t
    omgadf = p.omegao + p.omgdot * t
    xnoddf = p.xnodeo + p.xnodot * t
    tsq = t * t
    xnode = xnoddf + p.xnodcf * tsq
    tempa = 1.0 - p.c1 * t
    tempe = p.bstar * p.c4 * t
    templ = p.t2cof * tsq

    # Full drag model unless the perigee is below 220 km
    not_simple = p.simple < 0.5
    correction = p.omgcof * t + p.xmcof * ((1.0 + p.eta * jnp.cos(xmdf)) ** 3 - p.delmo)
    xmp = jnp.where(not_simple, xmdf + correction, xmdf)
    omega = jnp.where(not_simple, omgadf - correction, omgadf)
    tcube = tsq * t
    tfour = t * tcube
    tempa = jnp.where(not_simple, tempa - p.d2 * tsq - p.d3 * tcube - p.d4 * tfour, tempa)
    tempe = jnp.where(not_simple, tempe + p.bstar * p.c5 * (jnp.sin(xmp) - p.sinmo), tempe)
    templ = jnp.where(not_simple, templ + p.t3cof * tcube + tfour * (p.t4cof + t * p.t5cof), templ)

    a = p.aodp * tempa * tempa
    e = p.eo - tempe
    xl = xmp + omega + xnode + p.xnodp * templ
    xn = XKE / a**1.5

    return periodics(p, a, e, omega, xl, xn, xnode, p.xincl, omgadf)


def sgp4_propagate(
    params: NamedTuple,
    tsince: ArrayLike,
    method: str,
    resonance: ResonanceState | None = None,
) -> tuple[PropagationState, ResonanceState | None]:
    """Propagate a satellite using SGP4/SDP4.

    This is the main propagation entry point. The ``method`` flag selects
    the near-earth (``'n'``) or deep-space (``'d'``) code path at Python
    trace time, making it compatible with ``jax.jit`` when ``method`` is
    static.

    Args:
        params: Coefficients from ``near_earth_init`` or ``deep_space_init``.
        tsince: Time since epoch [min].
        method: ``'n'`` for near-earth SGP4, ``'d'`` for deep-space SDP4.
        resonance: Deep-space integrator state from a previous call. Ignored
            by the near-earth model; ``None`` starts the integrator at epoch.

    Returns:
        Tuple of the propagated state and the updated integrator state
        (``resonance`` unchanged for near-earth satellites).

    Raises:
        ValueError: If ``method`` is neither ``'n'`` nor ``'d'``.
    """
    if method == "n":
        return near_earth_propagate(params, tsince), resonance
    if method == "d":
        from satjax.sgp4._deep_space import deep_space_propagate

        return deep_space_propagate(params, tsince, resonance)
    raise ValueError(f"Unknown propagation method '{method}', expected 'n' or 'd'")
