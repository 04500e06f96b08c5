"""
SDP4 deep-space propagation in JAX.

Deep-space orbits (period of 225 minutes or more) add three effects to the
SGP4 secular model:

- secular lunar and solar perturbations of all mean elements;
- geopotential resonance for synchronous (24 h) and half-day (12 h) orbits,
  integrated numerically in 720 minute steps from epoch;
- long-period lunar and solar periodics, applied in the Lyddane form for
  inclinations below 0.2 rad.

``deep_space_init`` evaluates every time-independent coefficient at Python
time. ``deep_space_propagate`` is a pure JAX function. The resonance
integrator state is passed in explicitly as a :class:`ResonanceState` and
returned updated, so a caller may resume integration on a later call
instead of restarting from epoch; the propagated state does not depend on
whether it resumed.
"""

from __future__ import annotations

import logging
from math import atan2 as _py_atan2
from math import cos as _py_cos
from math import sin as _py_sin
from math import sqrt as _py_sqrt
from typing import NamedTuple

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from satjax.config import get_dtype
from satjax.constants import EARTH_RADIUS_KM, TWO_PI, TWO_THIRDS, XKE
from satjax.sgp4._constants import (
    C1L,
    C1SS,
    FASX2,
    FASX4,
    FASX6,
    G22,
    G32,
    G44,
    G52,
    G54,
    HALF_DAY_BAND,
    HALF_DAY_MIN_ECCENTRICITY,
    LYDDANE_INCLINATION,
    Q22,
    Q31,
    Q33,
    ROOT22,
    ROOT32,
    ROOT44,
    ROOT52,
    ROOT54,
    SMALL_INCLINATION,
    STEP2,
    STEPN,
    STEPP,
    SYNCHRONOUS_BAND,
    THDT,
    ZCOSGS,
    ZCOSIS,
    ZEL,
    ZES,
    ZNL,
    ZNS,
    ZSINGS,
    ZSINIS,
)
from satjax.sgp4._elements import check_perigee, recover_mean_motion
from satjax.sgp4._propagation import params_to_jax, periodics, secular_coefficients
from satjax.sgp4._types import OrbitalElements, PropagationState, ResonanceState
from satjax.time import theta_g_epoch
from satjax.utils import fmod2pi, mod2pi

logger = logging.getLogger(__name__)

# Resonance kinds stored in DeepSpaceParams.irez
NO_RESONANCE = 0
SYNCHRONOUS_RESONANCE = 1
HALF_DAY_RESONANCE = 2

_RESONANCE_NAMES = {
    NO_RESONANCE: "none",
    SYNCHRONOUS_RESONANCE: "synchronous (24 h)",
    HALF_DAY_RESONANCE: "half-day (12 h)",
}


class DeepSpaceParams(NamedTuple):
    """Coefficients of the SDP4 deep-space model.

    A JAX pytree of scalars produced by :func:`deep_space_init`. ``irez``
    holds the resonance kind (0 none, 1 synchronous, 2 half-day).
    """

    # Epoch elements and secular rates
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
    t2cof: Array
    # Lunar-solar secular rates
    thgr: Array
    xnq: Array
    omegaq: Array
    xqncl: Array
    sse: Array
    ssi: Array
    ssl: Array
    ssg: Array
    ssh: Array
    # Solar periodics
    zmos: Array
    se2: Array
    se3: Array
    si2: Array
    si3: Array
    sl2: Array
    sl3: Array
    sl4: Array
    sgh2: Array
    sgh3: Array
    sgh4: Array
    sh2: Array
    sh3: Array
    # Lunar periodics
    zmol: Array
    ee2: Array
    e3: Array
    xi2: Array
    xi3: Array
    xl2: Array
    xl3: Array
    xl4: Array
    xgh2: Array
    xgh3: Array
    xgh4: Array
    xh2: Array
    xh3: Array
    # Resonance
    irez: Array
    del1: Array
    del2: Array
    del3: Array
    d2201: Array
    d2211: Array
    d3210: Array
    d3222: Array
    d4410: Array
    d4422: Array
    d5220: Array
    d5232: Array
    d5421: Array
    d5433: Array
    xfact: Array
    xlamo: Array


# ---------------------------------------------------------------------------
# Initialization (Python time)
# ---------------------------------------------------------------------------


class _PerturberTerms(NamedTuple):
    se: float
    si: float
    sl: float
    sgh: float
    sh: float
    ee2: float
    e3: float
    xi2: float
    xi3: float
    xl2: float
    xl3: float
    xl4: float
    xgh2: float
    xgh3: float
    xgh4: float
    xh2: float
    xh3: float


def _perturber_terms(
    zcosg: float,
    zsing: float,
    zcosi: float,
    zsini: float,
    zcosh: float,
    zsinh: float,
    cc: float,
    zn: float,
    ze: float,
    *,
    cosio: float,
    sinio: float,
    cosg: float,
    sing: float,
    eq: float,
    betao: float,
    betao2: float,
    xnoi: float,
    xqncl: float,
) -> _PerturberTerms:
    """Secular rates and periodic coefficients due to one perturbing body.

    Evaluated once with the solar and once with the lunar orientation and
    constants.
    """
    eosq = eq * eq

    a1 = zcosg * zcosh + zsing * zcosi * zsinh
    a3 = -zsing * zcosh + zcosg * zcosi * zsinh
    a7 = -zcosg * zsinh + zsing * zcosi * zcosh
    a8 = zsing * zsini
    a9 = zsing * zsinh + zcosg * zcosi * zcosh
    a10 = zcosg * zsini
    a2 = cosio * a7 + sinio * a8
    a4 = cosio * a9 + sinio * a10
    a5 = -sinio * a7 + cosio * a8
    a6 = -sinio * a9 + cosio * a10

    x1 = a1 * cosg + a2 * sing
    x2 = a3 * cosg + a4 * sing
    x3 = -a1 * sing + a2 * cosg
    x4 = -a3 * sing + a4 * cosg
    x5 = a5 * sing
    x6 = a6 * sing
    x7 = a5 * cosg
    x8 = a6 * cosg

    z31 = 12.0 * x1 * x1 - 3.0 * x3 * x3
    z32 = 24.0 * x1 * x2 - 6.0 * x3 * x4
    z33 = 12.0 * x2 * x2 - 3.0 * x4 * x4
    z1 = 3.0 * (a1 * a1 + a2 * a2) + z31 * eosq
    z2 = 6.0 * (a1 * a3 + a2 * a4) + z32 * eosq
    z3 = 3.0 * (a3 * a3 + a4 * a4) + z33 * eosq
    z11 = -6.0 * a1 * a5 + eosq * (-24.0 * x1 * x7 - 6.0 * x3 * x5)
    z12 = -6.0 * (a1 * a6 + a3 * a5) + eosq * (
        -24.0 * (x2 * x7 + x1 * x8) - 6.0 * (x3 * x6 + x4 * x5)
    )
    z13 = -6.0 * a3 * a6 + eosq * (-24.0 * x2 * x8 - 6.0 * x4 * x6)
    z21 = 6.0 * a2 * a5 + eosq * (24.0 * x1 * x5 - 6.0 * x3 * x7)
    z22 = 6.0 * (a4 * a5 + a2 * a6) + eosq * (24.0 * (x2 * x5 + x1 * x6) - 6.0 * (x4 * x7 + x3 * x8))
    z23 = 6.0 * a4 * a6 + eosq * (24.0 * x2 * x6 - 6.0 * x4 * x8)
    z1 = z1 + z1 + betao2 * z31
    z2 = z2 + z2 + betao2 * z32
    z3 = z3 + z3 + betao2 * z33

    s3 = cc * xnoi
    s2 = -0.5 * s3 / betao
    s4 = s3 * betao
    s1 = -15.0 * eq * s4
    s5 = x1 * x3 + x2 * x4
    s6 = x2 * x3 + x1 * x4
    s7 = x2 * x4 - x1 * x3

    # No node rate for near-equatorial orbits
    sh = 0.0 if xqncl < SMALL_INCLINATION else -zn * s2 * (z21 + z23)

    return _PerturberTerms(
        se=s1 * zn * s5,
        si=s2 * zn * (z11 + z13),
        sl=-zn * s3 * (z1 + z3 - 14.0 - 6.0 * eosq),
        sgh=s4 * zn * (z31 + z33 - 6.0),
        sh=sh,
        ee2=2.0 * s1 * s6,
        e3=2.0 * s1 * s7,
        xi2=2.0 * s2 * z12,
        xi3=2.0 * s2 * (z13 - z11),
        xl2=-2.0 * s3 * z2,
        xl3=-2.0 * s3 * (z3 - z1),
        xl4=-2.0 * s3 * (-21.0 - 9.0 * eosq) * ze,
        xgh2=2.0 * s4 * z32,
        xgh3=2.0 * s4 * (z33 - z31),
        xgh4=-18.0 * s4 * ze,
        xh2=-2.0 * s2 * z22,
        xh3=-2.0 * s2 * (z23 - z21),
    )


def _half_day_g_coefficients(eq: float) -> dict[str, float]:
    """Eccentricity polynomials of the half-day resonance."""
    eosq = eq * eq
    eoc = eq * eosq
    g = {"g201": -0.306 - (eq - 0.64) * 0.440}

    if eq <= 0.65:
        g["g211"] = 3.616 - 13.247 * eq + 16.290 * eosq
        g["g310"] = -19.302 + 117.390 * eq - 228.419 * eosq + 156.591 * eoc
        g["g322"] = -18.9068 + 109.7927 * eq - 214.6334 * eosq + 146.5816 * eoc
        g["g410"] = -41.122 + 242.694 * eq - 471.094 * eosq + 313.953 * eoc
        g["g422"] = -146.407 + 841.880 * eq - 1629.014 * eosq + 1083.435 * eoc
        g["g520"] = -532.114 + 3017.977 * eq - 5740.0 * eosq + 3708.276 * eoc
    else:
        g["g211"] = -72.099 + 331.819 * eq - 508.738 * eosq + 266.724 * eoc
        g["g310"] = -346.844 + 1582.851 * eq - 2415.925 * eosq + 1246.113 * eoc
        g["g322"] = -342.585 + 1554.908 * eq - 2366.899 * eosq + 1215.972 * eoc
        g["g410"] = -1052.797 + 4758.686 * eq - 7193.992 * eosq + 3651.957 * eoc
        g["g422"] = -3581.69 + 16178.11 * eq - 24462.77 * eosq + 12422.52 * eoc
        if eq <= 0.715:
            g["g520"] = 1464.74 - 4664.75 * eq + 3763.64 * eosq
        else:
            g["g520"] = -5149.66 + 29936.92 * eq - 54087.36 * eosq + 31324.56 * eoc

    if eq < 0.7:
        g["g533"] = -919.2277 + 4988.61 * eq - 9064.77 * eosq + 5542.21 * eoc
        g["g521"] = -822.71072 + 4568.6173 * eq - 8491.4146 * eosq + 5337.524 * eoc
        g["g532"] = -853.666 + 4690.25 * eq - 8624.77 * eosq + 5341.4 * eoc
    else:
        g["g533"] = -37995.78 + 161616.52 * eq - 229838.2 * eosq + 109377.94 * eoc
        g["g521"] = -51752.104 + 218913.95 * eq - 309468.16 * eosq + 146349.42 * eoc
        g["g532"] = -40023.88 + 170470.89 * eq - 242699.48 * eosq + 115605.82 * eoc

    return g


def _half_day_terms(eq: float, cosio: float, sinio: float, xnq: float, aqnv: float) -> dict[str, float]:
    """``d`` coefficients of the half-day resonance."""
    g = _half_day_g_coefficients(eq)
    theta2 = cosio * cosio
    sini2 = sinio * sinio

    f220 = 0.75 * (1.0 + 2.0 * cosio + theta2)
    f221 = 1.5 * sini2
    f321 = 1.875 * sinio * (1.0 - 2.0 * cosio - 3.0 * theta2)
    f322 = -1.875 * sinio * (1.0 + 2.0 * cosio - 3.0 * theta2)
    f441 = 35.0 * sini2 * f220
    f442 = 39.3750 * sini2 * sini2
    f522 = (
        9.84375
        * sinio
        * (sini2 * (1.0 - 2.0 * cosio - 5.0 * theta2) + 0.33333333 * (-2.0 + 4.0 * cosio + 6.0 * theta2))
    )
    f523 = sinio * (
        4.92187512 * sini2 * (-2.0 - 4.0 * cosio + 10.0 * theta2)
        + 6.56250012 * (1.0 + 2.0 * cosio - 3.0 * theta2)
    )
    f542 = 29.53125 * sinio * (2.0 - 8.0 * cosio + theta2 * (-12.0 + 8.0 * cosio + 10.0 * theta2))
    f543 = 29.53125 * sinio * (-2.0 - 8.0 * cosio + theta2 * (12.0 + 8.0 * cosio - 10.0 * theta2))

    temp1 = 3.0 * xnq * xnq * aqnv * aqnv
    temp = temp1 * ROOT22
    terms = {
        "d2201": temp * f220 * g["g201"],
        "d2211": temp * f221 * g["g211"],
    }
    temp1 = temp1 * aqnv
    temp = temp1 * ROOT32
    terms["d3210"] = temp * f321 * g["g310"]
    terms["d3222"] = temp * f322 * g["g322"]
    temp1 = temp1 * aqnv
    temp = 2.0 * temp1 * ROOT44
    terms["d4410"] = temp * f441 * g["g410"]
    terms["d4422"] = temp * f442 * g["g422"]
    temp1 = temp1 * aqnv
    temp = temp1 * ROOT52
    terms["d5220"] = temp * f522 * g["g520"]
    terms["d5232"] = temp * f523 * g["g532"]
    temp = 2.0 * temp1 * ROOT54
    terms["d5421"] = temp * f542 * g["g521"]
    terms["d5433"] = temp * f543 * g["g533"]
    return terms


def _synchronous_terms(eq: float, cosio: float, sinio: float, xnq: float, aqnv: float) -> dict[str, float]:
    """``del`` coefficients of the synchronous resonance."""
    eosq = eq * eq
    g200 = 1.0 + eosq * (-2.5 + 0.8125 * eosq)
    g310 = 1.0 + 2.0 * eosq
    g300 = 1.0 + eosq * (-6.0 + 6.60937 * eosq)
    f220 = 0.75 * (1.0 + cosio) * (1.0 + cosio)
    f311 = 0.9375 * sinio * sinio * (1.0 + 3.0 * cosio) - 0.75 * (1.0 + cosio)
    f330 = 1.875 * (1.0 + cosio) ** 3

    del1 = 3.0 * xnq * xnq * aqnv * aqnv
    return {
        "del1": del1 * f311 * g310 * Q31 * aqnv,
        "del2": 2.0 * del1 * f220 * g200 * Q22,
        "del3": 3.0 * del1 * f330 * g300 * Q33 * aqnv,
    }


def _resonance_kind(xnq: float, eq: float) -> int:
    if SYNCHRONOUS_BAND[0] < xnq < SYNCHRONOUS_BAND[1]:
        return SYNCHRONOUS_RESONANCE
    if HALF_DAY_BAND[0] <= xnq <= HALF_DAY_BAND[1] and eq >= HALF_DAY_MIN_ECCENTRICITY:
        return HALF_DAY_RESONANCE
    return NO_RESONANCE


def deep_space_init(elements: OrbitalElements) -> DeepSpaceParams:
    """Initialize the SDP4 deep-space model.

    Runs at Python time on plain floats. The mean-motion recovery keeps the
    legacy deep-space truncation of its third-order coefficient.

    Args:
        elements: Pre-processed orbital elements (period of 225 minutes or more).

    Returns:
        SDP4 coefficients as a JAX pytree.
    """
    eq = elements.eo
    xnodp, aodp = recover_mean_motion(elements.xno, elements.xincl, eq, truncated=True)
    s4, qoms24 = check_perigee((aodp * (1.0 - eq) - 1.0) * EARTH_RADIUS_KM)
    sec = secular_coefficients(elements, xnodp, aodp, s4, qoms24)
    cosio = sec.cosio
    sinio = sec.sinio

    # Sidereal reference from the day of year alone, as the legacy model does
    thgr, ds50 = theta_g_epoch(elements.refepoch)

    xnq = xnodp
    aqnv = 1.0 / aodp
    xqncl = elements.xincl
    xmao = elements.xmo
    xpidot = sec.omgdot + sec.xnodot
    sinq = _py_sin(elements.xnodeo)
    cosq = _py_cos(elements.xnodeo)
    omegaq = elements.omegao

    # Lunar orbit orientation at epoch (days since 1900 Jan 0.5)
    day = ds50 + 18261.5
    xnodce = 4.5236020 - 9.2422029e-4 * day
    stem = _py_sin(xnodce)
    ctem = _py_cos(xnodce)
    zcosil = 0.91375164 - 0.03568096 * ctem
    zsinil = _py_sqrt(1.0 - zcosil * zcosil)
    zsinhl = 0.089683511 * stem / zsinil
    zcoshl = _py_sqrt(1.0 - zsinhl * zsinhl)
    c = 4.7199672 + 0.22997150 * day
    gam = 5.8351514 + 0.0019443680 * day
    zmol = fmod2pi(c - gam)
    zx = _py_atan2(0.39785416 * stem / zsinil, zcoshl * ctem + 0.91744867 * zsinhl * stem)
    zx = gam + zx - xnodce
    zcosgl = _py_cos(zx)
    zsingl = _py_sin(zx)
    zmos = fmod2pi(6.2565837 + 0.017201977 * day)

    common = {
        "cosio": cosio,
        "sinio": sinio,
        "cosg": _py_cos(elements.omegao),
        "sing": _py_sin(elements.omegao),
        "eq": eq,
        "betao": sec.betao,
        "betao2": sec.betao2,
        "xnoi": 1.0 / xnq,
        "xqncl": xqncl,
    }
    solar = _perturber_terms(
        ZCOSGS, ZSINGS, ZCOSIS, ZSINIS, cosq, sinq, C1SS, ZNS, ZES, **common
    )
    lunar = _perturber_terms(
        zcosgl,
        zsingl,
        zcosil,
        zsinil,
        zcoshl * cosq + zsinhl * sinq,
        sinq * zcoshl - cosq * zsinhl,
        C1L,
        ZNL,
        ZEL,
        **common,
    )

    # sh vanishes for near-equatorial orbits, where sinio may be zero
    ssh = solar.sh / sinio if solar.sh else 0.0
    ssg = solar.sgh - cosio * ssh
    ssg = ssg + lunar.sgh - (cosio / sinio * lunar.sh if lunar.sh else 0.0)
    ssh = ssh + (lunar.sh / sinio if lunar.sh else 0.0)
    sse = solar.se + lunar.se
    ssi = solar.si + lunar.si
    ssl = solar.sl + lunar.sl

    irez = _resonance_kind(xnq, eq)
    logger.debug(
        "Deep-space resonance for %s (%d): %s", elements.name, elements.catnum, _RESONANCE_NAMES[irez]
    )

    resonance = dict.fromkeys(
        (
            "del1",
            "del2",
            "del3",
            "d2201",
            "d2211",
            "d3210",
            "d3222",
            "d4410",
            "d4422",
            "d5220",
            "d5232",
            "d5421",
            "d5433",
        ),
        0.0,
    )
    xlamo = 0.0
    xfact = 0.0
    if irez == SYNCHRONOUS_RESONANCE:
        resonance.update(_synchronous_terms(eq, cosio, sinio, xnq, aqnv))
        xlamo = xmao + elements.xnodeo + elements.omegao - thgr
        bfact = sec.xmdot + xpidot - THDT + ssl + ssg + ssh
        xfact = bfact - xnq
    elif irez == HALF_DAY_RESONANCE:
        resonance.update(_half_day_terms(eq, cosio, sinio, xnq, aqnv))
        xlamo = xmao + elements.xnodeo + elements.xnodeo - thgr - thgr
        bfact = sec.xmdot + sec.xnodot + sec.xnodot - THDT - THDT + ssl + ssh + ssh
        xfact = bfact - xnq

    params = DeepSpaceParams(
        xmo=elements.xmo,
        omegao=elements.omegao,
        xnodeo=elements.xnodeo,
        xincl=elements.xincl,
        eo=eq,
        bstar=elements.bstar,
        xnodp=xnodp,
        aodp=aodp,
        cosio=cosio,
        sinio=sinio,
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
        t2cof=sec.t2cof,
        thgr=thgr,
        xnq=xnq,
        omegaq=omegaq,
        xqncl=xqncl,
        sse=sse,
        ssi=ssi,
        ssl=ssl,
        ssg=ssg,
        ssh=ssh,
        zmos=zmos,
        se2=solar.ee2,
        se3=solar.e3,
        si2=solar.xi2,
        si3=solar.xi3,
        sl2=solar.xl2,
        sl3=solar.xl3,
        sl4=solar.xl4,
        sgh2=solar.xgh2,
        sgh3=solar.xgh3,
        sgh4=solar.xgh4,
        sh2=solar.xh2,
        sh3=solar.xh3,
        zmol=zmol,
        ee2=lunar.ee2,
        e3=lunar.e3,
        xi2=lunar.xi2,
        xi3=lunar.xi3,
        xl2=lunar.xl2,
        xl3=lunar.xl3,
        xl4=lunar.xl4,
        xgh2=lunar.xgh2,
        xgh3=lunar.xgh3,
        xgh4=lunar.xgh4,
        xh2=lunar.xh2,
        xh3=lunar.xh3,
        irez=float(irez),
        xfact=xfact,
        xlamo=xlamo,
        **resonance,
    )
    return params_to_jax(params)


def initial_resonance_state(params: DeepSpaceParams) -> ResonanceState:
    """Resonance integrator state at epoch."""
    dtype = get_dtype()
    return ResonanceState(
        atime=jnp.asarray(0.0, dtype=dtype),
        xli=jnp.asarray(params.xlamo, dtype=dtype),
        xni=jnp.asarray(params.xnq, dtype=dtype),
    )


# ---------------------------------------------------------------------------
# Secular effects and resonance integration (JAX)
# ---------------------------------------------------------------------------


def _resonance_rates(
    p: DeepSpaceParams, atime: Array, xli: Array, xni: Array
) -> tuple[Array, Array, Array]:
    """Derivatives ``(xndot, xnddt, xldot)`` of the resonance integrator."""
    # Synchronous
    sync_xndot = (
        p.del1 * jnp.sin(xli - FASX2)
        + p.del2 * jnp.sin(2.0 * (xli - FASX4))
        + p.del3 * jnp.sin(3.0 * (xli - FASX6))
    )
    sync_xnddt = (
        p.del1 * jnp.cos(xli - FASX2)
        + 2.0 * p.del2 * jnp.cos(2.0 * (xli - FASX4))
        + 3.0 * p.del3 * jnp.cos(3.0 * (xli - FASX6))
    )

    # Half-day
    xomi = p.omegaq + p.omgdot * atime
    x2omi = xomi + xomi
    x2li = xli + xli
    half_xndot = (
        p.d2201 * jnp.sin(x2omi + xli - G22)
        + p.d2211 * jnp.sin(xli - G22)
        + p.d3210 * jnp.sin(xomi + xli - G32)
        + p.d3222 * jnp.sin(-xomi + xli - G32)
        + p.d4410 * jnp.sin(x2omi + x2li - G44)
        + p.d4422 * jnp.sin(x2li - G44)
        + p.d5220 * jnp.sin(xomi + xli - G52)
        + p.d5232 * jnp.sin(-xomi + xli - G52)
        + p.d5421 * jnp.sin(xomi + x2li - G54)
        + p.d5433 * jnp.sin(-xomi + x2li - G54)
    )
    half_xnddt = (
        p.d2201 * jnp.cos(x2omi + xli - G22)
        + p.d2211 * jnp.cos(xli - G22)
        + p.d3210 * jnp.cos(xomi + xli - G32)
        + p.d3222 * jnp.cos(-xomi + xli - G32)
        + p.d5220 * jnp.cos(xomi + xli - G52)
        + p.d5232 * jnp.cos(-xomi + xli - G52)
        + 2.0
        * (
            p.d4410 * jnp.cos(x2omi + x2li - G44)
            + p.d4422 * jnp.cos(x2li - G44)
            + p.d5421 * jnp.cos(xomi + x2li - G54)
            + p.d5433 * jnp.cos(-xomi + x2li - G54)
        )
    )

    synchronous = p.irez < 1.5
    xndot = jnp.where(synchronous, sync_xndot, half_xndot)
    xnddt = jnp.where(synchronous, sync_xnddt, half_xnddt)
    xldot = xni + p.xfact
    return xndot, xnddt * xldot, xldot


def integrate_resonance(
    params: DeepSpaceParams, t: ArrayLike, state: ResonanceState
) -> tuple[Array, Array, ResonanceState]:
    """Integrate the resonance terms to ``t`` (JAX, JIT-compatible).

    Integration resumes from ``state`` when ``t`` lies on the same side of
    epoch and no closer to it than ``state.atime``; otherwise it restarts
    from epoch. It then steps 720 minutes at a time toward ``t`` and
    finishes with a second-order Taylor step over the remainder.

    Args:
        params: Coefficients from :func:`deep_space_init` (resonant orbit).
        t: Time since epoch [min].
        state: Integrator state from a previous call.

    Returns:
        Tuple ``(xn, xl, state)``: mean motion [rad/min] and mean longitude
        term [rad] at ``t``, and the integrator state at the last full step.
    """
    p = params
    t = jnp.asarray(t, dtype=get_dtype())
    resonant = p.irez > 0.5

    same_side = jnp.where(t >= 0.0, state.atime >= 0.0, state.atime < 0.0)
    resume = same_side & (jnp.abs(t) >= jnp.abs(state.atime))
    init = (
        jnp.where(resume, state.atime, 0.0),
        jnp.where(resume, state.xli, p.xlamo),
        jnp.where(resume, state.xni, p.xnq),
    )
    delt = jnp.where(t < 0.0, STEPN, STEPP)

    def cond(carry):
        atime, _, _ = carry
        return resonant & (jnp.abs(t - atime) >= STEPP)

    def body(carry):
        atime, xli, xni = carry
        xndot, xnddt, xldot = _resonance_rates(p, atime, xli, xni)
        return (
            atime + delt,
            xli + xldot * delt + xndot * STEP2,
            xni + xndot * delt + xnddt * STEP2,
        )

    atime, xli, xni = jax.lax.while_loop(cond, body, init)

    ft = t - atime
    xndot, xnddt, xldot = _resonance_rates(p, atime, xli, xni)
    xn = xni + xndot * ft + xnddt * ft * ft * 0.5
    xl = xli + xldot * ft + xndot * ft * ft * 0.5
    return xn, xl, ResonanceState(atime, xli, xni)


def _secular(
    p: DeepSpaceParams,
    t: Array,
    xll: Array,
    omgadf: Array,
    xnode: Array,
    state: ResonanceState,
) -> tuple[Array, Array, Array, Array, Array, Array, ResonanceState]:
    """Lunar-solar secular effects and resonance."""
    xll = xll + p.ssl * t
    omgadf = omgadf + p.ssg * t
    xnode = xnode + p.ssh * t
    em = p.eo + p.sse * t
    xinc = p.xincl + p.ssi * t

    # Retrograde flip
    flipped = xinc < 0.0
    xinc = jnp.where(flipped, -xinc, xinc)
    xnode = jnp.where(flipped, xnode + jnp.pi, xnode)
    omgadf = jnp.where(flipped, omgadf - jnp.pi, omgadf)

    xn_res, xl_res, state = integrate_resonance(p, t, state)
    temp = -xnode + p.thgr + t * THDT
    xll_res = jnp.where(p.irez < 1.5, xl_res - omgadf + temp, xl_res + temp + temp)

    resonant = p.irez > 0.5
    xll = jnp.where(resonant, xll_res, xll)
    xn = jnp.where(resonant, xn_res, p.xnodp)
    return xll, omgadf, xnode, em, xinc, xn, state


def _lunar_solar_periodics(
    p: DeepSpaceParams,
    t: Array,
    xll: Array,
    omgadf: Array,
    xnode: Array,
    em: Array,
    xinc: Array,
) -> tuple[Array, Array, Array, Array, Array]:
    """Long-period lunar-solar periodics, Lyddane form below 0.2 rad."""
    sinis = jnp.sin(xinc)
    cosis = jnp.cos(xinc)

    # Solar
    zm = p.zmos + ZNS * t
    zf = zm + 2.0 * ZES * jnp.sin(zm)
    sinzf = jnp.sin(zf)
    f2 = 0.5 * sinzf * sinzf - 0.25
    f3 = -0.5 * sinzf * jnp.cos(zf)
    ses = p.se2 * f2 + p.se3 * f3
    sis = p.si2 * f2 + p.si3 * f3
    sls = p.sl2 * f2 + p.sl3 * f3 + p.sl4 * sinzf
    sghs = p.sgh2 * f2 + p.sgh3 * f3 + p.sgh4 * sinzf
    shs = p.sh2 * f2 + p.sh3 * f3

    # Lunar
    zm = p.zmol + ZNL * t
    zf = zm + 2.0 * ZEL * jnp.sin(zm)
    sinzf = jnp.sin(zf)
    f2 = 0.5 * sinzf * sinzf - 0.25
    f3 = -0.5 * sinzf * jnp.cos(zf)
    sel = p.ee2 * f2 + p.e3 * f3
    sil = p.xi2 * f2 + p.xi3 * f3
    sll = p.xl2 * f2 + p.xl3 * f3 + p.xl4 * sinzf
    sghl = p.xgh2 * f2 + p.xgh3 * f3 + p.xgh4 * sinzf
    shl = p.xh2 * f2 + p.xh3 * f3

    pe = ses + sel
    pinc = sis + sil
    pl = sls + sll
    pgh = sghs + sghl
    ph = shs + shl

    xinc = xinc + pinc
    em = em + pe

    # Periodics applied directly
    ph_direct = ph / p.sinio
    omgadf_direct = omgadf + (pgh - p.cosio * ph_direct)
    xnode_direct = xnode + ph_direct

    # Lyddane modification
    sinok = jnp.sin(xnode)
    cosok = jnp.cos(xnode)
    alfdp = sinis * sinok + (ph * cosok + pinc * cosis * sinok)
    betdp = sinis * cosok + (-ph * sinok + pinc * cosis * cosok)
    xnoh = mod2pi(xnode)
    xls = xll + omgadf + cosis * xnoh + (pl + pgh - pinc * xnoh * sinis)
    xnode_lyddane = jnp.arctan2(alfdp, betdp)
    # Keep the node continuous across the atan2 branch cut
    xnode_lyddane = jnp.where(
        jnp.abs(xnoh - xnode_lyddane) > jnp.pi,
        jnp.where(xnode_lyddane < xnoh, xnode_lyddane + TWO_PI, xnode_lyddane - TWO_PI),
        xnode_lyddane,
    )
    xll = xll + pl
    omgadf_lyddane = xls - xll - jnp.cos(xinc) * xnode_lyddane

    direct = p.xqncl >= LYDDANE_INCLINATION
    omgadf = jnp.where(direct, omgadf_direct, omgadf_lyddane)
    xnode = jnp.where(direct, xnode_direct, xnode_lyddane)
    return xll, omgadf, xnode, em, xinc


# ---------------------------------------------------------------------------
# Propagation
# ---------------------------------------------------------------------------


def deep_space_propagate(
    params: DeepSpaceParams,
    tsince: ArrayLike,
    resonance: ResonanceState | None = None,
) -> tuple[PropagationState, ResonanceState]:
    """Propagate a deep-space satellite with SDP4 (JAX, JIT-compatible).

    Args:
        params: Coefficients from :func:`deep_space_init`.
        tsince: Time since epoch [min].
        resonance: Integrator state from a previous call, or ``None`` to
            start from epoch.

    Returns:
        Tuple of the propagated state (position [km] and velocity [km/s] in
        the TEME frame, orbital phase [rad]) and the updated integrator
        state.
    """
    p = params
    t = jnp.asarray(tsince, dtype=get_dtype())
    if resonance is None:
        resonance = initial_resonance_state(p)

    # Secular gravity and drag
    xmdf = p.xmo + p.xmdot * t
    tsq = t * t
    xll = xmdf + p.xnodp * (p.t2cof * tsq)
    omgadf = p.omegao + p.omgdot * t
    xnode = p.xnodeo + p.xnodot * t + p.xnodcf * tsq
    tempa = 1.0 - p.c1 * t
    tempe = p.bstar * p.c4 * t

    xll, omgadf, xnode, em, xinc, xn, resonance = _secular(p, t, xll, omgadf, xnode, resonance)

    a = (XKE / xn) ** TWO_THIRDS * tempa * tempa
    em = em - tempe

    xll, omgadf, xnode, em, xinc = _lunar_solar_periodics(p, t, xll, omgadf, xnode, em, xinc)

    xl = xll + omgadf + xnode
    xn = XKE / a**1.5

    return periodics(p, a, em, omgadf, xl, xn, xnode, xinc, omgadf), resonance
