"""Angle reduction helpers.

The legacy propagator reduces angles with two slightly different rules and
the reference output depends on which one is used where:

- ``mod2pi`` truncates the quotient toward zero before subtracting, then
  lifts negative results by one turn.
- ``modulus`` floors the quotient, then lifts negative results by one
  period.

Both come in a JAX-traceable form (``mod2pi``, ``modulus``) used by the
propagation kernels and a plain-float form (``fmod2pi``, ``fmodulus``) used
by the Python-time initialisers.
"""

import math

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

_TWO_PI = 2.0 * math.pi


def mod2pi(angle: ArrayLike) -> Array:
    """Reduce an angle to ``[0, 2pi)`` using truncating division.

    Args:
        angle (ArrayLike): Angle in radians.

    Returns:
        Reduced angle in radians.
    """
    angle = jnp.asarray(angle)
    reduced = angle - jnp.trunc(angle / _TWO_PI) * _TWO_PI
    return jnp.where(reduced < 0.0, reduced + _TWO_PI, reduced)


def modulus(value: ArrayLike, period: ArrayLike) -> Array:
    """Reduce ``value`` modulo ``period`` using floored division.

    Args:
        value (ArrayLike): Value to reduce.
        period (ArrayLike): Period, may be negative.

    Returns:
        ``value`` reduced by whole multiples of ``period``.
    """
    value = jnp.asarray(value)
    reduced = value - jnp.floor(value / period) * period
    return jnp.where(reduced < 0.0, reduced + period, reduced)


def fmod2pi(angle: float) -> float:
    """Plain-float counterpart of :func:`mod2pi`."""
    reduced = angle - int(angle / _TWO_PI) * _TWO_PI
    if reduced < 0.0:
        reduced += _TWO_PI
    return reduced


def fmodulus(value: float, period: float) -> float:
    """Plain-float counterpart of :func:`modulus`."""
    reduced = value - math.floor(value / period) * period
    if reduced < 0.0:
        reduced += period
    return reduced
