"""
Kepler's equation for the SGP4/SDP4 long-period elements.

Both propagators solve the modified Kepler equation

    capu = E - axn * sin(E) + ayn * cos(E)

for the eccentric longitude ``E``, with ``(axn, ayn)`` the components of the
eccentricity vector and ``capu`` the mean longitude measured from the node.
"""

from __future__ import annotations

from typing import NamedTuple

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from satjax.constants import EPSILON

# Upper bound on Newton corrections
MAX_KEPLER_ITERATIONS = 10


class KeplerSolution(NamedTuple):
    """Result of :func:`solve_kepler`.

    Attributes:
        eccentric_anomaly: Last iterate of ``E`` [rad].
        converged: ``True`` when successive iterates agreed to ``1e-12``
            before the iteration cap was reached.
        iterations: Number of corrections evaluated.
    """

    eccentric_anomaly: Array
    converged: Array
    iterations: Array


def solve_kepler(axn: ArrayLike, ayn: ArrayLike, capu: ArrayLike) -> KeplerSolution:
    """Solve Kepler's equation by Newton iteration (JAX, JIT-compatible).

    The iteration starts from ``E = capu`` and stops once a correction is no
    larger than ``1e-12`` (that correction is not applied) or after
    ``MAX_KEPLER_ITERATIONS`` corrections. It never fails: if the cap is hit
    the last iterate is returned with ``converged=False``.

    Args:
        axn: Eccentricity vector component along the line of nodes.
        ayn: Eccentricity vector component normal to the line of nodes.
        capu: Mean longitude from the node, reduced to ``[0, 2pi)`` [rad].

    Returns:
        :class:`KeplerSolution` with the eccentric longitude and a
        convergence flag.

    Examples:
        ```python
        from satjax.sgp4 import solve_kepler

        solution = solve_kepler(0.01, 0.0, 1.0)
        solution.converged  # Array(True)
        ```
    """
    capu = jnp.asarray(capu)

    def cond(state):
        i, _, converged = state
        return (i < MAX_KEPLER_ITERATIONS) & ~converged

    def body(state):
        i, e, _ = state
        sin_e = jnp.sin(e)
        cos_e = jnp.cos(e)
        epw = (capu - ayn * cos_e + axn * sin_e - e) / (1.0 - axn * cos_e - ayn * sin_e) + e
        converged = jnp.abs(epw - e) <= EPSILON
        return i + 1, jnp.where(converged, e, epw), converged

    iterations, e, converged = jax.lax.while_loop(
        cond, body, (jnp.int32(0), capu, jnp.asarray(False))
    )
    return KeplerSolution(e, converged, iterations)
