"""
SGP4/SDP4 orbit propagator implemented in JAX.

This module provides a JAX-native implementation of the legacy NORAD SGP4
(Simplified General Perturbations 4) near-earth and SDP4 (Simplified
Deep-space Perturbations 4) models, with the WGS '72 constants of the
classic ``predict`` trackers. Coefficients are computed once in Python;
propagation is pure JAX and compiles with ``jax.jit``.
"""

from satjax.sgp4._deep_space import (
    HALF_DAY_RESONANCE,
    NO_RESONANCE,
    SYNCHRONOUS_RESONANCE,
    DeepSpaceParams,
    deep_space_init,
    deep_space_propagate,
    initial_resonance_state,
    integrate_resonance,
)
from satjax.sgp4._elements import check_perigee, create_orbital_elements, recover_mean_motion
from satjax.sgp4._kepler import MAX_KEPLER_ITERATIONS, KeplerSolution, solve_kepler
from satjax.sgp4._propagation import (
    NearEarthParams,
    near_earth_init,
    near_earth_propagate,
    sgp4_propagate,
)
from satjax.sgp4._satellite import Satellite
from satjax.sgp4._tle import compute_checksum, parse_tle, read_tles, validate_tle_line
from satjax.sgp4._types import OrbitalElements, PropagationState, ResonanceState

__all__ = [
    # Types
    "OrbitalElements",
    "PropagationState",
    "ResonanceState",
    "NearEarthParams",
    "DeepSpaceParams",
    "KeplerSolution",
    "Satellite",
    # Constants
    "MAX_KEPLER_ITERATIONS",
    "NO_RESONANCE",
    "SYNCHRONOUS_RESONANCE",
    "HALF_DAY_RESONANCE",
    # TLE Parsing
    "parse_tle",
    "read_tles",
    "compute_checksum",
    "validate_tle_line",
    # Elements
    "create_orbital_elements",
    "recover_mean_motion",
    "check_perigee",
    # Kepler
    "solve_kepler",
    # Propagation (Python-time init)
    "near_earth_init",
    "deep_space_init",
    "initial_resonance_state",
    # Propagation (JAX)
    "near_earth_propagate",
    "deep_space_propagate",
    "integrate_resonance",
    "sgp4_propagate",
]
