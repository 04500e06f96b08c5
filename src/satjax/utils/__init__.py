"""Shared utility functions for satjax.

Provides the angle reduction helpers used by the propagators and the
observation model.
"""

from satjax.utils._angle import fmod2pi, fmodulus, mod2pi, modulus

__all__ = [
    "fmod2pi",
    "fmodulus",
    "mod2pi",
    "modulus",
]
