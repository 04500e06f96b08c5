"""
Observation and pass prediction.

This module turns a propagated :class:`~satjax.sgp4.Satellite` into what a
tracking station needs: single observations (:class:`SatPos`) with look
angles, ground track and eclipse state; pass windows (:class:`SatPassTime`)
with AOS/LOS, time of closest approach and pole crossings; Doppler-shifted
frequencies; and the footprint range circle.
"""

from satjax.prediction._doppler import downlink_frequency, uplink_frequency
from satjax.prediction._footprint import footprint_diameter, range_circle
from satjax.prediction._observation import observe
from satjax.prediction._predictor import (
    COARSE_STEP,
    FINE_STEP,
    MEDIUM_STEP,
    MIN_SEARCH_SPAN,
    SEARCH_ORBITS,
    PassPredictor,
    SatelliteNotVisibleError,
    pole_passed,
)
from satjax.prediction._types import PolePassed, SatPassTime, SatPos

__all__ = [
    # Types
    "SatPos",
    "SatPassTime",
    "PolePassed",
    "SatelliteNotVisibleError",
    # Observation
    "observe",
    "range_circle",
    "footprint_diameter",
    # Doppler
    "downlink_frequency",
    "uplink_frequency",
    # Pass search
    "PassPredictor",
    "pole_passed",
    "COARSE_STEP",
    "MEDIUM_STEP",
    "FINE_STEP",
    "MIN_SEARCH_SPAN",
    "SEARCH_ORBITS",
]
