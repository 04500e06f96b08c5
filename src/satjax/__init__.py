"""
satjax is a satellite tracking library implemented in JAX: legacy SGP4/SDP4 propagation, ground station look angles, eclipse state and pass prediction.
"""

from .constants import (
    DEG2RAD,
    RAD2DEG,
    TWO_PI,
    EARTH_RADIUS_KM,
    FLATTENING_FACTOR,
    XKE,
    CK2,
    CK4,
    MFACTOR,
    SOLAR_RADIUS_KM,
    ASTRONOMICAL_UNIT,
    SPEED_OF_LIGHT,
)

from .config import set_dtype, get_dtype

from .time import (
    julian_date_of_year,
    julian_date_of_epoch,
    julian_date_utc,
    gmst_jd,
)

from .utils import mod2pi, modulus

from .coordinates import (
    position_eci_to_geodetic,
    observer_state_eci,
    look_angles,
)

from .illumination import sun_position, eclipse

from .station import GroundStation

from .sgp4 import (
    OrbitalElements,
    Satellite,
    parse_tle,
    read_tles,
)

from .prediction import (
    SatPos,
    SatPassTime,
    PolePassed,
    PassPredictor,
    SatelliteNotVisibleError,
    observe,
)

__all__ = [
    # Constants
    "DEG2RAD",
    "RAD2DEG",
    "TWO_PI",
    "EARTH_RADIUS_KM",
    "FLATTENING_FACTOR",
    "XKE",
    "CK2",
    "CK4",
    "MFACTOR",
    "SOLAR_RADIUS_KM",
    "ASTRONOMICAL_UNIT",
    "SPEED_OF_LIGHT",
    # Config
    "set_dtype",
    "get_dtype",
    # Time
    "julian_date_of_year",
    "julian_date_of_epoch",
    "julian_date_utc",
    "gmst_jd",
    # Utils
    "mod2pi",
    "modulus",
    # Coordinates
    "position_eci_to_geodetic",
    "observer_state_eci",
    "look_angles",
    # Illumination
    "sun_position",
    "eclipse",
    # Station
    "GroundStation",
    # SGP4
    "OrbitalElements",
    "Satellite",
    "parse_tle",
    "read_tles",
    # Prediction
    "SatPos",
    "SatPassTime",
    "PolePassed",
    "PassPredictor",
    "SatelliteNotVisibleError",
    "observe",
]
