"""
The `constants` module defines the numerical constants of the legacy NORAD
SGP4/SDP4 model (WGS '72 geopotential) together with the physical constants
used by the observation and illumination models.

The values are the ones published with Spacetrack Report #3 and carried by
the classic ``predict`` tracking programs, not the modern WGS-84 values.
"""

from math import pi as PI

# Mathematical Constants
"""
Full circle in radians. Units: *rad*
"""
TWO_PI = 2.0 * PI

"""
Quarter circle in radians. Units: *rad*
"""
PI_OVER_TWO = PI / 2.0

"""
Constant to convert degrees to radians (legacy literal). Units: *rad/deg*
"""
DEG2RAD = 1.745329251994330e-2

"""
Constant to convert radians to degrees. Units: *deg/rad*
"""
RAD2DEG = 360.0 / TWO_PI

"""
Two thirds, used throughout the mean-motion recovery.
"""
TWO_THIRDS = 2.0 / 3.0

"""
Convergence threshold shared by the Kepler and geodetic-latitude iterations,
and the horizon test margin. Units: *rad*
"""
EPSILON = 1.0e-12

# Time Constants
"""
Minutes per day. Units: *min/day*
"""
MINS_PER_DAY = 1.44e3

"""
Seconds per day. Units: *s/day*
"""
SECS_PER_DAY = 8.64e4

"""
Julian Date of 1979-12-31 00:00:00 UTC, origin of the legacy day number.
Units: *days*
"""
JD_1979_12_31 = 2444238.5

"""
Julian Date of the J2000.0 epoch. Units: *days*
"""
JD_J2000 = 2451545.0

"""
Julian Date of 1900-01-00 12:00 (origin of the solar ephemeris). Units: *days*
"""
JD_1900 = 2415020.0

"""
Earth rotations per sidereal day. Units: *rev/day*
"""
EARTH_ROTATIONS_PER_SIDERIAL_DAY = 1.00273790934

"""
Earth rotation rate used for the observer velocity. Units: *rad/s*
"""
MFACTOR = 7.292115e-5

# WGS '72 geopotential (SGP4 units: Earth radii and minutes)
"""
Equatorial radius of the Earth. Units: *km*
"""
EARTH_RADIUS_KM = 6.378137e3

"""
Flattening of the Earth ellipsoid. Units: *dimensionless*
"""
FLATTENING_FACTOR = 3.35281066474748e-3

"""
Square root of GM in SGP4 units. Units: *(earth radii)^1.5 / min*
"""
XKE = 7.43669161e-2

"""
Second zonal harmonic (unnormalised).
"""
J2_HARMONIC = 1.0826158e-3

"""
Third zonal harmonic (unnormalised).
"""
J3_HARMONIC = -2.53881e-6

"""
Fourth zonal harmonic (unnormalised).
"""
J4_HARMONIC = -1.65597e-6

"""
0.5 * J2 * ae^2.
"""
CK2 = 5.413079e-4

"""
-0.375 * J4 * ae^4.
"""
CK4 = 6.209887e-7

"""
Atmospheric density parameter s (1 + 78/ae). Units: *earth radii*
"""
S = 1.012229

"""
(q0 - s)^4 density parameter. Units: *earth radii^4*
"""
QOMS2T = 1.880279e-09

"""
Perigee height below which the density parameters are adjusted. Units: *km*
"""
PERIGEE_156_KM = 156.0

# Sun
"""
Solar radius. Units: *km*
"""
SOLAR_RADIUS_KM = 6.96e5

"""
Astronomical Unit. Units: *km*
"""
ASTRONOMICAL_UNIT = 1.49597870691e8

# Radio
"""
Speed of light in vacuum. Units: *m/s*
"""
SPEED_OF_LIGHT = 2.99792458e8
