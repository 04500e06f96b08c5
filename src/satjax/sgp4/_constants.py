"""
Lunar-solar and resonance constants for the SDP4 deep-space model.

Values are those of Spacetrack Report #3 as carried by the legacy
``predict`` family of trackers.
"""

# Solar perturbation terms
ZCOSGS = 1.945905e-1
ZSINGS = -9.8088458e-1
ZCOSIS = 9.1744867e-1
ZSINIS = 3.9785416e-1
ZNS = 1.19459e-5
C1SS = 2.9864797e-6
ZES = 1.675e-2

# Lunar perturbation terms
ZNL = 1.5835218e-4
C1L = 4.7968065e-7
ZEL = 5.490e-2

# Half-day resonance (12 h orbits)
ROOT22 = 1.7891679e-6
ROOT32 = 3.7393792e-7
ROOT44 = 7.3636953e-9
ROOT52 = 1.1428639e-7
ROOT54 = 2.1765803e-9
G22 = 5.7686396
G32 = 9.5240898e-1
G44 = 1.8014998
G52 = 1.0508330
G54 = 4.4108898

# Synchronous resonance (24 h orbits)
Q22 = 1.7891679e-6
Q31 = 2.1460748e-6
Q33 = 2.2123015e-7
FASX2 = 0.13130908
FASX4 = 2.8843198
FASX6 = 0.37448087

# Earth rotation rate [rad/min]
THDT = 4.3752691e-3

# Resonance integrator steps [min] and half step squared [min^2]
STEPP = 720.0
STEPN = -720.0
STEP2 = 259200.0

# Mean motion bands [rad/min] selecting the resonance terms
SYNCHRONOUS_BAND = (0.0034906585, 0.0052359877)
HALF_DAY_BAND = (0.00826, 0.00924)

# Below this inclination [rad] the Lyddane form of the periodics is used
LYDDANE_INCLINATION = 0.2

# Below this inclination [rad] the lunar-solar node rate is suppressed
SMALL_INCLINATION = 5.2359877e-2

# Eccentricity threshold of the half-day resonance
HALF_DAY_MIN_ECCENTRICITY = 0.5
