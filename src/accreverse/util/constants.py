"""
Physical and empirical constants used by the accretion and evaluation code.

Values are kept exactly as tuned by the Accrete/StarGen lineage rather than
replaced with astropy's CODATA values, since the empirical fits (radius,
greenhouse, volatile inventory) depend on them.
"""

import math

# Unit conversions
AU_PER_KM = 6.6845871222684454959959533702106e-9
KM_PER_AU = 1.0 / AU_PER_KM
CM_PER_KM = 1.0e5
KM_PER_CM = 1.0e-5
CM_PER_M = 100.0
M_PER_CM = 0.01
DAYS_PER_YEAR = 365.256
HOURS_PER_DAY = 23.9344696
SECONDS_PER_HOUR = 3600.0
YEARS_PER_SECOND = 1.0 / (SECONDS_PER_HOUR * 24.0 * DAYS_PER_YEAR)
BAR_PER_MILLIBAR = 0.001
MB_PER_MMHG = 1013.25 / 760.0
KELVIN_TO_CELSIUS = -273.15

# Gravitation and gases (cgs unless noted)
GRAVITY_CONSTANT = 6.672e-8
MOLAR_GAS_CONSTANT = 8314.41
GAS_RETENTION_THRESHOLD = 5.0
ESCAPE_TO_RMS_VELOCITY = 1.0 / GAS_RETENTION_THRESHOLD
ACCELERATION_IN_GEES = 1.0 / 9.807

# Kothari equation of state
K_A1 = 6.485e12
K_A2 = 4.0032e-8
K_B = 5.71e12

# Solar references
SOLAR_MASS_IN_GRAMS = 1.989e33
SOLAR_RADIUS_KM = 695700.0
SOLAR_MASS_TO_EARTH_MASS = 332775.64
SOLAR_MASS_TO_JOVIAN_MASS = 1047.0

# Earth references
EARTH_MASS_IN_GRAMS = 5.977e27
EARTH_RADIUS_KM = 6378.0
EARTH_DENSITY = 5.52
EARTH_ESCAPE_VELOCITY = 11186.0
EARTH_AVERAGE_TEMPERATURE = 287.15
EARTH_EFFECTIVE_TEMPERATURE = 250.0
EARTH_EXOSPHERE_TEMPERATURE = 1273.0
EARTH_AXIAL_TILT = 23.4
EARTH_HYDROSPHERE = 0.708
EARTH_SURFACE_PRESSURE = 1013.25
ATM_PER_MB = 1.0 / EARTH_SURFACE_PRESSURE
EARTH_PARTIAL_PRESSURE_OXYGEN = EARTH_SURFACE_PRESSURE * 0.2095
EARTH_WATER_MASS_PER_KM2 = 3.83e15
EARTH_CONVECTION_FACTOR = 0.43
CHANGE_IN_EARTH_ANGULAR_VELOCITY = -1.3e-15
FREEZING_POINT_WATER = 273.15

# Albedos
ALBEDO_CLOUD = 0.52
ALBEDO_EARTH = 0.3
ALBEDO_GAS_GIANT = 0.492
THREE_SIGMA_ALBEDO_GAS_GIANT = 0.1185
ALBEDO_ICE = 0.7
ALBEDO_ICE_AIRLESS = 0.4
ALBEDO_ROCK = 0.15
ALBEDO_ROCK_AIRLESS = 0.07
ALBEDO_WATER = 0.04
GREENHOUSE_TRIGGER_ALBEDO = 0.20

# Molecular weights
WEIGHT_MOLECULAR_HYDROGEN = 2.0
WEIGHT_HELIUM = 4.0
WEIGHT_WATER_VAPOR = 18.0
WEIGHT_MOLECULAR_NITROGEN = 28.0

# Classification thresholds
ASTEROID_MASS_LIMIT = 0.001  # Earth masses
BROWN_DWARF_TRANSITION = 13.0  # Jovian masses
ICE_GIANT_TRANSITION = 0.414  # Jovian masses
ROCKY_TRANSITION = 2.04 / SOLAR_MASS_TO_EARTH_MASS  # Solar masses
GASEOUS_PLANET_THRESHOLD = 0.05
ICE_PLANET_THRESHOLD = 1.0e-6

# Accretion
CRITICAL_LIMIT_B = 1.2e-5
DUST_TO_GAS_RATIO_K = 50.0
DUST_DENSITY_ALPHA = 5.0
DUST_DENSITY_N = 3.0
CONVERGENCE_FRACTION = 1.0e-4
ECCENTRICITY_COEFFICIENT = 0.077
BODE_PROGRESSION = 1.7275
BODE_A = 0.4162
BODE_B = 2.025
BODE_BETA = 0.9879
ORBITAL_DOMINANCE_K = 807.0

# Surface conditions
CLOUD_COVERAGE_FACTOR = 1.839e-8
J = 1.46e-19
Q2_36 = 0.0698
MAX_CONVERGENCE_ITERATIONS = 25
CONVERGENCE_TOLERANCE = 0.25

TWO_PI = 2.0 * math.pi
