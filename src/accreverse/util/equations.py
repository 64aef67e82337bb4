"""
Stateless physical formulas for accretion and planetary evaluation.

Masses are in solar masses, distances in AU, radii in km, and velocities in
m/s unless a docstring says otherwise.
"""

import math

from . import constants as c
from .misc import lerp

# [rocky zone 1, rocky zone 2, rocky zone 3, gas zone 1, gas zone 2, gas zone 3]
ATOMIC_WEIGHT = (15.0, 10.0, 10.0, 9.5, 2.47, 7.0)
ATOMIC_NUMBER = (8.0, 5.0, 5.0, 4.5, 2.0, 4.0)

# Largest argument math.exp accepts without overflowing
_MAX_EXPONENT = 709.0


def luminosity(mass):
    """
    Main sequence luminosity from stellar mass (both solar units)
    """
    if mass < 1.0:
        n = 1.75 * (mass - 0.1) + 3.325
    else:
        n = 0.5 * (2.0 - mass) + 4.4
    return mass**n


def critical_limit(sma, eccentricity, stellar_luminosity):
    """
    Minimum mass a protoplanet needs before it can hold on to gas
    Args:
        sma (float):
            Semi-major axis in AU
        eccentricity (float):
            Orbital eccentricity, [0, 1)
        stellar_luminosity (float):
            Luminosity of the star in solar units
    Returns:
        float: Critical mass in solar masses
    """
    perihelion = sma - sma * eccentricity
    term = perihelion * math.sqrt(stellar_luminosity)
    return c.CRITICAL_LIMIT_B * term**-0.75


def effect_limit_scalar(mass):
    """
    Reduced-mass softening factor (m / (1 + m))^(1/4) for gravitational reach
    """
    return (mass / (1.0 + mass)) ** 0.25


def kothari_radius(mass, sma, gas_giant, material_zone):
    """
    Radius from the Kothari (1936) equation of state, as used by Fogg 1985.

    The composition parameters are blended across the three material zones.
    Rocky bodies use the first three table entries, gas giants the last three.
    Args:
        mass (float):
            Mass in solar masses
        sma (float):
            Semi-major axis in AU. Only the material zone depends on it.
        gas_giant (bool):
            Use the gaseous composition table
        material_zone (float):
            Continuous zone value in [1, 3], see Star.get_material_zone
    Returns:
        float: Radius in km
    """
    zone_index = 0 if material_zone < 2.0 else 1
    # Zone 3.0 exactly has interpolant 0 and so takes the zone II values
    interpolant = material_zone - math.floor(material_zone)
    if gas_giant:
        zone_index += 3

    atomic_weight = lerp(
        interpolant, ATOMIC_WEIGHT[zone_index], ATOMIC_WEIGHT[zone_index + 1]
    )
    atomic_number = lerp(
        interpolant, ATOMIC_NUMBER[zone_index], ATOMIC_NUMBER[zone_index + 1]
    )
    za = atomic_weight * atomic_number

    radius = (2.0 * c.K_B * c.SOLAR_MASS_IN_GRAMS ** (1.0 / 3.0)) / (
        c.K_A1 * za ** (1.0 / 3.0)
    )

    denominator = (
        c.K_A2
        * atomic_weight ** (4.0 / 3.0)
        * c.SOLAR_MASS_IN_GRAMS ** (2.0 / 3.0)
        * mass ** (2.0 / 3.0)
    )
    denominator /= c.K_A1 * atomic_number**2
    denominator += 1.0

    radius /= denominator
    return radius * mass ** (1.0 / 3.0) * c.KM_PER_CM


def volume_density(mass, radius):
    """
    Bulk density in g/cc from mass (solar masses) and radius (km)
    """
    volume = 4.0 * math.pi * (radius * c.CM_PER_KM) ** 3 / 3.0
    return mass * c.SOLAR_MASS_IN_GRAMS / volume


def radius_from_density(mass, density):
    """
    Inverse of volume_density, returns km
    """
    volume = mass * c.SOLAR_MASS_IN_GRAMS / density
    return (3.0 * volume / (4.0 * math.pi)) ** (1.0 / 3.0) * c.KM_PER_CM


def escape_velocity(mass, radius):
    """
    Escape velocity in m/s for a body of mass (solar masses) and radius (km)
    """
    return c.M_PER_CM * math.sqrt(
        2.0 * c.GRAVITY_CONSTANT * mass * c.SOLAR_MASS_IN_GRAMS / (radius * c.CM_PER_KM)
    )


def surface_acceleration(mass, radius):
    """
    Surface gravitational acceleration in m/s^2
    """
    return (
        c.GRAVITY_CONSTANT
        * (mass * c.SOLAR_MASS_IN_GRAMS)
        / (radius * c.CM_PER_KM) ** 2
        * c.M_PER_CM
    )


def period(distance, mass1, mass2):
    """
    Keplerian orbital period in days
    Args:
        distance (float):
            Separation in AU
        mass1 (float):
            Mass of one body in solar masses
        mass2 (float):
            Mass of the other body in solar masses
    Returns:
        float: Period in Earth days
    """
    period_years = math.sqrt(distance**3 / (mass1 + mass2))
    return period_years * c.DAYS_PER_YEAR


def rms_velocity(molecular_weight, exosphere_temperature):
    """
    Root-mean-square thermal velocity of a molecule, in m/s
    """
    return math.sqrt(
        3.0 * c.MOLAR_GAS_CONSTANT * exosphere_temperature / molecular_weight
    )


def orbital_dominance(mass, sma):
    """
    Stern-Levison style dominance parameter. Values above 1 mean the body has
    cleared its orbital neighbourhood (Earth ~810, Ceres ~0.04).
    """
    return c.ORBITAL_DOMINANCE_K * mass * c.SOLAR_MASS_TO_EARTH_MASS * sma ** (-9.0 / 8.0)


def molecular_limit(escape_velocity, exosphere_temperature):
    """
    Smallest molecular weight retained when the escape velocity is
    GAS_RETENTION_THRESHOLD times the RMS velocity
    """
    return (3.0 * c.MOLAR_GAS_CONSTANT * exosphere_temperature) / (
        escape_velocity / c.GAS_RETENTION_THRESHOLD
    ) ** 2


def gas_life(molecular_weight, exosphere_temperature, acceleration, radius):
    """
    Time for a gas species to escape the atmosphere (Jeans escape)
    Args:
        molecular_weight (float):
            Molecular weight of the gas
        exosphere_temperature (float):
            Exosphere temperature in K
        acceleration (float):
            Surface acceleration in m/s^2
        radius (float):
            Planet radius in km
    Returns:
        float: Gas lifetime in years, inf when effectively permanent
    """
    v = rms_velocity(molecular_weight, exosphere_temperature) * c.CM_PER_M
    g = acceleration * c.CM_PER_M
    r = radius * c.CM_PER_KM

    exponent = 3.0 * g * r / v**2
    if exponent > _MAX_EXPONENT:
        return math.inf
    t = v**3 / (2.0 * g**2 * r) * math.exp(exponent)
    return t * c.YEARS_PER_SECOND


def minimum_molecular_weight(
    escape_velocity, exosphere_temperature, acceleration, radius, age
):
    """
    Lightest molecular weight whose gas life is about the age of the system.

    Starts from the molecular limit, brackets the answer by halving or
    doubling, then bisects down to 0.1.
    """

    def life(weight):
        return gas_life(weight, exosphere_temperature, acceleration, radius)

    molecular_weight = molecular_limit(escape_velocity, exosphere_temperature)
    previous_weight = molecular_weight
    lifetime = life(molecular_weight)

    if lifetime > age:
        while lifetime > age:
            previous_weight = molecular_weight
            molecular_weight *= 0.5
            lifetime = life(molecular_weight)
    else:
        while lifetime < age:
            previous_weight = molecular_weight
            molecular_weight *= 2.0
            lifetime = life(molecular_weight)
        previous_weight, molecular_weight = molecular_weight, previous_weight

    while previous_weight - molecular_weight > 0.1:
        mid_weight = (previous_weight + molecular_weight) * 0.5
        if life(mid_weight) < age:
            molecular_weight = mid_weight
        else:
            previous_weight = mid_weight

    return (previous_weight + molecular_weight) * 0.5


def boiling_point(surface_pressure):
    """
    Boiling point of water in K for a surface pressure in mb (Fogg eq. 21)
    """
    surface_pressure_bars = surface_pressure * c.BAR_PER_MILLIBAR
    return 1.0 / (math.log(surface_pressure_bars) / -5050.5 + 1.0 / 373.0)


def bode_sequence(n, a, b, alpha, beta):
    """
    Blagg (1913) formulation of the Titius-Bode law
    Args:
        n (int):
            Ordinal of the orbit, 0 is the reference orbit
        a (float):
            Scale factor A in AU
        b (float):
            Offset B
        alpha (float):
            Phase alpha in radians
        beta (float):
            Phase step beta in radians
    Returns:
        float: Semi-major axis in AU
    """
    theta = alpha + n * beta
    f = 0.249 + 0.86 * (
        math.cos(theta) / (3.0 - math.cos(2.0 * theta))
        + 1.0 / (6.0 - 4.0 * math.cos(theta - math.pi / 6.0))
    )
    return a * (b + f) * c.BODE_PROGRESSION**n
