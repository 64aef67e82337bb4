import logging
import math
from collections import namedtuple
from enum import Enum

import astropy.units as u
import pandas as pd

from ..util import constants as c
from ..util import equations as eq
from ..util.misc import clamp, lerp
from ..util.tables import Gas, gas_properties

logger = logging.getLogger(__name__)

AtmosphereComponent = namedtuple("AtmosphereComponent", ["gas", "fraction"])


class PlanetType(Enum):
    """
    Broad classification of an evaluated body
    """

    UNKNOWN = "Unknown"
    ROCKY = "Rocky"
    ASTEROID_BELT = "AsteroidBelt"
    DWARF_PLANET = "DwarfPlanet"
    ICE_PLANET = "IcePlanet"
    TERRESTRIAL = "Terrestrial"
    OCEAN = "Ocean"
    GASEOUS = "Gaseous"
    ICE_GIANT = "IceGiant"
    GAS_GIANT = "GasGiant"
    BROWN_DWARF = "BrownDwarf"

    @property
    def label(self):
        return _PLANET_TYPE_LABELS[self]

    @property
    def is_gaseous(self):
        return self in (
            PlanetType.GASEOUS,
            PlanetType.ICE_GIANT,
            PlanetType.GAS_GIANT,
            PlanetType.BROWN_DWARF,
        )


_PLANET_TYPE_LABELS = {
    PlanetType.UNKNOWN: "Unknown",
    PlanetType.ROCKY: "Rocky",
    PlanetType.ASTEROID_BELT: "Asteroid Belt",
    PlanetType.DWARF_PLANET: "Dwarf Planet",
    PlanetType.ICE_PLANET: "Ice Planet",
    PlanetType.TERRESTRIAL: "Terrestrial",
    PlanetType.OCEAN: "Ocean",
    PlanetType.GASEOUS: "Gaseous",
    PlanetType.ICE_GIANT: "Ice Giant",
    PlanetType.GAS_GIANT: "Gas Giant",
    PlanetType.BROWN_DWARF: "Brown Dwarf",
}

# (lower, upper, optical depth) by retained molecular weight
_OPACITY_BY_WEIGHT = (
    (0.0, 10.0, 3.0),
    (10.0, 20.0, 2.34),
    (20.0, 30.0, 1.0),
    (30.0, 45.0, 0.15),
    (45.0, 100.0, 0.05),
)
# (surface pressure in atmospheres, multiplier), highest first
_OPACITY_BY_PRESSURE = (
    (70.0, 8.333),
    (50.0, 6.666),
    (30.0, 3.333),
    (10.0, 2.0),
    (5.0, 1.5),
)

# Earth Similarity Index weights
ESI_RADIUS_WEIGHT = 0.57
ESI_DENSITY_WEIGHT = 1.07
ESI_ESCAPE_VELOCITY_WEIGHT = 0.70
ESI_TEMPERATURE_WEIGHT = 5.58
ESI_OXYGEN_WEIGHT = 2.5

# Volatile inventory proportionality constants for material zones I, II, III
VOLATILE_PROPORTION_BY_ZONE = (100000.0, 75000.0, 250.0)
VOLATILE_STANDARD_DIVISOR = 100.0


def opacity(min_molecular_weight, surface_pressure):
    """
    Unitless optical depth used by the greenhouse rise.

    A step function of the lightest retained molecular weight, scaled up in
    steps for dense atmospheres.
    Args:
        min_molecular_weight (float):
            Lightest molecular weight the body retains
        surface_pressure (float):
            Surface pressure in mb
    Returns:
        float: Optical depth
    """
    optical_depth = 0.0
    for lower, upper, depth in _OPACITY_BY_WEIGHT:
        if lower <= min_molecular_weight < upper:
            optical_depth += depth

    for atmospheres, multiplier in _OPACITY_BY_PRESSURE:
        if surface_pressure >= atmospheres * c.EARTH_SURFACE_PRESSURE:
            optical_depth *= multiplier
            break
    return optical_depth


def lim(x):
    return x / math.sqrt(math.sqrt(1.0 + x**4))


def soft(value, upper, lower):
    """
    Smoothly squash value into the envelope [lower, upper]
    """
    dv = value - lower
    dm = upper - lower
    return (lim(2.0 * dv / dm - 1.0) + 1.0) * 0.5 * dm + lower


def similarity(value, reference, weight, n_weights):
    return (1.0 - abs(value - reference) / (value + reference)) ** (weight / n_weights)


class Planet:
    """
    A body produced by accretion.

    Only the orbit and the dust/gas mass split are set at creation. Every
    other attribute is derived by evaluate(), which needs an evaluated star.
    Units: sma in AU, masses in solar masses, radius in km, temperatures in
    K, pressures in mb, day length in hours, period in days.
    """

    def __init__(self, planet_dict, star=None):
        self.name = ""
        self.sma = 0.0
        self.eccentricity = 0.0
        self.dust_mass = 0.0
        self.gas_mass = 0.0
        self.inclination = 0.0
        self.longitude_ascending_node = 0.0
        self.argument_periapsis = 0.0
        self.mean_anomaly = 0.0
        for att, value in planet_dict.items():
            setattr(self, att, value)
        self.total_mass = self.dust_mass + self.gas_mass
        self.star = star

        self.evaluated = False
        self.type = PlanetType.UNKNOWN
        self.orbital_zone = None
        self.period_days = 0.0
        self.periapsis = 0.0
        self.apoapsis = 0.0
        self.orbital_dominance = 0.0
        self.axial_tilt = 0.0
        self.day_length = 0.0
        self.resonant = False
        self.spin_resonance_factor = 0.0

        self.radius_km = 0.0
        self.density = 0.0
        self.escape_velocity = 0.0
        self.surface_acceleration = 0.0

        self.exosphere_temperature = 0.0
        self.rms_velocity = 0.0
        self.min_molecular_weight = 0.0
        self.runaway_greenhouse = False
        self.volatile_gas_inventory = 0.0
        self.surface_pressure = 0.0
        self.boiling_point = 0.0
        self.atmosphere = []

        self.albedo = 0.0
        self.surface_temperature = 0.0
        self.high_temperature = 0.0
        self.low_temperature = 0.0
        self.max_temperature = 0.0
        self.min_temperature = 0.0

        self.hydrosphere = 0.0
        self.cloud_coverage = 0.0
        self.ice_coverage = 0.0
        self.earth_similarity = 0.0
        self.convergence_iterations = 0

    def __repr__(self):
        """
        Make dataframe with planet attributes
        """
        params = self.dump_params()
        res = {}
        for key, val in params.items():
            if isinstance(val, u.Quantity):
                res[key] = val.value
            else:
                res[key] = val
        p_df = pd.DataFrame(res, index=[0])
        return f"{type(self).__name__} object\n{p_df}"

    def dump_params(self):
        params = {
            "name": self.name,
            "type": self.type.label,
            "a": self.a,
            "e": self.e,
            "mass": self.mass,
            "radius": self.radius,
            "inc": self.inc,
            "W": self.W,
            "w": self.w,
            "M0": self.M0,
            "T": self.T,
            "T_surf": self.surface_temperature,
            "P_surf": self.surface_pressure,
            "ESI": self.earth_similarity,
        }
        return params

    # Quantity accessors
    @property
    def a(self):
        return self.sma * u.AU

    @property
    def e(self):
        return self.eccentricity

    @property
    def mass(self):
        return self.total_mass * u.M_sun

    @property
    def radius(self):
        return self.radius_km * u.km

    @property
    def inc(self):
        return self.inclination * u.deg

    @property
    def W(self):
        return self.longitude_ascending_node * u.rad

    @property
    def w(self):
        return self.argument_periapsis * u.rad

    @property
    def M0(self):
        return self.mean_anomaly * u.rad

    @property
    def T(self):
        return self.period_days * u.d

    @property
    def surface_gravity(self):
        """
        Surface gravity in Earth gravities
        """
        return self.surface_acceleration * c.ACCELERATION_IN_GEES

    @property
    def is_gaseous(self):
        return self.type.is_gaseous

    @property
    def gas_fraction(self):
        if self.total_mass <= 0.0:
            return 0.0
        return self.gas_mass / self.total_mass

    @property
    def earth_masses(self):
        return self.total_mass * c.SOLAR_MASS_TO_EARTH_MASS

    def evaluate(self, ctx):
        """
        Derive every physical property of the body and classify it.

        Args:
            ctx (GenerationContext):
                Supplies the evaluated star, the configuration and the random
                stream. Diagnostics go through ctx.report.
        """
        star = ctx.star
        self.star = star
        config = ctx.config

        self.period_days = eq.period(self.sma, self.total_mass, star.mass_solar)
        self.periapsis = self.sma * (1.0 - self.eccentricity)
        self.apoapsis = self.sma * (1.0 + self.eccentricity)
        self.orbital_dominance = eq.orbital_dominance(self.total_mass, self.sma)
        self.orbital_zone = star.get_orbital_zone(self.sma)
        self.axial_tilt = ctx.tilt(self.sma) if config.random_axial_tilt else 0.0

        ecosphere_ratio = self.sma / star.ecosphere
        self.exosphere_temperature = c.EARTH_EXOSPHERE_TEMPERATURE / ecosphere_ratio**2
        self.rms_velocity = eq.rms_velocity(
            c.WEIGHT_MOLECULAR_NITROGEN, self.exosphere_temperature
        )

        critical_mass = eq.critical_limit(
            self.sma, self.eccentricity, star.luminosity_solar
        )
        if (
            self.dust_mass > critical_mass
            and self.gas_fraction > c.GASEOUS_PLANET_THRESHOLD
        ):
            self.derive_size(gas_giant=True)
            retains_helium = self.min_molecular_weight <= c.WEIGHT_HELIUM
            massive = self.total_mass > c.ROCKY_TRANSITION
            if retains_helium and massive:
                self.type = PlanetType.GASEOUS
            else:
                self.type = PlanetType.ROCKY
                ctx.report(
                    "Gaseous planet demoted to rocky: "
                    f"{'sufficient' if retains_helium else 'inadequate'} molecular "
                    f"retention and {'sufficient' if massive else 'inadequate'} mass"
                )
        else:
            self.type = PlanetType.ROCKY

        if self.type == PlanetType.ROCKY:
            self.derive_size(gas_giant=False)
            if (
                self.gas_fraction > c.ICE_PLANET_THRESHOLD
                and self.total_mass > c.ROCKY_TRANSITION
            ):
                ctx.report(
                    "Re-evaluating rocky planet as gas dwarf: dust mass "
                    f"{'critical' if self.dust_mass > critical_mass else 'sub-critical'}"
                    f", gas ratio {self.gas_fraction:.3f}"
                )
                if self.lose_light_gases(ctx):
                    self.derive_size(gas_giant=False)

                self.runaway_greenhouse = (
                    self.effective_temperature(c.GREENHOUSE_TRIGGER_ALBEDO)
                    > c.FREEZING_POINT_WATER
                )
                self.calculate_surface_pressure(ctx)
                if self.surface_pressure > 6000.0 and self.min_molecular_weight <= 2.0:
                    self.type = PlanetType.GASEOUS
                    self.runaway_greenhouse = False

        self.density = eq.volume_density(self.total_mass, self.radius_km)
        self.calculate_day_length()

        if self.type == PlanetType.GASEOUS:
            self.classify_gaseous(ctx)
        else:
            self.evaluate_rocky(ctx)

        self.evaluated = True

    def derive_size(self, gas_giant):
        """
        Radius, escape velocity, surface acceleration and the lightest
        retained molecular weight for the current mass
        """
        zone = self.star.get_material_zone(self.sma)
        self.radius_km = eq.kothari_radius(self.total_mass, self.sma, gas_giant, zone)
        self.escape_velocity = eq.escape_velocity(self.total_mass, self.radius_km)
        self.surface_acceleration = eq.surface_acceleration(
            self.total_mass, self.radius_km
        )
        self.min_molecular_weight = eq.minimum_molecular_weight(
            self.escape_velocity,
            self.exosphere_temperature,
            self.surface_acceleration,
            self.radius_km,
            self.star.age_years,
        )

    def gas_life(self, molecular_weight):
        return eq.gas_life(
            molecular_weight,
            self.exosphere_temperature,
            self.surface_acceleration,
            self.radius_km,
        )

    def lose_light_gases(self, ctx):
        """
        Remove the hydrogen and helium that escaped over the star's age.

        Hydrogen is taken as 85% of the gas envelope and helium as nearly all
        of the rest. Each species loses 1 - exp(-age / life) of its mass when
        its gas life is shorter than the age.
        Returns:
            bool: True if any mass was lost
        """
        age = self.star.age_years
        lost_mass = False

        h2_mass = self.gas_mass * 0.85
        h2_life = self.gas_life(c.WEIGHT_MOLECULAR_HYDROGEN)
        if h2_life < age:
            h2_loss = (1.0 - math.exp(-age / h2_life)) * h2_mass
            self.gas_mass -= h2_loss
            self.total_mass -= h2_loss
            self.check_gas_mass(ctx)
            lost_mass = True

        he_mass = (self.gas_mass - h2_mass) * 0.999
        he_life = self.gas_life(c.WEIGHT_HELIUM)
        if he_life < age and he_mass > 0.0:
            he_loss = (1.0 - math.exp(-age / he_life)) * he_mass
            self.gas_mass -= he_loss
            self.total_mass -= he_loss
            self.check_gas_mass(ctx)
            lost_mass = True

        return lost_mass

    def check_gas_mass(self, ctx):
        assert self.gas_mass >= 0.0, "negative gas mass after atmospheric loss"
        if self.gas_mass < 0.0:
            ctx.report(
                f"Clamped negative gas mass {self.gas_mass:.3e} to zero",
                level=logging.WARNING,
            )
            self.total_mass -= self.gas_mass
            self.gas_mass = 0.0

    def classify_gaseous(self, ctx):
        # Chen & Kipping 2017 transitions
        jovian_mass = self.total_mass * c.SOLAR_MASS_TO_JOVIAN_MASS
        if jovian_mass > c.BROWN_DWARF_TRANSITION:
            self.type = PlanetType.BROWN_DWARF
        elif jovian_mass > c.ICE_GIANT_TRANSITION:
            self.type = PlanetType.GAS_GIANT
        else:
            self.type = PlanetType.ICE_GIANT
            if self.total_mass < c.ROCKY_TRANSITION:
                ctx.report(
                    f"Ice giant found with M(Earth) = {self.earth_masses:.2f} "
                    "(floor should be 1.45 - 2.70)"
                )
        self.albedo = ctx.near(c.ALBEDO_GAS_GIANT, c.THREE_SIGMA_ALBEDO_GAS_GIANT)
        self.earth_similarity = 0.0

    def evaluate_rocky(self, ctx):
        config = ctx.config

        self.runaway_greenhouse = (
            self.effective_temperature(c.GREENHOUSE_TRIGGER_ALBEDO)
            > c.FREEZING_POINT_WATER
        )
        self.calculate_surface_pressure(ctx)
        self.iterate_surface_conditions(ctx)

        pre_score = self.calculate_earth_similarity()
        if (
            config.compute_gases
            and self.surface_pressure > 0.0
            and pre_score > 0.5
            and self.max_temperature >= c.FREEZING_POINT_WATER
            and self.min_temperature <= self.boiling_point
        ):
            self.calculate_gases()

        if config.density_variation > 0.0:
            self.density *= ctx.about(1.0, config.density_variation)
            self.radius_km = eq.radius_from_density(self.total_mass, self.density)
            self.escape_velocity = eq.escape_velocity(self.total_mass, self.radius_km)
            self.surface_acceleration = eq.surface_acceleration(
                self.total_mass, self.radius_km
            )

        self.classify_rocky()
        self.earth_similarity = self.calculate_earth_similarity()

    def classify_rocky(self):
        if (
            self.earth_masses < c.ASTEROID_MASS_LIMIT
            and self.surface_pressure < 1.0
        ):
            self.type = PlanetType.ASTEROID_BELT
        elif self.orbital_dominance < 1.0:
            self.type = PlanetType.DWARF_PLANET
        elif self.surface_pressure < 1.0:
            self.type = PlanetType.ROCKY
        elif self.hydrosphere > 0.95:
            self.type = PlanetType.OCEAN
        elif (
            self.ice_coverage > 0.95
            or self.surface_temperature < c.FREEZING_POINT_WATER
        ):
            self.type = PlanetType.ICE_PLANET
        elif self.hydrosphere > 0.05:
            self.type = PlanetType.TERRESTRIAL
        else:
            self.type = PlanetType.ROCKY

    def effective_temperature(self, albedo):
        """
        Blackbody equilibrium temperature in K for the given albedo
        """
        return (
            math.sqrt(self.star.ecosphere / self.sma)
            * ((1.0 - albedo) / (1.0 - c.ALBEDO_EARTH)) ** 0.25
            * c.EARTH_EFFECTIVE_TEMPERATURE
        )

    def greenhouse_rise(self, effective_temperature):
        """
        Temperature increase from the greenhouse effect, in K (Fogg eq. 20,
        with the pressure exponent tuned to match Venus)
        """
        optical_depth = opacity(self.min_molecular_weight, self.surface_pressure)
        convection_factor = (
            c.EARTH_CONVECTION_FACTOR
            * (self.surface_pressure * c.ATM_PER_MB) ** 0.4
        )
        rise = (
            ((1.0 + 0.75 * optical_depth) ** 0.25 - 1.0)
            * effective_temperature
            * convection_factor
        )
        return max(0.0, rise)

    def volatile_inventory(self, ctx):
        """
        Unitless volatile gas inventory (Fogg eq. 17)
        """
        if self.escape_velocity / self.rms_velocity < c.GAS_RETENTION_THRESHOLD:
            return 0.0

        zone = self.star.get_material_zone(self.sma)
        if zone < 2.0:
            proportion = lerp(
                zone - 1.0,
                VOLATILE_PROPORTION_BY_ZONE[0],
                VOLATILE_PROPORTION_BY_ZONE[1],
            )
        else:
            proportion = lerp(
                zone - 2.0,
                VOLATILE_PROPORTION_BY_ZONE[1],
                VOLATILE_PROPORTION_BY_ZONE[2],
            )
        center = proportion * self.earth_masses / self.star.mass_solar

        if self.runaway_greenhouse or self.gas_fraction > c.ICE_PLANET_THRESHOLD:
            return ctx.about(center, 0.2)
        return ctx.about(center / VOLATILE_STANDARD_DIVISOR, 0.2)

    def calculate_surface_pressure(self, ctx):
        """
        Updates the volatile inventory, surface pressure and boiling point
        """
        self.volatile_gas_inventory = self.volatile_inventory(ctx)
        if self.volatile_gas_inventory > 0.0:
            radius_ratio = c.EARTH_RADIUS_KM / self.radius_km
            self.surface_pressure = (
                self.volatile_gas_inventory
                * self.surface_gravity
                * c.EARTH_SURFACE_PRESSURE
                * c.BAR_PER_MILLIBAR
                / radius_ratio**2
            )
            self.boiling_point = eq.boiling_point(self.surface_pressure)
        else:
            self.surface_pressure = 0.0
            self.boiling_point = 0.0

    def calculate_day_length(self):
        """
        Length of the local day in hours (Fogg eq. 12 and 13).

        Combines the initial spin of the body with tidal braking by the star
        over its age. A body whose day would reach its year is locked into
        spin resonance.
        """
        mass_grams = self.total_mass * c.SOLAR_MASS_IN_GRAMS
        year_hours = self.period_days * c.HOURS_PER_DAY

        k2 = 0.24 if self.is_gaseous else 0.33
        base_angular_velocity = math.sqrt(
            2.0 * c.J * mass_grams / (k2 * (self.radius_km * c.CM_PER_KM) ** 2)
        )
        change_in_angular_velocity = (
            c.CHANGE_IN_EARTH_ANGULAR_VELOCITY
            * (self.density / c.EARTH_DENSITY)
            * (self.radius_km / c.EARTH_RADIUS_KM)
            * (c.EARTH_MASS_IN_GRAMS / mass_grams)
            * self.star.mass_solar**2
            / self.sma**6
        )
        angular_velocity = (
            base_angular_velocity + change_in_angular_velocity * self.star.age_years
        )

        if angular_velocity <= 0.0:
            self.day_length = year_hours
        else:
            self.day_length = c.TWO_PI / (c.SECONDS_PER_HOUR * angular_velocity)

        self.spin_resonance_factor = 0.0
        self.resonant = False
        if self.day_length >= year_hours:
            self.resonant = True
            if self.eccentricity > 0.1:
                self.spin_resonance_factor = (1.0 - self.eccentricity) / (
                    1.0 + self.eccentricity
                )
            else:
                self.spin_resonance_factor = 1.0
            self.day_length = self.spin_resonance_factor * year_hours

    def calculate_albedo(self, ctx):
        """
        Mean albedo from the current surface coverage, each surface type's
        albedo drawn near its published value
        """
        water = self.hydrosphere
        ice = self.ice_coverage
        rock = max(0.0, 1.0 - water - ice)

        components = sum(1 for fraction in (water, ice, rock) if fraction > 0.0)
        assert components > 0, "surface has no water, ice or rock"
        cloud_adjustment = self.cloud_coverage / max(components, 1)

        water = max(0.0, water - cloud_adjustment)
        ice = max(0.0, ice - cloud_adjustment)
        rock = max(0.0, rock - cloud_adjustment)

        if self.surface_pressure == 0.0:
            water_albedo = 0.0
            ice_albedo = ctx.near(c.ALBEDO_ICE_AIRLESS, c.ALBEDO_ICE_AIRLESS * 0.4)
            rock_albedo = ctx.near(c.ALBEDO_ROCK_AIRLESS, c.ALBEDO_ROCK_AIRLESS * 0.3)
            cloud_albedo = 0.0
        else:
            water_albedo = ctx.near(c.ALBEDO_WATER, c.ALBEDO_WATER * 0.2)
            ice_albedo = ctx.near(c.ALBEDO_ICE, c.ALBEDO_ICE * 0.1)
            rock_albedo = ctx.near(c.ALBEDO_ROCK, c.ALBEDO_ROCK * 0.1)
            cloud_albedo = ctx.near(c.ALBEDO_CLOUD, c.ALBEDO_CLOUD * 0.2)

        albedo = (
            water * water_albedo
            + ice * ice_albedo
            + rock * rock_albedo
            + self.cloud_coverage * cloud_albedo
        )
        return clamp(albedo, 0.0, 1.0)

    def set_temperature_range(self):
        """
        Updates the high, low, max and min temperatures around the mean
        """
        mean = self.surface_temperature
        pressure_bar = self.surface_pressure * c.BAR_PER_MILLIBAR

        max_t = mean + math.sqrt(mean) * 10.0
        min_t = mean / math.sqrt(self.day_length + c.HOURS_PER_DAY)

        pressmod = 1.0 / math.sqrt(1.0 + 20.0 * pressure_bar)
        ppmod = 1.0 / math.sqrt(10.0 + 5.0 * pressure_bar)
        tiltmod = abs(
            math.cos(math.radians(self.axial_tilt)) * (1.0 + self.eccentricity) ** 2
        )
        daymod = 1.0 / (200.0 / self.day_length + 1.0)
        mh = (1.0 + daymod) ** pressmod
        ml = (1.0 - daymod) ** pressmod

        hi = mh * mean
        lo = max(min_t, ml * mean)
        sh = hi + ((100.0 + hi) * tiltmod) ** math.sqrt(ppmod)
        wl = max(0.0, lo - ((150.0 + lo) * tiltmod) ** math.sqrt(ppmod))

        self.high_temperature = soft(hi, max_t, min_t)
        self.low_temperature = soft(lo, max_t, min_t)
        self.max_temperature = soft(sh, max_t, min_t)
        self.min_temperature = soft(wl, max_t, min_t)

    def calculate_surface_conditions(self, ctx, initialize=False):
        """
        One step of the surface condition iteration.

        Water, cloud and ice coverage follow Fogg eq. 22-24. On the first
        step the new values are taken outright, afterwards they are blended
        two parts old to one part new.
        """
        if initialize:
            self.albedo = c.ALBEDO_EARTH
            effective = self.effective_temperature(self.albedo)
            self.surface_temperature = effective + self.greenhouse_rise(effective)
            self.set_temperature_range()

        if self.runaway_greenhouse and self.max_temperature < self.boiling_point:
            # Too cool for a runaway greenhouse after all
            self.runaway_greenhouse = False
            self.calculate_surface_pressure(ctx)

        new_hydrosphere = min(
            1.0,
            c.EARTH_HYDROSPHERE
            * self.volatile_gas_inventory
            / 1000.0
            * (c.EARTH_RADIUS_KM / self.radius_km) ** 2,
        )

        if self.min_molecular_weight > c.WEIGHT_WATER_VAPOR:
            new_cloud_cover = 0.0
        else:
            surface_area = 4.0 * math.pi * self.radius_km**2
            hydro_mass = new_hydrosphere * surface_area * c.EARTH_WATER_MASS_PER_KM2
            water_vapor = (1.0e-8 * hydro_mass) * math.exp(
                c.Q2_36 * (self.surface_temperature - c.EARTH_AVERAGE_TEMPERATURE)
            )
            new_cloud_cover = min(
                1.0, c.CLOUD_COVERAGE_FACTOR * water_vapor / surface_area
            )

        new_ice_cover = min(
            1.5 * new_hydrosphere, ((328.0 - self.surface_temperature) / 90.0) ** 5
        )
        new_ice_cover = clamp(new_ice_cover, 0.0, 1.0)

        if new_hydrosphere + new_ice_cover > 1.0:
            new_hydrosphere = 1.0 - new_ice_cover

        if self.runaway_greenhouse and self.surface_pressure > 0.0:
            self.cloud_coverage = 1.0

        tidally_locked = self.resonant or int(self.day_length) == int(
            self.period_days * c.HOURS_PER_DAY
        )
        if (
            not initialize
            and self.high_temperature >= self.boiling_point
            and not tidally_locked
        ):
            # Boil-off
            self.hydrosphere = 0.0
            new_hydrosphere = 0.0
            if self.min_molecular_weight > c.WEIGHT_WATER_VAPOR:
                self.cloud_coverage = 0.0
            else:
                self.cloud_coverage = 1.0

        if self.surface_temperature < c.FREEZING_POINT_WATER - 3.0:
            self.hydrosphere = 0.0
            new_hydrosphere = 0.0

        if initialize:
            self.hydrosphere = new_hydrosphere
            self.cloud_coverage = new_cloud_cover
            self.ice_coverage = new_ice_cover
        else:
            self.hydrosphere = (2.0 * self.hydrosphere + new_hydrosphere) / 3.0
            self.cloud_coverage = (2.0 * self.cloud_coverage + new_cloud_cover) / 3.0
            self.ice_coverage = (2.0 * self.ice_coverage + new_ice_cover) / 3.0
            if self.hydrosphere + self.ice_coverage > 1.0:
                self.hydrosphere = 1.0 - self.ice_coverage

        new_albedo = self.calculate_albedo(ctx)
        if initialize:
            self.albedo = new_albedo
        else:
            self.albedo = (2.0 * self.albedo + new_albedo) / 3.0

        effective = self.effective_temperature(self.albedo)
        new_temperature = effective + self.greenhouse_rise(effective)
        if initialize:
            self.surface_temperature = new_temperature
        else:
            self.surface_temperature = (
                2.0 * self.surface_temperature + new_temperature
            ) / 3.0

        self.set_temperature_range()

    def iterate_surface_conditions(self, ctx):
        """
        Converge the surface temperature, albedo and coverage fractions.

        Stops once the mean temperature moves less than 0.25 K in a step.
        Running out of iterations is reported and the last values are kept.
        Returns:
            bool: True if the conditions converged
        """
        self.calculate_surface_conditions(ctx, initialize=True)

        delta = 0.0
        for iteration in range(1, c.MAX_CONVERGENCE_ITERATIONS + 1):
            previous = self.surface_temperature
            self.calculate_surface_conditions(ctx)
            delta = abs(previous - self.surface_temperature)
            self.convergence_iterations = iteration
            if delta < c.CONVERGENCE_TOLERANCE:
                return True

        ctx.report(
            "Failed to converge planetary conditions in "
            f"{c.MAX_CONVERGENCE_ITERATIONS} iterations; last delta was {delta:f}",
            level=logging.WARNING,
        )
        return False

    def calculate_gases(self):
        """
        Fill in the atmosphere with the gases the body can hold.

        A gas is kept when it stays gaseous above the low temperature and is
        heavy enough not to escape. Its share combines the solar abundance,
        thermal escape over the star's age and a reactivity term. The result
        is normalised and sorted with the most abundant gas first.
        """
        self.atmosphere = []
        if self.surface_pressure <= 0.0:
            return

        pressure = self.surface_pressure * c.BAR_PER_MILLIBAR
        age = self.star.age_years
        age_over_2b = age / 2.0e9
        warm = 270.0 < self.surface_temperature < 400.0

        components = []
        for gas, props in gas_properties().items():
            yp = props.boiling_point / (
                373.0 * (math.log(pressure + 0.001) / -5050.5 + 1.0 / 373.0)
            )
            if not (0.0 <= yp < self.low_temperature):
                continue
            if props.weight < self.min_molecular_weight:
                continue

            vrms = eq.rms_velocity(props.weight, self.exosphere_temperature)
            pvrms = (1.0 / (1.0 + vrms / self.escape_velocity)) ** (age / 1.0e9)
            abundance = props.abundance_solar
            retention = 1.0 / (1.0 + props.reactivity)

            if gas == Gas.ARGON:
                react = 0.15 * age / 4.0e9
            elif gas == Gas.HELIUM:
                abundance *= 0.001 + self.gas_fraction
                react = retention ** (age_over_2b * (0.75 + pressure))
            elif gas == Gas.OXYGEN and age > 2.0e9 and warm:
                react = retention ** (age_over_2b**0.25 * (0.89 + pressure / 4.0))
            elif gas == Gas.CARBON_DIOXIDE and age > 2.0e9 and warm:
                react = retention ** (age_over_2b**0.5 * (0.75 + pressure))
                react *= 1.5
            else:
                react = retention ** (age_over_2b * (0.75 + pressure))

            fraction = abundance * pvrms * react
            if fraction > 0.0:
                components.append(AtmosphereComponent(gas, fraction))

        total = sum(comp.fraction for comp in components)
        self.atmosphere = sorted(
            (AtmosphereComponent(comp.gas, comp.fraction / total) for comp in components),
            key=lambda comp: comp.fraction,
            reverse=True,
        )

    def partial_pressure(self, gas):
        """
        Partial pressure of gas in mb, 0 if it is not in the atmosphere
        """
        for comp in self.atmosphere:
            if comp.gas == gas:
                return self.surface_pressure * comp.fraction
        return 0.0

    def calculate_earth_similarity(self):
        """
        Earth Similarity Index, from 0 (nothing alike) to 1 (Earth).

        Weighted product of radius, density, escape velocity and mean
        temperature ratings, plus the partial pressure of oxygen once the
        body has an atmosphere. Weights from the PHL ESI definition.
        Returns:
            float: ESI in [0, 1]
        """
        if self.is_gaseous or self.type == PlanetType.ASTEROID_BELT:
            return 0.0

        n_weights = 5.0 if self.atmosphere else 4.0
        esi = (
            similarity(self.radius_km, c.EARTH_RADIUS_KM, ESI_RADIUS_WEIGHT, n_weights)
            * similarity(self.density, c.EARTH_DENSITY, ESI_DENSITY_WEIGHT, n_weights)
            * similarity(
                self.escape_velocity,
                c.EARTH_ESCAPE_VELOCITY,
                ESI_ESCAPE_VELOCITY_WEIGHT,
                n_weights,
            )
            * similarity(
                self.surface_temperature,
                c.EARTH_AVERAGE_TEMPERATURE,
                ESI_TEMPERATURE_WEIGHT,
                n_weights,
            )
        )
        if self.atmosphere:
            esi *= similarity(
                self.partial_pressure(Gas.OXYGEN),
                c.EARTH_PARTIAL_PRESSURE_OXYGEN,
                ESI_OXYGEN_WEIGHT,
                n_weights,
            )
        return esi
