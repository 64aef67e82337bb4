"""
Accretion engine.

A run places protoplanetary seeds into the star's dust disk one at a time.
Each seed grows by sweeping dust (and, once past its critical mass, gas)
until its growth stalls, clears the lanes it swept, and is then either
merged with an existing planet whose orbit it reaches or inserted as a new
planet. Seeding continues until no dust is left in the protoplanet zone, and
the surviving planets are finally evaluated.
"""

import logging
import math

import numpy as np

from . import seeds as seeding
from .base.disk import Disk
from .base.planet import Planet
from .base.star import Star
from .base.system import System
from .config import Config
from .context import GenerationContext
from .util import constants as c
from .util.equations import critical_limit, effect_limit_scalar
from .util.misc import roman_numeral

logger = logging.getLogger(__name__)

MIN_RANDOM_STAR_MASS = 0.59
MAX_RANDOM_STAR_MASS = 1.30


class Protoplanet:
    """
    A body that is still accreting. Masses are in solar masses, radii in AU.
    """

    __slots__ = (
        "sma",
        "eccentricity",
        "mass",
        "dust_mass",
        "gas_mass",
        "critical_mass",
        "inner_effect",
        "outer_effect",
        "active",
    )

    def __init__(self, sma, eccentricity, mass, dust_mass=None, gas_mass=0.0):
        self.sma = sma
        self.eccentricity = eccentricity
        self.mass = mass
        self.dust_mass = mass if dust_mass is None else dust_mass
        self.gas_mass = gas_mass
        self.critical_mass = 0.0
        self.inner_effect = 0.0
        self.outer_effect = 0.0
        self.active = True

    def __repr__(self):
        return (
            f"{type(self).__name__}(sma={self.sma:.4f}, e={self.eccentricity:.4f}, "
            f"mass={self.mass:.4e})"
        )

    def to_planet(self):
        return Planet(
            {
                "sma": self.sma,
                "eccentricity": self.eccentricity,
                "dust_mass": self.dust_mass,
                "gas_mass": self.gas_mass,
            }
        )


class Generator:
    """
    Drives planetary system generation.

    A generator can be reused. Every call to generate() builds a fresh disk,
    planet list and random stream, so runs are independent of each other.
    """

    def __init__(self, config=None, console=None):
        """
        Args:
            config (Config or dict):
                Run configuration, defaults when None
            console (callable):
                Optional sink that receives newline-terminated diagnostics
        """
        self.config = config if isinstance(config, Config) else Config(config)
        self.console = console
        self._moon_notice_sent = False

        self.ctx = None
        self.disk = None
        self.planets = []
        self.protoplanet_count = 0
        self.injected_count = 0

    def __repr__(self):
        return f"{type(self).__name__} object\n{self.config}"

    def generate(self, star=None, name=""):
        """
        Generate one planetary system.

        Args:
            star (Star):
                Central star. When None a star is picked from the configured
                stellar mass, or at random.
            name (str):
                System name, used to name the planets
        Returns:
            System:
                Star, evaluated planets ordered by semi-major axis, the seed
                used and the number of grown protoplanets coalesced
        """
        config = self.config
        seed = config.resolve_seed()
        rng = np.random.default_rng(seed)

        if star is None:
            if config.generate_random_star:
                mass = float(rng.uniform(MIN_RANDOM_STAR_MASS, MAX_RANDOM_STAR_MASS))
            else:
                mass = config.resolve_stellar_mass(rng)
            star = Star.from_mass(mass, name=name)
        star.evaluate(rng)

        ctx = GenerationContext(config, star, rng, self.console)
        self.ctx = ctx
        self.planets = []
        self.protoplanet_count = 0
        self.injected_count = 0
        self.report_ignored_options()

        protoplanet_zone = star.protoplanet_zone
        if config.outer_planet_limit > 0.0:
            protoplanet_zone = (
                protoplanet_zone[0],
                min(protoplanet_zone[1], config.outer_planet_limit),
            )
        self.disk = Disk(
            star.dust_zone,
            protoplanet_zone,
            star.mass_solar,
            dust_density=config.dust_density,
            cloud_eccentricity=config.cloud_eccentricity,
        )
        ctx.narrate(
            f"Generating around {star.stellar_class} star of "
            f"{star.mass_solar:.3f} solar masses with seed {seed}"
        )

        if config.protoplanet_seeds:
            initial_seeds = seeding.explicit_seeds(ctx, config.protoplanet_seeds)
        elif config.generate_bode_seeds:
            initial_seeds = seeding.bode_seeds(ctx, protoplanet_zone)
        else:
            initial_seeds = []

        if config.batch_accretion:
            self.accrete_batch(initial_seeds)
        else:
            for sma, eccentricity in initial_seeds:
                self.inject_seed(sma, eccentricity)
        self.consume_remaining_dust()

        self.finalize_planets(name or star.name)
        for planet in self.planets:
            planet.evaluate(ctx)

        if config.verbose_logging:
            ctx.narrate(f"Final dust bands:\n{self.disk.get_band_df()}")

        return System(
            star=star,
            planets=self.planets,
            name=name or star.name,
            seed=seed,
            protoplanet_count=self.protoplanet_count,
        )

    def report_ignored_options(self):
        config = self.config
        if self._moon_notice_sent:
            return
        if config.generate_moons or config.generate_moons_on_collision:
            self.ctx.report("Moon generation is not supported; moon options ignored")
            self._moon_notice_sent = True

    def new_protoplanet(self, sma, eccentricity):
        self.injected_count += 1
        return Protoplanet(sma, eccentricity, self.config.protoplanet_seed_mass)

    def in_protoplanet_zone(self, sma):
        inner, outer = self.disk.protoplanet_zone
        return inner <= sma <= outer

    def inject_seed(self, sma, eccentricity):
        """
        Grow a protoplanet from a seed if it lies in the protoplanet zone and
        dust remains there
        """
        if not (self.in_protoplanet_zone(sma) and self.disk.dust_remains):
            self.ctx.narrate(
                f"Discarding seed at {sma:.4f} AU: outside the protoplanet zone "
                "or no dust remains"
            )
            return
        self.ctx.narrate(f"Injecting seed at {sma:.4f} AU, e = {eccentricity:.4f}")
        self.accrete_dust(self.new_protoplanet(sma, eccentricity))

    def consume_remaining_dust(self):
        """
        Inject random protoplanets until the protoplanet zone runs out of dust
        """
        ctx = self.ctx
        while self.disk.dust_remains:
            if self.injected_count >= self.config.max_protoplanets:
                ctx.report(
                    f"Stopped seeding after {self.injected_count} protoplanets "
                    "with dust remaining in the disk",
                    level=logging.WARNING,
                )
                break
            sma, eccentricity = seeding.random_seed(ctx, self.disk.protoplanet_zone)
            self.accrete_dust(self.new_protoplanet(sma, eccentricity))

    def update_effect_limits(self, protoplanet, mass):
        protoplanet.inner_effect, protoplanet.outer_effect = self.disk.effect_limits(
            protoplanet.sma, protoplanet.eccentricity, mass
        )

    def accrete_dust(self, protoplanet):
        """
        Grow a protoplanet until its sweep stops gaining mass, clear the
        swept lanes and hand it to the collision resolver.

        Each pass re-sweeps the whole effect range at the mass reached so far.
        Growth stops once a pass adds less than CONVERGENCE_FRACTION of the
        previous pass.
        """
        disk = self.disk
        protoplanet.critical_mass = critical_limit(
            protoplanet.sma, protoplanet.eccentricity, self.ctx.star.luminosity_solar
        )

        added = dust_added = gas_added = 0.0
        while True:
            self.update_effect_limits(protoplanet, protoplanet.mass + added)
            previous = added
            added, dust_added, gas_added = disk.collect_dust(
                protoplanet.mass + added, protoplanet
            )
            if not (added > 0.0 and added - previous >= c.CONVERGENCE_FRACTION * previous):
                break

        if added > 0.0:
            protoplanet.mass += added
            protoplanet.dust_mass += dust_added
            protoplanet.gas_mass += gas_added
            self.update_effect_limits(protoplanet, protoplanet.mass)
            disk.update_lanes(protoplanet)

        if protoplanet.mass > self.config.protoplanet_seed_mass:
            self.protoplanet_count += 1
            self.coalesce(protoplanet)
        else:
            self.ctx.narrate(
                f"Protoplanet at {protoplanet.sma:.4f} AU collected no dust, discarded"
            )

    def sweep_once(self, protoplanet):
        """
        Single sweep at the current mass, used by batch accretion.

        A body retires when a sweep collects nothing. It also retires once a
        sweep adds less than CONVERGENCE_FRACTION of its mass. That second
        stop is a round budget: without it a large population keeps taking
        rounds of vanishing growth before the last body reaches zero.
        Returns:
            bool: True while the protoplanet is still growing
        """
        disk = self.disk
        self.update_effect_limits(protoplanet, protoplanet.mass)
        added, dust_added, gas_added = disk.collect_dust(protoplanet.mass, protoplanet)
        if added <= 0.0:
            protoplanet.active = False
            return False

        protoplanet.mass += added
        protoplanet.dust_mass += dust_added
        protoplanet.gas_mass += gas_added
        self.update_effect_limits(protoplanet, protoplanet.mass)
        disk.update_lanes(protoplanet)
        if added < c.CONVERGENCE_FRACTION * (protoplanet.mass - added):
            protoplanet.active = False
        return protoplanet.active

    def accrete_batch(self, initial_seeds):
        """
        Grow a whole population of protoplanets together.

        The seeds plus protoplanet_count random protoplanets each take one
        sweep per round until none of them grows. Survivors are then merged
        or inserted in creation order.
        """
        ctx = self.ctx
        candidates = [
            (sma, e) for sma, e in initial_seeds if self.in_protoplanet_zone(sma)
        ]
        candidates += seeding.random_seeds(
            ctx, self.disk.protoplanet_zone, self.config.protoplanet_count
        )
        protoplanets = [self.new_protoplanet(sma, e) for sma, e in candidates]
        for protoplanet in protoplanets:
            protoplanet.critical_mass = critical_limit(
                protoplanet.sma, protoplanet.eccentricity, ctx.star.luminosity_solar
            )

        rounds = 0
        growing = True
        while growing:
            growing = False
            for protoplanet in protoplanets:
                if protoplanet.active and self.sweep_once(protoplanet):
                    growing = True
            rounds += 1
        ctx.narrate(f"Batch accretion of {len(protoplanets)} bodies took {rounds} rounds")

        for protoplanet in protoplanets:
            if protoplanet.mass > self.config.protoplanet_seed_mass:
                self.coalesce(protoplanet)

    def coalesce(self, protoplanet):
        """
        Merge a grown protoplanet into the first planet whose orbit it
        reaches, or insert it as a new planet keeping the list ordered by
        semi-major axis.

        A merged body is removed from the list and re-accreted at its new
        orbit, which may cascade into further collisions.
        """
        ctx = self.ctx
        pp_scalar = effect_limit_scalar(protoplanet.mass)
        pp_sma = protoplanet.sma
        pp_e = protoplanet.eccentricity

        for index, planet in enumerate(self.planets):
            pl_scalar = effect_limit_scalar(planet.total_mass)
            diff = planet.sma - pp_sma
            if diff > 0.0:
                dist1 = pp_sma * (1.0 + pp_e) * (1.0 + pp_scalar) - pp_sma
                dist2 = planet.sma - planet.sma * (1.0 - planet.eccentricity) * (
                    1.0 - pl_scalar
                )
            else:
                dist1 = pp_sma - pp_sma * (1.0 - pp_e) * (1.0 - pp_scalar)
                dist2 = planet.sma * (1.0 + planet.eccentricity) * (
                    1.0 + pl_scalar
                ) - planet.sma

            if abs(diff) <= abs(dist1) or abs(diff) <= abs(dist2):
                merged = self.merge(planet, protoplanet)
                del self.planets[index]
                ctx.narrate(
                    f"Protoplanet collision: {pp_sma:.4f} AU and {planet.sma:.4f} AU "
                    f"merged at {merged.sma:.4f} AU"
                )
                self.accrete_dust(merged)
                return

        new_planet = protoplanet.to_planet()
        index = 0
        while index < len(self.planets) and self.planets[index].sma < pp_sma:
            index += 1
        self.planets.insert(index, new_planet)

    def merge(self, planet, protoplanet):
        """
        Protoplanet for the body formed when protoplanet hits planet.

        Semi-major axis is the mass-weighted harmonic mean of the two orbits.
        Eccentricity follows from combining the bodies' orbital angular
        momenta, with the protoplanet's term under an extra square root.
        """
        m_q = planet.total_mass
        a_q = planet.sma
        e_q = planet.eccentricity
        m_p = protoplanet.mass
        a_p = protoplanet.sma
        e_p = protoplanet.eccentricity

        new_sma = (m_q + m_p) / (m_q / a_q + m_p / a_p)
        term = (
            m_q * math.sqrt(a_q) * math.sqrt(1.0 - e_q**2)
            + m_p * math.sqrt(a_p) * math.sqrt(math.sqrt(1.0 - e_p**2))
        ) / ((m_q + m_p) * math.sqrt(new_sma))
        e_squared = max(0.0, 1.0 - term**2)
        if e_squared >= 1.0:
            self.ctx.report(
                f"Collision at {new_sma:.4f} AU produced an unbound orbit, "
                "using a circular one",
                level=logging.WARNING,
            )
            e_squared = 0.0

        return Protoplanet(
            new_sma,
            math.sqrt(e_squared),
            m_q + m_p,
            dust_mass=planet.dust_mass + protoplanet.dust_mass,
            gas_mass=planet.gas_mass + protoplanet.gas_mass,
        )

    def finalize_planets(self, system_name):
        """
        Draw the orientation of each orbit and name the planets in order
        """
        ctx = self.ctx
        config = self.config
        for number, planet in enumerate(self.planets, start=1):
            planet.inclination = (
                abs(ctx.near(config.inclination_mean, 3.0 * config.inclination_std))
                % 180.0
            )
            planet.longitude_ascending_node = ctx.two_pi()
            planet.argument_periapsis = ctx.two_pi()
            planet.mean_anomaly = ctx.two_pi()
            numeral = roman_numeral(number) if number < 100 else str(number)
            planet.name = f"{system_name} {numeral}".strip()


def generate_system(config=None, star=None, name="", console=None, **overrides):
    """
    Convenience wrapper around Generator.generate

        system = generate_system(seed=42, stellar_mass=1.0, name="Sol")
    """
    if overrides:
        config = Config(config, **overrides)
    return Generator(config, console=console).generate(star=star, name=name)
