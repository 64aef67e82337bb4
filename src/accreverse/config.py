import logging
import time

from .util.misc import clamp

logger = logging.getLogger(__name__)

MIN_RANDOM_STELLAR_MASS = 0.6
MAX_RANDOM_STELLAR_MASS = 1.3
MIN_STELLAR_MASS = 0.57
MAX_STELLAR_MASS = 2.18


class Config:
    """
    Knobs for a single generation run.

    Built from a dictionary the same way planets and stars are, so a config
    can come straight out of a YAML/JSON file:

        config = Config({"seed": 42, "generate_bode_seeds": True})

    Keyword overrides win over dictionary entries. Unknown keys raise
    KeyError so typos do not silently fall back to defaults.
    """

    defaults = {
        # 0 means "derive a seed from the clock"
        "seed": 0,
        # <= 0 means "pick a random stellar mass"
        "stellar_mass": 0.0,
        "cloud_eccentricity": 0.2,
        "dust_density": 2.0e-3,
        "protoplanet_seed_mass": 1.0e-15,
        "density_variation": 0.025,
        "inclination_mean": 5.57,
        "inclination_std": 1.23,
        "protoplanet_count": 20,
        "generate_bode_seeds": False,
        "generate_moons": False,
        "generate_moons_on_collision": False,
        "generate_random_star": False,
        "verbose_logging": False,
        "compute_gases": True,
        "random_axial_tilt": True,
        # List of (semi-major axis, eccentricity) pairs
        "protoplanet_seeds": (),
        # Caps the outer edge of the protoplanet zone when > 0
        "outer_planet_limit": 0.0,
        "batch_accretion": False,
        "max_protoplanets": 100000,
    }

    def __init__(self, config_dict=None, **overrides):
        if isinstance(config_dict, Config):
            config_dict = config_dict.to_dict()
        params = dict(self.defaults)
        for source in (config_dict or {}), overrides:
            for key, value in source.items():
                if key not in self.defaults:
                    raise KeyError(f"Unknown configuration option '{key}'")
                params[key] = value
        for att, value in params.items():
            setattr(self, att, value)
        self.protoplanet_seeds = [
            (float(sma), float(e)) for sma, e in self.protoplanet_seeds
        ]
        self.clamp()

    def __repr__(self):
        opts = ", ".join(f"{key}={getattr(self, key)!r}" for key in self.defaults)
        return f"{type(self).__name__}({opts})"

    def __eq__(self, other):
        if not isinstance(other, Config):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def clamp(self):
        """
        Force the numeric options into their supported ranges
        """
        self.cloud_eccentricity = clamp(float(self.cloud_eccentricity), 0.0, 0.9)
        self.density_variation = clamp(float(self.density_variation), 0.0, 0.1)
        self.dust_density = max(0.0, float(self.dust_density))
        self.protoplanet_seed_mass = float(self.protoplanet_seed_mass)
        self.inclination_mean = abs(float(self.inclination_mean)) % 180.0
        self.inclination_std = abs(float(self.inclination_std))
        self.protoplanet_count = max(0, int(self.protoplanet_count))
        self.max_protoplanets = max(1, int(self.max_protoplanets))
        self.seed = int(self.seed)
        self.stellar_mass = float(self.stellar_mass)
        if self.stellar_mass > 0.0:
            self.stellar_mass = clamp(
                self.stellar_mass, MIN_STELLAR_MASS, MAX_STELLAR_MASS
            )

    def resolve_seed(self):
        """
        The RNG seed for a run. A configured seed of 0 is replaced by a
        non-zero 64-bit value mixed from the clock.
        """
        if self.seed != 0:
            return self.seed
        seed = (6364136223846793005 * time.time_ns() + 1) & 0xFFFFFFFFFFFFFFFF
        seed = seed or 1
        logger.debug("Derived seed %d from the clock", seed)
        return seed

    def resolve_stellar_mass(self, rng):
        """
        Stellar mass for a run, drawing one from rng when none was configured
        """
        if self.stellar_mass > 0.0:
            return self.stellar_mass
        mass = rng.uniform(MIN_RANDOM_STELLAR_MASS, MAX_RANDOM_STELLAR_MASS)
        return clamp(mass, MIN_STELLAR_MASS, MAX_STELLAR_MASS)

    def to_dict(self):
        params = {key: getattr(self, key) for key in self.defaults}
        params["protoplanet_seeds"] = list(self.protoplanet_seeds)
        return params
