"""
Per-run generation context.

A context bundles everything a single generation run shares between the
accretion engine and the planet evaluator: the run configuration, the
evaluated star, the seeded random stream and the diagnostic sink. Every
random draw of the simulation goes through it, so two runs with the same
seed and configuration see the same sequence of numbers.
"""

import logging
import math

import numpy as np

from .util import constants as c

logger = logging.getLogger(__name__)


class GenerationContext:
    """
    Immutable view of a run. The only state that changes is the position of
    the random stream.
    """

    __slots__ = ("config", "star", "rng", "console")

    def __init__(self, config, star, rng=None, console=None):
        """
        Args:
            config (Config):
                Run configuration
            star (Star):
                Evaluated central star
            rng (np.random.Generator or int):
                Random stream or a seed to create one from
            console (callable):
                Optional sink that receives newline-terminated diagnostics
        """
        if rng is None or isinstance(rng, (int, np.integer)):
            rng = np.random.default_rng(rng)
        object.__setattr__(self, "config", config)
        object.__setattr__(self, "star", star)
        object.__setattr__(self, "rng", rng)
        object.__setattr__(self, "console", console)

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is read-only")

    def __repr__(self):
        return f"{type(self).__name__} object\nstar: {self.star.stellar_class}"

    def report(self, message, level=logging.INFO):
        """
        Send a diagnostic to the log and, when registered, the console sink
        """
        logger.log(level, message)
        if self.console is not None:
            self.console(message if message.endswith("\n") else message + "\n")

    def narrate(self, message):
        """
        Report only when verbose logging was requested
        """
        if self.config.verbose_logging:
            self.report(message, level=logging.DEBUG)

    # Random draws
    def uniform(self, lower, upper):
        return float(self.rng.uniform(lower, upper))

    def integer(self, lower, upper):
        """
        Uniform integer in the closed range [lower, upper]
        """
        return int(self.rng.integers(lower, upper, endpoint=True))

    def near(self, mean, three_sigma):
        """
        Gaussian draw where three_sigma is three standard deviations
        """
        return float(self.rng.normal(mean, three_sigma / 3.0))

    def about(self, center, variation):
        """
        center scaled by a uniform factor in [1 - variation, 1 + variation]
        """
        return center * self.uniform(1.0 - variation, 1.0 + variation)

    def eccentricity(self):
        """
        Accrete eccentricity distribution, between 0 and about 0.2
        """
        return 1.0 - self.uniform(1.0 / 16.0, 1.0) ** c.ECCENTRICITY_COEFFICIENT

    def two_pi(self):
        return self.uniform(0.0, c.TWO_PI)

    def tilt(self, sma, median_tilt=c.EARTH_AXIAL_TILT):
        """
        Axial tilt in degrees, growing slowly with distance from the star
        """
        tilt = math.remainder(sma**0.2 * self.about(median_tilt, 0.4), 360.0)
        if tilt > 180.0:
            tilt = 360.0 - tilt
        return tilt
