"""
Protoplanet seeding strategies.

Each strategy returns a list of (semi-major axis, eccentricity) pairs. The
generator turns them into protoplanets of the configured seed mass and
injects them into the disk in list order.
"""

import logging

from .util import constants as c
from .util.equations import bode_sequence

logger = logging.getLogger(__name__)

__all__ = ["bode_sequence", "bode_seeds", "explicit_seeds", "random_seeds"]

MAX_SEED_ECCENTRICITY = 0.9


def explicit_seeds(ctx, seeds):
    """
    Caller supplied seeds. An eccentricity outside [0, 0.9] is replaced by a
    random one.
    Args:
        ctx (GenerationContext):
            Run context, for the random eccentricities
        seeds (list):
            (semi-major axis in AU, eccentricity) pairs
    Returns:
        list: (sma, eccentricity) pairs in the order given
    """
    resolved = []
    for sma, eccentricity in seeds:
        if not 0.0 <= eccentricity <= MAX_SEED_ECCENTRICITY:
            eccentricity = ctx.eccentricity()
        resolved.append((float(sma), float(eccentricity)))
    return resolved


def bode_seeds(ctx, protoplanet_zone):
    """
    Seeds placed on a randomised Titius-Bode progression.

    The reference orbit sits near the ecosphere. Orbits are added
    inwards and outwards from it, one step at a time, until both directions
    have left the protoplanet zone. All but the first and last seed are then
    shuffled so the accretion order does not simply follow the progression.
    Args:
        ctx (GenerationContext):
            Run context holding the evaluated star
        protoplanet_zone (tuple):
            (inner, outer) edge of the zone where protoplanets form, AU
    Returns:
        list: (sma, eccentricity) pairs
    """
    a = c.BODE_A * ctx.star.ecosphere * ctx.near(1.0, 0.04)
    b = c.BODE_B * ctx.near(1.0, 0.04)
    alpha = ctx.two_pi()
    beta = c.BODE_BETA

    seeds = [(bode_sequence(0, a, b, alpha, beta), ctx.eccentricity())]

    n = 1
    added = True
    while added:
        added = False

        sma = bode_sequence(-n, a, b, alpha, beta)
        eccentricity = ctx.eccentricity()
        if sma >= protoplanet_zone[0]:
            seeds.append((sma, eccentricity))
            added = True

        sma = bode_sequence(n, a, b, alpha, beta)
        eccentricity = ctx.eccentricity()
        if sma <= protoplanet_zone[1]:
            seeds.append((sma, eccentricity))
            added = True

        n += 1

    i = 1
    while i < len(seeds) - 1:
        j = ctx.integer(1, len(seeds) - 1)
        if j != i:
            seeds[i], seeds[j] = seeds[j], seeds[i]
        i += 1

    logger.debug("Generated %d Bode seeds", len(seeds))
    return seeds


def random_seeds(ctx, protoplanet_zone, count):
    """
    count seeds placed uniformly across the protoplanet zone
    """
    return [random_seed(ctx, protoplanet_zone) for _ in range(count)]


def random_seed(ctx, protoplanet_zone):
    sma = ctx.uniform(protoplanet_zone[0], protoplanet_zone[1])
    return sma, ctx.eccentricity()
