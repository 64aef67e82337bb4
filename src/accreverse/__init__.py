__all__ = [
    "Config",
    "Generator",
    "GenerationContext",
    "Gas",
    "OrbitalZone",
    "Planet",
    "PlanetType",
    "Protoplanet",
    "Star",
    "StarClass",
    "System",
    "Universe",
    "generate_system",
]

from .base import OrbitalZone, Planet, PlanetType, Star, StarClass, System, Universe
from .config import Config
from .context import GenerationContext
from .generator import Generator, Protoplanet, generate_system
from .util import Gas
