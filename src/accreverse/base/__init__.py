__all__ = [
    "AtmosphereComponent",
    "Disk",
    "DustBand",
    "OrbitalZone",
    "Planet",
    "PlanetType",
    "Star",
    "StarClass",
    "System",
    "Universe",
]

from .disk import Disk, DustBand
from .planet import AtmosphereComponent, Planet, PlanetType
from .star import OrbitalZone, Star, StarClass
from .system import System
from .universe import Universe
