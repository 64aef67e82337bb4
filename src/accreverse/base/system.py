import astropy.units as u
import numpy as np
import pandas as pd


class System:
    """
    Class for a single generated system. Holds the evaluated star, the planets
    ordered by semi-major axis and the RNG seed that produced them.

    protoplanet_count is the number of grown bodies handed to the collision
    resolver in serial accretion, re-accreted merger products included. Seeds
    that collected no dust are not counted, nor are the survivors of batch
    accretion when they are first coalesced.
    """

    def __init__(
        self, star=None, planets=None, name="", seed=0, protoplanet_count=0
    ) -> None:
        self.star = star
        self.planets = planets if planets is not None else []
        self.name = name
        self.seed = seed
        self.protoplanet_count = protoplanet_count
        if self.planets:
            self.planet_cleanup()

        self.origin = "Accrete"

    def __repr__(self):
        star_type = self.star.stellar_class if self.star is not None else "None"
        return (
            f"{self.name}\tType:{star_type}\tseed:{self.seed}\t"
            f"protoplanets:{self.protoplanet_count}\n\n"
            f"Planets:\n{self.get_p_df()}"
        )

    def __len__(self):
        return len(self.planets)

    def __iter__(self):
        return iter(self.planets)

    def planet_cleanup(self):
        self.pInds = np.arange(len(self.planets))
        # Sort the planets in the system by semi-major axis
        a_vals = [planet.sma for planet in self.planets]
        self.planets = [self.planets[i] for i in np.argsort(a_vals, kind="stable")]
        self.pInds = self.pInds[np.argsort(a_vals, kind="stable")]

    def getpattr(self, attr):
        # Return array of all planet's attribute value, e.g. all semi-major
        # axis values
        if not self.planets:
            return []
        if isinstance(getattr(self.planets[0], attr), u.Quantity):
            return [getattr(planet, attr).value for planet in self.planets] * getattr(
                self.planets[0], attr
            ).unit
        else:
            return [getattr(planet, attr) for planet in self.planets]

    def get_p_df(self):
        patts = [
            "name",
            "a",
            "e",
            "inc",
            "W",
            "w",
            "M0",
            "T",
            "mass",
            "radius",
            "density",
            "surface_temperature",
            "surface_pressure",
            "earth_similarity",
        ]
        p_df = pd.DataFrame()
        for att in patts:
            pattr = self.getpattr(att)
            if isinstance(pattr, u.Quantity):
                p_df[att] = pattr.value
            else:
                p_df[att] = pattr
        p_df["type"] = [planet.type.label for planet in self.planets]
        return p_df

    def get_planets_by_type(self, planet_type):
        return [planet for planet in self.planets if planet.type == planet_type]

    @property
    def total_planet_mass(self):
        """
        Combined mass of all planets in solar masses
        """
        return sum(planet.total_mass for planet in self.planets)
