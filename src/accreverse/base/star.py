import math
from enum import Enum

import astropy.units as u
import pandas as pd

from ..util.misc import inverse_lerp
from ..util.tables import stellar_info, stellar_table

MINIMUM_STELLAR_AGE = 1.0e9
MAXIMUM_STELLAR_AGE = 6.0e9


class StarClass(Enum):
    """
    Main sequence spectral classes, hottest first
    """

    O_V = "O"
    B_V = "B"
    A_V = "A"
    F_V = "F"
    G_V = "G"
    K_V = "K"
    M_V = "M"


class OrbitalZone(Enum):
    """
    Broad position of an orbit relative to the habitable zone and snow line
    """

    INNER = "Inner"
    HABITABLE = "Habitable"
    MIDDLE = "Middle"
    OUTER = "Outer"

    @property
    def label(self):
        return self.value


class Star:
    """
    A main sequence star defined by spectral class and subtype.

    Everything else (temperature, luminosity, radius, mass and the zones
    around the star) is derived by evaluate() from the stellar table. Mass,
    radius and luminosity are in solar units.
    """

    def __init__(self, star_dict=None):
        star_dict = star_dict or {}
        spectral_class = star_dict.get("spectral_class", StarClass.G_V)
        if not isinstance(spectral_class, StarClass):
            spectral_class = StarClass(str(spectral_class).upper()[0])
        subtype = int(star_dict.get("subtype", 2))
        if subtype < 0 or subtype > 9:
            raise ValueError(f"Stellar subtype must be in [0, 9], got {subtype}")
        if spectral_class == StarClass.O_V and subtype < 3:
            raise ValueError("Class O stars support subtypes 3 to 9 only")

        self.spectral_class = spectral_class
        self.subtype = subtype
        self.name = star_dict.get("name", "")
        self.age_years = float(star_dict.get("age", 0.0))

        self.evaluated = False
        self.temperature_k = 0.0
        self.luminosity_solar = 0.0
        self.radius_solar = 0.0
        self.mass_solar = 0.0
        self.ecosphere = 0.0
        self.snow_line = 0.0
        self.habitable_zone = (0.0, 0.0)
        self.dust_zone = (0.0, 0.0)
        self.protoplanet_zone = (0.0, 0.0)
        self.zone1 = (0.0, 0.0)
        self.zone2 = (0.0, 0.0)
        self.zone3 = (0.0, 0.0)

    @classmethod
    def from_mass(cls, mass, name=""):
        """
        The main sequence star whose tabulated mass best matches mass
        """
        spectral_class, subtype = cls.get_star_type(mass)
        return cls({"spectral_class": spectral_class, "subtype": subtype, "name": name})

    @staticmethod
    def get_star_type(mass):
        """
        Spectral class and subtype with the tabulated mass nearest to mass.

        O0V-O2V are never returned and masses outside the table are clamped
        to O3V or M9V.
        Args:
            mass (float):
                Stellar mass in solar masses
        Returns:
            tuple: (StarClass, subtype)
        """
        table = stellar_table().drop(index=[("O", 0), ("O", 1), ("O", 2)])
        idx = (table["mass"] - mass).abs().idxmin()
        return StarClass(idx[0]), int(idx[1])

    def __repr__(self):
        return f"{type(self).__name__} object\n{self.name} {self.stellar_class}"

    @property
    def stellar_class(self):
        return f"{self.spectral_class.value}{self.subtype}V"

    # Quantity accessors
    @property
    def mass(self):
        return self.mass_solar * u.M_sun

    @property
    def luminosity(self):
        return self.luminosity_solar * u.L_sun

    @property
    def radius(self):
        return self.radius_solar * u.R_sun

    @property
    def effective_temperature(self):
        return self.temperature_k * u.K

    @property
    def age(self):
        return self.age_years * u.yr

    def evaluate(self, rng=None):
        """
        Derive the star's traits from its classification. Calling it again
        once evaluated is a no-op.

        An unset age (0) becomes the midpoint of the allowed range, or a
        uniform draw between 25% and 75% of the maximum age when rng is
        given. A set age is clamped to the allowed range.
        Args:
            rng (np.random.Generator):
                Optional random stream used to pick an age
        """
        if self.evaluated:
            return

        info = stellar_info(self.spectral_class.value, self.subtype)
        self.temperature_k = 10.0**info.log_t
        self.luminosity_solar = 10.0**info.log_l
        self.radius_solar = info.radius
        self.mass_solar = info.mass

        lifespan = 1.0e10 * self.mass_solar / self.luminosity_solar
        maximum_age = min(MAXIMUM_STELLAR_AGE, lifespan)
        if self.age_years <= 0.0:
            fraction = 0.5 if rng is None else float(rng.uniform(0.25, 0.75))
            self.age_years = fraction * maximum_age
        else:
            self.age_years = min(self.age_years, maximum_age)
        self.age_years = max(MINIMUM_STELLAR_AGE, self.age_years)

        sqrt_lum = math.sqrt(self.luminosity_solar)
        cbrt_mass = self.mass_solar ** (1.0 / 3.0)

        self.ecosphere = sqrt_lum
        self.snow_line = 5.0 * sqrt_lum
        self.habitable_zone = (0.95 * sqrt_lum, 1.37 * sqrt_lum)
        self.dust_zone = (0.0, 200.0 * cbrt_mass)
        self.protoplanet_zone = (0.3 * cbrt_mass, 50.0 * cbrt_mass)

        # Material zones from Pollard 1979 by way of Fogg 1985
        self.zone1 = (0.0, 5.0 * sqrt_lum)
        self.zone2 = (4.0 * sqrt_lum, 16.0 * sqrt_lum)
        self.zone3 = (14.0 * sqrt_lum, 200.0 * sqrt_lum)

        self.evaluated = True

    def get_material_zone(self, sma):
        """
        Material zone of an orbit as a continuous value in [1, 3].

        Zone I holds only refractory material, zone II adds volatile ices and
        retains H2/He, zone III holds ices but loses H2/He. Fractional values
        lie in the overlap between two zones.
        """
        if sma < self.zone2[0]:
            return 1.0
        elif sma < self.zone1[1]:
            return 1.0 + inverse_lerp(sma, self.zone2[0], self.zone1[1])
        elif sma < self.zone3[0]:
            return 2.0
        else:
            return 2.0 + inverse_lerp(sma, self.zone3[0], self.zone2[1])

    def get_orbital_zone(self, sma):
        if sma < self.habitable_zone[0]:
            return OrbitalZone.INNER
        elif sma < self.habitable_zone[1]:
            return OrbitalZone.HABITABLE
        elif sma < self.snow_line:
            return OrbitalZone.MIDDLE
        return OrbitalZone.OUTER

    def get_s_df(self):
        """
        Single row dataframe summarising the star
        """
        return pd.DataFrame(
            {
                "class": self.stellar_class,
                "mass": self.mass_solar,
                "luminosity": self.luminosity_solar,
                "radius": self.radius_solar,
                "T_eff": self.temperature_k,
                "age": self.age_years,
                "ecosphere": self.ecosphere,
                "snow_line": self.snow_line,
            },
            index=[0],
        )
