from collections import namedtuple
from enum import Enum
from functools import lru_cache
from importlib.resources import files
from pathlib import Path

import pandas as pd

from .constants import MB_PER_MMHG

StellarInfo = namedtuple("StellarInfo", ["log_t", "log_l", "radius", "mass"])

GasProperties = namedtuple(
    "GasProperties",
    [
        "weight",
        "melting_point",
        "boiling_point",
        "density",
        "abundance_earth",
        "abundance_solar",
        "reactivity",
        "max_ipp",
    ],
)

SPECTRAL_CLASSES = ("O", "B", "A", "F", "G", "K", "M")


class Gas(Enum):
    """
    Atmospheric gas species tracked by the atmosphere synthesis
    """

    HYDROGEN = "hydrogen"
    HELIUM = "helium"
    NITROGEN = "nitrogen"
    OXYGEN = "oxygen"
    NEON = "neon"
    ARGON = "argon"
    KRYPTON = "krypton"
    XENON = "xenon"
    AMMONIA = "ammonia"
    WATER = "water"
    CARBON_DIOXIDE = "carbon_dioxide"
    OZONE = "ozone"
    METHANE = "methane"

    @property
    def label(self):
        return gas_table().loc[self.value, "name"]

    @property
    def symbol(self):
        return gas_table().loc[self.value, "symbol"]

    @property
    def properties(self):
        return gas_properties()[self]


@lru_cache(maxsize=None)
def stellar_table():
    """
    Main sequence properties by spectral class and subtype, hottest first.

    Rows for O0V-O2V are copies of O3V so every (class, subtype) pair exists.
    Returns:
        pd.DataFrame:
            Indexed by (spectral_class, subtype) with columns log_t, log_l,
            radius and mass
    """
    df = pd.read_csv(files("accreverse").joinpath(Path("data", "stellar_info.csv")))
    return df.set_index(["spectral_class", "subtype"])


def stellar_info(spectral_class, subtype):
    """
    Look up one row of the stellar table
    Args:
        spectral_class (str):
            One of O, B, A, F, G, K, M
        subtype (int):
            Subtype in [0, 9]
    Returns:
        StellarInfo: log10 temperature, log10 luminosity, radius and mass
    """
    row = stellar_table().loc[(spectral_class, int(subtype))]
    return StellarInfo(
        float(row["log_t"]), float(row["log_l"]), float(row["radius"]), float(row["mass"])
    )


@lru_cache(maxsize=None)
def gas_table():
    df = pd.read_csv(files("accreverse").joinpath(Path("data", "gases.csv")))
    df["max_ipp"] = df["max_ipp_mmhg"] * MB_PER_MMHG
    return df.set_index("gas")


@lru_cache(maxsize=None)
def gas_properties():
    """
    Mapping of Gas to its GasProperties, in table order
    """
    df = gas_table()
    return {
        gas: GasProperties(*(float(df.loc[gas.value, f]) for f in GasProperties._fields))
        for gas in Gas
    }
