__all__ = [
    "clamp",
    "lerp",
    "inverse_lerp",
    "roman_numeral",
    "Gas",
    "GasProperties",
    "StellarInfo",
    "gas_properties",
    "stellar_info",
    "stellar_table",
]

from .misc import clamp, inverse_lerp, lerp, roman_numeral
from .tables import (
    Gas,
    GasProperties,
    StellarInfo,
    gas_properties,
    stellar_info,
    stellar_table,
)
