"""
Protoplanetary dust disk.

The disk is an ordered partition of [inner, outer] into contiguous bands.
Each band records whether dust and gas are still available in it. Sweeping a
protoplanet through the disk collects mass from the bands it reaches and then
reclassifies those bands, splitting them at the edges of the swept region.
"""

import logging
import math

import pandas as pd

from ..util import constants as c
from ..util.equations import effect_limit_scalar

logger = logging.getLogger(__name__)


class DustBand:
    """
    One band of the disk, from inner_edge to outer_edge in AU
    """

    __slots__ = ("inner_edge", "outer_edge", "has_dust", "has_gas")

    def __init__(self, inner_edge, outer_edge, has_dust=True, has_gas=True):
        self.inner_edge = inner_edge
        self.outer_edge = outer_edge
        self.has_dust = has_dust
        self.has_gas = has_gas

    def __repr__(self):
        return (
            f"{type(self).__name__}({self.inner_edge:.4f}, {self.outer_edge:.4f}, "
            f"dust={self.has_dust}, gas={self.has_gas})"
        )

    def __eq__(self, other):
        if not isinstance(other, DustBand):
            return NotImplemented
        return (
            self.inner_edge == other.inner_edge
            and self.outer_edge == other.outer_edge
            and self.flags == other.flags
        )

    @property
    def flags(self):
        return (self.has_dust, self.has_gas)

    @property
    def label(self):
        if self.has_dust and self.has_gas:
            return "dust and gas"
        if self.has_dust:
            return "dust"
        if self.has_gas:
            return "gas"
        return "cleared"


class Disk:
    """
    The dust and gas available to a forming planetary system
    """

    def __init__(
        self,
        dust_zone,
        protoplanet_zone,
        stellar_mass,
        dust_density=2.0e-3,
        cloud_eccentricity=0.2,
    ):
        """
        Args:
            dust_zone (tuple):
                (inner, outer) extent of the dust, AU
            protoplanet_zone (tuple):
                (inner, outer) range where protoplanets may form, AU
            stellar_mass (float):
                Mass of the central star in solar masses
            dust_density (float):
                Dust density constant A of Dole 1969
            cloud_eccentricity (float):
                Mean eccentricity of the dust particles
        """
        self.dust_zone = tuple(dust_zone)
        self.protoplanet_zone = tuple(protoplanet_zone)
        self.stellar_mass = stellar_mass
        self.dust_density = dust_density
        self.cloud_eccentricity = cloud_eccentricity

        self.bands = [DustBand(self.dust_zone[0], self.dust_zone[1], True, True)]
        self.dust_remains = self.dust_density > 0.0

    def __repr__(self):
        return f"{type(self).__name__} object\n{self.get_band_df()}"

    def __len__(self):
        return len(self.bands)

    @property
    def extent(self):
        """
        (inner, outer) edge covered by the partition
        """
        return (self.bands[0].inner_edge, self.bands[-1].outer_edge)

    def get_band_df(self):
        return pd.DataFrame(
            {
                "inner": [b.inner_edge for b in self.bands],
                "outer": [b.outer_edge for b in self.bands],
                "dust": [b.has_dust for b in self.bands],
                "gas": [b.has_gas for b in self.bands],
            }
        )

    def effect_limits(self, sma, eccentricity, mass):
        """
        Inner and outer radius a body can sweep dust from
        Args:
            sma (float):
                Semi-major axis in AU
            eccentricity (float):
                Orbital eccentricity
            mass (float):
                Mass in solar masses
        Returns:
            tuple: (inner, outer) effect radius in AU
        """
        scalar = effect_limit_scalar(mass)
        inner = sma * (1.0 - eccentricity) * (1.0 - scalar) / (1.0 + self.cloud_eccentricity)
        outer = sma * (1.0 + eccentricity) * (1.0 + scalar) / (1.0 - self.cloud_eccentricity)
        return inner, outer

    def dust_available(self, inner, outer):
        """
        Whether any band overlapping [inner, outer] still holds dust
        """
        return any(
            band.has_dust and band.outer_edge > inner and band.inner_edge < outer
            for band in self.bands
        )

    def collect_dust(self, last_mass, protoplanet):
        """
        Mass a protoplanet would sweep up from the bands in its effect range.

        The disk is not modified. Above the critical mass the sweep picks up
        gas too, in proportion to how far past the limit the body is.
        Args:
            last_mass (float):
                Mass of the body going into this sweep, solar masses
            protoplanet (Protoplanet):
                Supplies sma, eccentricity, critical_mass and the effect
                radii inner_effect and outer_effect
        Returns:
            tuple: (total, dust, gas) mass collected, solar masses
        """
        r_inner = protoplanet.inner_effect
        r_outer = protoplanet.outer_effect
        sma = protoplanet.sma
        critical_mass = protoplanet.critical_mass

        dust_mass = 0.0
        gas_mass = 0.0
        band_width = r_outer - r_inner
        scalar = effect_limit_scalar(last_mass)

        for band in self.bands:
            if band.outer_edge <= r_inner or band.inner_edge >= r_outer:
                continue

            if band.has_dust:
                dust_density = (
                    self.dust_density
                    * math.sqrt(self.stellar_mass)
                    * math.exp(-c.DUST_DENSITY_ALPHA * sma ** (1.0 / c.DUST_DENSITY_N))
                )
            else:
                dust_density = 0.0

            if last_mass < critical_mass or not band.has_gas:
                mass_density = dust_density
                gas_density = 0.0
            else:
                k = c.DUST_TO_GAS_RATIO_K
                mass_density = k * dust_density / (
                    1.0 + math.sqrt(critical_mass / last_mass) * (k - 1.0)
                )
                gas_density = mass_density - dust_density
                assert gas_density >= 0.0, "negative gas density"
                gas_density = max(0.0, gas_density)

            outer_clip = max(0.0, r_outer - band.outer_edge)
            inner_clip = max(0.0, band.inner_edge - r_inner)
            width = band_width - outer_clip - inner_clip

            term1 = 4.0 * math.pi * sma * sma
            term2 = 1.0 - protoplanet.eccentricity * (outer_clip - inner_clip) / band_width
            volume = term1 * scalar * term2 * width

            new_mass = volume * mass_density
            new_gas = volume * gas_density
            dust_mass += new_mass - new_gas
            gas_mass += new_gas

        return dust_mass + gas_mass, dust_mass, gas_mass

    def update_lanes(self, protoplanet):
        """
        Clear the region a grown protoplanet swept.

        Bands inside [inner_effect, outer_effect] lose their dust, and their
        gas too when the body ended above its critical mass. Bands straddling
        an edge are split there. The new partition covers exactly the same
        range and adjacent bands with equal flags are merged.
        """
        r_inner = protoplanet.inner_effect
        r_outer = protoplanet.outer_effect
        gas_remains = protoplanet.mass < protoplanet.critical_mass

        updated = []
        for band in self.bands:
            if band.outer_edge <= r_inner or band.inner_edge >= r_outer:
                updated.append(band)
                continue

            cleared_gas = band.has_gas and gas_remains
            # Portion inside the swept region
            lo = max(band.inner_edge, r_inner)
            hi = min(band.outer_edge, r_outer)
            if band.inner_edge < lo:
                updated.append(DustBand(band.inner_edge, lo, band.has_dust, band.has_gas))
            updated.append(DustBand(lo, hi, False, cleared_gas))
            if hi < band.outer_edge:
                updated.append(DustBand(hi, band.outer_edge, band.has_dust, band.has_gas))

        self.bands = self.merge_bands(updated)
        self.dust_remains = self.dust_density > 0.0 and self.dust_available(
            *self.protoplanet_zone
        )

    @staticmethod
    def merge_bands(bands):
        """
        Coalesce adjacent bands that carry the same flags
        """
        merged = []
        for band in bands:
            if merged and merged[-1].flags == band.flags:
                merged[-1] = DustBand(
                    merged[-1].inner_edge, band.outer_edge, band.has_dust, band.has_gas
                )
            else:
                merged.append(band)
        return merged

    def check_partition(self):
        """
        True when the bands are sorted, contiguous and fully merged
        """
        for left, right in zip(self.bands, self.bands[1:]):
            if left.outer_edge != right.inner_edge:
                return False
            if left.flags == right.flags:
                return False
        return all(b.inner_edge < b.outer_edge for b in self.bands)
