"""Tests for the main sequence star model."""
import math

import astropy.units as u
import numpy as np
import pytest

from accreverse.base.star import (
    MAXIMUM_STELLAR_AGE,
    MINIMUM_STELLAR_AGE,
    OrbitalZone,
    Star,
    StarClass,
)


class TestStarConstruction:

    def test_defaults_to_g2v(self):
        star = Star()
        assert star.spectral_class == StarClass.G_V
        assert star.subtype == 2
        assert star.stellar_class == "G2V"
        assert not star.evaluated

    def test_accepts_class_letter(self):
        star = Star({"spectral_class": "k", "subtype": 5})
        assert star.spectral_class == StarClass.K_V

    def test_rejects_subtype_out_of_range(self):
        with pytest.raises(ValueError):
            Star({"spectral_class": "G", "subtype": 10})

    def test_rejects_hottest_o_subtypes(self):
        with pytest.raises(ValueError):
            Star({"spectral_class": "O", "subtype": 1})


class TestStarEvaluation:

    def test_solar_values(self, sun):
        assert sun.mass_solar == pytest.approx(1.0)
        assert sun.luminosity_solar == pytest.approx(10.0**0.01)
        assert sun.temperature_k == pytest.approx(10.0**3.761)
        assert sun.age_years == pytest.approx(4.6e9)

    def test_zones(self, sun):
        root_l = math.sqrt(sun.luminosity_solar)
        assert sun.ecosphere == pytest.approx(root_l)
        assert sun.snow_line == pytest.approx(5.0 * root_l)
        assert sun.habitable_zone == pytest.approx((0.95 * root_l, 1.37 * root_l))
        assert sun.dust_zone == pytest.approx((0.0, 200.0))
        assert sun.protoplanet_zone == pytest.approx((0.3, 50.0))
        assert sun.zone2 == pytest.approx((4.0 * root_l, 16.0 * root_l))

    def test_idempotent(self, sun):
        before = dict(vars(sun))
        sun.evaluate(np.random.default_rng(3))
        assert vars(sun) == before

    def test_unset_age_without_rng_is_midpoint(self):
        star = Star({"spectral_class": "G", "subtype": 2})
        star.evaluate()
        lifespan = 1.0e10 * star.mass_solar / star.luminosity_solar
        assert star.age_years == pytest.approx(0.5 * min(MAXIMUM_STELLAR_AGE, lifespan))

    def test_random_age_in_range(self):
        star = Star({"spectral_class": "K", "subtype": 0})
        star.evaluate(np.random.default_rng(11))
        assert 0.25 * MAXIMUM_STELLAR_AGE <= star.age_years <= 0.75 * MAXIMUM_STELLAR_AGE

    def test_age_clamped(self):
        star = Star({"spectral_class": "G", "subtype": 2, "age": 1.0e6})
        star.evaluate()
        assert star.age_years == MINIMUM_STELLAR_AGE

        star = Star({"spectral_class": "G", "subtype": 2, "age": 1.0e11})
        star.evaluate()
        assert star.age_years == MAXIMUM_STELLAR_AGE

    def test_massive_star_age_limited_by_lifespan(self):
        star = Star({"spectral_class": "A", "subtype": 0, "age": 5.0e9})
        star.evaluate()
        lifespan = 1.0e10 * star.mass_solar / star.luminosity_solar
        assert star.age_years == pytest.approx(max(MINIMUM_STELLAR_AGE, lifespan))

    def test_quantities(self, sun):
        assert sun.mass.unit == u.M_sun
        assert sun.luminosity.unit == u.L_sun
        assert sun.radius.to(u.R_sun).value == pytest.approx(sun.radius_solar)
        assert sun.effective_temperature.unit == u.K


class TestStarZones:

    def test_material_zone(self, sun):
        root_l = math.sqrt(sun.luminosity_solar)
        assert sun.get_material_zone(1.0) == 1.0
        assert sun.get_material_zone(4.5 * root_l) == pytest.approx(1.5)
        assert sun.get_material_zone(10.0 * root_l) == 2.0
        assert sun.get_material_zone(15.0 * root_l) == pytest.approx(2.5)
        assert sun.get_material_zone(100.0) == 3.0

    def test_material_zone_is_monotonic(self, sun):
        zones = [sun.get_material_zone(a) for a in np.linspace(0.1, 60.0, 400)]
        assert all(b >= a for a, b in zip(zones, zones[1:]))
        assert min(zones) >= 1.0
        assert max(zones) <= 3.0

    def test_orbital_zone(self, sun):
        assert sun.get_orbital_zone(0.4) == OrbitalZone.INNER
        assert sun.get_orbital_zone(1.0) == OrbitalZone.HABITABLE
        assert sun.get_orbital_zone(3.0) == OrbitalZone.MIDDLE
        assert sun.get_orbital_zone(30.0) == OrbitalZone.OUTER
        assert OrbitalZone.HABITABLE.label == "Habitable"


class TestStarType:

    def test_solar_mass(self):
        assert Star.get_star_type(1.0) == (StarClass.G_V, 2)

    def test_clamps_low_mass(self):
        assert Star.get_star_type(0.001) == (StarClass.M_V, 9)

    def test_clamps_high_mass(self):
        assert Star.get_star_type(1000.0) == (StarClass.O_V, 3)

    def test_from_mass(self):
        star = Star.from_mass(1.0, name="Sol")
        assert star.stellar_class == "G2V"
        assert star.name == "Sol"

    def test_summary_frame(self, sun):
        df = sun.get_s_df()
        assert df.loc[0, "class"] == "G2V"
        assert df.loc[0, "mass"] == pytest.approx(1.0)
