"""Tests for the stateless formula library."""
import math

import pytest

from accreverse.util import constants as c
from accreverse.util import equations as eq
from accreverse.util.misc import clamp, inverse_lerp, lerp, roman_numeral

EARTH_MASS = 1.0 / c.SOLAR_MASS_TO_EARTH_MASS


class TestHelpers:

    def test_clamp(self):
        assert clamp(5.0, 0.0, 1.0) == 1.0
        assert clamp(-5.0, 0.0, 1.0) == 0.0
        assert clamp(0.5, 0.0, 1.0) == 0.5

    def test_lerp_clamps_interpolant(self):
        assert lerp(0.5, 10.0, 20.0) == 15.0
        assert lerp(2.0, 10.0, 20.0) == 20.0
        assert lerp(-1.0, 10.0, 20.0) == 10.0

    def test_inverse_lerp(self):
        assert inverse_lerp(15.0, 10.0, 20.0) == 0.5
        assert inverse_lerp(5.0, 10.0, 20.0) == 0.0
        assert inverse_lerp(25.0, 10.0, 20.0) == 1.0

    def test_roman_numerals(self):
        assert roman_numeral(1) == "I"
        assert roman_numeral(4) == "IV"
        assert roman_numeral(9) == "IX"
        assert roman_numeral(14) == "XIV"
        assert roman_numeral(49) == "XLIX"
        assert roman_numeral(99) == "XCIX"

    def test_roman_numeral_range(self):
        with pytest.raises(ValueError):
            roman_numeral(0)
        with pytest.raises(ValueError):
            roman_numeral(100)


class TestStellarRelations:

    def test_solar_luminosity(self):
        assert eq.luminosity(1.0) == pytest.approx(1.0)

    def test_luminosity_grows_with_mass(self):
        assert eq.luminosity(0.5) < eq.luminosity(1.0) < eq.luminosity(1.5)

    def test_critical_limit_at_one_au(self):
        assert eq.critical_limit(1.0, 0.0, 1.0) == pytest.approx(c.CRITICAL_LIMIT_B)

    def test_critical_limit_uses_perihelion(self):
        circular = eq.critical_limit(1.0, 0.0, 1.0)
        eccentric = eq.critical_limit(1.0, 0.5, 1.0)
        assert eccentric > circular

    def test_effect_limit_scalar(self):
        assert eq.effect_limit_scalar(0.0) == 0.0
        assert eq.effect_limit_scalar(1.0) == pytest.approx(0.5**0.25)
        assert eq.effect_limit_scalar(1e-10) < eq.effect_limit_scalar(1e-5)


class TestPlanetaryRelations:

    def test_earth_density(self):
        assert eq.volume_density(EARTH_MASS, c.EARTH_RADIUS_KM) == pytest.approx(
            c.EARTH_DENSITY, rel=0.01
        )

    def test_radius_from_density_inverts_volume_density(self):
        density = eq.volume_density(EARTH_MASS, 7000.0)
        assert eq.radius_from_density(EARTH_MASS, density) == pytest.approx(7000.0)

    def test_earth_escape_velocity(self):
        assert eq.escape_velocity(EARTH_MASS, c.EARTH_RADIUS_KM) == pytest.approx(
            c.EARTH_ESCAPE_VELOCITY, rel=0.01
        )

    def test_earth_surface_acceleration(self):
        assert eq.surface_acceleration(EARTH_MASS, c.EARTH_RADIUS_KM) == pytest.approx(
            9.8, rel=0.01
        )

    def test_one_year_period(self):
        assert eq.period(1.0, 0.0, 1.0) == pytest.approx(c.DAYS_PER_YEAR)

    def test_rms_velocity_of_nitrogen(self):
        # ~517 m/s at room temperature
        assert eq.rms_velocity(28.0, 300.0) == pytest.approx(517.0, rel=0.01)

    def test_earth_orbital_dominance(self):
        dominance = eq.orbital_dominance(EARTH_MASS, 1.0)
        assert dominance == pytest.approx(c.ORBITAL_DOMINANCE_K)
        assert eq.orbital_dominance(EARTH_MASS * 1e-4, 2.8) < 1.0

    def test_boiling_point_at_one_atmosphere(self):
        assert eq.boiling_point(c.EARTH_SURFACE_PRESSURE) == pytest.approx(373.0, abs=1.0)

    def test_boiling_point_rises_with_pressure(self):
        assert eq.boiling_point(10000.0) > eq.boiling_point(1000.0)


class TestKothariRadius:

    def test_earth_analog(self):
        radius = eq.kothari_radius(EARTH_MASS, 1.0, False, 1.0)
        assert radius == pytest.approx(c.EARTH_RADIUS_KM, rel=0.05)

    def test_monotonic_below_rocky_transition(self):
        masses = [EARTH_MASS * f for f in (0.01, 0.1, 0.5, 1.0, 1.5, 2.0)]
        radii = [eq.kothari_radius(m, 1.0, False, 1.0) for m in masses]
        assert radii == sorted(radii)
        assert len(set(radii)) == len(radii)

    def test_gas_giant_larger_than_rocky(self):
        mass = 300.0 * EARTH_MASS
        assert eq.kothari_radius(mass, 5.2, True, 2.0) > eq.kothari_radius(
            mass, 5.2, False, 2.0
        )

    def test_jupiter_analog(self):
        radius = eq.kothari_radius(1.0 / 1047.0, 5.2, True, 2.0)
        assert 40000.0 < radius < 120000.0

    def test_rocky_outer_zone_matches_zone_two(self):
        assert eq.kothari_radius(EARTH_MASS, 30.0, False, 3.0) == pytest.approx(
            eq.kothari_radius(EARTH_MASS, 30.0, False, 2.0)
        )

    def test_gas_outer_zone_uses_zone_two_composition(self):
        mass = 15.0 * EARTH_MASS
        outer = eq.kothari_radius(mass, 30.0, True, 3.0)
        assert outer == pytest.approx(eq.kothari_radius(mass, 30.0, True, 2.0))
        assert outer > eq.kothari_radius(mass, 30.0, True, 2.999)

    def test_zone_interpolation(self):
        mass = 15.0 * EARTH_MASS
        low = eq.kothari_radius(mass, 5.0, True, 1.0)
        mid = eq.kothari_radius(mass, 5.0, True, 1.5)
        high = eq.kothari_radius(mass, 5.0, True, 2.0)
        assert min(low, high) < mid < max(low, high)


class TestGasRetention:

    def test_gas_life_overflow_is_infinite(self):
        # A massive cold body keeps everything
        assert eq.gas_life(28.0, 50.0, 25.0, 70000.0) == math.inf

    def test_gas_life_grows_with_weight(self):
        light = eq.gas_life(2.0, 1273.0, 9.8, 6378.0)
        heavy = eq.gas_life(4.0, 1273.0, 9.8, 6378.0)
        assert heavy > light

    def test_earth_retains_nitrogen(self):
        weight = eq.minimum_molecular_weight(11186.0, 1273.0, 9.8, 6378.0, 4.6e9)
        assert 1.0 < weight < c.WEIGHT_MOLECULAR_NITROGEN

    def test_molecular_limit(self):
        expected = 3.0 * c.MOLAR_GAS_CONSTANT * 1000.0 / (5000.0 / 5.0) ** 2
        assert eq.molecular_limit(5000.0, 1000.0) == pytest.approx(expected)


class TestBodeSequence:

    def test_progression(self):
        inner = eq.bode_sequence(-1, 0.4, 2.0, 0.0, 0.9879)
        middle = eq.bode_sequence(0, 0.4, 2.0, 0.0, 0.9879)
        outer = eq.bode_sequence(1, 0.4, 2.0, 0.0, 0.9879)
        assert 0.0 < inner < middle < outer
