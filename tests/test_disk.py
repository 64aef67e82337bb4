"""Tests for the dust band partition and sweeps."""
from types import SimpleNamespace

import pytest

from accreverse.base.disk import Disk, DustBand


def _disk(dust_density=2.0e-3):
    return Disk((0.0, 10.0), (0.3, 5.0), 1.0, dust_density=dust_density)


def _body(inner, outer, mass=1.0e-6, critical_mass=1.0e-5, sma=None, eccentricity=0.0):
    return SimpleNamespace(
        sma=sma if sma is not None else 0.5 * (inner + outer),
        eccentricity=eccentricity,
        mass=mass,
        critical_mass=critical_mass,
        inner_effect=inner,
        outer_effect=outer,
    )


def _flags(disk):
    return [(b.inner_edge, b.outer_edge, b.has_dust, b.has_gas) for b in disk.bands]


class TestDustBand:

    def test_flags_and_label(self):
        band = DustBand(0.0, 1.0, True, False)
        assert band.flags == (True, False)
        assert band.label == "dust"
        assert DustBand(0.0, 1.0, False, False).label == "cleared"

    def test_equality(self):
        assert DustBand(0.0, 1.0) == DustBand(0.0, 1.0, True, True)
        assert DustBand(0.0, 1.0) != DustBand(0.0, 1.0, False, True)


class TestDiskInit:

    def test_single_band(self):
        disk = _disk()
        assert _flags(disk) == [(0.0, 10.0, True, True)]
        assert disk.dust_remains
        assert disk.check_partition()

    def test_empty_disk_has_no_dust(self):
        disk = _disk(dust_density=0.0)
        assert not disk.dust_remains

    def test_effect_limits(self):
        disk = _disk()
        inner, outer = disk.effect_limits(1.0, 0.0, 0.0)
        assert inner == pytest.approx(1.0 / 1.2)
        assert outer == pytest.approx(1.0 / 0.8)

    def test_effect_limits_widen_with_mass(self):
        disk = _disk()
        small = disk.effect_limits(1.0, 0.1, 1.0e-10)
        large = disk.effect_limits(1.0, 0.1, 1.0e-4)
        assert large[0] < small[0]
        assert large[1] > small[1]


class TestCollectDust:

    def test_below_critical_collects_only_dust(self):
        disk = _disk()
        total, dust, gas = disk.collect_dust(1.0e-6, _body(0.9, 1.1))
        assert total > 0.0
        assert gas == 0.0
        assert dust == pytest.approx(total)

    def test_above_critical_collects_gas(self):
        disk = _disk()
        total, dust, gas = disk.collect_dust(
            1.0e-3, _body(0.9, 1.1, mass=1.0e-3, critical_mass=1.0e-5)
        )
        assert gas > 0.0
        assert total == pytest.approx(dust + gas)

    def test_zero_density_collects_nothing(self):
        disk = _disk(dust_density=0.0)
        assert disk.collect_dust(1.0e-6, _body(0.9, 1.1)) == (0.0, 0.0, 0.0)

    def test_does_not_modify_disk(self):
        disk = _disk()
        disk.collect_dust(1.0e-6, _body(0.9, 1.1))
        assert _flags(disk) == [(0.0, 10.0, True, True)]

    def test_cleared_region_yields_nothing(self):
        disk = _disk()
        body = _body(0.9, 1.1)
        disk.update_lanes(body)
        assert disk.collect_dust(1.0e-6, body) == (0.0, 0.0, 0.0)

    def test_partial_overlap_collects_less(self):
        disk = _disk()
        full = disk.collect_dust(1.0e-6, _body(0.9, 1.1, sma=1.0))[0]
        disk.update_lanes(_body(0.9, 1.0))
        half = disk.collect_dust(1.0e-6, _body(0.9, 1.1, sma=1.0))[0]
        assert 0.0 < half < full

    def test_split_bands_sum_to_whole(self):
        whole = _disk()
        split = _disk()
        # Splitting at 2.0 without clearing the swept region changes nothing
        split.bands = [DustBand(0.0, 2.0), DustBand(2.0, 10.0)]
        body = _body(1.5, 2.5, sma=2.0)
        assert split.collect_dust(1.0e-6, body)[0] == pytest.approx(
            whole.collect_dust(1.0e-6, body)[0]
        )


class TestUpdateLanes:

    def test_interior_sweep_splits_band(self):
        disk = _disk()
        disk.update_lanes(_body(1.0, 2.0))
        assert _flags(disk) == [
            (0.0, 1.0, True, True),
            (1.0, 2.0, False, True),
            (2.0, 10.0, True, True),
        ]
        assert disk.check_partition()

    def test_sweep_above_critical_clears_gas(self):
        disk = _disk()
        disk.update_lanes(_body(1.0, 2.0, mass=1.0e-4, critical_mass=1.0e-5))
        assert _flags(disk)[1] == (1.0, 2.0, False, False)

    def test_overlapping_sweeps_merge(self):
        disk = _disk()
        disk.update_lanes(_body(1.0, 2.0))
        disk.update_lanes(_body(1.5, 3.0))
        assert _flags(disk) == [
            (0.0, 1.0, True, True),
            (1.0, 3.0, False, True),
            (3.0, 10.0, True, True),
        ]
        assert disk.check_partition()

    def test_sweep_covering_inner_edge(self):
        disk = _disk()
        disk.update_lanes(_body(-1.0, 0.5))
        assert _flags(disk) == [(0.0, 0.5, False, True), (0.5, 10.0, True, True)]

    def test_sweep_covering_several_bands(self):
        disk = _disk()
        disk.update_lanes(_body(1.0, 2.0, mass=1.0e-4, critical_mass=1.0e-5))
        disk.update_lanes(_body(4.0, 5.0))
        disk.update_lanes(_body(0.5, 6.0))
        assert _flags(disk) == [
            (0.0, 0.5, True, True),
            (0.5, 1.0, False, True),
            (1.0, 2.0, False, False),
            (2.0, 6.0, False, True),
            (6.0, 10.0, True, True),
        ]
        assert disk.check_partition()

    def test_coverage_preserved(self):
        disk = _disk()
        for inner, outer in ((1.0, 2.0), (0.2, 0.4), (1.8, 7.0), (9.0, 12.0)):
            disk.update_lanes(_body(inner, outer))
            assert disk.extent == (0.0, 10.0)
            assert disk.check_partition()

    def test_sweep_conserves_mass(self):
        disk = _disk()
        wide = _body(0.5, 2.0, sma=1.0)
        narrow = _body(0.9, 1.1, sma=1.0)
        before, _, _ = disk.collect_dust(wide.mass, wide)
        taken, _, _ = disk.collect_dust(narrow.mass, narrow)
        disk.update_lanes(narrow)
        after, _, _ = disk.collect_dust(wide.mass, wide)
        assert taken > 0.0
        assert before - after == pytest.approx(taken)

    def test_dust_remains_cleared(self):
        disk = _disk()
        disk.update_lanes(_body(0.1, 6.0))
        assert not disk.dust_remains

    def test_dust_remains_with_gap(self):
        disk = _disk()
        disk.update_lanes(_body(0.1, 4.0))
        assert disk.dust_remains

    def test_band_frame(self):
        disk = _disk()
        disk.update_lanes(_body(1.0, 2.0))
        df = disk.get_band_df()
        assert list(df.columns) == ["inner", "outer", "dust", "gas"]
        assert len(df) == 3
