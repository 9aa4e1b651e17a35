"""Tests for the reference dataset lookups."""

import pytest

from lca_core.params import Material, MaterialStageMetrics, Stage
from lca_core.reference import REFERENCE_DATA, lookup


def test_lookup_hits():
    rec = lookup(Material.ALUMINIUM, Stage.SMELTING)
    assert rec.co2 == 12.8 and rec.energy == 65 and rec.water == 35 and rec.waste == 0.05
    assert lookup("Copper", "REFINING") == REFERENCE_DATA["copper"]["refining"]


def test_lookup_miss_is_none():
    assert lookup("lithium", "mining") is None
    assert lookup("copper", "transport") is None


def test_reference_is_read_only():
    with pytest.raises(TypeError):
        REFERENCE_DATA["steel"] = {}
    with pytest.raises(TypeError):
        REFERENCE_DATA["copper"]["mining"] = MaterialStageMetrics(co2=0, energy=0, water=0)


def test_all_values_non_negative():
    for stages in REFERENCE_DATA.values():
        assert set(stages) == {s.value for s in Stage}
        for rec in stages.values():
            assert min(rec.co2, rec.energy, rec.water, rec.waste) >= 0
