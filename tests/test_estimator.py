"""Tests for the adjustment model.

These tests check the individual adjustment factors, the worked example
for solar‑powered smelting, determinism, the zero floor, recycled
content monotonicity and the stage‑wise prediction tables.
"""

import math

import pytest

from lca_core.estimator import (
    ENERGY_MULTIPLIERS,
    energy_factor,
    predict,
    predict_stages,
    predictions_frame,
    recycled_factor,
    stage_breakdown,
    stage_totals,
    transport_factor,
)
from lca_core.params import METRICS, STAGES, EnergySource, Material, Metric, MaterialStageMetrics, ScenarioInput, Stage
from lca_core.reference import merge_dataset, REFERENCE_DATA


def test_factors():
    assert math.isclose(recycled_factor(0), 1.0)
    assert math.isclose(recycled_factor(100), 0.5)
    assert math.isclose(energy_factor("Hydro"), 0.1)
    assert math.isclose(energy_factor("natural gas"), 1.4)
    # unknown names fall back to the grid mix
    assert math.isclose(energy_factor("Fusion"), 1.0)
    assert math.isclose(transport_factor(0), 1.0)
    assert math.isclose(transport_factor(500), 1.25)
    # penalty capped at 50 %
    assert math.isclose(transport_factor(1_000_000), 1.5)


def test_every_energy_source_has_multiplier():
    assert set(ENERGY_MULTIPLIERS) == set(EnergySource)


def test_solar_smelting_example():
    scn = ScenarioInput(recycledPercent=50, energySource="Solar", transportDistanceKm=0)
    value = predict("aluminium", "smelting", "co2", scn)
    assert math.isclose(value, 12.8 * (1 - 50 / 200) * 0.3 * 1)
    assert math.isclose(value, 2.88)


def test_predict_is_deterministic():
    scn = ScenarioInput(recycled_percent=37.5, energy_source=EnergySource.COAL, transport_distance_km=321)
    for stage in STAGES:
        for metric in METRICS:
            assert predict(Material.COPPER, stage, metric, scn) == predict(Material.COPPER, stage, metric, scn)


def test_unknown_material_or_stage_gives_zero():
    scn = ScenarioInput()
    assert predict("lithium", "mining", "co2", scn) == 0.0
    assert predict("aluminium", "transport", "co2", scn) == 0.0


@pytest.mark.parametrize("source", list(EnergySource))
def test_predictions_never_negative(source):
    scn = ScenarioInput(recycled_percent=100, energy_source=source, transport_distance_km=5000)
    for stage in STAGES:
        for metric in METRICS:
            assert predict("aluminium", stage, metric, scn) >= 0.0


@pytest.mark.parametrize("material,stage,metric", [
    ("aluminium", "refining", "energy"),
    ("copper", "mining", "water"),
    ("copper", "recycling", "waste"),
])
def test_recycling_monotonicity(material, stage, metric):
    values = [
        predict(material, stage, metric, ScenarioInput(recycled_percent=p, energy_source="Wind", transport_distance_km=250))
        for p in range(0, 101, 10)
    ]
    assert all(later <= earlier for earlier, later in zip(values, values[1:]))


def test_predict_with_uploaded_dataset_without_waste():
    upload = {"aluminium": {"mining": MaterialStageMetrics(co2=5.0, energy=10.0, water=2.0)}}
    scn = ScenarioInput(recycled_percent=0, energy_source="Grid mix", transport_distance_km=0)
    assert math.isclose(predict("aluminium", "mining", "co2", scn, upload), 5.0)
    # absent waste is "no data", not an error
    assert predict("aluminium", "mining", "waste", scn, upload) == 0.0
    merged = merge_dataset(REFERENCE_DATA, upload)
    assert math.isclose(predict("aluminium", "mining", "waste", scn, merged), 0.3)


def test_predict_stages_structure_and_scores():
    preds = predict_stages("aluminium")
    assert list(preds) == [s.value for s in STAGES]
    mining = preds["mining"]["co2"]
    # default estimator scenario: 30 % recycled, grid mix, 100 km -> factor 0.8925
    assert mining.predicted == 2.23
    assert mining.actual == 2.5
    assert mining.variance_pct == 11
    assert mining.confidence == 89.0
    for metrics in preds.values():
        for p in metrics.values():
            assert 60 <= p.confidence <= 100


@pytest.mark.parametrize("material,actual", [("copper", 0.01), ("aluminium", 0.01)])
def test_small_values_scored_before_rounding(material, actual):
    # 0.005 * 0.8925 and 0.01 * 0.8925 both differ from the reference by 10.75 %
    p = predict_stages(material)["recycling"]["waste"]
    assert p.variance_pct == 11
    assert p.confidence == 89.0
    assert p.actual == actual


def test_predict_stages_confidence_floor():
    scn = ScenarioInput(recycled_percent=0, energy_source="Grid mix", transport_distance_km=1000)
    p = predict_stages("aluminium", scn)["mining"]["co2"]
    assert p.predicted == 3.75
    assert p.variance_pct == 50
    assert p.confidence == 60.0


def test_predict_stages_unknown_material():
    preds = predict_stages("nickel")
    p = preds["smelting"]["energy"]
    assert p.predicted == 0.0 and p.actual == 0.0
    assert p.variance_pct == 0 and p.confidence == 100


def test_frames_and_totals():
    scn = ScenarioInput(recycled_percent=0, energy_source="Grid mix", transport_distance_km=0)
    df = predictions_frame("copper", scn)
    assert len(df) == len(STAGES) * len(METRICS)
    assert set(df.columns) >= {"stage", "metric", "predicted", "actual", "variance_pct", "confidence"}
    totals = stage_totals("copper", scn)
    assert math.isclose(totals["co2"], round(4.2 + 6.8 + 9.5 + 2.8 + 0.3 + 1.2, 2))
    bd = stage_breakdown("copper", Metric.WATER, scn)
    assert list(bd["stage"]) == [s.value for s in STAGES]
    assert (bd["reference"] == bd["scenario"]).all()
    assert bd.loc[bd["stage"] == Stage.SMELTING.value, "scenario"].iloc[0] == 28
