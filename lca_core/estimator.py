# MIT License
"""Scenario adjustment model.

Predicts the impact of a (material, stage, metric) triple under a
scenario by scaling the reference value with three multiplicative
factors: recycled content, energy source and transport distance.  All
functions are pure; identical arguments always give identical results,
which is what lets the dashboard cache them by scenario hash.
"""

from __future__ import annotations

import logging
from typing import Dict, Mapping, Optional

import pandas as pd

from .params import (
    METRICS,
    STAGES,
    EnergySource,
    Metric,
    Prediction,
    ScenarioInput,
)
from .reference import lookup
from .utils import round_half_up
from .variance import score

logger = logging.getLogger(__name__)

ENERGY_MULTIPLIERS: Mapping[EnergySource, float] = {
    EnergySource.SOLAR: 0.3,
    EnergySource.WIND: 0.2,
    EnergySource.HYDRO: 0.1,
    EnergySource.GRID_MIX: 1.0,
    EnergySource.COAL: 2.2,
    EnergySource.NATURAL_GAS: 1.4,
    EnergySource.DIESEL: 1.8,
    EnergySource.RENEWABLE: 0.2,
    EnergySource.HYDROGEN: 0.5,
}
_missing = set(EnergySource) - set(ENERGY_MULTIPLIERS)
if _missing:
    raise RuntimeError(f"energy sources without a multiplier: {sorted(s.value for s in _missing)}")

MAX_TRANSPORT_PENALTY = 0.5
TRANSPORT_SCALE_KM = 2000.0

# scenario assumed by the stage estimator when the user has not set one
ESTIMATOR_DEFAULT_SCENARIO = ScenarioInput(
    recycled_percent=30.0, energy_source=EnergySource.GRID_MIX, transport_distance_km=100.0
)


def recycled_factor(recycled_percent: float) -> float:
    """Linear discount for recycled content, 1.0 at 0 % down to 0.5 at 100 %."""
    return 1.0 - recycled_percent / 200.0


def energy_factor(source) -> float:
    return ENERGY_MULTIPLIERS[EnergySource.parse(source)]


def transport_factor(distance_km: float) -> float:
    """Transport penalty growing with distance, capped at +50 %."""
    return 1.0 + min(MAX_TRANSPORT_PENALTY, distance_km / TRANSPORT_SCALE_KM)


def predict(
    material,
    stage,
    metric,
    scenario: ScenarioInput,
    dataset: Optional[Mapping] = None,
) -> float:
    """Predict one impact value under a scenario.

    Parameters
    ----------
    material, stage:
        Keys of the dataset (enum members or strings).
    metric:
        One of :class:`~lca_core.params.Metric`.
    scenario:
        Scenario knobs; not modified.
    dataset:
        Optional working dataset (e.g. reference merged with an upload).
        Defaults to the reference dataset.

    Returns
    -------
    float
        The adjusted value, never negative.  Unknown materials or stages
        and metrics the dataset does not carry give 0.0.
    """
    record = lookup(material, stage, dataset)
    if record is None:
        return 0.0
    base_value = record.value(Metric(metric))
    if base_value is None:
        return 0.0
    value = (
        base_value
        * recycled_factor(scenario.recycled_percent)
        * energy_factor(scenario.energy_source)
        * transport_factor(scenario.transport_distance_km)
    )
    return max(0.0, value)


def predict_stages(
    material,
    scenario: ScenarioInput = ESTIMATOR_DEFAULT_SCENARIO,
    dataset: Optional[Mapping] = None,
) -> Dict[str, Dict[str, Prediction]]:
    """Predictions for every stage and metric of one material.

    Variance and confidence are scored on the unrounded values; predicted
    and actual are then rounded to two decimals for display.

    Returns
    -------
    dict
        ``stage -> metric -> Prediction``.
    """
    out: Dict[str, Dict[str, Prediction]] = {}
    for stage in STAGES:
        out[stage.value] = {}
        for metric in METRICS:
            predicted = predict(material, stage, metric, scenario, dataset)
            record = lookup(material, stage, dataset)
            actual = record.value(metric) if record is not None else None
            actual = actual or 0.0
            variance_pct, confidence = score(predicted, actual)
            out[stage.value][metric.value] = Prediction(
                predicted=round_half_up(predicted, 2),
                actual=round_half_up(actual, 2),
                variance_pct=variance_pct,
                confidence=confidence,
            )
    return out


def predictions_frame(
    material,
    scenario: ScenarioInput = ESTIMATOR_DEFAULT_SCENARIO,
    dataset: Optional[Mapping] = None,
) -> pd.DataFrame:
    """Same as :func:`predict_stages` as a long dataframe.

    Columns: ``stage, metric, predicted, actual, variance_pct, confidence``.
    """
    rows = []
    for stage, metrics in predict_stages(material, scenario, dataset).items():
        for metric, p in metrics.items():
            rows.append(dict(stage=stage, metric=metric, **p.model_dump()))
    return pd.DataFrame(rows)


def stage_totals(
    material,
    scenario: ScenarioInput = ESTIMATOR_DEFAULT_SCENARIO,
    dataset: Optional[Mapping] = None,
) -> Dict[str, float]:
    """Sum of predicted values over all stages, per metric."""
    df = predictions_frame(material, scenario, dataset)
    totals = df.groupby("metric")["predicted"].sum()
    return {m.value: round_half_up(float(totals.get(m.value, 0.0)), 2) for m in METRICS}


def stage_breakdown(
    material,
    metric,
    scenario: ScenarioInput,
    dataset: Optional[Mapping] = None,
) -> pd.DataFrame:
    """Reference and scenario values of one metric across the stages.

    Used by the stage breakdown chart.  Columns: ``stage, reference,
    scenario``.
    """
    metric = Metric(metric)
    rows = []
    for stage in STAGES:
        record = lookup(material, stage, dataset)
        reference = record.value(metric) if record is not None else None
        rows.append(
            dict(
                stage=stage.value,
                reference=reference or 0.0,
                scenario=predict(material, stage, metric, scenario, dataset),
            )
        )
    return pd.DataFrame(rows)
