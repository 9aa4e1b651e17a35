# MIT License
"""Circularity indicators and the linear versus circular comparison.

The scores are simple transparent formulas on the scenario knobs, not
statistically derived quantities.  Each sub‑score is limited to
[0, 100] before the composite circularity score is taken as their
rounded mean.  Exact halves round up.
"""

from __future__ import annotations

from typing import Optional

from .estimator import recycled_factor
from .params import CircularityKPIs, EnergySource, PathwayComparison, PathwayValues, ScenarioInput
from .utils import round_half_up

# illustrative linear pathway per kg of product
LINEAR_BASELINE = PathwayValues(emissions=25.0, energy=120.0, waste=15.0, cost=100.0)


def _clamp(value: float, lo: float = 0.0, hi: float = 100.0) -> float:
    return max(lo, min(hi, value))


def calculate_kpis(scenario: ScenarioInput) -> CircularityKPIs:
    """Derive the circularity KPIs of a scenario.

    Solar supply adds 10 points to the recycling rate and wind supply 15
    points to resource efficiency.  Extended life falls by one point per
    100 km of transport and is kept at or above zero.

    Parameters
    ----------
    scenario:
        Scenario knobs.

    Returns
    -------
    CircularityKPIs
        Integer scores in [0, 100].
    """
    recycled = scenario.recycled_percent
    source = scenario.energy_source
    recycling_rate = _clamp(recycled + (10.0 if source == EnergySource.SOLAR else 0.0))
    resource_efficiency = _clamp(60.0 + recycled / 2.0 + (15.0 if source == EnergySource.WIND else 0.0))
    extended_life = _clamp(70.0 + recycled / 3.0 - scenario.transport_distance_km / 100.0)
    return CircularityKPIs(
        recycling_rate=round_half_up(recycling_rate),
        resource_efficiency=round_half_up(resource_efficiency),
        extended_life=round_half_up(extended_life),
        circularity_score=round_half_up((recycling_rate + resource_efficiency + extended_life) / 3.0),
    )


def percent_improvement(linear: float, circular: float) -> Optional[float]:
    """Relative improvement of circular over linear in percent.

    Returns None when the linear baseline is zero.
    """
    if linear == 0:
        return None
    return (linear - circular) / linear * 100.0


def compare_pathways(scenario: ScenarioInput, linear: PathwayValues = LINEAR_BASELINE) -> PathwayComparison:
    """Compare the linear baseline with the circular pathway.

    Emissions, energy and cost scale with the recycled‑content factor;
    waste falls in direct proportion to the recycled share.
    """
    factor = recycled_factor(scenario.recycled_percent)
    circular = PathwayValues(
        emissions=linear.emissions * factor,
        energy=linear.energy * factor,
        waste=linear.waste * (1.0 - scenario.recycled_percent / 100.0),
        cost=linear.cost * factor,
    )
    improvement = {
        name: percent_improvement(getattr(linear, name), getattr(circular, name))
        for name in ("emissions", "energy", "waste", "cost")
    }
    return PathwayComparison(linear=linear, circular=circular, improvement_pct=improvement)


def score_label(score: float) -> str:
    if score >= 80:
        return "Excellent"
    if score >= 60:
        return "Good"
    if score >= 40:
        return "Fair"
    return "Needs Improvement"
