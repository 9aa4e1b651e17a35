"""Smoke tests for the Plotly figure builders."""

from lca_core.estimator import stage_breakdown
from lca_core.kpis import calculate_kpis, compare_pathways
from lca_core.params import Metric, ScenarioInput
from lca_core.plots import fig_kpis, fig_pathways, fig_stage_breakdown


def test_figures_build():
    scn = ScenarioInput(recycled_percent=40, energy_source="Wind", transport_distance_km=300)
    fig = fig_stage_breakdown(stage_breakdown("aluminium", Metric.CO2, scn), Metric.CO2)
    assert len(fig.data) == 2
    assert list(fig.data[0].x) == ["mining", "refining", "smelting", "fabrication", "use", "recycling"]
    assert len(fig_pathways(compare_pathways(scn)).data) == 2
    bars = fig_kpis(calculate_kpis(scn)).data[0]
    assert max(bars.x) <= 100
