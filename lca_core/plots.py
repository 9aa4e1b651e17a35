# MIT License
"""Plotly figure builders for the metal LCA dashboard.

This module centralises creation of Plotly figures used by the Streamlit
frontend.  Keeping the plotting code separate from the page logic
facilitates consistent styling across the application.
"""

from __future__ import annotations
import pandas as pd
import plotly.graph_objects as go

from .params import METRIC_LABELS, CircularityKPIs, Metric, PathwayComparison


def fig_stage_breakdown(df: pd.DataFrame, metric: Metric) -> go.Figure:
    """Create a grouped bar chart of reference vs scenario values per stage.

    Parameters
    ----------
    df:
        Dataframe from :func:`~lca_core.estimator.stage_breakdown` with
        columns 'stage', 'reference' and 'scenario'.
    metric:
        Metric shown, used for the axis title.

    Returns
    -------
    plotly.graph_objects.Figure
        Two bar traces per stage.
    """
    fig = go.Figure()
    fig.add_bar(x=df["stage"], y=df["reference"], name="Reference")
    fig.add_bar(x=df["stage"], y=df["scenario"], name="Scenario")
    fig.update_layout(
        title="Impact by Life-Cycle Stage",
        xaxis_title="Stage",
        yaxis_title=METRIC_LABELS[Metric(metric)],
        barmode="group",
        template="plotly_white",
    )
    return fig


def fig_pathways(cmp: PathwayComparison) -> go.Figure:
    """Create a grouped bar chart of the linear and circular pathways."""
    labels = ["CO₂ Emissions", "Energy Use", "Waste Generated", "Cost Index"]
    keys = ["emissions", "energy", "waste", "cost"]
    fig = go.Figure()
    fig.add_bar(x=labels, y=[getattr(cmp.linear, k) for k in keys], name="Linear")
    fig.add_bar(x=labels, y=[getattr(cmp.circular, k) for k in keys], name="Circular")
    fig.update_layout(template="plotly_white", barmode="group", title="Linear vs Circular Pathway")
    return fig


def fig_kpis(kpis: CircularityKPIs) -> go.Figure:
    labels = ["Recycling Rate", "Resource Efficiency", "Extended Life", "Circularity Score"]
    values = [kpis.recycling_rate, kpis.resource_efficiency, kpis.extended_life, kpis.circularity_score]
    fig = go.Figure(go.Bar(x=values, y=labels, orientation="h"))
    fig.update_layout(template="plotly_white", title="Circularity KPIs", xaxis=dict(range=[0, 100]))
    return fig
