"""Streamlit entry point for the metal LCA dashboard.

This script sets up logging and the shared scenario store, renders the
scenario form in the sidebar and shows the stage estimates, circularity
KPIs and the bulk upload panel.  All numbers come from :mod:`lca_core`;
this file only arranges them on the page.
"""

import logging

import pandas as pd
import streamlit as st

from lca_core.config import load_settings, setup_logging
from lca_core.estimator import predictions_frame, stage_breakdown, stage_totals
from lca_core.ingest import SAMPLE_FILENAME, IngestError, ingest_bytes, sample_csv
from lca_core.kpis import calculate_kpis, compare_pathways, score_label
from lca_core.params import METRIC_LABELS, METRICS, EnergySource, Material, Metric, ScenarioInput
from lca_core.plots import fig_kpis, fig_pathways, fig_stage_breakdown
from lca_core.reference import REFERENCE_DATA, merge_dataset
from lca_core.store import ScenarioStore
from lca_core.utils import content_hash, scenario_hash

logger = logging.getLogger(__name__)

st.set_page_config(page_title="Metal LCA Dashboard", layout="wide")


def _sidebar(store: ScenarioStore, default_material: Material) -> Material:
    scn = store.load()
    st.sidebar.header("Scenario")
    with st.sidebar.form("scenario_form"):
        material = st.selectbox(
            "Material",
            list(Material),
            index=list(Material).index(default_material),
            format_func=lambda m: m.value.capitalize(),
        )
        recycled = st.slider("Recycled content (%)", 0, 100, int(scn.recycled_percent))
        sources = list(EnergySource)
        energy = st.selectbox(
            "Energy source",
            sources,
            index=sources.index(scn.energy_source),
            format_func=lambda s: s.value,
        )
        distance = st.number_input(
            "Transport distance (km)", min_value=0.0, value=float(scn.transport_distance_km), step=50.0
        )
        if st.form_submit_button("Apply"):
            store.save(
                ScenarioInput(recycled_percent=recycled, energy_source=energy, transport_distance_km=distance)
            )
    return material


def _working_dataset():
    """Reference data merged with the last accepted upload, if any."""
    upload = st.session_state.get("uploaded_dataset")
    if upload is None:
        return REFERENCE_DATA
    return merge_dataset(REFERENCE_DATA, upload.to_metrics())


def _predictions(material: Material, scn: ScenarioInput, dataset) -> pd.DataFrame:
    """Compute predictions once per scenario and cache them in session_state."""
    cache = st.session_state.setdefault("results_cache", {})
    key = (material.value, scenario_hash(scn), st.session_state.get("upload_token"))
    if key not in cache:
        cache[key] = predictions_frame(material, scn, dataset)
    return cache[key]


def _upload_panel(max_bytes: int) -> None:
    st.subheader("Data Upload & Processing")
    st.caption("Columns: material, stage, co2, energy, water. Materials: aluminium, copper.")
    st.download_button("Download Sample CSV", sample_csv(), file_name=SAMPLE_FILENAME, mime="text/csv")
    uploaded = st.file_uploader("Upload CSV or Excel", type=["csv", "xlsx", "xls"])
    if uploaded is None:
        return
    content = uploaded.getvalue()
    try:
        result = ingest_bytes(uploaded.name, content, max_bytes=max_bytes)
    except IngestError as exc:
        st.error(f"Error: {exc}")
        return
    if result.errors:
        st.error("Validation failed")
        st.markdown("\n".join(f"- {e}" for e in result.errors))
        return
    st.session_state["uploaded_dataset"] = result.dataset
    st.session_state["upload_token"] = content_hash(content)
    st.success(f"Data processed successfully! {result.dataset.total_rows} rows.")


def main() -> None:
    settings = load_settings()
    setup_logging(settings.log_level)
    store = ScenarioStore(st.session_state, default=settings.default_scenario)

    material = _sidebar(store, settings.default_material)
    scn = store.load()
    dataset = _working_dataset()

    st.title("Metal Life-Cycle Assessment Dashboard")
    st.markdown(
        "Estimates CO₂, energy, water and waste per kg of product across the life cycle, "
        "adjusted for recycled content, energy supply and transport distance."
    )

    totals = stage_totals(material, scn, dataset)
    cols = st.columns(len(METRICS))
    for col, metric in zip(cols, METRICS):
        col.metric(METRIC_LABELS[metric], totals[metric.value])

    metric = st.radio("Metric", list(Metric), format_func=lambda m: METRIC_LABELS[m], horizontal=True)
    st.plotly_chart(fig_stage_breakdown(stage_breakdown(material, metric, scn, dataset), metric), use_container_width=True)

    with st.expander("Stage-wise predictions"):
        st.dataframe(_predictions(material, scn, dataset), use_container_width=True)

    kpis = calculate_kpis(scn)
    c1, c2 = st.columns(2)
    with c1:
        st.plotly_chart(fig_kpis(kpis), use_container_width=True)
        st.caption(f"Circularity score {kpis.circularity_score}/100: {score_label(kpis.circularity_score)}")
    with c2:
        cmp = compare_pathways(scn)
        st.plotly_chart(fig_pathways(cmp), use_container_width=True)
        st.caption(
            " · ".join(
                f"{name}: {value:.0f}%" if value is not None else f"{name}: n/a"
                for name, value in cmp.improvement_pct.items()
            )
        )

    st.markdown("---")
    _upload_panel(settings.max_upload_bytes)


if __name__ == "__main__":
    main()
