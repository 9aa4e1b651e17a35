"""Core package for metal life‑cycle assessment estimates.

This package contains the deterministic scenario engine behind the
Streamlit dashboard: the reference dataset for aluminium and copper, the
adjustment model that scales it under a scenario, circularity KPIs, the
bulk upload ingestor and the variance/confidence scoring.

Every submodule exposes pure functions over pydantic models or pandas
DataFrames; the only stateful piece is :class:`ScenarioStore`, which the
app hands to whichever component needs the current scenario.
"""

from .params import (
    Material,
    Stage,
    Metric,
    EnergySource,
    ScenarioInput,
    ScenarioExtension,
    MaterialStageMetrics,
    Prediction,
    CircularityKPIs,
    PathwayComparison,
    AggregatedDataset,
    IngestResult,
)
from .reference import REFERENCE_DATA, lookup, merge_dataset
from .estimator import predict, predict_stages
from .kpis import calculate_kpis, compare_pathways
from .ingest import ingest, ingest_bytes, sample_csv, IngestError, UnsupportedFormatError, TableParseError
from .variance import score
from .store import ScenarioStore

__all__ = [
    "Material",
    "Stage",
    "Metric",
    "EnergySource",
    "ScenarioInput",
    "ScenarioExtension",
    "MaterialStageMetrics",
    "Prediction",
    "CircularityKPIs",
    "PathwayComparison",
    "AggregatedDataset",
    "IngestResult",
    "REFERENCE_DATA",
    "lookup",
    "merge_dataset",
    "predict",
    "predict_stages",
    "calculate_kpis",
    "compare_pathways",
    "ingest",
    "ingest_bytes",
    "sample_csv",
    "IngestError",
    "UnsupportedFormatError",
    "TableParseError",
    "score",
    "ScenarioStore",
]
