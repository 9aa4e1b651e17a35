# MIT License
"""Reference life‑cycle dataset for aluminium and copper.

Baseline impacts per kg of product for each life‑cycle stage.  The table
is built once at import time and exposed read‑only; it serves both as
the "actual" value predictions are scored against and as the base the
adjustment factors multiply.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Mapping, Optional

import pandas as pd

from .params import METRICS, Dataset, Material, MaterialStageMetrics, Stage

logger = logging.getLogger(__name__)

_M = MaterialStageMetrics

# units: co2 kg/kg, energy kWh/kg, water L/kg, waste kg/kg
_RAW = {
    Material.ALUMINIUM.value: {
        Stage.MINING.value: _M(co2=2.5, energy=15, water=8, waste=0.3),
        Stage.REFINING.value: _M(co2=8.2, energy=45, water=25, waste=0.1),
        Stage.SMELTING.value: _M(co2=12.8, energy=65, water=35, waste=0.05),
        Stage.FABRICATION.value: _M(co2=3.2, energy=18, water=12, waste=0.08),
        Stage.USE.value: _M(co2=0.5, energy=2, water=1, waste=0.02),
        Stage.RECYCLING.value: _M(co2=1.8, energy=8, water=4, waste=0.01),
    },
    Material.COPPER.value: {
        Stage.MINING.value: _M(co2=4.2, energy=22, water=15, waste=0.8),
        Stage.REFINING.value: _M(co2=6.8, energy=35, water=20, waste=0.2),
        Stage.SMELTING.value: _M(co2=9.5, energy=48, water=28, waste=0.1),
        Stage.FABRICATION.value: _M(co2=2.8, energy=15, water=8, waste=0.05),
        Stage.USE.value: _M(co2=0.3, energy=1.5, water=0.8, waste=0.01),
        Stage.RECYCLING.value: _M(co2=1.2, energy=6, water=3, waste=0.005),
    },
}

REFERENCE_DATA: Mapping[str, Mapping[str, MaterialStageMetrics]] = MappingProxyType(
    {material: MappingProxyType(stages) for material, stages in _RAW.items()}
)


def _key(value) -> str:
    return getattr(value, "value", str(value)).strip().lower()


def lookup(material, stage, dataset: Optional[Mapping] = None) -> Optional[MaterialStageMetrics]:
    """Return the metrics for ``(material, stage)`` or None.

    Accepts enum members or strings (case‑insensitive).  A miss is the
    normal "no data" signal and is never raised as an error.

    Parameters
    ----------
    material, stage:
        Keys to look up.
    dataset:
        Optional dataset to search instead of :data:`REFERENCE_DATA`.
    """
    data = REFERENCE_DATA if dataset is None else dataset
    record = data.get(_key(material), {}).get(_key(stage))
    if record is None:
        logger.debug("No reference data for %s/%s", material, stage)
    return record


def reference_frame(dataset: Optional[Mapping] = None) -> pd.DataFrame:
    """Flatten a dataset into a long dataframe.

    Returns
    -------
    pandas.DataFrame
        Columns ``material, stage, metric, value``; metrics that are
        absent (ingested waste) are left out.
    """
    data = REFERENCE_DATA if dataset is None else dataset
    rows = []
    for material, stages in data.items():
        for stage, record in stages.items():
            for metric in METRICS:
                value = record.value(metric)
                if value is not None:
                    rows.append(dict(material=material, stage=stage, metric=metric.value, value=value))
    return pd.DataFrame(rows, columns=["material", "stage", "metric", "value"])


def merge_dataset(base: Mapping, aggregated: Dataset) -> Dataset:
    """Overlay uploaded per‑stage means on a base dataset.

    co2, energy and water are taken from the upload.  Waste is not part
    of the upload schema, so the base value is kept where one exists and
    new (material, stage) pairs carry no waste at all.
    """
    merged: Dataset = {m: dict(stages) for m, stages in base.items()}
    for material, stages in aggregated.items():
        target = merged.setdefault(material, {})
        for stage, record in stages.items():
            previous = target.get(stage)
            waste = record.waste
            if waste is None and previous is not None:
                waste = previous.waste
            target[stage] = MaterialStageMetrics(
                co2=record.co2, energy=record.energy, water=record.water, waste=waste
            )
    logger.info("Merged uploaded data for %d material(s) into working dataset", len(aggregated))
    return merged
