# MIT License
"""Data models for the metal LCA dashboard.

All data models are defined using [`pydantic.BaseModel`](https://docs.pydantic.dev/)
to provide type checking, validation and JSON serialisation.  The closed
vocabularies (materials, life‑cycle stages, metrics and energy sources)
are string enums so that values coming from forms or uploaded files can
be checked against a fixed set.

The canonical scenario is :class:`ScenarioInput`, the three knobs that
drive every estimate.  The richer description entered on the input form
(material, quantity, waste streams, end‑of‑life pathways ...) lives in
the separate :class:`ScenarioExtension` record and is never merged into
the scenario itself.
"""
from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)


class Material(str, Enum):
    """Materials covered by the reference dataset."""

    ALUMINIUM = "aluminium"
    COPPER = "copper"

    @classmethod
    def parse(cls, value) -> Optional["Material"]:
        """Return the matching material (case‑insensitive) or None."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


class Stage(str, Enum):
    MINING = "mining"
    REFINING = "refining"
    SMELTING = "smelting"
    FABRICATION = "fabrication"
    USE = "use"
    RECYCLING = "recycling"

    @classmethod
    def parse(cls, value) -> Optional["Stage"]:
        """Return the matching stage (case‑insensitive) or None."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


class Metric(str, Enum):
    CO2 = "co2"
    ENERGY = "energy"
    WATER = "water"
    WASTE = "waste"


class EnergySource(str, Enum):
    """Energy supply options offered on the scenario forms.

    ``RENEWABLE`` and ``HYDROGEN`` come from the detailed input form; the
    others are the named sources of the what‑if simulator.
    """

    SOLAR = "Solar"
    WIND = "Wind"
    HYDRO = "Hydro"
    GRID_MIX = "Grid mix"
    COAL = "Coal"
    NATURAL_GAS = "Natural Gas"
    DIESEL = "Diesel"
    RENEWABLE = "Renewable"
    HYDROGEN = "Hydrogen"

    @classmethod
    def parse(cls, value) -> "EnergySource":
        """Resolve a free‑form name, falling back to the grid mix.

        Matching ignores case and surrounding whitespace so that
        "grid mix", "Grid Mix" and "Grid mix" are the same source.
        """
        if isinstance(value, cls):
            return value
        key = str(value or "").strip().lower()
        for member in cls:
            if member.value.lower() == key:
                return member
        logger.warning("Unknown energy source %r, using %s", value, cls.GRID_MIX.value)
        return cls.GRID_MIX


# presentation order
STAGES = tuple(Stage)
METRICS = tuple(Metric)
# metrics carried by bulk uploads (waste is not part of the upload schema)
UPLOAD_METRICS = (Metric.CO2, Metric.ENERGY, Metric.WATER)

METRIC_LABELS: Dict[Metric, str] = {
    Metric.CO2: "CO₂ (kg/kg)",
    Metric.ENERGY: "Energy (kWh/kg)",
    Metric.WATER: "Water (L/kg)",
    Metric.WASTE: "Waste (kg/kg)",
}


class ScenarioInput(BaseModel):
    """The user‑adjustable knobs driving all derived estimates.

    Serialised with the camelCase keys used by the persisted form state
    (``recycledPercent``, ``energySource``, ``transportDistanceKm``);
    both the camelCase and the snake_case names are accepted on input.
    Instances are frozen: the engine receives scenarios by value and
    never mutates them.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    recycled_percent: float = Field(
        30.0,
        ge=0.0,
        le=100.0,
        alias="recycledPercent",
        description="Share of recycled content in the input material (%).",
    )
    energy_source: EnergySource = Field(
        EnergySource.GRID_MIX,
        alias="energySource",
        description="Energy supply used by the process chain.",
    )
    transport_distance_km: float = Field(
        100.0,
        ge=0.0,
        alias="transportDistanceKm",
        description="Transport distance from supplier to plant (km).",
    )

    @field_validator("energy_source", mode="before")
    @classmethod
    def _resolve_energy_source(cls, v):
        return EnergySource.parse(v)


class ScenarioExtension(BaseModel):
    """Optional detail from the full input form.

    Kept apart from :class:`ScenarioInput`; the estimator ignores it.
    ``material`` is a display name and may fall outside the reference
    set (e.g. Lithium or Nickel).
    """

    model_config = ConfigDict(populate_by_name=True)

    material: str = Field("Aluminium", description="Material display name.")
    quantity: float = Field(1000.0, gt=0.0, description="Amount of material in the functional unit.")
    unit: Literal["kg", "tonne", "pieces"] = Field("kg")
    production_route: Literal["Primary", "Secondary", "Hybrid"] = Field("Primary", alias="productionRoute")
    transport_mode: Literal["Truck", "Rail", "Ship"] = Field("Truck", alias="transportMode")
    waste_streams: List[Literal["Red Mud", "Dross", "Tailings", "Spent Pot Lining", "Slag"]] = Field(
        default_factory=list, alias="wasteStreams"
    )
    end_of_life: List[Literal["Reuse", "Recycling", "Landfill", "Recovery"]] = Field(
        default_factory=list, alias="endOfLife"
    )
    ai_assist: bool = Field(True, alias="aiAssist")

    @field_validator("waste_streams", "end_of_life")
    @classmethod
    def _unique(cls, v):
        if len(set(v)) != len(v):
            raise ValueError("options must not repeat")
        return v

    def reference_material(self) -> Optional[Material]:
        """The matching reference material, or None if not covered."""
        return Material.parse(self.material)

    def functional_unit_kg(self) -> Optional[float]:
        if self.unit == "kg":
            return self.quantity
        if self.unit == "tonne":
            return self.quantity * 1000.0
        return None


class MaterialStageMetrics(BaseModel):
    """Impact values of one (material, stage) pair, per kg of product.

    ``waste`` is None when the source did not report it (bulk uploads).
    """

    model_config = ConfigDict(frozen=True)

    co2: float = Field(..., ge=0.0, description="kg CO₂ per kg")
    energy: float = Field(..., ge=0.0, description="kWh per kg")
    water: float = Field(..., ge=0.0, description="L per kg")
    waste: Optional[float] = Field(None, ge=0.0, description="kg waste per kg")

    def value(self, metric: Metric) -> Optional[float]:
        return getattr(self, Metric(metric).value)


# material -> stage -> metrics
Dataset = Dict[str, Dict[str, MaterialStageMetrics]]


class Prediction(BaseModel):
    predicted: float = Field(..., ge=0.0)
    actual: float = Field(..., ge=0.0)
    variance_pct: Optional[int] = Field(None, alias="variancePct")
    confidence: float = Field(..., ge=60.0, le=100.0)

    model_config = ConfigDict(populate_by_name=True)


class CircularityKPIs(BaseModel):
    """Circularity indicators, each an integer score in [0, 100]."""

    model_config = ConfigDict(populate_by_name=True)

    recycling_rate: int = Field(..., ge=0, le=100, alias="recyclingRate")
    resource_efficiency: int = Field(..., ge=0, le=100, alias="resourceEfficiency")
    extended_life: int = Field(..., ge=0, le=100, alias="extendedLife")
    circularity_score: int = Field(..., ge=0, le=100, alias="circularityScore")


class PathwayValues(BaseModel):
    emissions: float
    energy: float
    waste: float
    cost: float


class PathwayComparison(BaseModel):
    """Linear versus circular pathway with percentage improvements.

    An improvement is None when the linear baseline is zero.
    """

    linear: PathwayValues
    circular: PathwayValues
    improvement_pct: Dict[str, Optional[float]]


class StageRecord(BaseModel):
    """Mean upload values for one (material, stage) and the row count."""

    co2: float = Field(..., ge=0.0)
    energy: float = Field(..., ge=0.0)
    water: float = Field(..., ge=0.0)
    count: int = Field(..., ge=1)


class AggregatedDataset(BaseModel):
    materials: Dict[str, Dict[str, StageRecord]] = Field(default_factory=dict)
    total_rows: int = Field(0, ge=0, alias="totalRows")
    processed_at: datetime = Field(alias="processedAt")

    model_config = ConfigDict(populate_by_name=True)

    def to_metrics(self) -> Dataset:
        """Drop the row counts and return MaterialStageMetrics records."""
        return {
            material: {
                stage: MaterialStageMetrics(co2=rec.co2, energy=rec.energy, water=rec.water)
                for stage, rec in stages.items()
            }
            for material, stages in self.materials.items()
        }


class IngestResult(BaseModel):
    """Outcome of a bulk upload: either errors or an aggregated dataset."""

    errors: List[str] = Field(default_factory=list)
    dataset: Optional[AggregatedDataset] = None

    @property
    def ok(self) -> bool:
        return not self.errors and self.dataset is not None
