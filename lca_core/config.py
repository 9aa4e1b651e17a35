# MIT License
"""Runtime settings and logging setup.

Settings come from ``LCA_``‑prefixed environment variables and are
validated with pydantic, so a bad value fails at start‑up rather than
deep inside a calculation.
"""

from __future__ import annotations

import logging
import os
from typing import Literal, Mapping, Optional

from pydantic import BaseModel, Field

from .params import Material, ScenarioInput

ENV_PREFIX = "LCA_"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class Settings(BaseModel):
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field("INFO")
    default_material: Material = Field(Material.ALUMINIUM, description="Material shown on first load.")
    max_upload_mb: float = Field(10.0, gt=0.0, le=500.0, description="Largest accepted upload (MB).")
    default_scenario: ScenarioInput = Field(default_factory=ScenarioInput)

    @property
    def max_upload_bytes(self) -> int:
        return int(self.max_upload_mb * 1024 * 1024)


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build :class:`Settings` from the environment.

    Recognised variables: ``LCA_LOG_LEVEL``, ``LCA_DEFAULT_MATERIAL``,
    ``LCA_MAX_UPLOAD_MB``, ``LCA_RECYCLED_PERCENT``, ``LCA_ENERGY_SOURCE``
    and ``LCA_TRANSPORT_DISTANCE_KM``.

    Raises
    ------
    pydantic.ValidationError
        A variable holds an invalid value.
    """
    env = os.environ if environ is None else environ
    data = {}
    for field in ("log_level", "default_material", "max_upload_mb"):
        value = env.get(ENV_PREFIX + field.upper())
        if value is not None:
            data[field] = value.upper() if field == "log_level" else value
    scenario = {}
    for field in ("recycled_percent", "energy_source", "transport_distance_km"):
        value = env.get(ENV_PREFIX + field.upper())
        if value is not None:
            scenario[field] = value
    if scenario:
        data["default_scenario"] = scenario
    return Settings.model_validate(data)


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger once; later calls only adjust the level."""
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    root.setLevel(level)
