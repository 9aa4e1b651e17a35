# MIT License
"""Explicit storage for the current scenario.

The dashboard pages share one scenario.  Instead of each page reading
and writing an ambient key, they receive a :class:`ScenarioStore` that
wraps a mapping backend (``st.session_state`` in the app, a plain dict
in tests) and stores the scenario as JSON under a single key.  Writes
are last‑write‑wins; there is no versioning or migration.
"""

from __future__ import annotations

import logging
from typing import MutableMapping, Optional

from pydantic import ValidationError

from .params import ScenarioExtension, ScenarioInput

logger = logging.getLogger(__name__)

SCENARIO_KEY = "inputDataForm"
EXTENSION_KEY = "inputDataExtension"


class ScenarioStore:
    """Load and save the shared :class:`ScenarioInput`.

    Parameters
    ----------
    backend:
        Mapping holding the serialised values.  Defaults to a new dict.
    default:
        Scenario returned when nothing valid is stored.
    """

    def __init__(self, backend: Optional[MutableMapping] = None, default: Optional[ScenarioInput] = None):
        self._backend = {} if backend is None else backend
        self._default = default or ScenarioInput()

    def load(self) -> ScenarioInput:
        raw = self._backend.get(SCENARIO_KEY)
        if raw is None:
            return self._default
        try:
            return ScenarioInput.model_validate_json(raw)
        except ValidationError as exc:
            logger.warning("Discarding malformed stored scenario: %s", exc.errors()[:1])
            return self._default

    def save(self, scenario: ScenarioInput) -> None:
        self._backend[SCENARIO_KEY] = scenario.model_dump_json(by_alias=True)
        logger.info("Saved scenario %s", scenario.model_dump(by_alias=True, mode="json"))

    def load_extension(self) -> Optional[ScenarioExtension]:
        """The stored form details, or None when absent or malformed."""
        raw = self._backend.get(EXTENSION_KEY)
        if raw is None:
            return None
        try:
            return ScenarioExtension.model_validate_json(raw)
        except ValidationError as exc:
            logger.warning("Discarding malformed stored scenario details: %s", exc.errors()[:1])
            return None

    def save_extension(self, extension: ScenarioExtension) -> None:
        self._backend[EXTENSION_KEY] = extension.model_dump_json(by_alias=True)

    def clear(self) -> None:
        for key in (SCENARIO_KEY, EXTENSION_KEY):
            self._backend.pop(key, None)
