"""Tests for the scenario store, settings and scenario models.

The store is exercised with a plain dict backend, which stands in for
``st.session_state``.
"""

import json

import pytest
from pydantic import ValidationError

from lca_core.config import load_settings
from lca_core.params import EnergySource, Material, ScenarioExtension, ScenarioInput
from lca_core.store import EXTENSION_KEY, SCENARIO_KEY, ScenarioStore


def test_load_default_when_empty():
    store = ScenarioStore({})
    assert store.load() == ScenarioInput()


def test_save_and_load_last_write_wins():
    backend = {}
    store = ScenarioStore(backend)
    store.save(ScenarioInput(recycled_percent=10, energy_source="Coal", transport_distance_km=5))
    store.save(ScenarioInput(recycled_percent=80, energy_source="Hydro", transport_distance_km=0))
    stored = json.loads(backend[SCENARIO_KEY])
    assert stored == {"recycledPercent": 80.0, "energySource": "Hydro", "transportDistanceKm": 0.0}
    # a second store over the same backend sees the same scenario
    assert ScenarioStore(backend).load().energy_source == EnergySource.HYDRO


def test_malformed_value_falls_back_to_default():
    default = ScenarioInput(recycled_percent=42)
    store = ScenarioStore({SCENARIO_KEY: "{not json"}, default=default)
    assert store.load() == default
    store = ScenarioStore({SCENARIO_KEY: json.dumps({"recycledPercent": 250})}, default=default)
    assert store.load() == default


def test_extension_kept_separately():
    backend = {}
    store = ScenarioStore(backend)
    assert store.load_extension() is None
    ext = ScenarioExtension(material="Nickel", quantity=2, unit="tonne", wasteStreams=["Slag"], endOfLife=["Reuse"])
    store.save_extension(ext)
    assert set(backend) == {EXTENSION_KEY}
    loaded = store.load_extension()
    assert loaded == ext
    assert loaded.reference_material() is None
    assert loaded.functional_unit_kg() == 2000.0
    store.clear()
    assert backend == {}


def test_scenario_input_validation():
    scn = ScenarioInput(recycledPercent=20, energySource="  wind ", transportDistanceKm=10)
    assert scn.energy_source == EnergySource.WIND
    assert ScenarioInput(energy_source="Nuclear").energy_source == EnergySource.GRID_MIX
    with pytest.raises(ValidationError):
        ScenarioInput(recycled_percent=101)
    with pytest.raises(ValidationError):
        ScenarioInput(transport_distance_km=-1)
    with pytest.raises(ValidationError):
        scn.recycled_percent = 50


def test_extension_rejects_repeated_options():
    with pytest.raises(ValidationError):
        ScenarioExtension(endOfLife=["Reuse", "Reuse"])
    assert ScenarioExtension(material="copper", unit="pieces").functional_unit_kg() is None
    assert ScenarioExtension(material="Copper").reference_material() == Material.COPPER


def test_settings_from_environment():
    settings = load_settings({
        "LCA_LOG_LEVEL": "debug",
        "LCA_DEFAULT_MATERIAL": "copper",
        "LCA_MAX_UPLOAD_MB": "2",
        "LCA_RECYCLED_PERCENT": "40",
        "LCA_ENERGY_SOURCE": "Solar",
    })
    assert settings.log_level == "DEBUG"
    assert settings.default_material == Material.COPPER
    assert settings.max_upload_bytes == 2 * 1024 * 1024
    assert settings.default_scenario.recycled_percent == 40
    assert settings.default_scenario.energy_source == EnergySource.SOLAR
    assert load_settings({}).default_scenario == ScenarioInput()


def test_settings_reject_bad_values():
    with pytest.raises(ValidationError):
        load_settings({"LCA_MAX_UPLOAD_MB": "-1"})
    with pytest.raises(ValidationError):
        load_settings({"LCA_DEFAULT_MATERIAL": "lithium"})
