from __future__ import annotations

import json

import pytest

from genevo.foundation.config import EngineConfig, EngineSettings, load_settings
from genevo.foundation.exceptions import ConfigurationError, GenevoError


def test_default_settings():
    settings = EngineConfig.default()
    assert settings == EngineSettings()
    assert settings.population_threshold == 50
    assert settings.evaluation_threshold == 60
    assert settings.breeding_threshold == 60
    assert settings.min_population_size == 6
    assert settings.executor == "threads"
    assert settings.max_workers is None


def test_fluent_builder_is_fixed():
    settings = (
        EngineConfig()
        .population_threshold(10)
        .evaluation_threshold(20)
        .breeding_threshold(30)
        .min_population_size(4)
        .executor("SERIAL")
        .fixed()
    )
    assert (settings.population_threshold, settings.evaluation_threshold, settings.breeding_threshold) == (10, 20, 30)
    assert settings.min_population_size == 4
    assert settings.executor == "serial"
    with pytest.raises(AttributeError):
        settings.min_population_size = 8  # type: ignore[misc]


def test_settings_serialize_to_json():
    settings = EngineConfig().executor("threads", max_workers=3).fixed()
    data = json.loads(settings.to_json())
    assert data["max_workers"] == 3
    assert settings.to_dict() == data


def test_from_dict_rejects_unknown_keys():
    with pytest.raises(ConfigurationError) as excinfo:
        EngineConfig.from_dict({"evaluation_threshold": 10, "populaton_threshold": 5})
    assert "populaton_threshold" in str(excinfo.value)
    assert excinfo.value.details["unknown"] == ["populaton_threshold"]


@pytest.mark.parametrize(
    "overrides",
    [
        {"evaluation_threshold": 1},
        {"breeding_threshold": 0},
        {"population_threshold": 2.5},
        {"min_population_size": 0},
        {"executor": "processes"},
        {"max_workers": 0},
    ],
)
def test_invalid_settings_raise_configuration_error(overrides):
    with pytest.raises(ConfigurationError) as excinfo:
        EngineConfig.from_dict(overrides)
    assert isinstance(excinfo.value, ValueError)
    assert isinstance(excinfo.value, GenevoError)


def test_load_settings_from_yaml_engine_section(tmp_path):
    path = tmp_path / "experiment.yaml"
    path.write_text(
        "engine:\n"
        "  evaluation_threshold: 100\n"
        "  executor: serial\n"
        "selection:\n"
        "  method: maximize\n",
        encoding="utf-8",
    )
    settings = load_settings(path)
    assert settings.evaluation_threshold == 100
    assert settings.executor == "serial"
    assert settings.breeding_threshold == 60


def test_load_settings_from_flat_json(tmp_path):
    path = tmp_path / "engine.json"
    path.write_text(json.dumps({"min_population_size": 10}), encoding="utf-8")
    assert load_settings(path).min_population_size == 10


def test_load_settings_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_settings(tmp_path / "missing.yaml")


def test_load_settings_requires_mapping(tmp_path):
    path = tmp_path / "engine.yaml"
    path.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ConfigurationError, match="mapping"):
        load_settings(path)
