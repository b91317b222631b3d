"""
Engine settings: fork-join thresholds, minimum population size and executor choice.

Examples:
    # Fluent builder
    settings = EngineConfig().evaluation_threshold(100).executor("serial").fixed()

    # Defaults
    settings = EngineConfig.default()

    # From a dictionary or a YAML/JSON file
    settings = EngineConfig.from_dict({"min_population_size": 10})
    settings = load_settings("engine.yaml")
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml

from .exceptions import ConfigurationError

DEFAULT_POPULATION_THRESHOLD = 50
DEFAULT_EVALUATION_THRESHOLD = 60
DEFAULT_BREEDING_THRESHOLD = 60
DEFAULT_MIN_POPULATION_SIZE = 6

_EXECUTORS = ("serial", "threads")


class _SerializableConfig:
    """Mixin to serialize dataclass configs."""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), sort_keys=True)


@dataclass(frozen=True)
class EngineSettings(_SerializableConfig):
    population_threshold: int = DEFAULT_POPULATION_THRESHOLD
    evaluation_threshold: int = DEFAULT_EVALUATION_THRESHOLD
    breeding_threshold: int = DEFAULT_BREEDING_THRESHOLD
    min_population_size: int = DEFAULT_MIN_POPULATION_SIZE
    executor: str = "threads"
    max_workers: int | None = None

    def __post_init__(self) -> None:
        for name in ("population_threshold", "evaluation_threshold", "breeding_threshold"):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 2:
                raise ConfigurationError(f"{name} must be an integer >= 2, got {value!r}.", details={name: value})
        if not isinstance(self.min_population_size, int) or self.min_population_size < 1:
            raise ConfigurationError(
                f"min_population_size must be a positive integer, got {self.min_population_size!r}.",
                details={"min_population_size": self.min_population_size},
            )
        if self.executor not in _EXECUTORS:
            raise ConfigurationError(
                f"Unknown executor '{self.executor}'.",
                f"Available executors: {', '.join(_EXECUTORS)}",
                {"executor": self.executor},
            )
        if self.max_workers is not None and self.max_workers < 1:
            raise ConfigurationError("max_workers must be positive when given.", details={"max_workers": self.max_workers})


class EngineConfig:
    """Fluent builder yielding an immutable EngineSettings."""

    def __init__(self) -> None:
        self._cfg: Dict[str, Any] = {}

    @classmethod
    def default(cls) -> EngineSettings:
        return cls().fixed()

    @classmethod
    def from_dict(cls, config: Mapping[str, Any]) -> EngineSettings:
        known = {f.name for f in fields(EngineSettings)}
        unknown = sorted(set(config) - known)
        if unknown:
            raise ConfigurationError(
                f"Unknown engine setting(s): {', '.join(unknown)}.",
                f"Valid settings: {', '.join(sorted(known))}",
                {"unknown": unknown},
            )
        builder = cls()
        builder._cfg.update(config)
        return builder.fixed()

    def population_threshold(self, value: int) -> "EngineConfig":
        self._cfg["population_threshold"] = int(value)
        return self

    def evaluation_threshold(self, value: int) -> "EngineConfig":
        self._cfg["evaluation_threshold"] = int(value)
        return self

    def breeding_threshold(self, value: int) -> "EngineConfig":
        self._cfg["breeding_threshold"] = int(value)
        return self

    def min_population_size(self, value: int) -> "EngineConfig":
        self._cfg["min_population_size"] = int(value)
        return self

    def executor(self, name: str, max_workers: int | None = None) -> "EngineConfig":
        self._cfg["executor"] = str(name).lower()
        if max_workers is not None:
            self._cfg["max_workers"] = int(max_workers)
        return self

    def fixed(self) -> EngineSettings:
        return EngineSettings(**self._cfg)


def load_settings(path: str | Path) -> EngineSettings:
    """
    Load engine settings from a YAML or JSON file.

    A top-level ``engine`` section is used when present, so the settings can live
    inside a larger experiment file.
    """
    settings_path = Path(path).expanduser().resolve()
    if not settings_path.exists():
        raise FileNotFoundError(f"Settings file '{settings_path}' does not exist.")
    with settings_path.open("r", encoding="utf-8") as fh:
        if settings_path.suffix.lower() in {".yaml", ".yml"}:
            data = yaml.safe_load(fh) or {}
        else:
            data = json.load(fh)
    if not isinstance(data, Mapping):
        raise ConfigurationError(f"Settings file '{settings_path}' must contain a mapping.")
    section = data.get("engine", data)
    return EngineConfig.from_dict(section)


__all__ = [
    "DEFAULT_POPULATION_THRESHOLD",
    "DEFAULT_EVALUATION_THRESHOLD",
    "DEFAULT_BREEDING_THRESHOLD",
    "DEFAULT_MIN_POPULATION_SIZE",
    "EngineSettings",
    "EngineConfig",
    "load_settings",
]
