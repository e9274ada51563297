# src/drivestate/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/drivestate/config/defaults.yaml`, then optionally overridden by:
- environment variables (e.g., `DRIVESTATE_LOG_LEVEL`, `DRIVESTATE_TIMEZONE`)
- an external YAML file via `DRIVESTATE_CONFIG_PATH`

Design rule:
- Tuning knobs live in YAML, not hard-coded in business logic.
- The parking weight tables are NOT settings; they are fixed constants in
  `drivestate.features.parking`.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any
from drivestate.core.env import load_dotenv_if_present, resolve_data_path

import yaml
from pydantic import BaseModel, Field


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `drivestate.config`."""
    text = resources.files("drivestate.config").joinpath(filename).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {filename}; expected a mapping.")
    return data


def _read_yaml_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML file from disk and return its mapping root."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {path}; expected a mapping.")
    return data


class AppSettings(BaseModel):
    name: str = "DriveState"
    # IANA zone used to read epoch timestamps; None means the process's local zone.
    timezone: str | None = None
    log_level: str = "INFO"


class EngineSettings(BaseModel):
    max_distance_miles: float = Field(25, gt=0)
    cone_angle_degrees: float = Field(90, gt=0, le=360)
    max_results: int = Field(20, ge=1)


class CatalogSettings(BaseModel):
    path: str = "data/catalogs/pois.json"


class ContextSettings(BaseModel):
    max_upcoming_pois: int = Field(8, ge=1)
    stopped_speed_mph: float = Field(1.0, ge=0)
    max_eta_minutes: int = Field(24 * 60, ge=1)


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    engine: EngineSettings = Field(default_factory=EngineSettings)
    catalog: CatalogSettings = Field(default_factory=CatalogSettings)
    context: ContextSettings = Field(default_factory=ContextSettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload.

    Note: We intentionally keep this whitelist small.
    """
    load_dotenv_if_present()
    data = dict(data)

    log_level = os.getenv("DRIVESTATE_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    timezone = os.getenv("DRIVESTATE_TIMEZONE")
    if timezone:
        data.setdefault("app", {})["timezone"] = timezone

    catalog_path = os.getenv("DRIVESTATE_CATALOG_PATH")
    if catalog_path:
        data.setdefault("catalog", {})["path"] = catalog_path

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("DRIVESTATE_CONFIG_PATH")
    raw = _read_yaml_file(resolve_data_path(config_path)) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
