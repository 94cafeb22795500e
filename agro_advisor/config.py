"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      — committed static defaults
  2. ``config/local.toml``        — optional local overrides (gitignored)
  3. ``.env``                     — local secrets and env overrides (gitignored)
  4. Environment variables        — ``AGRO_ADVISOR_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

API keys are secrets and are never stored in TOML. They are read from the
environment (or ``.env``) when a collaborator client is built:
``WEATHER_API_KEY`` and ``TRANSLATION_API_KEY``.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator

# ── Sub-config models ─────────────────────────────────────────────────────────


class RulesConfig(BaseModel):
    """Rule source document location."""

    model_config = ConfigDict(frozen=True)

    rules_file: str = "config/rules/advisory_rules.json"


class ValidationConfig(BaseModel):
    """Accepted request values.

    Soil types and seasons are closed lists; common crops only feed the
    ``options`` listing, any crop name up to ``max_crop_length`` is accepted.
    """

    model_config = ConfigDict(frozen=True)

    soil_types: list[str] = ["Sandy", "Clay", "Loamy", "Black", "Red", "Alluvial"]
    seasons: list[str] = ["Kharif", "Rabi", "Summer", "Winter"]
    common_crops: list[str] = [
        "Rice", "Wheat", "Maize", "Cotton", "Sugarcane",
        "Groundnut", "Soybean", "Barley", "Millets", "Pulses",
        "Tomato", "Onion", "Potato", "Chili", "Brinjal",
    ]
    max_crop_length: int = 100

    @field_validator("max_crop_length")
    @classmethod
    def validate_max_crop_length(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"max_crop_length must be >= 1, got {v}.")
        return v


class WeatherConfig(BaseModel):
    """Current-weather API settings (OpenWeatherMap)."""

    model_config = ConfigDict(frozen=True)

    base_url: str = "https://api.openweathermap.org/data/2.5/weather"
    units: str = "metric"
    timeout_s: float = 10.0


class TranslationConfig(BaseModel):
    """Translation backend settings."""

    model_config = ConfigDict(frozen=True)

    source_language: str = "en"
    supported_languages: dict[str, str] = {
        "en": "English",
        "hi": "Hindi",
        "pa": "Punjabi",
    }
    provider: str = "google"
    timeout_s: float = 10.0
    concurrency: int = 8
    azure_region: str = "eastus"

    @field_validator("provider")
    @classmethod
    def validate_provider(cls, v: str) -> str:
        valid = {"google", "azure"}
        if v.lower() not in valid:
            raise ValueError(f"provider must be one of {sorted(valid)}, got '{v}'.")
        return v.lower()

    @field_validator("concurrency")
    @classmethod
    def validate_concurrency(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"concurrency must be >= 1, got {v}.")
        return v


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = "data/logs/agro_advisor.log"
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration — the single source of truth.

    ``AdvisoryService`` and every CLI command receive an ``AppConfig``
    instance. It is constructed by ``load_config()`` which merges TOML + .env.
    """

    model_config = ConfigDict(frozen=True)

    rules: RulesConfig = RulesConfig()
    validation: ValidationConfig = ValidationConfig()
    weather: WeatherConfig = WeatherConfig()
    translation: TranslationConfig = TranslationConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False

    def rules_path(self) -> Path:
        """Absolute rule source path; relative paths resolve from the project root."""
        path = Path(self.rules.rules_file)
        return path if path.is_absolute() else _find_project_root() / path


# ── Loader ────────────────────────────────────────────────────────────────────

_PROJECT_ROOT = Path(__file__).parent.parent


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (contains pyproject.toml)."""
    candidate = Path(__file__).parent
    for _ in range(5):
        if (candidate / "pyproject.toml").exists():
            return candidate
        candidate = candidate.parent
    return _PROJECT_ROOT


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. Defaults to
            ``<project_root>/config/default.toml``.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If the specified ``config_path`` does not exist.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()

    # 1. Load .env file (silently skip if missing)
    load_dotenv(dotenv_path=root / ".env", override=False)

    # 2. Load TOML config
    if config_path is None:
        config_path = root / "config" / "default.toml"

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_path}\n"
            "Create config/default.toml or pass --config."
        )

    with open(config_path, "rb") as f:
        raw: dict[str, Any] = tomllib.load(f)

    # Also merge local.toml if present (gitignored local overrides)
    local_config_path = config_path.parent / "local.toml"
    if local_config_path.exists():
        with open(local_config_path, "rb") as f:
            local_raw: dict[str, Any] = tomllib.load(f)
        raw = _deep_merge(raw, local_raw)

    # 3. Apply AGRO_ADVISOR_* environment variable overrides
    raw = _apply_env_overrides(raw)

    # 4. Build and validate AppConfig
    return _build_app_config(raw)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply environment variable overrides to the raw config dict.

    Supported overrides:
      AGRO_ADVISOR_RULES_FILE  → raw["rules"]["rules_file"]
      AGRO_ADVISOR_LOG_LEVEL   → raw["logging"]["level"]
      AGRO_ADVISOR_DEBUG       → raw["debug"]
      TRANSLATION_PROVIDER     → raw["translation"]["provider"]
    """
    if rules_file := os.environ.get("AGRO_ADVISOR_RULES_FILE"):
        raw.setdefault("rules", {})["rules_file"] = rules_file

    if log_level := os.environ.get("AGRO_ADVISOR_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if debug := os.environ.get("AGRO_ADVISOR_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    if provider := os.environ.get("TRANSLATION_PROVIDER"):
        raw.setdefault("translation", {})["provider"] = provider

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    project = raw.pop("project", {})

    return AppConfig(
        rules=RulesConfig(**raw.get("rules", {})),
        validation=ValidationConfig(**raw.get("validation", {})),
        weather=WeatherConfig(**raw.get("weather", {})),
        translation=TranslationConfig(**raw.get("translation", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        debug=raw.get("debug", project.get("debug", False)),
    )
