"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      — committed static defaults
  2. ``config/local.toml``        — optional local overrides (gitignored)
  3. ``.env``                     — local secrets and env overrides (gitignored)
  4. Environment variables        — ``FOURTH_DOWN_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

The decision-service origin is read once here and injected into the client
and dashboard as ``config.decision_api.base_url`` — nothing else in the
codebase looks at the environment.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator

DEFAULT_BASE_URL = "http://localhost:8008"

# ── Sub-config models ─────────────────────────────────────────────────────────


class DecisionApiConfig(BaseModel):
    """Remote decision service settings."""

    model_config = ConfigDict(frozen=True)

    base_url: str = DEFAULT_BASE_URL

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"base_url must start with http:// or https://, got '{v}'.")
        return v.rstrip("/")


class FormDefaults(BaseModel):
    """Initial values shown in the dashboard form (raw text, as typed)."""

    model_config = ConfigDict(frozen=True)

    down: str = "4"
    ydstogo: str = "2"
    yardline_100: str = "48"
    time_remaining: str = "900"
    qtr: str = "2"
    score_diff: str = "-3"
    offense_timeouts: str = "3"
    defense_timeouts: str = "3"
    home: str = "true"


class DashboardConfig(BaseModel):
    """Streamlit dashboard settings."""

    model_config = ConfigDict(frozen=True)

    title: str = "4th & Short Coach Dashboard"
    form_defaults: FormDefaults = FormDefaults()
    # Off: last response to resolve wins, even if it belongs to an older submit.
    discard_stale_responses: bool = False


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = ""
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

    The CLI and the dashboard each build one ``AppConfig`` at startup via
    ``load_config()`` and pass the relevant sections down.
    """

    model_config = ConfigDict(frozen=True)

    decision_api: DecisionApiConfig = DecisionApiConfig()
    dashboard: DashboardConfig = DashboardConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False


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
            ``<project_root>/config/default.toml``; when that default file is
            absent (e.g. a wheel install) built-in defaults are used.

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
    raw: dict[str, Any] = {}
    if config_path is None:
        default_path = root / "config" / "default.toml"
        if default_path.exists():
            config_path = default_path

    if config_path is not None:
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                "Create config/default.toml or omit --config to use built-in defaults."
            )
        with open(config_path, "rb") as f:
            raw = tomllib.load(f)

        # Also merge local.toml if present (gitignored local overrides)
        local_config_path = config_path.parent / "local.toml"
        if local_config_path.exists():
            with open(local_config_path, "rb") as f:
                local_raw: dict[str, Any] = tomllib.load(f)
            raw = _deep_merge(raw, local_raw)

    # 3. Apply FOURTH_DOWN_* environment variable overrides
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
    """Apply FOURTH_DOWN_* env vars to the raw config dict.

    Supported overrides:
      FOURTH_DOWN_API_URL    → raw["decision_api"]["base_url"]
      FOURTH_DOWN_LOG_LEVEL  → raw["logging"]["level"]
      FOURTH_DOWN_DEBUG      → raw["debug"]
    """
    if api_url := os.environ.get("FOURTH_DOWN_API_URL"):
        raw.setdefault("decision_api", {})["base_url"] = api_url

    if log_level := os.environ.get("FOURTH_DOWN_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if debug := os.environ.get("FOURTH_DOWN_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    project = raw.pop("project", {})

    dashboard_raw = dict(raw.get("dashboard", {}))
    form_defaults = FormDefaults(**dashboard_raw.pop("form_defaults", {}))

    return AppConfig(
        decision_api=DecisionApiConfig(**raw.get("decision_api", {})),
        dashboard=DashboardConfig(form_defaults=form_defaults, **dashboard_raw),
        logging=LoggingConfig(**raw.get("logging", {})),
        debug=raw.get("debug", project.get("debug", False)),
    )
