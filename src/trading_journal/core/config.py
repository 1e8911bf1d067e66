"""Configuration management.

Loads from TOML config files + environment variables.
Uses pydantic-settings for validation and env var overriding.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Mapping

from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings

from .enums import ProfitFormula, StorageBackend


# ---------------------------------------------------------------------------
# Sub-configs
# ---------------------------------------------------------------------------

class AnalyticsConfig(BaseModel):
    tilt_threshold: int = Field(default=3, ge=1)  # Consecutive losses before tilt
    profit_formula: ProfitFormula = ProfitFormula.PIP_DYNAMIC
    notional_multiplier: float = 1000.0  # Margin estimate for profit %
    dedupe_violations_per_trade: bool = False
    validate_stop_placement: bool = False
    discrepancy_tolerance: float = 0.01  # Stored vs recomputed profit


class StorageConfig(BaseModel):
    backend: StorageBackend = StorageBackend.MEMORY
    database_url: str = "sqlite:///trading_journal.db"
    echo_sql: bool = False


class ObservabilityConfig(BaseModel):
    log_level: str = "INFO"
    log_format: str = "json"  # "json" or "console"


# ---------------------------------------------------------------------------
# Top-level settings
# ---------------------------------------------------------------------------

class Settings(BaseSettings):
    """Top-level application settings.

    Loaded from TOML config files, overridden by environment variables.
    """

    analytics: AnalyticsConfig = Field(default_factory=AnalyticsConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    model_config = {"env_prefix": "JOURNAL_", "env_nested_delimiter": "__"}


def _drop_env_keys(data: dict[str, Any], environ: Mapping[str, str]) -> None:
    """Remove file values that an environment variable also sets."""
    prefix = Settings.model_config["env_prefix"]
    for name in environ:
        if not name.upper().startswith(prefix):
            continue
        *parents, leaf = name[len(prefix):].lower().split("__")
        node: Any = data
        for part in parents:
            node = node.get(part)
            if not isinstance(node, dict):
                break
        else:
            node.pop(leaf, None)


def load_settings(
    config_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> Settings:
    """Load settings from TOML file + env vars.

    Precedence, highest first: ``overrides``, environment variables,
    the TOML file, field defaults.

    Args:
        config_path: Path to TOML config file (optional).
        overrides: Dict of overrides to apply on top.

    Raises:
        ConfigError: the file is not valid TOML or a value fails validation.
    """
    from .errors import ConfigError

    data: dict[str, Any] = {}
    source = "settings"

    if config_path:
        path = Path(config_path)
        if path.exists():
            import tomli

            source = f"config file {path}"
            with open(path, "rb") as f:
                try:
                    data = tomli.load(f)
                except tomli.TOMLDecodeError as exc:
                    raise ConfigError(f"Invalid {source}: {exc}") from exc
            _drop_env_keys(data, os.environ)

    if overrides:
        data.update(overrides)

    try:
        return Settings(**data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid {source}: {exc}") from exc
