"""Application configuration management.

Handles loading and validating configuration from multiple sources:
    - TOML/JSON config files
    - Environment variables (ERRLEARN_* prefix)
    - Default values

Key components:
    - AppConfig: Main configuration model
    - LearningConfig: Thresholds and limits of the error learning registry
    - load_config(): Safe config loading with fallback
    - ConfigLoadResult: Metadata about config source
"""

from __future__ import annotations

import json
import os
import tomllib
from collections.abc import Mapping
from contextlib import nullcontext
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from unittest.mock import patch

from pydantic import BaseModel, Field, ValidationError, model_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

CONFIG_ENV_VAR = "ERRORLEARNING_CONFIG"


class ConfigError(RuntimeError):
    """Raised when configuration cannot be loaded or validated."""


# -----------------------------------------------------------------------------
# Sub-configuration Models
# -----------------------------------------------------------------------------


class LearningConfig(BaseModel):
    """Thresholds and limits applied by the error learning registry."""

    warning_threshold: int = Field(
        default=3, ge=1, description="Occurrences before the warning tier fires."
    )
    auto_fix_threshold: int = Field(
        default=5, ge=1, description="Occurrences before a pattern is marked auto-fixable."
    )
    recent_errors_limit: int = Field(
        default=10, ge=0, description="Entries returned as recent errors in statistics."
    )
    last_occurrences_limit: int = Field(
        default=5, ge=0, description="Timestamps kept per entry for identical earlier reports."
    )
    recurrence_prefix_length: int = Field(
        default=50, ge=1, description="Message prefix used to detect a recurring error."
    )
    description_prefix_length: int = Field(
        default=100, ge=1, description="Message prefix stored in a pattern description."
    )
    id_message_length: int = Field(
        default=20, ge=1, description="Sanitized message characters embedded in entry ids."
    )
    learning_rule_prefix_length: int = Field(
        default=30, ge=1, description="Message prefix used to key learning rules."
    )
    default_file: str = Field(
        default="manual-entry", description="Affected file recorded when none is reported."
    )
    emit_reports: bool = Field(
        default=True, description="Log the full textual report for every logged error."
    )

    @model_validator(mode="after")
    def check_threshold_order(self) -> LearningConfig:
        if self.auto_fix_threshold < self.warning_threshold:
            raise ValueError("auto_fix_threshold must not be lower than warning_threshold")
        return self


class McpConfig(BaseModel):
    """Settings for the MCP admin server."""

    server_name: str = Field(default="errorlearning", description="Name announced by FastMCP.")


@dataclass
class ConfigLoadResult:
    path: Path
    file_loaded: bool
    env_overrides: set[str]
    error: str | None = None


class AppConfig(BaseSettings):
    """Application-wide configuration with nested sub-configs."""

    model_config = SettingsConfigDict(
        env_prefix="ERRLEARN_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    log_level: str = Field(default="INFO", description="Log level for errlearn output.")
    learning: LearningConfig = Field(default_factory=LearningConfig)
    mcp: McpConfig = Field(default_factory=McpConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[
        PydanticBaseSettingsSource,
        PydanticBaseSettingsSource,
        PydanticBaseSettingsSource,
        PydanticBaseSettingsSource,
    ]:
        # Environment variables override config file entries.
        return (env_settings, init_settings, dotenv_settings, file_secret_settings)


def _resolve_config_path(config_path: Path | None, env_vars: Mapping[str, str]) -> Path:
    candidate = config_path or env_vars.get(CONFIG_ENV_VAR) or (Path.home() / ".errlearn.toml")
    return Path(candidate).expanduser()


def _read_config_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}

    raw = path.read_text(encoding="utf-8")
    suffix = path.suffix.lower()
    parser = json.loads if suffix == ".json" else tomllib.loads

    try:
        data = parser(raw)
    except (json.JSONDecodeError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Syntax error in {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Config root in {path} must be a mapping.")

    return data


def _detect_env_overrides(env_vars: Mapping[str, str]) -> set[str]:
    """Detect which fields are overridden by environment variables.

    Top-level fields use ERRLEARN_LOG_LEVEL, nested ones
    ERRLEARN_LEARNING__WARNING_THRESHOLD.
    """
    prefix = AppConfig.model_config.get("env_prefix", "")
    delimiter = AppConfig.model_config.get("env_nested_delimiter", "__")
    overrides: set[str] = set()

    if f"{prefix}log_level".upper() in env_vars:
        overrides.add("log_level")

    nested_models: dict[str, type[BaseModel]] = {
        "learning": LearningConfig,
        "mcp": McpConfig,
    }

    for group_name, model_cls in nested_models.items():
        for field in model_cls.model_fields:
            env_key = f"{prefix}{group_name}{delimiter}{field}".upper()
            if env_key in env_vars:
                overrides.add(f"{group_name}.{field}")

    return overrides


def load_config(
    config_path: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> tuple[AppConfig, ConfigLoadResult]:
    """
    Load configuration with Safe Mode fallback.
    If the file is invalid, returns default config + error message.
    """
    env_vars: Mapping[str, str] = os.environ if env is None else {**os.environ, **env}
    resolved_path = _resolve_config_path(config_path, env_vars)
    env_overrides = _detect_env_overrides(env_vars)

    error: str | None = None
    file_loaded = False
    file_data: dict[str, Any] = {}

    try:
        file_data = _read_config_file(resolved_path)
        file_loaded = resolved_path.exists()
    except ConfigError as exc:
        error = str(exc)

    context_manager = (
        patch.dict(os.environ, env_vars, clear=False) if env is not None else nullcontext()
    )

    try:
        with context_manager:
            config = AppConfig(**file_data)
    except ValidationError as exc:
        error = str(exc)
        config = AppConfig.model_construct(
            log_level="INFO", learning=LearningConfig(), mcp=McpConfig()
        )

    load_result = ConfigLoadResult(
        path=resolved_path,
        file_loaded=file_loaded,
        env_overrides=env_overrides,
        error=error,
    )

    return config, load_result
