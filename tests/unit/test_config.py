"""Tests for core/config.py - layered configuration with safe mode."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from errorlearning.core.config import AppConfig, LearningConfig, load_config


def test_defaults_without_file(isolate_config: Path) -> None:
    config, meta = load_config()

    assert meta.path == isolate_config
    assert meta.file_loaded is False
    assert meta.error is None
    assert config.log_level == "INFO"
    assert config.learning.warning_threshold == 3
    assert config.learning.auto_fix_threshold == 5
    assert config.learning.default_file == "manual-entry"
    assert config.mcp.server_name == "errorlearning"


def test_toml_file_is_loaded(isolate_config: Path) -> None:
    isolate_config.write_text(
        'log_level = "DEBUG"\n\n[learning]\nwarning_threshold = 2\nrecent_errors_limit = 4\n',
        encoding="utf-8",
    )

    config, meta = load_config()

    assert meta.file_loaded is True
    assert config.log_level == "DEBUG"
    assert config.learning.warning_threshold == 2
    assert config.learning.recent_errors_limit == 4
    assert config.learning.auto_fix_threshold == 5


def test_json_file_is_loaded(tmp_path: Path) -> None:
    path = tmp_path / "errlearn.json"
    path.write_text('{"learning": {"default_file": "unknown.ts"}}', encoding="utf-8")

    config, meta = load_config(config_path=path)

    assert meta.file_loaded is True
    assert config.learning.default_file == "unknown.ts"


def test_env_overrides_file(isolate_config: Path) -> None:
    isolate_config.write_text("[learning]\nauto_fix_threshold = 8\n", encoding="utf-8")

    config, meta = load_config(
        env={"ERRLEARN_LEARNING__AUTO_FIX_THRESHOLD": "6", "ERRLEARN_LOG_LEVEL": "WARNING"}
    )

    assert config.learning.auto_fix_threshold == 6
    assert config.log_level == "WARNING"
    assert meta.env_overrides == {"learning.auto_fix_threshold", "log_level"}


def test_syntax_error_enters_safe_mode(isolate_config: Path) -> None:
    isolate_config.write_text("[learning\nwarning_threshold = 2\n", encoding="utf-8")

    config, meta = load_config()

    assert meta.error is not None
    assert "Syntax error" in meta.error
    assert config.learning.warning_threshold == 3


def test_invalid_thresholds_enter_safe_mode(isolate_config: Path) -> None:
    isolate_config.write_text(
        "[learning]\nwarning_threshold = 6\nauto_fix_threshold = 5\n", encoding="utf-8"
    )

    config, meta = load_config()

    assert meta.error is not None
    assert config.learning.warning_threshold == 3
    assert config.learning.auto_fix_threshold == 5


def test_learning_config_rejects_inverted_thresholds() -> None:
    with pytest.raises(ValidationError):
        LearningConfig(warning_threshold=5, auto_fix_threshold=3)


def test_app_config_nested_models() -> None:
    config = AppConfig(learning=LearningConfig(id_message_length=8))
    assert config.learning.id_message_length == 8
    assert config.model_dump()["learning"]["id_message_length"] == 8
