from __future__ import annotations

import sys
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

import pytest
from rich.console import Console
from typer.testing import CliRunner

ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from errorlearning.learning.registry import ErrorLearningRegistry  # noqa: E402

START = datetime(2026, 10, 17, 8, 0, 0, tzinfo=UTC)


class SteppingClock:
    """Deterministic clock advancing a fixed step on every call."""

    def __init__(self, start: datetime = START, step: timedelta = timedelta(seconds=1)) -> None:
        self.current = start
        self.step = step

    def __call__(self) -> datetime:
        moment = self.current
        self.current = moment + self.step
        return moment


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture(autouse=True)
def ensure_commands_registered() -> None:
    """Ensure CLI commands are registered before tests run.

    Tests using CliRunner bypass cli(), so the command groups are
    registered explicitly.
    """
    from errorlearning.main import _register_commands

    _register_commands()


@pytest.fixture(autouse=True)
def isolate_config(tmp_path: Path, monkeypatch: Any) -> Path:
    """Point config to a temp path so tests don't touch user state."""
    cfg_path = tmp_path / "config.toml"
    monkeypatch.setenv("ERRORLEARNING_CONFIG", str(cfg_path))
    return cfg_path


@pytest.fixture(autouse=True)
def capture_console(monkeypatch: Any) -> Console:
    """Use an in-memory Rich console during tests."""
    test_console = Console(record=True, width=200)
    import errorlearning.commands.learn as learn_cmd
    import errorlearning.core.console as core_console
    import errorlearning.core.decorators as decorators
    import errorlearning.main as el_main

    monkeypatch.setattr(core_console, "console", test_console)
    monkeypatch.setattr(el_main, "console", test_console)
    monkeypatch.setattr(learn_cmd, "console", test_console)
    monkeypatch.setattr(decorators, "console", test_console)
    return test_console


@pytest.fixture
def clock() -> SteppingClock:
    return SteppingClock()


@pytest.fixture
def registry(clock: SteppingClock) -> ErrorLearningRegistry:
    return ErrorLearningRegistry(clock=clock)


@pytest.fixture
def log_many(registry: ErrorLearningRegistry) -> Callable[..., list[str]]:
    """Log ``count`` identical reports and return their ids."""

    def _log(count: int, kind: str = "SYNTAX", message: str = "Missing semicolon") -> list[str]:
        return [
            registry.log_error(kind, message, "client/src/app.ts", "user input validation")
            for _ in range(count)
        ]

    return _log
