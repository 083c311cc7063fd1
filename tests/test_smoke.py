from __future__ import annotations

from pathlib import Path

import click
from typer.main import get_command
from typer.testing import CliRunner

from errorlearning import __version__
from errorlearning.core.config import AppConfig
from errorlearning.main import app

runner = CliRunner()


def test_app_version() -> None:
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_all_commands_have_help() -> None:
    """
    Critical Smoke Test: Iterate over EVERY registered command and ensure
    it accepts --help. This catches import errors and broken decorators
    in the command modules.
    """
    click_app = get_command(app)
    assert isinstance(click_app, click.Group)
    assert "learn" in click_app.commands
    for name in click_app.commands:
        result = runner.invoke(app, [name, "--help"])
        assert result.exit_code == 0, f"Command 'errlearn {name} --help' failed!"
        assert "Usage:" in result.stdout


def test_config_command_shows_learning_keys() -> None:
    result = runner.invoke(app, ["config"])
    assert result.exit_code == 0
    assert "learning.warning_threshold" in result.stdout
    assert "File loaded: no" in result.stdout


def test_broken_config_shows_safe_mode(isolate_config: Path) -> None:
    isolate_config.write_text("[learning]\nwarning_threshold = 0\n", encoding="utf-8")
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert "Safe Mode Active" in result.stdout


def test_mcp_server_registers_tools() -> None:
    """Ensure the MCP server imports cleanly and exposes every admin tool."""
    from mcp.server.fastmcp import FastMCP

    from errorlearning.mcp.server import register_tools
    from errorlearning.mcp.tools import discover_tools

    assert set(discover_tools()) == {
        "report_error",
        "document_solution",
        "error_statistics",
        "export_knowledge_base",
    }
    server = FastMCP(AppConfig().mcp.server_name)
    assert register_tools(server) == 4
