"""
Centralized error formatting for CLI and MCP contexts.

This module provides consistent error formatting across the command line
and the MCP admin surface, ensuring errors are presented appropriately for
each interface.
"""

from __future__ import annotations

import json
import traceback
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any

from errorlearning.core.config import ConfigError
from errorlearning.core.result import (
    ConfigurationError,
    ErrorLearningError,
    ReplayError,
    Result,
    ValidationError,
)


class ErrorSeverity(Enum):
    """Severity levels for error display."""

    INFO = auto()
    WARNING = auto()
    ERROR = auto()
    CRITICAL = auto()


@dataclass(frozen=True, slots=True)
class FormattedError:
    """A formatted error ready for display."""

    message: str
    severity: ErrorSeverity
    code: str
    details: dict[str, Any]
    traceback: str | None = None


def _error_code(exc: Exception) -> str:
    """Derive an error code from exception type."""
    if isinstance(exc, ValidationError):
        return "VALIDATION_ERROR"
    if isinstance(exc, (ConfigurationError, ConfigError)):
        return "CONFIG_ERROR"
    if isinstance(exc, ReplayError):
        return "REPLAY_ERROR"
    if isinstance(exc, ErrorLearningError):
        return "LEARNING_ERROR"
    if isinstance(exc, FileNotFoundError):
        return "FILE_NOT_FOUND"
    if isinstance(exc, PermissionError):
        return "PERMISSION_DENIED"
    return "UNEXPECTED_ERROR"


def _severity(exc: Exception) -> ErrorSeverity:
    """Determine severity based on exception type."""
    if isinstance(exc, (ValidationError, FileNotFoundError)):
        return ErrorSeverity.WARNING
    if isinstance(exc, ErrorLearningError):
        return ErrorSeverity.ERROR
    if isinstance(exc, MemoryError):
        return ErrorSeverity.CRITICAL
    return ErrorSeverity.ERROR


def format_error(
    exc: Exception,
    *,
    include_traceback: bool = False,
) -> FormattedError:
    """Format an exception into a structured error.

    Args:
        exc: The exception to format
        include_traceback: Whether to include full traceback (for debugging)

    Returns:
        FormattedError ready for display
    """
    details: dict[str, Any] = {}
    if isinstance(exc, ErrorLearningError):
        details = exc.context.copy()

    if isinstance(exc, OSError):
        if exc.filename:
            details["path"] = str(exc.filename)
        if exc.errno:
            details["errno"] = exc.errno

    tb = None
    if include_traceback:
        tb = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))

    message = exc.message if isinstance(exc, ErrorLearningError) else str(exc)

    return FormattedError(
        message=message,
        severity=_severity(exc),
        code=_error_code(exc),
        details=details,
        traceback=tb,
    )


# ---------------------------------------------------------------------------
# CLI Formatting (Rich markup)
# ---------------------------------------------------------------------------

_COLOR_MAP = {
    ErrorSeverity.INFO: "blue",
    ErrorSeverity.WARNING: "yellow",
    ErrorSeverity.ERROR: "red",
    ErrorSeverity.CRITICAL: "bold red",
}


def format_for_cli(error: FormattedError) -> str:
    """Format error for CLI display with Rich markup."""
    color = _COLOR_MAP.get(error.severity, "red")

    parts = [f"[{color}]{error.code}[/{color}]: {error.message}"]

    if error.details:
        detail_lines = [f"  {k}: {v}" for k, v in error.details.items()]
        parts.append("\n".join(detail_lines))

    if error.traceback:
        parts.append(f"\n[dim]{error.traceback}[/dim]")

    return "\n".join(parts)


# ---------------------------------------------------------------------------
# MCP Formatting (JSON error responses)
# ---------------------------------------------------------------------------


def format_for_mcp(error: FormattedError) -> str:
    """Format error as JSON for MCP tool responses."""
    payload: dict[str, Any] = {
        "error": error.code,
        "message": error.message,
    }

    if error.details:
        payload["details"] = error.details

    return json.dumps(payload, ensure_ascii=False, default=str)


def format_exception_for_mcp(exc: Exception) -> str:
    """Convenience function to format an exception directly for MCP."""
    return format_for_mcp(format_error(exc, include_traceback=False))


# ---------------------------------------------------------------------------
# Result helpers
# ---------------------------------------------------------------------------


def result_to_cli(result: Result[Any, Exception]) -> str:
    """Format a Result for CLI output."""
    if result.is_ok():
        return str(result.unwrap())
    return format_for_cli(format_error(result.error))  # type: ignore[union-attr]


def result_to_mcp(result: Result[Any, Exception]) -> str:
    """Format a Result for MCP output."""
    if result.is_ok():
        value = result.unwrap()
        if isinstance(value, str):
            return value
        return json.dumps(value, ensure_ascii=False, default=str)
    return format_for_mcp(format_error(result.error))  # type: ignore[union-attr]


__all__ = [
    "ErrorSeverity",
    "FormattedError",
    "format_error",
    "format_for_cli",
    "format_for_mcp",
    "format_exception_for_mcp",
    "result_to_cli",
    "result_to_mcp",
]
