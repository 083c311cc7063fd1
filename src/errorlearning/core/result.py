"""
Unified Result types and error hierarchy for errorlearning.

This module provides:
1. Result[T, E] type for explicit error handling
2. Domain-specific exception hierarchy
3. Helper functions for Result operations

Usage:
    from errorlearning.core.result import Ok, Err, Result, ValidationError

    def parse(payload: dict) -> Result[str, ValidationError]:
        if "message" not in payload:
            return Err(ValidationError("message is required"))
        return Ok(payload["message"])

    result = parse(payload)
    if result.is_ok():
        print(result.value)
    else:
        print(result.error)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E", bound=Exception)
F = TypeVar("F", bound=Exception)


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Represents a successful result containing a value."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        """Return the contained value."""
        return self.value

    def unwrap_or(self, default: T) -> T:
        """Return the contained value (ignores default for Ok)."""
        return self.value

    def map(self, fn: Callable[[T], U]) -> Ok[U]:
        """Apply a function to the contained value."""
        return Ok(fn(self.value))

    def and_then(self, fn: Callable[[T], Result[U, E]]) -> Result[U, E]:
        """Chain operations that may fail."""
        return fn(self.value)


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Represents a failed result containing an error."""

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> Any:
        """Raise the contained error."""
        raise self.error

    def unwrap_or(self, default: T) -> T:
        """Return the default value."""
        return default

    def map(self, fn: Callable[[Any], U]) -> Err[E]:
        """No-op for Err - returns self unchanged."""
        return self

    def and_then(self, fn: Callable[[Any], Result[U, E]]) -> Err[E]:
        """Short-circuit for Err - returns self unchanged."""
        return self


# Type alias for Result
Result = Ok[T] | Err[E]


# ---------------------------------------------------------------------------
# Domain-specific error hierarchy
# ---------------------------------------------------------------------------


class ErrorLearningError(Exception):
    """Base exception for all errorlearning errors.

    Carries an optional context mapping that is rendered alongside the
    message and forwarded to CLI and MCP error payloads.
    """

    def __init__(self, message: str, *, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} [{ctx_str}]"
        return self.message


class ValidationError(ErrorLearningError):
    """Raised for input validation failures.

    Examples:
    - Missing type, message or context on an error report
    - Error kind outside the known taxonomy
    - Malformed solution bundle
    """


class ConfigurationError(ErrorLearningError):
    """Raised for configuration issues.

    Examples:
    - Invalid threshold values
    - Config file parse errors
    """


class ReplayError(ErrorLearningError):
    """Raised when an event file cannot be replayed.

    Examples:
    - Malformed JSON line
    - Unknown event action
    - Solve event pointing at an entry that was never logged
    """


# ---------------------------------------------------------------------------
# Helper functions
# ---------------------------------------------------------------------------


def collect_results(results: list[Result[T, E]]) -> Result[list[T], E]:
    """Collect a list of Results into a Result of list.

    Returns Err on first error, Ok(list) if all succeed.
    """
    values: list[T] = []
    for result in results:
        if isinstance(result, Err):
            return result
        values.append(result.unwrap())
    return Ok(values)


__all__ = [
    # Result types
    "Ok",
    "Err",
    "Result",
    # Error hierarchy
    "ErrorLearningError",
    "ValidationError",
    "ConfigurationError",
    "ReplayError",
    # Helpers
    "collect_results",
]
