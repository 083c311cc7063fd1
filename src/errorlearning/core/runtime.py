"""
Runtime context for errorlearning.

The error learning registry lives for the lifetime of the hosting process.
Instead of a module-level singleton it is owned by a RuntimeContext that
entry points (CLI bootstrap, MCP server) establish once and that callers
reach through a context variable.

Usage:
    from errorlearning.core.runtime import runtime_context, get_runtime

    # At entry point (main.py, mcp/server.py)
    with runtime_context(config) as ctx:
        do_work()

    # In any module
    def some_function():
        registry = get_runtime().get_registry()
"""

from __future__ import annotations

import contextvars
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from uuid import uuid4

if TYPE_CHECKING:
    from errorlearning.core.config import AppConfig
    from errorlearning.learning.registry import ErrorLearningRegistry


@dataclass
class RuntimeContext:
    """Process runtime context.

    Attributes:
        config: The loaded AppConfig for this session
        trace_id: Unique identifier for this execution trace
    """

    config: AppConfig
    trace_id: str = field(default_factory=lambda: uuid4().hex[:12])

    _registry: ErrorLearningRegistry | None = field(default=None, repr=False)

    def get_registry(self) -> ErrorLearningRegistry:
        """Get or create the error learning registry for this context."""
        if self._registry is None:
            from errorlearning.learning.registry import ErrorLearningRegistry

            self._registry = ErrorLearningRegistry(self.config.learning)
        return self._registry


_runtime_ctx: contextvars.ContextVar[RuntimeContext | None] = contextvars.ContextVar(
    "errlearn_runtime",
    default=None,
)


class NoRuntimeContextError(RuntimeError):
    """Raised when get_runtime() is called outside a runtime_context block."""

    def __init__(self) -> None:
        super().__init__(
            "No runtime context available. "
            "Wrap entrypoints in 'with runtime_context(config):' or use the CLI bootstrap."
        )


def get_runtime() -> RuntimeContext:
    """Get the current runtime context.

    Raises:
        NoRuntimeContextError: If called outside a runtime_context block
    """
    ctx = _runtime_ctx.get()
    if ctx is None:
        raise NoRuntimeContextError()
    return ctx


def get_runtime_or_none() -> RuntimeContext | None:
    return _runtime_ctx.get()


def set_runtime_context(ctx: RuntimeContext) -> contextvars.Token[RuntimeContext | None]:
    """Set the current runtime context (used for CLI bootstrap and tests)."""
    return _runtime_ctx.set(ctx)


def reset_runtime_context(token: contextvars.Token[RuntimeContext | None]) -> None:
    """Reset the runtime context to a previous token."""
    _runtime_ctx.reset(token)


@contextmanager
def runtime_context(config: AppConfig, *, trace_id: str | None = None) -> Iterator[RuntimeContext]:
    """Context manager for establishing runtime state.

    Args:
        config: The loaded AppConfig
        trace_id: Optional trace ID for correlation (auto-generated if not provided)

    Yields:
        The RuntimeContext for this execution
    """
    ctx = RuntimeContext(config=config, trace_id=trace_id or uuid4().hex[:12])

    token = _runtime_ctx.set(ctx)
    try:
        yield ctx
    finally:
        _runtime_ctx.reset(token)


__all__ = [
    "NoRuntimeContextError",
    "RuntimeContext",
    "get_runtime",
    "get_runtime_or_none",
    "reset_runtime_context",
    "runtime_context",
    "set_runtime_context",
]
