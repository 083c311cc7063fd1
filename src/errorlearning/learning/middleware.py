"""Opt-in wrapper that feeds exceptions into the registry.

Wrapping is explicit: callers pass the function through
``with_error_learning`` instead of relying on a class-level decorator.
Any exception is logged as a RUNTIME error and re-raised unchanged.

Usage:
    save_project = with_error_learning(registry, storage.save_project, owner="Storage")
"""

from __future__ import annotations

import functools
import inspect
import traceback
from collections.abc import Callable
from typing import Any, TypeVar

from errorlearning.core.console import get_logger

from .models import ErrorKind
from .registry import ErrorLearningRegistry

logger = get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def _owner_name(func: Callable[..., Any], owner: str | None) -> str:
    if owner:
        return owner
    qualname = getattr(func, "__qualname__", "")
    head, _, _ = qualname.rpartition(".")
    return head or getattr(func, "__module__", None) or "unknown"


def _record(
    registry: ErrorLearningRegistry,
    exc: Exception,
    *,
    owner: str,
    name: str,
) -> None:
    error_id = registry.log_error(
        ErrorKind.RUNTIME,
        str(exc),
        f"{owner}.{name}",
        f"Method execution: {name}",
        stack_trace="".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
    )
    logger.debug("🔍 Fehler geloggt: %s", error_id)


def with_error_learning(
    registry: ErrorLearningRegistry,
    func: F,
    *,
    owner: str | None = None,
) -> F:
    """Return ``func`` wrapped so raised exceptions are logged, then re-raised."""
    name = getattr(func, "__name__", "call")
    owner_name = _owner_name(func, owner)

    if inspect.iscoroutinefunction(func):

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return await func(*args, **kwargs)
            except Exception as exc:
                _record(registry, exc, owner=owner_name, name=name)
                raise

        return async_wrapper  # type: ignore[return-value]

    @functools.wraps(func)
    def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except Exception as exc:
            _record(registry, exc, owner=owner_name, name=name)
            raise

    return sync_wrapper  # type: ignore[return-value]


__all__ = ["with_error_learning"]
