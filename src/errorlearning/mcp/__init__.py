"""MCP admin surface for the error learning registry.

Provides the tool decorator and error handling shared by every tool:
    - tool(): mark and validate a function as an MCP tool
    - tool_error_handler(): turn exceptions into JSON error payloads
    - get_tool_metadata() / is_mcp_tool(): registration helpers
"""

from __future__ import annotations

import asyncio
import functools
import inspect
from collections.abc import Awaitable, Callable
from typing import Any, ParamSpec, TypeGuard, TypeVar

from pydantic import ValidationError as PydanticValidationError
from pydantic import validate_call

from errorlearning.core.console import get_logger
from errorlearning.core.error_middleware import format_exception_for_mcp
from errorlearning.core.result import ValidationError

logger = get_logger("errorlearning.mcp")

P = ParamSpec("P")
R = TypeVar("R")

ToolFunction = Callable[..., Awaitable[str]]

TOOL_METADATA_ATTR = "__mcp_tool_metadata__"


def strict_tool_validator(fn: Callable[P, R]) -> Callable[P, R]:
    """Wrap a callable with Pydantic runtime validation.

    Validation failures are re-raised as the package ValidationError so
    the error handler renders them like any other rejected input.
    """
    validated = validate_call(config={"strict": True})(fn)

    def _reject(exc: PydanticValidationError) -> ValidationError:
        return ValidationError("Invalid tool arguments", context={"errors": exc.error_count()})

    if inspect.iscoroutinefunction(fn):

        @functools.wraps(fn)
        async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> Any:
            try:
                result = validated(*args, **kwargs)
                if inspect.isawaitable(result):
                    result = await result
            except PydanticValidationError as exc:
                raise _reject(exc) from exc
            return result

        return async_wrapper  # type: ignore[return-value]

    @functools.wraps(fn)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        try:
            return validated(*args, **kwargs)
        except PydanticValidationError as exc:
            raise _reject(exc) from exc

    return wrapper


def tool(**metadata: Any) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Mark a function as an MCP tool and attach optional registration metadata."""

    def decorator(fn: Callable[P, R]) -> Callable[P, R]:
        wrapped = strict_tool_validator(fn)
        setattr(wrapped, TOOL_METADATA_ATTR, metadata)
        return wrapped

    return decorator


def is_mcp_tool(obj: Any) -> TypeGuard[ToolFunction]:
    return callable(obj) and hasattr(obj, TOOL_METADATA_ATTR)


def get_tool_metadata(obj: object) -> dict[str, Any] | None:
    metadata = getattr(obj, TOOL_METADATA_ATTR, None)
    return metadata if isinstance(metadata, dict) else None


def tool_error_handler(fn: Callable[P, Awaitable[str]]) -> Callable[P, Awaitable[str]]:
    """Decorate a tool to provide consistent error handling.

    Expected failures become JSON error payloads; anything else is logged
    with its traceback before being reported the same way.
    """

    @functools.wraps(fn)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> str:
        try:
            return await fn(*args, **kwargs)
        except asyncio.CancelledError:
            raise
        except ValidationError as exc:
            return format_exception_for_mcp(exc)
        except Exception as exc:
            logger.exception("Unhandled error in tool %s", fn.__name__)
            return format_exception_for_mcp(exc)

    return wrapper


__all__ = [
    "TOOL_METADATA_ATTR",
    "ToolFunction",
    "get_tool_metadata",
    "is_mcp_tool",
    "logger",
    "strict_tool_validator",
    "tool",
    "tool_error_handler",
]
