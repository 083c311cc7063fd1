"""Validation of incoming admin payloads.

The registry trusts its input; this module is the layer in front of it that
rejects incomplete reports and unknown error kinds before they get there.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from errorlearning.core.result import Err, Ok, Result, ValidationError

from .models import ErrorKind, SolutionBundle

REQUIRED_REPORT_FIELDS = ("type", "message", "context")


@dataclass(frozen=True, slots=True)
class ErrorReport:
    """A validated error report ready for ``ErrorLearningRegistry.log_error``."""

    kind: ErrorKind
    message: str
    context: str
    file: str | None = None
    line: int | None = None
    stack_trace: str | None = None


@dataclass(frozen=True, slots=True)
class SolutionRequest:
    error_id: str
    solution: SolutionBundle


def _text(payload: Mapping[str, Any], key: str) -> str:
    value = payload.get(key)
    return value.strip() if isinstance(value, str) else ""


def _present(payload: Mapping[str, Any], key: str) -> str:
    value = payload.get(key)
    return value if isinstance(value, str) else ""


def parse_error_report(payload: Mapping[str, Any]) -> Result[ErrorReport, ValidationError]:
    """Validate a raw report mapping.

    ``kind`` is accepted as an alias of ``type``. ``message`` and ``context``
    only have to be non-empty strings; whitespace is kept as reported.
    """
    fields = {
        "type": _text(payload, "type") or _text(payload, "kind"),
        "message": _present(payload, "message"),
        "context": _present(payload, "context"),
    }
    missing = [name for name in REQUIRED_REPORT_FIELDS if not fields[name]]
    if missing:
        return Err(
            ValidationError(
                "Missing required fields: " + ", ".join(missing),
                context={"missing": missing},
            )
        )

    try:
        kind = ErrorKind.parse(fields["type"])
    except ValueError:
        return Err(
            ValidationError(
                f"Unknown error kind: {fields['type']}",
                context={"allowed": [k.value for k in ErrorKind]},
            )
        )

    line = payload.get("line")
    if line is not None and (isinstance(line, bool) or not isinstance(line, int) or line < 1):
        return Err(ValidationError("line must be a positive integer", context={"line": line}))

    file = _text(payload, "file") or None
    stack_trace = payload.get("stackTrace") or payload.get("stack_trace")

    return Ok(
        ErrorReport(
            kind=kind,
            message=payload["message"],
            context=payload["context"],
            file=file,
            line=line,
            stack_trace=stack_trace if isinstance(stack_trace, str) else None,
        )
    )


def parse_solution_request(
    payload: Mapping[str, Any],
) -> Result[SolutionRequest, ValidationError]:
    error_id = _text(payload, "errorId") or _text(payload, "error_id")
    solution = payload.get("solution")
    if not error_id or solution is None:
        return Err(ValidationError("errorId and solution are required"))
    if not isinstance(solution, Mapping):
        return Err(ValidationError("solution must be an object", context={"errorId": error_id}))

    try:
        bundle = SolutionBundle.model_validate(dict(solution))
    except PydanticValidationError as exc:
        return Err(
            ValidationError(
                "Invalid solution bundle",
                context={"errorId": error_id, "errors": exc.error_count()},
            )
        )
    return Ok(SolutionRequest(error_id=error_id, solution=bundle))


__all__ = [
    "ErrorReport",
    "SolutionRequest",
    "parse_error_report",
    "parse_solution_request",
]
