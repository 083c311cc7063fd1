"""Replay of recorded admin events into a registry.

Event files are JSON Lines. Each line is one of:

    {"action": "log", "type": "SYNTAX", "message": "...", "file": "...", "context": "..."}
    {"action": "solve", "errorId": "...", "solution": {...}}
    {"action": "solve", "entry": 3, "solution": {...}}

``entry`` is a 1-based index into the entries logged by the same replay;
negative values count from the end (-1 is the latest). Blank lines and
lines starting with ``#`` are skipped.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from errorlearning.core.console import get_logger
from errorlearning.core.result import Err, Ok, ReplayError, Result, collect_results

from .intake import ErrorReport, parse_error_report, parse_solution_request
from .models import SolutionBundle
from .registry import ErrorLearningRegistry

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class LogEvent:
    line_no: int
    report: ErrorReport


@dataclass(frozen=True, slots=True)
class SolveEvent:
    line_no: int
    solution: SolutionBundle
    error_id: str | None = None
    entry: int | None = None


ReplayEvent = LogEvent | SolveEvent


def _parse_solve(line_no: int, payload: dict[str, Any]) -> Result[ReplayEvent, ReplayError]:
    entry = payload.get("entry")
    if entry is None:
        match parse_solution_request(payload):
            case Err(err):
                return Err(ReplayError(err.message, context={"line": line_no, **err.context}))
            case Ok(request):
                return Ok(SolveEvent(line_no, request.solution, error_id=request.error_id))

    if isinstance(entry, bool) or not isinstance(entry, int) or entry == 0:
        return Err(ReplayError("entry must be a non-zero integer", context={"line": line_no}))
    try:
        bundle = SolutionBundle.model_validate(dict(payload.get("solution") or {}))
    except (PydanticValidationError, TypeError, ValueError):
        return Err(ReplayError("Invalid solution bundle", context={"line": line_no}))
    return Ok(SolveEvent(line_no, bundle, entry=entry))


def parse_event(line_no: int, raw: str) -> Result[ReplayEvent, ReplayError]:
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        return Err(ReplayError(f"Invalid JSON: {exc.msg}", context={"line": line_no}))
    if not isinstance(payload, dict):
        return Err(ReplayError("Event must be a JSON object", context={"line": line_no}))

    action = payload.get("action", "log")
    if action == "log":
        match parse_error_report(payload):
            case Err(err):
                return Err(ReplayError(err.message, context={"line": line_no, **err.context}))
            case Ok(report):
                return Ok(LogEvent(line_no, report))
    if action == "solve":
        return _parse_solve(line_no, payload)
    return Err(ReplayError(f"Unknown action: {action}", context={"line": line_no}))


def load_events(path: Path) -> Result[list[ReplayEvent], ReplayError]:
    """Parse every event of ``path``, stopping at the first invalid line."""
    results: list[Result[ReplayEvent, ReplayError]] = []
    with path.open(encoding="utf-8") as handle:
        for line_no, raw in enumerate(handle, start=1):
            stripped = raw.strip()
            if not stripped or stripped.startswith("#"):
                continue
            results.append(parse_event(line_no, stripped))
    return collect_results(results)


def _resolve_entry(event: SolveEvent, logged: list[str]) -> str:
    if event.error_id is not None:
        return event.error_id
    position = event.entry or 0
    index = position - 1 if position > 0 else len(logged) + position
    if not 0 <= index < len(logged):
        raise ReplayError(
            f"entry {event.entry} does not refer to a logged error",
            context={"line": event.line_no, "logged": len(logged)},
        )
    return logged[index]


def replay_events(registry: ErrorLearningRegistry, events: list[ReplayEvent]) -> list[str]:
    """Apply ``events`` in order and return the ids of the logged entries.

    Raises:
        ReplayError: If a solve event points at an entry index that was not logged.
    """
    logged: list[str] = []
    for event in events:
        if isinstance(event, LogEvent):
            report = event.report
            logged.append(
                registry.log_error(
                    report.kind,
                    report.message,
                    report.file,
                    report.context,
                    report.line,
                    stack_trace=report.stack_trace,
                )
            )
            continue
        registry.document_solution(_resolve_entry(event, logged), event.solution)
    logger.debug("Replayed %d events (%d errors logged)", len(events), len(logged))
    return logged


__all__ = [
    "LogEvent",
    "ReplayEvent",
    "SolveEvent",
    "load_events",
    "parse_event",
    "replay_events",
]
