"""MCP tools for the error learning registry.

Provides the four admin calls:
    - report_error: log an error occurrence
    - document_solution: attach a documented fix to a logged error
    - error_statistics: statistics for the admin dashboard
    - export_knowledge_base: markdown knowledge base as a download
"""

from __future__ import annotations

import json
from typing import Any

from errorlearning.core.result import Err, Ok
from errorlearning.core.runtime import get_runtime
from errorlearning.learning.intake import parse_error_report, parse_solution_request
from errorlearning.mcp import tool, tool_error_handler


def _dump(payload: dict[str, Any]) -> str:
    return json.dumps(payload, ensure_ascii=False)


@tool_error_handler
@tool()
async def report_error(
    kind: str,
    message: str,
    context: str,
    file: str | None = None,
    line: int | None = None,
) -> str:
    """Log an error occurrence (kind SYNTAX, LOGIC, IMPORT, CONFIG, API, DATA or RUNTIME)."""
    payload = {"type": kind, "message": message, "context": context, "file": file, "line": line}
    match parse_error_report(payload):
        case Err(err):
            raise err
        case Ok(report):
            pass

    registry = get_runtime().get_registry()
    error_id = registry.log_error(
        report.kind, report.message, report.file, report.context, report.line
    )
    return _dump({"success": True, "errorId": error_id, "message": "Fehler erfolgreich geloggt"})


@tool_error_handler
@tool()
async def document_solution(error_id: str, solution: dict[str, Any]) -> str:
    """Document the fix for a logged error. Unknown ids are accepted and ignored."""
    match parse_solution_request({"errorId": error_id, "solution": solution}):
        case Err(err):
            raise err
        case Ok(request):
            pass

    get_runtime().get_registry().document_solution(request.error_id, request.solution)
    return _dump({"success": True, "message": "Lösung erfolgreich dokumentiert"})


@tool_error_handler
@tool()
async def error_statistics() -> str:
    """Return error statistics: totals, patterns, auto-fix count, recent errors."""
    stats = get_runtime().get_registry().get_statistics()
    return _dump(stats.to_dict())


@tool_error_handler
@tool()
async def export_knowledge_base() -> str:
    """Export all learned patterns as a markdown download."""
    download = get_runtime().get_registry().knowledge_base_download()
    return _dump(
        {
            "filename": download.filename,
            "contentType": download.content_type,
            "contentDisposition": download.content_disposition,
            "content": download.body,
        }
    )
