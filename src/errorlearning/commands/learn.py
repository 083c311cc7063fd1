"""Error learning commands.

Provides CLI commands for:
    - Listing the error taxonomy and its escalation mappings
    - Replaying recorded admin events and printing the resulting statistics
    - Writing the markdown knowledge base
"""

from __future__ import annotations

import json
from pathlib import Path

import typer
from rich import box
from rich.table import Table
from rich.text import Text

from errorlearning.core.console import console
from errorlearning.core.decorators import handle_exceptions
from errorlearning.core.result import Err, Ok
from errorlearning.learning.builder import CAUSE_ANALYSIS
from errorlearning.learning.escalation import AUTO_FIX_COMMANDS, LINT_RULES, PRE_COMMIT_HOOKS
from errorlearning.learning.knowledge import KNOWLEDGE_BASE_FILENAME
from errorlearning.learning.models import ErrorKind, ErrorStatistics
from errorlearning.learning.registry import ErrorLearningRegistry
from errorlearning.learning.replay import load_events, replay_events

app = typer.Typer(help="Track recurring errors and export what was learned.")


@app.command("kinds")
def kinds() -> None:
    """Show the error taxonomy with cause texts and escalation mappings."""
    table = Table(title="Error kinds", box=box.SIMPLE_HEAVY, expand=True)
    table.add_column("Kind", style="cyan", no_wrap=True)
    table.add_column("Cause", style="white")
    table.add_column("Lint rule", style="yellow")
    table.add_column("Auto-fix", style="green")
    table.add_column("Pre-commit hook", style="magenta")

    for kind in ErrorKind:
        table.add_row(
            kind.value,
            CAUSE_ANALYSIS[kind],
            LINT_RULES.get(kind, "-"),
            AUTO_FIX_COMMANDS.get(kind, "-"),
            PRE_COMMIT_HOOKS.get(kind, "-"),
        )

    console.print(table)


def _print_statistics(stats: ErrorStatistics, registry: ErrorLearningRegistry) -> None:
    summary = Table(title="Error statistics", box=box.SIMPLE, expand=False)
    summary.add_column("Metric", style="cyan", no_wrap=True)
    summary.add_column("Value", style="white")
    summary.add_row("Total errors", str(stats.total_errors))
    summary.add_row("Recurring errors", str(stats.recurring_errors))
    summary.add_row("Patterns", str(stats.pattern_count))
    summary.add_row("Auto-fix available", str(stats.auto_fix_count))
    summary.add_row("Most common kind", stats.most_common_kind)
    console.print(summary)

    patterns = registry.patterns
    if not patterns:
        console.print("[yellow]No patterns recorded.[/yellow]")
        return

    table = Table(title="Patterns", box=box.SIMPLE_HEAVY, expand=True)
    table.add_column("Id", style="cyan", no_wrap=True)
    table.add_column("Description", style="white")
    table.add_column("Frequency", justify="right")
    table.add_column("Last seen", no_wrap=True)
    table.add_column("Auto-fix", no_wrap=True)
    for pattern in patterns:
        table.add_row(
            pattern.pattern_id,
            Text(pattern.description),
            str(pattern.frequency),
            pattern.last_seen,
            "yes" if pattern.auto_fix_available else "no",
        )
    console.print(table)


@app.command("replay")
@handle_exceptions
def replay(
    ctx: typer.Context,
    events: Path = typer.Argument(..., help="JSON Lines file with log/solve events."),
    export: Path | None = typer.Option(
        None, "--export", "-e", help="Write the knowledge base to this file or directory."
    ),
    as_json: bool = typer.Option(False, "--json", help="Print statistics as JSON."),
) -> None:
    """Replay recorded error reports and solutions, then show what was learned."""
    state = ctx.obj
    registry = state.runtime_ctx.get_registry()

    match load_events(events):
        case Err(err):
            raise err
        case Ok(parsed):
            pass

    replay_events(registry, parsed)
    stats = registry.get_statistics()

    if as_json:
        console.print_json(json.dumps(stats.to_dict(), ensure_ascii=False))
    else:
        _print_statistics(stats, registry)

    if export is not None:
        target = export / KNOWLEDGE_BASE_FILENAME if export.is_dir() else export
        target.write_text(registry.export_knowledge_base(), encoding="utf-8")
        console.print(f"[green]Knowledge base written to[/green] {target}")
