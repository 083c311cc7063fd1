"""Statistics and markdown knowledge base rendering.

Pure functions over registry snapshots; the registry takes care of
locking before handing entries and patterns in.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass

from .models import ErrorEntry, ErrorPattern, ErrorStatistics

KNOWLEDGE_BASE_FILENAME = "error-knowledge-base.md"
KNOWLEDGE_BASE_CONTENT_TYPE = "text/markdown"
NO_KIND = "NONE"


@dataclass(frozen=True, slots=True)
class KnowledgeBaseDownload:
    """Knowledge base export packaged as a downloadable file."""

    body: str
    filename: str = KNOWLEDGE_BASE_FILENAME
    content_type: str = KNOWLEDGE_BASE_CONTENT_TYPE

    @property
    def content_disposition(self) -> str:
        return f'attachment; filename="{self.filename}"'


def most_common_kind(entries: Sequence[ErrorEntry]) -> str:
    """Return the kind logged most often, ``NONE`` for an empty log.

    Ties go to the kind that was logged first.
    """
    counts = Counter(entry.kind.value for entry in entries)
    ranked = counts.most_common(1)
    return ranked[0][0] if ranked else NO_KIND


def build_statistics(
    entries: Sequence[ErrorEntry],
    patterns: Sequence[ErrorPattern],
    *,
    recent_limit: int = 10,
) -> ErrorStatistics:
    recent = list(entries[-recent_limit:]) if recent_limit > 0 else []
    return ErrorStatistics(
        total_errors=len(entries),
        recurring_errors=sum(1 for entry in entries if entry.is_recurring),
        pattern_count=len(patterns),
        auto_fix_count=sum(1 for pattern in patterns if pattern.auto_fix_available),
        most_common_kind=most_common_kind(entries),
        recent_errors=recent,
    )


def render_pattern_block(pattern: ErrorPattern) -> str:
    auto_fix = "Verfügbar" if pattern.auto_fix_available else "Nicht verfügbar"
    return (
        f"\n## {pattern.description}\n"
        f"- **Häufigkeit:** {pattern.frequency}x\n"
        f"- **Letzte Sichtung:** {pattern.last_seen}\n"
        f"- **Lösungen:** {'; '.join(pattern.solutions)}\n"
        f"- **Prävention:** {'; '.join(pattern.prevention_rules)}\n"
        f"- **Auto-Fix:** {auto_fix}\n"
    )


def render_knowledge_base(patterns: Sequence[ErrorPattern]) -> str:
    """Render one markdown block per pattern in creation order."""
    return "\n".join(render_pattern_block(pattern) for pattern in patterns)


__all__ = [
    "KNOWLEDGE_BASE_CONTENT_TYPE",
    "KNOWLEDGE_BASE_FILENAME",
    "NO_KIND",
    "KnowledgeBaseDownload",
    "build_statistics",
    "most_common_kind",
    "render_knowledge_base",
    "render_pattern_block",
]
