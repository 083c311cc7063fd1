"""Tests for learning/knowledge.py - statistics and markdown export."""

from __future__ import annotations

from collections.abc import Callable

from errorlearning.learning.knowledge import (
    KnowledgeBaseDownload,
    most_common_kind,
    render_knowledge_base,
)
from errorlearning.learning.models import ErrorPattern
from errorlearning.learning.registry import ErrorLearningRegistry

LogMany = Callable[..., list[str]]


def test_single_pattern_export(registry: ErrorLearningRegistry) -> None:
    registry.log_error("SYNTAX", "Missing semicolon", "client/src/app.ts", "")

    assert registry.export_knowledge_base() == (
        "\n## SYNTAX: Missing semicolon\n"
        "- **Häufigkeit:** 1x\n"
        "- **Letzte Sichtung:** 2026-10-17T08:00:00.000Z\n"
        "- **Lösungen:** \n"
        "- **Prävention:** \n"
        "- **Auto-Fix:** Nicht verfügbar\n"
    )


def test_export_lists_solutions_and_auto_fix(
    log_many: LogMany, registry: ErrorLearningRegistry
) -> None:
    ids = log_many(5)
    registry.document_solution(
        ids[0], {"implementedSolution": "Added semicolon", "preventionMeasures": ["semi rule"]}
    )
    registry.document_solution(
        ids[-1],
        {"implementedSolution": "Ran prettier", "preventionMeasures": ["pre-commit", "CI lint"]},
    )

    markdown = registry.export_knowledge_base()
    assert "- **Häufigkeit:** 5x\n" in markdown
    assert "- **Lösungen:** Added semicolon; Ran prettier\n" in markdown
    assert "- **Prävention:** semi rule; pre-commit; CI lint\n" in markdown
    assert "- **Auto-Fix:** Verfügbar\n" in markdown


def test_blocks_follow_pattern_creation_order() -> None:
    patterns = [
        ErrorPattern("pattern_1", "API: Timeout", 2, "t1"),
        ErrorPattern("pattern_2", "DATA: NaN", 1, "t2"),
    ]
    markdown = render_knowledge_base(patterns)

    assert markdown.index("## API: Timeout") < markdown.index("## DATA: NaN")
    assert markdown.count("\n## ") == 2
    assert "Nicht verfügbar\n\n\n## DATA" in markdown


def test_download_descriptor(registry: ErrorLearningRegistry) -> None:
    registry.log_error("CONFIG", "DATABASE_URL missing", None, "")
    download = registry.knowledge_base_download()

    assert isinstance(download, KnowledgeBaseDownload)
    assert download.filename == "error-knowledge-base.md"
    assert download.content_type == "text/markdown"
    assert download.content_disposition == 'attachment; filename="error-knowledge-base.md"'
    assert download.body == registry.export_knowledge_base()


class TestMostCommonKind:
    def test_empty_log(self) -> None:
        assert most_common_kind([]) == "NONE"

    def test_highest_count_wins(self, registry: ErrorLearningRegistry) -> None:
        registry.log_error("API", "Timeout", None, "")
        registry.log_error("DATA", "NaN", None, "")
        registry.log_error("DATA", "NaN", None, "")
        assert registry.get_statistics().most_common_kind == "DATA"

    def test_tie_goes_to_first_logged_kind(self, registry: ErrorLearningRegistry) -> None:
        registry.log_error("IMPORT", "Cannot find module", None, "")
        registry.log_error("CONFIG", "Missing key", None, "")
        registry.log_error("CONFIG", "Missing key", None, "")
        registry.log_error("IMPORT", "Cannot find module", None, "")
        assert registry.get_statistics().most_common_kind == "IMPORT"


def test_statistics_to_dict(log_many: LogMany, registry: ErrorLearningRegistry) -> None:
    log_many(2)
    payload = registry.get_statistics().to_dict()

    assert set(payload) == {
        "totalErrors",
        "recurringErrors",
        "patternCount",
        "autoFixCount",
        "mostCommonKind",
        "recentErrors",
    }
    assert payload["totalErrors"] == 2
    assert payload["recurringErrors"] == 1
    recent = payload["recentErrors"][1]
    assert recent["errorKind"] == "SYNTAX"
    assert recent["isRecurring"] is True
    assert recent["occurrenceCount"] == 2
    assert recent["affectedFile"] == "client/src/app.ts"
