"""Error learning registry.

The registry owns the entry log and the pattern list for the lifetime of the
hosting process. It is constructed explicitly (see core.runtime) rather than
living in a module-level singleton, so tests can build a fresh one per case.

Usage:
    registry = ErrorLearningRegistry()
    error_id = registry.log_error("SYNTAX", "Missing semicolon", "a.ts", "user input validation")
    registry.document_solution(error_id, {"implementedSolution": "Added semicolon"})
    stats = registry.get_statistics()
    markdown = registry.export_knowledge_base()

Matching rules:
    - Recurrence detection looks for a pattern whose description contains the
      kind AND the first 50 characters of the message.
    - Pattern aggregation only checks that the description contains the kind,
      so every error of one kind lands in the first pattern created for it.
    Pattern counts and frequencies in the statistics are per kind as a result.

All mutations and reads run under one re-entrant lock, and reads hand out
copies so callers never observe a half-updated pattern.
"""

from __future__ import annotations

import copy
import threading
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any

from errorlearning.core.config import LearningConfig
from errorlearning.core.console import get_logger

from .builder import (
    analyze_cause,
    format_timestamp,
    generate_error_id,
    identify_trigger,
    render_error_report,
)
from .escalation import EscalationEngine, EscalationEvent, EscalationListener
from .knowledge import KnowledgeBaseDownload, build_statistics, render_knowledge_base
from .models import (
    ErrorEntry,
    ErrorKind,
    ErrorPattern,
    ErrorStatistics,
    LearningRule,
    PreventionRule,
    SolutionBundle,
)

logger = get_logger(__name__)

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(UTC)


class ErrorLearningRegistry:
    """Process-wide log of reported errors and the patterns learned from them."""

    def __init__(
        self,
        config: LearningConfig | None = None,
        *,
        clock: Clock | None = None,
        engine: EscalationEngine | None = None,
    ) -> None:
        self._config = config or LearningConfig()
        self._clock = clock or _utc_now
        self._engine = engine or EscalationEngine(
            warning_threshold=self._config.warning_threshold,
            auto_fix_threshold=self._config.auto_fix_threshold,
        )
        self._lock = threading.RLock()
        self._entries: list[ErrorEntry] = []
        self._entries_by_id: dict[str, ErrorEntry] = {}
        self._patterns: list[ErrorPattern] = []
        self._learning_rules: dict[str, LearningRule] = {}
        self._prevention_rules: dict[str, PreventionRule] = {}
        self._escalations: list[EscalationEvent] = []

    @property
    def config(self) -> LearningConfig:
        return self._config

    # ------------------------------------------------------------------
    # Report error
    # ------------------------------------------------------------------

    def log_error(
        self,
        kind: ErrorKind | str,
        message: str,
        file: str | None = None,
        context: str = "",
        line: int | None = None,
        *,
        stack_trace: str | None = None,
    ) -> str:
        """Record one error occurrence and return its id.

        Raises:
            ValueError: If ``kind`` is not part of the taxonomy. Callers are
                expected to validate input first (see learning.intake).
        """
        error_kind = ErrorKind.parse(kind)
        cfg = self._config

        with self._lock:
            moment = self._clock()
            error_id = self._unique_id(
                generate_error_id(
                    error_kind, message, moment, message_length=cfg.id_message_length
                )
            )
            existing = self._find_recurrence_pattern(error_kind, message)

            entry = ErrorEntry(
                id=error_id,
                timestamp=format_timestamp(moment),
                kind=error_kind,
                original_message=message,
                affected_file=file or cfg.default_file,
                line_number=line,
                context=context,
                cause_analysis=analyze_cause(error_kind),
                trigger=identify_trigger(context),
                is_recurring=existing is not None,
                occurrence_count=existing.frequency + 1 if existing is not None else 1,
                last_occurrences=self._last_occurrences(error_kind, message),
                stack_trace=stack_trace,
            )

            self._entries.append(entry)
            self._entries_by_id[entry.id] = entry
            self._update_pattern(entry)
            self._apply_learning_rule(entry)
            report = render_error_report(entry) if cfg.emit_reports else None

        if report is not None:
            logger.info(report)
        return error_id

    def _unique_id(self, candidate: str) -> str:
        if candidate not in self._entries_by_id:
            return candidate
        suffix = 2
        while f"{candidate}_{suffix}" in self._entries_by_id:
            suffix += 1
        return f"{candidate}_{suffix}"

    def _find_recurrence_pattern(self, kind: ErrorKind, message: str) -> ErrorPattern | None:
        prefix = message[: self._config.recurrence_prefix_length]
        for pattern in self._patterns:
            if kind.value in pattern.description and prefix in pattern.description:
                return pattern
        return None

    def _find_kind_pattern(self, kind: ErrorKind) -> ErrorPattern | None:
        for pattern in self._patterns:
            if kind.value in pattern.description:
                return pattern
        return None

    def _last_occurrences(self, kind: ErrorKind, message: str) -> list[str]:
        limit = self._config.last_occurrences_limit
        if limit <= 0:
            return []
        matches = [
            entry.timestamp
            for entry in self._entries
            if entry.kind is kind and entry.original_message == message
        ]
        return matches[-limit:]

    def _update_pattern(self, entry: ErrorEntry) -> None:
        pattern = self._find_kind_pattern(entry.kind)
        if pattern is not None:
            pattern.frequency += 1
            pattern.last_seen = entry.timestamp
            return

        prefix = entry.original_message[: self._config.description_prefix_length]
        self._patterns.append(
            ErrorPattern(
                pattern_id=f"pattern_{len(self._patterns) + 1}",
                description=f"{entry.kind.value}: {prefix}",
                frequency=1,
                last_seen=entry.timestamp,
            )
        )

    def _rule_key(self, entry: ErrorEntry) -> str:
        prefix = entry.original_message[: self._config.learning_rule_prefix_length]
        return f"{entry.kind.value}_{prefix}"

    def _apply_learning_rule(self, entry: ErrorEntry) -> None:
        key = self._rule_key(entry)
        rule = self._learning_rules.get(key)
        if rule is None:
            self._learning_rules[key] = LearningRule(
                key=key,
                count=1,
                first_seen=entry.timestamp,
                last_seen=entry.timestamp,
            )
            return
        rule.count += 1
        rule.last_seen = entry.timestamp

    # ------------------------------------------------------------------
    # Document solution
    # ------------------------------------------------------------------

    def document_solution(
        self, error_id: str, solution: SolutionBundle | Mapping[str, Any]
    ) -> None:
        """Attach a documented fix to a logged entry and escalate if due.

        Unknown ids are ignored without raising.
        """
        bundle = (
            solution
            if isinstance(solution, SolutionBundle)
            else SolutionBundle.model_validate(dict(solution))
        )

        with self._lock:
            entry = self._entries_by_id.get(error_id)
            if entry is None:
                logger.debug("Ignoring solution for unknown error id %s", error_id)
                return

            entry.apply_solution(bundle)

            pattern = self._find_kind_pattern(entry.kind)
            if pattern is not None:
                pattern.solutions.append(entry.solution)
                pattern.prevention_rules.extend(entry.prevention_measures)
                if entry.occurrence_count >= self._engine.auto_fix_threshold:
                    pattern.auto_fix_available = True

            events = self._engine.escalate(
                entry,
                pattern,
                self._learning_rules.get(self._rule_key(entry)),
                now=format_timestamp(self._clock()),
            )
            for event in events:
                if event.prevention_rule is not None:
                    self._prevention_rules[event.prevention_rule.id] = event.prevention_rule
                self._escalations.append(event)

        # Listeners run outside the lock, after the events are recorded.
        self._engine.notify(events)

    def subscribe(self, listener: EscalationListener) -> None:
        """Receive every escalation event emitted from now on."""
        self._engine.subscribe(listener)

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    def get_statistics(self) -> ErrorStatistics:
        with self._lock:
            stats = build_statistics(
                self._entries,
                self._patterns,
                recent_limit=self._config.recent_errors_limit,
            )
            return copy.deepcopy(stats)

    def export_knowledge_base(self) -> str:
        with self._lock:
            return render_knowledge_base(self._patterns)

    def knowledge_base_download(self) -> KnowledgeBaseDownload:
        return KnowledgeBaseDownload(body=self.export_knowledge_base())

    def get_entry(self, error_id: str) -> ErrorEntry | None:
        with self._lock:
            entry = self._entries_by_id.get(error_id)
            return copy.deepcopy(entry) if entry is not None else None

    @property
    def entries(self) -> list[ErrorEntry]:
        with self._lock:
            return copy.deepcopy(self._entries)

    @property
    def patterns(self) -> list[ErrorPattern]:
        with self._lock:
            return copy.deepcopy(self._patterns)

    @property
    def learning_rules(self) -> dict[str, LearningRule]:
        with self._lock:
            return copy.deepcopy(self._learning_rules)

    @property
    def prevention_rules(self) -> list[PreventionRule]:
        with self._lock:
            return list(self._prevention_rules.values())

    @property
    def escalations(self) -> list[EscalationEvent]:
        with self._lock:
            return list(self._escalations)


__all__ = ["Clock", "ErrorLearningRegistry"]
