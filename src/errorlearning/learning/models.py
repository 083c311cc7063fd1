"""Data model of the error learning registry.

ErrorEntry is one reported occurrence, ErrorPattern the bucket that groups
entries considered the same recurring issue. SolutionBundle is the validated
payload of a solution documentation call.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ErrorKind(str, Enum):
    """Closed taxonomy of reported defects."""

    SYNTAX = "SYNTAX"
    LOGIC = "LOGIC"
    IMPORT = "IMPORT"
    CONFIG = "CONFIG"
    API = "API"
    DATA = "DATA"
    RUNTIME = "RUNTIME"

    @classmethod
    def parse(cls, value: ErrorKind | str) -> ErrorKind:
        """Return the kind for ``value``.

        Raises:
            ValueError: If ``value`` is not one of the seven kinds.
        """
        if isinstance(value, ErrorKind):
            return value
        return cls(str(value).strip().upper())


class SolutionBundle(BaseModel):
    """Documented fix for a logged error.

    Accepts the camelCase keys used by the admin dashboard
    (``implementedSolution``, ``preventionMeasures`` ...) as well as the
    Python field names.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    implemented_solution: str = ""
    code_changes: list[str] = Field(default_factory=list)
    verification: str = ""
    prevention_measures: list[str] = Field(default_factory=list)
    automatic_checks: list[str] = Field(default_factory=list)
    pattern_rule: str = ""


@dataclass(slots=True)
class ErrorEntry:
    """One reported error occurrence."""

    id: str
    timestamp: str
    kind: ErrorKind
    original_message: str
    affected_file: str
    context: str
    cause_analysis: str
    trigger: str
    is_recurring: bool
    occurrence_count: int
    last_occurrences: list[str] = field(default_factory=list)
    line_number: int | None = None
    stack_trace: str | None = None
    solution: str = ""
    code_changes: list[str] = field(default_factory=list)
    verification: str = ""
    prevention_measures: list[str] = field(default_factory=list)
    automatic_checks: list[str] = field(default_factory=list)
    pattern_rule: str = ""

    def apply_solution(self, bundle: SolutionBundle) -> None:
        self.solution = bundle.implemented_solution
        self.code_changes = list(bundle.code_changes)
        self.verification = bundle.verification
        self.prevention_measures = list(bundle.prevention_measures)
        self.automatic_checks = list(bundle.automatic_checks)
        self.pattern_rule = bundle.pattern_rule

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "errorKind": self.kind.value,
            "originalMessage": self.original_message,
            "affectedFile": self.affected_file,
            "lineNumber": self.line_number,
            "context": self.context,
            "causeAnalysis": self.cause_analysis,
            "trigger": self.trigger,
            "isRecurring": self.is_recurring,
            "occurrenceCount": self.occurrence_count,
            "lastOccurrences": list(self.last_occurrences),
            "solution": self.solution,
            "codeChanges": list(self.code_changes),
            "verification": self.verification,
            "preventionMeasures": list(self.prevention_measures),
            "automaticChecks": list(self.automatic_checks),
            "patternRule": self.pattern_rule,
        }


@dataclass(slots=True)
class ErrorPattern:
    """Aggregate of all entries sharing a fingerprint."""

    pattern_id: str
    description: str
    frequency: int
    last_seen: str
    solutions: list[str] = field(default_factory=list)
    prevention_rules: list[str] = field(default_factory=list)
    auto_fix_available: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "patternId": self.pattern_id,
            "description": self.description,
            "frequency": self.frequency,
            "lastSeen": self.last_seen,
            "solutions": list(self.solutions),
            "preventionRules": list(self.prevention_rules),
            "autoFixAvailable": self.auto_fix_available,
        }


@dataclass(slots=True)
class LearningRule:
    """Occurrence counter keyed by kind and a short message prefix."""

    key: str
    count: int
    first_seen: str
    last_seen: str
    auto_fix_implemented: bool = False


@dataclass(frozen=True, slots=True)
class PreventionRule:
    """Rule synthesized when an error crosses the warning threshold."""

    id: str
    kind: ErrorKind
    rule: str
    auto_check: str
    implemented: str


@dataclass(frozen=True, slots=True)
class ErrorStatistics:
    """Snapshot rendered by the admin dashboard."""

    total_errors: int
    recurring_errors: int
    pattern_count: int
    auto_fix_count: int
    most_common_kind: str
    recent_errors: list[ErrorEntry]

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalErrors": self.total_errors,
            "recurringErrors": self.recurring_errors,
            "patternCount": self.pattern_count,
            "autoFixCount": self.auto_fix_count,
            "mostCommonKind": self.most_common_kind,
            "recentErrors": [entry.to_dict() for entry in self.recent_errors],
        }


__all__ = [
    "ErrorEntry",
    "ErrorKind",
    "ErrorPattern",
    "ErrorStatistics",
    "LearningRule",
    "PreventionRule",
    "SolutionBundle",
]
