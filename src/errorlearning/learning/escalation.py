"""Threshold escalation for recurring errors.

Two append-only tiers are evaluated when a solution is documented:

- warning tier (occurrence count >= warning threshold): warning log,
  prevention rule, developer notification, lint rule suggestion
- auto-fix tier (occurrence count >= auto-fix threshold): pattern marked
  auto-fixable, auto-fix command, pre-commit hook, code template

Kinds missing from a lookup table simply emit nothing for that table.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from errorlearning.core.console import get_logger

from .models import ErrorEntry, ErrorKind, ErrorPattern, LearningRule, PreventionRule

logger = get_logger(__name__)

LINT_RULES: dict[ErrorKind, str] = {
    ErrorKind.SYNTAX: '"no-trailing-spaces": "error", "semi": ["error", "always"]',
    ErrorKind.IMPORT: '"import/no-unresolved": "error", "import/order": "error"',
    ErrorKind.CONFIG: '"no-process-env": "warn"',
    ErrorKind.DATA: '"@typescript-eslint/strict-boolean-expressions": "error"',
}

AUTO_FIX_COMMANDS: dict[ErrorKind, str] = {
    ErrorKind.SYNTAX: "prettier --write",
    ErrorKind.IMPORT: "organize-imports-cli",
    ErrorKind.CONFIG: "env-validation-check",
    ErrorKind.DATA: "type-guard-generator",
}

PRE_COMMIT_HOOKS: dict[ErrorKind, str] = {
    ErrorKind.SYNTAX: "npm run lint:fix",
    ErrorKind.IMPORT: "npm run imports:organize",
    ErrorKind.CONFIG: "npm run config:validate",
    ErrorKind.DATA: "npm run types:check",
}

CODE_TEMPLATES: dict[ErrorKind, str] = {
    ErrorKind.SYNTAX: "// AUTO-GENERATED: Korrekte Syntax-Template",
    ErrorKind.IMPORT: "// AUTO-GENERATED: Import-Template mit korrekten Pfaden",
    ErrorKind.CONFIG: "// AUTO-GENERATED: Config-Validation-Template",
    ErrorKind.DATA: "// AUTO-GENERATED: Type-Safe Data-Handling-Template",
}

AUTO_CHECKS: dict[ErrorKind, str] = {
    ErrorKind.SYNTAX: "Syntax-Validator vor Ausführung",
    ErrorKind.IMPORT: "Import-Resolver Check",
    ErrorKind.CONFIG: "Environment-Variable Validation",
    ErrorKind.DATA: "Type-Safety Check",
    ErrorKind.API: "API-Endpoint Verfügbarkeit",
    ErrorKind.LOGIC: "Unit-Test Coverage Check",
}
GENERIC_AUTO_CHECK = "Allgemeiner Validierungs-Check"


class EscalationTier(str, Enum):
    WARNING = "warning"
    AUTO_FIX = "auto_fix"


@dataclass(frozen=True, slots=True)
class EscalationEvent:
    """What one tier emitted for one documented entry."""

    tier: EscalationTier
    error_id: str
    kind: ErrorKind
    occurrence_count: int
    prevention_rule: PreventionRule | None = None
    notification: str | None = None
    lint_rule: str | None = None
    auto_fix_command: str | None = None
    pre_commit_hook: str | None = None
    code_template: str | None = None


EscalationListener = Callable[[EscalationEvent], None]


def generate_auto_check(kind: ErrorKind) -> str:
    return AUTO_CHECKS.get(kind, GENERIC_AUTO_CHECK)


class EscalationEngine:
    """Decide and emit escalation side effects for a documented entry."""

    def __init__(self, warning_threshold: int = 3, auto_fix_threshold: int = 5) -> None:
        self.warning_threshold = warning_threshold
        self.auto_fix_threshold = auto_fix_threshold
        self._listeners: list[EscalationListener] = []

    def subscribe(self, listener: EscalationListener) -> None:
        """Register a callback invoked with every event passed to ``notify``."""
        self._listeners.append(listener)

    def escalate(
        self,
        entry: ErrorEntry,
        pattern: ErrorPattern | None,
        learning_rule: LearningRule | None,
        *,
        now: str,
    ) -> list[EscalationEvent]:
        """Run every tier whose threshold ``entry.occurrence_count`` reaches."""
        events: list[EscalationEvent] = []
        if entry.occurrence_count >= self.warning_threshold:
            events.append(self._warn(entry, now=now))
        if entry.occurrence_count >= self.auto_fix_threshold:
            events.append(self._auto_fix(entry, pattern, learning_rule))
        return events

    def notify(self, events: list[EscalationEvent]) -> None:
        """Deliver ``events`` to every listener.

        A failing listener is logged and skipped; the remaining listeners
        still receive the event.
        """
        for event in events:
            for listener in self._listeners:
                try:
                    listener(event)
                except Exception:
                    logger.exception(
                        "Escalation listener %r failed for %s", listener, event.error_id
                    )

    def _warn(self, entry: ErrorEntry, *, now: str) -> EscalationEvent:
        kind = entry.kind
        logger.warning("⚠️ WIEDERHOLUNGSFEHLER ERKANNT: %s", kind.value)
        logger.warning("Vorkommen: %dx", entry.occurrence_count)
        logger.warning("Empfohlene Lösung: %s", entry.solution)

        prevention_rule = PreventionRule(
            id=f"prevention_{entry.id}",
            kind=kind,
            rule=entry.pattern_rule,
            auto_check=generate_auto_check(kind),
            implemented=now,
        )
        logger.info("📋 NEUE PRÄVENTIONSREGEL ERSTELLT: %s", prevention_rule.rule)
        logger.info("🔍 AUTO-CHECK: %s", prevention_rule.auto_check)

        notification = (
            f"Wiederkehrender Fehler {kind.value} ({entry.occurrence_count}x)"
        )
        logger.info("📧 ENTWICKLER-BENACHRICHTIGUNG: %s", notification)

        lint_rule = LINT_RULES.get(kind)
        if lint_rule:
            logger.info("🔧 LINT-REGEL ERSTELLT: %s", lint_rule)

        return EscalationEvent(
            tier=EscalationTier.WARNING,
            error_id=entry.id,
            kind=kind,
            occurrence_count=entry.occurrence_count,
            prevention_rule=prevention_rule,
            notification=notification,
            lint_rule=lint_rule,
        )

    def _auto_fix(
        self,
        entry: ErrorEntry,
        pattern: ErrorPattern | None,
        learning_rule: LearningRule | None,
    ) -> EscalationEvent:
        kind = entry.kind
        logger.info("🤖 AUTO-KORREKTUR AKTIVIERT: %s", kind.value)

        if pattern is not None:
            pattern.auto_fix_available = True
        if learning_rule is not None:
            learning_rule.auto_fix_implemented = True

        command = AUTO_FIX_COMMANDS.get(kind)
        if command:
            logger.info("🤖 AUTO-FIX REGEL: %s", command)

        hook = PRE_COMMIT_HOOKS.get(kind)
        if hook:
            logger.info("🪝 PRE-COMMIT HOOK: %s", hook)

        template = CODE_TEMPLATES.get(kind)
        if template:
            logger.info("📄 CODE-TEMPLATE ERSTELLT: %s", template)

        return EscalationEvent(
            tier=EscalationTier.AUTO_FIX,
            error_id=entry.id,
            kind=kind,
            occurrence_count=entry.occurrence_count,
            auto_fix_command=command,
            pre_commit_hook=hook,
            code_template=template,
        )


__all__ = [
    "AUTO_CHECKS",
    "AUTO_FIX_COMMANDS",
    "CODE_TEMPLATES",
    "GENERIC_AUTO_CHECK",
    "LINT_RULES",
    "PRE_COMMIT_HOOKS",
    "EscalationEngine",
    "EscalationEvent",
    "EscalationListener",
    "EscalationTier",
    "generate_auto_check",
]
