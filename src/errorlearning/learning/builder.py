"""Error entry construction helpers.

Everything derived from a raw report before it reaches the registry:
    - analyze_cause(): canned cause explanation per error kind
    - identify_trigger(): first matching context keyword rule
    - generate_error_id(): timestamp + kind + sanitized message prefix
    - render_error_report(): textual report logged for every entry
"""

from __future__ import annotations

import re
from datetime import UTC, datetime

from .models import ErrorEntry, ErrorKind

CAUSE_ANALYSIS: dict[ErrorKind, str] = {
    ErrorKind.SYNTAX: "Syntax-Fehler durch Tippfehler oder fehlende Zeichen",
    ErrorKind.IMPORT: "Import-Problem durch fehlende Dependencies oder falsche Pfade",
    ErrorKind.CONFIG: "Konfigurationsfehler durch fehlende Environment-Variablen",
    ErrorKind.API: "API-Fehler durch externe Service-Probleme oder Netzwerkissues",
    ErrorKind.DATA: "Daten-Validierungsfehler durch unerwartete Eingabeformate",
    ErrorKind.LOGIC: "Logikfehler durch falsche Algorithmen oder Bedingungen",
    ErrorKind.RUNTIME: "Laufzeitfehler durch unerwartete Ausführungsbedingungen",
}
UNKNOWN_CAUSE = "Unbekannte Fehlerursache"

# Checked in order, first hit wins.
TRIGGER_RULES: tuple[tuple[str, str], ...] = (
    ("user input", "Benutzereingabe"),
    ("API call", "API-Aufruf"),
    ("file operation", "Dateioperation"),
    ("database", "Datenbankoperation"),
)
UNKNOWN_TRIGGER = "Unbekannter Trigger"

_NON_ALPHANUMERIC = re.compile(r"[^a-zA-Z0-9]")


def analyze_cause(kind: ErrorKind | str) -> str:
    """Return the cause explanation for ``kind``, or the generic fallback."""
    try:
        parsed = ErrorKind.parse(kind)
    except ValueError:
        return UNKNOWN_CAUSE
    return CAUSE_ANALYSIS.get(parsed, UNKNOWN_CAUSE)


def identify_trigger(context: str) -> str:
    for keyword, trigger in TRIGGER_RULES:
        if keyword in context:
            return trigger
    return UNKNOWN_TRIGGER


def format_timestamp(moment: datetime) -> str:
    """Render ``moment`` as ISO-8601 UTC with milliseconds and a ``Z`` suffix."""
    utc_moment = moment.astimezone(UTC)
    return utc_moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def sanitize_message(message: str, length: int) -> str:
    return _NON_ALPHANUMERIC.sub("_", message)[:length]


def generate_error_id(
    kind: ErrorKind,
    message: str,
    moment: datetime,
    *,
    message_length: int = 20,
) -> str:
    """Build ``{YYYYMMDDhhmmss}_{kind}_{message prefix}`` for an entry.

    The id is not unique on its own: identical reports within the same
    second produce the same value. The registry disambiguates collisions.
    """
    stamp = moment.astimezone(UTC).strftime("%Y%m%d%H%M%S")
    return f"{stamp}_{kind.value}_{sanitize_message(message, message_length)}"


def render_error_report(entry: ErrorEntry) -> str:
    line = entry.line_number if entry.line_number else "unknown"
    recurring = "JA" if entry.is_recurring else "NEIN"
    return (
        f"\n## FEHLER-EINTRAG {entry.id}\n"
        "\n### Fehlerdetails:\n"
        f"- **Zeitpunkt:** {entry.timestamp}\n"
        f"- **Fehlertyp:** {entry.kind.value}\n"
        f"- **Fehlermeldung:** {entry.original_message}\n"
        f"- **Betroffene Datei:** {entry.affected_file}:{line}\n"
        f"- **Kontext:** {entry.context}\n"
        "\n### Ursachenanalyse:\n"
        f"- **Grund:** {entry.cause_analysis}\n"
        f"- **Auslöser:** {entry.trigger}\n"
        f"- **Muster erkannt:** {recurring} ({entry.occurrence_count}x)\n"
        "\n### Status:\n"
        f"- **Lösung implementiert:** {entry.solution or 'AUSSTEHEND'}\n"
        f"- **Präventionsmaßnahmen:** {len(entry.prevention_measures)} geplant\n"
    )


__all__ = [
    "CAUSE_ANALYSIS",
    "TRIGGER_RULES",
    "UNKNOWN_CAUSE",
    "UNKNOWN_TRIGGER",
    "analyze_cause",
    "format_timestamp",
    "generate_error_id",
    "identify_trigger",
    "render_error_report",
    "sanitize_message",
]
