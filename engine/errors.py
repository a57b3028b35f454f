"""Fehlerklassen der Ressourcen-Engine."""

from enum import Enum
from typing import Optional


class SchedulingError(Exception):
    """Basisklasse aller fachlichen Fehler der Engine."""


class NotFoundError(SchedulingError, LookupError):
    """Tutor, Klasse, Sitzung, Einschreibung oder Plan existiert nicht."""

    def __init__(self, kind: str, record_id: str, message: Optional[str] = None) -> None:
        self.kind = kind
        self.record_id = record_id
        super().__init__(message or f"{kind} nicht gefunden: {record_id}")


class InvalidFormatError(SchedulingError, ValueError):
    """Uhrzeit oder Zeitstempel ist nicht im erwarteten Format."""


class InvalidStateError(SchedulingError):
    """Operation im aktuellen Lebenszyklus-Status nicht erlaubt."""


class ValidationReason(str, Enum):
    """Warum ein vorgeschlagenes Zeitfenster abgelehnt wurde."""

    INVALID_WINDOW = "invalid_window"
    NO_AVAILABILITY = "no_availability"
    NO_SLOT_FOR_WEEKDAY = "no_slot_for_weekday"
    OUTSIDE_SLOT = "outside_slot"
    SESSION_CONFLICT = "session_conflict"
    CLASS_CONFLICT = "class_conflict"


class ValidationFailedError(SchedulingError):
    """Zeitfenster verletzt Verfügbarkeit oder kollidiert mit einer Buchung.

    `reason` unterscheidet die Ursache, damit die Oberfläche passende
    Hinweise anzeigen kann; `message` ist der lesbare Text.
    """

    def __init__(
        self,
        reason: ValidationReason,
        message: str,
        conflicting_id: Optional[str] = None,
    ) -> None:
        self.reason = reason
        self.message = message
        self.conflicting_id = conflicting_id
        super().__init__(message)
