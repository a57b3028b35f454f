"""Ressourcen-Engine: Auslastung, Konflikte, Ineffizienzen, Optimierungspläne.

Einstiegspunkt ist engine.service.SchedulingEngine. Hier werden nur die
abhängigkeitsfreien Bausteine re-exportiert, damit models/ sie ohne
Import-Zyklus nutzen kann.
"""

from engine.errors import (
    InvalidFormatError,
    InvalidStateError,
    NotFoundError,
    SchedulingError,
    ValidationFailedError,
    ValidationReason,
)
from engine.interval import (
    clock_of,
    contains,
    format_clock,
    overlaps,
    parse_clock,
    same_day,
    weekday_of,
    weeks_between,
)

__all__ = [
    "InvalidFormatError",
    "InvalidStateError",
    "NotFoundError",
    "SchedulingError",
    "ValidationFailedError",
    "ValidationReason",
    "clock_of",
    "contains",
    "format_clock",
    "overlaps",
    "parse_clock",
    "same_day",
    "weekday_of",
    "weeks_between",
]
