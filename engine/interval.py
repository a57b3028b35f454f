"""Intervall-Arithmetik: Uhrzeiten parsen, Zeitfenster vergleichen.

Alle Funktionen sind rein (keine Seiteneffekte). Vergleiche arbeiten auf
Minuten seit Mitternacht innerhalb EINES Tages; ob zwei Zeitpunkte auf
denselben Kalendertag fallen, prüft der Aufrufer vorher (same_day).
"""

import math
import re
from datetime import date, datetime

from engine.errors import InvalidFormatError
from models.weekday import Weekday

_CLOCK_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


def parse_clock(time: str) -> int:
    """Wandelt "HH:MM" in Minuten seit Mitternacht um.

    >>> parse_clock("09:30")
    570
    """
    if not isinstance(time, str):
        raise InvalidFormatError(f"Uhrzeit muss ein String 'HH:MM' sein, nicht {time!r}")
    m = _CLOCK_RE.match(time.strip())
    if m is None:
        raise InvalidFormatError(f"Ungültige Uhrzeit: {time!r} (erwartet 'HH:MM')")
    hours, minutes = int(m.group(1)), int(m.group(2))
    if hours > 23 or minutes > 59:
        raise InvalidFormatError(f"Uhrzeit außerhalb des Tages: {time!r}")
    return hours * 60 + minutes


def format_clock(minutes: int) -> str:
    """Minuten seit Mitternacht → "HH:MM"."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def clock_of(moment: datetime) -> int:
    """Minuten seit Mitternacht eines Zeitpunkts (Sekunden werden ignoriert)."""
    return moment.hour * 60 + moment.minute


def weekday_of(moment: datetime) -> Weekday:
    """Wochentag eines Zeitpunkts."""
    return Weekday.from_index(moment.weekday())


def same_day(a: datetime, b: datetime) -> bool:
    """True wenn beide Zeitpunkte auf denselben Kalendertag fallen."""
    return a.date() == b.date()


def overlaps(
    a_start: int, a_end: int, b_start: int, b_end: int, buffer_minutes: int = 0
) -> bool:
    """Prüft ob sich [a_start, a_end) und [b_start, b_end) überschneiden.

    Intervall B wird auf beiden Seiten um buffer_minutes verlängert.
    Halboffen: direkt aneinander anschließende Intervalle (a_end == b_start)
    überschneiden sich ohne Puffer nicht.
    """
    return a_start < b_end + buffer_minutes and a_end > b_start - buffer_minutes


def contains(outer_start: int, outer_end: int, inner_start: int, inner_end: int) -> bool:
    """True wenn [inner_start, inner_end) vollständig in [outer_start, outer_end) liegt."""
    return outer_start <= inner_start and inner_end <= outer_end


def weeks_between(start: date, end: date) -> int:
    """Anzahl (angebrochener) Wochen zwischen zwei Daten, nie negativ."""
    days = (end - start).days
    if days <= 0:
        return 0
    return math.ceil(days / 7)
