"""Konfliktprüfung für Zeitfenster eines Tutors.

Zwei Einsatzzwecke:
- Vorab-Prüfung eines vorgeschlagenen Fensters (Buchung, Verlegung):
  Verfügbarkeit des Tutors, andere Einzelsitzungen (mit Puffer) und der
  feste Wochen-Slot seiner Klassen (ohne Puffer).
- Nachträglicher Scan aller laufenden Einzelsitzungen auf Überschneidungen,
  als Grundlage für 'resource_conflict'-Befunde.

Es werden immer nur Sitzungen und Klassen DESSELBEN Tutors verglichen.
"""

import logging
from collections import defaultdict
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel

from config.schema import ConflictConfig
from engine.errors import ValidationFailedError, ValidationReason
from engine.interval import (
    clock_of, contains, format_clock, overlaps, same_day, weekday_of,
)
from engine.repository import SchedulingRepository
from models.session import ACTIVE_STATUSES, BOOKING_STATUSES, Session
from models.tutoring_class import ClassStatus

logger = logging.getLogger(__name__)

# Klassen mit diesen Status belegen ihren Wochen-Slot
_SCHEDULED_CLASS_STATUSES = {ClassStatus.ACTIVE, ClassStatus.FULL}


class BookingConflict(BaseModel):
    """Kollision eines vorgeschlagenen Fensters mit einer bestehenden Buchung."""

    kind: Literal["session", "class"]
    entity_id: str
    subject: str
    when: str            # lesbare Zeitangabe der kollidierenden Buchung
    message: str


class SessionConflict(BaseModel):
    """Zwei sich überschneidende Einzelsitzungen desselben Tutors.

    first_session_id beginnt früher (bei Gleichstand kleinere ID).
    """

    tutor_id: str
    first_session_id: str
    second_session_id: str
    day: str             # ISO-Datum
    first_window: str    # "HH:MM-HH:MM"
    second_window: str

    @property
    def key(self) -> tuple[str, str]:
        """Reihenfolge-unabhängiger Schlüssel des Paars."""
        return tuple(sorted((self.first_session_id, self.second_session_id)))


def _window(start: datetime, end: datetime) -> str:
    return f"{format_clock(clock_of(start))}-{format_clock(clock_of(end))}"


def _chronological(session: Session) -> tuple:
    return (session.start_time.date(), clock_of(session.start_time), session.id)


class ConflictDetector:
    """Prüft Zeitfenster gegen Verfügbarkeiten, Sitzungen und Klassen."""

    def __init__(self, repo: SchedulingRepository, config: ConflictConfig) -> None:
        self.repo = repo
        self.config = config

    # ── Verfügbarkeit ─────────────────────────────────────────────────────────

    def check_availability(self, tutor_id: str, start: datetime, end: datetime) -> None:
        """Fenster muss vollständig in einem Verfügbarkeits-Slot des Wochentags liegen.

        Wirft ValidationFailedError mit reason NO_AVAILABILITY,
        NO_SLOT_FOR_WEEKDAY oder OUTSIDE_SLOT.
        """
        availabilities = self.repo.availability_for(tutor_id)
        if not availabilities:
            raise ValidationFailedError(
                ValidationReason.NO_AVAILABILITY,
                "Der Tutor hat noch keine Verfügbarkeiten hinterlegt. "
                "Bitte den Tutor direkt kontaktieren.",
            )

        day = weekday_of(start)
        slot = availabilities[0].slot_for(day)
        if slot is None:
            raise ValidationFailedError(
                ValidationReason.NO_SLOT_FOR_WEEKDAY,
                f"Der Tutor ist am {day.value} nicht verfügbar. "
                f"Bitte einen anderen Tag wählen.",
            )

        if not contains(slot.start_minutes, slot.end_minutes, clock_of(start), clock_of(end)):
            raise ValidationFailedError(
                ValidationReason.OUTSIDE_SLOT,
                f"Das Zeitfenster muss innerhalb von {slot.start_time}-{slot.end_time} "
                f"am {day.value} liegen (angefragt: {_window(start, end)}).",
            )

    # ── Buchungen ─────────────────────────────────────────────────────────────

    def find_booking_conflicts(
        self,
        tutor_id: str,
        start: datetime,
        end: datetime,
        exclude_session_id: Optional[str] = None,
        buffer_minutes: Optional[int] = None,
    ) -> list[BookingConflict]:
        """Alle Buchungen des Tutors, mit denen [start, end) kollidiert.

        Einzelsitzungen ('pending'/'confirmed', gleicher Kalendertag) werden
        mit Puffer verglichen, Klassen-Slots am gleichen Wochentag ohne.
        Die Sitzung exclude_session_id (die gerade bearbeitete) zählt nicht.
        """
        buffer = self.config.buffer_minutes if buffer_minutes is None else buffer_minutes
        start_min, end_min = clock_of(start), clock_of(end)
        conflicts: list[BookingConflict] = []

        for s in sorted(self.repo.sessions_for_tutor(tutor_id), key=_chronological):
            if not s.is_individual or s.status not in BOOKING_STATUSES:
                continue
            if s.id == exclude_session_id or not same_day(s.start_time, start):
                continue
            if overlaps(start_min, end_min,
                        clock_of(s.start_time), clock_of(s.end_time), buffer):
                when = f"{s.start_time.date().isoformat()} {_window(s.start_time, s.end_time)}"
                conflicts.append(BookingConflict(
                    kind="session",
                    entity_id=s.id,
                    subject=s.subject,
                    when=when,
                    message=(
                        f"Überschneidung mit Sitzung '{s.subject}' ({when}) "
                        f"oder weniger als {buffer} Minuten Pause dazwischen."
                    ),
                ))

        day = weekday_of(start)
        for c in self.repo.classes_for_tutor(tutor_id, statuses=_SCHEDULED_CLASS_STATUSES):
            if c.day != day:
                continue
            if overlaps(start_min, end_min, c.start_minutes, c.end_minutes):
                when = f"{c.day.value} {c.start_time}-{c.end_time}"
                conflicts.append(BookingConflict(
                    kind="class",
                    entity_id=c.id,
                    subject=c.subject or c.label,
                    when=when,
                    message=f"Überschneidung mit Klasse {c.label} ({when}).",
                ))

        return conflicts

    # ── Vorab-Prüfung ─────────────────────────────────────────────────────────

    def validate_proposed_window(
        self,
        tutor_id: str,
        start: datetime,
        end: datetime,
        exclude_session_id: Optional[str] = None,
    ) -> None:
        """Prüft ein vorgeschlagenes Fenster vollständig.

        Reihenfolge: Fenster selbst → Verfügbarkeit → Buchungen. Der erste
        Verstoß wird als ValidationFailedError gemeldet.
        """
        self.repo.tutor(tutor_id)

        try:
            valid_window = start < end and same_day(start, end)
        except TypeError:
            valid_window = False
        if not valid_window:
            raise ValidationFailedError(
                ValidationReason.INVALID_WINDOW,
                f"Ungültiges Zeitfenster {start.isoformat()} – {end.isoformat()}: "
                f"Start muss vor Ende am selben Tag liegen.",
            )

        self.check_availability(tutor_id, start, end)

        conflicts = self.find_booking_conflicts(tutor_id, start, end, exclude_session_id)
        if conflicts:
            first = conflicts[0]
            reason = (
                ValidationReason.SESSION_CONFLICT if first.kind == "session"
                else ValidationReason.CLASS_CONFLICT
            )
            raise ValidationFailedError(
                reason,
                first.message + " Bitte eine andere Zeit wählen.",
                conflicting_id=first.entity_id,
            )

    # ── Nachträglicher Scan ───────────────────────────────────────────────────

    def scan_session_conflicts(self) -> list[SessionConflict]:
        """Alle Paare sich überschneidender laufender Einzelsitzungen.

        Jedes ungeordnete Paar wird genau einmal gemeldet (ohne Puffer,
        nur am selben Kalendertag). Ausgabe sortiert nach Tutor und Zeit.
        """
        by_tutor: dict[str, list[Session]] = defaultdict(list)
        for s in self.repo.sessions(lambda r: r.get("status") in {st.value for st in ACTIVE_STATUSES}):
            if s.is_individual:
                by_tutor[s.tutor_id].append(s)

        found: dict[tuple[str, str], SessionConflict] = {}
        for tutor_id in sorted(by_tutor):
            sessions = sorted(by_tutor[tutor_id], key=_chronological)
            for i, a in enumerate(sessions):
                for b in sessions[i + 1:]:
                    if not same_day(a.start_time, b.start_time):
                        continue
                    if not overlaps(clock_of(a.start_time), clock_of(a.end_time),
                                    clock_of(b.start_time), clock_of(b.end_time)):
                        continue
                    conflict = SessionConflict(
                        tutor_id=tutor_id,
                        first_session_id=a.id,
                        second_session_id=b.id,
                        day=a.start_time.date().isoformat(),
                        first_window=_window(a.start_time, a.end_time),
                        second_window=_window(b.start_time, b.end_time),
                    )
                    found.setdefault(conflict.key, conflict)

        if found:
            logger.info(f"Konflikt-Scan: {len(found)} überschneidende Sitzungspaare")
        return list(found.values())
