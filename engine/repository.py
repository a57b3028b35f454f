"""Typisierter Zugriff der Engine auf den Datenspeicher.

Alle Komponenten bekommen dasselbe SchedulingRepository injiziert und
sprechen den RecordStore nie direkt an. Datensätze, die sich nicht in
das jeweilige Modell überführen lassen, werden übersprungen, geloggt
und in skipped_records gezählt, damit ein einzelner kaputter Datensatz
keinen Analyse-Lauf abbricht.
"""

import logging
from typing import Callable, Optional, TypeVar

from pydantic import BaseModel, ValidationError

from config.defaults import (
    COLLECTION_AVAILABILITY,
    COLLECTION_CLASSES,
    COLLECTION_ENROLLMENTS,
    COLLECTION_PLANS,
    COLLECTION_SESSIONS,
    COLLECTION_USERS,
)
from engine.errors import NotFoundError
from models.enrollment import Enrollment, EnrollmentStatus
from models.plan import OptimizationPlan
from models.session import Session
from models.timeslot import Availability
from models.tutor import Tutor
from models.tutoring_class import ClassStatus, TutoringClass
from store.base import Record, RecordStore

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class SchedulingRepository:
    """Lese- und Schreibzugriffe der Engine, typisiert über Pydantic-Modelle."""

    def __init__(self, store: RecordStore) -> None:
        self.store = store
        self.skipped_records = 0
        self._skipped_keys: set[tuple[str, str]] = set()

    # ── Hilfsfunktionen ───────────────────────────────────────────────────────

    def _skip(self, collection: str, record_key: str, reason: str) -> None:
        key = (collection, record_key)
        if key not in self._skipped_keys:
            self._skipped_keys.add(key)
            self.skipped_records += 1
            logger.warning(
                f"Fehlerhafter Datensatz übersprungen: {collection}/{record_key} ({reason})"
            )

    def _parse(self, model: type[M], collection: str, record: Record) -> Optional[M]:
        if not isinstance(record, dict):
            self._skip(collection, repr(record), "kein Objekt")
            return None
        try:
            return model.model_validate(record)
        except ValidationError as e:
            self._skip(
                collection, str(record.get("id", "?")),
                f"{e.error_count()} Fehler: {e.errors()[0]['msg']}",
            )
            return None

    def _records(self, collection: str, records: list) -> list[Record]:
        """Nur Dicts; alles andere (z.B. null in einer JSON-Liste) wird gezählt."""
        result = []
        for position, record in enumerate(records):
            if isinstance(record, dict):
                result.append(record)
            else:
                self._skip(collection, f"#{position}", f"kein Objekt: {record!r}")
        return result

    def _parse_all(
        self, model: type[M], collection: str, records: list[Record]
    ) -> list[M]:
        parsed = (self._parse(model, collection, r) for r in self._records(collection, records))
        return [p for p in parsed if p is not None]

    def _find(
        self, model: type[M], collection: str, predicate: Callable[[Record], bool]
    ) -> list[M]:
        # Prädikate sehen nur Dicts
        records = self._records(collection, self.store.read_all(collection))
        return self._parse_all(model, collection, [r for r in records if predicate(r)])

    def reset_skipped(self) -> None:
        """Setzt den Zähler für übersprungene Datensätze zurück (pro Analyse-Lauf)."""
        self.skipped_records = 0
        self._skipped_keys.clear()

    # ── Tutoren ───────────────────────────────────────────────────────────────

    def tutors(self) -> list[Tutor]:
        """Alle Nutzer mit Rolle 'tutor' in Speicherreihenfolge."""
        return self._find(Tutor, COLLECTION_USERS, lambda u: u.get("role") == "tutor")

    def tutor(self, tutor_id: str) -> Tutor:
        record = self.store.find_by_id(COLLECTION_USERS, tutor_id)
        if record is None or record.get("role") != "tutor":
            raise NotFoundError("Tutor", tutor_id)
        tutor = self._parse(Tutor, COLLECTION_USERS, record)
        if tutor is None:
            raise NotFoundError("Tutor", tutor_id, f"Tutor {tutor_id}: Datensatz fehlerhaft")
        return tutor

    # ── Sitzungen ─────────────────────────────────────────────────────────────

    def sessions(self, predicate: Callable[[Record], bool] = lambda r: True) -> list[Session]:
        return self._find(Session, COLLECTION_SESSIONS, predicate)

    def sessions_for_tutor(self, tutor_id: str) -> list[Session]:
        return self.sessions(lambda s: s.get("tutor_id") == tutor_id)

    def session(self, session_id: str) -> Session:
        record = self.store.find_by_id(COLLECTION_SESSIONS, session_id)
        session = self._parse(Session, COLLECTION_SESSIONS, record) if record else None
        if session is None:
            raise NotFoundError("Sitzung", session_id)
        return session

    def update_session(self, session_id: str, fields: Record) -> Record:
        return self.store.update(COLLECTION_SESSIONS, session_id, fields)

    # ── Klassen & Einschreibungen ─────────────────────────────────────────────

    def classes(self, predicate: Callable[[Record], bool] = lambda r: True) -> list[TutoringClass]:
        return self._find(TutoringClass, COLLECTION_CLASSES, predicate)

    def classes_for_tutor(
        self, tutor_id: str, statuses: Optional[set[ClassStatus]] = None
    ) -> list[TutoringClass]:
        classes = self.classes(lambda c: c.get("tutor_id") == tutor_id)
        if statuses is not None:
            classes = [c for c in classes if c.status in statuses]
        return classes

    def tutoring_class(self, class_id: str) -> TutoringClass:
        record = self.store.find_by_id(COLLECTION_CLASSES, class_id)
        cls = self._parse(TutoringClass, COLLECTION_CLASSES, record) if record else None
        if cls is None:
            raise NotFoundError("Klasse", class_id)
        return cls

    def update_class(self, class_id: str, fields: Record) -> Record:
        return self.store.update(COLLECTION_CLASSES, class_id, fields)

    def active_enrollments(self) -> list[Enrollment]:
        return self._find(
            Enrollment, COLLECTION_ENROLLMENTS,
            lambda e: e.get("status") == EnrollmentStatus.ACTIVE.value,
        )

    def update_enrollment(self, enrollment_id: str, fields: Record) -> Record:
        return self.store.update(COLLECTION_ENROLLMENTS, enrollment_id, fields)

    # ── Verfügbarkeiten ───────────────────────────────────────────────────────

    def availability_for(self, tutor_id: str) -> list[Availability]:
        return self._find(
            Availability, COLLECTION_AVAILABILITY, lambda a: a.get("tutor_id") == tutor_id
        )

    # ── Optimierungspläne ─────────────────────────────────────────────────────

    def plans(self) -> list[OptimizationPlan]:
        return self._parse_all(
            OptimizationPlan, COLLECTION_PLANS, self.store.read_all(COLLECTION_PLANS)
        )

    def plan(self, plan_id: str) -> OptimizationPlan:
        record = self.store.find_by_id(COLLECTION_PLANS, plan_id)
        plan = self._parse(OptimizationPlan, COLLECTION_PLANS, record) if record else None
        if plan is None:
            raise NotFoundError("Optimierungsplan", plan_id)
        return plan

    def save_plan(self, plan: OptimizationPlan) -> None:
        self.store.create(COLLECTION_PLANS, plan.to_record())

    def update_plan(self, plan_id: str, fields: Record) -> Record:
        return self.store.update(COLLECTION_PLANS, plan_id, fields)
