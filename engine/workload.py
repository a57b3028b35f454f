"""Auslastungsberechnung eines Tutors.

Stunden:
- Sitzungen: duration/60, aber nur 'completed' und 'confirmed' (fest
  zugesagte Zeit; 'pending' zählt dafür bei der Konfliktprüfung).
- Klassen: Terminlänge × Anzahl Wochen des Semesters, d.h. die gesamte
  im Semester zugesagte Zeit, nicht nur die bisher geleistete.

Schüler: Vereinigung der Schüler-IDs aus allen nicht abgesagten Sitzungen
und aus aktiven Einschreibungen in die aktiven Klassen des Tutors.
"""

import logging

from config.schema import WorkloadThresholds
from engine.interval import weeks_between
from engine.repository import SchedulingRepository
from models.allocation import ResourceAllocation, WorkloadTier
from models.session import SessionStatus, WORKLOAD_STATUSES
from models.tutoring_class import ClassStatus

logger = logging.getLogger(__name__)


def classify_workload(
    total_hours: float, student_count: int, thresholds: WorkloadThresholds
) -> WorkloadTier:
    """Ordnet Stunden und Schülerzahl einer Auslastungsstufe zu.

    Reihenfolge: overloaded → high → medium → low; der erste Treffer gewinnt.
    """
    if total_hours > thresholds.overloaded_hours or student_count > thresholds.overloaded_students:
        return WorkloadTier.OVERLOADED
    if total_hours > thresholds.high_hours or student_count > thresholds.high_students:
        return WorkloadTier.HIGH
    if total_hours > thresholds.medium_hours or student_count > thresholds.medium_students:
        return WorkloadTier.MEDIUM
    return WorkloadTier.LOW


class WorkloadCalculator:
    """Berechnet ResourceAllocation-Momentaufnahmen für einzelne Tutoren."""

    def __init__(self, repo: SchedulingRepository, thresholds: WorkloadThresholds) -> None:
        self.repo = repo
        self.thresholds = thresholds

    def compute(self, tutor_id: str) -> ResourceAllocation:
        """Auslastung eines Tutors. Unbekannter Tutor → NotFoundError."""
        self.repo.tutor(tutor_id)

        sessions = [
            s for s in self.repo.sessions_for_tutor(tutor_id)
            if s.status != SessionStatus.CANCELLED
        ]
        classes = self.repo.classes_for_tutor(tutor_id, statuses={ClassStatus.ACTIVE})
        enrollments = self.repo.active_enrollments()

        session_hours = sum(
            s.duration / 60 for s in sessions if s.status in WORKLOAD_STATUSES
        )
        class_hours = sum(
            (c.duration / 60) * weeks_between(c.semester_start, c.semester_end)
            for c in classes
        )
        total_hours = session_hours + class_hours

        students: set[str] = set()
        for s in sessions:
            students.update(s.student_ids)
        class_ids = {c.id for c in classes}
        for e in enrollments:
            if e.class_id in class_ids:
                students.add(e.student_id)

        tier = classify_workload(total_hours, len(students), self.thresholds)
        logger.debug(
            f"Auslastung {tutor_id}: {total_hours:.2f}h "
            f"({session_hours:.2f}h Sitzungen + {class_hours:.2f}h Klassen), "
            f"{len(students)} Schüler → {tier.value}"
        )

        return ResourceAllocation(
            tutor_id=tutor_id,
            session_ids=[s.id for s in sessions],
            class_ids=[c.id for c in classes],
            total_hours=round(total_hours, 2),
            student_count=len(students),
            workload=tier,
        )
