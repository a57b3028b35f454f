"""Auslastungs-Momentaufnahme eines Tutors (wird nie gespeichert)."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class WorkloadTier(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    OVERLOADED = "overloaded"

    @property
    def rank(self) -> int:
        """0 = low … 3 = overloaded, für Vergleiche."""
        return list(WorkloadTier).index(self)


class ResourceAllocation(BaseModel):
    """Berechnete Auslastung eines Tutors zu einem Zeitpunkt.

    Wird bei jedem Aufruf neu aus den Sitzungen, Klassen und
    Einschreibungen abgeleitet und danach nicht verändert.
    """

    tutor_id: str
    session_ids: list[str]
    class_ids: list[str]
    total_hours: float        # auf 2 Nachkommastellen gerundet
    student_count: int        # verschiedene Schüler (Sitzungen ∪ Klassen)
    workload: WorkloadTier
    computed_at: datetime = Field(default_factory=datetime.now)
