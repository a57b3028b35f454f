"""Datenmodell für eine Nachhilfe-Sitzung (Pydantic v2)."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class SessionStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    RESCHEDULED = "rescheduled"


# Nur diese Status belegen Zeit des Tutors (Konfliktprüfung bei Buchung)
BOOKING_STATUSES = frozenset({SessionStatus.PENDING, SessionStatus.CONFIRMED})
# Laufende Sitzungen zählen zusätzlich beim nachträglichen Konflikt-Scan
ACTIVE_STATUSES = frozenset({
    SessionStatus.PENDING, SessionStatus.CONFIRMED, SessionStatus.ONGOING,
})
# Nur fest zugesagte Zeit zählt zur Auslastung
WORKLOAD_STATUSES = frozenset({SessionStatus.COMPLETED, SessionStatus.CONFIRMED})


class Session(BaseModel):
    """Eine Sitzung eines Tutors mit einem oder mehreren Schülern.

    Mit class_id gehört die Sitzung zu einer wiederkehrenden Klasse,
    ohne class_id ist sie eine Einzelsitzung.
    """

    id: str
    tutor_id: str
    student_ids: list[str] = []
    class_id: Optional[str] = None
    subject: str
    start_time: datetime
    end_time: datetime
    duration: int = Field(gt=0)              # Minuten
    status: SessionStatus = SessionStatus.PENDING
    is_online: bool = False
    location: Optional[str] = None

    @model_validator(mode='after')
    def _check_duration(self):
        try:
            actual = (self.end_time - self.start_time).total_seconds() / 60
        except TypeError:
            raise ValueError(
                f"Sitzung {self.id}: Start und Ende mischen Zeitzonen-Angaben"
            ) from None
        # Konfliktprüfung rechnet in Minuten seit Mitternacht eines Tages
        if self.start_time.date() != self.end_time.date():
            raise ValueError(
                f"Sitzung {self.id}: endet nicht am Starttag "
                f"({self.start_time:%d.%m.%Y} bis {self.end_time:%d.%m.%Y})"
            )
        if actual != self.duration:
            raise ValueError(
                f"Sitzung {self.id}: Ende - Start = {actual:g} min, "
                f"aber duration = {self.duration} min"
            )
        return self

    @property
    def is_individual(self) -> bool:
        """True für Einzelsitzungen (nicht an eine Klasse gebunden)."""
        return self.class_id is None
