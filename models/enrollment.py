"""Datenmodell für eine Einschreibung (Pydantic v2)."""

from enum import Enum

from pydantic import BaseModel


class EnrollmentStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    DROPPED = "dropped"
    CANCELLED = "cancelled"


class Enrollment(BaseModel):
    """Ein Schüler in einer Klasse."""

    id: str
    student_id: str
    class_id: str
    status: EnrollmentStatus = EnrollmentStatus.ACTIVE
