"""Datenmodell für eine wiederkehrende Klasse (Pydantic v2)."""

from datetime import date
from enum import Enum

from pydantic import BaseModel, Field, field_validator, model_validator

from models.weekday import Weekday


class ClassStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    FULL = "full"


class TutoringClass(BaseModel):
    """Eine Klasse mit festem Wochen-Slot über ein Semester (z.B. C01).

    current_enrollment darf max_students vorübergehend überschreiten;
    das meldet der Analyzer als Befund mit hohem Schweregrad.
    """

    id: str
    code: str = ""                # "C01", "C02", ...
    tutor_id: str
    subject: str = ""
    day: Weekday
    start_time: str               # "HH:MM"
    end_time: str                 # "HH:MM"
    duration: int = Field(gt=0)   # Minuten pro Termin
    max_students: int = Field(gt=0)
    current_enrollment: int = Field(0, ge=0)
    status: ClassStatus = ClassStatus.ACTIVE
    semester_start: date
    semester_end: date
    is_online: bool = False
    location: str | None = None

    @field_validator("start_time", "end_time")
    @classmethod
    def _check_clock(cls, v: str) -> str:
        from engine.interval import parse_clock
        parse_clock(v)
        return v

    @model_validator(mode='after')
    def _check_slot(self):
        if self.start_minutes >= self.end_minutes:
            raise ValueError(
                f"Klasse {self.id}: Start {self.start_time} muss vor Ende {self.end_time} liegen"
            )
        return self

    @property
    def start_minutes(self) -> int:
        from engine.interval import parse_clock
        return parse_clock(self.start_time)

    @property
    def end_minutes(self) -> int:
        from engine.interval import parse_clock
        return parse_clock(self.end_time)

    @property
    def label(self) -> str:
        """Anzeigename: Code, ersatzweise ID."""
        return self.code or self.id
