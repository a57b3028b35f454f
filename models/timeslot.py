"""Zeitfenster im Wochenraster und Tutor-Verfügbarkeiten (Pydantic v2)."""

from typing import Optional

from pydantic import BaseModel, field_validator, model_validator

from models.weekday import Weekday


class TimeSlot(BaseModel):
    """Ein wöchentlich wiederkehrendes Zeitfenster an einem Wochentag.

    Start und Ende liegen am selben Tag; Fenster über Mitternacht gibt es nicht.
    """

    day: Weekday
    start_time: str          # "HH:MM"
    end_time: str            # "HH:MM", strikt nach start_time

    @field_validator("start_time", "end_time")
    @classmethod
    def _check_clock(cls, v: str) -> str:
        from engine.interval import parse_clock
        parse_clock(v)
        return v

    @model_validator(mode='after')
    def _check_order(self):
        if self.start_minutes >= self.end_minutes:
            raise ValueError(
                f"Zeitfenster {self.day.value} {self.start_time}-{self.end_time}: "
                f"Start muss vor Ende liegen"
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

    def __str__(self) -> str:
        return f"{self.day.short_name} {self.start_time}-{self.end_time}"


class Availability(BaseModel):
    """Verfügbarkeiten eines Tutors: geordnete Liste wöchentlicher Zeitfenster.

    Pro Wochentag wird nur das erste passende Fenster berücksichtigt.
    """

    id: str
    tutor_id: str
    time_slots: list[TimeSlot] = []

    def slot_for(self, day: Weekday) -> Optional[TimeSlot]:
        """Erstes Zeitfenster für den Wochentag oder None."""
        return next((s for s in self.time_slots if s.day == day), None)
