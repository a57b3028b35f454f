"""Wochentage im Wochenraster."""

from enum import Enum


class Weekday(str, Enum):
    """Wochentag, gespeichert als englischer Kleinbuchstaben-Name ("monday")."""

    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @classmethod
    def from_index(cls, index: int) -> "Weekday":
        """0=Montag … 6=Sonntag (wie datetime.weekday())."""
        return list(cls)[index]

    @classmethod
    def _missing_(cls, value):
        # "Monday" / "MONDAY" aus Altdaten akzeptieren
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value == lowered:
                    return member
        return None

    @property
    def index(self) -> int:
        return list(Weekday).index(self)

    @property
    def short_name(self) -> str:
        """Abgekürzter deutscher Tagesname."""
        return ["Mo", "Di", "Mi", "Do", "Fr", "Sa", "So"][self.index]
