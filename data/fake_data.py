"""Demo-Daten-Generator für die Ressourcen-Engine.

Erzeugt einen realistischen Bestand mit absichtlichen Problemen, damit jede
Befund-Art der Analyse mindestens einmal auftritt.

Absichtliche Probleme:
  1. Überlastung: tut_01 hält eine Doppelstunden-Klasse (2h × 16 Wochen = 32h)
  2. Hohe Last: tut_02 hält eine 90-Minuten-Klasse (1,5h × 16 Wochen = 24h)
  3. Doppelbuchung: tut_03 hat am Samstag zwei sich überschneidende Sitzungen
  4. Unterbesetzte Klasse: C04 mit 3/20 Schülern (15 %)
  5. Überbelegte Klasse: C05 mit 13/12 Schülern
  6. Leerlauf: tut_07 hat weder Sitzungen noch Klassen
  7. Keine Verfügbarkeit: tut_08 hat keine Verfügbarkeiten hinterlegt
"""

from datetime import date, datetime, time, timedelta
from typing import Optional

import random

from pydantic import BaseModel

from config.defaults import (
    COLLECTION_AVAILABILITY,
    COLLECTION_CLASSES,
    COLLECTION_ENROLLMENTS,
    COLLECTION_SESSIONS,
    COLLECTION_USERS,
)
from models.enrollment import Enrollment, EnrollmentStatus
from models.session import Session, SessionStatus
from models.timeslot import Availability, TimeSlot
from models.tutor import Tutor
from models.tutoring_class import ClassStatus, TutoringClass
from models.weekday import Weekday
from store.base import RecordStore

# ─── Namens-Listen ────────────────────────────────────────────────────────────

_FIRST_NAMES = [
    "Anna", "Birgit", "Christian", "Dieter", "Eva", "Franz", "Gabi", "Hans",
    "Iris", "Jürgen", "Kathrin", "Lena", "Markus", "Monika", "Peter", "Sandra",
    "Stefan", "Tanja", "Ulrich", "Vera",
]

_LAST_NAMES = [
    "Müller", "Schmidt", "Schneider", "Fischer", "Weber", "Meyer", "Wagner",
    "Becker", "Schulz", "Hoffmann", "Koch", "Bauer", "Richter", "Klein",
    "Wolf", "Neumann", "Braun", "Krüger", "Lange", "Vogel",
]

_SUBJECTS = [
    "Mathematik", "Physik", "Chemie", "Informatik", "Englisch",
    "Deutsch", "Biologie", "Wirtschaft",
]

_WEEKDAYS = [Weekday.MONDAY, Weekday.TUESDAY, Weekday.WEDNESDAY,
             Weekday.THURSDAY, Weekday.FRIDAY]

# Startstunden der regulären Einzelsitzungen (je 60 min, lückenlos trennbar)
_SESSION_HOURS = [9, 11, 13, 15]

NUM_TUTORS = 8
NUM_STUDENTS = 60
SEMESTER_WEEKS = 16


class DemoDataset(BaseModel):
    """Vollständiger Demo-Bestand, bereit zum Laden in einen RecordStore."""

    tutors: list[Tutor]
    availability: list[Availability]
    sessions: list[Session]
    classes: list[TutoringClass]
    enrollments: list[Enrollment]

    def summary(self) -> str:
        """Kurze Übersicht über den Bestand."""
        return "\n".join([
            f"Tutoren: {len(self.tutors)}",
            f"Verfügbarkeiten: {len(self.availability)}",
            f"Sitzungen: {len(self.sessions)}",
            f"Klassen: {len(self.classes)}",
            f"Einschreibungen: {len(self.enrollments)}",
        ])

    def load_into(self, store: RecordStore) -> None:
        """Legt alle Datensätze im Speicher an."""
        for tutor in self.tutors:
            store.create(COLLECTION_USERS, tutor.model_dump(mode="json"))
        for collection, items in (
            (COLLECTION_AVAILABILITY, self.availability),
            (COLLECTION_SESSIONS, self.sessions),
            (COLLECTION_CLASSES, self.classes),
            (COLLECTION_ENROLLMENTS, self.enrollments),
        ):
            for item in items:
                store.create(collection, item.model_dump(mode="json"))


class DemoDataGenerator:
    """Generiert einen Demo-Bestand relativ zu einer Referenzwoche."""

    def __init__(self, seed: Optional[int] = None, week_start: Optional[date] = None) -> None:
        self.rng = random.Random(seed)
        today = date.today()
        # Referenzwoche beginnt immer an einem Montag
        start = week_start or today
        self.week_start = start - timedelta(days=start.weekday())
        self.semester_start = self.week_start - timedelta(weeks=4)
        self.semester_end = self.semester_start + timedelta(weeks=SEMESTER_WEEKS)
        self._students = [f"stu_{i:03d}" for i in range(1, NUM_STUDENTS + 1)]
        self._session_counter = 0

    def generate(self) -> DemoDataset:
        tutors = self._generate_tutors()
        classes = self._generate_classes(tutors)
        return DemoDataset(
            tutors=tutors,
            availability=self._generate_availability(tutors),
            sessions=self._generate_sessions(tutors),
            classes=classes,
            enrollments=self._generate_enrollments(classes),
        )

    # ─── Tutoren ──────────────────────────────────────────────────────────────

    def _generate_tutors(self) -> list[Tutor]:
        tutors = []
        for i in range(1, NUM_TUTORS + 1):
            first = self.rng.choice(_FIRST_NAMES)
            last = self.rng.choice(_LAST_NAMES)
            tutors.append(Tutor(
                id=f"tut_{i:02d}",
                name=f"{last}, {first}",
                email=f"{first.lower()}.{last.lower()}@tutor.example",
                subjects=self.rng.sample(_SUBJECTS, k=2),
            ))
        return tutors

    def _generate_availability(self, tutors: list[Tutor]) -> list[Availability]:
        """Mo–Fr mit leicht variierenden Zeiten; tut_08 bekommt keine (Problem #7)."""
        result = []
        for tutor in tutors:
            if tutor.id == "tut_08":
                continue
            start = self.rng.choice(["08:00", "08:30"])
            end = self.rng.choice(["17:00", "18:00"])
            result.append(Availability(
                id=f"avail_{tutor.id}",
                tutor_id=tutor.id,
                time_slots=[TimeSlot(day=d, start_time=start, end_time=end) for d in _WEEKDAYS],
            ))
        return result

    # ─── Sitzungen ────────────────────────────────────────────────────────────

    def _make_session(
        self,
        tutor: Tutor,
        day: date,
        start: time,
        minutes: int = 60,
        status: SessionStatus = SessionStatus.CONFIRMED,
    ) -> Session:
        self._session_counter += 1
        begin = datetime.combine(day, start)
        return Session(
            id=f"ses_{self._session_counter:03d}",
            tutor_id=tutor.id,
            student_ids=[self.rng.choice(self._students)],
            subject=self.rng.choice(tutor.subjects),
            start_time=begin,
            end_time=begin + timedelta(minutes=minutes),
            duration=minutes,
            status=status,
            is_online=self.rng.random() < 0.4,
        )

    def _generate_sessions(self, tutors: list[Tutor]) -> list[Session]:
        sessions = []
        statuses = [SessionStatus.CONFIRMED, SessionStatus.COMPLETED,
                    SessionStatus.PENDING, SessionStatus.CANCELLED]
        by_id = {t.id: t for t in tutors}

        # Reguläre Einzelsitzungen Mo–Fr ohne Überschneidungen pro Tutor
        for tutor_id in ("tut_01", "tut_02", "tut_03", "tut_04", "tut_05", "tut_06"):
            slots = [(d, h) for d in range(5) for h in _SESSION_HOURS]
            for d, h in self.rng.sample(slots, k=self.rng.randint(3, 5)):
                sessions.append(self._make_session(
                    by_id[tutor_id],
                    self.week_start + timedelta(days=d),
                    time(h, 0),
                    status=self.rng.choices(statuses, weights=[5, 3, 2, 1])[0],
                ))

        # Problem #3: Doppelbuchung am Samstag
        saturday = self.week_start + timedelta(days=5)
        sessions.append(self._make_session(by_id["tut_03"], saturday, time(10, 0)))
        sessions.append(self._make_session(by_id["tut_03"], saturday, time(10, 30)))
        return sessions

    # ─── Klassen & Einschreibungen ────────────────────────────────────────────

    def _make_class(
        self, code: str, tutor: Tutor, day: Weekday,
        start: str, end: str, minutes: int, max_students: int,
    ) -> TutoringClass:
        return TutoringClass(
            id=f"cls_{code.lower()}",
            code=code,
            tutor_id=tutor.id,
            subject=tutor.subjects[0],
            day=day,
            start_time=start,
            end_time=end,
            duration=minutes,
            max_students=max_students,
            status=ClassStatus.ACTIVE,
            semester_start=self.semester_start,
            semester_end=self.semester_end,
        )

    def _generate_classes(self, tutors: list[Tutor]) -> list[TutoringClass]:
        by_id = {t.id: t for t in tutors}
        return [
            # Problem #1: Doppelstunde → 32h im Semester
            self._make_class("C01", by_id["tut_01"], Weekday.MONDAY, "08:00", "10:00", 120, 20),
            # Problem #2: 90 Minuten → 24h im Semester
            self._make_class("C02", by_id["tut_02"], Weekday.TUESDAY, "16:00", "17:30", 90, 15),
            self._make_class("C03", by_id["tut_06"], Weekday.THURSDAY, "16:00", "16:45", 45, 10),
            # Problem #4: unterbesetzt
            self._make_class("C04", by_id["tut_04"], Weekday.WEDNESDAY, "16:00", "17:00", 60, 20),
            # Problem #5: überbelegt
            self._make_class("C05", by_id["tut_05"], Weekday.FRIDAY, "16:00", "16:45", 45, 12),
        ]

    def _generate_enrollments(self, classes: list[TutoringClass]) -> list[Enrollment]:
        # Belegung je Klasse: C01 18, C02 8, C03 6, C04 3, C05 13
        targets = {"C01": 18, "C02": 8, "C03": 6, "C04": 3, "C05": 13}
        enrollments = []
        for cls in classes:
            for student_id in self.rng.sample(self._students, k=targets[cls.code]):
                enrollments.append(Enrollment(
                    id=f"enr_{len(enrollments) + 1:03d}",
                    student_id=student_id,
                    class_id=cls.id,
                    status=EnrollmentStatus.ACTIVE,
                ))
        # Ein abgemeldeter Schüler zählt nirgends mit
        enrollments.append(Enrollment(
            id=f"enr_{len(enrollments) + 1:03d}",
            student_id=self._students[0],
            class_id=classes[3].id,
            status=EnrollmentStatus.DROPPED,
        ))
        return enrollments

    def print_summary(self, data: DemoDataset) -> None:
        """Gibt eine Rich-Tabelle mit Übersicht der erzeugten Daten aus."""
        from rich.console import Console
        from rich.table import Table
        from rich import box

        console = Console()
        table = Table(title="Erzeugte Demo-Daten", box=box.ROUNDED)
        table.add_column("Kategorie", style="bold cyan")
        table.add_column("Anzahl", justify="right")
        table.add_column("Details")

        active = sum(1 for s in data.sessions if s.status != SessionStatus.CANCELLED)
        table.add_row("Tutoren", str(len(data.tutors)), "")
        table.add_row("Verfügbarkeiten", str(len(data.availability)),
                      f"{len(data.tutors) - len(data.availability)} Tutor(en) ohne")
        table.add_row("Sitzungen", str(len(data.sessions)), f"{active} nicht abgesagt")
        table.add_row("Klassen", str(len(data.classes)),
                      f"Semester {self.semester_start:%d.%m.} – {self.semester_end:%d.%m.%Y}")
        table.add_row("Einschreibungen", str(len(data.enrollments)), "")
        console.print(table)
