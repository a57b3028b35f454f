"""Tests für die Auslastungsberechnung."""

import itertools

import pytest

from config.defaults import default_workload_thresholds
from engine.errors import NotFoundError
from engine.workload import classify_workload
from models.allocation import WorkloadTier

from builders import (
    class_record, enrollment_records, session_record, tutor_record,
)


# ─── KLASSIFIKATION ───────────────────────────────────────────────────────────

class TestClassifyWorkload:
    @pytest.fixture
    def thresholds(self):
        return default_workload_thresholds()

    def test_hours_rule_fires_alone(self, thresholds):
        """25h mit 10 Schülern ist 'high', obwohl 10 < 30 Schüler."""
        assert classify_workload(25, 10, thresholds) == WorkloadTier.HIGH

    def test_students_rule_fires_alone(self, thresholds):
        assert classify_workload(1, 51, thresholds) == WorkloadTier.OVERLOADED

    @pytest.mark.parametrize("hours,students,expected", [
        (0, 0, WorkloadTier.LOW),
        (10, 15, WorkloadTier.LOW),          # Schwellen sind strikt (>)
        (10.5, 0, WorkloadTier.MEDIUM),
        (0, 16, WorkloadTier.MEDIUM),
        (20, 30, WorkloadTier.MEDIUM),
        (20.01, 0, WorkloadTier.HIGH),
        (30, 50, WorkloadTier.HIGH),
        (30.5, 0, WorkloadTier.OVERLOADED),
    ])
    def test_boundaries(self, thresholds, hours, students, expected):
        assert classify_workload(hours, students, thresholds) == expected

    @pytest.mark.parametrize("students", [0, 12, 20, 40, 60])
    def test_monotonic_in_hours(self, thresholds, students):
        hours = [0, 5, 10, 10.5, 15, 20, 20.5, 25, 30, 31, 80]
        ranks = [classify_workload(h, students, thresholds).rank for h in hours]
        assert ranks == sorted(ranks)

    @pytest.mark.parametrize("hours", [0, 8, 12, 22, 35])
    def test_monotonic_in_students(self, thresholds, hours):
        students = [0, 10, 15, 16, 25, 30, 31, 50, 51, 100]
        ranks = [classify_workload(hours, s, thresholds).rank for s in students]
        assert ranks == sorted(ranks)

    def test_monotonic_grid(self, thresholds):
        hours = [0, 10, 11, 20, 21, 30, 31]
        students = [0, 15, 16, 30, 31, 50, 51]
        for (h1, s), h2 in itertools.product(itertools.product(hours, students), hours):
            if h2 >= h1:
                assert (classify_workload(h2, s, thresholds).rank
                        >= classify_workload(h1, s, thresholds).rank)


# ─── BERECHNUNG ───────────────────────────────────────────────────────────────

class TestWorkloadCalculator:
    def test_unknown_tutor_raises(self, engine):
        with pytest.raises(NotFoundError):
            engine.compute_workload("tut_fehlt")

    def test_non_tutor_user_is_not_found(self, store, engine):
        store.create("users", tutor_record("adm_1", role="admin"))
        with pytest.raises(NotFoundError):
            engine.compute_workload("adm_1")

    def test_zero_load_is_low(self, store, engine):
        store.create("users", tutor_record("tut_1"))
        a = engine.compute_workload("tut_1")
        assert a.total_hours == 0
        assert a.student_count == 0
        assert a.workload == WorkloadTier.LOW
        assert a.session_ids == []
        assert a.class_ids == []

    def test_25_completed_hours_10_students_is_high(self, store, engine):
        store.create("users", tutor_record("tut_1"))
        # 10 Sitzungen à 150 min = 25h, je ein Schüler
        for i in range(10):
            store.create("sessions", session_record(
                f"ses_{i}", "tut_1", day_offset=i, start="09:00", minutes=150,
                status="completed", student_ids=[f"stu_{i}"],
            ))
        a = engine.compute_workload("tut_1")
        assert a.total_hours == 25
        assert a.student_count == 10
        assert a.workload == WorkloadTier.HIGH

    def test_only_completed_and_confirmed_count_hours(self, store, engine):
        store.create("users", tutor_record("tut_1"))
        for sid, status in [("s1", "completed"), ("s2", "confirmed"),
                            ("s3", "pending"), ("s4", "ongoing"), ("s5", "cancelled")]:
            store.create("sessions", session_record(sid, "tut_1", 0, "09:00", status=status))
        a = engine.compute_workload("tut_1")
        assert a.total_hours == 2
        # abgesagte Sitzungen zählen gar nicht, die übrigen zu den Schülern
        assert sorted(a.session_ids) == ["s1", "s2", "s3", "s4"]
        assert a.student_count == 4

    def test_students_are_deduplicated(self, store, engine):
        store.create("users", tutor_record("tut_1"))
        store.create("sessions", session_record("s1", "tut_1", 0, "09:00", student_ids=["a", "b"]))
        store.create("sessions", session_record("s2", "tut_1", 1, "09:00", student_ids=["b", "c"]))
        assert engine.compute_workload("tut_1").student_count == 3

    def test_class_hours_over_semester(self, store, engine):
        store.create("users", tutor_record("tut_1"))
        # 90 min × 16 Wochen = 24h
        store.create("classes", class_record(
            "c1", "tut_1", start="16:00", end="17:30", weeks=16,
        ))
        for e in enrollment_records("c1", 4):
            store.create("enrollments", e)
        a = engine.compute_workload("tut_1")
        assert a.total_hours == 24
        assert a.student_count == 4
        assert a.class_ids == ["c1"]
        assert a.workload == WorkloadTier.HIGH

    def test_inactive_classes_and_dropped_enrollments_ignored(self, store, engine):
        store.create("users", tutor_record("tut_1"))
        store.create("classes", class_record("c1", "tut_1", weeks=16, status="inactive"))
        store.create("classes", class_record("c2", "tut_1", weeks=2))
        for e in enrollment_records("c1", 5) + enrollment_records("c2", 3, status="dropped"):
            store.create("enrollments", e)
        a = engine.compute_workload("tut_1")
        assert a.class_ids == ["c2"]
        assert a.total_hours == 2
        assert a.student_count == 0

    def test_total_hours_rounded(self, store, engine):
        store.create("users", tutor_record("tut_1"))
        store.create("sessions", session_record("s1", "tut_1", 0, "09:00", minutes=20))
        assert engine.compute_workload("tut_1").total_hours == 0.33
