"""Tests für Verfügbarkeits- und Konfliktprüfung."""

import pytest

from engine.errors import NotFoundError, ValidationFailedError, ValidationReason

from builders import (
    at, availability_record, class_record, session_record, tutor_record,
)


@pytest.fixture
def monday_tutor(store):
    """Tutor mit einem Montags-Fenster 08:00-17:00 (Szenario Verfügbarkeit)."""
    store.create("users", tutor_record("tut_1"))
    store.create("availability", availability_record(
        "tut_1", [("monday", "08:00", "17:00")],
    ))
    return "tut_1"


# ─── VERFÜGBARKEIT ────────────────────────────────────────────────────────────

class TestAvailability:
    def test_inside_slot_passes(self, engine, monday_tutor):
        engine.validate_proposed_window(monday_tutor, at(0, "09:00"), at(0, "10:00"))

    def test_exact_slot_passes(self, engine, monday_tutor):
        engine.validate_proposed_window(monday_tutor, at(0, "08:00"), at(0, "17:00"))

    def test_exceeding_slot_fails(self, engine, monday_tutor):
        with pytest.raises(ValidationFailedError) as exc:
            engine.validate_proposed_window(monday_tutor, at(0, "16:30"), at(0, "17:30"))
        assert exc.value.reason == ValidationReason.OUTSIDE_SLOT
        assert "08:00-17:00" in exc.value.message

    def test_other_weekday_fails(self, engine, monday_tutor):
        with pytest.raises(ValidationFailedError) as exc:
            engine.validate_proposed_window(monday_tutor, at(1, "09:00"), at(1, "10:00"))
        assert exc.value.reason == ValidationReason.NO_SLOT_FOR_WEEKDAY

    def test_no_availability_fails(self, store, engine):
        store.create("users", tutor_record("tut_2"))
        with pytest.raises(ValidationFailedError) as exc:
            engine.validate_proposed_window("tut_2", at(0, "09:00"), at(0, "10:00"))
        assert exc.value.reason == ValidationReason.NO_AVAILABILITY

    def test_only_first_slot_per_weekday_counts(self, store, engine):
        store.create("users", tutor_record("tut_3"))
        store.create("availability", availability_record(
            "tut_3", [("monday", "08:00", "10:00"), ("monday", "14:00", "18:00")],
        ))
        with pytest.raises(ValidationFailedError) as exc:
            engine.validate_proposed_window("tut_3", at(0, "15:00"), at(0, "16:00"))
        assert exc.value.reason == ValidationReason.OUTSIDE_SLOT

    def test_unknown_tutor_raises_not_found(self, engine):
        with pytest.raises(NotFoundError):
            engine.validate_proposed_window("tut_x", at(0, "09:00"), at(0, "10:00"))

    @pytest.mark.parametrize("start,end", [
        (at(0, "10:00"), at(0, "09:00")),
        (at(0, "10:00"), at(0, "10:00")),
        (at(0, "23:00"), at(1, "01:00")),
    ])
    def test_invalid_window(self, engine, monday_tutor, start, end):
        with pytest.raises(ValidationFailedError) as exc:
            engine.validate_proposed_window(monday_tutor, start, end)
        assert exc.value.reason == ValidationReason.INVALID_WINDOW


# ─── BUCHUNGSKONFLIKTE ────────────────────────────────────────────────────────

class TestBookingConflicts:
    @pytest.fixture
    def booked(self, store, monday_tutor):
        store.create("sessions", session_record("s1", monday_tutor, 0, "09:00"))
        return monday_tutor

    def test_gap_below_buffer_rejected(self, engine, booked):
        """09:00-10:00 gebucht, 10:15-11:00 hat nur 15 min Pause."""
        with pytest.raises(ValidationFailedError) as exc:
            engine.validate_proposed_window(booked, at(0, "10:15"), at(0, "11:00"))
        assert exc.value.reason == ValidationReason.SESSION_CONFLICT
        assert exc.value.conflicting_id == "s1"

    def test_gap_above_buffer_accepted(self, engine, booked):
        engine.validate_proposed_window(booked, at(0, "10:35"), at(0, "11:00"))

    def test_gap_equal_to_buffer_accepted(self, engine, booked):
        engine.validate_proposed_window(booked, at(0, "10:30"), at(0, "11:00"))

    def test_exclude_self(self, engine, booked):
        """Beim Verlegen zählt die verlegte Sitzung nicht als Konflikt."""
        engine.validate_proposed_window(booked, at(0, "09:30"), at(0, "10:30"),
                                        exclude_session_id="s1")

    def test_other_day_no_conflict(self, store, engine, booked):
        # gleiche Uhrzeit eine Woche später
        assert engine.find_booking_conflicts(booked, at(7, "09:00"), at(7, "10:00")) == []

    def test_cancelled_and_completed_ignored(self, store, engine, monday_tutor):
        store.create("sessions", session_record("s2", monday_tutor, 0, "12:00", status="cancelled"))
        store.create("sessions", session_record("s3", monday_tutor, 0, "13:00", status="completed"))
        assert engine.find_booking_conflicts(monday_tutor, at(0, "12:00"), at(0, "14:00")) == []

    def test_pending_counts(self, store, engine, monday_tutor):
        store.create("sessions", session_record("s4", monday_tutor, 0, "12:00", status="pending"))
        conflicts = engine.find_booking_conflicts(monday_tutor, at(0, "12:30"), at(0, "13:00"))
        assert [c.entity_id for c in conflicts] == ["s4"]

    def test_class_sessions_are_not_individual(self, store, engine, monday_tutor):
        store.create("sessions", session_record(
            "s5", monday_tutor, 0, "12:00", class_id="c1",
        ))
        assert engine.find_booking_conflicts(monday_tutor, at(0, "12:00"), at(0, "13:00")) == []

    def test_other_tutor_ignored(self, store, engine, monday_tutor):
        store.create("users", tutor_record("tut_9"))
        store.create("sessions", session_record("s6", "tut_9", 0, "12:00"))
        assert engine.find_booking_conflicts(monday_tutor, at(0, "12:00"), at(0, "13:00")) == []


class TestClassConflicts:
    def test_class_slot_conflict(self, store, engine, monday_tutor):
        store.create("classes", class_record("c1", monday_tutor, "monday", "14:00", "15:00"))
        with pytest.raises(ValidationFailedError) as exc:
            engine.validate_proposed_window(monday_tutor, at(0, "14:30"), at(0, "15:30"))
        assert exc.value.reason == ValidationReason.CLASS_CONFLICT
        assert exc.value.conflicting_id == "c1"

    def test_class_has_no_buffer(self, store, engine, monday_tutor):
        store.create("classes", class_record("c1", monday_tutor, "monday", "14:00", "15:00"))
        engine.validate_proposed_window(monday_tutor, at(0, "15:00"), at(0, "16:00"))

    def test_inactive_class_ignored(self, store, engine, monday_tutor):
        store.create("classes", class_record(
            "c1", monday_tutor, "monday", "14:00", "15:00", status="inactive",
        ))
        engine.validate_proposed_window(monday_tutor, at(0, "14:00"), at(0, "15:00"))

    def test_full_class_blocks(self, store, engine, monday_tutor):
        store.create("classes", class_record(
            "c1", monday_tutor, "monday", "14:00", "15:00", status="full",
        ))
        conflicts = engine.find_booking_conflicts(monday_tutor, at(0, "14:00"), at(0, "15:00"))
        assert [(c.kind, c.entity_id) for c in conflicts] == [("class", "c1")]

    def test_other_weekday_ignored(self, store, engine, monday_tutor):
        store.create("classes", class_record("c1", monday_tutor, "tuesday", "14:00", "15:00"))
        engine.validate_proposed_window(monday_tutor, at(0, "14:00"), at(0, "15:00"))


# ─── NACHTRÄGLICHER SCAN ──────────────────────────────────────────────────────

class TestSessionConflictScan:
    def test_overlapping_pair_reported_once(self, store, engine):
        store.create("users", tutor_record("tut_1"))
        store.create("sessions", session_record("b", "tut_1", 5, "10:30"))
        store.create("sessions", session_record("a", "tut_1", 5, "10:00"))
        conflicts = engine.conflicts.scan_session_conflicts()
        assert len(conflicts) == 1
        c = conflicts[0]
        assert (c.first_session_id, c.second_session_id) == ("a", "b")
        assert c.first_window == "10:00-11:00"
        assert c.key == ("a", "b")

    def test_all_pairs_reported(self, store, engine):
        store.create("users", tutor_record("tut_1"))
        for sid in ("s1", "s2", "s3"):
            store.create("sessions", session_record(sid, "tut_1", 0, "10:00"))
        keys = sorted(c.key for c in engine.conflicts.scan_session_conflicts())
        assert keys == [("s1", "s2"), ("s1", "s3"), ("s2", "s3")]

    def test_adjacent_sessions_no_conflict(self, store, engine):
        """Der Scan arbeitet ohne Puffer."""
        store.create("users", tutor_record("tut_1"))
        store.create("sessions", session_record("s1", "tut_1", 0, "10:00"))
        store.create("sessions", session_record("s2", "tut_1", 0, "11:00"))
        assert engine.conflicts.scan_session_conflicts() == []

    def test_status_filter(self, store, engine):
        store.create("users", tutor_record("tut_1"))
        store.create("sessions", session_record("s1", "tut_1", 0, "10:00", status="ongoing"))
        store.create("sessions", session_record("s2", "tut_1", 0, "10:00", status="completed"))
        store.create("sessions", session_record("s3", "tut_1", 0, "10:00", status="cancelled"))
        assert engine.conflicts.scan_session_conflicts() == []

    def test_different_tutors_no_conflict(self, store, engine):
        store.create("sessions", session_record("s1", "tut_1", 0, "10:00"))
        store.create("sessions", session_record("s2", "tut_2", 0, "10:00"))
        assert engine.conflicts.scan_session_conflicts() == []

    def test_session_past_midnight_skipped_and_counted(self, store, engine):
        """Sitzungen über Mitternacht sind fehlerhaft und verdecken keine Konflikte."""
        store.create("users", tutor_record("tut_1"))
        store.create("sessions", session_record("s1", "tut_1", 0, "22:00", minutes=150))
        store.create("sessions", session_record("s2", "tut_1", 0, "23:00", minutes=30))
        store.create("sessions", session_record("s3", "tut_1", 0, "23:15", minutes=30))
        keys = [c.key for c in engine.conflicts.scan_session_conflicts()]
        assert keys == [("s2", "s3")]
        assert engine.repo.skipped_records == 1
