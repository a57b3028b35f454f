"""Tests für den Demo-Daten-Generator."""

from datetime import date, datetime

import pytest

from config.defaults import default_engine_config
from data.fake_data import DemoDataGenerator
from engine.errors import ValidationFailedError, ValidationReason
from engine.service import SchedulingEngine
from models.allocation import WorkloadTier
from models.inefficiency import InefficiencyType, Severity
from store.memory import InMemoryRecordStore

WEEK = date(2025, 3, 5)   # Mittwoch, Referenzwoche beginnt am 03.03.


@pytest.fixture(scope="module")
def demo_engine():
    gen = DemoDataGenerator(seed=42, week_start=WEEK)
    store = InMemoryRecordStore()
    gen.generate().load_into(store)
    return SchedulingEngine(store, default_engine_config())


@pytest.fixture(scope="module")
def demo_report(demo_engine):
    return demo_engine.find_inefficiencies()


def _of_type(report, type_):
    return report.filter(kind=type_).findings


class TestGenerator:
    def test_week_starts_monday(self):
        gen = DemoDataGenerator(seed=1, week_start=WEEK)
        assert gen.week_start == date(2025, 3, 3)

    def test_reproducible(self):
        a = DemoDataGenerator(seed=7, week_start=WEEK).generate()
        b = DemoDataGenerator(seed=7, week_start=WEEK).generate()
        assert a.model_dump() == b.model_dump()

    def test_counts(self):
        data = DemoDataGenerator(seed=3, week_start=WEEK).generate()
        assert len(data.tutors) == 8
        assert len(data.availability) == 7
        assert len(data.classes) == 5
        assert "Tutoren: 8" in data.summary()

    def test_unique_ids(self):
        data = DemoDataGenerator(seed=5, week_start=WEEK).generate()
        for items in (data.tutors, data.sessions, data.classes, data.enrollments):
            ids = [x.id for x in items]
            assert len(ids) == len(set(ids))

    def test_print_summary_runs(self):
        gen = DemoDataGenerator(seed=1, week_start=WEEK)
        gen.print_summary(gen.generate())


class TestDeliberateProblems:
    def test_overloaded_tutor(self, demo_engine, demo_report):
        assert demo_engine.compute_workload("tut_01").workload == WorkloadTier.OVERLOADED
        overloaded = _of_type(demo_report, InefficiencyType.OVERLOADED_TUTOR)
        assert ("tut_01", Severity.HIGH) in [(f.tutor_id, f.severity) for f in overloaded]

    def test_high_tutor(self, demo_engine):
        assert demo_engine.compute_workload("tut_02").workload == WorkloadTier.HIGH

    def test_idle_tutors(self, demo_report):
        under = {f.tutor_id for f in _of_type(demo_report, InefficiencyType.UNDERUTILIZED_TUTOR)}
        assert {"tut_07", "tut_08"} <= under

    def test_double_booking(self, demo_report):
        conflicts = _of_type(demo_report, InefficiencyType.RESOURCE_CONFLICT)
        assert [f.tutor_id for f in conflicts] == ["tut_03"]

    def test_unbalanced_classes(self, demo_report):
        groups = {f.class_ids[0]: f.severity
                  for f in _of_type(demo_report, InefficiencyType.UNBALANCED_GROUP)}
        assert groups == {"cls_c04": Severity.HIGH, "cls_c05": Severity.HIGH}

    def test_no_skipped_records(self, demo_report):
        assert demo_report.skipped_records == 0

    def test_tutor_without_availability(self, demo_engine):
        with pytest.raises(ValidationFailedError) as exc:
            demo_engine.validate_proposed_window(
                "tut_08", datetime(2025, 3, 3, 10, 0), datetime(2025, 3, 3, 11, 0),
            )
        assert exc.value.reason == ValidationReason.NO_AVAILABILITY

    def test_overview(self, demo_engine):
        overview = demo_engine.resource_overview()
        assert overview.total_tutors == 8
        assert overview.workload_distribution["overloaded"] >= 1
        assert sum(overview.workload_distribution.values()) == 8
