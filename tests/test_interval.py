"""Tests für die Intervall-Arithmetik."""

import itertools
from datetime import date, datetime

import pytest

from engine.errors import InvalidFormatError
from engine.interval import (
    clock_of, contains, format_clock, overlaps, parse_clock, same_day,
    weekday_of, weeks_between,
)
from models.weekday import Weekday

# Kleines Raster aus Intervallen (Minuten seit Mitternacht)
_INTERVALS = [(540, 600), (600, 660), (570, 630), (480, 1020), (615, 660), (0, 30)]
_PAIRS = list(itertools.product(_INTERVALS, repeat=2))


# ─── UHRZEITEN ────────────────────────────────────────────────────────────────

class TestParseClock:
    @pytest.mark.parametrize("text,expected", [
        ("00:00", 0), ("09:30", 570), ("9:05", 545), ("23:59", 1439),
    ])
    def test_valid(self, text, expected):
        assert parse_clock(text) == expected

    @pytest.mark.parametrize("text", ["24:00", "12:60", "930", "ab:cd", "", "9:5"])
    def test_invalid_raises(self, text):
        with pytest.raises(InvalidFormatError):
            parse_clock(text)

    def test_non_string_raises(self):
        with pytest.raises(InvalidFormatError):
            parse_clock(930)

    def test_invalid_format_is_value_error(self):
        """Damit Pydantic-Validatoren den Fehler als ValidationError melden."""
        with pytest.raises(ValueError):
            parse_clock("25:00")

    def test_format_clock_inverse(self):
        for text in ("00:00", "08:05", "17:30", "23:59"):
            assert format_clock(parse_clock(text)) == text


class TestDateHelpers:
    def test_clock_of_ignores_seconds(self):
        assert clock_of(datetime(2025, 3, 3, 10, 15, 59)) == 615

    def test_weekday_of(self):
        assert weekday_of(datetime(2025, 3, 3, 9, 0)) == Weekday.MONDAY
        assert weekday_of(datetime(2025, 3, 9, 9, 0)) == Weekday.SUNDAY

    def test_same_day(self):
        assert same_day(datetime(2025, 3, 3, 8, 0), datetime(2025, 3, 3, 23, 0))
        assert not same_day(datetime(2025, 3, 3, 8, 0), datetime(2025, 3, 4, 8, 0))

    @pytest.mark.parametrize("start,end,expected", [
        (date(2025, 3, 3), date(2025, 3, 3), 0),
        (date(2025, 3, 3), date(2025, 3, 1), 0),
        (date(2025, 3, 3), date(2025, 3, 10), 1),
        (date(2025, 3, 3), date(2025, 3, 11), 2),
        (date(2025, 3, 3), date(2025, 6, 23), 16),
    ])
    def test_weeks_between(self, start, end, expected):
        assert weeks_between(start, end) == expected


# ─── ÜBERSCHNEIDUNG ───────────────────────────────────────────────────────────

class TestOverlaps:
    @pytest.mark.parametrize("a,b", _PAIRS)
    def test_symmetric(self, a, b):
        assert overlaps(*a, *b) == overlaps(*b, *a)

    @pytest.mark.parametrize("a,b", _PAIRS)
    def test_symmetric_with_buffer(self, a, b):
        assert overlaps(*a, *b, buffer_minutes=30) == overlaps(*b, *a, buffer_minutes=30)

    @pytest.mark.parametrize("a,b", _PAIRS)
    def test_buffer_monotonic(self, a, b):
        buffers = [0, 5, 15, 30, 60, 240]
        results = [overlaps(*a, *b, buffer_minutes=buf) for buf in buffers]
        # einmal True, immer True
        first_true = results.index(True) if True in results else len(results)
        assert all(results[first_true:])

    def test_adjacent_do_not_overlap(self):
        """Halboffene Intervalle: 09:00-10:00 und 10:00-11:00 berühren sich nur."""
        assert not overlaps(540, 600, 600, 660)

    def test_adjacent_overlap_with_buffer(self):
        assert overlaps(540, 600, 600, 660, buffer_minutes=1)

    def test_gap_shorter_than_buffer(self):
        # 09:00-10:00 und 10:15-11:00: 15 min Lücke < 30 min Puffer
        assert overlaps(615, 660, 540, 600, buffer_minutes=30)
        # 10:35: 35 min Lücke
        assert not overlaps(635, 660, 540, 600, buffer_minutes=30)

    def test_contained_interval_overlaps(self):
        assert overlaps(480, 1020, 600, 660)


class TestContains:
    def test_inside(self):
        assert contains(480, 1020, 540, 600)

    def test_exact_bounds(self):
        assert contains(480, 1020, 480, 1020)

    def test_exceeds_end(self):
        assert not contains(480, 1020, 990, 1050)

    def test_starts_before(self):
        assert not contains(480, 1020, 450, 500)
