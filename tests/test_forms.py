"""Unit tests for the add-subject and add-event form gates."""

import pytest
from datetime import date, datetime, time

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from forms import FormValidationError, validate_event_form, validate_subject_form
from models import SUBJECT_COLORS


class TestSubjectForm:
    def test_valid(self):
        form = validate_subject_form("  Math  ", "5", "#3B82F6")
        assert form.name == "Math"
        assert form.weekly_hours == 5
        assert form.color == "#3B82F6"

    def test_color_defaults_to_first_palette_entry(self):
        assert validate_subject_form("Math", 5).color == SUBJECT_COLORS[0]

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_blank_name(self, name):
        with pytest.raises(FormValidationError) as exc:
            validate_subject_form(name, 5)
        assert exc.value.field == "name"

    @pytest.mark.parametrize("hours", ["", "abc", "2.5", 0, -3, 41, "100", True, 1.5])
    def test_bad_weekly_hours(self, hours):
        with pytest.raises(FormValidationError) as exc:
            validate_subject_form("Math", hours)
        assert exc.value.field == "weekly_hours"

    @pytest.mark.parametrize("hours", [1, "40", 12.0, " 7 "])
    def test_weekly_hours_accepted(self, hours):
        assert 1 <= validate_subject_form("Math", hours).weekly_hours <= 40

    def test_color_outside_palette(self):
        with pytest.raises(FormValidationError) as exc:
            validate_subject_form("Math", 5, "#000000")
        assert exc.value.field == "color"


class TestEventForm:
    def test_valid_strings(self):
        form = validate_event_form("s1", " Review ", "2024-01-15", "10:00", "11:30")
        assert form.title == "Review"
        assert form.day == date(2024, 1, 15)
        assert form.start_time == "10:00"
        assert form.end_time == "11:30"

    def test_widget_values(self):
        form = validate_event_form(
            "s1", "Review", datetime(2024, 1, 15, 8), time(9, 5), time(10, 0)
        )
        assert form.day == date(2024, 1, 15)
        assert form.start_time == "09:05"

    def test_whole_minute_time_values(self):
        form = validate_event_form("s1", "Review", "2024-01-15", time(10, 0, 0), time(11, 30))
        assert (form.start_time, form.end_time) == ("10:00", "11:30")

    @pytest.mark.parametrize("value", [time(10, 0, 30), time(10, 0, 0, 500)])
    def test_time_with_seconds_rejected(self, value):
        with pytest.raises(FormValidationError) as exc:
            validate_event_form("s1", "Review", "2024-01-15", value, "11:00")
        assert exc.value.field == "start_time"

    def test_end_before_start_allowed(self):
        form = validate_event_form("s1", "Late", date(2024, 1, 15), "10:00", "09:00")
        assert form.end_time == "09:00"

    @pytest.mark.parametrize(
        "args, field",
        [
            ((None, "T", "2024-01-15", "10:00", "11:00"), "subject_id"),
            (("", "T", "2024-01-15", "10:00", "11:00"), "subject_id"),
            (("s1", "  ", "2024-01-15", "10:00", "11:00"), "title"),
            (("s1", "T", "", "10:00", "11:00"), "date"),
            (("s1", "T", "15/01/2024", "10:00", "11:00"), "date"),
            (("s1", "T", "2024-01-15", None, "11:00"), "start_time"),
            (("s1", "T", "2024-01-15", "10:00", ""), "end_time"),
            (("s1", "T", "2024-01-15", "25:00", "11:00"), "start_time"),
        ],
    )
    def test_missing_or_bad_fields(self, args, field):
        with pytest.raises(FormValidationError) as exc:
            validate_event_form(*args)
        assert exc.value.field == field
