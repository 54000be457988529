"""
Input gates for the add-subject and add-event forms.

The UI hands over whatever the widgets produced (text, numbers, dates,
times). Each validator either returns a cleaned, typed form ready for the
store or raises FormValidationError naming the offending field.
"""
from __future__ import annotations
from datetime import date, datetime, time
from typing import Optional

from pydantic import BaseModel
from calendar_grid import as_date
from models import SUBJECT_COLORS


MIN_WEEKLY_HOURS = 1
MAX_WEEKLY_HOURS = 40


class FormValidationError(ValueError):
    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field


class SubjectForm(BaseModel):
    name: str
    weekly_hours: int
    color: str


class EventForm(BaseModel):
    subject_id: str
    title: str
    day: date
    start_time: str
    end_time: str


def _parse_weekly_hours(value: object) -> int:
    if isinstance(value, bool):
        raise FormValidationError("weekly_hours", "Weekly hours must be a whole number.")
    if isinstance(value, int):
        hours = value
    elif isinstance(value, float):
        if not value.is_integer():
            raise FormValidationError("weekly_hours", "Weekly hours must be a whole number.")
        hours = int(value)
    else:
        text = str(value or "").strip()
        if not text:
            raise FormValidationError("weekly_hours", "Weekly hours are required.")
        try:
            hours = int(text)
        except ValueError as exc:
            raise FormValidationError("weekly_hours", "Weekly hours must be a whole number.") from exc

    if not MIN_WEEKLY_HOURS <= hours <= MAX_WEEKLY_HOURS:
        raise FormValidationError(
            "weekly_hours",
            f"Weekly hours must be between {MIN_WEEKLY_HOURS} and {MAX_WEEKLY_HOURS}.",
        )
    return hours


def validate_subject_form(
    name: Optional[str],
    weekly_hours: object,
    color: Optional[str] = None,
) -> SubjectForm:
    clean_name = (name or "").strip()
    if not clean_name:
        raise FormValidationError("name", "Name is required.")

    hours = _parse_weekly_hours(weekly_hours)

    chosen = color or SUBJECT_COLORS[0]
    if chosen not in SUBJECT_COLORS:
        raise FormValidationError("color", f"Unknown color {chosen}.")

    return SubjectForm(name=clean_name, weekly_hours=hours, color=chosen)


def _parse_day(value: object) -> date:
    if not isinstance(value, date):
        value = str(value or "").strip()
        if not value:
            raise FormValidationError("date", "Date is required.")
    try:
        return as_date(value)
    except ValueError as exc:
        raise FormValidationError("date", "Date must be YYYY-MM-DD.") from exc


def _parse_time(value: object, field: str) -> str:
    # Stored times have minute precision; seconds are rejected, not truncated.
    if isinstance(value, time):
        if value.second or value.microsecond:
            raise FormValidationError(field, "Time must be HH:MM without seconds.")
        return value.strftime("%H:%M")
    text = str(value or "").strip()
    if not text:
        raise FormValidationError(field, "Time is required.")
    try:
        return datetime.strptime(text, "%H:%M").strftime("%H:%M")
    except ValueError as exc:
        raise FormValidationError(field, "Time must be HH:MM.") from exc


def validate_event_form(
    subject_id: Optional[str],
    title: Optional[str],
    day: object,
    start_time: object,
    end_time: object,
) -> EventForm:
    # End before start and overlapping sessions are allowed through.
    if not subject_id:
        raise FormValidationError("subject_id", "Pick a subject.")
    clean_title = (title or "").strip()
    if not clean_title:
        raise FormValidationError("title", "Title is required.")

    return EventForm(
        subject_id=subject_id,
        title=clean_title,
        day=_parse_day(day),
        start_time=_parse_time(start_time, "start_time"),
        end_time=_parse_time(end_time, "end_time"),
    )
