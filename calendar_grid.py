from __future__ import annotations
import calendar
from datetime import date, datetime, timedelta
from typing import Iterable, List, Literal, Tuple

from pydantic import BaseModel
from models import StudyEvent


HOUR_ROWS = range(8, 22)  # 8:00 through 21:00
MONTH_GRID_DAYS = 42
MONTH_CELL_LIMIT = 3

View = Literal["week", "month"]


def as_date(value: date | datetime | str) -> date:
    """Date part of a date, datetime or ISO "YYYY-MM-DD" string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def week_start_of(d: date | datetime) -> date:
    d = as_date(d)
    # weekday() is 0=Mon ... 6=Sun; weeks here start on Sunday
    return d - timedelta(days=(d.weekday() + 1) % 7)


def week_dates_of(d: date | datetime) -> List[date]:
    start = week_start_of(d)
    return [start + timedelta(days=i) for i in range(7)]


def month_grid_of(d: date | datetime) -> List[date]:
    """
    Six Sunday-start weeks covering the month of d, starting on the Sunday
    on or before the 1st. Leading and trailing days spill into the adjacent
    months; use is_same_month to tell them apart.
    """
    start = week_start_of(as_date(d).replace(day=1))
    return [start + timedelta(days=i) for i in range(MONTH_GRID_DAYS)]


def is_same_month(d: date | datetime, anchor: date | datetime) -> bool:
    d, anchor = as_date(d), as_date(anchor)
    return (d.year, d.month) == (anchor.year, anchor.month)


def events_on_date(d: date | datetime, events: Iterable[StudyEvent]) -> List[StudyEvent]:
    d = as_date(d)
    return [e for e in events if e.day == d]


def events_at_hour(
    d: date | datetime,
    hour: int,
    events: Iterable[StudyEvent],
) -> List[StudyEvent]:
    return [e for e in events_on_date(d, events) if e.start_hour == hour]


def week_hour_grid(
    d: date | datetime,
    events: Iterable[StudyEvent],
) -> List[Tuple[int, List[List[StudyEvent]]]]:
    """One row per hour in HOUR_ROWS, each holding the 7 day buckets of d's week."""
    days = week_dates_of(d)
    events = list(events)
    return [
        (hour, [events_at_hour(day, hour, events) for day in days])
        for hour in HOUR_ROWS
    ]


class MonthCell(BaseModel):
    day: date
    in_month: bool
    is_today: bool
    events: List[StudyEvent]
    hidden_count: int


def month_cells(
    d: date | datetime,
    events: Iterable[StudyEvent],
    today: date | None = None,
    limit: int = MONTH_CELL_LIMIT,
) -> List[MonthCell]:
    today = today or date.today()
    events = list(events)
    cells = []
    for day in month_grid_of(d):
        on_day = events_on_date(day, events)
        cells.append(MonthCell(
            day=day,
            in_month=is_same_month(day, d),
            is_today=day == today,
            events=on_day[:limit],
            hidden_count=max(0, len(on_day) - limit),
        ))
    return cells


def shift_anchor(d: date | datetime, view: View, step: int) -> date:
    """
    Move the calendar anchor by `step` weeks or months.
    Month moves keep the day of month, clamped to the target month's length.
    """
    d = as_date(d)
    if view == "week":
        return d + timedelta(days=7 * step)
    if view != "month":
        raise ValueError(f"Unknown calendar view: {view!r}")

    month_index = d.year * 12 + (d.month - 1) + step
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(d.day, last_day))
