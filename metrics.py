from __future__ import annotations
from datetime import date
from typing import Iterable

from pydantic import BaseModel
from models import StudyEvent, Subject


class StudyMetrics(BaseModel):
    total_planned_hours: int = 0
    total_studied_hours: float = 0.0
    completion_rate: float = 0.0  # percent, may exceed 100
    today_hours: float = 0.0


def compute_metrics(
    subjects: Iterable[Subject],
    events: Iterable[StudyEvent],
    today: date | None = None,
) -> StudyMetrics:
    today = today or date.today()
    subjects = list(subjects)

    planned = sum(s.weekly_hours for s in subjects)
    studied = sum(s.studied_hours for s in subjects)
    rate = (studied / planned) * 100 if planned > 0 else 0.0
    today_hours = sum(e.duration for e in events if e.day == today and e.completed)

    return StudyMetrics(
        total_planned_hours=planned,
        total_studied_hours=studied,
        completion_rate=rate,
        today_hours=today_hours,
    )


def subject_progress(subject: Subject) -> float:
    if subject.weekly_hours <= 0:
        return 0.0
    return subject.studied_hours / subject.weekly_hours * 100
