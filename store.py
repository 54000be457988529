from __future__ import annotations
import logging
from datetime import date, datetime, time
from typing import List, Optional, Sequence, Tuple
from uuid import uuid4

from calendar_grid import as_date
from models import StudyEvent, Subject, dump_records, parse_records
from storage import EVENTS_KEY, SUBJECTS_KEY, KeyValueStorage


logger = logging.getLogger(__name__)


def duration_hours(day: date, start_time: str, end_time: str) -> float:
    """
    Wall-clock hours from start_time to end_time on the same day.
    Zero or negative when the end is not after the start.
    """
    start = datetime.combine(day, time.fromisoformat(start_time))
    end = datetime.combine(day, time.fromisoformat(end_time))
    return (end - start).total_seconds() / 3600


class StudyStore:
    """
    Owns the subject and study event collections.

    The mutation methods are the only write path. Each one builds the new
    collections, writes them to storage and only then swaps them in, so memory
    never gets ahead of what was persisted.
    """

    def __init__(self, storage: KeyValueStorage) -> None:
        self._storage = storage
        self._subjects: List[Subject] = []
        self._events: List[StudyEvent] = []

    @classmethod
    def open(cls, storage: KeyValueStorage) -> "StudyStore":
        store = cls(storage)
        store.load()
        return store

    def load(self) -> None:
        subjects_blob = self._storage.get(SUBJECTS_KEY)
        events_blob = self._storage.get(EVENTS_KEY)
        subjects = (
            parse_records(subjects_blob, Subject, SUBJECTS_KEY)
            if subjects_blob is not None else []
        )
        events = (
            parse_records(events_blob, StudyEvent, EVENTS_KEY)
            if events_blob is not None else []
        )
        self._subjects = subjects
        self._events = events
        logger.info("Loaded %d subjects and %d events", len(subjects), len(events))

    @property
    def subjects(self) -> Tuple[Subject, ...]:
        return tuple(s.model_copy() for s in self._subjects)

    @property
    def events(self) -> Tuple[StudyEvent, ...]:
        return tuple(e.model_copy() for e in self._events)

    def get_subject(self, subject_id: str) -> Optional[Subject]:
        for s in self._subjects:
            if s.id == subject_id:
                return s.model_copy()
        return None

    def get_event(self, event_id: str) -> Optional[StudyEvent]:
        for e in self._events:
            if e.id == event_id:
                return e.model_copy()
        return None

    def add_subject(self, name: str, weekly_hours: int, color: str) -> Subject:
        subject = Subject(
            id=self._new_id({s.id for s in self._subjects}),
            name=name,
            color=color,
            weekly_hours=weekly_hours,
            total_hours=0,
            studied_hours=0.0,
        )
        self._commit(subjects=self._subjects + [subject])
        logger.info("Added subject %s (%s, %dh/week)", subject.id, name, weekly_hours)
        return subject.model_copy()

    def add_study_event(
        self,
        subject_id: str,
        title: str,
        day: date | str,
        start_time: str,
        end_time: str,
    ) -> StudyEvent:
        day = as_date(day)
        event = StudyEvent(
            id=self._new_id({e.id for e in self._events}),
            subject_id=subject_id,
            title=title,
            day=day,
            start_time=start_time,
            end_time=end_time,
            duration=duration_hours(day, start_time, end_time),
            completed=False,
        )
        if event.duration <= 0:
            logger.warning(
                "Event %s has non-positive duration %.2fh (%s-%s)",
                event.id, event.duration, start_time, end_time,
            )
        self._commit(events=self._events + [event])
        logger.info("Added event %s for subject %s on %s", event.id, subject_id, day)
        return event.model_copy()

    def complete_event(self, event_id: str) -> bool:
        """
        Mark an event completed and credit its duration to its subject.
        Returns False without touching anything when the event is unknown or
        already completed. A missing subject only skips the credit.
        """
        target = next((e for e in self._events if e.id == event_id), None)
        if target is None or target.completed:
            logger.debug("complete_event(%s) is a no-op", event_id)
            return False

        events = [
            e.model_copy(update={"completed": True}) if e.id == event_id else e
            for e in self._events
        ]

        credited = False
        subjects: List[Subject] = []
        for s in self._subjects:
            if s.id == target.subject_id:
                s = s.model_copy(update={"studied_hours": s.studied_hours + target.duration})
                credited = True
            subjects.append(s)

        if credited:
            self._commit(subjects=subjects, events=events)
        else:
            logger.info("Event %s references missing subject %s", event_id, target.subject_id)
            self._commit(events=events)
        logger.info("Completed event %s (%.2fh)", event_id, target.duration)
        return True

    @staticmethod
    def _new_id(taken: set[str]) -> str:
        new_id = str(uuid4())
        while new_id in taken:
            new_id = str(uuid4())
        return new_id

    def _commit(
        self,
        subjects: Sequence[Subject] | None = None,
        events: Sequence[StudyEvent] | None = None,
    ) -> None:
        # Serialize everything before the first write so an encoding error
        # leaves storage untouched.
        writes = []
        if subjects is not None:
            writes.append((SUBJECTS_KEY, dump_records(subjects)))
        if events is not None:
            writes.append((EVENTS_KEY, dump_records(events)))

        for key, blob in writes:
            self._storage.set(key, blob)

        if subjects is not None:
            self._subjects = list(subjects)
        if events is not None:
            self._events = list(events)
