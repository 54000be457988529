from __future__ import annotations
import json
from datetime import date
from typing import List, Sequence, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel


# Display order matters: the first color is the form default.
SUBJECT_COLORS = [
    "#EF4444", "#F97316", "#EAB308", "#22C55E",
    "#06B6D4", "#3B82F6", "#8B5CF6", "#EC4899",
]

HEX_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"
TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class ParseError(ValueError):
    """Persisted state could not be turned back into typed records."""


class _Record(BaseModel):
    # Stored JSON uses camelCase keys (weeklyHours, subjectId, ...)
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Subject(_Record):
    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    color: str = Field(pattern=HEX_COLOR_PATTERN)
    weekly_hours: int = Field(ge=1, le=40)
    total_hours: float
    # Not bounded below: completing a negative-duration event lowers it.
    studied_hours: float


class StudyEvent(_Record):
    id: str = Field(min_length=1)
    subject_id: str
    title: str = Field(min_length=1)
    day: date = Field(alias="date")
    start_time: str = Field(pattern=TIME_PATTERN)
    end_time: str = Field(pattern=TIME_PATTERN)
    duration: float
    completed: bool

    @property
    def start_hour(self) -> int:
        return int(self.start_time.split(":", 1)[0])


R = TypeVar("R", bound=_Record)


def dump_records(records: Sequence[_Record]) -> str:
    payload = [r.model_dump(mode="json", by_alias=True) for r in records]
    return json.dumps(payload, ensure_ascii=False, indent=2)


def parse_records(blob: str, model: Type[R], key: str = "") -> List[R]:
    """
    Decode a stored JSON array into typed records.
    Raises ParseError for invalid JSON, a non-array payload, or any record
    with a missing or malformed field.
    """
    where = f" in {key!r}" if key else ""
    try:
        raw = json.loads(blob)
    except json.JSONDecodeError as exc:
        raise ParseError(f"Invalid JSON{where}: {exc}") from exc

    if not isinstance(raw, list):
        raise ParseError(f"Expected a JSON array{where}, got {type(raw).__name__}.")

    # Strict JSON validation: "5" is not an int, "yes" is not a bool.
    # ISO date strings are still accepted for date fields.
    try:
        return TypeAdapter(List[model]).validate_json(blob, strict=True)
    except ValidationError as exc:
        raise ParseError(f"Malformed {model.__name__} record{where}: {exc}") from exc
