"""Unit tests for record parsing and the file storage backend."""

import json
import pytest
from datetime import date

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from models import ParseError, StudyEvent, Subject, dump_records, parse_records
from storage import SUBJECTS_KEY, JsonFileStorage, MemoryStorage


SUBJECT_JSON = {
    "id": "1705312800000",
    "name": "Math",
    "color": "#3B82F6",
    "weeklyHours": 5,
    "totalHours": 0,
    "studiedHours": 1.5,
}

EVENT_JSON = {
    "id": "1705312900000",
    "subjectId": "1705312800000",
    "title": "Review",
    "date": "2024-01-15",
    "startTime": "10:00",
    "endTime": "11:30",
    "duration": 1.5,
    "completed": True,
}


class TestParseRecords:
    def test_subject_from_camel_case(self):
        [subject] = parse_records(json.dumps([SUBJECT_JSON]), Subject)
        assert subject.weekly_hours == 5
        assert subject.studied_hours == 1.5

    def test_event_from_camel_case(self):
        [event] = parse_records(json.dumps([EVENT_JSON]), StudyEvent)
        assert event.day == date(2024, 1, 15)
        assert event.start_hour == 10
        assert event.completed is True

    def test_dump_uses_stored_keys(self):
        [event] = parse_records(json.dumps([EVENT_JSON]), StudyEvent)
        assert json.loads(dump_records([event])) == [EVENT_JSON]

    def test_extra_keys_ignored(self):
        raw = dict(SUBJECT_JSON, legacy="x")
        assert parse_records(json.dumps([raw]), Subject)[0].name == "Math"

    def test_integer_hours_accepted_for_float_fields(self):
        [event] = parse_records(json.dumps([dict(EVENT_JSON, duration=2)]), StudyEvent)
        assert event.duration == 2.0

    def test_empty_array(self):
        assert parse_records("[]", Subject) == []

    @pytest.mark.parametrize(
        "blob",
        [
            "not json",
            json.dumps({"id": "1"}),
            json.dumps([{k: v for k, v in SUBJECT_JSON.items() if k != "weeklyHours"}]),
            json.dumps([dict(SUBJECT_JSON, weeklyHours="many")]),
            json.dumps([dict(SUBJECT_JSON, color="blue")]),
            json.dumps([dict(SUBJECT_JSON, name="")]),
            json.dumps([dict(SUBJECT_JSON, weeklyHours="5")]),
            json.dumps([dict(SUBJECT_JSON, studiedHours="1.5")]),
            json.dumps([dict(SUBJECT_JSON, weeklyHours=5.0)]),
            json.dumps([dict(SUBJECT_JSON, id=17)]),
        ],
    )
    def test_malformed_subjects(self, blob):
        with pytest.raises(ParseError):
            parse_records(blob, Subject, SUBJECTS_KEY)

    @pytest.mark.parametrize(
        "override",
        [
            {"date": "15/01/2024"},
            {"startTime": "10am"},
            {"endTime": None},
            {"duration": "long"},
            {"duration": "1"},
            {"completed": "yes"},
            {"completed": 1},
            {"subjectId": 42},
        ],
    )
    def test_malformed_events(self, override):
        blob = json.dumps([dict(EVENT_JSON, **override)])
        with pytest.raises(ParseError):
            parse_records(blob, StudyEvent)

    def test_parse_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_records("{", Subject)


class TestJsonFileStorage:
    def test_missing_key_is_none(self, tmp_path):
        assert JsonFileStorage(tmp_path).get(SUBJECTS_KEY) is None

    def test_set_then_get(self, tmp_path):
        storage = JsonFileStorage(tmp_path)
        storage.set(SUBJECTS_KEY, "[]")
        assert storage.get(SUBJECTS_KEY) == "[]"
        assert (tmp_path / f"{SUBJECTS_KEY}.json").exists()
        assert not (tmp_path / f"{SUBJECTS_KEY}.json.tmp").exists()

    def test_overwrite(self, tmp_path):
        storage = JsonFileStorage(tmp_path)
        storage.set("k", "[1]")
        storage.set("k", "[2]")
        assert storage.get("k") == "[2]"

    def test_key_sanitized(self, tmp_path):
        storage = JsonFileStorage(tmp_path)
        assert storage.path_for("../evil key").parent == tmp_path

    def test_blank_key_rejected(self, tmp_path):
        with pytest.raises(ValueError):
            JsonFileStorage(tmp_path).path_for("  ")

    def test_creates_data_dir(self, tmp_path):
        target = tmp_path / "nested" / "dir"
        JsonFileStorage(target)
        assert target.is_dir()


class TestMemoryStorage:
    def test_initial_copy(self):
        initial = {"a": "[]"}
        storage = MemoryStorage(initial)
        storage.set("b", "[]")
        assert "b" not in initial
        assert sorted(storage.keys()) == ["a", "b"]
