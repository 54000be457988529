from __future__ import annotations
import logging
import re
from pathlib import Path
from typing import Dict, Optional, Protocol


logger = logging.getLogger(__name__)

SUBJECTS_KEY = "studySchedule_subjects"
EVENTS_KEY = "studySchedule_events"


class KeyValueStorage(Protocol):
    """
    Minimal contract the store persists through: one JSON text blob per key.
    """

    def get(self, key: str) -> Optional[str]: ...
    def set(self, key: str, blob: str) -> None: ...


class MemoryStorage:
    """Dict-backed storage for tests and throwaway sessions."""

    def __init__(self, initial: Dict[str, str] | None = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, blob: str) -> None:
        self._data[key] = blob

    def keys(self) -> list[str]:
        return list(self._data)


def _sanitize_key(key: str) -> str:
    safe = re.sub(r"[^A-Za-z0-9_-]+", "_", key.strip())
    safe = safe.strip("_")
    if not safe:
        raise ValueError("Storage key cannot be empty.")
    return safe[:80]


class JsonFileStorage:
    """
    Stores each key as <data_dir>/<key>.json.
    Missing files read as None; writes go through a temp file and replace the
    target so a crash never leaves a half-written blob behind.
    """

    def __init__(self, data_dir: Path | str) -> None:
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, key: str) -> Path:
        return self.data_dir / f"{_sanitize_key(key)}.json"

    def get(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, blob: str) -> None:
        path = self.path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        temp = path.with_suffix(path.suffix + ".tmp")
        temp.write_text(blob, encoding="utf-8")
        temp.replace(path)
        logger.debug("Wrote %d bytes to %s", len(blob), path)
