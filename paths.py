from __future__ import annotations
import logging
import os
import sys
from pathlib import Path


APP_NAME = "StudyPlanner"
LOG_FILENAME = "study_planner.log"


def get_data_dir() -> Path:
    """
    Resolve the directory holding the study schedule data.
    STUDY_PLANNER_DATA_DIR wins when set, otherwise a per-OS user data
    location is used. The directory is created if missing.
    """
    override = os.environ.get("STUDY_PLANNER_DATA_DIR")
    if override:
        base = Path(override).expanduser()
    else:
        home = Path.home()
        platform = sys.platform
        if platform == "darwin":
            base = home / "Library" / "Application Support" / APP_NAME
        elif platform.startswith("win"):
            roaming = os.environ.get("APPDATA")
            base = Path(roaming) / APP_NAME if roaming else home / "AppData" / "Roaming" / APP_NAME
        else:
            base = home / ".local" / "share" / "study-planner"

    base.mkdir(parents=True, exist_ok=True)
    return base


def get_log_level() -> int:
    name = os.environ.get("STUDY_PLANNER_LOG_LEVEL", "INFO").strip().upper()
    level = logging.getLevelName(name)
    # getLevelName returns "Level X" for unknown names
    return level if isinstance(level, int) else logging.INFO


def get_log_path() -> Path:
    return get_data_dir() / LOG_FILENAME


def log_handlers() -> list[logging.Handler]:
    # delay=True: the log file is only opened on the first record
    return [
        logging.StreamHandler(),
        logging.FileHandler(get_log_path(), encoding="utf-8", delay=True),
    ]


def setup_logging() -> None:
    # Streamlit re-executes the script on every interaction; configure once.
    if logging.getLogger().handlers:
        return
    logging.basicConfig(
        level=get_log_level(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=log_handlers(),
    )
