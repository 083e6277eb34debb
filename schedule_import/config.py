"""
Configuration constants for schedule import.
Values can be overridden with environment variables; the desktop form also keeps
its last inputs in a small JSON file in the user's home directory.
"""

import json
import os
from pathlib import Path

# Fragments whose y positions differ by no more than this many points share a row
ROW_Y_TOLERANCE = float(os.getenv("SCHEDULE_ROW_TOLERANCE", "5.0"))

# Separator placed between same-row fragments of a reconstructed page
COLUMN_SEPARATOR = "\t"

# Calendar output
CALENDAR_TZ = os.getenv("SCHEDULE_TZ", "America/Los_Angeles")
CALENDAR_TZ_MODE = os.getenv("SCHEDULE_TZ_MODE", "floating")
TERM_WEEKS = int(os.getenv("SCHEDULE_TERM_WEEKS", "16"))

DEBUG = os.getenv("SCHEDULE_DEBUG") == "1"

# Display colors handed out to new classes
CLASS_COLORS = [
    "#16A34A",  # green
    "#2563EB",  # blue
    "#DC2626",  # red
    "#9333EA",  # purple
    "#EA580C",  # orange
    "#0891B2",  # cyan
    "#4F46E5",  # indigo
    "#DB2777",  # pink
]

USER_CONFIG_PATH = Path(os.getenv("SCHEDULE_GUI_CONFIG", str(Path.home() / ".schedule_import_gui.json")))


def load_user_config(path: Path | None = None) -> dict:
    """Read the remembered GUI inputs; a missing or unreadable file yields {}."""
    cfg_path = path or USER_CONFIG_PATH
    try:
        with open(cfg_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


def save_user_config(values: dict, path: Path | None = None) -> None:
    cfg_path = path or USER_CONFIG_PATH
    with open(cfg_path, "w", encoding="utf-8") as f:
        json.dump(values, f)
