from __future__ import annotations

import os
from pathlib import Path

APP_NAME = "notedeck"

APP_HOME = Path(os.environ.get("NOTEDECK_HOME") or Path.home() / f".{APP_NAME}")
NOTES_DIR = Path(os.environ.get("NOTEDECK_NOTES_DIR") or APP_HOME / "notes")
RECOVERY_DIR = APP_HOME / "recovery"
LOG_DIR = APP_HOME / "logs"
LOG_PATH = LOG_DIR / f"{APP_NAME}.log"

AUTOSAVE_DEBOUNCE_MS = 600
TITLE_FETCH_TIMEOUT_S = 10.0
