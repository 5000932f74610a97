# notedeck/vault/filesystem.py

from __future__ import annotations

import os
import uuid
from datetime import datetime
from pathlib import Path

# ───────────────────────── public API ─────────────────────────


def atomic_write_text(
    path: Path,
    text: str,
    *,
    encoding: str = "utf-8",
) -> None:
    """
    Atomic-ish file write:
    - write to temp file in same directory
    - fsync
    - replace()

    A crash mid-write leaves either the old file or the new one, never half of each.
    """
    path = Path(path)
    parent = path.parent
    parent.mkdir(parents=True, exist_ok=True)

    tmp_path = parent / f".{path.name}.tmp-{uuid.uuid4().hex}"

    try:
        with open(tmp_path, "w", encoding=encoding, newline="") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        tmp_path.replace(path)
    finally:
        if tmp_path.exists():
            try:
                tmp_path.unlink()
            except OSError:
                pass


def write_recovery_copy(recovery_dir: Path, note_path: Path, text: str) -> Path:
    """
    Best-effort emergency save when normal save fails.

    Writes timestamped copy into <recovery_dir>/<stem>.recovery.<ts>.md
    """
    note_path = Path(note_path)

    stem = note_path.stem or "untitled"
    ts = datetime.now().strftime("%Y%m%d-%H%M%S")

    recovery_path = Path(recovery_dir) / f"{stem}.recovery.{ts}.md"
    atomic_write_text(recovery_path, text, encoding="utf-8")

    return recovery_path


def is_temp_file(path: Path) -> bool:
    return Path(path).name.startswith(".")
