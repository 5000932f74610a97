from __future__ import annotations

from pathlib import Path


class NotedeckError(Exception):
    """Base class for every error raised by notedeck."""


class NotFound(NotedeckError, KeyError):
    def __init__(self, note_id: str):
        super().__init__(note_id)
        self.note_id = note_id

    def __str__(self) -> str:
        return f"note not found: {self.note_id}"


class PersistenceError(NotedeckError):
    """
    Storage read/write failed for a single note.
    The in-memory collection is left as it was before the operation.
    """

    def __init__(self, note_id: str, path: Path | None = None, message: str = ""):
        self.note_id = note_id
        self.path = path
        self.message = message or "storage failure"
        super().__init__(f"{self.message}: note_id={note_id} path={path}")


class MalformedRecord(NotedeckError):
    def __init__(self, path: Path, reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{self.path.name}: {reason}")


class StoreClosed(NotedeckError):
    pass


class InvalidTransition(NotedeckError):
    pass
