from __future__ import annotations

import logging
from typing import Callable

from notedeck.core.models import Note
from notedeck.errors import NotedeckError, NotFound
from notedeck.vault.store import Store

log = logging.getLogger(__name__)

# editor field -> Store command
FIELD_COMMANDS: dict[str, Callable[[Store, str, str], Note]] = {
    "title": lambda s, nid, v: s.update_note_title(nid, v),
    "labels": lambda s, nid, v: s.update_note_labels(nid, v),
    "link": lambda s, nid, v: s.update_note_link(nid, v),
    "markdown": lambda s, nid, v: s.update_note_markdown(nid, v),
}


class PendingEdits:
    """
    Editor changes not yet handed to the Store:
      note_id -> {field: latest value}

    A field leaves this buffer only once its Store command succeeded, so a
    failed write is retried on the next flush instead of being lost.
    """

    def __init__(self) -> None:
        self._edits: dict[str, dict[str, str]] = {}

    def __bool__(self) -> bool:
        return bool(self._edits)

    def set(self, note_id: str, field: str, value: str) -> None:
        if field not in FIELD_COMMANDS:
            raise KeyError(field)
        self._edits.setdefault(note_id, {})[field] = value

    def fields_for(self, note_id: str) -> dict[str, str]:
        return dict(self._edits.get(note_id, {}))

    def flush(self, store: Store) -> dict[tuple[str, str], NotedeckError]:
        """
        Send every pending field. Returns the failures keyed by (note_id, field).
        Edits of a note that no longer exists are dropped.
        """
        errors: dict[tuple[str, str], NotedeckError] = {}
        for note_id in list(self._edits):
            fields = self._edits[note_id]
            for field, value in list(fields.items()):
                try:
                    FIELD_COMMANDS[field](store, note_id, value)
                except NotFound as exc:
                    log.warning("Dropping edits of deleted note: id=%s fields=%s", note_id, ",".join(fields))
                    errors[(note_id, field)] = exc
                    fields.clear()
                    break
                except NotedeckError as exc:
                    log.error("Save failed, kept pending: id=%s field=%s (%s)", note_id, field, exc)
                    errors[(note_id, field)] = exc
                else:
                    del fields[field]
            if not fields:
                del self._edits[note_id]
        return errors
