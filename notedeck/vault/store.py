from __future__ import annotations

import logging
import threading
import time
from pathlib import Path
from typing import Iterable, Optional, Union

from notedeck.core.labels import LabelIndex
from notedeck.core.models import (
    LabelCounts,
    Note,
    generate_note_id,
    normalize_link,
    parse_labels,
    utcnow,
)
from notedeck.errors import MalformedRecord, NotFound, PersistenceError, StoreClosed
from notedeck.vault.filesystem import atomic_write_text, is_temp_file, write_recovery_copy
from notedeck.vault.records import RECORD_SUFFIX, read_record, record_path, render_record

log = logging.getLogger(__name__)

NoteRef = Union[Note, str]


class Store:
    """
    Source of truth for notes:
      note_id -> Note          (insertion ordered)
      label   -> note count    (derived, kept in step with every mutation)

    Every mutation writes the note's record before touching memory, so a
    failed write leaves the collection exactly as it was.
    """

    def __init__(self, root: Path, *, recovery_dir: Optional[Path] = None) -> None:
        self.root = Path(root)
        self.recovery_dir = Path(recovery_dir) if recovery_dir is not None else None
        self._notes: dict[str, Note] = {}
        self._labels = LabelIndex()
        self._lock = threading.RLock()
        self._closed = False
        self.load_errors: list[MalformedRecord] = []

    @classmethod
    def open(cls, root: Path, *, recovery_dir: Optional[Path] = None) -> "Store":
        store = cls(root, recovery_dir=recovery_dir)
        store.load()
        return store

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._notes.clear()
            self._labels.clear()
        log.info("Store closed: root=%s", self.root)

    def __enter__(self) -> "Store":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def __len__(self) -> int:
        return len(self._notes)

    def __contains__(self, note_id: object) -> bool:
        return note_id in self._notes

    # ───────────────────────── loading ─────────────────────────

    def load(self) -> None:
        """(Re)load every record under root. Malformed records are skipped and collected."""
        with self._lock:
            self._check_open()
            t0 = time.perf_counter()
            self.root.mkdir(parents=True, exist_ok=True)

            notes: list[Note] = []
            errors: list[MalformedRecord] = []
            for path in self.root.glob(f"*{RECORD_SUFFIX}"):
                if is_temp_file(path) or not path.is_file():
                    continue
                try:
                    notes.append(read_record(path))
                except MalformedRecord as exc:
                    log.warning("Skipping malformed record: %s", exc)
                    errors.append(exc)
                except (OSError, UnicodeDecodeError) as exc:
                    log.warning("Skipping unreadable record: %s (%s)", path, exc)
                    errors.append(MalformedRecord(path, f"unreadable: {exc}"))

            notes.sort(key=lambda n: (n.created_at, n.id))
            self._notes = {n.id: n for n in notes}
            self._labels.rebuild(notes)
            self.load_errors = errors

            dt_ms = (time.perf_counter() - t0) * 1000.0
            log.info(
                "Store loaded: root=%s notes=%d labels=%d errors=%d time_ms=%.1f",
                self.root, len(self._notes), len(self._labels.counts), len(errors), dt_ms,
            )

    # ───────────────────────── queries ─────────────────────────

    def get_notes(self) -> list[Note]:
        with self._lock:
            self._check_open()
            return list(self._notes.values())

    def get_note(self, note_id: str) -> Note:
        with self._lock:
            self._check_open()
            try:
                return self._notes[note_id]
            except KeyError:
                raise NotFound(note_id) from None

    def get_label_counts(self) -> LabelCounts:
        with self._lock:
            self._check_open()
            return self._labels.snapshot()

    def search(self, query: str) -> list[Note]:
        """Case-insensitive substring match on titles. Empty query matches nothing."""
        with self._lock:
            self._check_open()
            if not query:
                return []
            q = query.casefold()
            return [n for n in self._notes.values() if q in n.title.casefold()]

    def notes_with_labels(
        self,
        include: Iterable[str] = (),
        exclude: Iterable[str] = (),
    ) -> list[Note]:
        include = frozenset(include)
        exclude = frozenset(exclude)
        with self._lock:
            self._check_open()
            return [
                n for n in self._notes.values()
                if include <= n.label_set and not (exclude & n.label_set)
            ]

    # ───────────────────────── commands ─────────────────────────

    def new_note(self, title: str = "", link: Optional[str] = None) -> Note:
        with self._lock:
            self._check_open()
            note_id = generate_note_id()
            while note_id in self._notes:
                note_id = generate_note_id()
            now = utcnow()
            note = Note(
                id=note_id,
                title=title or "",
                link=normalize_link(link),
                modified_at=now,
                created_at=now,
            )
            self._write(note)
            self._notes[note.id] = note
            self._labels.add_note(note)
            log.debug("Note created: id=%s title=%r link=%s", note.id, note.title, note.link)
            return note

    def update_note_title(self, note: NoteRef, title: str) -> Note:
        return self._update(note, title=title or "")

    def update_note_link(self, note: NoteRef, link: Optional[str]) -> Note:
        return self._update(note, link=normalize_link(link))

    def update_note_markdown(self, note: NoteRef, markdown: str) -> Note:
        return self._update(note, markdown=markdown or "")

    def update_note_labels(self, note: NoteRef, labels: Union[str, Iterable[str]]) -> Note:
        return self._update(note, labels=parse_labels(labels))

    def delete_note(self, note: NoteRef) -> None:
        note_id = _note_id(note)
        with self._lock:
            self._check_open()
            current = self.get_note(note_id)
            path = record_path(self.root, note_id)
            try:
                path.unlink()
            except FileNotFoundError:
                log.warning("Record already gone on delete: %s", path)
            except OSError as exc:
                log.error("Delete failed: id=%s path=%s (%s)", note_id, path, exc)
                raise PersistenceError(note_id, path, "could not delete record") from exc

            del self._notes[note_id]
            self._labels.remove_note(current)
            log.debug("Note deleted: id=%s", note_id)

    # ───────────────────────── internal ─────────────────────────

    def _update(self, note: NoteRef, **changes) -> Note:
        note_id = _note_id(note)
        with self._lock:
            self._check_open()
            current = self.get_note(note_id)
            updated = current.evolve(**changes)
            self._write(updated)
            self._notes[note_id] = updated
            self._labels.update(current.label_set, updated.label_set)
            log.debug("Note updated: id=%s fields=%s", note_id, ",".join(changes))
            return updated

    def _write(self, note: Note) -> None:
        path = record_path(self.root, note.id)
        text = render_record(note)
        try:
            atomic_write_text(path, text, encoding="utf-8")
        except OSError as exc:
            log.error("Save failed: id=%s path=%s (%s)", note.id, path, exc)
            self._save_recovery_copy(path, text)
            raise PersistenceError(note.id, path, "could not write record") from exc

    def _save_recovery_copy(self, path: Path, text: str) -> None:
        if self.recovery_dir is None:
            return
        try:
            rec = write_recovery_copy(self.recovery_dir, path, text)
            log.warning("Recovery copy written: %s", rec)
        except OSError:
            log.exception("Recovery copy failed for %s", path)

    def _check_open(self) -> None:
        if self._closed:
            raise StoreClosed(f"store at {self.root} is closed")


def _note_id(note: NoteRef) -> str:
    return note.id if isinstance(note, Note) else str(note)
