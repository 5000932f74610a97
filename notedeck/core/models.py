from __future__ import annotations

import re
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Iterable, Optional

LabelCounts = dict[str, int]

_LABEL_RE = re.compile(r"\S+")
_NOTE_ID_RE = re.compile(r"\A[0-9a-f]{32}\Z")


def generate_note_id() -> str:
    return uuid.uuid4().hex


def is_valid_note_id(note_id: str) -> bool:
    return bool(_NOTE_ID_RE.match(note_id or ""))


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_labels(tokens: str | Iterable[str]) -> tuple[str, ...]:
    """
    Labels from a raw "a b c" string or from a sequence of tokens.

    Every token is split on whitespace again, so " a  b" inside a sequence
    still yields two labels. Duplicates are dropped, first occurrence wins.
    """
    if isinstance(tokens, str):
        tokens = [tokens]
    seen: dict[str, None] = {}
    for tok in tokens:
        for label in _LABEL_RE.findall(tok or ""):
            seen.setdefault(label, None)
    return tuple(seen)


def normalize_link(link: Optional[str]) -> Optional[str]:
    link = (link or "").strip()
    return link or None


@dataclass(frozen=True)
class Note:
    id: str
    title: str = ""
    labels: tuple[str, ...] = ()
    link: Optional[str] = None
    markdown: str = ""
    modified_at: datetime = field(default_factory=utcnow, compare=False)
    created_at: datetime = field(default_factory=utcnow, compare=False)

    @property
    def label_set(self) -> frozenset[str]:
        return frozenset(self.labels)

    def same_content(self, other: "Note") -> bool:
        """Field equality that ignores label order and the timestamp."""
        return (
            self.id == other.id
            and self.title == other.title
            and self.label_set == other.label_set
            and self.link == other.link
            and self.markdown == other.markdown
        )

    def evolve(self, **changes) -> "Note":
        changes.setdefault("modified_at", utcnow())
        return replace(self, **changes)
