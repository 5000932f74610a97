from __future__ import annotations

import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

import yaml

from notedeck.core.models import Note, is_valid_note_id, normalize_link, parse_labels
from notedeck.errors import MalformedRecord

RECORD_SUFFIX = ".md"

_FM_RE = re.compile(r"\A---[ \t]*\r?\n(.*?)^---[ \t]*(?:\r?\n|\Z)", re.DOTALL | re.MULTILINE)
_SCALARS = (str, int, float)
# Characters YAML folds or normalises inside plain and single-quoted scalars.
_LINE_BREAKS = frozenset("\r\n\x85\u2028\u2029")


class _RecordDumper(yaml.SafeDumper):
    pass


def _represent_str(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    if _LINE_BREAKS.intersection(data):
        return dumper.represent_scalar("tag:yaml.org,2002:str", data, style='"')
    return dumper.represent_str(data)


_RecordDumper.add_representer(str, _represent_str)


def record_path(root: Path, note_id: str) -> Path:
    return Path(root) / f"{note_id}{RECORD_SUFFIX}"


def render_record(note: Note) -> str:
    """
    One note as a text record:

        ---
        title: ...
        labels: [a, b]
        link: ...
        created: ...
        modified: ...
        ---
        <markdown body>
    """
    meta: dict[str, Any] = {
        "title": note.title,
        "labels": list(note.labels),
    }
    if note.link is not None:
        meta["link"] = note.link
    meta["created"] = note.created_at.isoformat()
    meta["modified"] = note.modified_at.isoformat()

    fm = yaml.dump(
        meta,
        Dumper=_RecordDumper,
        allow_unicode=True,
        sort_keys=False,
        default_flow_style=None,
        width=1 << 16,
    )
    return f"---\n{fm}---\n{note.markdown}"


def parse_record(path: Path, text: str, *, fallback_modified: Optional[datetime] = None) -> Note:
    """
    Parse a record read from `path`. The note id is the file stem.
    Raises MalformedRecord with a human readable reason.
    """
    path = Path(path)
    note_id = path.stem
    if not is_valid_note_id(note_id):
        raise MalformedRecord(path, f"file name is not a note id: {path.name!r}")

    m = _FM_RE.match(text)
    if not m:
        raise MalformedRecord(path, "missing '---' metadata block")

    try:
        meta = yaml.safe_load(m.group(1))
    except yaml.YAMLError as exc:
        raise MalformedRecord(path, f"invalid YAML metadata: {exc}") from exc
    if meta is None:
        meta = {}
    if not isinstance(meta, dict):
        raise MalformedRecord(path, "metadata block is not a mapping")

    modified = _timestamp(path, "modified", meta.get("modified"), fallback_modified)
    return Note(
        id=note_id,
        title=_title(path, meta.get("title")),
        labels=_labels(path, meta.get("labels")),
        link=_link(path, meta.get("link")),
        markdown=text[m.end():],
        modified_at=modified,
        created_at=_timestamp(path, "created", meta.get("created"), modified),
    )


def read_record(path: Path) -> Note:
    """Read and parse one record. OSError propagates to the caller."""
    path = Path(path)
    # newline="" keeps CRLF and lone CR in the body as written
    with open(path, "r", encoding="utf-8", newline="") as f:
        text = f.read()
    mtime = datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc)
    return parse_record(path, text, fallback_modified=mtime)


# ───────────────────────── field coercion ─────────────────────────

def _is_scalar(value: Any) -> bool:
    return isinstance(value, _SCALARS) and not isinstance(value, bool)


def _title(path: Path, value: Any) -> str:
    if value is None:
        return ""
    if not _is_scalar(value):
        raise MalformedRecord(path, f"title must be text, got {type(value).__name__}")
    return str(value)


def _labels(path: Path, value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return parse_labels(value)
    if not isinstance(value, list):
        raise MalformedRecord(path, f"labels must be a list, got {type(value).__name__}")
    for item in value:
        if not _is_scalar(item):
            raise MalformedRecord(path, f"label must be text, got {item!r}")
    return parse_labels(str(item) for item in value)


def _link(path: Path, value: Any) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise MalformedRecord(path, f"link must be text, got {type(value).__name__}")
    return normalize_link(value)


def _timestamp(path: Path, key: str, value: Any, fallback: Optional[datetime]) -> datetime:
    if value is None:
        return fallback or datetime.now(timezone.utc)
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value)
        except ValueError as exc:
            raise MalformedRecord(path, f"{key} is not an ISO timestamp: {value!r}") from exc
    if not isinstance(value, datetime):
        raise MalformedRecord(path, f"{key} must be a timestamp, got {type(value).__name__}")
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value
