from datetime import datetime, timezone

import pytest

from notedeck.core.models import Note
from notedeck.errors import MalformedRecord
from notedeck.vault.records import parse_record, read_record, record_path, render_record

NID = "0123456789abcdef0123456789abcdef"
WHEN = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)


def _path(tmp_path, note_id=NID):
    return record_path(tmp_path, note_id)


def test_render_layout():
    note = Note(id=NID, title="Hello", labels=("work", "urgent"), link="http://example.com",
                markdown="# hi\n", modified_at=WHEN)
    text = render_record(note)

    assert text.startswith("---\ntitle: Hello\nlabels: [work, urgent]\nlink: http://example.com\n")
    assert text.endswith("---\n# hi\n")


def test_render_omits_absent_link():
    text = render_record(Note(id=NID, modified_at=WHEN))
    assert "link:" not in text
    assert "labels: []" in text


def test_parse_rendered_record(tmp_path):
    note = Note(id=NID, title="yes", labels=("2024", "a:b"), link=None,
                markdown="---\nnot metadata\n", modified_at=WHEN)
    parsed = parse_record(_path(tmp_path), render_record(note))

    assert parsed == note
    assert parsed.modified_at == WHEN


def test_body_keeps_leading_blank_lines(tmp_path):
    parsed = parse_record(_path(tmp_path), "---\ntitle: t\n---\n\n\nbody")
    assert parsed.markdown == "\n\nbody"


def test_hand_written_record(tmp_path):
    text = "---\ntitle: Groceries\nlabels: home  errands\n---\n- milk\n"
    parsed = parse_record(_path(tmp_path), text, fallback_modified=WHEN)

    assert parsed.title == "Groceries"
    assert parsed.labels == ("home", "errands")
    assert parsed.link is None
    assert parsed.markdown == "- milk\n"
    assert parsed.modified_at == WHEN
    assert parsed.created_at == WHEN


def test_missing_fields_default(tmp_path):
    parsed = parse_record(_path(tmp_path), "---\n---\n")
    assert (parsed.title, parsed.labels, parsed.link, parsed.markdown) == ("", (), None, "")


def test_naive_timestamp_is_utc(tmp_path):
    parsed = parse_record(_path(tmp_path), "---\nmodified: '2024-05-01T12:30:00'\n---\n")
    assert parsed.modified_at == WHEN


@pytest.mark.parametrize("text, reason", [
    ("no metadata here", "missing"),
    ("---\ntitle: [unclosed\n---\n", "YAML"),
    ("---\n- a\n- b\n---\n", "mapping"),
    ("---\ntitle: {a: 1}\n---\n", "title"),
    ("---\nlabels: {a: 1}\n---\n", "labels"),
    ("---\nlabels: [[a]]\n---\n", "label"),
    ("---\nlink: 5\n---\n", "link"),
    ("---\nmodified: yesterday\n---\n", "modified"),
    ("---\ncreated: [2024]\n---\n", "created"),
])
def test_malformed(tmp_path, text, reason):
    with pytest.raises(MalformedRecord) as ei:
        parse_record(_path(tmp_path), text)
    assert reason in ei.value.reason


def test_file_name_must_be_note_id(tmp_path):
    with pytest.raises(MalformedRecord):
        parse_record(tmp_path / "README.md", "---\ntitle: x\n---\n")


def test_read_record_uses_mtime_fallback(tmp_path):
    path = _path(tmp_path)
    path.write_text("---\ntitle: x\n---\nbody", encoding="utf-8")
    note = read_record(path)
    assert note.id == NID
    assert note.modified_at.tzinfo is not None


def test_created_and_modified_are_separate(tmp_path):
    created = datetime(2023, 1, 2, 3, 4, tzinfo=timezone.utc)
    note = Note(id=NID, title="t", modified_at=WHEN, created_at=created)
    text = render_record(note)
    parsed = parse_record(_path(tmp_path), text)

    assert "created: '2023-01-02T03:04:00+00:00'" in text
    assert parsed.created_at == created
    assert parsed.modified_at == WHEN


def test_line_break_characters_are_escaped(tmp_path):
    note = Note(id=NID, title="café\x85next\u2028sep", link="http://x/\r", modified_at=WHEN)
    text = render_record(note)
    head = text.split("---\n")[1]

    assert '"café\\Nnext\\Lsep"' in head
    assert "\x85" not in head and "\u2028" not in head and "\r" not in head
    parsed = parse_record(_path(tmp_path), text)
    assert parsed.title == note.title
    assert parsed.link == "http://x/"


def test_read_record_keeps_body_newlines(tmp_path):
    path = _path(tmp_path)
    path.write_bytes(b"---\r\ntitle: x\r\n---\r\none\r\ntwo\rthree\n")
    assert read_record(path).markdown == "one\r\ntwo\rthree\n"
