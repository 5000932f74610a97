from notedeck.vault.filesystem import atomic_write_text, is_temp_file, write_recovery_copy


def test_atomic_write_creates_parents_and_leaves_no_temp(tmp_path):
    path = tmp_path / "deep" / "dir" / "n.md"
    atomic_write_text(path, "one")
    atomic_write_text(path, "two\r\n")

    assert path.read_bytes() == b"two\r\n"
    assert [p.name for p in path.parent.iterdir()] == ["n.md"]


def test_recovery_copy(tmp_path):
    rec = write_recovery_copy(tmp_path / "rec", tmp_path / "abc.md", "text")
    assert rec.parent == tmp_path / "rec"
    assert rec.name.startswith("abc.recovery.")
    assert rec.read_text(encoding="utf-8") == "text"


def test_is_temp_file(tmp_path):
    assert is_temp_file(tmp_path / ".n.md.tmp-1")
    assert not is_temp_file(tmp_path / "n.md")
