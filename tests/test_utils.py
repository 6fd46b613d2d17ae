"""Tests for onenote_md_export.utils module."""

from onenote_md_export.utils import (
    clear_folder,
    move_file,
    path_equals,
    sanitize_filename,
)


class TestSanitizeFilename:
    """Tests for sanitize_filename."""

    def test_plain_name(self):
        assert sanitize_filename("Notes") == "Notes"

    def test_forbidden_characters(self):
        assert sanitize_filename('a<b>c:d"e/f\\g|h?i*j') == "a b c d e f g h i j"

    def test_collapses_whitespace(self):
        assert sanitize_filename("  a   b__c ") == "a b c"

    def test_truncates(self):
        assert sanitize_filename("abcdef", max_length=3) == "abc"

    def test_trailing_dot_removed(self):
        assert sanitize_filename("Version 1.") == "Version 1"

    def test_empty_returns_unnamed(self):
        assert sanitize_filename("???") == "unnamed"


class TestPathEquals:
    """Tests for path_equals."""

    def test_same_path_different_spelling(self, tmp_path):
        assert path_equals(tmp_path / "a" / ".." / "b.png", tmp_path / "b.png")

    def test_different_paths(self, tmp_path):
        assert not path_equals(tmp_path / "a.png", tmp_path / "b.png")


class TestClearFolder:
    """Tests for clear_folder."""

    def test_creates_missing_folder(self, tmp_path):
        folder = clear_folder(tmp_path / "x" / "y")
        assert folder.is_dir()

    def test_removes_content(self, tmp_path):
        (tmp_path / "x").mkdir()
        (tmp_path / "x" / "old.md").write_text("old")
        clear_folder(tmp_path / "x")
        assert list((tmp_path / "x").iterdir()) == []


class TestMoveFile:
    """Tests for move_file."""

    def test_moves_and_creates_parent(self, tmp_path):
        src = tmp_path / "src.png"
        src.write_bytes(b"png")
        dest = tmp_path / "out" / "res" / "dest.png"
        move_file(src, dest)
        assert dest.read_bytes() == b"png"
        assert not src.exists()
