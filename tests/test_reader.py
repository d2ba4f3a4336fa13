"""Unit tests for markdown_to_karakeep.reader module."""

import pytest

from markdown_to_karakeep.errors import FileReadError
from markdown_to_karakeep.reader import is_markdown, read_markdown, title_from_filename


class TestTitleFromFilename:
    """Test title_from_filename function."""

    @pytest.mark.parametrize(
        "file_name, expected",
        [
            ("notes.md", "notes"),
            ("a.b.md", "a.b"),
            ("noext", "noext"),
            ("Meeting 2024-01-05.MD", "Meeting 2024-01-05"),
        ],
    )
    def test_strips_last_extension(self, file_name, expected):
        assert title_from_filename(file_name) == expected


class TestIsMarkdown:
    """Test is_markdown function."""

    def test_accepts_any_case(self):
        assert is_markdown("notes.md")
        assert is_markdown("NOTES.MD")
        assert is_markdown("notes.Md")

    def test_rejects_other_extensions(self):
        assert not is_markdown("notes.txt")
        assert not is_markdown("notes.markdown")
        assert not is_markdown("md")


class TestReadMarkdown:
    """Test read_markdown function."""

    def test_reads_utf8(self, tmp_path):
        path = tmp_path / "note.md"
        path.write_text("# Überschrift\n", encoding="utf-8")

        assert read_markdown(path) == "# Überschrift\n"

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileReadError) as excinfo:
            read_markdown(tmp_path / "gone.md")

        assert excinfo.value.file_name == "gone.md"
        assert "gone.md" in str(excinfo.value)

    def test_undecodable_file_raises(self, tmp_path):
        path = tmp_path / "binary.md"
        path.write_bytes(b"\xff\xfe\xfa\x00")

        with pytest.raises(FileReadError):
            read_markdown(path)
