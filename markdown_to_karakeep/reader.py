from __future__ import annotations

from pathlib import Path

from .errors import FileReadError

MARKDOWN_SUFFIX = ".md"


def is_markdown(file_name: str) -> bool:
    return file_name.lower().endswith(MARKDOWN_SUFFIX)


def title_from_filename(file_name: str) -> str:
    """Drop the last extension segment: "a.b.md" -> "a.b", "noext" -> "noext"."""

    stem, dot, _ = file_name.rpartition(".")
    if not dot:
        return file_name
    return stem


def read_markdown(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise FileReadError(path.name, str(exc)) from exc
