from __future__ import annotations

from typing import Optional


class MarkdownImportError(RuntimeError):
    """Base class for everything the importer raises."""


class ConfigurationError(MarkdownImportError):
    """Raised when required configuration is missing or malformed."""


class ValidationError(ConfigurationError):
    """Raised before any I/O when the URL, API key or file selection is missing."""


class ImportInProgressError(ValidationError):
    """Raised when a run is requested while another one is still active."""


class FileReadError(MarkdownImportError):
    """A single Markdown file could not be read or decoded as text."""

    def __init__(self, file_name: str, reason: str) -> None:
        super().__init__(f'File "{file_name}" could not be read: {reason}')
        self.file_name = file_name
        self.reason = reason


class BookmarkApiError(MarkdownImportError):
    """Base for failures talking to the bookmark API. Never escapes the client."""


class RemoteRejection(BookmarkApiError):
    def __init__(self, status_code: int, reason: str, body_excerpt: Optional[str] = None) -> None:
        message = f"API Error: {status_code} {reason}".rstrip()
        if body_excerpt:
            message += f" - {body_excerpt}"
        super().__init__(message)
        self.status_code = status_code
        self.body_excerpt = body_excerpt


class MalformedResponse(BookmarkApiError):
    """The API answered 2xx but did not return a usable bookmark id."""


class NetworkError(BookmarkApiError):
    """Transport-level failure: DNS, refused connection, timeout, undecodable body."""


class FatalError(MarkdownImportError):
    """Wraps an unexpected error that escaped per-file handling and halted the loop."""
