from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Sequence

from .config import EXPECTED_API_SUFFIX, ImportConfig
from .errors import FatalError, FileReadError, ImportInProgressError, ValidationError
from .karakeep_client import KarakeepClient
from .reader import is_markdown, read_markdown, title_from_filename
from .run_log import RunContext

FILE_DELAY_SECONDS = 0.1

_RUN_LOCK = threading.Lock()


@dataclass
class Summary:
    total_selected: int
    attempted: int = 0
    succeeded: int = 0
    fatal_error: Optional[FatalError] = None

    @property
    def failed(self) -> int:
        return self.attempted - self.succeeded

    @property
    def aborted(self) -> bool:
        return self.fatal_error is not None

    @property
    def all_succeeded(self) -> bool:
        return not self.aborted and self.failed == 0


def validate_inputs(config: ImportConfig, files: Sequence[Path], context: RunContext) -> None:
    """Check the preconditions of a run. Nothing has been read or sent when this raises."""

    if not config.api_base_url or not config.api_key or not files:
        message = "ERROR: Please fill in API URL, API Key, and select at least one Markdown file."
        context.error(message)
        raise ValidationError(message)

    if not config.has_expected_suffix:
        context.error(f"Warning: API URL doesn't end with '{EXPECTED_API_SUFFIX}'. Ensure it's correct.")


def import_file(path: Path, client: KarakeepClient, context: RunContext) -> bool:
    """Read one Markdown file and create its bookmark. File-scoped failures come back as False."""

    file_name = path.name
    try:
        content = read_markdown(path)
    except FileReadError as err:
        context.error(f"FileReadError while processing \"{file_name}\": {err.reason}")
        return False

    context.log(f'Read content of "{file_name}" ({len(content)} chars)')
    title = title_from_filename(file_name)

    if client.create_text_bookmark(title, content, source_name=file_name):
        return True
    context.error(f'Failed to import "{file_name}" to Karakeep. Check logs above.')
    return False


def log_summary(context: RunContext, summary: Summary) -> None:
    context.log("\n--- Import Run Summary ---")
    context.log(f"Total Markdown Files Selected: {summary.total_selected}")
    context.log(f"Files Processed Attempted: {summary.attempted}")
    context.log(f"Files Imported Successfully to Karakeep: {summary.succeeded}")
    context.log("--- End of Run ---")


def run_import(
    config: ImportConfig
    ,files: Sequence[Path]
    ,*
    ,context: Optional[RunContext] = None
    ,client: Optional[KarakeepClient] = None
    ,delay_seconds: float = FILE_DELAY_SECONDS
    ,sleep: Callable[[float], None] = time.sleep
    ,timeout: Optional[float] = None
    ,debug_logger: Optional[logging.Logger] = None
) -> Summary:
    """Import every Markdown file in ``files`` as a text bookmark, strictly one after another.

    Raises ValidationError before any I/O when the URL, key or file list is
    missing, and ImportInProgressError when another run in this process has not
    finished. Everything else is logged to ``context`` and reflected in the
    returned Summary; the summary block is logged even if the loop is halted.
    """

    if not _RUN_LOCK.acquire(blocking=False):
        raise ImportInProgressError("An import run is already in progress.")

    try:
        context = context if context is not None else RunContext()
        context.clear()
        context.log("--- Starting Markdown Import Process ---")

        validate_inputs(config, files, context)

        owns_client = client is None
        if client is None:
            client = KarakeepClient(
                config.api_base_url
                ,config.api_key
                ,context=context
                ,timeout=timeout
                ,debug_logger=debug_logger
            )

        try:
            return _process_files(files, client, context, delay_seconds, sleep)
        finally:
            if owns_client:
                client.session.close()
    finally:
        _RUN_LOCK.release()


def _process_files(
    files: Sequence[Path]
    ,client: KarakeepClient
    ,context: RunContext
    ,delay_seconds: float
    ,sleep: Callable[[float], None]
) -> Summary:
    summary = Summary(total_selected=len(files))
    try:
        context.log(f"\n--- Processing {summary.total_selected} Markdown file(s) ---")

        for index, path in enumerate(files, 1):
            file_name = path.name
            context.log(f"\n[{index}/{summary.total_selected}] Processing file: {file_name}")

            if not is_markdown(file_name):
                context.error(f'Skipping file "{file_name}" as it does not have a .md extension.')
                continue

            summary.attempted += 1
            if import_file(path, client, context):
                summary.succeeded += 1

            sleep(delay_seconds)

    except Exception as exc:
        summary.fatal_error = FatalError(f"{type(exc).__name__}: {exc}")
        summary.fatal_error.__cause__ = exc
        context.error(f"FATAL ERROR during import process: {exc}")
        context.error("Import process halted.")
    finally:
        log_summary(context, summary)

    return summary
