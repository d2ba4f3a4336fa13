from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from .config import ImportConfig, load_env_file, save_env_file
from .errors import ConfigurationError, ValidationError
from .importer import FILE_DELAY_SECONDS, run_import
from .run_log import ConsoleLogSink, RunContext

EXIT_OK = 0
EXIT_FAILURES = 1
EXIT_INVALID = 2


def build_arg_parser() -> argparse.ArgumentParser:
    """Construct the command-line parser for the importer CLI."""

    parser = argparse.ArgumentParser(description="Import Markdown files into Karakeep as text bookmarks.")
    parser.add_argument("--env", default=".env", help="Path to the .env file with Karakeep credentials.")
    parser.add_argument("--url", help="Karakeep API base URL, e.g. https://karakeep.example.com/api/v1")
    parser.add_argument("--api-key", help="Karakeep API key. Overrides KARAKEEP_API_KEY from the .env file.")
    parser.add_argument(
        "--save-config",
        action="store_true",
        help="Store the effective URL and API key in the .env file for later runs.",
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=FILE_DELAY_SECONDS,
        help="Seconds to wait between files (default: %(default)s).",
    )
    parser.add_argument("--timeout", type=float, default=None, help="HTTP timeout in seconds (default: none).")
    parser.add_argument(
        "--debug-log",
        action="store_true",
        help="Write full payloads and Karakeep responses to karakeep_import.debug.log",
    )
    parser.add_argument("files", nargs="*", help="Markdown files to import, in order.")
    return parser


def resolve_config(args: argparse.Namespace) -> ImportConfig:
    """Merge .env values with command-line overrides."""

    env_config = load_env_file(Path(args.env))
    return ImportConfig.from_values(
        args.url if args.url is not None else env_config.api_url
        ,args.api_key if args.api_key is not None else env_config.api_key
    )


def run_cli(argv: Optional[list[str]] = None) -> int:
    """Entry point invoked by import_markdown_to_karakeep.py, the console script or tests."""

    parser = build_arg_parser()
    args = parser.parse_args(argv)

    logger = configure_logging()
    debug_logger = configure_debug_logger() if args.debug_log else None

    try:
        config = resolve_config(args)
        if args.save_config:
            save_env_file(Path(args.env), config)
            print(f"[info] Saved Karakeep settings to {args.env}")
            logger.info("Saved Karakeep settings to %s", args.env)
            if not args.files:
                return EXIT_OK
    except ConfigurationError as err:
        print(f"[error] {err}", file=sys.stderr)
        logger.error("%s", err)
        return EXIT_INVALID

    context = RunContext(sink=ConsoleLogSink(logger))
    files = [Path(name) for name in args.files]

    try:
        summary = run_import(
            config
            ,files
            ,context=context
            ,delay_seconds=args.delay
            ,timeout=args.timeout
            ,debug_logger=debug_logger
        )
    except ValidationError as err:
        logger.error("Run not started: %s", err)
        return EXIT_INVALID
    except KeyboardInterrupt:
        logger.warning("Import interrupted by user")
        return EXIT_FAILURES

    return EXIT_OK if summary.all_succeeded else EXIT_FAILURES


def main() -> None:
    sys.exit(run_cli(sys.argv[1:]))


LOG_PATH = Path("karakeep_import.log")
DEBUG_LOG_PATH = Path("karakeep_import.debug.log")
LOGGER_NAME = "markdown_to_karakeep"


def configure_logging() -> logging.Logger:
    """Set up the primary info-level logger that writes to karakeep_import.log."""

    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        logger.setLevel(logging.INFO)
        handler = logging.FileHandler(LOG_PATH, encoding="utf-8")
        handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
        logger.addHandler(handler)
    return logger


def configure_debug_logger() -> logging.Logger:
    """Create or return the debug logger that captures payloads/API responses."""

    debug_logger = logging.getLogger(f"{LOGGER_NAME}.debug")
    if not debug_logger.handlers:
        debug_logger.setLevel(logging.INFO)
        handler = logging.FileHandler(DEBUG_LOG_PATH, encoding="utf-8")
        handler.setFormatter(logging.Formatter("%(asctime)s [DEBUG] %(message)s"))
        debug_logger.addHandler(handler)
    return debug_logger
