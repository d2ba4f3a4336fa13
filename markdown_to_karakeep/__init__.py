"""
Utility package for importing local Markdown files into Karakeep.

Each selected file becomes one root-level text bookmark. Files are sent one
after another with a short pause in between; a failure on one file is logged
and the run moves on to the next.
"""
__all__ = [
    "config",
    "errors",
    "importer",
    "karakeep_client",
    "reader",
    "run_log",
]
