#!/usr/bin/env python
"""
Entry point that delegates to markdown_to_karakeep.cli.
"""
from __future__ import annotations

import sys

from markdown_to_karakeep.cli import run_cli


def main() -> None:
    sys.exit(run_cli(sys.argv[1:]))


if __name__ == "__main__":
    main()
