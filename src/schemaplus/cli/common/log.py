"""Logging setup for the CLI."""

from __future__ import annotations

import logging

from rich.logging import RichHandler

from schemaplus.cli.common.output import console


def configure_logging(verbosity: int = 0) -> None:
    """
    Route log records through Rich.

    0 keeps warnings only, 1 (-v) shows info, 2 or more (-vv) shows debug.
    """
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, rich_tracebacks=True)],
        force=True,
    )
