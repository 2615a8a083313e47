"""Logging setup for the CLI."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "exmatch"


def resolve_log_level(verbose: bool, quiet: bool) -> int:
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.INFO
    return logging.WARNING


def configure_logging(console: Console, verbose: bool = False, quiet: bool = False) -> logging.Logger:
    """Route package logs to stderr through rich; stdout stays clean for --json/--plain."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(resolve_log_level(verbose, quiet))
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handler = RichHandler(
        console=Console(stderr=True, no_color=console.no_color),
        show_time=False,
        show_path=False,
        markup=False,
        rich_tracebacks=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    return logger
