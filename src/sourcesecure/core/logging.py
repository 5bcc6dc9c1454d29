"""Logging configuration for sourcesecure.

Sets up the ``sourcesecure`` logger with a Rich handler so that warnings
raised while degrading (unreadable files, failed archives, missing tools)
are readable on the console.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "sourcesecure"

LOG_FORMAT = "%(message)s"
DATE_FORMAT = "[%X]"


def setup_logging(
    verbose: bool = False,
    console: Optional[Console] = None,
    level_name: Optional[str] = None,
) -> logging.Logger:
    """Configure Python logging with a Rich handler.

    Args:
        verbose: If True, log at DEBUG level; otherwise only warnings
                 and errors are shown.
        console: Console to log to. Defaults to a stderr console so that
                 log lines never mix with report output on stdout.
        level_name: Explicit level name ("info", "error", ...), used when
                 not verbose.

    Returns:
        The configured ``sourcesecure`` logger.
    """
    if verbose:
        level = logging.DEBUG
    elif level_name:
        level = logging.getLevelName(level_name.upper())
    else:
        level = logging.WARNING

    rich_handler = RichHandler(
        level=level,
        console=console or Console(stderr=True),
        show_time=True,
        show_level=True,
        show_path=verbose,
        rich_tracebacks=True,
        markup=False,
    )
    rich_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Remove any existing handlers to avoid duplicates
    logger.handlers.clear()
    logger.addHandler(rich_handler)
    logger.propagate = False
    return logger

