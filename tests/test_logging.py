"""Tests for logging setup."""

from __future__ import annotations

import io
import logging

from rich.console import Console
from rich.logging import RichHandler

from sourcesecure.core.logging import LOGGER_NAME, setup_logging


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_default_level_is_warning(self) -> None:
        logger = setup_logging()
        assert logger.name == LOGGER_NAME
        assert logger.level == logging.WARNING
        assert logger.propagate is False
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], RichHandler)

    def test_verbose_is_debug(self) -> None:
        assert setup_logging(verbose=True).level == logging.DEBUG

    def test_level_name(self) -> None:
        assert setup_logging(level_name="info").level == logging.INFO

    def test_verbose_wins_over_level_name(self) -> None:
        assert setup_logging(verbose=True, level_name="error").level == logging.DEBUG

    def test_repeated_setup_does_not_duplicate_handlers(self) -> None:
        setup_logging()
        logger = setup_logging()
        assert len(logger.handlers) == 1

    def test_child_loggers_reach_console(self) -> None:
        buffer = io.StringIO()
        setup_logging(console=Console(file=buffer, width=200))

        logging.getLogger("sourcesecure.scanners.archive").warning("Archive too large: big.zip")

        assert "Archive too large: big.zip" in buffer.getvalue()
