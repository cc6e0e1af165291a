"""Tests for logging_config.py - levels, handler replacement and the log file."""

import logging

import pytest
from rich.logging import RichHandler

from complexity_insight.logging_config import PACKAGE_LOGGER, setup_logging


@pytest.fixture
def package_logger():
    """The package logger, restored to its prior state after the test."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    saved = (list(logger.handlers), logger.level, logger.propagate)
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    handlers, level, propagate = saved
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = propagate


def _console(logger):
    return [h for h in logger.handlers if isinstance(h, RichHandler)]


class TestLevels:
    @pytest.mark.parametrize(
        "verbose, quiet, expected",
        [
            (False, False, logging.WARNING),
            (True, False, logging.DEBUG),
            (False, True, logging.ERROR),
            (True, True, logging.ERROR),
        ],
    )
    def test_console_level(self, package_logger, verbose, quiet, expected):
        logger = setup_logging(verbose=verbose, quiet=quiet)
        assert logger is package_logger
        assert logger.level == expected
        assert _console(logger)[0].level == expected

    def test_does_not_propagate(self, package_logger):
        setup_logging()
        assert package_logger.propagate is False


class TestHandlers:
    def test_repeated_setup_replaces_handlers(self, package_logger):
        setup_logging(verbose=True)
        setup_logging()
        assert len(package_logger.handlers) == 1
        assert package_logger.level == logging.WARNING

    def test_traceback_locals_only_when_verbose(self, package_logger):
        assert _console(setup_logging(verbose=True))[0].tracebacks_show_locals is True
        assert _console(setup_logging())[0].tracebacks_show_locals is False

    def test_log_file_receives_debug_records(self, package_logger, tmp_path):
        log_file = tmp_path / "analysis.log"
        logger = setup_logging(log_file=str(log_file))
        assert len(logger.handlers) == 2
        assert _console(logger)[0].level == logging.WARNING

        logging.getLogger(f"{PACKAGE_LOGGER}.complexity.module").debug("Pruned cycle edge %s", "a.ts")
        for handler in logger.handlers:
            handler.flush()

        text = log_file.read_text(encoding="utf-8")
        assert "DEBUG" in text
        assert "Pruned cycle edge a.ts" in text
