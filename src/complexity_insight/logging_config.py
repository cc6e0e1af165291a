"""
Logging configuration for Complexity Insight.

Library modules log through ``logging.getLogger(__name__)`` under the
``complexity_insight`` namespace, at debug level only: truncated subtrees,
pruned import cycles, dropped imports and per-module aggregates. The CLI's
``-v`` flag surfaces those records on stderr.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "complexity_insight"


def setup_logging(
    verbose: bool = False, quiet: bool = False, log_file: Optional[str] = None
) -> logging.Logger:
    """
    Configure the package logger for one CLI invocation.

    A second call replaces the handlers installed by the first, so running
    several commands in one process never stacks handlers or keeps a stale
    level.

    Args:
        verbose: Show debug records, with source paths and traceback locals
        quiet: Suppress all but ERROR level records on the console
        log_file: Optional file that receives every record at DEBUG level

    Returns:
        The complexity_insight logger
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        markup=False,
        show_time=verbose,
        show_path=verbose,
    )
    console_handler.setLevel(level)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
            )
        )
        logger.addHandler(file_handler)

    logger.setLevel(logging.DEBUG if log_file else level)
    logger.propagate = False
    return logger
