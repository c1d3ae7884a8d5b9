"""
Logging configuration for frecenfile.

Diagnostics go to stderr through rich so that stdout stays reserved for
the ranked output.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(verbose: bool = False, quiet: bool = False) -> logging.Logger:
    """
    Configure logging with rich handler for colored output.

    Args:
        verbose: Enable DEBUG level logging
        quiet: Suppress all but ERROR level logging

    Returns:
        Configured logger instance for frecenfile
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    console = Console(stderr=True)

    handlers: list[logging.Handler] = [
        RichHandler(
            console=console,
            rich_tracebacks=True,
            tracebacks_show_locals=verbose,
            markup=False,
            show_time=verbose,
            show_path=verbose,
        )
    ]

    # force=True so repeated CLI invocations in one process (tests) reconfigure cleanly
    logging.basicConfig(
        level=level, format="%(message)s", datefmt="[%X]", handlers=handlers, force=True
    )

    logger = logging.getLogger("frecenfile")
    logger.setLevel(level)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger instance for a specific module.

    Args:
        name: Module name (e.g., 'frecenfile.history.reader')
              If None, returns the root frecenfile logger

    Returns:
        Logger instance
    """
    if name is None:
        return logging.getLogger("frecenfile")

    if not name.startswith("frecenfile"):
        name = f"frecenfile.{name}"

    return logging.getLogger(name)
