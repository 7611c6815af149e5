"""Logging setup for the command line.

Library modules log through ``logging.getLogger(__name__)`` and never
configure handlers themselves; the CLI calls :func:`setup_logging` once.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "release_paperwork"


def setup_logging(verbose: bool = False, console: Console | None = None) -> logging.Logger:
    """Route release-paperwork log records to a rich console.

    Calling it again replaces the handler instead of adding a second one.

    Args:
        verbose: Log at DEBUG instead of INFO
        console: Console to log to, stderr by default

    Returns:
        The package logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False

    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=False,
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    return logger
