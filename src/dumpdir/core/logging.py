"""Logging configuration for dump-dir.

This module provides logging setup using the Rich library. Log output goes
to stderr so that it never interleaves with dumped file contents on stdout.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "%(message)s"
DATE_FORMAT = "[%X]"


def setup_logging(verbose: bool = False, quiet: bool = False) -> logging.Logger:
    """Configure Python logging with a Rich handler on stderr.

    Args:
        verbose: If True, set log level to DEBUG so pruned directories and
                 exclusion reasons are reported.
        quiet: If True, only errors are shown. Takes precedence over verbose.

    Returns:
        The configured ``dumpdir`` logger.

    Example:
        >>> logger = setup_logging(verbose=True)
        >>> logger.debug("Pruned directory target/")
        >>> logger.warning("Permission denied: secret/")
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    rich_handler = RichHandler(
        level=level,
        console=Console(stderr=True),
        show_time=True,
        show_level=True,
        show_path=verbose,
        rich_tracebacks=True,
        markup=False,
    )
    rich_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    logger = logging.getLogger("dumpdir")
    logger.setLevel(level)

    # Remove any existing handlers to avoid duplicates
    logger.handlers.clear()
    logger.addHandler(rich_handler)
    logger.propagate = False

    return logger
