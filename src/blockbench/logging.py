"""Logging setup for blockbench.

Console output goes to stderr so that ``blockbench list`` and the
summary table printed on stdout stay clean for piping.  An optional
log file always receives the full DEBUG stream, including every
command line and exit status of the target project's test runner.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

_LOGGER_NAME = "blockbench"
_FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
_CONSOLE_FORMAT = "%(levelname)-8s %(message)s"


def setup_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_file: Path | None = None,
) -> logging.Logger:
    """Configure and return the ``blockbench`` logger.

    Args:
        verbose: Show DEBUG messages on the console.
        quiet: Only show warnings and errors. Ignored if *verbose* is set.
        log_file: Optional path for a DEBUG-level log file.

    Returns:
        The configured logger.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    # Calling twice (e.g. from tests) must not duplicate output.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if verbose:
        console_level = logging.DEBUG
    elif quiet:
        console_level = logging.WARNING
    else:
        console_level = logging.INFO

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is not None:
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(fh)

    return logger
