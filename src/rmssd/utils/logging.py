"""Logging helpers for the command line and library diagnostics."""

from __future__ import annotations

import logging
from typing import Optional, TextIO

DEFAULT_FORMAT = "%(levelname)s:%(name)s:%(message)s"


def verbosity_level(verbose: bool = False, quiet: bool = False) -> int:
    """Map the CLI ``--verbose``/``--quiet`` flags to a logging level.

    Results and per-combination failures are printed by the CLI itself, so
    the default only lets warnings through.
    """

    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.ERROR
    return logging.WARNING


def get_logger(
    name: str = "rmssd",
    level: int = logging.INFO,
    fmt: str = DEFAULT_FORMAT,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Return a configured :class:`logging.Logger` instance.

    A single ``StreamHandler`` writing to ``stream`` (stderr by default) is
    attached the first time; later calls only adjust the level so repeated
    configuration never duplicates log lines.
    """

    logger = logging.getLogger(name)
    handlers = [h for h in logger.handlers if isinstance(h, logging.StreamHandler)]
    if not handlers:
        handler = logging.StreamHandler(stream)
        handler.setFormatter(logging.Formatter(fmt))
        logger.addHandler(handler)
    elif stream is not None:
        handlers[0].setStream(stream)
    logger.setLevel(level)
    return logger
