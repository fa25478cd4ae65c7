"""Logging configuration using loguru.

Diagnostics always go to stderr so they never mix with command output that
users pipe elsewhere (``cd "$(pile path foo)"``).  At DEBUG level each line
carries its call-site; otherwise lines are kept short for a terminal.
Stdlib logging is intercepted so every record shares the same sink.
"""

from __future__ import annotations

import logging
import sys

from loguru import logger

_SHORT_FORMAT = "<level>{level: <8}</level> | <level>{message}</level>"
_DEBUG_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


class _InterceptHandler(logging.Handler):
    """Bridge stdlib logging records into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Walk the call stack so loguru reports the real call-site
        frame = logging.currentframe()
        depth = 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(level: str = "WARNING") -> None:
    """Make loguru the only logging sink, writing to stderr at *level*.

    Called by the CLI on every invocation; calling it again replaces the
    previous sink.
    """
    level = level.upper()
    debug = level in ("TRACE", "DEBUG")

    logger.remove()
    logger.add(sys.stderr, level=level, format=_DEBUG_FORMAT if debug else _SHORT_FORMAT, backtrace=debug)

    logging.basicConfig(handlers=[_InterceptHandler()], level=0, force=True)

    logger.debug("Logging initialised (level={})", level)
