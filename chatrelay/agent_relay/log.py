"""Logging configuration using loguru.

Every stdlib logger (uvicorn, httpx, pydantic-ai, ...) is routed into loguru
so the relay has one sink and one format.  ``RELAY_LOG_JSON=true`` switches
the sink to loguru's serialised JSON lines for log shippers.
"""

from __future__ import annotations

import logging
import sys

from loguru import logger

_TEXT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

_NOISY_LOGGERS = ("uvicorn.access", "httpx", "httpcore", "sse_starlette")


class _InterceptHandler(logging.Handler):
    """Forward stdlib records to loguru, keeping the original call-site."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame = logging.currentframe()
        depth = 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(level: str = "INFO", *, json_logs: bool = False) -> None:
    """Install loguru as the only sink.

    Safe to call more than once; the previous sink is replaced.  Call it
    before uvicorn starts so its loggers are captured from the first line.
    """
    level = level.upper()

    logger.remove()
    if json_logs:
        logger.add(sys.stderr, level=level, serialize=True)
    else:
        logger.add(sys.stderr, level=level, format=_TEXT_FORMAT)

    logging.basicConfig(handlers=[_InterceptHandler()], level=0, force=True)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger.info("Logging initialised (level={}, json={})", level, json_logs)
