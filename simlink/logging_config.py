"""Logging setup for simlink entry points.

Library modules only create ``logging.getLogger(__name__)`` loggers; this is
called once by the CLI (or an embedding application) to attach a handler.
"""

from __future__ import annotations

import logging
import os

LOG_LEVEL_ENV = "SIMLINK_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# Per-request traces from the HTTP stack stay hidden unless explicitly asked for
TRANSPORT_LOGGERS = ("httpx", "httpcore")


def resolve_level(level: str | None = None) -> int:
    """Resolve a level name from the argument, then ``SIMLINK_LOG_LEVEL``, then INFO.

    Raises:
        ValueError: If the name is not a standard logging level
    """
    name = (level or os.getenv(LOG_LEVEL_ENV) or "INFO").upper()
    value = logging.getLevelName(name)
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level {name!r}")
    return value


def configure_logging(level: str | None = None, verbose_transport: bool = False) -> logging.Logger:
    """Attach a stream handler and set the ``simlink`` logger level.

    Args:
        level: Level name; see ``resolve_level`` for the fallbacks.
        verbose_transport: Let httpx/httpcore log at the same level instead of WARNING.

    Returns:
        The ``simlink`` package logger.
    """
    resolved = resolve_level(level)
    logging.basicConfig(level=resolved, format=LOG_FORMAT)

    logger = logging.getLogger("simlink")
    logger.setLevel(resolved)

    transport_level = resolved if verbose_transport else max(resolved, logging.WARNING)
    for name in TRANSPORT_LOGGERS:
        logging.getLogger(name).setLevel(transport_level)
    return logger
