"""Package logging for ``statement_totals``.

Library modules call ``get_logger("statement_totals.<module>")`` and never add
handlers. Entry points call ``configure_logging()`` once; it installs a single
named ``StreamHandler`` on the ``"statement_totals"`` logger. Until then the
package logger only carries a ``NullHandler``.

Log lines use ``<area>:<event> key=value`` messages, e.g.
``ingest:row_rejected`` or ``settings:write_failed key=config``.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

_PKG_LOGGER_NAME = "statement_totals"
_LEVEL_ENV = "STATEMENT_TOTALS_LOG_LEVEL"
_HANDLER_NAME = "statement_totals.stream"
_DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def _level_from(value: int | str | None) -> int | None:
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip():
        name = value.strip().upper()
        if name.isdigit():
            return int(name)
        numeric = logging.getLevelNamesMapping().get(name)
        if numeric is not None:
            return numeric
    return None


def resolve_level(level: int | str | None = None) -> int:
    """Explicit ``level``, else ``STATEMENT_TOTALS_LOG_LEVEL``, else ``INFO``.

    Unknown level names are ignored at each step.
    """

    for candidate in (level, os.getenv(_LEVEL_ENV)):
        resolved = _level_from(candidate)
        if resolved is not None:
            return resolved
    return logging.INFO


def _stream_handler(logger: logging.Logger) -> logging.Handler | None:
    return next((h for h in logger.handlers if h.get_name() == _HANDLER_NAME), None)


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] = sys.stderr,
) -> logging.Logger:
    """Attach the package stream handler; later calls are no-ops.

    Parameters
    ----------
    level:
        ``int`` or level name; see :func:`resolve_level`.
    fmt:
        Format string for the handler (``"%(asctime)s %(name)s ..."`` when
        omitted).
    stream:
        Destination stream (``sys.stderr`` by default).

    Returns
    -------
    logging.Logger
        The package logger.
    """

    logger = logging.getLogger(_PKG_LOGGER_NAME)
    if _stream_handler(logger) is not None:
        return logger

    for h in [h for h in logger.handlers if isinstance(h, logging.NullHandler)]:
        logger.removeHandler(h)

    resolved = resolve_level(level)
    handler = logging.StreamHandler(stream)
    handler.set_name(_HANDLER_NAME)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(fmt or _DEFAULT_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(resolved)
    logger.propagate = False
    return logger


def reset_logging() -> None:
    """Undo :func:`configure_logging` (tests, embedding hosts)."""

    logger = logging.getLogger(_PKG_LOGGER_NAME)
    handler = _stream_handler(logger)
    if handler is not None:
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


def get_logger(name: str) -> logging.Logger:
    """Return ``logging.getLogger(name)``, silencing the package until configured."""

    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)


__all__ = ["configure_logging", "get_logger", "reset_logging", "resolve_level"]
