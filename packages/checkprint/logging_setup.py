"""Package logging for ``checkprint``.

Library modules log through ``get_logger("checkprint.<module>")`` and never
attach handlers themselves. Until a host calls :func:`configure_logging`, the
package root logger (``"checkprint"``) carries only a ``NullHandler`` and
records propagate to whatever the host has set up on the root logger.

``configure_logging`` is for entrypoints (the CLI): it installs one
``StreamHandler`` on the package root, stops propagation, and is idempotent.
The level comes from the ``level`` argument, then ``CHECKPRINT_LOG_LEVEL``
(a level name such as ``DEBUG`` or a number), then ``INFO``.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

LOG_LEVEL_ENV = "CHECKPRINT_LOG_LEVEL"
DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

_PKG_LOGGER_NAME = "checkprint"
_handler: logging.Handler | None = None


def _level_from(value: int | str | None) -> int | None:
    if isinstance(value, int):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    name = value.strip().upper()
    if name.isdigit():
        return int(name)
    return logging.getLevelNamesMapping().get(name)


def resolve_level(level: int | str | None = None) -> int:
    """Explicit level, else ``CHECKPRINT_LOG_LEVEL``, else ``INFO``.

    Unrecognized names fall through to the next source.
    """

    for candidate in (level, os.getenv(LOG_LEVEL_ENV)):
        resolved = _level_from(candidate)
        if resolved is not None:
            return resolved
    return logging.INFO


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] | None = None,
) -> None:
    """Attach a single stream handler to the ``checkprint`` logger (once)."""

    global _handler
    if _handler is not None:
        return

    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    for h in list(pkg_logger.handlers):
        if isinstance(h, logging.NullHandler):
            pkg_logger.removeHandler(h)

    resolved = resolve_level(level)
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))

    pkg_logger.setLevel(resolved)
    pkg_logger.addHandler(handler)
    pkg_logger.propagate = False
    _handler = handler


def reset_logging() -> None:
    """Undo :func:`configure_logging` so a host can configure again."""

    global _handler
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if _handler is not None:
        pkg_logger.removeHandler(_handler)
        _handler = None
    pkg_logger.setLevel(logging.NOTSET)
    pkg_logger.propagate = True


def get_logger(name: str) -> logging.Logger:
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if _handler is None and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)


__all__ = ["configure_logging", "get_logger", "reset_logging", "resolve_level"]
