"""Logging for gradmin.

Module loggers live under the ``gradmin`` namespace and hand their records
to the package logger, which owns the only handler and does not propagate
to the root logger.
"""

from __future__ import annotations

import logging
import sys
from typing import IO, Optional

_PACKAGE = "gradmin"
_FORMAT = "[%(levelname)s] %(name)s: %(message)s"

_handler: Optional[logging.StreamHandler] = None


def _package_logger() -> logging.Logger:
    global _handler
    logger = logging.getLogger(_PACKAGE)
    if _handler is None:
        _handler = logging.StreamHandler(sys.stderr)
        _handler.setFormatter(logging.Formatter(_FORMAT))
        logger.addHandler(_handler)
        logger.setLevel(logging.WARNING)
        logger.propagate = False
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return the logger for ``name`` inside the ``gradmin`` namespace.

    Args:
        name: Module name, typically ``__name__``. Names outside the package
            are prefixed with ``gradmin.``; None gives the package logger.

    Example:
        >>> from gradmin.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.info("Starting line search")
    """
    package = _package_logger()
    if name is None or name == _PACKAGE:
        return package
    if not name.startswith(_PACKAGE + "."):
        name = f"{_PACKAGE}.{name}"
    return logging.getLogger(name)


def configure_logging(level: int | str = logging.WARNING, stream: Optional[IO[str]] = None) -> None:
    """Set the level of the gradmin loggers and the stream they write to.

    Args:
        level: Level number or name such as ``"DEBUG"``.
        stream: Destination of the records; ``sys.stderr`` when omitted.
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown logging level {level!r}.")
        level = resolved
    package = _package_logger()
    package.setLevel(level)
    _handler.setStream(sys.stderr if stream is None else stream)


__all__ = ["configure_logging", "get_logger"]
