"""Centralized logging configuration for the ``daily_balance`` package.

- ``configure_logging(...)``: attach exactly one handler to the package root
  logger (``"daily_balance"``). Entrypoints call it once at startup: one-shot
  commands log to ``stderr``; the interactive UI passes ``log_file`` so log
  lines never interleave with the prompt.
- ``get_logger(name)``: acquire a logger, installing a ``NullHandler`` on the
  package root until an entrypoint configures it.

Library modules never attach handlers of their own.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import IO

_PKG_LOGGER_NAME = "daily_balance"
_DEFAULT_FMT = "%(asctime)s %(name)s %(levelname)s %(message)s"
_CONFIGURED = False


def _level_from_name(name: str) -> int | None:
    name = name.strip().upper()
    if name.isdigit():
        return int(name)
    numeric = logging.getLevelNamesMapping().get(name)
    return numeric if isinstance(numeric, int) else None


def _parse_level(level: int | str | None) -> int:
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        resolved = _level_from_name(level)
        if resolved is not None:
            return resolved
    env_val = os.getenv("DAILY_BALANCE_LOG_LEVEL")
    if env_val:
        resolved = _level_from_name(env_val)
        if resolved is not None:
            return resolved
    return logging.INFO


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] = sys.stderr,
    log_file: Path | None = None,
) -> None:
    """Configure the package root logger exactly once.

    Parameters
    ----------
    level:
        ``int`` or level name. ``None`` falls back to ``DAILY_BALANCE_LOG_LEVEL``,
        then ``logging.INFO``.
    fmt:
        Optional format string; defaults to ``"%(asctime)s %(name)s %(levelname)s %(message)s"``.
    stream:
        Destination for the ``StreamHandler`` when ``log_file`` is not given.
    log_file:
        Append to this file instead of writing to ``stream``. Parent
        directories are created.
    """

    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(_PKG_LOGGER_NAME)
    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    handler: logging.Handler
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler(stream)
    resolved = _parse_level(level)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(fmt or _DEFAULT_FMT))

    logger.setLevel(resolved)
    logger.addHandler(handler)
    # Avoid double emission via the root logger.
    logger.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger by name with library-safe defaults."""

    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
