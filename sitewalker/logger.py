# === FILE: sitewalker/logger.py ===
"""Site‑wide logging configuration for the **SiteWalker** project.

Highlights
----------
* Unified key/value format for console and optional file output (with rotation).
* Single, importable instance :data:`logger` – simply::

      from sitewalker.logger import logger
      logger.info("fetched a page", extra={"page": url, "status": "200 OK"})

  Every ``extra`` field is appended to the line as ``key=value``.
* Re‑configurable at runtime via :func:`configure`; errors only by default,
  everything under ``--debug``.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Union

import click

# --------------------------------------------------------------------------- #
# Constants & basic types                                                     #
# --------------------------------------------------------------------------- #

_LOGGER_NAME: Final[str] = "SiteWalker"
_DEFAULT_LEVEL: Final[str] = "ERROR"

# attributes present on every LogRecord; anything else came in through ``extra``
_RESERVED: Final[frozenset[str]] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", None, None)).keys()
) | {"message", "asctime"}

_LEVEL_COLORS: Final[dict[int, str]] = {
    logging.DEBUG: "magenta",
    logging.INFO: "blue",
    logging.WARNING: "yellow",
    logging.ERROR: "red",
    logging.CRITICAL: "red",
}

_LevelT = Union[int, str]


class KeyValueFormatter(logging.Formatter):
    """``[LEVEL] message key=value key=value`` with optional ANSI colours."""

    def __init__(self, *, color: bool = True) -> None:
        super().__init__()
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        level = f"[{record.levelname}]"
        fields = " ".join(
            f"{key}={value}"
            for key, value in record.__dict__.items()
            if key not in _RESERVED and not key.startswith("_")
        )
        if self.color:
            level = click.style(level, fg=_LEVEL_COLORS.get(record.levelno, "white"))
            if fields:
                fields = click.style(fields, dim=True)
        line = f"{level} {record.getMessage()}"
        if fields:
            line = f"{line} {fields}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


# --------------------------------------------------------------------------- #
# Helper builders                                                             #
# --------------------------------------------------------------------------- #


def _stdout_handler() -> logging.StreamHandler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(KeyValueFormatter(color=True))
    return handler


def _file_handler(file: Path | str) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        filename=str(file),
        maxBytes=5 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    handler.setFormatter(KeyValueFormatter(color=False))
    return handler


# --------------------------------------------------------------------------- #
# Public API                                                                  #
# --------------------------------------------------------------------------- #


def configure(
    *,
    level: _LevelT = _DEFAULT_LEVEL,
    log_file: str | Path | None = None,
    replace_handlers: bool = True,
) -> logging.Logger:
    """(Re)configure the global project logger.

    Parameters
    ----------
    level
        Numeric or textual logging level (e.g. ``"DEBUG"``).
    log_file
        Path to a logfile. *None* → console‑only output.
    replace_handlers
        *True* – remove existing handlers; *False* – just append new one(s).
    """
    lg = logging.getLogger(_LOGGER_NAME)
    lg.setLevel(level)

    if replace_handlers:
        lg.handlers.clear()

    lg.addHandler(_stdout_handler())

    if log_file is not None:
        lg.addHandler(_file_handler(log_file))

    lg.propagate = False
    return lg


def init_logging(debug: bool = False, log_file: str | Path | None = None) -> logging.Logger:
    """Configure from the ``--debug`` flag: DEBUG when set, ERROR otherwise."""
    return configure(level="DEBUG" if debug else _DEFAULT_LEVEL, log_file=log_file)


# --------------------------------------------------------------------------- #
# Ready‑to‑use instance                                                       #
# --------------------------------------------------------------------------- #

logger: logging.Logger = init_logging()

__all__ = ["logger", "configure", "init_logging", "KeyValueFormatter"]
