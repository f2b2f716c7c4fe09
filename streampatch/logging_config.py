"""Shared logging configuration helpers."""

from __future__ import annotations

import logging
import sys
from logging import Handler
from pathlib import Path

from streampatch.config import Config

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

PATCHING_LOGGER = "streampatch.patching"
# httpx logs every request line at INFO.
HTTP_LOGGERS = ("httpx", "httpcore")


def _level(name: str, fallback: int) -> int:
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else fallback


def configure_logging(config: Config) -> None:
    """Configure application logging outputs from config.

    The root level comes from ``log_level``. ``patching_log_level`` sets the
    block-location loggers independently so edit tracing can be raised
    without the rest of the stream. HTTP client chatter stays at WARNING
    unless ``debug_mode`` is on.
    """
    log_level = _level(config.logging.log_level, logging.INFO)
    debug_mode = bool(getattr(config.developer, "debug_mode", False))

    log_file = Path(config.logging.log_file).expanduser()
    log_file.parent.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(LOG_FORMAT)
    handlers: list[Handler] = [logging.FileHandler(log_file, encoding="utf-8")]
    if debug_mode:
        handlers.append(logging.StreamHandler(sys.stderr))
    for handler in handlers:
        handler.setFormatter(formatter)

    logging.basicConfig(level=log_level, handlers=handlers, force=True)

    patching_level = config.logging.patching_log_level
    logging.getLogger(PATCHING_LOGGER).setLevel(
        _level(patching_level, log_level) if patching_level else logging.NOTSET
    )
    for name in HTTP_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if debug_mode else logging.WARNING)

    logging.getLogger(__name__).info(
        "Logging initialized level=%s patching_level=%s file=%s",
        logging.getLevelName(log_level),
        patching_level or "-",
        log_file,
    )
