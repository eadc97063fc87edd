"""Logging setup for the gorn CLI."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping

from rich.console import Console
from rich.logging import RichHandler

from .config import LOG_LEVEL_ENV

_CONFIGURED_FLAG_ATTR = "_gorn_configured"
_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def parse_level(raw: str | None, default: int = logging.WARNING) -> int:
    if not raw:
        return default
    return _LEVEL_MAP.get(raw.strip().upper(), default)


def configure_logging(
    env: Mapping[str, str] | None = None,
    *,
    force: bool = False,
) -> logging.Logger:
    """Attach a stderr RichHandler to the ``gorn`` logger once.

    The level is read from ``GORN_LOG_LEVEL`` and defaults to WARNING, so the
    menu pipeline stays quiet unless asked otherwise.
    """

    logger = logging.getLogger("gorn")
    if getattr(logger, _CONFIGURED_FLAG_ATTR, False) and not force:
        return logger
    source = os.environ if env is None else env
    for handler in list(logger.handlers):
        if getattr(handler, _CONFIGURED_FLAG_ATTR, False):
            logger.removeHandler(handler)
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=False,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    setattr(handler, _CONFIGURED_FLAG_ATTR, True)
    logger.addHandler(handler)
    logger.setLevel(parse_level(source.get(LOG_LEVEL_ENV)))
    logger.propagate = False
    setattr(logger, _CONFIGURED_FLAG_ATTR, True)
    return logger
