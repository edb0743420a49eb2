"""Console logging for the ``cropstudio`` logger tree."""

from __future__ import annotations

import logging
import os
import sys

from .config import LOG_LEVEL_ENV

_HANDLER_NAME = "cropstudio-console"


def configure_logging(level: int | str | None = None) -> logging.Logger:
    """Install a single stderr handler on the ``cropstudio`` logger.

    Calling this more than once only adjusts the level and rebinds the
    handler to the current ``sys.stderr``.  The environment
    variable ``CROPSTUDIO_LOG_LEVEL`` wins over *level* when set.
    """

    env_level = os.environ.get(LOG_LEVEL_ENV)
    if env_level:
        level = env_level
    if level is None:
        level = logging.INFO
    if isinstance(level, str):
        level = logging.getLevelName(level.strip().upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger("cropstudio")
    for handler in logger.handlers:
        if getattr(handler, "name", None) == _HANDLER_NAME:
            if isinstance(handler, logging.StreamHandler):
                handler.setStream(sys.stderr)
            handler.setLevel(level)
            logger.setLevel(level)
            return logger

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.name = _HANDLER_NAME
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger
