from __future__ import annotations

import logging

from . import config

# package-wide logger name
LOGGER_NAME = "sudokusolver"


def get_logger(name: str = "") -> logging.Logger:
    """
    Return the package logger, or a child of it when `name` is given.

    The first call attaches a stream handler to the package logger with the
    level from config; later calls reuse it.
    """
    root = logging.getLogger(LOGGER_NAME)

    if not root.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"
        )
        handler.setFormatter(formatter)
        root.addHandler(handler)
        root.setLevel(getattr(logging, config.LOG_LEVEL, logging.INFO))

    return root.getChild(name) if name else root
