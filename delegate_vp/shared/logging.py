"""
Lightweight logging utilities for the delegate-vp toolkit.

Provides a consistent logger with a simple console handler and optional
log-level override via the DVP_LOG_LEVEL environment variable.
"""

import logging
import os
from typing import Optional

_DEFAULT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

ROOT_LOGGER_NAME = "delegate_vp"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a configured logger with a stream handler.

    Loggers are children of the ``delegate_vp`` logger, which gets a
    StreamHandler with a plain-text formatter the first time it is needed.
    Subsequent calls reuse the existing configuration.

    Log level can be overridden with the DVP_LOG_LEVEL environment variable.
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_DEFAULT_FORMAT))
        root.addHandler(handler)

        level_str = os.getenv("DVP_LOG_LEVEL", "INFO").upper()
        root.setLevel(getattr(logging, level_str, logging.INFO))

    if not name or name == ROOT_LOGGER_NAME:
        return root
    if not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def set_log_level(level: int) -> None:
    """Override the level of every toolkit logger (used by --quiet)."""
    get_logger().setLevel(level)
