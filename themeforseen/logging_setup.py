"""Logging configuration for the dev server and CLI.

Console only: the server is a short-lived foreground process, so there is
no log file.  uvicorn's own loggers propagate into the same handler.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"

_configured = False


def configure_logging(level: str | int = "INFO", stream=None) -> None:
    """Install a single stream handler on the root logger (safe to call repeatedly)."""
    global _configured
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)
    if _configured:
        return

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    _configured = True
