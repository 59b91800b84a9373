"""Opt-in file logging for the command-line tool."""

from __future__ import annotations

import logging
from pathlib import Path

DEFAULT_LOG_FILE = Path("git-utils.log")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(path: Path = DEFAULT_LOG_FILE, level: int = logging.INFO) -> logging.Handler:
    """
    Send git-utils log records to ``path``, truncating it first.

    Records never go to the terminal, which the picker draws on.
    """
    handler = logging.FileHandler(path, mode="w", encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    package_logger = logging.getLogger("git_utils")
    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    return handler
