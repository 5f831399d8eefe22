"""Logging setup for the omx-remote service.

Player supervision, command dispatch and HTTP requests all log through the
root logger configured here; per-request aiohttp access lines are muted
unless asked for.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

ACCESS_LOGGER = "aiohttp.access"


def configure_logging(
    level: str = "INFO", *, log_path: Optional[Path] = None, log_access: bool = False
) -> None:
    """Install the service's console and optional file handlers.

    Parameters
    ----------
    level:
        Log level name from the ``[logging]`` section, e.g. "INFO".
    log_path:
        Optional file that receives a copy of every record, such as player
        exit statuses and rejected commands.
    log_access:
        When true, remote-control HTTP requests are logged one line each.
    """

    logging.captureWarnings(True)

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )

    if log_path:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(file_handler)

    access_level = logging.NOTSET if log_access else logging.WARNING
    logging.getLogger(ACCESS_LOGGER).setLevel(access_level)
