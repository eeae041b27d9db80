"""Logging setup shared by iglu_client entry points."""

from __future__ import annotations

import logging
from pathlib import Path

PACKAGE_LOGGER = "iglu_client"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: int = logging.INFO, log_paths: list[str] | None = None) -> logging.Logger:
    """Set the package logger level and install root handlers if none exist.

    The level is applied to the ``iglu_client`` logger only, so an
    application that already configured logging keeps its own root level.
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(level)
    root = logging.getLogger()
    if root.handlers:
        return package_logger
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    for entry in log_paths or []:
        path = Path(entry)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path, encoding="utf-8"))
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S", handlers=handlers)
    return package_logger
