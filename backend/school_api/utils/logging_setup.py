"""Logging configuration and structured log helpers.

`setup_logging` configures the `school_api` logger tree once: a console
handler, and when a log directory is configured, `combined.log` (all
records) and `error.log` (errors only). Structured records follow the
`"<event> <json>"` convention so they stay greppable and machine
readable at the same time.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

LOGGER_NAME = "school_api"
_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(level: str = "INFO", log_dir: str | None = None) -> logging.Logger:
    """Configure the application logger and return it.

    Calling it again is a no-op, so building several apps in one
    process (tests) does not stack handlers.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    if logger.handlers:
        return logger

    formatter = logging.Formatter(fmt=_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S%z")
    console = logging.StreamHandler()
    console.setFormatter(formatter)
    logger.addHandler(console)

    if log_dir:
        root = Path(log_dir).expanduser().resolve()
        root.mkdir(parents=True, exist_ok=True)
        combined = logging.FileHandler(root / "combined.log", encoding="utf-8")
        combined.setFormatter(formatter)
        logger.addHandler(combined)
        errors = logging.FileHandler(root / "error.log", encoding="utf-8")
        errors.setLevel(logging.ERROR)
        errors.setFormatter(formatter)
        logger.addHandler(errors)
    return logger


def log_event(logger: logging.Logger, event: str, payload: dict[str, Any], level: int = logging.INFO, exc_info=None) -> None:
    """Emit `event` with a compact JSON payload."""
    logger.log(level, "%s %s", event, json.dumps(payload, ensure_ascii=True, default=str), exc_info=exc_info)
