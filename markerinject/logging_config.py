# markerinject/logging_config.py
"""
Logging setup for applications using markerinject.

Library modules only create loggers (logging.getLogger(__name__)) and never
add handlers; call setup_logger() from application code to see their output.
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path

DEFAULT_LOG_LEVEL = logging.INFO

LOGGER_NAME = "markerinject"


def setup_logger(
    name: str = LOGGER_NAME,
    level: int = DEFAULT_LOG_LEVEL,
    log_file: str | None = None,
    console: bool = True,
) -> logging.Logger:
    """
    Configure and return the markerinject logger.

    Existing handlers on that logger are replaced, so calling this twice
    does not duplicate output.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.handlers.clear()

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode="a")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Logger under the markerinject namespace (e.g. get_logger("engine") -> markerinject.engine)."""
    if not name:
        return logging.getLogger(LOGGER_NAME)
    if name == LOGGER_NAME or name.startswith(LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
