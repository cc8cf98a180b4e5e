"""Logging setup for the command-line entry points."""

import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "repometer"

_LEVELS = {
    1: logging.INFO,
    2: logging.DEBUG,
}


def configure_logging(level: int = 0, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure the package logger.

    Level 0 silences it, 1 logs informational messages, 2 adds debug output.
    With a log file the file is truncated and written as UTF-8; otherwise
    records go to stderr through rich.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = False

    if level <= 0:
        if log_file:
            Path(log_file).expanduser().write_text("", encoding="utf-8")
        logger.addHandler(logging.NullHandler())
        logger.setLevel(logging.CRITICAL + 1)
        return logger

    if log_file:
        path = Path(log_file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(path, mode="w", encoding="utf-8")
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
    else:
        handler = RichHandler(console=Console(stderr=True), show_path=False)

    logger.addHandler(handler)
    logger.setLevel(_LEVELS.get(level, logging.DEBUG))
    return logger
