"""Logging helpers shared by the scanner, session and CLI."""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

_ROOT = "lexiview"
_CONSOLE_FORMAT = "[lexiview] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger nested under ``lexiview`` (``lexiview.<name>``)."""
    return logging.getLogger(f"{_ROOT}.{name}" if name else _ROOT)


def configure_logging(*, verbose: bool = False, log_file: Path | None = None) -> logging.Logger:
    """Install console (and optional file) handlers on the lexiview logger."""
    level = logging.DEBUG if verbose else logging.INFO

    logger = logging.getLogger(_ROOT)
    logger.setLevel(level)
    logger.propagate = False

    # The CLI and the service may configure twice in one process.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is not None:
        sink = logging.FileHandler(log_file, encoding="utf-8")
        sink.setLevel(level)
        sink.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(sink)

    return logger


@contextmanager
def log_duration(logger: logging.Logger, label: str) -> Iterator[None]:
    """Log how long the wrapped block took, in milliseconds, at INFO level."""
    started = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info("%s in %.0fms", label, elapsed_ms)


__all__ = ["configure_logging", "get_logger", "log_duration"]
