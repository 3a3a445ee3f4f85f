"""Tests for lexiview.logging."""

from __future__ import annotations

import logging
from pathlib import Path

from lexiview.logging import configure_logging, get_logger, log_duration


def test_get_logger_nests_under_package() -> None:
    assert get_logger("session").name == "lexiview.session"
    assert get_logger().name == "lexiview"


def test_configure_logging_levels_and_file_sink(tmp_path: Path) -> None:
    log_file = tmp_path / "lexiview.log"

    logger = configure_logging(log_file=log_file)
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 2

    with log_duration(get_logger("test"), "Finished"):
        pass
    get_logger("test").debug("hidden at info")
    for handler in logger.handlers:
        handler.flush()

    text = log_file.read_text(encoding="utf-8")
    assert "lexiview.test: Finished in" in text
    assert "hidden at info" not in text

    for handler in logger.handlers:
        handler.close()
    assert configure_logging(verbose=True).level == logging.DEBUG
    assert len(logging.getLogger("lexiview").handlers) == 1
