"""Tests for logging configuration."""

import logging

from members_api.app_logging import configure_logging


def test_configure_logging_idempotent() -> None:
    logger = logging.getLogger("members_api")
    logger.handlers.clear()

    configure_logging()
    first_count = len(logger.handlers)

    configure_logging("debug")
    second_count = len(logger.handlers)

    assert first_count == 1
    assert second_count == 1
    assert logger.level == logging.DEBUG


def test_configure_logging_uses_level_name_format() -> None:
    logger = logging.getLogger("members_api")
    logger.handlers.clear()

    configure_logging()

    formatter = logger.handlers[0].formatter
    assert formatter is not None
    assert formatter._fmt == "%(levelname)s: %(name)s: %(message)s"
