"""Unit tests for logging configuration."""
from __future__ import annotations

import logging

from mock_pyth import logging_setup
from mock_pyth.logging_setup import LOG_FORMAT, configure_logging


class TestConfigureLogging:
    def test_sets_debug_level(self) -> None:
        configure_logging("DEBUG")
        assert logging.getLogger().level == logging.DEBUG

    def test_lowercase_level_accepted(self) -> None:
        configure_logging("warning")
        assert logging.getLogger().level == logging.WARNING

    def test_invalid_level_defaults_to_info(self) -> None:
        configure_logging("NONEXISTENT")
        assert logging.getLogger().level == logging.INFO

    def test_silences_aiohttp(self) -> None:
        configure_logging("DEBUG")
        assert logging.getLogger("aiohttp").level == logging.WARNING

    def test_installs_one_formatted_handler(self) -> None:
        configure_logging("INFO")
        configure_logging("DEBUG")
        handler = logging_setup._handler
        root_handlers = logging.getLogger().handlers
        assert handler is not None
        assert root_handlers.count(handler) == 1
        assert handler.formatter is not None
        assert handler.formatter._fmt == LOG_FORMAT

    def test_reinstalls_handler_after_removal(self) -> None:
        configure_logging("INFO")
        root = logging.getLogger()
        root.removeHandler(logging_setup._handler)
        configure_logging("INFO")
        assert logging_setup._handler in root.handlers

    def test_record_format(self) -> None:
        configure_logging("INFO")
        record = logging.LogRecord(
            "mock_pyth.oracle", logging.INFO, __file__, 1, "Batch %d processed", (3,), None
        )
        line = logging_setup._handler.format(record)
        assert line.endswith("INFO     mock_pyth.oracle: Batch 3 processed")
