"""Unit tests for the logging configuration module.

This test module validates the structured logging configuration,
context binding, and correlation ID management.
"""

import json
import logging

import pytest
import structlog

from routegraph.config import RouteGraphConfig
from routegraph.log_config import (
    bind_context,
    bind_correlation_id,
    clear_context,
    configure_from_config,
    configure_logging,
    get_logger,
    unbind_context,
    unbind_correlation_id,
)


def _event(record: logging.LogRecord) -> dict:
    """Decode the JSON payload rendered into a stdlib record."""
    return json.loads(record.getMessage())


class TestLoggingConfiguration:
    """Test cases for logging configuration."""

    def test_configure_logging_info_level(self):
        """Test logging configuration with INFO level."""
        configure_logging(level="INFO", json_logs=True)
        assert logging.getLogger().level == logging.INFO

    def test_configure_logging_debug_level(self):
        """Test logging configuration with DEBUG level."""
        configure_logging(level="debug", json_logs=True)
        assert logging.getLogger().level == logging.DEBUG

    def test_configure_logging_invalid_level(self):
        """Test logging configuration with invalid level."""
        with pytest.raises(ValueError, match="Invalid log level"):
            configure_logging(level="INVALID", json_logs=True)

    def test_configure_logging_console_renderer(self):
        """Test logging configuration with console renderer."""
        configure_logging(level="INFO", json_logs=False)
        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)

    def test_configure_logging_json_renderer(self):
        """Test logging configuration with JSON renderer."""
        configure_logging(level="INFO", json_logs=True)
        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_configure_from_config(self):
        """Test configuration driven by RouteGraphConfig."""
        configure_from_config(RouteGraphConfig(logging_level="WARNING", json_logs=False))

        assert logging.getLogger().level == logging.WARNING
        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)

    def test_get_logger_without_name(self):
        """Test getting a logger without a name."""
        configure_logging(level="INFO", json_logs=True)
        assert get_logger() is not None


class TestContextBinding:
    """Test cases for context binding functionality."""

    def setup_method(self):
        """Set up test environment before each test."""
        configure_logging(level="INFO", json_logs=True)
        clear_context()

    def teardown_method(self):
        """Clean up after each test."""
        clear_context()

    def test_bind_correlation_id(self, caplog):
        """Test binding a correlation ID to the logging context."""
        caplog.set_level(logging.INFO)
        logger = get_logger("test")

        bind_correlation_id("route-42")
        logger.info("route_requested", origin="A", destination="B")

        assert len(caplog.records) == 1
        event = _event(caplog.records[0])
        assert event["event"] == "route_requested"
        assert event["correlation_id"] == "route-42"
        assert event["origin"] == "A"
        assert event["level"] == "info"

    def test_unbind_correlation_id(self, caplog):
        """Test unbinding the correlation ID from the logging context."""
        caplog.set_level(logging.INFO)
        logger = get_logger("test")

        bind_correlation_id("route-42")
        logger.info("with_correlation")

        unbind_correlation_id()
        logger.info("without_correlation")

        first, second = (_event(record) for record in caplog.records)
        assert first["correlation_id"] == "route-42"
        assert "correlation_id" not in second

    def test_bind_context_multiple_variables(self, caplog):
        """Test binding multiple context variables."""
        caplog.set_level(logging.INFO)
        logger = get_logger("test")

        bind_context(map_name="porto", request_id="r-17", hops=5)
        logger.info("search_started")

        event = _event(caplog.records[0])
        assert event["map_name"] == "porto"
        assert event["request_id"] == "r-17"
        assert event["hops"] == 5

    def test_unbind_context_specific_keys(self, caplog):
        """Test unbinding specific context variables."""
        caplog.set_level(logging.INFO)
        logger = get_logger("test")

        bind_context(map_name="porto", request_id="r-17")
        logger.info("with_full_context")

        unbind_context("request_id")
        logger.info("without_request_id")

        first, second = (_event(record) for record in caplog.records)
        assert first["request_id"] == "r-17"
        assert "request_id" not in second
        assert second["map_name"] == "porto"

    def test_clear_context(self, caplog):
        """Test clearing all context variables."""
        caplog.set_level(logging.INFO)
        logger = get_logger("test")

        bind_context(map_name="porto", request_id="r-17")
        logger.info("with_context")

        clear_context()
        logger.info("without_context")

        second = _event(caplog.records[1])
        assert "map_name" not in second
        assert "request_id" not in second


class TestStructuredLogging:
    """Test cases for structured logging output."""

    def setup_method(self):
        """Set up test environment before each test."""
        configure_logging(level="INFO", json_logs=True)
        clear_context()

    def teardown_method(self):
        """Clean up after each test."""
        clear_context()

    def test_callsite_and_timestamp(self, caplog):
        """Test timestamp and callsite information are added."""
        caplog.set_level(logging.INFO)
        logger = get_logger("test")

        logger.info("callsite_check")

        event = _event(caplog.records[0])
        assert "timestamp" in event
        assert event["func_name"] == "test_callsite_and_timestamp"
        assert event["module"] == "test_logging"

    def test_log_with_exception(self, caplog):
        """Test logging with exception information."""
        caplog.set_level(logging.ERROR)
        logger = get_logger("test")

        def _raise_test_error():
            msg = "Test exception"
            raise ValueError(msg)

        try:
            _raise_test_error()
        except ValueError:
            logger.exception("error_occurred", operation="test")

        event = _event(caplog.records[0])
        assert event["event"] == "error_occurred"
        assert "ValueError: Test exception" in event["exception"]

    def test_log_levels(self, caplog):
        """Test different log levels."""
        configure_logging(level="DEBUG", json_logs=True)
        caplog.set_level(logging.DEBUG)
        logger = get_logger("test")

        logger.debug("debug_message")
        logger.info("info_message")
        logger.warning("warning_message")
        logger.error("error_message")

        assert [record.levelno for record in caplog.records] == [
            logging.DEBUG,
            logging.INFO,
            logging.WARNING,
            logging.ERROR,
        ]

    def test_level_filtering(self, caplog):
        """Test events below the configured level are dropped."""
        configure_logging(level="WARNING", json_logs=True)
        caplog.set_level(logging.WARNING)
        logger = get_logger("test")

        logger.info("dropped")
        logger.warning("kept")

        assert [_event(record)["event"] for record in caplog.records] == ["kept"]
