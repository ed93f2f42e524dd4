"""Tests for logging.py - logger configuration."""

import logging


def test_logger_exists():
    """Test that the spanrite logger is created."""
    from spanrite.logging import logger

    assert logger is not None
    assert isinstance(logger, logging.Logger)
    assert logger.name == "spanrite"


def test_logger_level():
    """Test that the logger has INFO level set."""
    from spanrite.logging import logger

    assert logger.level == logging.INFO


def test_library_adds_no_handlers():
    """Configuring output is left to the application."""
    from spanrite.logging import logger

    assert logger.handlers == []


def test_logger_can_log():
    """Test that the logger can log messages."""
    from spanrite.logging import logger

    # Should not raise any exceptions
    logger.info("Test info message")
    logger.warning("Test warning message")
    logger.error("Test error message")
