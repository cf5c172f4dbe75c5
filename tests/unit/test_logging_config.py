"""
Unit tests for logging configuration
"""

import logging

from chronos_rrule.logging_config import _resolve_level, setup_logging


class TestSetupLogging:
    def test_returns_caller_logger(self):
        """Test the logger is named after the calling module"""
        assert setup_logging().name == __name__

    def test_resolve_level(self):
        """Test level names and numbers"""
        assert _resolve_level("debug") == logging.DEBUG
        assert _resolve_level(logging.WARNING) == logging.WARNING
        assert _resolve_level("chatty") == logging.INFO
