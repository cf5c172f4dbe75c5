"""
Test configuration and fixtures for chronos-rrule
"""

import logging
import tempfile
from datetime import datetime
from pathlib import Path
from unittest.mock import patch

import pytest
import pytz

from chronos_rrule.calendar import CalendarContext
from chronos_rrule.config import ENV_OVERRIDES, ConfigManager
from chronos_rrule.models import Weekday


@pytest.fixture
def clean_env(monkeypatch):
    """Remove chronos-rrule environment overrides"""
    for variable in ENV_OVERRIDES:
        monkeypatch.delenv(variable, raising=False)
    return monkeypatch


@pytest.fixture(autouse=True)
def restore_package_log_level():
    """Undo log level changes made by ConfigManager"""
    package_logger = logging.getLogger("chronos_rrule")
    level = package_logger.level
    yield
    package_logger.setLevel(level)


@pytest.fixture
def temp_config_dir():
    """Create temporary config directory"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def mock_config_manager(temp_config_dir, clean_env):
    """ConfigManager reading from a temp home directory"""
    with patch("chronos_rrule.config.Path.home") as mock_home:
        mock_home.return_value = temp_config_dir
        yield ConfigManager()


@pytest.fixture
def utc_calendar():
    """UTC calendar, weeks starting on Monday"""
    return CalendarContext("UTC")


@pytest.fixture
def new_york_calendar():
    """America/New_York calendar, weeks starting on Monday"""
    return CalendarContext("America/New_York")


@pytest.fixture
def sunday_calendar():
    """UTC calendar, weeks starting on Sunday"""
    return CalendarContext("UTC", first_weekday=Weekday.SUNDAY)


@pytest.fixture
def new_year_2025():
    """Wednesday 2025-01-01 09:00 UTC"""
    return datetime(2025, 1, 1, 9, 0, tzinfo=pytz.UTC)
