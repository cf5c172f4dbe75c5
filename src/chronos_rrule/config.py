"""
Configuration management for chronos-rrule
"""

import json
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from .calendar import CalendarContext, resolve_timezone
from .codec import RRuleCodec
from .exceptions import InvalidConfigError, UnknownTimeZoneError
from .logging_config import setup_logging
from .models import RecurrenceRule, Weekday
from .occurrences import occurrences
from .validation import DEFAULT_MAX_RULE_LENGTH

logger = setup_logging()

PACKAGE_LOGGER = "chronos_rrule"

# environment variable -> EngineConfig field
ENV_OVERRIDES = {
    "CHRONOS_RRULE_TIMEZONE": "timezone",
    "CHRONOS_RRULE_FIRST_WEEKDAY": "first_weekday",
    "CHRONOS_RRULE_DEFAULT_LIMIT": "default_limit",
    "CHRONOS_RRULE_LOG_LEVEL": "log_level",
}


class EngineConfig(BaseModel):
    """Main configuration"""

    timezone: str = Field("UTC", description="Calendar timezone (IANA identifier)")
    first_weekday: Weekday = Field(Weekday.MONDAY, description="First day of the week")
    default_limit: int = Field(366, ge=0, description="Default result ceiling")
    max_rule_length: int = Field(
        DEFAULT_MAX_RULE_LENGTH, ge=16, description="Longest accepted rule text"
    )
    log_level: str = Field("INFO", description="Logging level name")

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        try:
            resolve_timezone(v)
        except UnknownTimeZoneError as e:
            raise ValueError(e.message) from e
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.upper()
        if v not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level '{v}'")
        return v


class ConfigManager:
    """Manage chronos-rrule configuration"""

    def __init__(self):
        self.config_dir = Path.home() / ".chronos_rrule"
        self.config_file = self.config_dir / "config.json"
        self.config: EngineConfig = EngineConfig()
        self._load_config()

    def _load_config(self):
        """Load configuration from file, then apply environment overrides"""
        if self.config_file.exists():
            try:
                with open(self.config_file, "r") as f:
                    data = json.load(f)
                self.config = EngineConfig(**data)
                logger.info(f"Loaded configuration from {self.config_file}")
            except (OSError, ValueError, TypeError) as e:
                # json.JSONDecodeError and pydantic's ValidationError are ValueErrors
                logger.error(f"Error loading config file: {e}")

        for variable, field in ENV_OVERRIDES.items():
            value = os.getenv(variable)
            if not value:
                continue
            try:
                self.update(**{field: value})
                logger.info(f"Applied {variable} from environment")
            except InvalidConfigError as e:
                logger.error(f"Invalid environment variable {variable}: {e.message}")

        self._apply_log_level()

    def update(self, **changes) -> EngineConfig:
        """Validate and apply configuration changes

        Raises:
            InvalidConfigError: if the resulting configuration is invalid
        """
        try:
            self.config = EngineConfig(**{**self.config.model_dump(), **changes})
        except ValidationError as e:
            raise InvalidConfigError(str(e), config_path=str(self.config_file)) from e
        self._apply_log_level()
        return self.config

    def _apply_log_level(self):
        logging.getLogger(PACKAGE_LOGGER).setLevel(self.config.log_level)

    def save_config(self):
        """Save configuration to file"""
        self.config_dir.mkdir(exist_ok=True)

        with open(self.config_file, "w") as f:
            json.dump(self.config.model_dump(mode="json"), f, indent=2)
        logger.info("Configuration saved")

    def calendar(self, timezone: Optional[str] = None) -> CalendarContext:
        """Calendar for the configured (or given) timezone"""
        if timezone:
            return CalendarContext(timezone=timezone, first_weekday=self.config.first_weekday)
        return CalendarContext.from_config(self.config)

    def codec(self, timezone: Optional[str] = None) -> RRuleCodec:
        """Codec using the configured calendar and rule length limit"""
        return RRuleCodec(self.calendar(timezone), max_length=self.config.max_rule_length)

    def occurrences(
        self,
        rule: RecurrenceRule,
        start: datetime,
        until: Optional[datetime] = None,
        limit: Optional[int] = None,
        timezone: Optional[str] = None,
    ) -> List[datetime]:
        """Expand ``rule`` in the configured calendar, capped at
        ``default_limit`` unless ``limit`` is given"""
        return occurrences(
            rule,
            start,
            until=until,
            limit=self.config.default_limit if limit is None else limit,
            calendar=self.calendar(timezone),
        )
