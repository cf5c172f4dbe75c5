"""
chronos-rrule Exception Hierarchy

This module provides the error types raised by the rule codec, the calendar
service and the occurrence generators, plus a small decorator for callers
that prefer the "log and return a default" style over exceptions.
"""

import functools
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional, TypeVar, Union

T = TypeVar("T")


# Base Exception
class ChronosRRuleError(Exception):
    """
    Base exception for all chronos-rrule errors.

    Provides structured error information including:
    - Error code for categorization
    - Detailed context information (offending input, key name, ...)
    - Timestamp for debugging
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging/API responses"""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
            "timestamp": self.timestamp,
        }

    def __str__(self):
        return f"{self.error_code}: {self.message}"


# Rule codec errors
class RuleParseError(ChronosRRuleError, ValueError):
    """Raised when a recurrence rule string cannot be parsed.

    The whole parse fails; nothing of a malformed rule is applied.
    """

    def __init__(
        self,
        rrule: str,
        reason: str,
        position: Optional[int] = None,
        key: Optional[str] = None,
        fragment: Optional[str] = None,
        error_code: str = "INVALID_RRULE",
    ):
        details: Dict[str, Any] = {"rrule": rrule, "reason": reason}
        if position is not None:
            details["position"] = position
        if key is not None:
            details["key"] = key
        if fragment is not None:
            details["fragment"] = fragment

        message = f"Invalid recurrence rule: {reason}"
        if position is not None:
            message += f" (at position {position})"

        super().__init__(message, error_code=error_code, details=details)
        self.rrule = rrule
        self.reason = reason
        self.position = position
        self.key = key
        self.fragment = fragment


class RuleGrammarError(RuleParseError):
    """Malformed KEY=VALUE structure: missing '=', FREQ missing or not first,
    unknown or duplicate key, COUNT together with UNTIL"""


class RuleValueError(RuleParseError):
    """A value is present but outside its declared domain"""


class UnsupportedRuleError(RuleParseError):
    """A recognized construct that is not implemented (e.g. FREQ=SECONDLY)"""

    def __init__(self, rrule: str, reason: str, **kwargs):
        kwargs.setdefault("error_code", "UNSUPPORTED_RRULE")
        super().__init__(rrule, reason, **kwargs)


# Generation errors
class GeneratorConstructionError(ChronosRRuleError):
    """Raised when a generator variant cannot be built for a rule"""

    def __init__(self, generator: str, frequency: str, reason: Optional[str] = None):
        message = f"{generator} cannot generate {frequency} rules"
        if reason:
            message += f": {reason}"

        super().__init__(
            message,
            error_code="GENERATOR_UNAVAILABLE",
            details={"generator": generator, "frequency": frequency, "reason": reason},
        )


# Calendar service errors
class CalendarError(ChronosRRuleError):
    """Base class for calendar service errors"""

    pass


class InvalidDateError(CalendarError):
    """Raised when date components do not form a valid date"""

    def __init__(self, components: Dict[str, Any], reason: Optional[str] = None):
        message = f"Invalid date components: {components}"
        if reason:
            message += f" ({reason})"

        super().__init__(
            message,
            error_code="INVALID_DATE",
            details={"components": components, "reason": reason},
        )


class UnknownTimeZoneError(CalendarError):
    """Raised when a timezone identifier cannot be resolved"""

    def __init__(self, name: str):
        super().__init__(
            f"Unknown timezone '{name}'",
            error_code="UNKNOWN_TIMEZONE",
            details={"timezone": name},
        )


# Configuration Errors
class ConfigurationError(ChronosRRuleError):
    """Raised when configuration is invalid or missing"""

    pass


class InvalidConfigError(ConfigurationError):
    """Raised when a configuration value is invalid"""

    def __init__(self, reason: str, config_path: Optional[str] = None):
        details = {"reason": reason}
        if config_path:
            details["config_path"] = config_path

        super().__init__(f"Invalid configuration: {reason}", details=details)


# Error Handling Utilities
class ErrorHandler:
    """Utility class for consistent error handling"""

    @staticmethod
    def safe_operation(
        logger: logging.Logger,
        default_return: Any = None,
        error_message: Optional[str] = None,
    ):
        """
        Decorator for operations that follow the "None/False on failure" pattern.

        chronos-rrule errors are logged with their details; any other
        exception is logged with its type. In both cases the decorated
        function returns ``default_return``.

        Usage:
            @ErrorHandler.safe_operation(logger, default_return=[])
            def expand(text: str) -> list:
                ...
        """

        def decorator(func: Callable[..., T]) -> Callable[..., Union[T, Any]]:
            @functools.wraps(func)
            def wrapper(*args, **kwargs):
                try:
                    return func(*args, **kwargs)
                except ChronosRRuleError as e:
                    logger.error(f"{error_message or func.__name__}: {e} | Details: {e.details}")
                    return default_return
                except Exception as e:
                    logger.error(
                        f"{error_message or func.__name__}: "
                        f"{type(e).__name__}: {e}"
                    )
                    return default_return

            return wrapper

        return decorator
