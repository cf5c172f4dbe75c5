"""RRULE validation and expansion helpers.

This module wraps the rule codec and the occurrence generators behind the
"(is_valid, error_message)" and "empty list on failure" conventions, for
callers that validate user input rather than handle exceptions.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from .calendar import CalendarContext
from .codec import RRuleCodec
from .exceptions import ErrorHandler, RuleParseError
from .logging_config import setup_logging
from .occurrences import occurrences

logger = setup_logging()

# Maximum values for safety
MAX_INSTANCES_TO_EXPAND = 1000  # Maximum instances to expand at once


class RRuleValidator:
    """Validate and expand RRULE strings."""

    @classmethod
    def validate_rrule(
        cls,
        rrule_string: str,
        require_end: bool = False,
        calendar: Optional[CalendarContext] = None,
    ) -> Tuple[bool, Optional[str]]:
        """
        Validate an RRULE string.

        Args:
            rrule_string: The RRULE string to validate
            require_end: Reject rules without COUNT or UNTIL
            calendar: Calendar used to interpret UNTIL

        Returns:
            Tuple of (is_valid, error_message)
        """
        try:
            rule = RRuleCodec(calendar).parse(rrule_string)
        except RuleParseError as e:
            return False, e.message

        if require_end and rule.end.is_never:
            return (
                False,
                "RRULE must have COUNT or UNTIL to prevent infinite recurrence",
            )

        return True, None

    @classmethod
    @ErrorHandler.safe_operation(logger, default_return=[], error_message="Error expanding RRULE")
    def expand_occurrences(
        cls,
        rrule_string: str,
        start_date: datetime,
        end_date: Optional[datetime] = None,
        limit: int = MAX_INSTANCES_TO_EXPAND,
        calendar: Optional[CalendarContext] = None,
    ) -> List[datetime]:
        """
        Expand a recurring rule to individual occurrences.

        Args:
            rrule_string: The RRULE string
            start_date: Start date for the recurrence
            end_date: Optional end date to limit occurrences
            limit: Maximum number of occurrences to return
            calendar: Calendar to expand in

        Returns:
            List of datetime objects, empty if the rule cannot be expanded
        """
        rule = RRuleCodec(calendar).parse(rrule_string)
        return occurrences(rule, start_date, until=end_date, limit=limit, calendar=calendar)

    @classmethod
    def get_rrule_info(
        cls, rrule_string: str, calendar: Optional[CalendarContext] = None
    ) -> Dict[str, Any]:
        """
        Extract information from an RRULE string.

        Raises:
            RuleParseError: if the string is not a valid rule
        """
        return RRuleCodec(calendar).parse(rrule_string).to_info()


# Common RRULE patterns for convenience
class RRuleTemplates:
    """Common RRULE templates for recurring events."""

    # Daily patterns
    DAILY_WEEKDAYS = "FREQ=DAILY;BYDAY=MO,TU,WE,TH,FR"
    DAILY_FOREVER = "FREQ=DAILY"

    # Weekly patterns
    WEEKLY_ON_DAY = "FREQ=WEEKLY;BYDAY={day}"  # Replace {day} with MO, TU, etc.
    WEEKLY_MULTIPLE_DAYS = (
        "FREQ=WEEKLY;BYDAY={days}"  # Replace {days} with comma-separated
    )
    BIWEEKLY_ON_DAY = "FREQ=WEEKLY;INTERVAL=2;BYDAY={day}"

    # Monthly patterns
    MONTHLY_ON_DATE = "FREQ=MONTHLY;BYMONTHDAY={day}"  # Replace {day} with 1-31
    MONTHLY_LAST_DAY = "FREQ=MONTHLY;BYMONTHDAY=-1"
    MONTHLY_FIRST_WEEKDAY = "FREQ=MONTHLY;BYDAY=1{day}"  # e.g., 1MO for first Monday
    MONTHLY_LAST_WORKDAY = "FREQ=MONTHLY;BYDAY=MO,TU,WE,TH,FR;BYSETPOS=-1"

    # Yearly patterns
    YEARLY_ON_DATE = "FREQ=YEARLY"
    YEARLY_ON_MONTH_DAY = "FREQ=YEARLY;BYMONTH={month};BYMONTHDAY={day}"
