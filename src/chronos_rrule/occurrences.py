"""
Occurrence enumeration for callers.

Every rule is expanded through a generator and bounded by a result ceiling,
so a rule without COUNT or UNTIL still produces a finite list.
"""

from datetime import datetime
from typing import List, Optional

from .calendar import CalendarContext
from .generators import create_generator
from .logging_config import setup_logging
from .models import RecurrenceRule
from .validation import InputValidator

logger = setup_logging()

DEFAULT_LIMIT = 366


def occurrences(
    rule: RecurrenceRule,
    start: datetime,
    until: Optional[datetime] = None,
    limit: int = DEFAULT_LIMIT,
    calendar: Optional[CalendarContext] = None,
) -> List[datetime]:
    """
    Expand a rule into occurrence dates.

    Args:
        rule: The recurrence rule
        start: First candidate date (included when it matches the rule)
        until: Optional inclusive upper bound
        limit: Maximum number of occurrences to return
        calendar: Calendar to expand in (UTC, weeks starting Monday by default)

    Returns:
        Occurrence dates in chronological order, stopping at whichever of
        ``until`` exceeded, ``limit`` reached, or rule exhausted comes first

    Raises:
        GeneratorConstructionError: if no generator can expand the rule
    """
    if InputValidator.validate_limit(limit) <= 0:
        return []

    calendar = calendar or CalendarContext()
    generator = create_generator(rule, start, calendar)
    bound = calendar.localize(until) if until is not None else None

    results: List[datetime] = []
    for date in generator:
        if bound is not None and date > bound:
            break
        results.append(date)
        if len(results) >= limit:
            break

    logger.debug(
        f"Expanded {rule.frequency.value} rule with {type(generator).__name__}: "
        f"{len(results)} occurrences"
    )
    return results


def occurrences_between(
    rule: RecurrenceRule,
    start: datetime,
    end: datetime,
    inclusive: bool = True,
    limit: int = DEFAULT_LIMIT,
    calendar: Optional[CalendarContext] = None,
) -> List[datetime]:
    """Occurrences within ``[start, end]``, or ``[start, end)`` when not inclusive"""
    results = occurrences(rule, start, until=end, limit=limit, calendar=calendar)
    if not inclusive:
        bound = (calendar or CalendarContext()).localize(end)
        results = [date for date in results if date < bound]
    return results
