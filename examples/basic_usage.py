"""
Basic usage examples for chronos-rrule
"""

from datetime import datetime

from chronos_rrule import CalendarContext, RRuleCodec, occurrences
from chronos_rrule.rrule import RRuleTemplates, RRuleValidator


def main():
    """Walk through parsing, formatting and expanding rules"""

    print("chronos-rrule Basic Usage Examples")
    print("=" * 40)

    calendar = CalendarContext("America/New_York")
    codec = RRuleCodec(calendar)

    # Example 1: Parse a rule
    print("\n1. Parse a rule:")
    rule = codec.parse("FREQ=WEEKLY;INTERVAL=2;BYDAY=MO,WE;UNTIL=20250331")
    print(f"   {rule.to_info()}")

    # Example 2: Format it back
    print("\n2. Format it back:")
    print(f"   {codec.format(rule)}")

    # Example 3: Expand occurrences
    print("\n3. Expand occurrences:")
    start = datetime(2025, 3, 3, 9, 30)
    for date in occurrences(rule, start, limit=6, calendar=calendar):
        print(f"   {date.isoformat()}")

    # Example 4: Validate user input
    print("\n4. Validate user input:")
    for text in (RRuleTemplates.MONTHLY_LAST_WORKDAY, "FREQ=SECONDLY", "COUNT=3;FREQ=DAILY"):
        is_valid, error = RRuleValidator.validate_rrule(text)
        print(f"   {text}: {'valid' if is_valid else error}")


if __name__ == "__main__":
    main()
