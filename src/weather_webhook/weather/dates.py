"""Date resolution for forecast requests."""

import logging
from datetime import date, datetime, time, timezone
from typing import Any, Mapping, Optional, Union

import dateparser

logger = logging.getLogger(__name__)

DEFAULT_DAY_COUNT = 3

# Keys Dialogflow uses inside structured date-time values
DATE_TIME_KEYS = ("date_time", "startDateTime", "startDate")


def utc_today() -> date:
    """Current UTC calendar day, the day convention of the forecast timestamps."""
    return datetime.now(timezone.utc).date()


def parse_date_expression(expression: Any, today: Optional[date] = None) -> Optional[date]:
    """Parse a free-text or ISO date expression.

    Args:
        expression: Text such as "tomorrow", "next friday" or
            "2024-06-01T12:00:00+05:00", or a Dialogflow date-time object
        today: Reference day for relative expressions (defaults to the UTC day)

    Returns:
        The calendar date, or None if the expression could not be parsed
    """
    if isinstance(expression, Mapping):
        expression = next((expression[key] for key in DATE_TIME_KEYS if expression.get(key)), None)

    if not isinstance(expression, str) or not expression.strip():
        return None

    expression = expression.strip()
    try:
        # Dialogflow sends ISO 8601, keep its calendar day without conversion
        return datetime.fromisoformat(expression).date()
    except ValueError:
        pass

    today = today or utc_today()
    settings = {
        "RELATIVE_BASE": datetime.combine(today, time()),
        "PREFER_DATES_FROM": "future",
    }

    parsed = dateparser.parse(expression, settings=settings)
    if parsed is None:
        logger.info(f"Could not parse date expression: {expression!r}")
        return None

    return parsed.date()


def resolve_date(expression: Any, today: Optional[date] = None) -> date:
    """Resolve a date expression, falling back to today when absent or unparseable."""
    today = today or utc_today()
    return parse_date_expression(expression, today) or today


def _to_int(value: Union[int, float, str, None]) -> Optional[int]:
    if isinstance(value, bool) or value is None:
        return None
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return None


def resolve_day_count(
    number: Any = None,
    date_period: Any = None,
    today: Optional[date] = None,
    default: int = DEFAULT_DAY_COUNT
) -> int:
    """Derive how many forecast days a request asks for.

    An explicit number wins. Otherwise a date period with start and end
    yields the inclusive span in days. Anything else, including a
    non-numeric number, yields the default.

    Args:
        number: Explicit day count parameter
        date_period: Dialogflow date-period object with startDate and endDate
        today: Reference day for relative period bounds
        default: Day count used when nothing usable is supplied

    Returns:
        Day count, not yet range-checked
    """
    if number not in (None, ""):
        count = _to_int(number)
        if count is None:
            logger.info(f"Non-numeric day count {number!r}, using default {default}")
            return default
        return count

    if isinstance(date_period, Mapping):
        start = parse_date_expression(date_period.get("startDate"), today)
        end = parse_date_expression(date_period.get("endDate"), today)
        if start and end:
            return (end - start).days + 1

    return default
