"""Calendar arithmetic used by the time queries and the DST rules.

Weekdays use Python's numbering (Monday == 0 ... Sunday == 6), as in
the ``calendar`` module.
"""

import calendar
from datetime import datetime, timezone


def nth_weekday_of_month(year: int, month: int, weekday: int, nth: int) -> int:
    """
    Get the day of month of the n-th occurrence of a weekday.

    Args:
        year: Calendar year
        month: Month (1-12)
        weekday: Weekday (calendar.MONDAY .. calendar.SUNDAY)
        nth: Occurrence, starting at 1

    Returns:
        Day of month (1-31)

    Raises:
        ValueError: If the month has no such occurrence
    """
    first_weekday, days_in_month = calendar.monthrange(year, month)
    day = 1 + (weekday - first_weekday) % 7 + (nth - 1) * 7
    if nth < 1 or day > days_in_month:
        raise ValueError(
            f"No occurrence {nth} of weekday {weekday} in {year}-{month:02d}"
        )
    return day


def last_weekday_of_month(year: int, month: int, weekday: int) -> int:
    """Get the day of month of the last occurrence of a weekday."""
    first_weekday, days_in_month = calendar.monthrange(year, month)
    last_weekday = (first_weekday + days_in_month - 1) % 7
    return days_in_month - (last_weekday - weekday) % 7


def week_of_year(moment: datetime) -> int:
    """
    Sunday-based week number (0-53).

    Week 1 starts on the year's first Sunday; days before it are in week 0.
    """
    day_of_year = moment.timetuple().tm_yday - 1
    days_since_sunday = (moment.weekday() + 1) % 7
    return (day_of_year + 7 - days_since_sunday) // 7


def seconds_since_month_start(local: datetime) -> int:
    """
    Elapsed seconds since local midnight on the first day of the month.

    Both instants are compared in UTC, so a DST change inside the month
    is reflected in the result.
    """
    month_start = local.replace(day=1, hour=0, minute=0, second=0, microsecond=0, fold=0)
    elapsed = local.astimezone(timezone.utc) - month_start.astimezone(timezone.utc)
    return int(elapsed.total_seconds())
