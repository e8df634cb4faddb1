"""Gregorian to Bangla calendar conversion."""
from datetime import date, datetime
from typing import Tuple, Union

from processor.models import BanglaDate

# Pohela Boishakh is fixed at Gregorian April 14
NEW_YEAR_MONTH = 4
NEW_YEAR_DAY = 14

# Bangla year = Gregorian year - offset
YEAR_OFFSET_AFTER_NEW_YEAR = 593
YEAR_OFFSET_BEFORE_NEW_YEAR = 594

# Simplified fixed-length table, 365 days in total
MONTH_LENGTHS = [31, 31, 31, 31, 31, 30, 30, 30, 30, 30, 30, 30]


def _as_date(value: Union[date, datetime, str]) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def pohela_boishakh(year: int) -> date:
    """Return the Gregorian date on which the Bangla year starts."""
    return date(year, NEW_YEAR_MONTH, NEW_YEAR_DAY)


def month_and_day(days_passed: int) -> Tuple[int, int]:
    """
    Locate a day offset inside the fixed month table.

    The table covers 365 days. A leap-year span can produce offset 365,
    which is absorbed by the last month (Chaitra gets a 31st day).

    Args:
        days_passed: Days since Pohela Boishakh (0-based)

    Returns:
        Tuple of (month_index, day) with month_index 0-based, day 1-based
    """
    remaining = days_passed
    for index, length in enumerate(MONTH_LENGTHS):
        if remaining < length:
            return index, remaining + 1
        remaining -= length

    last = len(MONTH_LENGTHS) - 1
    return last, days_passed - sum(MONTH_LENGTHS[:last]) + 1


def to_bangla_date(gregorian_date: Union[date, datetime, str]) -> BanglaDate:
    """
    Convert a Gregorian date into a Bangla calendar date.

    Only the calendar date components are used; time of day and timezone
    are ignored.

    Args:
        gregorian_date: date, datetime or 'YYYY-MM-DD' string

    Returns:
        BanglaDate with 1-based day, 0-based month index and year
    """
    day = _as_date(gregorian_date)

    year = day.year - YEAR_OFFSET_AFTER_NEW_YEAR
    days_passed = (day - pohela_boishakh(day.year)).days

    if days_passed < 0:
        year = day.year - YEAR_OFFSET_BEFORE_NEW_YEAR
        if day.year > date.min.year:
            days_passed = (day - pohela_boishakh(day.year - 1)).days
        else:
            # Year 0 is not representable; the span before year 1 has no Feb 29
            days_passed += sum(MONTH_LENGTHS)

    month_index, day_of_month = month_and_day(days_passed)
    return BanglaDate(day=day_of_month, month_index=month_index, year=year)
