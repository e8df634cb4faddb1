"""Bengali numeral and time-of-day formatting."""
import logging
from datetime import date, datetime
from typing import Optional, Union

import pytz

from processor.models import BanglaDate, DAYS_BN, ENGLISH_MONTHS_BN

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = 'Asia/Dhaka'

BENGALI_DIGITS = {
    '0': '০', '1': '১', '2': '২', '3': '৩', '4': '৪',
    '5': '৫', '6': '৬', '7': '৭', '8': '৮', '9': '৯'
}

# (start hour inclusive, end hour exclusive, label); anything else is night
DAY_PERIODS = [
    (4, 6, 'ভোর'),
    (6, 12, 'সকাল'),
    (12, 15, 'দুপুর'),
    (15, 18, 'বিকেল'),
    (18, 20, 'সন্ধ্যা'),
]
NIGHT_PERIOD = 'রাত'


def to_localized_digits(value: Union[int, str]) -> str:
    """
    Replace ASCII digits with Bengali digits.

    Non-digit characters such as separators pass through unchanged.

    Args:
        value: Integer or numeral string

    Returns:
        String in Bengali script digits
    """
    return ''.join(BENGALI_DIGITS.get(char, char) for char in str(value))


def day_period(hour: int) -> str:
    """Return the Bengali day-period label for an hour of the day."""
    for start, end, label in DAY_PERIODS:
        if start <= hour < end:
            return label
    return NIGHT_PERIOD


def format_localized_time(
    timestamp: Optional[str],
    tz: Optional[str] = None
) -> str:
    """
    Render a timestamp as "{period} {hour}:{minute}" in Bengali.

    Aware timestamps are converted to the display timezone first; naive
    ones are read as local wall-clock time.

    Args:
        timestamp: ISO 8601 date-time string
        tz: Display timezone name (default: Asia/Dhaka)

    Returns:
        Formatted string, or an empty string for empty or invalid input
    """
    if not timestamp:
        return ''

    text = timestamp.strip() if isinstance(timestamp, str) else timestamp
    # fromisoformat only accepts the 'Z' designator from Python 3.11
    if isinstance(text, str) and text[-1:] in ('Z', 'z'):
        text = text[:-1] + '+00:00'

    try:
        moment = datetime.fromisoformat(text)
    except (ValueError, AttributeError):
        logger.debug(f"Unparseable timestamp: {timestamp!r}")
        return ''

    if moment.tzinfo is not None:
        moment = moment.astimezone(pytz.timezone(tz or DEFAULT_TIMEZONE))

    period = day_period(moment.hour)
    display_hour = moment.hour % 12 or 12
    display_minute = f"{moment.minute:02d}"

    return (
        f"{period} {to_localized_digits(display_hour)}:"
        f"{to_localized_digits(display_minute)}"
    )


def format_bangla_date(bangla_date: BanglaDate) -> str:
    """Render a BanglaDate as e.g. '১ বৈশাখ ১৪৩৩'."""
    return (
        f"{to_localized_digits(bangla_date.day)} "
        f"{bangla_date.month_name_bn} "
        f"{to_localized_digits(bangla_date.year)}"
    )


def format_gregorian_date(value: date) -> str:
    """Render a Gregorian date with the Bengali month name."""
    return (
        f"{to_localized_digits(value.day)} "
        f"{ENGLISH_MONTHS_BN[value.month - 1]} "
        f"{to_localized_digits(value.year)}"
    )


def weekday_bn(value: date) -> str:
    # date.weekday() is Monday-first, DAYS_BN is Sunday-first
    return DAYS_BN[(value.weekday() + 1) % 7]
