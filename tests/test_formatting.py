"""Unit tests for Bengali numeral and time formatting."""
from datetime import date

import pytest

from processor.bangla_calendar import to_bangla_date
from processor.formatting import (
    day_period,
    format_bangla_date,
    format_gregorian_date,
    format_localized_time,
    to_localized_digits,
    weekday_bn,
)


class TestToLocalizedDigits:
    """Test cases for digit conversion."""

    def test_all_digits_in_order(self):
        """Test every ASCII digit maps to its Bengali digit."""
        assert to_localized_digits(1234567890) == '১২৩৪৫৬৭৮৯০'

    def test_separators_preserved(self):
        """Test that non-digit characters pass through."""
        assert to_localized_digits('05/04/2026') == '০৫/০৪/২০২৬'

    def test_empty_string(self):
        assert to_localized_digits('') == ''

    def test_non_numeric_unchanged(self):
        assert to_localized_digits('abc') == 'abc'


class TestFormatLocalizedTime:
    """Test cases for day-period time formatting."""

    @pytest.mark.parametrize('timestamp,expected', [
        ('2026-01-01T05:00:00', 'ভোর ৫:০০'),
        ('2026-01-01T06:00:00', 'সকাল ৬:০০'),
        ('2026-01-01T11:59:00', 'সকাল ১১:৫৯'),
        ('2026-01-01T12:00:00', 'দুপুর ১২:০০'),
        ('2026-01-01T15:00:00', 'বিকেল ৩:০০'),
        ('2026-01-01T18:05:00', 'সন্ধ্যা ৬:০৫'),
        ('2026-01-01T20:00:00', 'রাত ৮:০০'),
        ('2026-01-01T00:30:00', 'রাত ১২:৩০'),
        ('2026-01-01T03:59:00', 'রাত ৩:৫৯'),
    ])
    def test_period_boundaries(self, timestamp, expected):
        """Test left-inclusive period boundaries and 12-hour display."""
        assert format_localized_time(timestamp) == expected

    @pytest.mark.parametrize('timestamp,expected', [
        ('2026-01-01T00:00:00Z', 'সকাল ৬:০০'),
        ('2026-01-01T12:30:00z', 'সন্ধ্যা ৬:৩০'),
        ('2026-01-01T00:00:00.000Z', 'সকাল ৬:০০'),
    ])
    def test_utc_designator(self, timestamp, expected):
        """Test that a trailing Z is read as UTC."""
        assert format_localized_time(timestamp) == expected

    def test_aware_timestamp_converted_to_dhaka(self):
        """Test that aware timestamps use the display timezone."""
        # 00:00 UTC is 06:00 in Dhaka
        assert format_localized_time('2026-01-01T00:00:00+00:00') == 'সকাল ৬:০০'

    def test_aware_timestamp_explicit_timezone(self):
        assert format_localized_time('2026-01-01T00:00:00+00:00', tz='UTC') == 'রাত ১২:০০'

    def test_offset_matching_display_timezone(self):
        assert format_localized_time('2026-03-03T16:45:00+06:00') == 'বিকেল ৪:৪৫'

    def test_empty_input(self):
        assert format_localized_time('') == ''
        assert format_localized_time(None) == ''

    def test_invalid_input(self):
        """Test that unparseable input yields an empty string."""
        assert format_localized_time('not-a-time') == ''


def test_day_period_wraps_midnight():
    assert day_period(23) == 'রাত'
    assert day_period(0) == 'রাত'
    assert day_period(4) == 'ভোর'


def test_format_bangla_date():
    """Test rendering of a converted date."""
    assert format_bangla_date(to_bangla_date(date(2026, 10, 19))) == '৪ কার্তিক ১৪৩৩'


def test_format_gregorian_date():
    assert format_gregorian_date(date(2026, 4, 14)) == '১৪ এপ্রিল ২০২৬'


def test_weekday_bn():
    # 2026-10-19 is a Monday, 2026-10-18 a Sunday
    assert weekday_bn(date(2026, 10, 19)) == 'সোম'
    assert weekday_bn(date(2026, 10, 18)) == 'রবি'
