"""Unit tests for range, category and upcoming queries."""
from datetime import date

import pytest

from processor.event_resolver import (
    ADVICE_FALLBACK,
    event_advice,
    filter_by_category,
    find_event_on,
    month_window,
    resolve_range,
    sort_events,
    upcoming_events,
)
from processor.models import CalendarEvent, EventCategory, EventDetails, TithiInfo


def make_event(day, name=None, event_type='Other', tithi='', start=None, description=''):
    details = None
    if name:
        details = EventDetails(
            name=name,
            bangla_name='',
            event_type=event_type,
            description=description,
            start_date_time=start,
        )
    return CalendarEvent(date=day, event=details, tithi_info=TithiInfo(tithi=tithi))


class TestResolveRange:
    """Test cases for month-window filtering."""

    def test_window_is_inclusive(self):
        """Test last day of the final month is kept, next day dropped."""
        pool = [
            make_event('2025-12-31'),
            make_event('2026-01-01'),
            make_event('2026-03-31'),
            make_event('2026-04-01'),
        ]

        resolved = resolve_range(2026, 1, 3, pool)

        assert [e.date for e in resolved] == ['2026-01-01', '2026-03-31']

    def test_window_crosses_year_end(self):
        assert month_window(2026, 11, 3) == ('2026-11-01', '2027-01-31')

    def test_leap_february(self):
        assert month_window(2028, 2, 1) == ('2028-02-01', '2028-02-29')

    def test_keeps_input_order(self):
        pool = [make_event('2026-02-10'), make_event('2026-01-05')]

        resolved = resolve_range(2026, 1, 2, pool)

        assert [e.date for e in resolved] == ['2026-02-10', '2026-01-05']

    def test_no_events_found(self):
        assert resolve_range(2026, 1, 1, [make_event('2027-01-01')]) == []

    @pytest.mark.parametrize('month,span', [(0, 1), (13, 1), (1, 0)])
    def test_out_of_range_arguments(self, month, span):
        with pytest.raises(ValueError):
            resolve_range(2026, month, span, [])


class TestFilterByCategory:
    """Test cases for category filtering."""

    @pytest.fixture
    def events(self):
        return [
            make_event('2026-01-03', 'Paush Purnima', event_type='Purnima'),
            make_event('2026-01-18', 'Amavasya', event_type='Other', tithi='অমাবস্যা'),
            make_event('2026-01-29', 'Jaya Ekadashi', event_type='Other', tithi='জয়া একাদশী'),
            make_event('2026-02-01', 'Magh Purnima', event_type='Other', tithi='পূর্ণিমা'),
            make_event('2026-01-23', 'Saraswati Puja', event_type='Festival'),
            make_event('2026-01-24', 'Plain day'),
        ]

    def test_all_is_identity(self, events):
        assert filter_by_category(events, 'All') == events

    def test_purnima_matches_type_or_label(self, events):
        """Test the type tag and the localized label both select Purnima."""
        names = [e.event.name for e in filter_by_category(events, 'Purnima')]

        assert names == ['Paush Purnima', 'Magh Purnima']

    def test_amavasya_by_label(self, events):
        names = [e.event.name for e in filter_by_category(events, EventCategory.AMAVASYA)]

        assert names == ['Amavasya']

    def test_ekadashi_label_partial_match(self, events):
        names = [e.event.name for e in filter_by_category(events, 'Ekadashi')]

        assert names == ['Jaya Ekadashi']

    def test_festival_by_type_only(self, events):
        names = [e.event.name for e in filter_by_category(events, 'Festival')]

        assert names == ['Saraswati Puja']

    def test_no_matches(self, events):
        assert filter_by_category(events, 'Ritual') == []

    def test_type_substring_match(self):
        event = make_event('2026-05-01', 'Buddha Purnima', event_type='Purnima Festival')

        assert filter_by_category([event], 'Purnima') == [event]
        assert filter_by_category([event], 'Festival') == [event]

    def test_unknown_category(self, events):
        with pytest.raises(ValueError):
            filter_by_category(events, 'Bogus')


def test_sort_events_ties_by_start_time():
    late = make_event('2026-01-03', 'B', start='2026-01-03T18:00:00+06:00')
    early = make_event('2026-01-03', 'A', start='2026-01-03T06:00:00+06:00')
    before = make_event('2026-01-02')

    assert sort_events([late, early, before]) == [before, early, late]


def test_find_event_on():
    events = [make_event('2026-10-20', 'Tomorrow'), make_event('2026-10-19', 'Today')]

    assert find_event_on(events, date(2026, 10, 19)).event.name == 'Today'
    assert find_event_on(events, '2026-10-21') is None


class TestUpcomingEvents:
    """Test cases for upcoming event pages."""

    def test_pagination(self):
        events = [make_event(f'2026-10-{day}', f'Event {day}') for day in range(19, 27)]

        first = upcoming_events(events, date(2026, 10, 19))
        second = upcoming_events(events, date(2026, 10, 19), page=1)

        # The 19th itself is not upcoming
        assert first.total_count == 7
        assert first.total_pages == 2
        assert [e.date for e in first.events] == [
            '2026-10-20', '2026-10-21', '2026-10-22', '2026-10-23', '2026-10-24'
        ]
        assert [e.date for e in second.events] == ['2026-10-25', '2026-10-26']

    def test_skips_days_without_event(self):
        events = [make_event('2026-10-20'), make_event('2026-10-21', 'Kali Puja', 'Festival')]

        page = upcoming_events(events, '2026-10-19')

        assert [e.date for e in page.events] == ['2026-10-21']

    def test_with_category(self):
        events = [
            make_event('2026-10-20', 'Kali Puja', 'Festival'),
            make_event('2026-10-25', 'Purnima', 'Purnima'),
        ]

        page = upcoming_events(events, '2026-10-19', category='Purnima')

        assert page.total_count == 1
        assert page.events[0].event.name == 'Purnima'

    def test_empty(self):
        page = upcoming_events([], '2026-10-19')

        assert page.events == []
        assert page.total_pages == 0


def test_event_advice():
    assert event_advice(make_event('2026-01-01', 'X', description='Fast today')) == 'Fast today'
    assert event_advice(make_event('2026-01-01', 'X')) == ADVICE_FALLBACK
    assert event_advice(make_event('2026-01-01')) == ADVICE_FALLBACK
