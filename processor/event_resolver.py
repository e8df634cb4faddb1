"""Range, category and chronological queries over calendar events."""
import calendar
import logging
import math
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional, Tuple, Union

from processor.models import (
    CATEGORY_ALIASES,
    CalendarEvent,
    EventCategory,
)

logger = logging.getLogger(__name__)

ALL_CATEGORIES = 'All'
UPCOMING_PAGE_SIZE = 5
ADVICE_FALLBACK = "এই তিথি সম্পর্কে কোনো বিস্তারিত তথ্য পাওয়া যায়নি।"


@dataclass
class UpcomingPage:
    """One page of upcoming events."""
    events: List[CalendarEvent]
    total_count: int
    total_pages: int
    page: int


def month_window(start_year: int, start_month: int, month_span: int) -> Tuple[str, str]:
    """
    Compute the inclusive date window covering whole months.

    Args:
        start_year: Gregorian year of the first month
        start_month: First month (1-12)
        month_span: Number of months in the window (>= 1)

    Returns:
        Tuple of (window_start, window_end) as 'YYYY-MM-DD' strings

    Raises:
        ValueError: If start_month or month_span is out of range
    """
    if not 1 <= start_month <= 12:
        raise ValueError(f"start_month must be in 1..12, got {start_month}")
    if month_span < 1:
        raise ValueError(f"month_span must be at least 1, got {month_span}")

    end_year, end_month_index = divmod(start_year * 12 + start_month - 1 + month_span - 1, 12)
    end_month = end_month_index + 1
    last_day = calendar.monthrange(end_year, end_month)[1]

    window_start = f"{start_year:04d}-{start_month:02d}-01"
    window_end = f"{end_year:04d}-{end_month:02d}-{last_day:02d}"
    return window_start, window_end


def resolve_range(
    start_year: int,
    start_month: int,
    month_span: int,
    event_pool: Iterable[CalendarEvent]
) -> List[CalendarEvent]:
    """
    Keep the events dated inside a span of whole months.

    Dates compare as fixed-width 'YYYY-MM-DD' strings. Input order is kept.

    Args:
        start_year: Gregorian year of the first month
        start_month: First month (1-12)
        month_span: Number of months
        event_pool: Events to filter

    Returns:
        Events whose date lies in the inclusive window
    """
    window_start, window_end = month_window(start_year, start_month, month_span)
    resolved = [
        event for event in event_pool
        if window_start <= event.date <= window_end
    ]
    logger.debug(
        f"Resolved {len(resolved)} events in {window_start}..{window_end}"
    )
    return resolved


def _as_category(category: Union[str, EventCategory, None]) -> Optional[EventCategory]:
    if category is None or category == ALL_CATEGORIES:
        return None
    if isinstance(category, EventCategory):
        return category
    return EventCategory(category)


def matches_category(event: CalendarEvent, category: EventCategory) -> bool:
    """Check the type tag, then the localized tithi label aliases."""
    event_type = event.event.event_type if event.event else ''
    if category.value in event_type:
        return True

    tithi_label = event.tithi_info.tithi if event.tithi_info else ''
    return any(
        alias.matches(tithi_label)
        for alias in CATEGORY_ALIASES.get(category, ())
    )


def filter_by_category(
    events: Iterable[CalendarEvent],
    category: Union[str, EventCategory, None]
) -> List[CalendarEvent]:
    """
    Filter events by category.

    Args:
        events: Events to filter
        category: EventCategory, its value, or 'All' for no filtering

    Returns:
        Matching events in input order

    Raises:
        ValueError: If category is not a known category name
    """
    selected = _as_category(category)
    if selected is None:
        return list(events)
    return [event for event in events if matches_category(event, selected)]


def sort_events(events: Iterable[CalendarEvent]) -> List[CalendarEvent]:
    """Sort by date, ties broken by event start timestamp."""
    return sorted(events, key=lambda event: event.sort_key)


def find_event_on(events: Iterable[CalendarEvent], day: Union[date, str]) -> Optional[CalendarEvent]:
    day_str = day if isinstance(day, str) else day.isoformat()
    for event in sort_events(events):
        if event.date == day_str:
            return event
    return None


def upcoming_events(
    events: Iterable[CalendarEvent],
    today: Union[date, str],
    category: Union[str, EventCategory, None] = ALL_CATEGORIES,
    page: int = 0,
    page_size: int = UPCOMING_PAGE_SIZE
) -> UpcomingPage:
    """
    Page through named events dated strictly after today.

    Args:
        events: Events to select from
        today: Reference date
        category: Category filter ('All' for none)
        page: 0-based page number
        page_size: Events per page

    Returns:
        UpcomingPage with the requested slice and totals
    """
    today_str = today if isinstance(today, str) else today.isoformat()
    future = [
        event for event in sort_events(events)
        if event.date > today_str and event.event is not None
    ]
    future = filter_by_category(future, category)

    total_count = len(future)
    start = page * page_size
    return UpcomingPage(
        events=future[start:start + page_size],
        total_count=total_count,
        total_pages=math.ceil(total_count / page_size),
        page=page,
    )


def event_advice(event: CalendarEvent) -> str:
    if event.event and event.event.description:
        return event.event.description
    return ADVICE_FALLBACK
