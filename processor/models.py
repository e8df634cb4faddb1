"""Data models for the tithi calendar."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple


BANGLA_MONTHS = [
    'Boishakh', 'Jyaistha', 'Asharh', 'Shrabon', 'Bhadro', 'Ashwin',
    'Kartik', 'Agrahayan', 'Poush', 'Magh', 'Falgun', 'Chaitra'
]

BANGLA_MONTHS_BN = [
    'বৈশাখ', 'জ্যৈষ্ঠ', 'আষাঢ়', 'শ্রাবণ', 'ভাদ্র', 'আশ্বিন',
    'কার্তিক', 'অগ্রহায়ণ', 'পৌষ', 'মাঘ', 'ফাল্গুন', 'চৈত্র'
]

ENGLISH_MONTHS_BN = [
    'জানুয়ারি', 'ফেব্রুয়ারি', 'মার্চ', 'এপ্রিল', 'মে', 'জুন',
    'জুলাই', 'আগস্ট', 'সেপ্টেম্বর', 'অক্টোবর', 'নভেম্বর', 'ডিসেম্বর'
]

# Sunday first
DAYS_BN = ['রবি', 'সোম', 'মঙ্গল', 'বুধ', 'বৃহস্পতি', 'শুক্র', 'শনি']


class EventCategory(Enum):
    """Category tag of a named event."""
    PURNIMA = 'Purnima'
    AMAVASYA = 'Amavasya'
    PRATIPADA = 'Pratipada'
    EKADASHI = 'Ekadashi'
    FESTIVAL = 'Festival'
    RITUAL = 'Ritual'
    NORMAL = 'Normal'
    OTHER = 'Other'

    @classmethod
    def parse(cls, value: Optional[str]) -> 'EventCategory':
        """Map a raw type tag onto the enumeration, falling back to OTHER."""
        for category in cls:
            if value == category.value:
                return category
        return cls.OTHER


@dataclass(frozen=True)
class CategoryAlias:
    """Localized tithi label that also selects a category."""
    label: str
    partial: bool = False

    def matches(self, tithi_label: str) -> bool:
        if self.partial:
            return self.label in tithi_label
        return self.label == tithi_label


# Upstream data tags some events only through the localized tithi label,
# so filtering checks these aliases alongside the type tag.
CATEGORY_ALIASES: Dict[EventCategory, Tuple[CategoryAlias, ...]] = {
    EventCategory.PURNIMA: (CategoryAlias('পূর্ণিমা'),),
    EventCategory.AMAVASYA: (CategoryAlias('অমাবস্যা'),),
    EventCategory.EKADASHI: (CategoryAlias('একাদশী', partial=True),),
}


@dataclass
class EventDetails:
    """Named observance attached to a calendar day."""
    name: str
    bangla_name: str
    event_type: str
    description: str
    start_date_time: Optional[str] = None
    end_date_time: Optional[str] = None

    @property
    def category(self) -> EventCategory:
        return EventCategory.parse(self.event_type)


@dataclass
class TithiInfo:
    """Lunar-day labels shipped with the upstream record."""
    month: str = ''
    paksha: str = ''
    tithi: str = ''
    tithi_type: str = ''


@dataclass
class Weekday:
    en: str = ''
    bn: str = ''


@dataclass
class SolarInfo:
    """Sunrise and sunset strings, passed through untouched."""
    sunrise: str = ''
    sunset: str = ''
    day_length: str = ''
    night_length: str = ''
    reference: str = ''


@dataclass
class CalendarEvent:
    """A single dated occurrence."""
    date: str
    event: Optional[EventDetails] = None
    tithi_info: Optional[TithiInfo] = None
    weekday: Optional[Weekday] = None
    sun: Optional[SolarInfo] = None

    @property
    def identity(self) -> str:
        """Deduplication key: date plus event name when one is attached."""
        if self.event is not None:
            return f"{self.date}|{self.event.name}"
        return self.date

    @property
    def sort_key(self) -> Tuple[str, str]:
        start = ''
        if self.event is not None and self.event.start_date_time:
            start = self.event.start_date_time
        return self.date, start


@dataclass(frozen=True)
class BanglaDate:
    """Bangla calendar date derived from a Gregorian date."""
    day: int
    month_index: int
    year: int

    @property
    def month_name(self) -> str:
        return BANGLA_MONTHS[self.month_index]

    @property
    def month_name_bn(self) -> str:
        return BANGLA_MONTHS_BN[self.month_index]


@dataclass(frozen=True)
class StorageResult:
    """Outcome of a persistence port call."""
    success: bool
    value: Optional[object] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, value: Optional[object] = None) -> 'StorageResult':
        return cls(success=True, value=value)

    @classmethod
    def failure(cls, error: str) -> 'StorageResult':
        return cls(success=False, error=error)


@dataclass
class MergeResult:
    """Result of a cache merge operation."""
    events: List[CalendarEvent]
    added: int
    updated: int
    evicted: int
    errors: List[str] = field(default_factory=list)

    @property
    def persisted(self) -> bool:
        return not self.errors
