"""Event processor for validating and converting tithi records."""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from processor.models import (
    CalendarEvent,
    EventDetails,
    SolarInfo,
    TithiInfo,
    Weekday,
)

logger = logging.getLogger(__name__)


class EventProcessor:
    """Converts raw JSON records to CalendarEvent objects and back."""

    MAX_NAME_LENGTH = 200
    MAX_DESCRIPTION_LENGTH = 4000

    def process_records(self, raw_records: List[Dict[str, Any]]) -> List[CalendarEvent]:
        """
        Validate and convert raw tithi records.

        Records that cannot be converted are skipped with a warning.

        Args:
            raw_records: List of record dictionaries (tithi.json shape)

        Returns:
            List of CalendarEvent objects, in input order
        """
        events = []

        for record in raw_records:
            try:
                event = self.record_to_event(record)
                if event:
                    events.append(event)
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                logger.warning(f"Failed to process record {record!r:.80}: {e}")
                continue

        logger.info(
            f"Processed {len(events)} valid events out of "
            f"{len(raw_records)} total records"
        )
        return events

    def record_to_event(self, record: Dict[str, Any]) -> Optional[CalendarEvent]:
        """
        Convert a single record.

        Args:
            record: Record dictionary with at least a 'date' key

        Returns:
            CalendarEvent object or None if validation fails
        """
        if not isinstance(record, dict):
            logger.warning(f"Skipping non-object record: {record!r:.80}")
            return None

        raw_date = record.get('date')
        if not raw_date or not str(raw_date).strip():
            logger.warning("Record missing required field: date")
            return None

        normalized_date = self._normalize_date(str(raw_date))
        if not normalized_date:
            logger.warning(f"Invalid date format in record: {raw_date}")
            return None

        return CalendarEvent(
            date=normalized_date,
            event=self._parse_details(record.get('event')),
            tithi_info=self._parse_tithi_info(record.get('banglaDate')),
            weekday=self._parse_weekday(record.get('weekday')),
            sun=self._parse_solar_info(record.get('sun')),
        )

    def event_to_record(self, event: CalendarEvent) -> Dict[str, Any]:
        """
        Convert a CalendarEvent to its JSON record shape.

        Args:
            event: CalendarEvent object

        Returns:
            Record dictionary
        """
        record: Dict[str, Any] = {'date': event.date}

        # Add optional sections if present
        if event.event:
            record['event'] = {
                'name': event.event.name,
                'banglaName': event.event.bangla_name,
                'type': event.event.event_type,
                'description': event.event.description,
                'startDateTime': event.event.start_date_time,
                'endDateTime': event.event.end_date_time,
            }
        if event.tithi_info:
            record['banglaDate'] = {
                'month': event.tithi_info.month,
                'paksha': event.tithi_info.paksha,
                'tithi': event.tithi_info.tithi,
                'tithiType': event.tithi_info.tithi_type,
            }
        if event.weekday:
            record['weekday'] = {'en': event.weekday.en, 'bn': event.weekday.bn}
        if event.sun:
            record['sun'] = {
                'sunrise': event.sun.sunrise,
                'sunset': event.sun.sunset,
                'dayLength': event.sun.day_length,
                'nightLength': event.sun.night_length,
                'reference': event.sun.reference,
            }

        return record

    def _parse_details(self, data: Optional[Dict[str, Any]]) -> Optional[EventDetails]:
        if not data:
            return None

        name = (data.get('name') or '').strip()
        if not name:
            logger.warning("Event details missing name, dropping details")
            return None

        return EventDetails(
            name=name[:self.MAX_NAME_LENGTH],
            bangla_name=(data.get('banglaName') or '')[:self.MAX_NAME_LENGTH],
            event_type=data.get('type') or 'Other',
            description=(data.get('description') or '')[:self.MAX_DESCRIPTION_LENGTH],
            start_date_time=data.get('startDateTime') or None,
            end_date_time=data.get('endDateTime') or None,
        )

    def _parse_tithi_info(self, data: Optional[Dict[str, Any]]) -> Optional[TithiInfo]:
        if not data:
            return None
        return TithiInfo(
            month=data.get('month') or '',
            paksha=data.get('paksha') or '',
            tithi=data.get('tithi') or '',
            tithi_type=data.get('tithiType') or '',
        )

    def _parse_weekday(self, data: Optional[Dict[str, Any]]) -> Optional[Weekday]:
        if not data:
            return None
        return Weekday(en=data.get('en') or '', bn=data.get('bn') or '')

    def _parse_solar_info(self, data: Optional[Dict[str, Any]]) -> Optional[SolarInfo]:
        if not data:
            return None
        return SolarInfo(
            sunrise=data.get('sunrise') or '',
            sunset=data.get('sunset') or '',
            day_length=data.get('dayLength') or '',
            night_length=data.get('nightLength') or '',
            reference=data.get('reference') or '',
        )

    def _normalize_date(self, date_str: str) -> Optional[str]:
        """
        Normalize date to ISO 8601 format (YYYY-MM-DD).

        Args:
            date_str: Date string in various formats

        Returns:
            ISO 8601 formatted date string or None if parsing fails
        """
        date_formats = [
            '%Y-%m-%d',      # ISO 8601
            '%Y/%m/%d',
            '%d/%m/%Y',      # Bangladesh / India day-first
            '%d-%m-%Y',
            '%B %d, %Y',     # Full month name
            '%b %d, %Y',     # Abbreviated month name
        ]

        for fmt in date_formats:
            try:
                date_obj = datetime.strptime(date_str.strip(), fmt)
                return date_obj.strftime('%Y-%m-%d')
            except ValueError:
                continue

        return None
