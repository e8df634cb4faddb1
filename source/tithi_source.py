"""HTTP data source for static tithi records."""
import logging
import time
from typing import Any, Dict, List, Optional

import requests

from processor.event_processor import EventProcessor
from processor.event_resolver import resolve_range
from processor.models import CalendarEvent

logger = logging.getLogger(__name__)


class TithiDataSource:
    """Fetches the published tithi.json and answers month-range queries."""

    DEFAULT_URL = "https://bangla-tithi.app/tithi.json"

    def __init__(
        self,
        data_url: Optional[str] = None,
        timeout: int = 30,
        processor: Optional[EventProcessor] = None
    ):
        """
        Initialize the data source.

        Args:
            data_url: URL of the JSON array of tithi records
            timeout: HTTP request timeout in seconds (default: 30)
            processor: Record codec (default: EventProcessor())
        """
        self.data_url = data_url or self.DEFAULT_URL
        self.timeout = timeout
        self.processor = processor or EventProcessor()
        self._events: Optional[List[CalendarEvent]] = None

    def fetch_range(
        self,
        year: int,
        month: int,
        month_count: int = 6
    ) -> List[CalendarEvent]:
        """
        Fetch events for a span of whole months.

        The full data file is downloaded once per instance.

        Args:
            year: Gregorian year of the first month
            month: First month (1-12)
            month_count: Number of months (default: 6)

        Returns:
            List of CalendarEvent objects inside the window

        Raises:
            requests.RequestException: If all retry attempts fail
        """
        logger.info(f"Fetching events for {month_count} months from {year}-{month:02d}")

        events = resolve_range(year, month, month_count, self._load_all())

        logger.info(f"Successfully fetched {len(events)} events")
        return events

    def _load_all(self) -> List[CalendarEvent]:
        if self._events is None:
            records = self._fetch_records()
            self._events = self.processor.process_records(records)
        return self._events

    def _fetch_records(self) -> List[Dict[str, Any]]:
        """
        Download the record array with retry logic.

        Returns:
            List of raw record dictionaries

        Raises:
            requests.RequestException: If all retry attempts fail
            ValueError: If the payload is not a JSON array
        """
        max_retries = 3
        base_delay = 1  # seconds

        for attempt in range(max_retries):
            try:
                logger.info(f"Fetching tithi data (attempt {attempt + 1}/{max_retries})")
                response = requests.get(self.data_url, timeout=self.timeout)
                response.raise_for_status()
                payload = response.json()
                break

            except requests.RequestException as e:
                if attempt < max_retries - 1:
                    # Calculate exponential backoff delay
                    delay = base_delay * (2 ** attempt)
                    logger.warning(
                        f"Request failed (attempt {attempt + 1}/{max_retries}): {e}. "
                        f"Retrying in {delay} seconds..."
                    )
                    time.sleep(delay)
                else:
                    logger.error(
                        f"All {max_retries} retry attempts failed. Last error: {e}"
                    )
                    raise

        if not isinstance(payload, list):
            raise ValueError(
                f"Expected a JSON array of records, got {type(payload).__name__}"
            )
        return payload
