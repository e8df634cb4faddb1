"""Local cache of calendar events with merge, eviction and staleness."""
import json
import logging
import time
from typing import Callable, Dict, List, Optional

from processor.event_processor import EventProcessor
from processor.models import CalendarEvent, MergeResult
from storage.key_value_store import KeyValueStore

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


class CacheStore:
    """
    Owns the persisted snapshot of known calendar events.

    The snapshot (events plus last sync time) is stored as one JSON payload
    under a versioned key. Every mutation is a full read-modify-write.
    """

    CACHE_KEY_PREFIX = 'bangla_tithi_cache_'
    CACHE_VERSION = 'v5'
    LEGACY_KEYS = ('bangla_tithi_last_sync',)
    MAX_EVENTS = 500
    STALE_AFTER_MS = 7 * 24 * 60 * 60 * 1000

    def __init__(
        self,
        storage: KeyValueStore,
        processor: Optional[EventProcessor] = None,
        clock: Callable[[], int] = _now_ms
    ):
        """
        Initialize the cache store.

        Args:
            storage: Persistence port
            processor: Record codec (default: EventProcessor())
            clock: Returns the current time in epoch milliseconds
        """
        self.storage = storage
        self.processor = processor or EventProcessor()
        self.clock = clock
        # Merged events whose write failed; served until a write succeeds
        self._unpersisted: Optional[List[CalendarEvent]] = None

    @property
    def cache_key(self) -> str:
        return f"{self.CACHE_KEY_PREFIX}{self.CACHE_VERSION}"

    def initialize(self) -> List[str]:
        """
        Remove data persisted under older cache versions.

        Returns:
            List of removed keys
        """
        result = self.storage.keys()
        if not result.success:
            logger.warning(f"Cache cleanup skipped, cannot list keys: {result.error}")
            return []

        stale_keys = [
            key for key in result.value
            if (key.startswith(self.CACHE_KEY_PREFIX) and key != self.cache_key)
            or key in self.LEGACY_KEYS
        ]

        removed = []
        for key in stale_keys:
            outcome = self.storage.remove(key)
            if outcome.success:
                logger.info(f"Cleaned up legacy cache: {key}")
                removed.append(key)
            else:
                logger.warning(f"Failed to remove legacy cache {key}: {outcome.error}")

        return removed

    def _read_snapshot(self) -> Dict:
        result = self.storage.get(self.cache_key)
        if not result.success:
            logger.warning(f"Failed to read cache: {result.error}")
            return {}
        if result.value is None:
            return {}

        try:
            snapshot = json.loads(result.value)
        except (TypeError, ValueError) as e:
            logger.warning(f"Discarding corrupt cache payload: {e}")
            return {}

        if not isinstance(snapshot, dict) or not isinstance(snapshot.get('events', []), list):
            logger.warning("Discarding cache payload with unexpected shape")
            return {}
        return snapshot

    def load(self) -> List[CalendarEvent]:
        """
        Return the cached events in chronological order.

        Missing or corrupt data yields an empty list.
        """
        if self._unpersisted is not None:
            return list(self._unpersisted)

        snapshot = self._read_snapshot()
        return self.processor.process_records(snapshot.get('events', []))

    @property
    def last_synced_at(self) -> Optional[int]:
        value = self._read_snapshot().get('lastSyncedAt')
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return int(value)
        return None

    def merge(self, new_events: List[CalendarEvent]) -> MergeResult:
        """
        Merge freshly fetched events into the cache.

        Later entries win on identity collisions, so new events replace
        cached ones. The result is sorted by date (ties by start time) and
        trimmed to the MAX_EVENTS most recent entries.

        Args:
            new_events: Events from the fetch collaborator

        Returns:
            MergeResult with the merged events and change counts
        """
        existing = self.load()
        existing_ids = {event.identity for event in existing}

        merged: Dict[str, CalendarEvent] = {}
        for event in existing + list(new_events):
            merged[event.identity] = event

        new_ids = {event.identity for event in new_events}
        added = len(new_ids - existing_ids)
        updated = len(new_ids & existing_ids)

        ordered = sorted(merged.values(), key=lambda event: event.sort_key)
        evicted = max(0, len(ordered) - self.MAX_EVENTS)
        if evicted:
            logger.info(f"Evicting {evicted} oldest events from cache")
            ordered = ordered[evicted:]

        errors = []
        synced_at = self.clock()
        payload = json.dumps(
            {
                'events': [self.processor.event_to_record(e) for e in ordered],
                'lastSyncedAt': synced_at,
            },
            ensure_ascii=False
        )
        outcome = self.storage.set(self.cache_key, payload)

        if outcome.success:
            self._unpersisted = None
        else:
            error_msg = f"Failed to save cache: {outcome.error}"
            logger.error(error_msg)
            errors.append(error_msg)
            self._unpersisted = list(ordered)

        logger.info(
            f"Merge complete: {added} added, {updated} updated, "
            f"{evicted} evicted, {len(ordered)} cached"
        )
        return MergeResult(
            events=ordered,
            added=added,
            updated=updated,
            evicted=evicted,
            errors=errors
        )

    def is_stale(self) -> bool:
        """True if never synced or the last sync is older than seven days."""
        last_synced = self.last_synced_at
        if last_synced is None:
            return True
        return self.clock() - last_synced > self.STALE_AFTER_MS
