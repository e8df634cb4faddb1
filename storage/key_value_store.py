"""Persistence port for the tithi cache."""
import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional

from processor.models import StorageResult

logger = logging.getLogger(__name__)


class KeyValueStore(ABC):
    """
    String key-value storage used by the cache store.

    Implementations report backend errors through StorageResult instead of
    raising, so callers decide how to degrade.
    """

    @abstractmethod
    def get(self, key: str) -> StorageResult:
        """Return the stored string (or None if absent) as the result value."""

    @abstractmethod
    def set(self, key: str, value: str) -> StorageResult:
        """Store a string under key."""

    @abstractmethod
    def remove(self, key: str) -> StorageResult:
        """Remove key. Removing a missing key succeeds."""

    @abstractmethod
    def keys(self) -> StorageResult:
        """Return a list of all stored keys as the result value."""


class InMemoryKeyValueStore(KeyValueStore):
    """Dict-backed store with an optional size limit in characters."""

    def __init__(self, max_size: Optional[int] = None):
        self._data: Dict[str, str] = {}
        self.max_size = max_size

    def get(self, key: str) -> StorageResult:
        return StorageResult.ok(self._data.get(key))

    def set(self, key: str, value: str) -> StorageResult:
        if self.max_size is not None:
            used = sum(len(v) for k, v in self._data.items() if k != key)
            if used + len(value) > self.max_size:
                logger.warning(f"Quota exceeded writing key: {key}")
                return StorageResult.failure(
                    f"Quota exceeded: {used + len(value)} > {self.max_size}"
                )
        self._data[key] = value
        return StorageResult.ok()

    def remove(self, key: str) -> StorageResult:
        self._data.pop(key, None)
        return StorageResult.ok()

    def keys(self) -> StorageResult:
        return StorageResult.ok(list(self._data.keys()))
