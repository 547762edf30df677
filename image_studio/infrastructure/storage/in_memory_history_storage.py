"""In-memory implementation of HistoryStorage."""

import logging
from typing import Dict

from ...domain.errors import StorageQuotaExceededError
from ...domain.interfaces.history_storage import HistoryStorage

logger = logging.getLogger(__name__)


class InMemoryHistoryStorage(HistoryStorage):
    """
    In-memory implementation of HistoryStorage.

    Stores values in a dictionary for development and testing.
    Data is lost when the process exits.

    An optional byte quota (over all keys, UTF-8 encoded) mimics the
    quota of browser local storage.
    """

    def __init__(self, quota_bytes: int | None = None) -> None:
        """Initialize empty storage."""
        self._values: Dict[str, str] = {}
        self._quota_bytes = quota_bytes

    def _used_bytes(self, excluding: str | None = None) -> int:
        return sum(len(value.encode("utf-8")) for key, value in self._values.items() if key != excluding)

    def get(self, key: str) -> str | None:
        """Read a value."""
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        """Write a value, enforcing the quota if one is set."""
        if self._quota_bytes is not None:
            required = self._used_bytes(excluding=key) + len(value.encode("utf-8"))
            if required > self._quota_bytes:
                raise StorageQuotaExceededError(
                    f"Writing '{key}' needs {required} bytes, quota is {self._quota_bytes}"
                )
        self._values[key] = value
        logger.debug(f"Stored {len(value)} characters under '{key}'")

    def remove(self, key: str) -> None:
        """Delete a value."""
        self._values.pop(key, None)
