"""Bounded, persisted history of past generations."""

import json
import logging
from pathlib import Path
from typing import Iterator

from ..config.settings import Settings, get_settings
from ..domain.entities.history_entry import HistoryEntry
from ..domain.errors import HistoryDecodeError, StorageError, StorageQuotaExceededError
from ..domain.interfaces.history_storage import HistoryStorage
from ..infrastructure.storage.json_file_history_storage import JsonFileHistoryStorage

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_KEY = "pelv-image-gen-history"
MAX_HISTORY_ITEMS = 50
FALLBACK_HISTORY_ITEMS = 10


class HistoryStore:
    """
    Newest-first list of HistoryEntry backed by a HistoryStorage.

    The list is read once by load() and written back in full after every
    add(). Storage failures never reach the caller: a value that cannot
    be decoded is dropped, and a write that exceeds the quota is retried
    once with only the most recent entries before being given up.
    """

    def __init__(
        self,
        storage: HistoryStorage,
        key: str = DEFAULT_HISTORY_KEY,
        max_items: int = MAX_HISTORY_ITEMS,
        fallback_items: int = FALLBACK_HISTORY_ITEMS,
    ) -> None:
        self._storage = storage
        self._key = key
        self._max_items = max_items
        self._fallback_items = fallback_items
        self._entries: list[HistoryEntry] = []

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "HistoryStore":
        """Build a store over JSON files in the configured history directory."""
        settings = settings or get_settings()
        storage = JsonFileHistoryStorage(Path(settings.history_dir), quota_bytes=settings.history_quota_bytes)
        return cls(
            storage,
            key=settings.history_storage_key,
            max_items=settings.history_max_items,
            fallback_items=settings.history_fallback_items,
        )

    @property
    def entries(self) -> list[HistoryEntry]:
        """Snapshot of the entries, newest first."""
        return list(self._entries)

    @property
    def max_items(self) -> int:
        return self._max_items

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(list(self._entries))

    def get(self, entry_id: str) -> HistoryEntry | None:
        """Find an entry by id."""
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    def load(self) -> list[HistoryEntry]:
        """
        Read the persisted history into memory.

        A corrupted value is removed from storage and the history starts
        empty; nothing is raised.
        """
        try:
            raw = self._storage.get(self._key)
            entries = [] if raw is None else self._decode(raw)
        except HistoryDecodeError as e:
            logger.error(f"Failed to load history from storage, clearing it: {e}")
            self._clear_corrupted()
            entries = []
        except StorageError as e:
            logger.error(f"Failed to read history from storage: {e}")
            entries = []

        self._entries = entries[: self._max_items]
        logger.info(f"Loaded {len(self._entries)} history entries")
        return self.entries

    def _clear_corrupted(self) -> None:
        try:
            self._storage.remove(self._key)
        except StorageError as e:
            logger.error(f"Could not clear corrupted history: {e}")

    def add(self, entry: HistoryEntry) -> None:
        """Prepend an entry, drop the oldest beyond the maximum, and persist."""
        self._entries = [entry, *self._entries][: self._max_items]
        self._persist()

    def _persist(self) -> None:
        try:
            self._write(self._entries[: self._max_items])
        except StorageQuotaExceededError as e:
            logger.error(f"Failed to save history to storage: {e}")
            try:
                self._write(self._entries[: self._fallback_items])
                logger.warning(f"Saved only the {self._fallback_items} most recent history entries")
            except StorageError as final_error:
                logger.error(f"Could not save even a smaller history: {final_error}")
        except StorageError as e:
            logger.error(f"Failed to save history to storage: {e}")

    def _write(self, entries: list[HistoryEntry]) -> None:
        self._storage.set(self._key, json.dumps([entry.to_dict() for entry in entries]))

    @staticmethod
    def _decode(raw: str) -> list[HistoryEntry]:
        """
        Parse the persisted JSON value.

        Raises:
            HistoryDecodeError: If the value is not a list of valid entries
        """
        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise TypeError("history must be a JSON list")
            return [HistoryEntry.from_dict(item) for item in data]
        except (ValueError, KeyError, TypeError) as e:
            raise HistoryDecodeError(f"Corrupted history value: {e}") from e
