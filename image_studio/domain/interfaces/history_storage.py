"""Abstract interface for durable client-side key/value storage."""

from abc import ABC, abstractmethod


class HistoryStorage(ABC):
    """
    Abstract key/value storage for persisted client state.

    Values are opaque strings. Implementations play the role browser
    local storage plays for a web client: small, synchronous, and
    bounded by a quota.
    """

    @abstractmethod
    def get(self, key: str) -> str | None:
        """
        Read a value.

        Args:
            key: Storage key

        Returns:
            Stored value, or None if the key is absent

        Raises:
            HistoryDecodeError: If the stored value cannot be read as text
            StorageError: If the read fails for any other reason
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Write a value, replacing any previous one.

        Raises:
            StorageQuotaExceededError: If the value does not fit the quota
            StorageError: If the write fails for any other reason
        """
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete a value. Missing keys are ignored."""
        pass
