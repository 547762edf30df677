"""JSON file implementation of HistoryStorage."""

import errno
import logging
import os
import re
from pathlib import Path

from ...domain.errors import HistoryDecodeError, StorageError, StorageQuotaExceededError
from ...domain.interfaces.history_storage import HistoryStorage

logger = logging.getLogger(__name__)

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


class JsonFileHistoryStorage(HistoryStorage):
    """
    File-backed implementation of HistoryStorage.

    Each key lives in its own ``<key>.json`` file inside the storage
    directory. Writes go to a temporary file first and are then swapped
    in with ``os.replace`` so a crash never leaves a half-written value.
    The byte quota covers every file in the directory.
    """

    def __init__(self, directory: Path | str, quota_bytes: int | None = 5 * 1024 * 1024) -> None:
        """
        Initialize file storage.

        Args:
            directory: Directory holding one file per key (created on first write)
            quota_bytes: Total size allowed for all keys, None for unlimited
        """
        self._directory = Path(directory).expanduser()
        self._quota_bytes = quota_bytes
        logger.info(f"JsonFileHistoryStorage initialized at {self._directory}")

    @property
    def directory(self) -> Path:
        """Directory holding the stored values."""
        return self._directory

    def _path_for(self, key: str) -> Path:
        safe_key = _UNSAFE_KEY_CHARS.sub("_", key.strip()) or "_"
        return self._directory / f"{safe_key}.json"

    def _used_bytes(self, excluding: Path) -> int:
        if not self._directory.exists():
            return 0
        return sum(
            path.stat().st_size
            for path in self._directory.glob("*.json")
            if path != excluding and path.is_file()
        )

    def get(self, key: str) -> str | None:
        """
        Read a value, or None if the key has never been written.

        Raises:
            HistoryDecodeError: If the stored bytes are not valid UTF-8
            StorageError: If the file cannot be read
        """
        path = self._path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except UnicodeDecodeError as e:
            logger.warning(f"'{key}' in {path} is not valid UTF-8: {e}")
            raise HistoryDecodeError(f"'{key}' is not valid UTF-8: {e}") from e
        except OSError as e:
            raise StorageError(f"Failed to read '{key}': {e}") from e

    def set(self, key: str, value: str) -> None:
        """Write a value atomically, enforcing the quota."""
        path = self._path_for(key)
        data = value.encode("utf-8")

        if self._quota_bytes is not None:
            required = self._used_bytes(excluding=path) + len(data)
            if required > self._quota_bytes:
                raise StorageQuotaExceededError(
                    f"Writing '{key}' needs {required} bytes, quota is {self._quota_bytes}"
                )

        tmp_path = path.with_suffix(".json.tmp")
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            tmp_path.write_bytes(data)
            os.replace(tmp_path, path)
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            if e.errno in (errno.ENOSPC, errno.EDQUOT):
                raise StorageQuotaExceededError(f"No space left to write '{key}': {e}") from e
            raise StorageError(f"Failed to write '{key}': {e}") from e

    def remove(self, key: str) -> None:
        """Delete a value."""
        path = self._path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to remove '{key}': {e}") from e
