import errno

import pytest

from image_studio.domain.errors import HistoryDecodeError, StorageError, StorageQuotaExceededError
from image_studio.infrastructure.storage import InMemoryHistoryStorage, JsonFileHistoryStorage
from image_studio.infrastructure.storage import json_file_history_storage


def test_json_file_storage_round_trip(tmp_path):
    storage = JsonFileHistoryStorage(tmp_path / "store")

    assert storage.get("history") is None

    storage.set("history", '[{"prompt": "café"}]')

    assert storage.get("history") == '[{"prompt": "café"}]'
    assert (tmp_path / "store" / "history.json").is_file()
    assert not list((tmp_path / "store").glob("*.tmp"))

    storage.remove("history")
    storage.remove("history")

    assert storage.get("history") is None


def test_json_file_storage_sanitizes_keys(tmp_path):
    storage = JsonFileHistoryStorage(tmp_path)

    storage.set("../evil key", "[]")

    assert (tmp_path / ".._evil_key.json").read_text(encoding="utf-8") == "[]"
    assert storage.get("../evil key") == "[]"


def test_json_file_storage_enforces_quota_across_keys(tmp_path):
    storage = JsonFileHistoryStorage(tmp_path, quota_bytes=10)
    storage.set("a", "12345")

    with pytest.raises(StorageQuotaExceededError):
        storage.set("b", "123456")

    # Overwriting a key does not count its previous size
    storage.set("a", "1234567890")
    assert storage.get("a") == "1234567890"
    assert storage.get("b") is None


def test_json_file_storage_maps_disk_full_to_quota_error(tmp_path, monkeypatch):
    storage = JsonFileHistoryStorage(tmp_path, quota_bytes=None)

    def disk_full(src, dst):
        raise OSError(errno.ENOSPC, "No space left on device")

    monkeypatch.setattr(json_file_history_storage.os, "replace", disk_full)

    with pytest.raises(StorageQuotaExceededError):
        storage.set("history", "[]")
    assert not list(tmp_path.glob("*.tmp"))


def test_json_file_storage_wraps_other_write_failures(tmp_path, monkeypatch):
    storage = JsonFileHistoryStorage(tmp_path, quota_bytes=None)

    def denied(src, dst):
        raise OSError(errno.EACCES, "Permission denied")

    monkeypatch.setattr(json_file_history_storage.os, "replace", denied)

    with pytest.raises(StorageError) as exc_info:
        storage.set("history", "[]")
    assert not isinstance(exc_info.value, StorageQuotaExceededError)


def test_json_file_storage_rejects_invalid_utf8(tmp_path):
    (tmp_path / "history.json").write_bytes(b"\xff\xfe[")
    storage = JsonFileHistoryStorage(tmp_path)

    with pytest.raises(HistoryDecodeError):
        storage.get("history")


def test_in_memory_storage_quota():
    storage = InMemoryHistoryStorage(quota_bytes=4)
    storage.set("a", "ab")

    with pytest.raises(StorageQuotaExceededError):
        storage.set("b", "abc")

    storage.set("a", "abcd")
    assert storage.get("a") == "abcd"
    storage.remove("a")
    assert storage.get("a") is None
