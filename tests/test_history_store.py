import json

from image_studio.client.history_store import HistoryStore
from image_studio.domain.entities import HistoryEntry
from image_studio.infrastructure.storage import InMemoryHistoryStorage, JsonFileHistoryStorage

KEY = "pelv-image-gen-history"


def make_entry(index: int) -> HistoryEntry:
    # Fixed-width fields so every entry serializes to the same size
    return HistoryEntry(
        id=f"2024-05-01T12:00:{index:02d}.000Z",
        prompt=f"prompt-{index:02d}",
        image_urls=(f"data:image/jpeg;base64,IMG{index:02d}",),
        aspect_ratio="1:1",
        number_of_images=1,
        created_at_millis=1714564800000 + index * 1000,
    )


def serialized(entries: list[HistoryEntry]) -> str:
    return json.dumps([entry.to_dict() for entry in entries])


def test_load_without_stored_value_is_empty():
    store = HistoryStore(InMemoryHistoryStorage(), KEY)

    assert store.load() == []
    assert len(store) == 0


def test_add_prepends_and_persists():
    storage = InMemoryHistoryStorage()
    store = HistoryStore(storage, KEY)
    store.load()

    store.add(make_entry(1))
    store.add(make_entry(2))

    assert [entry.prompt for entry in store] == ["prompt-02", "prompt-01"]
    persisted = json.loads(storage.get(KEY))
    assert [item["prompt"] for item in persisted] == ["prompt-02", "prompt-01"]
    assert set(persisted[0]) == {"id", "prompt", "imageUrls", "aspectRatio", "numberOfImages", "timestamp"}


def test_history_is_capped_at_fifty_newest_first():
    storage = InMemoryHistoryStorage()
    store = HistoryStore(storage, KEY)

    for index in range(51):
        store.add(make_entry(index))

    assert len(store) == 50
    assert store.entries[0].prompt == "prompt-50"
    assert store.entries[-1].prompt == "prompt-01"
    assert len(json.loads(storage.get(KEY))) == 50


def test_reload_preserves_order(tmp_path):
    storage = JsonFileHistoryStorage(tmp_path)
    store = HistoryStore(storage, KEY)
    for index in range(3):
        store.add(make_entry(index))

    reloaded = HistoryStore(JsonFileHistoryStorage(tmp_path), KEY)

    assert reloaded.load() == store.entries
    assert reloaded.get("2024-05-01T12:00:01.000Z").prompt == "prompt-01"
    assert reloaded.get("missing") is None


def test_load_truncates_oversized_value():
    storage = InMemoryHistoryStorage()
    storage.set(KEY, serialized([make_entry(index) for index in range(60)]))
    store = HistoryStore(storage, KEY)

    assert len(store.load()) == 50


def test_corrupted_value_is_removed_and_history_starts_empty():
    storage = InMemoryHistoryStorage()
    storage.set(KEY, "{not json")
    store = HistoryStore(storage, KEY)

    assert store.load() == []
    assert storage.get(KEY) is None


def test_value_with_invalid_entries_is_treated_as_corrupted():
    storage = InMemoryHistoryStorage()
    storage.set(KEY, json.dumps([{"id": 1, "prompt": "fox"}]))
    store = HistoryStore(storage, KEY)

    assert store.load() == []
    assert storage.get(KEY) is None


def test_quota_failure_falls_back_to_ten_most_recent():
    storage = InMemoryHistoryStorage(quota_bytes=len(serialized([make_entry(0)] * 10).encode("utf-8")))
    store = HistoryStore(storage, KEY)

    for index in range(12):
        store.add(make_entry(index))

    assert len(store) == 12
    persisted = json.loads(storage.get(KEY))
    assert len(persisted) == 10
    assert persisted[0]["prompt"] == "prompt-11"
    assert persisted[-1]["prompt"] == "prompt-02"


def test_persist_failure_is_swallowed():
    storage = InMemoryHistoryStorage(quota_bytes=8)
    store = HistoryStore(storage, KEY)

    store.add(make_entry(1))

    assert [entry.prompt for entry in store] == ["prompt-01"]
    assert storage.get(KEY) is None


def test_from_settings_uses_configured_directory(settings, tmp_path):
    store = HistoryStore.from_settings(settings)
    store.add(make_entry(1))

    assert (tmp_path / "history" / f"{KEY}.json").is_file()
    assert store.max_items == 50


def test_invalid_utf8_value_is_removed_and_history_starts_empty(tmp_path):
    entry = make_entry(1).to_dict()
    entry["prompt"] = "PLACEHOLDER"
    raw = json.dumps([entry]).encode("utf-8").replace(b"PLACEHOLDER", b"fo\xff\xfe")
    (tmp_path / f"{KEY}.json").write_bytes(raw)
    store = HistoryStore(JsonFileHistoryStorage(tmp_path), KEY)

    assert store.load() == []
    assert not (tmp_path / f"{KEY}.json").exists()
