from datetime import datetime, timezone

import pytest

from image_studio.domain.entities import GenerationRequest, GenerationResult, HistoryEntry
from image_studio.domain.errors import ValidationError


def test_generation_request_trims_prompt():
    request = GenerationRequest(prompt="  a red fox  ", aspect_ratio="16:9", number_of_images=3)

    assert request.prompt == "a red fox"
    assert request.aspect_ratio == "16:9"
    assert request.number_of_images == 3


@pytest.mark.parametrize(
    "kwargs",
    [
        {"prompt": "   "},
        {"prompt": "fox", "aspect_ratio": "21:9"},
        {"prompt": "fox", "number_of_images": 0},
        {"prompt": "fox", "number_of_images": 5},
        {"prompt": "fox", "number_of_images": True},
    ],
)
def test_generation_request_rejects_invalid_parameters(kwargs):
    with pytest.raises(ValidationError):
        GenerationRequest(**kwargs)


def test_generation_result_builds_data_urls():
    result = GenerationResult(images=["AAA", "BBB"], mime_type="image/jpeg")

    assert result.image_urls == ["data:image/jpeg;base64,AAA", "data:image/jpeg;base64,BBB"]


def test_history_entry_create_derives_id_and_timestamp():
    created_at = datetime(2024, 5, 1, 12, 30, 0, 250000, tzinfo=timezone.utc)
    request = GenerationRequest(prompt="fox", aspect_ratio="4:3", number_of_images=2)

    entry = HistoryEntry.create(request, ["u1", "u2"], created_at)

    assert entry.id == "2024-05-01T12:30:00.250000Z"
    assert entry.created_at_millis == 1714566600250
    assert entry.created_at == created_at
    assert entry.image_urls == ("u1", "u2")
    assert entry.to_dict() == {
        "id": "2024-05-01T12:30:00.250000Z",
        "prompt": "fox",
        "imageUrls": ["u1", "u2"],
        "aspectRatio": "4:3",
        "numberOfImages": 2,
        "timestamp": 1714566600250,
    }


def test_history_entry_reads_persisted_form():
    entry = HistoryEntry.from_dict(
        {
            "id": "2024-05-01T12:30:00.000Z",
            "prompt": "fox",
            "imageUrls": ["data:image/jpeg;base64,AAA"],
            "aspectRatio": "1:1",
            "numberOfImages": 1,
            "timestamp": 1714566600000,
        }
    )

    assert entry.prompt == "fox"
    assert entry.image_urls == ("data:image/jpeg;base64,AAA",)


@pytest.mark.parametrize(
    "data",
    [
        {"id": "x", "prompt": "fox", "imageUrls": "not-a-list", "aspectRatio": "1:1", "numberOfImages": 1, "timestamp": 1},
        {"id": "x", "prompt": "fox", "imageUrls": [], "aspectRatio": "1:1", "numberOfImages": "1", "timestamp": 1},
        {"id": 7, "prompt": "fox", "imageUrls": [], "aspectRatio": "1:1", "numberOfImages": 1, "timestamp": 1},
    ],
)
def test_history_entry_rejects_wrong_types(data):
    with pytest.raises(TypeError):
        HistoryEntry.from_dict(data)


def test_history_entry_rejects_missing_keys():
    with pytest.raises(KeyError):
        HistoryEntry.from_dict({"id": "x", "prompt": "fox"})
