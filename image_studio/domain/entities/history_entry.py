"""History entry entity - one persisted record of a past successful generation."""

from dataclasses import dataclass
from datetime import datetime, timezone

from .generation import GenerationRequest


@dataclass(frozen=True)
class HistoryEntry:
    """
    Immutable record of a successful generation.

    Attributes:
        id: Unique, time-derived identifier (ISO-8601 timestamp)
        prompt: Prompt the images were generated from
        image_urls: Displayable image references, in provider order
        aspect_ratio: Aspect ratio used for the request
        number_of_images: Number of images requested
        created_at_millis: Creation time as milliseconds since the epoch
    """

    id: str
    prompt: str
    image_urls: tuple[str, ...]
    aspect_ratio: str
    number_of_images: int
    created_at_millis: int

    @classmethod
    def create(
        cls,
        request: GenerationRequest,
        image_urls: list[str],
        created_at: datetime | None = None,
    ) -> "HistoryEntry":
        """Build an entry for a request that just succeeded."""
        created_at = created_at or datetime.now(timezone.utc)
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        return cls(
            id=created_at.astimezone(timezone.utc).isoformat().replace("+00:00", "Z"),
            prompt=request.prompt,
            image_urls=tuple(image_urls),
            aspect_ratio=request.aspect_ratio,
            number_of_images=request.number_of_images,
            created_at_millis=int(created_at.timestamp() * 1000),
        )

    @property
    def created_at(self) -> datetime:
        """Creation time as an aware UTC datetime."""
        return datetime.fromtimestamp(self.created_at_millis / 1000, tz=timezone.utc)

    def to_dict(self) -> dict:
        """Convert entry to its persisted dictionary representation."""
        return {
            "id": self.id,
            "prompt": self.prompt,
            "imageUrls": list(self.image_urls),
            "aspectRatio": self.aspect_ratio,
            "numberOfImages": self.number_of_images,
            "timestamp": self.created_at_millis,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "HistoryEntry":
        """
        Create an entry from its persisted dictionary representation.

        Raises:
            KeyError: If a required key is missing
            TypeError: If a value has the wrong type
        """
        image_urls = data["imageUrls"]
        if not isinstance(image_urls, list) or not all(isinstance(url, str) for url in image_urls):
            raise TypeError("imageUrls must be a list of strings")
        for key, expected in (("id", str), ("prompt", str), ("aspectRatio", str)):
            if not isinstance(data[key], expected):
                raise TypeError(f"{key} must be a string")
        timestamp = data["timestamp"]
        number_of_images = data["numberOfImages"]
        if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
            raise TypeError("timestamp must be a number")
        if isinstance(number_of_images, bool) or not isinstance(number_of_images, int):
            raise TypeError("numberOfImages must be an integer")

        return cls(
            id=data["id"],
            prompt=data["prompt"],
            image_urls=tuple(image_urls),
            aspect_ratio=data["aspectRatio"],
            number_of_images=number_of_images,
            created_at_millis=int(timestamp),
        )
