"""Generation entities - the parameters of a request and the images it produced."""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from ..errors import ValidationError


# Aspect ratios offered to the user, with their display labels
ASPECT_RATIO_LABELS = {
    "1:1": "Square (1:1)",
    "16:9": "Widescreen (16:9)",
    "9:16": "Portrait (9:16)",
    "4:3": "Landscape (4:3)",
    "3:4": "Portrait (3:4)",
}
ASPECT_RATIOS = tuple(ASPECT_RATIO_LABELS)

DEFAULT_ASPECT_RATIO = "1:1"
MIN_IMAGES = 1
MAX_IMAGES = 4


def validate_aspect_ratio(aspect_ratio: str) -> str:
    """Return the aspect ratio if supported, raise ValidationError otherwise."""
    if aspect_ratio not in ASPECT_RATIO_LABELS:
        raise ValidationError(f"aspect_ratio must be one of: {', '.join(ASPECT_RATIOS)}")
    return aspect_ratio


def validate_number_of_images(number_of_images: int) -> int:
    """Return the image count if within range, raise ValidationError otherwise."""
    if isinstance(number_of_images, bool) or not isinstance(number_of_images, int):
        raise ValidationError("number_of_images must be an integer")
    if not MIN_IMAGES <= number_of_images <= MAX_IMAGES:
        raise ValidationError(f"number_of_images must be between {MIN_IMAGES} and {MAX_IMAGES}")
    return number_of_images


@dataclass(frozen=True)
class GenerationRequest:
    """
    Parameters for one image generation call.

    Built by the controller right before dispatch and never persisted.

    Attributes:
        prompt: Text description of the image (trimmed, non-empty)
        aspect_ratio: One of ASPECT_RATIOS
        number_of_images: How many images to generate (1-4)
    """

    prompt: str
    aspect_ratio: str = DEFAULT_ASPECT_RATIO
    number_of_images: int = 1

    def __post_init__(self) -> None:
        """Validate request parameters after initialization."""
        prompt = (self.prompt or "").strip()
        if not prompt:
            raise ValidationError("Please enter a prompt.")
        object.__setattr__(self, "prompt", prompt)
        validate_aspect_ratio(self.aspect_ratio)
        validate_number_of_images(self.number_of_images)


@dataclass(frozen=True)
class GenerationResult:
    """Images returned by the provider for one request."""

    images: list[str]
    mime_type: str = "image/jpeg"
    produced_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def image_urls(self) -> list[str]:
        """Displayable data URLs, in provider order."""
        return [f"data:{self.mime_type};base64,{image}" for image in self.images]
