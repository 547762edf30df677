"""Domain entities."""

from .generation import (
    GenerationRequest,
    GenerationResult,
    ASPECT_RATIOS,
    ASPECT_RATIO_LABELS,
    DEFAULT_ASPECT_RATIO,
    MIN_IMAGES,
    MAX_IMAGES,
    validate_aspect_ratio,
    validate_number_of_images,
)
from .history_entry import HistoryEntry
from .style_preset import StylePreset, STYLE_PRESETS, apply_style, get_style_preset

__all__ = [
    "GenerationRequest",
    "GenerationResult",
    "ASPECT_RATIOS",
    "ASPECT_RATIO_LABELS",
    "DEFAULT_ASPECT_RATIO",
    "MIN_IMAGES",
    "MAX_IMAGES",
    "validate_aspect_ratio",
    "validate_number_of_images",
    "HistoryEntry",
    "StylePreset",
    "STYLE_PRESETS",
    "apply_style",
    "get_style_preset",
]
