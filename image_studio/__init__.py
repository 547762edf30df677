"""Image Studio - AI image generation relay and client."""

__version__ = "0.1.0"
