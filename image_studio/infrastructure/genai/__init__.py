"""Google GenAI implementations."""

from .gemini_provider import GeminiProvider

__all__ = ["GeminiProvider"]
