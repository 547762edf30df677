"""Domain interfaces (ports) - abstract contracts for infrastructure."""

from .generative_provider import GenerativeProvider, ProviderError
from .history_storage import HistoryStorage

__all__ = [
    "GenerativeProvider",
    "ProviderError",
    "HistoryStorage",
]
