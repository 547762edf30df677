"""History storage implementations."""

from .in_memory_history_storage import InMemoryHistoryStorage
from .json_file_history_storage import JsonFileHistoryStorage

__all__ = [
    "InMemoryHistoryStorage",
    "JsonFileHistoryStorage",
]
