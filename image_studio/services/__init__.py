"""Application services."""

from .relay_service import RelayService, REQUEST_TYPES

__all__ = ["RelayService", "REQUEST_TYPES"]
