"""FastAPI dependency injection setup."""

import logging

from ..config.settings import get_settings
from ..domain.interfaces.generative_provider import GenerativeProvider
from ..infrastructure.genai.gemini_provider import GeminiProvider
from ..services.relay_service import RelayService

logger = logging.getLogger(__name__)

# Singleton instances
_provider: GenerativeProvider | None = None
_relay_service: RelayService | None = None


def get_provider() -> GenerativeProvider:
    """
    Get the provider singleton.

    Returns:
        GenerativeProvider implementation

    Raises:
        RuntimeError: If services were not initialized at startup
    """
    if _provider is None:
        raise RuntimeError("Provider is not initialized; initialize_services() must run at startup")
    return _provider


def get_relay_service() -> RelayService:
    """
    Get the relay service singleton.

    Returns:
        RelayService bound to the process-wide provider
    """
    global _relay_service
    if _relay_service is None:
        _relay_service = RelayService(get_provider())
    return _relay_service


async def initialize_services(provider: GenerativeProvider | None = None) -> None:
    """
    Initialize all services.

    This should be called during application startup. A missing API key
    raises MissingCredentialError and aborts startup.

    Args:
        provider: Use this provider instead of building a GeminiProvider
    """
    global _provider, _relay_service
    if _provider is not None and provider is None:
        return

    _provider = provider or GeminiProvider(get_settings())
    _relay_service = RelayService(_provider)
    logger.info("All services initialized")


def reset_dependencies() -> None:
    """Reset all dependencies (useful for testing)."""
    global _provider, _relay_service
    _provider = None
    _relay_service = None
