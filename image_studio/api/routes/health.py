"""Health check endpoint."""

from fastapi import APIRouter, Depends

from ..dependencies import get_provider
from ...domain.interfaces.generative_provider import GenerativeProvider

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(provider: GenerativeProvider = Depends(get_provider)) -> dict:
    """
    Health check endpoint.

    Returns:
        Health status
    """
    healthy = await provider.health_check()
    return {
        "status": "healthy" if healthy else "degraded",
        "service": "image-studio-relay",
    }


@router.get("/")
async def root() -> dict:
    """
    Root endpoint.

    Returns:
        Service information
    """
    return {
        "service": "image-studio-relay",
        "version": "0.1.0",
        "description": "Relay between Image Studio clients and the Gemini API",
    }
