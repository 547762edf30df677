"""Relay endpoint - the single entry point the client talks to."""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from ..dependencies import get_relay_service
from ...domain.errors import StudioError
from ...services.relay_service import RelayService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["generate"])

# Relay responses must never be served from a cache
NO_STORE_HEADERS = {"Cache-Control": "no-store"}


# Request/Response Models
class RelayRequest(BaseModel):
    """Request model for the relay endpoint."""
    model_config = ConfigDict(populate_by_name=True)

    type: str | None = Field(None, description="Operation: generate, enhance or random")
    prompt: str | None = Field(None, description="Prompt for generate and enhance")
    aspect_ratio: str | None = Field(
        None,
        alias="aspectRatio",
        description="Aspect ratio for generate (1:1, 16:9, 9:16, 4:3, 3:4)",
    )
    number_of_images: int | None = Field(
        None,
        alias="numberOfImages",
        description="Number of images for generate (1-4)",
    )


class ImagesResponse(BaseModel):
    """Response model for generate."""
    images: list[str] = Field(..., description="Base64 encoded images")


class TextResponse(BaseModel):
    """Response model for enhance and random."""
    text: str = Field(..., description="Generated prompt text")


class ErrorResponse(BaseModel):
    """Uniform error body."""
    error: str = Field(..., description="Human readable message")
    code: str = Field(..., description="Stable error kind, e.g. rate_limited")


def error_response(status_code: int, message: str, code: str, headers: dict | None = None) -> JSONResponse:
    """Build a JSON error response in the relay's uniform shape."""
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message, code=code).model_dump(),
        headers={**NO_STORE_HEADERS, **(headers or {})},
    )


@router.post(
    "/generate",
    response_model=ImagesResponse | TextResponse,
    responses={
        400: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def relay_generate(
    request: RelayRequest,
    relay: RelayService = Depends(get_relay_service),
) -> JSONResponse:
    """
    Dispatch a typed request to the provider.

    - generate: returns {"images": [...]}
    - enhance / random: returns {"text": "..."}

    Rate limits come back as 429, other provider failures as 500 and
    unknown request types as 400.
    """
    logger.info(f"Relay request: type={request.type}")
    try:
        payload = await relay.dispatch(
            request.type,
            prompt=request.prompt,
            aspect_ratio=request.aspect_ratio,
            number_of_images=request.number_of_images,
        )
    except StudioError as e:
        return error_response(e.status_code, e.message, e.code)

    return JSONResponse(content=payload, headers=NO_STORE_HEADERS)


@router.api_route("/generate", methods=["GET", "PUT", "PATCH", "DELETE", "OPTIONS"], include_in_schema=False)
async def relay_method_not_allowed() -> JSONResponse:
    """Reject every method other than POST."""
    return error_response(
        status.HTTP_405_METHOD_NOT_ALLOWED,
        "Method Not Allowed",
        "method_not_allowed",
        headers={"Allow": "POST"},
    )
