"""Relay service - forwards typed requests to the generative provider."""

import logging
from typing import Any

from ..domain.entities.generation import DEFAULT_ASPECT_RATIO, GenerationRequest
from ..domain.errors import (
    InvalidRequestError,
    RateLimitedError,
    StudioError,
    UpstreamError,
    ValidationError,
    is_rate_limit_failure,
)
from ..domain.interfaces.generative_provider import GenerativeProvider, ProviderError

logger = logging.getLogger(__name__)

REQUEST_TYPE_GENERATE = "generate"
REQUEST_TYPE_ENHANCE = "enhance"
REQUEST_TYPE_RANDOM = "random"
REQUEST_TYPES = (REQUEST_TYPE_GENERATE, REQUEST_TYPE_ENHANCE, REQUEST_TYPE_RANDOM)

ENHANCE_INSTRUCTION_TEMPLATE = (
    "You are an expert prompt engineer for an AI image generator. "
    "Rewrite the following user prompt to be more descriptive, vivid, and detailed. "
    "The new prompt should be structured for optimal image generation. "
    "Do not add any conversational text or preamble, just return the enhanced prompt itself. "
    'User prompt: "{prompt}"'
)

RANDOM_PROMPT_INSTRUCTION = (
    "You are a creative assistant. Generate a single, random, interesting, and visually rich "
    "prompt for an AI image generator. The prompt should be a short phrase or sentence. "
    "Do not add any conversational text, preamble, or quotes. Just return the prompt itself."
)


class RelayService:
    """
    Stateless relay between clients and the generative provider.

    Every provider failure leaves this class as either RateLimitedError
    or UpstreamError; bad input is rejected with InvalidRequestError
    before the provider is called.
    """

    def __init__(self, provider: GenerativeProvider) -> None:
        self._provider = provider

    async def generate(
        self,
        prompt: str | None,
        aspect_ratio: str | None = None,
        number_of_images: int | None = None,
    ) -> list[str]:
        """
        Generate images for a prompt.

        Returns:
            Base64-encoded images, in provider order
        """
        try:
            request = GenerationRequest(
                prompt=prompt or "",
                aspect_ratio=aspect_ratio or DEFAULT_ASPECT_RATIO,
                number_of_images=1 if number_of_images is None else number_of_images,
            )
        except ValidationError as e:
            raise InvalidRequestError(e.message) from e

        try:
            images = await self._provider.generate_images(
                prompt=request.prompt,
                aspect_ratio=request.aspect_ratio,
                number_of_images=request.number_of_images,
            )
        except Exception as e:
            raise self._normalize_error(e) from e

        if not images:
            raise self._normalize_error(ProviderError("The provider returned no images."))
        return images

    async def enhance(self, prompt: str | None) -> str:
        """Rewrite a prompt to be more vivid. The text is returned untrimmed."""
        if not prompt or not prompt.strip():
            raise InvalidRequestError("A prompt is required to enhance.")

        instruction = ENHANCE_INSTRUCTION_TEMPLATE.format(prompt=prompt)
        try:
            return await self._provider.generate_text(instruction)
        except Exception as e:
            raise self._normalize_error(e) from e

    async def random(self) -> str:
        """Invent a new prompt, trimmed of surrounding whitespace."""
        try:
            text = await self._provider.generate_text(RANDOM_PROMPT_INSTRUCTION)
        except Exception as e:
            raise self._normalize_error(e) from e
        return text.strip()

    async def dispatch(
        self,
        request_type: str | None,
        prompt: str | None = None,
        aspect_ratio: str | None = None,
        number_of_images: int | None = None,
    ) -> dict[str, Any]:
        """
        Run the operation named by request_type.

        Returns:
            {"images": [...]} for generate, {"text": ...} for enhance and random

        Raises:
            InvalidRequestError: For unknown request types or bad parameters
            RateLimitedError: When the provider quota is exhausted
            UpstreamError: For any other provider failure
        """
        if request_type == REQUEST_TYPE_GENERATE:
            return {"images": await self.generate(prompt, aspect_ratio, number_of_images)}
        if request_type == REQUEST_TYPE_ENHANCE:
            return {"text": await self.enhance(prompt)}
        if request_type == REQUEST_TYPE_RANDOM:
            return {"text": await self.random()}
        raise InvalidRequestError("Invalid request type")

    @staticmethod
    def _normalize_error(error: Exception) -> StudioError:
        """Map a provider failure onto the relay's error taxonomy."""
        logger.error(f"Backend API Error: {error}")
        if isinstance(error, StudioError):
            return error

        rate_limited = isinstance(error, ProviderError) and error.rate_limited
        if rate_limited or is_rate_limit_failure(error):
            return RateLimitedError()
        return UpstreamError(f"Gemini API Error: {error}", error)
