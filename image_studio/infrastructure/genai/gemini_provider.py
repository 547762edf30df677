"""Gemini / Imagen implementation of GenerativeProvider."""

import asyncio
import base64
import logging
from typing import Any, Callable

from google import genai
from google.genai import errors as genai_errors
from google.genai.types import GenerateImagesConfig
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    before_sleep_log,
    retry_if_exception,
)

from ...config.settings import Settings, get_settings
from ...domain.errors import MissingCredentialError, is_rate_limit_failure
from ...domain.interfaces.generative_provider import GenerativeProvider, ProviderError

logger = logging.getLogger(__name__)


def _is_rate_limit_error(exception: BaseException) -> bool:
    """
    Check if the exception is a rate limit (429 RESOURCE_EXHAUSTED) error.

    Returns True only for rate limit errors that may be retried.
    Other errors (invalid prompts, auth errors, etc.) are not retried.
    """
    if isinstance(exception, genai_errors.APIError) and exception.code == 429:
        return True
    if isinstance(exception, ProviderError):
        return exception.rate_limited
    return is_rate_limit_failure(exception)


class GeminiProvider(GenerativeProvider):
    """
    Provider backed by the google-genai SDK with an API key.

    Images come from the Imagen model, prompt text from the Gemini text
    model. One instance holds the process-wide client and is shared by
    every request.
    """

    def __init__(self, settings: Settings | None = None, client: Any = None) -> None:
        """
        Initialize the Gemini client.

        Raises:
            MissingCredentialError: If no API key is configured
        """
        settings = settings or get_settings()
        if not settings.api_key:
            raise MissingCredentialError("API_KEY environment variable is not set.")

        self._client = client or genai.Client(api_key=settings.api_key)
        self._image_model = settings.image_model
        self._text_model = settings.text_model
        self._output_mime_type = settings.image_output_mime_type
        self._max_retries = max(0, settings.provider_max_retries)
        logger.info(
            f"Initialized GeminiProvider with image model: {self._image_model}, "
            f"text model: {self._text_model}, max_retries: {self._max_retries}"
        )

    @property
    def output_mime_type(self) -> str:
        """MIME type of generated images."""
        return self._output_mime_type

    async def generate_images(
        self,
        prompt: str,
        aspect_ratio: str,
        number_of_images: int,
    ) -> list[str]:
        """Generate images with Imagen and return them base64-encoded."""
        logger.info(
            f"Generating {number_of_images} image(s) with prompt: {prompt[:100]}... "
            f"(aspect_ratio={aspect_ratio})"
        )

        def _call_api() -> list[str]:
            response = self._client.models.generate_images(
                model=self._image_model,
                prompt=prompt,
                config=GenerateImagesConfig(
                    number_of_images=number_of_images,
                    output_mime_type=self._output_mime_type,
                    aspect_ratio=aspect_ratio,
                ),
            )
            images: list[str] = []
            for generated in response.generated_images or []:
                if generated.image is None or not generated.image.image_bytes:
                    continue
                images.append(base64.b64encode(generated.image.image_bytes).decode("ascii"))
            return images

        images = await self._run_with_retry(_call_api)
        logger.info(f"Provider returned {len(images)} image(s)")
        return images

    async def generate_text(self, instruction: str) -> str:
        """Run the text model on an instruction and return its raw text."""

        def _call_api() -> str:
            response = self._client.models.generate_content(
                model=self._text_model,
                contents=instruction,
            )
            return response.text or ""

        return await self._run_with_retry(_call_api)

    async def _run_with_retry(self, call: Callable[[], Any]) -> Any:
        """
        Execute a blocking SDK call in the default executor.

        Rate limit errors are retried with exponential backoff up to
        PROVIDER_MAX_RETRIES times (1s -> 2s -> 4s, 8s max). Every failure
        that escapes is wrapped in ProviderError.
        """
        retry_decorator = retry(
            retry=retry_if_exception(_is_rate_limit_error),
            stop=stop_after_attempt(self._max_retries + 1),  # +1 because first attempt isn't a retry
            wait=wait_exponential(multiplier=1, min=1, max=8),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )

        loop = asyncio.get_event_loop()
        try:
            return await loop.run_in_executor(None, retry_decorator(call))
        except ProviderError:
            raise
        except Exception as e:
            logger.error(f"Provider call failed: {e}")
            raise ProviderError(str(e), e, rate_limited=_is_rate_limit_error(e))

    async def health_check(self) -> bool:
        """Check if the provider client is configured."""
        # No generation call here: it would spend quota on every probe
        return self._client is not None
