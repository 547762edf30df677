"""HTTP adapter between the client and the relay service."""

import logging
from typing import Any

import httpx

from ..config.settings import Settings, get_settings
from ..domain.errors import RateLimitedError, StudioError, UpstreamError

logger = logging.getLogger(__name__)

RELAY_PATH = "/api/generate"


class RelayClient:
    """
    Async client for the relay endpoint.

    Each call issues exactly one request; there are no retries. Failures
    surface as RateLimitedError or UpstreamError carrying a single
    message, never as an httpx response.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout_seconds: float | None = None,
        client: httpx.AsyncClient | None = None,
        settings: Settings | None = None,
    ) -> None:
        settings = settings or get_settings()
        self._base_url = (base_url or settings.relay_base_url).rstrip("/")
        timeout = timeout_seconds if timeout_seconds is not None else settings.relay_timeout_seconds
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def __aenter__(self) -> "RelayClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this adapter created it."""
        if self._owns_client:
            await self._client.aclose()

    async def generate_images(self, prompt: str, aspect_ratio: str, number_of_images: int) -> list[str]:
        """Ask the relay for images. Returns base64-encoded payloads."""
        data = await self._post(
            {
                "type": "generate",
                "prompt": prompt,
                "aspectRatio": aspect_ratio,
                "numberOfImages": number_of_images,
            },
            context="generating image",
        )
        return self._images_from(data, "generating image")

    async def enhance_prompt(self, prompt: str) -> str:
        """Ask the relay for a more descriptive version of a prompt."""
        data = await self._post({"type": "enhance", "prompt": prompt}, context="enhancing prompt")
        return self._text_from(data, "enhancing prompt")

    async def random_prompt(self) -> str:
        """Ask the relay for a random prompt idea."""
        data = await self._post({"type": "random"}, context="generating a random prompt")
        return self._text_from(data, "generating a random prompt")

    async def _post(self, body: dict[str, Any], context: str) -> dict[str, Any]:
        url = f"{self._base_url}{RELAY_PATH}"
        try:
            response = await self._client.post(url, json=body)
        except httpx.HTTPError as e:
            logger.error(f"Relay request failed while {context}: {e}")
            raise UpstreamError(str(e) or f"Could not reach the relay while {context}.", e) from e

        if not response.is_success:
            raise self._error_from_response(response, context)

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamError(f"The relay sent an unreadable response while {context}.", e) from e
        if not isinstance(data, dict):
            raise UpstreamError(f"The relay sent an unexpected response while {context}.")
        return data

    @staticmethod
    def _images_from(data: dict[str, Any], context: str) -> list[str]:
        """A successful generate carries a non-empty list of base64 strings."""
        images = data.get("images")
        if not isinstance(images, list) or not images or not all(isinstance(image, str) for image in images):
            logger.error(f"Relay response without images while {context}: {list(data)}")
            raise UpstreamError(f"The relay sent an unexpected response while {context}.")
        return images

    @staticmethod
    def _text_from(data: dict[str, Any], context: str) -> str:
        text = data.get("text")
        if not isinstance(text, str):
            logger.error(f"Relay response without text while {context}: {list(data)}")
            raise UpstreamError(f"The relay sent an unexpected response while {context}.")
        return text

    @staticmethod
    def _error_from_response(response: httpx.Response, context: str) -> StudioError:
        """
        Turn a non-2xx response into one error with a best-effort message.

        The structured body is preferred; when it cannot be decoded the
        HTTP reason phrase is used instead.
        """
        code = None
        try:
            body = response.json()
            if not isinstance(body, dict):
                raise ValueError("error body is not an object")
            message = str(body.get("error") or f"An unknown error occurred while {context}.")
            code = body.get("code")
        except ValueError:
            message = response.reason_phrase or f"An HTTP error {response.status_code} occurred while {context}."

        logger.warning(f"Relay returned {response.status_code} while {context}: {message}")
        if code == RateLimitedError.code or response.status_code == 429:
            return RateLimitedError(message)
        return UpstreamError(message)
