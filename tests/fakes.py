"""Test doubles shared across the suite."""

from __future__ import annotations

import base64
from datetime import datetime, timedelta, timezone

from image_studio.domain.interfaces.generative_provider import GenerativeProvider


def encoded(label: str) -> str:
    return base64.b64encode(label.encode("utf-8")).decode("ascii")


class FakeProvider(GenerativeProvider):
    """Provider stub recording every call."""

    def __init__(self) -> None:
        self.calls: list[tuple] = []
        self.images: list[str] | None = None
        self.text = "a vivid prompt"
        self.error: Exception | None = None

    async def generate_images(self, prompt: str, aspect_ratio: str, number_of_images: int) -> list[str]:
        self.calls.append(("generate_images", prompt, aspect_ratio, number_of_images))
        if self.error is not None:
            raise self.error
        if self.images is not None:
            return list(self.images)
        return [encoded(f"image-{index}") for index in range(number_of_images)]

    async def generate_text(self, instruction: str) -> str:
        self.calls.append(("generate_text", instruction))
        if self.error is not None:
            raise self.error
        return self.text

    async def health_check(self) -> bool:
        return True


class FakeRelayClient:
    """Stand-in for RelayClient used by controller and CLI tests."""

    def __init__(self) -> None:
        self.calls: list[tuple] = []
        self.error: Exception | None = None
        self.enhanced = "an enhanced prompt"
        self.random = "a random prompt"

    async def __aenter__(self) -> "FakeRelayClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        self.calls.append(("aclose",))

    async def generate_images(self, prompt: str, aspect_ratio: str, number_of_images: int) -> list[str]:
        self.calls.append(("generate_images", prompt, aspect_ratio, number_of_images))
        if self.error is not None:
            raise self.error
        return [encoded(f"{prompt}-{index}") for index in range(number_of_images)]

    async def enhance_prompt(self, prompt: str) -> str:
        self.calls.append(("enhance_prompt", prompt))
        if self.error is not None:
            raise self.error
        return self.enhanced

    async def random_prompt(self) -> str:
        self.calls.append(("random_prompt",))
        if self.error is not None:
            raise self.error
        return self.random


class SteppingClock:
    """Returns a time one second later on every call."""

    def __init__(self) -> None:
        self.current = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.current += timedelta(seconds=1)
        return self.current


