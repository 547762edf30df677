import asyncio
import base64
from types import SimpleNamespace

import pytest

from image_studio.config.settings import Settings
from image_studio.domain.errors import MissingCredentialError
from image_studio.domain.interfaces.generative_provider import ProviderError
from image_studio.infrastructure.genai.gemini_provider import GeminiProvider


class FakeModels:
    """Records SDK calls and replays scripted outcomes."""

    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    def _next(self, name, kwargs):
        self.calls.append((name, kwargs))
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def generate_images(self, **kwargs):
        return self._next("generate_images", kwargs)

    def generate_content(self, **kwargs):
        return self._next("generate_content", kwargs)


def image_response(*payloads):
    return SimpleNamespace(
        generated_images=[SimpleNamespace(image=SimpleNamespace(image_bytes=payload)) for payload in payloads]
    )


def make_provider(settings, outcomes, **overrides):
    models = FakeModels(outcomes)
    provider = GeminiProvider(settings.model_copy(update=overrides), client=SimpleNamespace(models=models))
    return provider, models


def test_missing_api_key_is_rejected():
    with pytest.raises(MissingCredentialError, match="API_KEY"):
        GeminiProvider(Settings(_env_file=None, api_key=None), client=SimpleNamespace())


def test_generate_images_encodes_bytes_and_passes_config(settings):
    provider, models = make_provider(settings, [image_response(b"one", None, b"two")])

    images = asyncio.run(provider.generate_images("fox", "16:9", 3))

    assert images == [base64.b64encode(b"one").decode(), base64.b64encode(b"two").decode()]
    name, kwargs = models.calls[0]
    assert name == "generate_images"
    assert kwargs["model"] == "imagen-3.0-generate-002"
    assert kwargs["prompt"] == "fox"
    assert kwargs["config"].number_of_images == 3
    assert kwargs["config"].aspect_ratio == "16:9"
    assert kwargs["config"].output_mime_type == "image/jpeg"


def test_generate_images_without_results_returns_empty_list(settings):
    provider, _ = make_provider(settings, [SimpleNamespace(generated_images=None)])

    assert asyncio.run(provider.generate_images("fox", "1:1", 1)) == []


def test_generate_text_returns_raw_text(settings):
    provider, models = make_provider(settings, [SimpleNamespace(text="  spaced out  "), SimpleNamespace(text=None)])

    assert asyncio.run(provider.generate_text("do it")) == "  spaced out  "
    assert asyncio.run(provider.generate_text("again")) == ""
    assert models.calls[0] == ("generate_content", {"model": "gemini-2.5-flash", "contents": "do it"})


def test_rate_limit_is_flagged_without_retry_by_default(settings):
    provider, models = make_provider(settings, [RuntimeError("429 RESOURCE_EXHAUSTED")])

    with pytest.raises(ProviderError) as exc_info:
        asyncio.run(provider.generate_text("do it"))

    assert exc_info.value.rate_limited
    assert len(models.calls) == 1


def test_other_errors_are_not_retried(settings):
    provider, models = make_provider(settings, [ValueError("prompt blocked")], provider_max_retries=3)

    with pytest.raises(ProviderError) as exc_info:
        asyncio.run(provider.generate_text("do it"))

    assert not exc_info.value.rate_limited
    assert str(exc_info.value) == "prompt blocked"
    assert isinstance(exc_info.value.original_error, ValueError)
    assert len(models.calls) == 1


def test_rate_limit_is_retried_when_configured(settings):
    provider, models = make_provider(
        settings,
        [RuntimeError("RESOURCE_EXHAUSTED"), SimpleNamespace(text="recovered")],
        provider_max_retries=1,
    )

    assert asyncio.run(provider.generate_text("do it")) == "recovered"
    assert len(models.calls) == 2


def test_health_check_reports_configured_client(settings):
    provider, _ = make_provider(settings, [])

    assert asyncio.run(provider.health_check())
