from __future__ import annotations

import pytest

from image_studio.config.settings import Settings
from tests.fakes import FakeProvider, FakeRelayClient, SteppingClock


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        api_key="test-key",
        history_dir=str(tmp_path / "history"),
        relay_base_url="http://relay.test",
    )


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def relay_client() -> FakeRelayClient:
    return FakeRelayClient()


@pytest.fixture
def clock() -> SteppingClock:
    return SteppingClock()
