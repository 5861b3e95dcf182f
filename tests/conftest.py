"""Shared pytest fixtures for all test types."""

import httpx
import pytest

from fakes import BASE_URL, API_KEY, FakeCambProvider, SleepRecorder
from narrator.lib.config import NarratorConfig
from narrator.services.camb.client import CambClient


@pytest.fixture
def provider() -> FakeCambProvider:
    """Scripted Camb.ai provider."""
    return FakeCambProvider()


@pytest.fixture
def http_client(provider) -> httpx.AsyncClient:
    """httpx client routed to the scripted provider."""
    return httpx.AsyncClient(transport=provider.transport())


@pytest.fixture
def camb_client(http_client) -> CambClient:
    """CambClient bound to the test API key."""
    return CambClient(http_client, API_KEY, base_url=BASE_URL)


@pytest.fixture
def narrator_config() -> NarratorConfig:
    """Narrator configuration pointing at the scripted provider."""
    return NarratorConfig(
        api_key="",
        base_url=BASE_URL,
        voice_id=None,
        recovery_voice_policy="first",
        poll_max_attempts=15,
    )


@pytest.fixture
def sleeper() -> SleepRecorder:
    """Recorder used in place of asyncio.sleep."""
    return SleepRecorder()
