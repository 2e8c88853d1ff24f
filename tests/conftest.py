"""Test configuration and shared fixtures."""

from __future__ import annotations

from dataclasses import replace

import pytest
from httpx import ASGITransport, AsyncClient

from fakes import FakeGeminiClient
from lesson_studio.api.deps import get_asset_store, get_gemini_client
from lesson_studio.config import get_settings
from lesson_studio.core.session import StudioSession
from lesson_studio.main import app
from lesson_studio.storage.assets import LocalAssetStore


@pytest.fixture
def anyio_backend():
  return "asyncio"


@pytest.fixture
def session() -> StudioSession:
  return StudioSession(api_key="test-key", retries=3, retry_base_delay=2.0, video_poll_interval=5.0, video_max_polls=4)


@pytest.fixture
def sleeps(monkeypatch) -> list[float]:
  """Record backoff and poll waits instead of sleeping."""
  recorded: list[float] = []

  async def _fake_sleep(delay: float) -> None:
    recorded.append(delay)

  monkeypatch.setattr("lesson_studio.ai.backoff._sleep", _fake_sleep)
  monkeypatch.setattr("lesson_studio.ai.stages.video._sleep", _fake_sleep)
  return recorded


@pytest.fixture
def asset_store(tmp_path) -> LocalAssetStore:
  return LocalAssetStore(tmp_path / "assets")


@pytest.fixture
def fake_client() -> FakeGeminiClient:
  return FakeGeminiClient()


@pytest.fixture
async def async_client(asset_store, fake_client, sleeps):
  # No operator default key, so requests without X-Api-Key have no credential.
  app.dependency_overrides[get_settings] = lambda: replace(get_settings(), gemini_api_key=None)
  app.dependency_overrides[get_asset_store] = lambda: asset_store
  app.dependency_overrides[get_gemini_client] = lambda: fake_client
  async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
    yield client
  app.dependency_overrides.clear()
