"""Shared FastAPI dependencies for sessions, storage and the page workflow."""

from __future__ import annotations

from fastapi import Depends, Header

from lesson_studio.ai.providers.gemini import GeminiClient
from lesson_studio.config import Settings, get_settings
from lesson_studio.core.session import StudioSession
from lesson_studio.services.pages import PageWorkflow
from lesson_studio.storage.assets import LocalAssetStore, build_asset_store


def get_studio_session(x_api_key: str | None = Header(default=None), settings: Settings = Depends(get_settings)) -> StudioSession:  # noqa: B008
  """Build a per-request session from the caller's key, falling back to the operator default."""
  api_key = x_api_key if x_api_key and x_api_key.strip() else None
  return StudioSession.from_settings(settings, api_key=api_key)


def get_asset_store(settings: Settings = Depends(get_settings)) -> LocalAssetStore:  # noqa: B008
  return build_asset_store(settings)


def get_gemini_client() -> GeminiClient | None:
  """Return an injected collaborator; None lets each stage build one from the session key."""
  return None


def get_page_workflow(session: StudioSession = Depends(get_studio_session), store: LocalAssetStore = Depends(get_asset_store), client: GeminiClient | None = Depends(get_gemini_client)) -> PageWorkflow:  # noqa: B008
  return PageWorkflow(session, store, client=client)
