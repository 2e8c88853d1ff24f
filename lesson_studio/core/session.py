"""Explicit credential and tuning context passed into every stage call."""

from __future__ import annotations

from dataclasses import dataclass

from lesson_studio.ai.errors import MissingCredentialError
from lesson_studio.config import DEFAULT_IMAGE_MODEL, DEFAULT_TEXT_MODEL, DEFAULT_TTS_MODEL, DEFAULT_VIDEO_MODEL, Settings


@dataclass(frozen=True)
class StudioSession:
  """Immutable per-sign-in context; build a new one to rotate the credential."""

  api_key: str | None
  text_model: str = DEFAULT_TEXT_MODEL
  tts_model: str = DEFAULT_TTS_MODEL
  image_model: str = DEFAULT_IMAGE_MODEL
  video_model: str = DEFAULT_VIDEO_MODEL
  content_language: str = "Persian"
  retries: int = 3
  retry_base_delay: float = 2.0
  video_poll_interval: float = 5.0
  video_max_polls: int = 120
  download_timeout: float = 120.0

  @classmethod
  def from_settings(cls, settings: Settings, api_key: str | None = None) -> StudioSession:
    """Build a session from process settings, preferring an explicit key over the operator default."""
    return cls(
      api_key=api_key if api_key is not None else settings.gemini_api_key,
      text_model=settings.text_model,
      tts_model=settings.tts_model,
      image_model=settings.image_model,
      video_model=settings.video_model,
      content_language=settings.content_language,
      retries=settings.retry_attempts,
      retry_base_delay=settings.retry_base_delay_seconds,
      video_poll_interval=settings.video_poll_interval_seconds,
      video_max_polls=settings.video_max_polls,
      download_timeout=settings.download_timeout_seconds,
    )

  def require_api_key(self) -> str:
    """Return the stripped credential or fail before any network attempt."""
    key = (self.api_key or "").strip()
    if not key:
      raise MissingCredentialError("No API key configured. Sign in with a Gemini API key first.")
    return key
