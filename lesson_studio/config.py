"""Application configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from lesson_studio.utils.env import load_settings_env

load_settings_env()

DEFAULT_TEXT_MODEL = "gemini-2.5-flash"
DEFAULT_TTS_MODEL = "gemini-2.5-flash-preview-tts"
DEFAULT_IMAGE_MODEL = "gemini-2.5-flash-image"
DEFAULT_VIDEO_MODEL = "veo-3.1-fast-generate-preview"


@dataclass(frozen=True)
class Settings:
  """Typed settings for the lesson studio service."""

  environment: str
  debug: bool
  allowed_origins: tuple[str, ...]
  log_dir: str
  log_max_bytes: int
  log_backup_count: int
  asset_dir: str
  text_model: str
  tts_model: str
  image_model: str
  video_model: str
  content_language: str
  retry_attempts: int
  retry_base_delay_seconds: float
  video_poll_interval_seconds: float
  video_max_polls: int
  download_timeout_seconds: float
  gemini_api_key: str | None


def _parse_origins(raw: str | None) -> tuple[str, ...]:
  if not raw:
    return ("http://localhost:5173",)

  origins = [origin.strip() for origin in raw.split(",") if origin.strip()]

  if not origins:
    raise ValueError("LESSON_STUDIO_ALLOWED_ORIGINS must include at least one origin.")

  if "*" in origins:
    raise ValueError("LESSON_STUDIO_ALLOWED_ORIGINS must not include wildcard origins.")

  return tuple(origins)


def _parse_bool(raw: str | None) -> bool:
  """Parse a boolean-ish string from environment variables."""

  if raw is None:
    return False

  normalized = raw.strip().lower()
  return normalized in {"1", "true", "yes", "on"}


def _optional_str(raw: str | None) -> str | None:
  if raw is None:
    return None
  value = raw.strip()
  if value == "":
    return None
  return value


def _positive_float(name: str, default: str) -> float:
  value = float(os.getenv(name, default))
  if value <= 0:
    raise ValueError(f"{name} must be a positive number.")
  return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
  """Load settings once per process."""

  environment = os.getenv("LESSON_STUDIO_ENV", "development").lower()
  debug = _parse_bool(os.getenv("LESSON_STUDIO_DEBUG"))

  log_max_bytes = int(os.getenv("LESSON_STUDIO_LOG_MAX_BYTES", "5242880"))  # 5MB default
  if log_max_bytes <= 0:
    raise ValueError("LESSON_STUDIO_LOG_MAX_BYTES must be a positive integer.")

  log_backup_count = int(os.getenv("LESSON_STUDIO_LOG_BACKUP_COUNT", "10"))
  if log_backup_count < 0:
    raise ValueError("LESSON_STUDIO_LOG_BACKUP_COUNT must be zero or a positive integer.")

  # Zero retries is allowed and means a single attempt.
  retry_attempts = int(os.getenv("LESSON_STUDIO_RETRY_ATTEMPTS", "3"))
  if retry_attempts < 0:
    raise ValueError("LESSON_STUDIO_RETRY_ATTEMPTS must be zero or a positive integer.")

  video_max_polls = int(os.getenv("LESSON_STUDIO_VIDEO_MAX_POLLS", "120"))
  if video_max_polls <= 0:
    raise ValueError("LESSON_STUDIO_VIDEO_MAX_POLLS must be a positive integer.")

  return Settings(
    environment=environment,
    debug=debug,
    allowed_origins=_parse_origins(os.getenv("LESSON_STUDIO_ALLOWED_ORIGINS")),
    log_dir=(os.getenv("LESSON_STUDIO_LOG_DIR") or "./logs").strip(),
    log_max_bytes=log_max_bytes,
    log_backup_count=log_backup_count,
    asset_dir=(os.getenv("LESSON_STUDIO_ASSET_DIR") or "./assets").strip(),
    text_model=os.getenv("LESSON_STUDIO_TEXT_MODEL", DEFAULT_TEXT_MODEL),
    tts_model=os.getenv("LESSON_STUDIO_TTS_MODEL", DEFAULT_TTS_MODEL),
    image_model=os.getenv("LESSON_STUDIO_IMAGE_MODEL", DEFAULT_IMAGE_MODEL),
    video_model=os.getenv("LESSON_STUDIO_VIDEO_MODEL", DEFAULT_VIDEO_MODEL),
    content_language=(os.getenv("LESSON_STUDIO_CONTENT_LANGUAGE") or "Persian").strip(),
    retry_attempts=retry_attempts,
    retry_base_delay_seconds=_positive_float("LESSON_STUDIO_RETRY_BASE_DELAY_SECONDS", "2.0"),
    video_poll_interval_seconds=_positive_float("LESSON_STUDIO_VIDEO_POLL_INTERVAL_SECONDS", "5.0"),
    video_max_polls=video_max_polls,
    download_timeout_seconds=_positive_float("LESSON_STUDIO_DOWNLOAD_TIMEOUT_SECONDS", "120"),
    gemini_api_key=_optional_str(os.getenv("GEMINI_API_KEY")),
  )
