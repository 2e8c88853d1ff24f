"""Gemini collaborator adapter using the google-genai SDK."""

from __future__ import annotations

import base64
import binascii
import logging
from collections.abc import Iterator
from typing import Any

import httpx
from google import genai
from google.genai import types

from lesson_studio.core.session import StudioSession

logger = logging.getLogger(__name__)


class GeminiClient:
  """Thin async wrapper over content generation, video jobs and result download."""

  def __init__(self, api_key: str, *, download_timeout: float = 120.0) -> None:
    self._api_key = api_key
    self._download_timeout = download_timeout
    self._client = genai.Client(api_key=api_key)

  async def generate_content(self, *, model: str, contents: list[types.Part], config: dict[str, Any] | None = None) -> types.GenerateContentResponse:
    """Run one generate_content call on the async client."""
    return await self._client.aio.models.generate_content(model=model, contents=contents, config=config)

  async def submit_video(self, *, model: str, prompt: str, image: bytes, mime_type: str, resolution: str, aspect_ratio: str = "16:9") -> types.GenerateVideosOperation:
    """Submit a long-running image-to-video job and return its handle."""
    config = types.GenerateVideosConfig(number_of_videos=1, resolution=resolution, aspect_ratio=aspect_ratio)
    return await self._client.aio.models.generate_videos(model=model, prompt=prompt, image=types.Image(image_bytes=image, mime_type=mime_type), config=config)

  async def refresh_operation(self, operation: types.GenerateVideosOperation) -> types.GenerateVideosOperation:
    """Fetch the latest status of a job using its own handle."""
    return await self._client.aio.operations.get(operation)

  async def download(self, uri: str) -> tuple[bytes, str | None]:
    """Fetch a result locator with the credential appended as the ``key`` query parameter."""
    url = httpx.URL(uri).copy_merge_params({"key": self._api_key})
    async with httpx.AsyncClient(timeout=self._download_timeout, follow_redirects=True) as client:
      response = await client.get(url)
      response.raise_for_status()
    content_type = response.headers.get("content-type")
    return response.content, content_type.split(";")[0].strip() if content_type else None


def client_for(session: StudioSession, client: GeminiClient | None = None) -> GeminiClient:
  """Validate the session credential, then return the injected or a fresh client."""
  api_key = session.require_api_key()
  if client is not None:
    return client
  return GeminiClient(api_key, download_timeout=session.download_timeout)


def text_part(text: str) -> types.Part:
  return types.Part.from_text(text=text)


def media_part(data: bytes, mime_type: str) -> types.Part:
  return types.Part.from_bytes(data=data, mime_type=mime_type)


def response_text(response: Any) -> str | None:
  """Return the primary text of a response, treating empty text as absent."""
  try:
    text = response.text
  except (AttributeError, ValueError):
    logger.debug("Response carried no readable text field.", exc_info=True)
    return None
  return text or None


def candidate_parts(response: Any) -> Iterator[Any]:
  """Yield the content parts of the first candidate, if any."""
  candidates = getattr(response, "candidates", None) or []
  if not candidates:
    return
  content = getattr(candidates[0], "content", None)
  yield from getattr(content, "parts", None) or []


def decode_inline_payload(data: bytes | str) -> bytes:
  """Return raw bytes for an inline payload delivered either decoded or base64 encoded."""
  if isinstance(data, bytes):
    return data
  try:
    return base64.b64decode(data, validate=True)
  except binascii.Error as exc:
    raise ValueError("Inline payload is not valid base64.") from exc
