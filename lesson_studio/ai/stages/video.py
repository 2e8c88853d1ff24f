"""Video prompt, translation and long-running video generation stages."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from lesson_studio.ai.backoff import retry_with_backoff
from lesson_studio.ai.contracts import MediaBlob, VideoResolution
from lesson_studio.ai.errors import PollTimeoutError, VideoFailedError
from lesson_studio.ai.prompts import build_translation_prompt, build_video_prompt
from lesson_studio.ai.providers.gemini import GeminiClient, client_for, media_part, response_text, text_part
from lesson_studio.core.session import StudioSession

logger = logging.getLogger(__name__)

VIDEO_PROMPT_FALLBACK = ""
VIDEO_ASPECT_RATIO = "16:9"
# Video jobs are resubmitted at most once; the job itself is long-running.
VIDEO_RETRIES = 1

_sleep = asyncio.sleep


async def translate_to_english(session: StudioSession, text: str, *, client: GeminiClient | None = None) -> str:
  """Return a concise visual English rendering of ``text``, or ``text`` itself when none comes back."""
  gemini = client_for(session, client)
  contents = [text_part(build_translation_prompt(text))]

  response = await retry_with_backoff(lambda: gemini.generate_content(model=session.text_model, contents=contents), retries=session.retries, base_delay=session.retry_base_delay, operation_name="translate_to_english")
  return response_text(response) or text


async def generate_video_prompt(session: StudioSession, *, image: bytes, verified_description: str, mime_type: str = "image/jpeg", client: GeminiClient | None = None) -> str:
  """Draft an animation scene description from the confirmed image description."""
  gemini = client_for(session, client)
  contents = [media_part(image, mime_type), text_part(build_video_prompt(verified_description=verified_description, language=session.content_language))]

  response = await retry_with_backoff(lambda: gemini.generate_content(model=session.text_model, contents=contents), retries=session.retries, base_delay=session.retry_base_delay, operation_name="generate_video_prompt")
  return response_text(response) or VIDEO_PROMPT_FALLBACK


async def wait_for_video(client: GeminiClient, operation: Any, *, interval: float, max_polls: int) -> Any:
  """
  Poll a submitted job until its ``done`` flag is set.

  Re-fetches the status with the job's own handle every ``interval`` seconds.
  Raises PollTimeoutError once ``max_polls`` refreshes have not completed it.
  """
  polls = 0
  while not operation.done:
    if polls >= max_polls:
      logger.error("Video job still pending after %d polls: operation=%s", polls, getattr(operation, "name", None))
      raise PollTimeoutError(f"Video generation did not finish after {polls} status checks.")
    await _sleep(interval)
    operation = await client.refresh_operation(operation)
    polls += 1
    logger.debug("Polled video job: operation=%s, poll=%d, done=%s", getattr(operation, "name", None), polls, operation.done)

  logger.info("Video job finished after %d polls: operation=%s", polls, getattr(operation, "name", None))
  return operation


def video_uri(operation: Any) -> str | None:
  """Return the first generated video's locator from a finished job, if any."""
  result = getattr(operation, "response", None) or getattr(operation, "result", None)
  generated = getattr(result, "generated_videos", None) or []
  if not generated:
    return None
  video = getattr(generated[0], "video", None)
  return getattr(video, "uri", None) or None


async def generate_video(session: StudioSession, *, prompt: str, image: bytes, resolution: VideoResolution = VideoResolution.P720, mime_type: str = "image/jpeg", client: GeminiClient | None = None) -> MediaBlob:
  """Animate the source image from a translated prompt and return the downloaded clip."""
  gemini = client_for(session, client)
  english_prompt = await translate_to_english(session, prompt, client=gemini)

  async def _submit_and_wait() -> Any:
    operation = await gemini.submit_video(model=session.video_model, prompt=english_prompt, image=image, mime_type=mime_type, resolution=VideoResolution(resolution).value, aspect_ratio=VIDEO_ASPECT_RATIO)
    logger.info("Submitted video job: operation=%s, resolution=%s", getattr(operation, "name", None), VideoResolution(resolution).value)
    return await wait_for_video(gemini, operation, interval=session.video_poll_interval, max_polls=session.video_max_polls)

  operation = await retry_with_backoff(_submit_and_wait, retries=VIDEO_RETRIES, base_delay=session.retry_base_delay, operation_name="generate_video")

  uri = video_uri(operation)
  if not uri:
    error = getattr(operation, "error", None)
    logger.error("Video job finished without a result: operation=%s, error=%s", getattr(operation, "name", None), error)
    raise VideoFailedError(f"Video generation failed{f': {error}' if error else '.'}")

  # The download sits outside the retry budget.
  data, content_type = await gemini.download(uri)
  return MediaBlob(data=data, mime_type=content_type or "video/mp4")
