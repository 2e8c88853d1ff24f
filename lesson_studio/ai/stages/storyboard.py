"""Storyboard prompt and illustration stages."""

from __future__ import annotations

from lesson_studio.ai.backoff import retry_with_backoff
from lesson_studio.ai.contracts import MediaBlob
from lesson_studio.ai.errors import MissingMediaPayloadError
from lesson_studio.ai.prompts import build_storyboard_image_prompt, build_storyboard_prompt
from lesson_studio.ai.providers.gemini import GeminiClient, candidate_parts, client_for, decode_inline_payload, media_part, response_text, text_part
from lesson_studio.core.session import StudioSession

STORYBOARD_PROMPT_FALLBACK = "The storyboard prompt could not be generated."
DEFAULT_IMAGE_MIME_TYPE = "image/png"


async def generate_storyboard_prompt(session: StudioSession, *, image: bytes, verified_description: str, mime_type: str = "image/jpeg", client: GeminiClient | None = None) -> str:
  """Draft an illustration prompt whose subject comes from the confirmed image description."""
  gemini = client_for(session, client)
  contents = [media_part(image, mime_type), text_part(build_storyboard_prompt(verified_description=verified_description, language=session.content_language))]

  response = await retry_with_backoff(lambda: gemini.generate_content(model=session.text_model, contents=contents, config={"temperature": 0.7}), retries=session.retries, base_delay=session.retry_base_delay, operation_name="generate_storyboard_prompt")
  return response_text(response) or STORYBOARD_PROMPT_FALLBACK


async def generate_storyboard_image(session: StudioSession, prompt_text: str, *, client: GeminiClient | None = None) -> MediaBlob:
  """Render a square, text-free illustration and return the first inline image found."""
  gemini = client_for(session, client)
  contents = [text_part(build_storyboard_image_prompt(prompt_text))]
  config = {"image_config": {"aspect_ratio": "1:1"}}

  response = await retry_with_backoff(lambda: gemini.generate_content(model=session.image_model, contents=contents, config=config), retries=session.retries, base_delay=session.retry_base_delay, operation_name="generate_storyboard_image")

  for part in candidate_parts(response):
    inline_data = getattr(part, "inline_data", None)
    if inline_data is None or not inline_data.data:
      continue
    try:
      data = decode_inline_payload(inline_data.data)
    except ValueError as exc:
      raise MissingMediaPayloadError("The image model returned an undecodable image payload.") from exc
    return MediaBlob(data=data, mime_type=inline_data.mime_type or DEFAULT_IMAGE_MIME_TYPE)

  raise MissingMediaPayloadError("The image model returned no image.")
