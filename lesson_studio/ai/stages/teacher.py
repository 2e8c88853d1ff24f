"""Teacher script stage."""

from __future__ import annotations

from lesson_studio.ai.backoff import retry_with_backoff
from lesson_studio.ai.prompts import build_teacher_script_prompt
from lesson_studio.ai.providers.gemini import GeminiClient, client_for, media_part, response_text, text_part
from lesson_studio.core.session import StudioSession

TEACHER_SCRIPT_FALLBACK = "The teacher script could not be generated."


async def generate_teacher_script(
  session: StudioSession,
  *,
  image: bytes,
  global_context: str,
  page_analysis: str,
  verified_text: str,
  verified_description: str,
  mime_type: str = "image/jpeg",
  client: GeminiClient | None = None,
) -> str:
  """Write a narrated teaching script grounded in the confirmed page text and description."""
  gemini = client_for(session, client)
  prompt = build_teacher_script_prompt(context=global_context, page_analysis=page_analysis, verified_text=verified_text, verified_description=verified_description, language=session.content_language)
  # The image is secondary context; the confirmed fields in the prompt take precedence.
  contents = [media_part(image, mime_type), text_part(prompt)]

  response = await retry_with_backoff(lambda: gemini.generate_content(model=session.text_model, contents=contents), retries=session.retries, base_delay=session.retry_base_delay, operation_name="generate_teacher_script")
  return response_text(response) or TEACHER_SCRIPT_FALLBACK
