"""Two-student dialogue script stage."""

from __future__ import annotations

from lesson_studio.ai.backoff import retry_with_backoff
from lesson_studio.ai.prompts import build_dialogue_prompt
from lesson_studio.ai.providers.gemini import GeminiClient, client_for, media_part, response_text, text_part
from lesson_studio.core.session import StudioSession

DIALOGUE_FALLBACK = ""


async def generate_dialogue(session: StudioSession, *, image: bytes, teacher_script: str, verified_text: str, mime_type: str = "image/jpeg", client: GeminiClient | None = None) -> str:
  """Write a conversation between the two fixed speakers grounded in the confirmed page text."""
  gemini = client_for(session, client)
  prompt = build_dialogue_prompt(verified_text=verified_text, teacher_script=teacher_script, language=session.content_language)
  contents = [media_part(image, mime_type), text_part(prompt)]

  response = await retry_with_backoff(lambda: gemini.generate_content(model=session.text_model, contents=contents, config={"temperature": 0.7}), retries=session.retries, base_delay=session.retry_base_delay, operation_name="generate_dialogue")
  return response_text(response) or DIALOGUE_FALLBACK
