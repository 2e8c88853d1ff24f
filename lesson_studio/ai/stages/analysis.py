"""Page analysis and chapter roadmap stages."""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence

from pydantic import ValidationError

from lesson_studio.ai.backoff import retry_with_backoff
from lesson_studio.ai.contracts import PAGE_ANALYSIS_RESPONSE_SCHEMA, PageAnalysis, PageAnalysisResult, PageImage
from lesson_studio.ai.prompts import build_course_map_page_label, build_course_map_prompt, build_page_analysis_prompt
from lesson_studio.ai.providers.gemini import GeminiClient, client_for, media_part, response_text, text_part
from lesson_studio.core.session import StudioSession

logger = logging.getLogger(__name__)

ROADMAP_FALLBACK = "The roadmap analysis could not be produced."


async def analyze_page(session: StudioSession, image: bytes, *, mime_type: str = "image/jpeg", client: GeminiClient | None = None) -> PageAnalysisResult:
  """Extract the teaching analysis, verbatim text and visual description of one page.

  Malformed responses never raise; they yield the fallback result with
  ``fallback_reason`` set so callers can surface the degradation.
  """
  gemini = client_for(session, client)
  contents = [media_part(image, mime_type), text_part(build_page_analysis_prompt(language=session.content_language))]
  config = {"response_mime_type": "application/json", "response_schema": PAGE_ANALYSIS_RESPONSE_SCHEMA}

  response = await retry_with_backoff(lambda: gemini.generate_content(model=session.text_model, contents=contents, config=config), retries=session.retries, base_delay=session.retry_base_delay, operation_name="analyze_page")

  result = parse_page_analysis(response_text(response))
  if result.is_fallback:
    logger.warning("Page analysis response could not be parsed; returning fallback. reason=%s", result.fallback_reason)
  return result


def parse_page_analysis(raw: str | None) -> PageAnalysisResult:
  """
  Parse the structured analysis body into a tagged result.

  The body must be strict JSON; prose, code fences or other wrapping yield the
  fallback. An absent body and missing fields both read as empty strings.
  """
  try:
    payload = json.loads(raw or "{}")
  except json.JSONDecodeError as exc:
    return PageAnalysisResult.fallback(f"invalid JSON: {exc}")

  if not isinstance(payload, dict):
    return PageAnalysisResult.fallback(f"expected a JSON object, got {type(payload).__name__}")

  # Explicit nulls count as empty fields.
  cleaned = {key: value for key, value in payload.items() if value is not None}
  try:
    return PageAnalysisResult.parsed(PageAnalysis.model_validate(cleaned))
  except ValidationError as exc:
    return PageAnalysisResult.fallback(f"schema violation: {exc.error_count()} error(s)")


async def analyze_course_map(session: StudioSession, *, context: str, pages: Sequence[PageImage], client: GeminiClient | None = None) -> str:
  """Build the chapter-level teaching roadmap from every page image plus the teacher context."""
  gemini = client_for(session, client)
  contents = [text_part(build_course_map_prompt(context=context, page_count=len(pages), language=session.content_language))]
  for page in pages:
    contents.append(text_part(build_course_map_page_label(page.page_number)))
    contents.append(media_part(page.data, page.mime_type))

  response = await retry_with_backoff(lambda: gemini.generate_content(model=session.text_model, contents=contents, config={"temperature": 0.2}), retries=session.retries, base_delay=session.retry_base_delay, operation_name="analyze_course_map")
  return response_text(response) or ROADMAP_FALLBACK
