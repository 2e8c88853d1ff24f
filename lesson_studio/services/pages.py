"""Caller-side workflow: load page assets, run a stage, persist blobs, return updated entities."""

from __future__ import annotations

import logging
import mimetypes

from lesson_studio.ai.contracts import Course, MediaBlob, Page, PageImage
from lesson_studio.ai.errors import AssetNotFoundError, UnverifiedContentError
from lesson_studio.ai.providers.gemini import GeminiClient
from lesson_studio.ai.stages import (
  analyze_course_map,
  analyze_page,
  generate_dialogue,
  generate_storyboard_image,
  generate_storyboard_prompt,
  generate_teacher_script,
  generate_video,
  generate_video_prompt,
  synthesize_dialogue_speech,
  synthesize_speech,
)
from lesson_studio.core.session import StudioSession
from lesson_studio.storage.assets import LocalAssetStore, validate_asset_name

logger = logging.getLogger(__name__)


def asset_prefix(page: Page, artifact: str) -> str:
  """Storage name of one generated artifact of a page, minus the extension; rejected before any remote call."""
  return validate_asset_name(f"page-{page.id}-{artifact}")


def _image_mime_type(name: str) -> str:
  return mimetypes.guess_type(name)[0] or "image/jpeg"


class PageWorkflow:
  """Drive the stages for one session, persisting media through the asset store."""

  def __init__(self, session: StudioSession, store: LocalAssetStore, *, client: GeminiClient | None = None) -> None:
    self._session = session
    self._store = store
    self._client = client

  async def _load_image(self, page: Page) -> PageImage:
    if not page.image_id:
      raise AssetNotFoundError(f"Page {page.id} has no source image.")
    stored = await self._store.load(page.image_id)
    return PageImage(page_number=page.page_number, data=stored.data, mime_type=_image_mime_type(page.image_id))

  async def _save(self, prefix: str, blob: MediaBlob) -> str:
    return await self._store.save(f"{prefix}{blob.extension}", blob.data)

  @staticmethod
  def _require_confirmed(page: Page, step: str) -> None:
    if not page.is_page_analysis_confirmed:
      raise UnverifiedContentError(f"Confirm the analysis of page {page.page_number} before generating the {step}.")

  async def build_roadmap(self, course: Course) -> Course:
    """Generate the chapter roadmap from every page image; a new roadmap needs reconfirmation."""
    images = [await self._load_image(page) for page in sorted(course.pages, key=lambda item: item.page_number)]
    roadmap = await analyze_course_map(self._session, context=course.context, pages=images, client=self._client)
    logger.info("Built roadmap for course %s from %d pages", course.id, len(images))
    return course.model_copy(update={"global_analysis": roadmap, "is_analysis_confirmed": False})

  async def analyze(self, page: Page) -> Page:
    """Run page analysis; fresh results replace the verified fields and clear confirmation."""
    image = await self._load_image(page)
    result = await analyze_page(self._session, image.data, mime_type=image.mime_type, client=self._client)
    return page.model_copy(update={"ai_analysis": result.analysis, "extracted_text": result.text, "image_description": result.description, "is_page_analysis_confirmed": False})

  async def write_teacher_script(self, page: Page, *, context: str = "", global_analysis: str = "") -> Page:
    """Write the narration; the confirmed roadmap is preferred over the raw teacher context."""
    self._require_confirmed(page, "teacher script")
    image = await self._load_image(page)
    script = await generate_teacher_script(
      self._session,
      image=image.data,
      global_context=global_analysis or context,
      page_analysis=page.ai_analysis,
      verified_text=page.extracted_text,
      verified_description=page.image_description,
      mime_type=image.mime_type,
      client=self._client,
    )
    return page.model_copy(update={"teacher_script": script})

  async def record_teacher_audio(self, page: Page) -> Page:
    prefix = asset_prefix(page, "teacher-audio")
    blob = await synthesize_speech(self._session, page.teacher_script, voice_name=page.teacher_voice, client=self._client)
    name = await self._save(prefix, blob)
    return page.model_copy(update={"teacher_audio_id": name})

  async def write_storyboard_prompt(self, page: Page) -> Page:
    self._require_confirmed(page, "storyboard prompt")
    image = await self._load_image(page)
    prompt = await generate_storyboard_prompt(self._session, image=image.data, verified_description=page.image_description, mime_type=image.mime_type, client=self._client)
    return page.model_copy(update={"storyboard_prompt": prompt})

  async def render_storyboard(self, page: Page) -> Page:
    prefix = asset_prefix(page, "storyboard")
    blob = await generate_storyboard_image(self._session, page.storyboard_prompt, client=self._client)
    name = await self._save(prefix, blob)
    return page.model_copy(update={"storyboard_image_id": name})

  async def write_video_prompt(self, page: Page) -> Page:
    self._require_confirmed(page, "video prompt")
    image = await self._load_image(page)
    prompt = await generate_video_prompt(self._session, image=image.data, verified_description=page.image_description, mime_type=image.mime_type, client=self._client)
    return page.model_copy(update={"video_prompt": prompt})

  async def render_video(self, page: Page) -> Page:
    prefix = asset_prefix(page, "video")
    image = await self._load_image(page)
    blob = await generate_video(self._session, prompt=page.video_prompt, image=image.data, resolution=page.video_resolution, mime_type=image.mime_type, client=self._client)
    name = await self._save(prefix, blob)
    return page.model_copy(update={"video_id": name})

  async def write_dialogue(self, page: Page) -> Page:
    self._require_confirmed(page, "dialogue")
    image = await self._load_image(page)
    script = await generate_dialogue(self._session, image=image.data, teacher_script=page.teacher_script, verified_text=page.extracted_text, mime_type=image.mime_type, client=self._client)
    return page.model_copy(update={"dialogue_script": script})

  async def record_dialogue_audio(self, page: Page) -> Page:
    prefix = asset_prefix(page, "dialogue-audio")
    blob = await synthesize_dialogue_speech(self._session, page.dialogue_script, client=self._client)
    name = await self._save(prefix, blob)
    return page.model_copy(update={"dialogue_audio_id": name})
