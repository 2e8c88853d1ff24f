"""Shared data contracts for the lesson studio pipeline."""

from __future__ import annotations

import mimetypes
from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

ANALYSIS_PARSE_ERROR_MARKER = "Error processing the page analysis."
PAGE_ID_PATTERN = r"^[A-Za-z0-9][A-Za-z0-9_-]{0,63}$"


class VideoResolution(str, Enum):
  """Output resolutions supported by the video model."""

  P720 = "720p"
  P1080 = "1080p"


class _EntityModel(BaseModel):
  model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Page(_EntityModel):
  """One scanned textbook page and every artifact generated from it."""

  # Ids become part of stored asset names.
  id: str = Field(pattern=PAGE_ID_PATTERN)
  page_number: int = Field(ge=1)
  image_id: str | None = None

  ai_analysis: str = ""
  extracted_text: str = ""
  image_description: str = ""
  is_page_analysis_confirmed: bool = False

  teacher_script: str = ""
  teacher_audio_id: str | None = None
  teacher_voice: str = "Kore"
  teacher_audio_speed: float = Field(default=1.0, gt=0)
  include_teacher_audio: bool = True

  storyboard_prompt: str = ""
  storyboard_image_id: str | None = None
  include_storyboard: bool = True

  video_prompt: str = ""
  video_id: str | None = None
  video_resolution: VideoResolution = VideoResolution.P720
  include_video: bool = True

  dialogue_script: str = ""
  dialogue_audio_id: str | None = None
  dialogue_speed: float = Field(default=1.0, gt=0)
  include_dialogue_audio: bool = True

  def confirm_analysis(self, extracted_text: str, image_description: str) -> Page:
    """Return a copy whose verified fields hold exactly the operator-confirmed values."""
    return self.model_copy(update={"extracted_text": extracted_text, "image_description": image_description, "is_page_analysis_confirmed": True})


class Course(_EntityModel):
  """A chapter of pages plus the teacher's context and the generated roadmap."""

  id: str
  title: str
  context: str = ""
  global_analysis: str = ""
  is_analysis_confirmed: bool = False
  pages: list[Page] = Field(default_factory=list)


class PageAnalysis(BaseModel):
  """Schema the page analysis response must satisfy."""

  model_config = ConfigDict(strict=True, extra="ignore")

  analysis: str = ""
  text: str = ""
  description: str = ""


PAGE_ANALYSIS_RESPONSE_SCHEMA = {
  "type": "OBJECT",
  "properties": {"analysis": {"type": "STRING"}, "text": {"type": "STRING"}, "description": {"type": "STRING"}},
  "required": ["analysis", "text", "description"],
}


@dataclass(frozen=True)
class PageAnalysisResult:
  """Parsed page analysis, or the fixed fallback tagged with why parsing failed."""

  analysis: str
  text: str
  description: str
  fallback_reason: str | None = None

  @property
  def is_fallback(self) -> bool:
    return self.fallback_reason is not None

  @classmethod
  def parsed(cls, value: PageAnalysis) -> PageAnalysisResult:
    return cls(analysis=value.analysis, text=value.text, description=value.description)

  @classmethod
  def fallback(cls, reason: str) -> PageAnalysisResult:
    return cls(analysis=ANALYSIS_PARSE_ERROR_MARKER, text="", description="", fallback_reason=reason)


@dataclass(frozen=True)
class PageImage:
  """Raw page image bytes tagged with the page number they belong to."""

  page_number: int
  data: bytes
  mime_type: str = "image/jpeg"


@dataclass(frozen=True)
class MediaBlob:
  """Binary artifact returned to the caller for persistence."""

  data: bytes
  mime_type: str

  @property
  def extension(self) -> str:
    """Best-effort file extension for naming the stored asset."""
    overrides = {"audio/wav": ".wav", "audio/x-wav": ".wav", "image/jpeg": ".jpg", "video/mp4": ".mp4"}
    if self.mime_type in overrides:
      return overrides[self.mime_type]
    return mimetypes.guess_extension(self.mime_type) or ".bin"
