"""Request payloads for the page endpoints."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from lesson_studio.ai.contracts import Page


class PageStepRequest(BaseModel):
  """A page plus the chapter context some steps need."""

  model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

  page: Page
  context: str = ""
  global_analysis: str = ""
