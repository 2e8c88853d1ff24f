from __future__ import annotations

from fastapi import APIRouter, Depends

from lesson_studio.ai.contracts import Course
from lesson_studio.api.deps import get_page_workflow
from lesson_studio.services.pages import PageWorkflow

router = APIRouter()


@router.post("/roadmap", response_model=Course)
async def build_course_roadmap(course: Course, workflow: PageWorkflow = Depends(get_page_workflow)) -> Course:  # noqa: B008
  """Generate the chapter roadmap from every uploaded page image."""
  return await workflow.build_roadmap(course)
