"""One endpoint per page step; each takes a page and returns its updated copy."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from lesson_studio.ai.contracts import Page
from lesson_studio.api.deps import get_page_workflow
from lesson_studio.api.models import PageStepRequest
from lesson_studio.services.pages import PageWorkflow

router = APIRouter()


@router.post("/analysis", response_model=Page)
async def analyze_page(body: PageStepRequest, workflow: PageWorkflow = Depends(get_page_workflow)) -> Page:  # noqa: B008
  return await workflow.analyze(body.page)


@router.post("/teacher-script", response_model=Page)
async def write_teacher_script(body: PageStepRequest, workflow: PageWorkflow = Depends(get_page_workflow)) -> Page:  # noqa: B008
  return await workflow.write_teacher_script(body.page, context=body.context, global_analysis=body.global_analysis)


@router.post("/teacher-audio", response_model=Page)
async def record_teacher_audio(body: PageStepRequest, workflow: PageWorkflow = Depends(get_page_workflow)) -> Page:  # noqa: B008
  return await workflow.record_teacher_audio(body.page)


@router.post("/storyboard-prompt", response_model=Page)
async def write_storyboard_prompt(body: PageStepRequest, workflow: PageWorkflow = Depends(get_page_workflow)) -> Page:  # noqa: B008
  return await workflow.write_storyboard_prompt(body.page)


@router.post("/storyboard-image", response_model=Page)
async def render_storyboard(body: PageStepRequest, workflow: PageWorkflow = Depends(get_page_workflow)) -> Page:  # noqa: B008
  return await workflow.render_storyboard(body.page)


@router.post("/video-prompt", response_model=Page)
async def write_video_prompt(body: PageStepRequest, workflow: PageWorkflow = Depends(get_page_workflow)) -> Page:  # noqa: B008
  return await workflow.write_video_prompt(body.page)


@router.post("/video", response_model=Page)
async def render_video(body: PageStepRequest, workflow: PageWorkflow = Depends(get_page_workflow)) -> Page:  # noqa: B008
  """Long-running: blocks until the video job finishes or the poll budget runs out."""
  return await workflow.render_video(body.page)


@router.post("/dialogue", response_model=Page)
async def write_dialogue(body: PageStepRequest, workflow: PageWorkflow = Depends(get_page_workflow)) -> Page:  # noqa: B008
  return await workflow.write_dialogue(body.page)


@router.post("/dialogue-audio", response_model=Page)
async def record_dialogue_audio(body: PageStepRequest, workflow: PageWorkflow = Depends(get_page_workflow)) -> Page:  # noqa: B008
  return await workflow.record_dialogue_audio(body.page)
