from __future__ import annotations

import pytest

from fakes import FakeGeminiClient, prompt_text, text_response
from lesson_studio.ai.prompts import build_teacher_script_prompt, render_prompt
from lesson_studio.ai.stages import generate_dialogue, generate_storyboard_prompt, generate_teacher_script, generate_video_prompt
from lesson_studio.ai.stages.dialogue import DIALOGUE_FALLBACK
from lesson_studio.ai.stages.storyboard import STORYBOARD_PROMPT_FALLBACK
from lesson_studio.ai.stages.teacher import TEACHER_SCRIPT_FALLBACK

VERIFIED_TEXT = "T"
VERIFIED_DESCRIPTION = "D"


def test_render_prompt_inserts_values_verbatim_in_one_pass():
  rendered = render_prompt("A={{A}} B={{B}}", {"A": "{{B}} \\1 $0", "B": "b"})

  assert rendered == "A={{B}} \\1 $0 B=b"


def test_render_prompt_rejects_missing_values():
  with pytest.raises(KeyError):
    render_prompt("{{A}} {{B}}", {"A": "a"})


def test_teacher_prompt_keeps_empty_verified_fields_as_empty_quotes():
  prompt = build_teacher_script_prompt(context="ctx", page_analysis="analysis", verified_text="", verified_description="", language="Persian")

  assert 'Exact page text: ""' in prompt
  assert 'Exact image description: ""' in prompt


@pytest.mark.anyio
async def test_teacher_script_embeds_verified_text_and_description(session):
  client = FakeGeminiClient([text_response("script")])

  script = await generate_teacher_script(session, image=b"img", global_context="chapter roadmap", page_analysis="goal", verified_text=VERIFIED_TEXT, verified_description=VERIFIED_DESCRIPTION, client=client)

  assert script == "script"
  prompt = prompt_text(client.calls[0])
  assert f'"{VERIFIED_TEXT}"' in prompt
  assert f'"{VERIFIED_DESCRIPTION}"' in prompt
  assert "SOURCE OF TRUTH" in prompt
  assert "do not invent it" in prompt
  assert "chapter roadmap" in prompt
  assert client.calls[0]["contents"][0].inline_data.data == b"img"


@pytest.mark.anyio
async def test_verified_values_with_placeholder_syntax_are_not_rewritten(session):
  client = FakeGeminiClient([text_response("script")])
  tricky_text = "Chapter {{LANGUAGE}} \\g<0> 50% $1"

  await generate_teacher_script(session, image=b"img", global_context="", page_analysis="", verified_text=tricky_text, verified_description="", client=client)

  assert tricky_text in prompt_text(client.calls[0])


@pytest.mark.anyio
async def test_storyboard_prompt_embeds_verified_description(session):
  client = FakeGeminiClient([text_response("draw an apple")])

  result = await generate_storyboard_prompt(session, image=b"img", verified_description=VERIFIED_DESCRIPTION, client=client)

  assert result == "draw an apple"
  assert f'"{VERIFIED_DESCRIPTION}"' in prompt_text(client.calls[0])
  assert client.calls[0]["config"] == {"temperature": 0.7}


@pytest.mark.anyio
async def test_video_prompt_embeds_verified_description(session):
  client = FakeGeminiClient([text_response("the apple rolls")])

  result = await generate_video_prompt(session, image=b"img", verified_description=VERIFIED_DESCRIPTION, client=client)

  assert result == "the apple rolls"
  assert f'"{VERIFIED_DESCRIPTION}"' in prompt_text(client.calls[0])


@pytest.mark.anyio
async def test_dialogue_embeds_verified_text_and_speaker_labels(session):
  client = FakeGeminiClient([text_response("Ali: hi\nReza: hello")])

  result = await generate_dialogue(session, image=b"img", teacher_script="teach", verified_text=VERIFIED_TEXT, client=client)

  assert result.startswith("Ali:")
  prompt = prompt_text(client.calls[0])
  assert f'"{VERIFIED_TEXT}"' in prompt
  assert "Ali" in prompt and "Reza" in prompt
  assert client.calls[0]["config"] == {"temperature": 0.7}


@pytest.mark.anyio
async def test_free_text_stages_fall_back_when_text_is_missing(session):
  client = FakeGeminiClient([text_response(None), text_response(""), text_response(None), text_response(None)])

  assert await generate_teacher_script(session, image=b"i", global_context="", page_analysis="", verified_text="", verified_description="", client=client) == TEACHER_SCRIPT_FALLBACK
  assert await generate_storyboard_prompt(session, image=b"i", verified_description="", client=client) == STORYBOARD_PROMPT_FALLBACK
  assert await generate_video_prompt(session, image=b"i", verified_description="", client=client) == ""
  assert await generate_dialogue(session, image=b"i", teacher_script="", verified_text="", client=client) == DIALOGUE_FALLBACK
