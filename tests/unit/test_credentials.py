from __future__ import annotations

import pytest

from fakes import FakeGeminiClient
from lesson_studio.ai import stages
from lesson_studio.ai.contracts import PageImage
from lesson_studio.ai.errors import MissingCredentialError
from lesson_studio.ai.providers.gemini import client_for
from lesson_studio.config import get_settings
from lesson_studio.core.session import StudioSession

STAGE_CALLS = {
  "analyze_page": lambda session, client: stages.analyze_page(session, b"img", client=client),
  "analyze_course_map": lambda session, client: stages.analyze_course_map(session, context="", pages=[PageImage(page_number=1, data=b"img")], client=client),
  "generate_teacher_script": lambda session, client: stages.generate_teacher_script(session, image=b"img", global_context="", page_analysis="", verified_text="T", verified_description="D", client=client),
  "synthesize_speech": lambda session, client: stages.synthesize_speech(session, "text", voice_name="Kore", client=client),
  "synthesize_dialogue_speech": lambda session, client: stages.synthesize_dialogue_speech(session, "Ali: a\nReza: b", client=client),
  "generate_storyboard_prompt": lambda session, client: stages.generate_storyboard_prompt(session, image=b"img", verified_description="D", client=client),
  "generate_storyboard_image": lambda session, client: stages.generate_storyboard_image(session, "prompt", client=client),
  "generate_video_prompt": lambda session, client: stages.generate_video_prompt(session, image=b"img", verified_description="D", client=client),
  "generate_video": lambda session, client: stages.generate_video(session, prompt="p", image=b"img", client=client),
  "generate_dialogue": lambda session, client: stages.generate_dialogue(session, image=b"img", teacher_script="", verified_text="T", client=client),
  "translate_to_english": lambda session, client: stages.translate_to_english(session, "text", client=client),
}


@pytest.mark.anyio
@pytest.mark.parametrize("stage_name", sorted(STAGE_CALLS))
@pytest.mark.parametrize("api_key", [None, "", "   "])
async def test_stage_without_credential_fails_before_any_call(stage_name, api_key, sleeps):
  client = FakeGeminiClient()

  with pytest.raises(MissingCredentialError):
    await STAGE_CALLS[stage_name](StudioSession(api_key=api_key), client)

  assert client.calls == []
  assert client.submitted == []
  assert client.downloads == []
  assert sleeps == []


def test_client_for_returns_injected_client_when_key_present():
  client = FakeGeminiClient()

  assert client_for(StudioSession(api_key="key"), client) is client


def test_session_from_settings_prefers_explicit_key():
  settings = get_settings()

  session = StudioSession.from_settings(settings, api_key="caller-key")

  assert session.api_key == "caller-key"
  assert session.text_model == settings.text_model
  assert session.retries == settings.retry_attempts
  assert session.video_max_polls == settings.video_max_polls


def test_require_api_key_strips_whitespace():
  assert StudioSession(api_key="  key  ").require_api_key() == "key"
