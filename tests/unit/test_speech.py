from __future__ import annotations

import base64
import io
import wave

import pytest

from fakes import FakeGeminiClient, inline_part, parts_response, plain_part, prompt_text
from lesson_studio.ai.errors import MissingMediaPayloadError
from lesson_studio.ai.stages.speech import DIALOGUE_VOICES, synthesize_dialogue_speech, synthesize_speech

PCM = b"\x01\x00\x02\x00" * 120


def _read_wav(data: bytes) -> tuple[int, int, int, int]:
  with wave.open(io.BytesIO(data), "rb") as wav_file:
    return wav_file.getframerate(), wav_file.getnchannels(), wav_file.getsampwidth(), wav_file.getnframes()


@pytest.mark.anyio
async def test_single_speaker_wraps_base64_pcm_in_wav(session):
  client = FakeGeminiClient([parts_response(inline_part(base64.b64encode(PCM).decode("ascii"), "audio/L16;codec=pcm;rate=24000"))])

  blob = await synthesize_speech(session, "Salam", voice_name="Kore", client=client)

  assert blob.mime_type == "audio/wav"
  assert _read_wav(blob.data) == (24000, 1, 2, len(PCM) // 2)
  call = client.calls[0]
  assert call["model"] == session.tts_model
  assert call["config"]["response_modalities"] == ["AUDIO"]
  assert call["config"]["speech_config"]["voice_config"]["prebuilt_voice_config"]["voice_name"] == "Kore"


@pytest.mark.anyio
async def test_single_speaker_accepts_already_decoded_bytes(session):
  client = FakeGeminiClient([parts_response(inline_part(PCM, "audio/pcm"))])

  blob = await synthesize_speech(session, "Salam", voice_name="Puck", client=client)

  assert _read_wav(blob.data)[3] == len(PCM) // 2


@pytest.mark.anyio
@pytest.mark.parametrize("script", ["Ali: hi\nReza: hello", "Ali: " + "long line " * 200 + "\nReza: ok"])
async def test_dialogue_speech_is_always_24khz_mono(session, script):
  client = FakeGeminiClient([parts_response(inline_part(base64.b64encode(PCM).decode("ascii"), "audio/pcm"))])

  blob = await synthesize_dialogue_speech(session, script, client=client)

  rate, channels, _, _ = _read_wav(blob.data)
  assert (rate, channels) == (24000, 1)
  assert prompt_text(client.calls[0]).startswith("TTS the following conversation:\n")


@pytest.mark.anyio
async def test_dialogue_speech_uses_fixed_speaker_voice_mapping(session):
  client = FakeGeminiClient([parts_response(inline_part(PCM, "audio/pcm"))])

  await synthesize_dialogue_speech(session, "Reza: first\nAli: second", client=client)

  speaker_configs = client.calls[0]["config"]["speech_config"]["multi_speaker_voice_config"]["speaker_voice_configs"]
  mapping = {item["speaker"]: item["voice_config"]["prebuilt_voice_config"]["voice_name"] for item in speaker_configs}
  assert mapping == {"Ali": "Puck", "Reza": "Kore"}
  assert mapping == DIALOGUE_VOICES


@pytest.mark.anyio
@pytest.mark.parametrize("response", [parts_response(), parts_response(plain_part("I can't speak")), parts_response(inline_part("", "audio/pcm"))])
async def test_speech_without_inline_audio_fails(session, response):
  client = FakeGeminiClient([response])

  with pytest.raises(MissingMediaPayloadError):
    await synthesize_speech(session, "Salam", voice_name="Kore", client=client)


@pytest.mark.anyio
async def test_speech_with_corrupt_base64_fails(session):
  client = FakeGeminiClient([parts_response(inline_part("not*base64!", "audio/pcm"))])

  with pytest.raises(MissingMediaPayloadError):
    await synthesize_speech(session, "Salam", voice_name="Kore", client=client)
