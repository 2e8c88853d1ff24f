"""Single- and multi-speaker speech synthesis stages."""

from __future__ import annotations

import logging
from typing import Any

from lesson_studio.ai.backoff import retry_with_backoff
from lesson_studio.ai.contracts import MediaBlob
from lesson_studio.ai.errors import MissingMediaPayloadError
from lesson_studio.ai.prompts import DIALOGUE_SPEAKERS, build_multi_speaker_tts_prompt
from lesson_studio.ai.providers.gemini import GeminiClient, candidate_parts, client_for, decode_inline_payload, text_part
from lesson_studio.core.session import StudioSession
from lesson_studio.utils.audio import SPEECH_CHANNELS, SPEECH_SAMPLE_RATE, pcm_to_wav

logger = logging.getLogger(__name__)

# Static label-to-voice mapping; it does not depend on the script content.
DIALOGUE_VOICES: dict[str, str] = {DIALOGUE_SPEAKERS[0]: "Puck", DIALOGUE_SPEAKERS[1]: "Kore"}


async def synthesize_speech(session: StudioSession, text: str, *, voice_name: str, client: GeminiClient | None = None) -> MediaBlob:
  """Narrate text with one prebuilt voice and return a 24 kHz mono WAV blob."""
  gemini = client_for(session, client)
  config = {"response_modalities": ["AUDIO"], "speech_config": {"voice_config": {"prebuilt_voice_config": {"voice_name": voice_name}}}}

  response = await retry_with_backoff(lambda: gemini.generate_content(model=session.tts_model, contents=[text_part(text)], config=config), retries=session.retries, base_delay=session.retry_base_delay, operation_name="synthesize_speech")
  return _wav_from_response(response)


async def synthesize_dialogue_speech(session: StudioSession, script: str, *, client: GeminiClient | None = None) -> MediaBlob:
  """Voice a two-speaker script with the fixed speaker-to-voice mapping."""
  gemini = client_for(session, client)
  speaker_configs = [{"speaker": speaker, "voice_config": {"prebuilt_voice_config": {"voice_name": voice}}} for speaker, voice in DIALOGUE_VOICES.items()]
  config = {"response_modalities": ["AUDIO"], "speech_config": {"multi_speaker_voice_config": {"speaker_voice_configs": speaker_configs}}}
  contents = [text_part(build_multi_speaker_tts_prompt(script))]

  response = await retry_with_backoff(lambda: gemini.generate_content(model=session.tts_model, contents=contents, config=config), retries=session.retries, base_delay=session.retry_base_delay, operation_name="synthesize_dialogue_speech")
  return _wav_from_response(response)


def _wav_from_response(response: Any) -> MediaBlob:
  """Decode the first part's inline PCM payload into a WAV container."""
  first_part = next(iter(candidate_parts(response)), None)
  inline_data = getattr(first_part, "inline_data", None)
  payload = getattr(inline_data, "data", None)
  if not payload:
    raise MissingMediaPayloadError("No audio data was returned by the speech model.")

  try:
    pcm = decode_inline_payload(payload)
  except ValueError as exc:
    raise MissingMediaPayloadError("The speech model returned an undecodable audio payload.") from exc

  logger.debug("Decoded %d bytes of PCM audio.", len(pcm))
  return MediaBlob(data=pcm_to_wav(pcm, sample_rate=SPEECH_SAMPLE_RATE, channels=SPEECH_CHANNELS), mime_type="audio/wav")
