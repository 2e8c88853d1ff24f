"""Audio container helpers for speech synthesis responses."""

from __future__ import annotations

import io
import wave

SPEECH_SAMPLE_RATE = 24000
SPEECH_CHANNELS = 1
SPEECH_SAMPLE_WIDTH = 2  # 16-bit signed little-endian PCM


def pcm_to_wav(pcm: bytes, sample_rate: int = SPEECH_SAMPLE_RATE, channels: int = SPEECH_CHANNELS, sample_width: int = SPEECH_SAMPLE_WIDTH) -> bytes:
  """Wrap raw PCM samples in an uncompressed WAV container."""
  buffer = io.BytesIO()
  with wave.open(buffer, "wb") as wav_file:
    wav_file.setnchannels(channels)
    wav_file.setsampwidth(sample_width)
    wav_file.setframerate(sample_rate)
    wav_file.writeframes(pcm)
  return buffer.getvalue()
