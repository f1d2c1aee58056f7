"""WAV framing for the raw PCM returned by the speech model."""

from __future__ import annotations

import base64
import io
import wave

WAV_MIME = "audio/wav"
PCM_CHANNELS = 1
PCM_RATE = 24000
PCM_SAMPLE_WIDTH = 2  # bytes, i.e. 16-bit linear PCM


def pcm_to_wav(
    pcm: bytes,
    *,
    channels: int = PCM_CHANNELS,
    rate: int = PCM_RATE,
    sample_width: int = PCM_SAMPLE_WIDTH,
) -> bytes:
    """Wrap raw PCM in a RIFF/WAVE container with a single data chunk."""
    buf = io.BytesIO()
    with wave.open(buf, "wb") as writer:
        writer.setnchannels(channels)
        writer.setsampwidth(sample_width)
        writer.setframerate(rate)
        writer.writeframes(pcm)
    # The header sizes are patched on close, so read only after the with block
    return buf.getvalue()


def wav_data_uri(wav_bytes: bytes) -> str:
    return f"data:{WAV_MIME};base64," + base64.b64encode(wav_bytes).decode("ascii")


def pcm_to_wav_data_uri(pcm: bytes, **params) -> str:
    return wav_data_uri(pcm_to_wav(pcm, **params))
