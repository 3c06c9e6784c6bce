"""WAV container encoding for drained audio windows."""

import io
import logging
import wave

from ..models.audio import AudioFormat

logger = logging.getLogger(__name__)


class AudioEncodingError(Exception):
    """Raised when PCM audio cannot be wrapped in a WAV container."""


def encode_wav(pcm_data: bytes, audio_format: AudioFormat) -> bytes:
    """Wrap raw PCM bytes in an in-memory RIFF/WAVE container.

    A trailing partial sample frame is dropped since WAV data must hold whole frames.

    Args:
        pcm_data: Raw little-endian PCM bytes
        audio_format: Format the bytes were captured in

    Returns:
        Complete WAV file contents
    """
    remainder = len(pcm_data) % audio_format.frame_size
    if remainder:
        logger.debug(f"Dropping {remainder} trailing bytes of a partial sample frame")
        pcm_data = pcm_data[:len(pcm_data) - remainder]

    buffer = io.BytesIO()
    try:
        with wave.open(buffer, 'wb') as wf:
            wf.setnchannels(audio_format.channels)
            wf.setsampwidth(audio_format.sample_width)
            wf.setframerate(audio_format.sample_rate)
            wf.writeframes(pcm_data)
    except (wave.Error, ValueError) as e:
        raise AudioEncodingError(f"Failed to encode {len(pcm_data)} bytes as WAV: {e}") from e

    return buffer.getvalue()
