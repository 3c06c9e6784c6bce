"""Unit tests for WAV encoding and AudioFormat."""

import io
import wave

import pytest

from scribeproxy.audio.wav import encode_wav
from scribeproxy.models.audio import AudioFormat


def read_wav(data: bytes):
    with wave.open(io.BytesIO(data), 'rb') as wf:
        params = (wf.getnchannels(), wf.getsampwidth(), wf.getframerate())
        frames = wf.readframes(wf.getnframes())
    return params, frames


@pytest.mark.unit
class TestAudioFormat:
    """Test cases for AudioFormat."""

    def test_derived_sizes(self):
        fmt = AudioFormat(sample_rate=24000, channels=2, bit_depth=16)

        assert fmt.sample_width == 2
        assert fmt.frame_size == 4
        assert fmt.bytes_per_second == 96000

    @pytest.mark.parametrize("kwargs", [
        {"sample_rate": 0},
        {"sample_rate": 16000, "channels": 0},
        {"sample_rate": 16000, "bit_depth": 12},
    ])
    def test_invalid_parameters(self, kwargs):
        with pytest.raises(ValueError):
            AudioFormat(**kwargs)


@pytest.mark.unit
class TestEncodeWav:
    """Test cases for encode_wav."""

    def test_header_matches_format(self, audio_format, sample_audio_chunk):
        data = encode_wav(sample_audio_chunk, audio_format)

        assert data[:4] == b'RIFF'
        assert data[8:12] == b'WAVE'
        params, frames = read_wav(data)
        assert params == (1, 2, 16000)
        assert frames == sample_audio_chunk

    def test_stereo_24_bit(self):
        fmt = AudioFormat(sample_rate=48000, channels=2, bit_depth=24)
        pcm = bytes(range(6)) * 100

        params, frames = read_wav(encode_wav(pcm, fmt))

        assert params == (2, 3, 48000)
        assert frames == pcm

    def test_trailing_partial_frame_dropped(self, audio_format):
        params, frames = read_wav(encode_wav(b'\x01\x02\x03\x04\x05', audio_format))

        assert frames == b'\x01\x02\x03\x04'

    def test_deterministic(self, audio_format, sample_audio_chunk):
        assert encode_wav(sample_audio_chunk, audio_format) == encode_wav(sample_audio_chunk, audio_format)
