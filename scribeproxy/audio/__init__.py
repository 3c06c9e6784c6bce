"""Audio buffering and encoding module."""

from .buffer import AudioWindowAccumulator
from .wav import AudioEncodingError, encode_wav

__all__ = [
    'AudioWindowAccumulator',
    'AudioEncodingError',
    'encode_wav'
]
