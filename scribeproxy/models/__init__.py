"""Data models for the scribeproxy application."""

from .audio import AudioFormat, AudioFrame
from .events import ControlEvent, SpeakerChange, SpeakerRecord, UnclassifiedMessage
from .transcription import TranscriptionResult

__all__ = [
    "AudioFormat",
    "AudioFrame",
    "ControlEvent",
    "SpeakerChange",
    "SpeakerRecord",
    "UnclassifiedMessage",
    "TranscriptionResult",
]
