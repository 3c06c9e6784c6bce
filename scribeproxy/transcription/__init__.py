"""Transcription module for scribeproxy."""

from .base import AbstractTranscriptionBackend, TranscriptionError
from ..models.transcription import TranscriptionResult
from .openai_backend import OpenAITranscriptionBackend
from .publisher import EventPublisher, SPEAKER_TOPIC, TRANSCRIPTION_TOPIC

__all__ = [
    "AbstractTranscriptionBackend",
    "TranscriptionError",
    "TranscriptionResult",
    "OpenAITranscriptionBackend",
    "EventPublisher",
    "SPEAKER_TOPIC",
    "TRANSCRIPTION_TOPIC",
]
