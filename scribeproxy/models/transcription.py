"""Transcription-related data models."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class TranscriptionResult:
    """Result of a transcription operation."""
    text: str
    processing_time: float
    timestamp: datetime
    service: str
    model: str
    chunk_id: Optional[str] = None
    session_id: Optional[str] = None
    audio_duration_seconds: Optional[float] = None  # Duration of the source window
    is_final: bool = False  # True for the window drained when the connection closed
