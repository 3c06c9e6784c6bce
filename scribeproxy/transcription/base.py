"""Abstract base classes for transcription backends."""

from abc import ABC, abstractmethod
import logging

from ..models.transcription import TranscriptionResult

logger = logging.getLogger(__name__)


class TranscriptionError(Exception):
    """Raised when a single transcription attempt fails."""


class AbstractTranscriptionBackend(ABC):
    """Abstract base class for transcription backends.

    A backend makes exactly one attempt per call and reports every failure as
    TranscriptionError. Request timeouts are owned by the backend.
    """

    def __init__(self, model: str):
        """Initialize backend with the model identifier to request."""
        self.model = model

    @abstractmethod
    async def transcribe(self, chunk_id: str, audio_container: bytes) -> TranscriptionResult:
        """Transcribe an encoded audio container and return the result.

        Args:
            chunk_id: Identifier of the audio window, used for logging
            audio_container: Complete encoded audio file (e.g. WAV)

        Returns:
            TranscriptionResult with transcription and metadata

        Raises:
            TranscriptionError: If the service call fails or returns no text
        """
        pass

    @abstractmethod
    def initialize(self) -> bool:
        """Initialize backend resources and verify configuration.

        Returns:
            True if initialization successful, False otherwise
        """
        pass

    @abstractmethod
    async def cleanup(self) -> None:
        """Clean up backend resources."""
        pass
