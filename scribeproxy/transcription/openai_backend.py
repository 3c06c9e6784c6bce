"""OpenAI audio transcription backend."""

import asyncio
import logging
import time
from datetime import datetime
from typing import Optional

import aiohttp

from .base import AbstractTranscriptionBackend, TranscriptionError
from ..models.transcription import TranscriptionResult

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.openai.com/v1/audio/transcriptions"


class OpenAITranscriptionBackend(AbstractTranscriptionBackend):
    """Sends WAV windows to the OpenAI transcriptions endpoint."""

    def __init__(self,
                 api_key: str,
                 model: str = "whisper-1",
                 api_url: str = DEFAULT_API_URL,
                 timeout_seconds: float = 30.0):
        """Initialize OpenAI transcription backend.

        Args:
            api_key: OpenAI API key
            model: Transcription model to request
            api_url: Transcriptions endpoint URL
            timeout_seconds: Total timeout for a single request
        """
        super().__init__(model)
        if not api_key:
            raise ValueError("OpenAI API key is required - cannot initialize without credentials")
        self.api_key = api_key
        self.api_url = api_url
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self.service_name = "OpenAI"
        self.session: Optional[aiohttp.ClientSession] = None

        logger.info(f"OpenAITranscriptionBackend initialized with model: {model}")

    def initialize(self) -> bool:
        """Nothing to verify up front; the HTTP session is opened lazily inside the event loop."""
        return True

    def _get_session(self) -> aiohttp.ClientSession:
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(timeout=self.timeout)
        return self.session

    async def transcribe(self, chunk_id: str, audio_container: bytes) -> TranscriptionResult:
        """Transcribe a WAV container with a single API call."""
        start_time = time.time()

        form = aiohttp.FormData()
        form.add_field("file", audio_container, filename="audio.wav", content_type="audio/wav")
        form.add_field("model", self.model)
        headers = {"Authorization": f"Bearer {self.api_key}"}

        logger.debug(f"Chunk ID: {chunk_id}; WAV size: {len(audio_container)} bytes; Model: {self.model}")

        try:
            async with self._get_session().post(self.api_url, data=form, headers=headers) as response:
                if response.status != 200:
                    error_text = await response.text()
                    raise TranscriptionError(
                        f"OpenAI API error (chunk={chunk_id}): {response.status} - {error_text}")
                payload = await response.json(content_type=None)
        except asyncio.TimeoutError as e:
            logger.error("OpenAI transcription timeout for chunk %s", chunk_id)
            raise TranscriptionError(f"OpenAI transcription timeout (chunk={chunk_id})") from e
        except aiohttp.ClientError as e:
            logger.error("OpenAI transcription request failed for chunk %s: %s", chunk_id, e)
            raise TranscriptionError(f"OpenAI request failed (chunk={chunk_id}): {e}") from e
        except ValueError as e:
            raise TranscriptionError(f"Invalid JSON from OpenAI (chunk={chunk_id}): {e}") from e

        text = payload.get("text") if isinstance(payload, dict) else None
        if not text:
            raise TranscriptionError(f"No transcription returned from OpenAI (chunk={chunk_id})")

        processing_time = time.time() - start_time
        logger.debug(f"Transcript='{text}' (processing_time: {processing_time:.3f}s)")
        return TranscriptionResult(
            text=text,
            processing_time=processing_time,
            timestamp=datetime.now(),
            service=self.service_name,
            model=self.model,
            chunk_id=chunk_id,
        )

    async def cleanup(self) -> None:
        """Close the HTTP session."""
        if self.session is not None and not self.session.closed:
            await self.session.close()
        self.session = None
