"""Per-connection audio windowing and transcription dispatch."""

import logging
from enum import Enum
from typing import Optional

from ..audio.buffer import AudioWindowAccumulator
from ..audio.wav import AudioEncodingError, encode_wav
from ..models.audio import AudioFormat, AudioFrame
from ..models.events import ControlEvent, SpeakerChange
from ..transcription.base import AbstractTranscriptionBackend, TranscriptionError
from ..transcription.publisher import EventPublisher
from .classifier import classify_message
from .speaker import SpeakerTracker

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """Lifecycle of a connection session."""
    OPEN = "open"
    CLOSING = "closing"
    CLOSED = "closed"


class ConnectionSession:
    """Owns the audio window and speaker state of one inbound connection.

    Messages must be handled one at a time, in arrival order: each call to
    handle_message is awaited, including any transcription it triggers, before
    the next message is read. Transcripts are therefore logged in window order.
    """

    def __init__(self,
                 session_id: str,
                 audio_format: AudioFormat,
                 backend: AbstractTranscriptionBackend,
                 chunk_duration_seconds: float = 5.0,
                 publisher: Optional[EventPublisher] = None):
        """Initialize a session.

        Args:
            session_id: Identifier used in logs and window ids
            audio_format: PCM format of inbound binary frames
            backend: Transcription backend windows are dispatched to
            chunk_duration_seconds: Window duration that triggers a transcription
            publisher: Optional publisher for transcripts and speaker changes
        """
        self.session_id = session_id
        self.audio_format = audio_format
        self.backend = backend
        self.publisher = publisher

        self.accumulator = AudioWindowAccumulator(audio_format, chunk_duration_seconds)
        self.speaker_tracker = SpeakerTracker(session_id)
        self.state = SessionState.OPEN

        # Statistics
        self.window_counter = 0
        self.transcribed_windows = 0
        self.failed_windows = 0

    async def handle_message(self, payload) -> None:
        """Process one inbound websocket payload (bytes or str)."""
        if self.state is not SessionState.OPEN:
            logger.warning(f"[{self.session_id}] Dropping message received while {self.state.value}")
            return

        message = classify_message(payload)
        if isinstance(message, AudioFrame):
            await self._on_audio(message)
        elif isinstance(message, ControlEvent):
            self._on_control_event(message)

    async def _on_audio(self, frame: AudioFrame) -> None:
        if self.accumulator.append(frame.data):
            await self._transcribe_window(is_final=False)

    def _on_control_event(self, event: ControlEvent) -> None:
        change = self.speaker_tracker.observe(event)
        if change is None:
            return
        logger.info(f"[{self.session_id}] New speaker detected: {change.name} (ID: {change.speaker_id})")
        self._publish_speaker_change(change)

    def on_transport_error(self, error: Optional[BaseException]) -> None:
        """Log a transport-level error; closing is left to the transport."""
        logger.error(f"[{self.session_id}] WebSocket error: {error}")

    async def close(self) -> None:
        """Drain any residual audio, then mark the session closed.

        Safe to call more than once; only the first call has an effect.
        """
        if self.state is not SessionState.OPEN:
            return
        self.state = SessionState.CLOSING
        logger.info(f"[{self.session_id}] Connection closing with {self.accumulator.total_bytes} bytes buffered")
        try:
            if not self.accumulator.is_empty:
                await self._transcribe_window(is_final=True)
        finally:
            self.speaker_tracker.reset()
            self.state = SessionState.CLOSED
            logger.info(f"[{self.session_id}] Session closed: {self.transcribed_windows} windows transcribed, "
                        f"{self.failed_windows} failed")

    async def _transcribe_window(self, is_final: bool) -> None:
        """Drain the window, encode it and dispatch it; failures drop the window."""
        duration = self.accumulator.duration_seconds
        audio = self.accumulator.drain()
        if not audio:
            logger.debug(f"[{self.session_id}] Skipping transcription for empty audio window")
            return

        self.window_counter += 1
        suffix = f"{self.window_counter}-final" if is_final else str(self.window_counter)
        chunk_id = f"{self.session_id}.window-{suffix}"
        label = "Final transcription" if is_final else "Transcription"

        logger.info(f"[{self.session_id}] Transcribing {chunk_id}: {len(audio)} bytes ({duration:.2f}s)")
        try:
            container = encode_wav(audio, self.audio_format)
            result = await self.backend.transcribe(chunk_id, container)
        except (AudioEncodingError, TranscriptionError) as e:
            self.failed_windows += 1
            logger.error(f"[{self.session_id}] Failed to transcribe {chunk_id}: {e}")
            return

        self.transcribed_windows += 1
        result.chunk_id = chunk_id
        result.session_id = self.session_id
        result.audio_duration_seconds = duration
        result.is_final = is_final
        logger.info(f"[{self.session_id}] {label}: {result.text}")
        self._publish_result(result)

    # pubsub re-raises listener exceptions; they must not end the session
    def _publish_result(self, result) -> None:
        if not self.publisher:
            return
        try:
            self.publisher.publish_transcription_result(result)
        except Exception as e:
            logger.error(f"[{self.session_id}] Transcription listener failed for {result.chunk_id}: {e}",
                         exc_info=True)

    def _publish_speaker_change(self, change: SpeakerChange) -> None:
        if not self.publisher:
            return
        try:
            self.publisher.publish_speaker_change(change)
        except Exception as e:
            logger.error(f"[{self.session_id}] Speaker change listener failed for {change.name!r}: {e}",
                         exc_info=True)
