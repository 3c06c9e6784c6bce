"""Duration-bounded audio window buffer for windowed transcription."""

import logging
from typing import List

from ..models.audio import AudioFormat

logger = logging.getLogger(__name__)


class AudioWindowAccumulator:
    """Accumulates raw PCM chunks until a window of the configured duration is buffered.

    One instance belongs to exactly one connection session. Chunks are treated
    as opaque bytes: duration is derived from the total byte count only, so a
    chunk that is not aligned to the sample frame size is still accepted.
    """

    def __init__(self, audio_format: AudioFormat, chunk_duration_seconds: float = 5.0):
        """Initialize the accumulator.

        Args:
            audio_format: PCM format of the incoming audio
            chunk_duration_seconds: Buffered duration at which a window is ready
        """
        if chunk_duration_seconds <= 0:
            raise ValueError(f"Chunk duration must be positive, got {chunk_duration_seconds}")
        self.audio_format = audio_format
        self.chunk_duration_seconds = chunk_duration_seconds

        self.chunks: List[bytes] = []
        self.total_bytes = 0

        logger.debug(f"AudioWindowAccumulator initialized: {chunk_duration_seconds}s windows, "
                     f"{audio_format.bytes_per_second} bytes/s")

    @property
    def duration_seconds(self) -> float:
        """Buffered audio duration in seconds."""
        return self.total_bytes / self.audio_format.bytes_per_second

    @property
    def chunk_count(self) -> int:
        return len(self.chunks)

    @property
    def is_empty(self) -> bool:
        return self.total_bytes == 0

    def append(self, data: bytes) -> bool:
        """Add a chunk to the window.

        Args:
            data: Raw PCM bytes

        Returns:
            True once the buffered duration reaches the window duration
        """
        if data:
            self.chunks.append(bytes(data))
            self.total_bytes += len(data)

        ready = self.duration_seconds >= self.chunk_duration_seconds
        logger.debug(f"Added audio chunk: {len(data)} bytes, window now has {self.chunk_count} chunks "
                     f"({self.total_bytes} bytes, {self.duration_seconds:.3f}s), ready={ready}")
        return ready

    def drain(self) -> bytes:
        """Return the whole window as one contiguous byte string and reset to empty.

        Returns:
            The buffered audio, or b"" when nothing was buffered
        """
        combined_audio = b"".join(self.chunks)
        self.chunks = []
        self.total_bytes = 0
        return combined_audio

    def get_buffer_stats(self) -> dict:
        """Get buffer statistics."""
        return {
            "chunk_count": self.chunk_count,
            "total_bytes": self.total_bytes,
            "duration_seconds": self.duration_seconds,
            "window_seconds": self.chunk_duration_seconds,
            "bytes_per_second": self.audio_format.bytes_per_second,
        }
