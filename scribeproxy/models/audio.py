"""Audio-related data models."""

from dataclasses import dataclass

SUPPORTED_BIT_DEPTHS = (8, 16, 24, 32)


@dataclass(frozen=True)
class AudioFormat:
    """PCM format of the inbound audio stream, fixed for the whole process."""
    sample_rate: int
    channels: int = 1
    bit_depth: int = 16

    def __post_init__(self):
        """Validate format parameters once, at startup."""
        if self.sample_rate <= 0:
            raise ValueError(f"Sample rate must be positive, got {self.sample_rate}")
        if self.channels < 1:
            raise ValueError(f"Channel count must be at least 1, got {self.channels}")
        if self.bit_depth not in SUPPORTED_BIT_DEPTHS:
            raise ValueError(f"Unsupported bit depth {self.bit_depth}, "
                             f"expected one of {SUPPORTED_BIT_DEPTHS}")

    @property
    def sample_width(self) -> int:
        """Bytes per sample for a single channel."""
        return self.bit_depth // 8

    @property
    def frame_size(self) -> int:
        """Bytes per sample frame across all channels."""
        return self.sample_width * self.channels

    @property
    def bytes_per_second(self) -> int:
        return self.sample_rate * self.frame_size


@dataclass
class AudioFrame:
    """A binary websocket message carrying raw PCM bytes."""
    data: bytes
