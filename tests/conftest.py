"""Pytest configuration and fixtures for scribeproxy tests."""

import asyncio
import logging
import tempfile
from datetime import datetime
from pathlib import Path

import numpy as np
import pytest
import yaml

from scribeproxy.models.audio import AudioFormat
from scribeproxy.models.transcription import TranscriptionResult
from scribeproxy.transcription.base import AbstractTranscriptionBackend, TranscriptionError


# Configure logging for tests
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class MockTranscriptionBackend(AbstractTranscriptionBackend):
    """A mock backend that records every call and can simulate latency and failures."""

    def __init__(self, delays=None, fail_on=None):
        """
        Args:
            delays: Per-call latency in seconds, consumed in call order
            fail_on: 1-based call numbers that raise TranscriptionError
        """
        super().__init__(model="mock-model")
        self.delays = list(delays or [])
        self.fail_on = set(fail_on or ())
        self.calls = []
        self.cleaned_up = False

    async def transcribe(self, chunk_id: str, audio_container: bytes) -> TranscriptionResult:
        call_number = len(self.calls) + 1
        self.calls.append((chunk_id, audio_container))
        logger.debug(f"MockBackend: call {call_number} for {chunk_id}")
        if self.delays:
            await asyncio.sleep(self.delays.pop(0))
        if call_number in self.fail_on:
            raise TranscriptionError(f"mock failure for {chunk_id}")
        return TranscriptionResult(
            text=f"Transcription for {chunk_id}",
            processing_time=0.0,
            timestamp=datetime.now(),
            service="mock",
            model=self.model,
            chunk_id=chunk_id,
        )

    def initialize(self) -> bool:
        return True

    async def cleanup(self) -> None:
        self.cleaned_up = True


@pytest.fixture
def mock_backend():
    """Provides a mock transcription backend with no latency."""
    return MockTranscriptionBackend()


@pytest.fixture
def backend_factory():
    """Provides the mock backend class for tests that need custom latency or failures."""
    return MockTranscriptionBackend


@pytest.fixture
def audio_format():
    """16kHz mono 16-bit: 32000 bytes per second."""
    return AudioFormat(sample_rate=16000, channels=1, bit_depth=16)


@pytest.fixture
def temp_data_dir():
    """Create temporary directory for test data."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield temp_dir


@pytest.fixture
def sample_audio_chunk():
    """Generate a sample audio chunk for testing."""
    # Generate 1024 samples of 16-bit audio (sine wave)
    sample_rate = 16000
    duration = 1024 / sample_rate  # ~0.064 seconds
    freq = 440  # A4 note

    t = np.linspace(0, duration, 1024, False)
    wave_data = np.sin(2 * np.pi * freq * t)

    # Convert to 16-bit integers
    audio_data = (wave_data * 32767).astype(np.int16)
    return audio_data.tobytes()


@pytest.fixture
def audio_test_data():
    """Generate various audio test data patterns."""
    def generate_audio(pattern="sine", duration_seconds=1.0, sample_rate=16000):
        """Generate mono 16-bit audio data for testing.

        Args:
            pattern: Type of audio pattern ('sine', 'noise', 'silence')
            duration_seconds: Duration of audio
            sample_rate: Sample rate in Hz

        Returns:
            bytes: Audio data as bytes
        """
        samples = int(duration_seconds * sample_rate)

        if pattern == "sine":
            t = np.linspace(0, duration_seconds, samples, False)
            wave_data = np.sin(2 * np.pi * 440 * t)
        elif pattern == "noise":
            wave_data = np.random.uniform(-1, 1, samples)
        elif pattern == "silence":
            wave_data = np.zeros(samples)
        else:
            raise ValueError(f"Unknown pattern: {pattern}")

        audio_data = (wave_data * 32767).astype(np.int16)
        return audio_data.tobytes()

    return generate_audio


@pytest.fixture
def write_config(temp_data_dir):
    """Write a scribeproxy.yaml into the temp dir and return its path."""
    def _write(config: dict, filename: str = "scribeproxy.yaml") -> str:
        path = Path(temp_data_dir) / filename
        with open(path, 'w', encoding='utf-8') as f:
            yaml.safe_dump(config, f)
        return str(path)

    return _write


@pytest.fixture
def test_config():
    """Test configuration settings."""
    return {
        "server": {"host": "127.0.0.1", "port": 0},
        "audio": {"sample_rate": 16000, "channels": 1, "bit_depth": 16},
        "transcription": {"chunk_duration_seconds": 5, "model": "whisper-1"},
        "openai": {"api_key": "sk-test"},
        "logging": {"level": "DEBUG", "file_path": "logs/scribeproxy.log"},
    }
