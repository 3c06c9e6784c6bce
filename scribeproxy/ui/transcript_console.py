"""Live console display of transcripts and speaker changes.

Subscribes to the transcription and speaker topics and prints each event as it
arrives. Intended for watching a running proxy from a terminal; the log file
remains the record of what happened.
"""

import logging
from typing import Optional

from pubsub import pub
from rich.console import Console
from rich.text import Text

from ..models.events import SpeakerChange
from ..models.transcription import TranscriptionResult
from ..transcription.publisher import SPEAKER_TOPIC, TRANSCRIPTION_TOPIC

logger = logging.getLogger(__name__)


class TranscriptConsole:
    """Prints published transcripts and speaker changes with rich."""

    def __init__(self,
                 console: Optional[Console] = None,
                 transcription_topic: str = TRANSCRIPTION_TOPIC,
                 speaker_topic: str = SPEAKER_TOPIC):
        self.console = console or Console()
        self.transcription_topic = transcription_topic
        self.speaker_topic = speaker_topic
        self.transcript_count = 0
        self.speaker_change_count = 0

        pub.subscribe(self._on_result, transcription_topic)
        pub.subscribe(self._on_speaker_change, speaker_topic)
        logger.info(f"TranscriptConsole subscribed to {transcription_topic} and {speaker_topic}")

    def _on_result(self, result: TranscriptionResult) -> None:
        self.transcript_count += 1
        line = Text()
        line.append(f"[{result.timestamp:%H:%M:%S}] ", style="dim")
        line.append(f"{result.session_id} ", style="cyan")
        if result.is_final:
            line.append("(final) ", style="yellow")
        line.append(result.text)
        self.console.print(line)

    def _on_speaker_change(self, change: SpeakerChange) -> None:
        self.speaker_change_count += 1
        line = Text(f"🎙️  {change.session_id}: ")
        line.append(change.name, style="bold green")
        line.append(f" is speaking (ID: {change.speaker_id})")
        self.console.print(line)

    def shutdown(self) -> None:
        """Unsubscribe from both topics and print a short summary."""
        logger.info("Shutting down TranscriptConsole...")
        try:
            pub.unsubscribe(self._on_result, self.transcription_topic)
            pub.unsubscribe(self._on_speaker_change, self.speaker_topic)
        except Exception as e:
            logger.warning(f"Error during unsubscribe: {e}")

        self.console.print(f"{'=' * 60}")
        self.console.print(f"Transcripts: {self.transcript_count}  Speaker changes: {self.speaker_change_count}")
