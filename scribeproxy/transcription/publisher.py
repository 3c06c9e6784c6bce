"""Event publisher module for pub/sub notification of session output."""

import logging
from pubsub import pub

from ..models.events import SpeakerChange
from ..models.transcription import TranscriptionResult

logger = logging.getLogger(__name__)

TRANSCRIPTION_TOPIC = "transcription.result"
SPEAKER_TOPIC = "speaker.change"


class EventPublisher:
    """Publishes transcripts and speaker changes using pubsub.pub."""

    def __init__(self,
                 transcription_topic: str = TRANSCRIPTION_TOPIC,
                 speaker_topic: str = SPEAKER_TOPIC):
        """Initialize event publisher.

        Args:
            transcription_topic: Pub/sub topic name for transcription results
            speaker_topic: Pub/sub topic name for speaker changes
        """
        self.transcription_topic = transcription_topic
        self.speaker_topic = speaker_topic
        logger.debug(f"EventPublisher initialized with topics: {transcription_topic}, {speaker_topic}")

    def publish_transcription_result(self, result: TranscriptionResult) -> None:
        """Publish a transcription result to the pub/sub topic.

        Args:
            result: TranscriptionResult to publish
        """
        pub.sendMessage(self.transcription_topic, result=result)
        logger.debug(f"Published transcription result: {result.chunk_id}")

    def publish_speaker_change(self, change: SpeakerChange) -> None:
        """Publish a speaker change to the pub/sub topic.

        Args:
            change: SpeakerChange to publish
        """
        pub.sendMessage(self.speaker_topic, change=change)
        logger.debug(f"Published speaker change: {change.name} ({change.session_id})")
