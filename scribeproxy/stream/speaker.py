"""Speaker change detection from control events."""

import logging
from typing import Optional

from ..models.events import ControlEvent, SpeakerChange

logger = logging.getLogger(__name__)


class SpeakerTracker:
    """Remembers the last active speaker and reports transitions to a new one."""

    def __init__(self, session_id: str = ""):
        self.session_id = session_id
        self.last_speaker_name: Optional[str] = None

    def observe(self, event: ControlEvent) -> Optional[SpeakerChange]:
        """Inspect the first record of a control event.

        Returns:
            SpeakerChange when a speaker other than the last one starts speaking, else None
        """
        record = event.first
        if not record.is_speaking:
            return None
        if self.last_speaker_name is not None and record.name == self.last_speaker_name:
            return None

        self.last_speaker_name = record.name
        return SpeakerChange(
            name=record.name,
            speaker_id=record.id,
            timestamp=record.timestamp,
            session_id=self.session_id,
        )

    def reset(self) -> None:
        self.last_speaker_name = None
