"""Event models for inbound control messages and published notifications."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Union

from pydantic import BaseModel, ConfigDict, Field


class SpeakerRecord(BaseModel):
    """One speaker-activity record inside a control message."""
    model_config = ConfigDict(strict=True)

    name: str
    id: Union[int, float]
    timestamp: Union[int, float]
    is_speaking: bool = Field(alias="isSpeaking")


@dataclass
class ControlEvent:
    """A text websocket message carrying a non-empty list of speaker records."""
    records: List[SpeakerRecord]

    @property
    def first(self) -> SpeakerRecord:
        return self.records[0]


@dataclass
class UnclassifiedMessage:
    """A message that is neither audio nor a well-formed control event."""
    reason: str
    preview: str = ""


@dataclass
class SpeakerChange:
    """Emitted when the active speaker of a session changes."""
    name: str
    speaker_id: Union[int, float]
    timestamp: Union[int, float]
    session_id: str = ""
    detected_at: datetime = field(default_factory=datetime.now)
