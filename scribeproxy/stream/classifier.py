"""Classification of inbound websocket messages."""

import json
import logging
from typing import List, Union

from pydantic import TypeAdapter, ValidationError

from ..models.audio import AudioFrame
from ..models.events import ControlEvent, SpeakerRecord, UnclassifiedMessage

logger = logging.getLogger(__name__)

InboundMessage = Union[AudioFrame, ControlEvent, UnclassifiedMessage]

_speaker_records = TypeAdapter(List[SpeakerRecord])


def describe_message(payload, limit: int = 100) -> str:
    """Short, bounded preview of a message for debug logging."""
    if isinstance(payload, (bytes, bytearray)):
        suffix = "..." if len(payload) > limit else ""
        return f"[binary {len(payload)} bytes] {bytes(payload[:limit]).hex()}{suffix}"
    if isinstance(payload, str):
        suffix = "..." if len(payload) > limit else ""
        return f"[text {len(payload)} chars] {payload[:limit]}{suffix}"
    return f"[{type(payload).__name__}]"


def classify_message(payload) -> InboundMessage:
    """Tag one inbound message as audio, a control event or unclassified.

    Binary payloads are audio. Text payloads must be a JSON array of speaker
    records, each carrying name, id, timestamp and isSpeaking.
    """
    if isinstance(payload, (bytes, bytearray)):
        return AudioFrame(data=bytes(payload))

    if not isinstance(payload, str):
        return _unclassified(f"unsupported payload type {type(payload).__name__}", payload)

    try:
        parsed = json.loads(payload)
    except (ValueError, RecursionError):
        return _unclassified("invalid JSON", payload)

    if not isinstance(parsed, list) or not parsed:
        return _unclassified("not a non-empty array of speaker records", payload)

    try:
        records = _speaker_records.validate_python(parsed)
    except ValidationError as e:
        return _unclassified(f"malformed speaker record ({e.error_count()} errors)", payload)

    return ControlEvent(records=records)


def _unclassified(reason: str, payload) -> UnclassifiedMessage:
    preview = describe_message(payload)
    logger.warning(f"Ignoring message: {reason}: {preview}")
    return UnclassifiedMessage(reason=reason, preview=preview)
