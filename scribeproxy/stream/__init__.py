"""Inbound stream handling: message classification, speaker tracking, sessions."""

from .classifier import InboundMessage, classify_message, describe_message
from .session import ConnectionSession, SessionState
from .speaker import SpeakerTracker

__all__ = [
    "InboundMessage",
    "classify_message",
    "describe_message",
    "ConnectionSession",
    "SessionState",
    "SpeakerTracker",
]
