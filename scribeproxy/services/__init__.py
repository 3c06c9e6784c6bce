"""Services layer for scribeproxy application logic."""

from .proxy_service import ServiceState, TranscriptionProxyService

__all__ = [
    "ServiceState",
    "TranscriptionProxyService",
]
