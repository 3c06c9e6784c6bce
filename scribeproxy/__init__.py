"""scribeproxy - windowed speech-to-text for live websocket audio streams."""

__version__ = "0.1.0"
