"""Terminal display components."""

from .transcript_console import TranscriptConsole

__all__ = ["TranscriptConsole"]
