"""
Recognition engine for platforms without continuous speech recognition.
"""

from __future__ import annotations

from adapters.recognition.base import RecognitionEngine, RecognitionListener


class UnavailableRecognitionEngine(RecognitionEngine):
    """Never produces transcripts; the session treats start/stop as no-ops."""

    available = False

    async def start(self, listener: RecognitionListener) -> None:
        return None

    async def stop(self) -> None:
        return None
