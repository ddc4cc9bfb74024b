"""
Speech synthesizer contract.

This module defines the *interface only*: no queueing, no interrupt policy
and no voice preference logic live here (see feedback.announcer).

Key invariants:
- speak() resolves when the utterance has finished playing, or raises if
  synthesis failed. It is cancelled by task cancellation.
- cancel() is fire-and-forget: it asks the platform to stop whatever is
  playing and returns immediately. It MUST be idempotent.
- voices() is best effort; an empty tuple means "platform default only".
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class VoiceInfo:
    """One entry of a platform voice catalog."""
    voice_id: str
    name: str
    language: str = ""
    gender: str = ""


@dataclass(frozen=True)
class VoiceParams:
    """Everything a synthesizer needs to render one request."""
    rate: float
    pitch: float
    language: str
    voice_id: str | None = None
    volume: float = 1.0


class SpeechSynthesizer(ABC):
    """
    Abstract text-to-speech backend.

    Implementations are responsible for:
    - Rendering and playing one utterance per speak() call
    - Stopping playback on cancel()
    - Describing available voices

    Non-responsibilities:
    - No queueing or serialization (the announcer guarantees at most one
      speak() in flight)
    - No retries
    """

    @abstractmethod
    async def speak(self, text: str, params: VoiceParams) -> None:
        """Render and play `text`; return once playback completes."""
        raise NotImplementedError

    @abstractmethod
    def cancel(self) -> None:
        """Stop current playback as quickly as possible (fire-and-forget)."""
        raise NotImplementedError

    async def voices(self) -> tuple[VoiceInfo, ...]:
        """Return the voice catalog, if the platform exposes one."""
        return ()
