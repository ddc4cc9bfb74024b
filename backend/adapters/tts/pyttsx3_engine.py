"""
Host speech synthesis through pyttsx3 (SAPI5, NSSpeechSynthesizer, eSpeak).

pyttsx3 engines are not thread-safe and runAndWait() blocks, so every call
runs on one dedicated worker thread that owns the engine. cancel() calls
engine.stop(), which makes the blocked runAndWait() return early.

Pitch is not exposed by the pyttsx3 drivers and is ignored.
"""

from __future__ import annotations

import asyncio
from concurrent.futures import ThreadPoolExecutor
from typing import Any

import pyttsx3  # pyright: ignore[reportMissingTypeStubs]

from adapters.tts.base import SpeechSynthesizer, VoiceInfo, VoiceParams
from constants import PYTTSX3_BASE_RATE_WPM


def _language_of(voice: Any) -> str:
    # eSpeak reports languages as bytes prefixed with a priority byte
    for lang in getattr(voice, "languages", None) or ():
        if isinstance(lang, bytes):
            lang = lang.decode("utf-8", errors="ignore")
        cleaned = "".join(ch for ch in str(lang) if ch.isprintable()).strip()
        if cleaned:
            return cleaned
    return ""


class Pyttsx3Synthesizer(SpeechSynthesizer):
    def __init__(self, *, engine: Any | None = None) -> None:
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="pyttsx3")
        self._engine = engine

    async def speak(self, text: str, params: VoiceParams) -> None:
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(self._executor, self._say_blocking, text, params)

    def cancel(self) -> None:
        if self._engine is not None:
            self._engine.stop()

    async def voices(self) -> tuple[VoiceInfo, ...]:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, self._voices_blocking)

    def close(self) -> None:
        self._executor.shutdown(wait=False, cancel_futures=True)

    # ------------------------------------------------------------------
    # Worker thread
    # ------------------------------------------------------------------

    def _get_engine(self) -> Any:
        if self._engine is None:
            self._engine = pyttsx3.init()
        return self._engine

    def _say_blocking(self, text: str, params: VoiceParams) -> None:
        engine = self._get_engine()
        engine.setProperty("rate", int(PYTTSX3_BASE_RATE_WPM * params.rate))
        engine.setProperty("volume", params.volume)
        if params.voice_id:
            engine.setProperty("voice", params.voice_id)
        engine.say(text)
        engine.runAndWait()

    def _voices_blocking(self) -> tuple[VoiceInfo, ...]:
        engine = self._get_engine()
        return tuple(
            VoiceInfo(
                voice_id=str(v.id),
                name=str(v.name or ""),
                language=_language_of(v),
                gender=str(getattr(v, "gender", None) or ""),
            )
            for v in engine.getProperty("voices")
        )
