"""
Serialized text-to-speech with cancel-and-replace.

Responsibilities:
- Keep at most one utterance in flight on the synthesizer
- interrupt=True: drop everything queued, cancel what is playing, then speak
- interrupt=False: queue behind the current utterance (FIFO)
- Pick a preferred voice from the platform catalog, best effort
- Absorb synthesis failures (logged, never raised to callers)

Obstacle alerts can arrive faster than they can be read aloud; interrupting
keeps the most recent alert the one the user hears to completion.
"""

from __future__ import annotations

import asyncio
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generator

from adapters.tts.base import SpeechSynthesizer, VoiceInfo, VoiceParams
from constants import (
    SPEECH_DEFAULT_GENDER_HINT,
    SPEECH_DEFAULT_INTERRUPT,
    SPEECH_DEFAULT_LOCALE,
    SPEECH_DEFAULT_PITCH,
    SPEECH_DEFAULT_RATE,
    SPEECH_DEFAULT_VOLUME,
)
from observability.logger import log_event
from observability.metrics import timed


class SpeechOutcome(str, Enum):
    """How a speech request ended."""

    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass(frozen=True)
class AnnouncementOptions:
    """Per-request rendering options. rate and pitch must be positive."""
    rate: float = SPEECH_DEFAULT_RATE
    pitch: float = SPEECH_DEFAULT_PITCH
    interrupt: bool = SPEECH_DEFAULT_INTERRUPT

    def __post_init__(self) -> None:
        if self.rate <= 0:
            raise ValueError(f"rate must be > 0, got {self.rate}")
        if self.pitch <= 0:
            raise ValueError(f"pitch must be > 0, got {self.pitch}")


DEFAULT_OPTIONS = AnnouncementOptions()


@dataclass(frozen=True)
class SpeechRequest:
    """Transient value describing one utterance; not retained after playback."""
    text: str
    rate: float
    pitch: float
    interrupt: bool


def choose_voice(
    catalog: tuple[VoiceInfo, ...],
    *,
    locale: str,
    gender_hint: str,
) -> VoiceInfo | None:
    """
    Pick the first voice whose language matches the locale's language and
    whose gender (or name) carries the hint. None means platform default.
    """
    language = locale.split("-")[0].lower()
    hint = gender_hint.lower()
    for voice in catalog:
        if not voice.language.lower().startswith(language):
            continue
        if hint in voice.gender.lower() or hint in voice.name.lower():
            return voice
    return None


@dataclass(eq=False)
class SpeechHandle:
    """
    Cancellable, awaitable completion signal for one request.

    `await handle` yields the SpeechOutcome and never raises; cancelling the
    awaiting coroutine does not cancel the speech.
    """
    request: SpeechRequest
    _future: asyncio.Future[SpeechOutcome]
    _announcer: SpeechAnnouncer = field(repr=False)

    def cancel(self) -> None:
        self._announcer._cancel_handle(self)  # pylint: disable=protected-access

    def done(self) -> bool:
        return self._future.done()

    @property
    def outcome(self) -> SpeechOutcome | None:
        return self._future.result() if self._future.done() else None

    def _resolve(self, outcome: SpeechOutcome) -> None:
        if not self._future.done():
            self._future.set_result(outcome)

    def __await__(self) -> Generator[Any, None, SpeechOutcome]:
        return asyncio.shield(self._future).__await__()


class SpeechAnnouncer:
    """
    Single-lane speech queue in front of a SpeechSynthesizer.

    speak() must be called from the event loop thread.
    """

    def __init__(
        self,
        synthesizer: SpeechSynthesizer,
        *,
        locale: str = SPEECH_DEFAULT_LOCALE,
        gender_hint: str = SPEECH_DEFAULT_GENDER_HINT,
        session_id: str | None = None,
    ) -> None:
        self._synth = synthesizer
        self._locale = locale
        self._gender_hint = gender_hint
        self._session_id = session_id

        self._queue: deque[SpeechHandle] = deque()
        self._current: SpeechHandle | None = None
        self._current_task: asyncio.Task[None] | None = None
        self._worker: asyncio.Task[None] | None = None

        self._voice_resolved = False
        self._voice: VoiceInfo | None = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def speak(
        self,
        text: str,
        options: AnnouncementOptions | None = None,
    ) -> SpeechHandle:
        """Queue `text` for speech according to `options`."""
        opts = options or DEFAULT_OPTIONS
        request = SpeechRequest(
            text=text,
            rate=opts.rate,
            pitch=opts.pitch,
            interrupt=opts.interrupt,
        )
        loop = asyncio.get_running_loop()
        handle = SpeechHandle(request, loop.create_future(), self)

        if not text.strip():
            log_event({
                "event_type": "SPEECH_SKIPPED_EMPTY",
                "session_id": self._session_id,
            })
            handle._resolve(SpeechOutcome.CANCELLED)
            return handle

        if request.interrupt:
            self._interrupt_all()

        self._queue.append(handle)
        log_event({
            "event_type": "SPEECH_QUEUED",
            "session_id": self._session_id,
            "chars": len(text),
            "interrupt": request.interrupt,
            "queue_depth": len(self._queue),
        })
        self._ensure_worker()
        return handle

    @property
    def is_speaking(self) -> bool:
        return self._current is not None

    @property
    def pending(self) -> int:
        return len(self._queue)

    async def shutdown(self) -> None:
        """Cancel queued and in-flight speech and stop the worker."""
        self._interrupt_all()
        worker = self._worker
        self._worker = None
        if worker is not None and not worker.done():
            worker.cancel()
            await asyncio.gather(worker, return_exceptions=True)

    # ------------------------------------------------------------------
    # Cancellation
    # ------------------------------------------------------------------

    def _interrupt_all(self) -> None:
        had_work = bool(self._queue) or self._current is not None

        while self._queue:
            self._queue.popleft()._resolve(SpeechOutcome.CANCELLED)

        if self._current is not None:
            if self._current_task is None:
                # Still resolving the voice; never reached the synthesizer
                self._current._resolve(SpeechOutcome.CANCELLED)
            elif not self._current_task.done():
                self._current_task.cancel()

        if had_work:
            self._cancel_platform()

    def _cancel_handle(self, handle: SpeechHandle) -> None:
        if handle.done():
            return
        if handle is self._current:
            if self._current_task is None:
                handle._resolve(SpeechOutcome.CANCELLED)
                return
            self._current_task.cancel()
            self._cancel_platform()
            return
        try:
            self._queue.remove(handle)
        except ValueError:
            pass
        handle._resolve(SpeechOutcome.CANCELLED)

    def _cancel_platform(self) -> None:
        try:
            self._synth.cancel()
        except Exception as exc:  # pylint: disable=broad-exception-caught
            log_event({
                "event_type": "SPEECH_CANCEL_FAILED",
                "session_id": self._session_id,
                "error": f"{type(exc).__name__}: {exc}",
            })

    # ------------------------------------------------------------------
    # Worker
    # ------------------------------------------------------------------

    def _ensure_worker(self) -> None:
        if self._worker is None or self._worker.done():
            self._worker = asyncio.get_running_loop().create_task(self._run())

    async def _run(self) -> None:
        while self._queue:
            handle = self._queue.popleft()
            if handle.done():
                continue
            await self._play(handle)

    async def _play(self, handle: SpeechHandle) -> None:
        request = handle.request
        self._current = handle
        outcome = SpeechOutcome.CANCELLED
        task: asyncio.Task[None] | None = None

        try:
            params = await self._voice_params(request)

            # An interrupt may have landed while the catalog was loading
            if handle.done():
                return

            task = asyncio.get_running_loop().create_task(
                self._synth.speak(request.text, params)
            )
            self._current_task = task

            with timed(
                "speech_duration_ms",
                session_id=self._session_id,
                details={"chars": len(request.text)},
            ) as extra:
                await asyncio.wait({task})
                outcome = self._outcome_of(task)
                extra["outcome"] = outcome.value
        finally:
            if task is not None and not task.done():
                task.cancel()
            self._current = None
            self._current_task = None
            handle._resolve(outcome)

    def _outcome_of(self, task: asyncio.Task[None]) -> SpeechOutcome:
        if task.cancelled():
            return SpeechOutcome.CANCELLED
        exc = task.exception()
        if exc is not None:
            log_event({
                "event_type": "SPEECH_FAILED",
                "session_id": self._session_id,
                "error": f"{type(exc).__name__}: {exc}",
            })
            return SpeechOutcome.FAILED
        return SpeechOutcome.COMPLETED

    # ------------------------------------------------------------------
    # Voice selection
    # ------------------------------------------------------------------

    async def _voice_params(self, request: SpeechRequest) -> VoiceParams:
        if not self._voice_resolved:
            self._voice_resolved = True
            try:
                catalog = await self._synth.voices()
            except Exception as exc:  # pylint: disable=broad-exception-caught
                catalog = ()
                log_event({
                    "event_type": "VOICE_CATALOG_FAILED",
                    "session_id": self._session_id,
                    "error": f"{type(exc).__name__}: {exc}",
                })
            self._voice = choose_voice(
                catalog, locale=self._locale, gender_hint=self._gender_hint
            )
            log_event({
                "event_type": "VOICE_SELECTED",
                "session_id": self._session_id,
                "catalog_size": len(catalog),
                "voice_id": self._voice.voice_id if self._voice else None,
            })

        return VoiceParams(
            rate=request.rate,
            pitch=request.pitch,
            language=self._locale,
            voice_id=self._voice.voice_id if self._voice else None,
            volume=SPEECH_DEFAULT_VOLUME,
        )
