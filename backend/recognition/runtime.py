"""
Runtime execution shell for one recognition session.

Responsibilities:
- Own the authoritative session state
- Call the pure reducer
- Execute commands with side effects (engine, announcements, timers)
- Convert engine callbacks and timer expiry into events

Non-responsibilities:
- No transition logic (reducer only)
- No command classification (the transcript sink decides)
"""

from __future__ import annotations

import asyncio
import time
from collections import deque
from typing import Any, Callable

from adapters.recognition.base import RecognitionEngine
from observability.logger import log_event
from recognition.commands import (
    Announce,
    CancelTimer,
    DispatchTranscript,
    LogEvent,
    SessionCommand,
    StartEngine,
    StartTimer,
    StopEngine,
)
from recognition.enums.state import RecognitionState
from recognition.events import (
    EngineEnded,
    EngineError,
    EngineResult,
    EngineStarted,
    EngineStartFailed,
    EngineStopped,
    Event,
    EventType,
    RestartTimerFired,
    StartRequested,
    StopRequested,
)
from recognition.reducer import reduce
from recognition.state_dataclass import SessionState


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


AnnounceFn = Callable[[str], Any]
TranscriptSink = Callable[[str], None]


class _CycleListener:
    """
    Listener handed to the engine for one cycle.

    Every callback becomes an engine event tagged with the cycle it was
    created for, so callbacks from an earlier cycle are stale by construction.
    """

    def __init__(self, session: RecognitionSession, cycle: int) -> None:
        self._session = session
        self._cycle = cycle

    def on_start(self) -> None:
        self._session.post_event(EngineStarted(
            event_type=EventType.ENGINE_STARTED,
            ts_ms=_now_ms(),
            cycle=self._cycle,
        ))

    def on_result(self, transcript: str, is_final: bool = True) -> None:
        self._session.post_event(EngineResult(
            event_type=EventType.ENGINE_RESULT,
            ts_ms=_now_ms(),
            cycle=self._cycle,
            transcript=transcript,
            is_final=is_final,
        ))

    def on_error(self, code: str) -> None:
        self._session.post_event(EngineError(
            event_type=EventType.ENGINE_ERROR,
            ts_ms=_now_ms(),
            cycle=self._cycle,
            code=code,
        ))

    def on_end(self) -> None:
        self._session.post_event(EngineEnded(
            event_type=EventType.ENGINE_ENDED,
            ts_ms=_now_ms(),
            cycle=self._cycle,
        ))


class RecognitionSession:
    """
    Runtime execution boundary for continuous recognition.

    Guarantees:
    - Reducer is called exactly once per incoming event
    - Transitions are serialized: every event source (caller, engine
      callbacks, timers) converges on handle_event(), which processes one
      event at a time under a lock
    - State is updated before any side effect executes
    - Follow-up events produced while executing commands (engine stopped,
      start failed) are processed before the lock is released

    One instance per session; nothing here is global.
    """

    def __init__(
        self,
        *,
        engine: RecognitionEngine,
        announce: AnnounceFn,
        on_transcript: TranscriptSink,
        session_id: str | None = None,
        initial_state: SessionState | None = None,
    ) -> None:
        self._engine = engine
        self._announce = announce
        self._on_transcript = on_transcript
        self._session_id = session_id
        self._state = initial_state or SessionState()

        self._lock = asyncio.Lock()
        self._followups: deque[Event] = deque()
        self._timers: dict[str, asyncio.Task[None]] = {}
        self._posted: set[asyncio.Task[None]] = set()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        """
        Current immutable session state (read-only view).

        Only the reducer, via handle_event(), produces new states.
        """
        return self._state

    @property
    def available(self) -> bool:
        return self._engine.available

    @property
    def is_listening(self) -> bool:
        return self._state.state is RecognitionState.LISTENING

    async def start(self) -> None:
        """
        Ask the session to listen.

        No-op while already STARTING or LISTENING, and on platforms without
        continuous recognition.
        """
        if not self._check_available("start"):
            return
        await self.handle_event(
            StartRequested(event_type=EventType.START_REQUESTED, ts_ms=_now_ms())
        )

    async def stop(self) -> None:
        """
        Ask the session to stop listening.

        After this returns no further transcript is dispatched and any
        pending restart timer has been cancelled.
        """
        if not self._check_available("stop"):
            return
        await self.handle_event(
            StopRequested(event_type=EventType.STOP_REQUESTED, ts_ms=_now_ms())
        )

    async def handle_event(self, event: Event) -> None:
        """
        Process a single event through the reducer pipeline.

        This method is the *only* entry point for events affecting session
        state. Engine callbacks, timers and callers all converge here.
        """
        async with self._lock:
            self._followups.append(event)
            while self._followups:
                current = self._followups.popleft()
                new_state, commands = reduce(self._state, current)
                self._state = new_state

                for cmd in commands:
                    await self._execute_command(cmd)

    def post_event(self, event: Event) -> None:
        """
        Schedule an event without waiting for it to be processed.

        Used by engine callbacks, which are synchronous. Must be called on
        the event loop thread.
        """
        task = asyncio.get_running_loop().create_task(self.handle_event(event))
        self._posted.add(task)
        task.add_done_callback(self._posted.discard)

    async def settle(self) -> None:
        """Wait until every posted engine event has been processed."""
        while self._posted:
            await asyncio.gather(*tuple(self._posted), return_exceptions=True)

    async def shutdown(self) -> None:
        """
        Stop listening and cancel every in-flight timer.

        Called when the owning session goes away.
        """
        if self._engine.available:
            await self.stop()
        for timer_id in list(self._timers.keys()):
            self._cancel_timer(timer_id)
        await self.settle()

    # ------------------------------------------------------------------
    # Command execution (side effects)
    # ------------------------------------------------------------------

    async def _execute_command(self, cmd: SessionCommand) -> None:
        """Execute a single command with side effects."""

        if isinstance(cmd, LogEvent):
            log_event({**cmd.event, "session_id": self._session_id})

        elif isinstance(cmd, StartEngine):
            try:
                await self._engine.start(_CycleListener(self, cmd.cycle))
            except Exception as exc:  # pylint: disable=broad-exception-caught
                self._followups.append(EngineStartFailed(
                    event_type=EventType.ENGINE_START_FAILED,
                    ts_ms=_now_ms(),
                    cycle=cmd.cycle,
                    reason=f"{type(exc).__name__}: {exc}",
                ))

        elif isinstance(cmd, StopEngine):
            try:
                await self._engine.stop()
            except Exception as exc:  # pylint: disable=broad-exception-caught
                log_event({
                    "event_type": "ENGINE_STOP_FAILED",
                    "session_id": self._session_id,
                    "cycle": cmd.cycle,
                    "error": f"{type(exc).__name__}: {exc}",
                })
            self._followups.append(EngineStopped(
                event_type=EventType.ENGINE_STOPPED,
                ts_ms=_now_ms(),
                cycle=cmd.cycle,
            ))

        elif isinstance(cmd, Announce):
            self._announce(cmd.text)

        elif isinstance(cmd, DispatchTranscript):
            try:
                self._on_transcript(cmd.transcript)
            except Exception as exc:  # pylint: disable=broad-exception-caught
                log_event({
                    "event_type": "TRANSCRIPT_DISPATCH_FAILED",
                    "session_id": self._session_id,
                    "error": f"{type(exc).__name__}: {exc}",
                })

        elif isinstance(cmd, StartTimer):
            self._start_timer(
                timer_id=cmd.timer_id,
                duration_ms=cmd.duration_ms,
                timeout_event_type=cmd.timeout_event_type,
            )

        elif isinstance(cmd, CancelTimer):
            self._cancel_timer(cmd.timer_id)

        else:
            log_event({
                "event_type": "UNKNOWN_COMMAND",
                "session_id": self._session_id,
                "command_type": getattr(cmd, "command_type", None),
            })

    # ------------------------------------------------------------------
    # Timers
    # ------------------------------------------------------------------

    def _start_timer(
        self,
        *,
        timer_id: str,
        duration_ms: int,
        timeout_event_type: EventType,
    ) -> None:
        """
        Start or replace a timer that re-enters handle_event() on expiry.
        """
        self._cancel_timer(timer_id)

        async def _timer_task() -> None:
            try:
                await asyncio.sleep(duration_ms / 1000.0)
            except asyncio.CancelledError:
                return
            # Expired: this task is no longer cancellable through the table
            self._timers.pop(timer_id, None)
            await self.handle_event(
                self._construct_timeout_event(timeout_event_type)
            )

        self._timers[timer_id] = asyncio.get_running_loop().create_task(_timer_task())

    def _cancel_timer(self, timer_id: str) -> None:
        """
        Cancel an in-flight timer if it exists.

        Idempotent: safe to call even if the timer doesn't exist.
        """
        task = self._timers.pop(timer_id, None)
        if task is not None and not task.done():
            task.cancel()

    def _construct_timeout_event(self, timeout_event_type: EventType) -> Event:
        if timeout_event_type is EventType.RESTART_TIMER_FIRED:
            return RestartTimerFired(
                event_type=EventType.RESTART_TIMER_FIRED,
                ts_ms=_now_ms(),
            )
        raise ValueError(f"No timeout event for {timeout_event_type}")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _check_available(self, action: str) -> bool:
        if self._engine.available:
            return True
        log_event({
            "event_type": "RECOGNITION_UNAVAILABLE",
            "session_id": self._session_id,
            "action": action,
        })
        return False
