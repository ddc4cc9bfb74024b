"""
Single entry point for the UI layer.

Responsibilities:
- Own one RecognitionSession, one SpeechAnnouncer and one HapticSignaler
- Classify final transcripts and dispatch them to registered handlers
- Expose the semantic announcement helpers (speech + haptic cue)
- Keep recognition in lockstep with the accessibility mode

Non-responsibilities:
- No screen logic (see session.controller)
- No platform specifics (adapters are injected)

Nothing here raises into UI callers because of a platform fault; handler
exceptions are logged and swallowed.
"""

from __future__ import annotations

import asyncio
import inspect
from typing import Any, Callable, Final, Mapping

from adapters.recognition.base import RecognitionEngine
from constants import (
    MODE_MESSAGES,
    MSG_ACK_DETECT,
    MSG_ACK_DIRECTION,
    MSG_ACK_HELP,
    MSG_ACK_START,
    MSG_ACK_STOP,
    MSG_DETECTION_START,
    MSG_DETECTION_STOP,
    MSG_MODE_SELECTION,
    MSG_OBSTACLE_TEMPLATE,
    MSG_SYSTEM_READY,
    MSG_SYSTEM_START,
)
from feedback.announcer import AnnouncementOptions, SpeechAnnouncer, SpeechHandle
from feedback.classifier import classify
from feedback.enums.command import Command
from feedback.enums.intensity import VibrationIntensity
from feedback.enums.mode import AccessibilityMode
from feedback.haptics import HapticSignaler
from observability.logger import log_event
from recognition.runtime import RecognitionSession


CommandHandler = Callable[..., Any]

# Spoken acknowledgment and haptic cue per recognized command
ACKNOWLEDGMENTS: Final[Mapping[Command, tuple[str, VibrationIntensity]]] = {
    Command.START: (MSG_ACK_START, VibrationIntensity.SUCCESS),
    Command.STOP: (MSG_ACK_STOP, VibrationIntensity.WARNING),
    Command.DETECT: (MSG_ACK_DETECT, VibrationIntensity.MEDIUM),
    Command.HELP: (MSG_ACK_HELP, VibrationIntensity.LIGHT),
    Command.DIRECTION: (MSG_ACK_DIRECTION, VibrationIntensity.MEDIUM),
}

# Recognition status notices queue behind whatever is being read aloud
STATUS_OPTIONS: Final[AnnouncementOptions] = AnnouncementOptions(interrupt=False)


class FeedbackFacade:
    """
    Voice-command feedback engine as seen by the UI.

    One instance per user session; construct it inside a running event loop.
    """

    def __init__(
        self,
        *,
        announcer: SpeechAnnouncer,
        haptics: HapticSignaler,
        engine: RecognitionEngine,
        session_id: str | None = None,
    ) -> None:
        self._announcer = announcer
        self._haptics = haptics
        self._session_id = session_id

        self._handlers: dict[Command, CommandHandler] = {}
        self._handler_tasks: set[asyncio.Task[Any]] = set()

        self.recognition = RecognitionSession(
            engine=engine,
            announce=self._announce_status,
            on_transcript=self._on_transcript,
            session_id=session_id,
        )

    # ------------------------------------------------------------------
    # Command handlers
    # ------------------------------------------------------------------

    def init_command_handlers(
        self,
        table: Mapping[Command | str, CommandHandler],
    ) -> None:
        """
        Register handlers for some or all commands.

        Partial update: keys present replace their handler, keys absent keep
        the previous one. A dispatch already in progress keeps the handler
        it looked up.
        """
        updates = {Command(key): handler for key, handler in table.items()}
        # Copy-on-write so a lookup never observes a half-applied update
        self._handlers = {**self._handlers, **updates}

        log_event({
            "event_type": "COMMAND_HANDLERS_REGISTERED",
            "session_id": self._session_id,
            "updated": sorted(c.value for c in updates),
            "registered": sorted(c.value for c in self._handlers),
        })

    def handler_for(self, command: Command) -> CommandHandler | None:
        return self._handlers.get(command)

    # ------------------------------------------------------------------
    # Recognition
    # ------------------------------------------------------------------

    async def start_listening(self) -> None:
        await self.recognition.start()

    async def stop_listening(self) -> None:
        await self.recognition.stop()

    # ------------------------------------------------------------------
    # Primitives
    # ------------------------------------------------------------------

    def speak(
        self,
        text: str,
        options: AnnouncementOptions | None = None,
    ) -> SpeechHandle:
        return self._announcer.speak(text, options)

    def signal(self, intensity: VibrationIntensity) -> None:
        self._haptics.signal(intensity)

    # ------------------------------------------------------------------
    # Semantic helpers
    # ------------------------------------------------------------------

    def announce_system_start(self, options: AnnouncementOptions | None = None) -> SpeechHandle:
        return self._cue(MSG_SYSTEM_START, VibrationIntensity.MEDIUM, options)

    def announce_system_ready(self, options: AnnouncementOptions | None = None) -> SpeechHandle:
        return self._cue(MSG_SYSTEM_READY, VibrationIntensity.SUCCESS, options)

    async def announce_mode(
        self,
        mode: AccessibilityMode | str,
        options: AnnouncementOptions | None = None,
    ) -> SpeechHandle:
        """
        Announce the chosen mode and align recognition with it.

        Only the voice-centric mode listens; every other value, including
        ones this build does not know, stops listening.
        """
        try:
            resolved: AccessibilityMode | None = AccessibilityMode(mode)
        except ValueError:
            resolved = None

        if resolved is not None:
            text = MODE_MESSAGES.get(resolved.value, resolved.value)
        else:
            text = str(mode)
        handle = self._cue(text, VibrationIntensity.SUCCESS, options)

        if resolved is not None and resolved.is_voice_centric:
            await self.start_listening()
        else:
            await self.stop_listening()
        return handle

    def announce_mode_selection(self, options: AnnouncementOptions | None = None) -> SpeechHandle:
        return self._cue(MSG_MODE_SELECTION, VibrationIntensity.MEDIUM, options)

    def announce_detection_start(self, options: AnnouncementOptions | None = None) -> SpeechHandle:
        return self._cue(MSG_DETECTION_START, VibrationIntensity.SUCCESS, options)

    def announce_detection_stop(self, options: AnnouncementOptions | None = None) -> SpeechHandle:
        return self._cue(MSG_DETECTION_STOP, VibrationIntensity.WARNING, options)

    def obstacle_alert(
        self,
        distance_m: str,
        direction: str,
        options: AnnouncementOptions | None = None,
    ) -> SpeechHandle:
        """Any strings are accepted; they are only formatted into the message."""
        text = MSG_OBSTACLE_TEMPLATE.format(distance=distance_m, direction=direction)
        return self._cue(text, VibrationIntensity.WARNING, options)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def shutdown(self) -> None:
        await self.recognition.shutdown()
        await self._announcer.shutdown()
        for task in tuple(self._handler_tasks):
            task.cancel()
        if self._handler_tasks:
            await asyncio.gather(*self._handler_tasks, return_exceptions=True)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _cue(
        self,
        text: str,
        intensity: VibrationIntensity,
        options: AnnouncementOptions | None = None,
    ) -> SpeechHandle:
        # Speech is queued first; the haptic cue must not delay it
        handle = self._announcer.speak(text, options)
        self._haptics.signal(intensity)
        return handle

    def _announce_status(self, text: str) -> None:
        self._announcer.speak(text, STATUS_OPTIONS)

    def _on_transcript(self, transcript: str) -> None:
        command = classify(transcript)
        if command is None:
            log_event({
                "event_type": "UTTERANCE_UNCLASSIFIED",
                "session_id": self._session_id,
                "chars": len(transcript),
            })
            return

        handler = self._handlers.get(command)

        message, intensity = ACKNOWLEDGMENTS[command]
        self._cue(message, intensity)

        log_event({
            "event_type": "COMMAND_DISPATCHED",
            "session_id": self._session_id,
            "command": command.value,
            "has_handler": handler is not None,
        })

        if handler is None:
            return
        self._invoke(command, handler, transcript)

    def _invoke(
        self,
        command: Command,
        handler: CommandHandler,
        transcript: str,
    ) -> None:
        try:
            if command is Command.DIRECTION:
                result = handler(transcript)
            else:
                result = handler()
        except Exception as exc:  # pylint: disable=broad-exception-caught
            self._log_handler_failure(command, exc)
            return

        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._handler_tasks.add(task)
            task.add_done_callback(
                lambda t, c=command: self._on_handler_done(c, t)
            )

    def _on_handler_done(self, command: Command, task: asyncio.Future[Any]) -> None:
        self._handler_tasks.discard(task)  # type: ignore[arg-type]
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self._log_handler_failure(command, exc)

    def _log_handler_failure(self, command: Command, exc: BaseException) -> None:
        log_event({
            "event_type": "COMMAND_HANDLER_FAILED",
            "session_id": self._session_id,
            "command": command.value,
            "error": f"{type(exc).__name__}: {exc}",
        })
