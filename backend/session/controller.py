"""
Assist screen logic.

Tracks the accessibility mode and whether detection is running, reacts to
the big button, mode selection and voice commands, and keeps the client's
view in sync. Everything spoken or vibrated goes through FeedbackFacade;
recognition start/stop is left to FeedbackFacade.announce_mode().
"""

from __future__ import annotations

from typing import Any, Callable

from constants import MSG_HELP_FULL, MSG_SCANNING_ENVIRONMENT
from feedback.announcer import AnnouncementOptions
from feedback.enums.command import Command
from feedback.enums.intensity import VibrationIntensity
from feedback.enums.mode import AccessibilityMode
from feedback.facade import FeedbackFacade
from observability.logger import log_event
from simulation.obstacles import ObstacleEvent, ObstacleEventSource

Notify = Callable[[dict[str, Any]], None]

# Lets the mode message finish before the detection notice is read
QUEUED = AnnouncementOptions(interrupt=False)


class AssistController:
    def __init__(
        self,
        facade: FeedbackFacade,
        obstacles: ObstacleEventSource,
        *,
        notify: Notify,
        session_id: str | None = None,
    ) -> None:
        self._facade = facade
        self._obstacles = obstacles
        self._notify = notify
        self._session_id = session_id

        self.mode: AccessibilityMode | str = AccessibilityMode.UNSELECTED
        self.is_detecting = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def attach(self) -> None:
        """Register voice handlers and greet the user."""
        self._facade.init_command_handlers({
            Command.START: self._on_start_command,
            Command.STOP: self._on_stop_command,
            Command.DETECT: self._on_detect_command,
            Command.HELP: self._on_help_command,
            Command.DIRECTION: self._on_direction_command,
        })
        self._facade.announce_system_ready()
        self._publish_state()

    async def detach(self) -> None:
        await self._facade.stop_listening()

    # ------------------------------------------------------------------
    # UI actions
    # ------------------------------------------------------------------

    def press_button(self) -> None:
        if self.mode == AccessibilityMode.UNSELECTED:
            self._facade.signal(VibrationIntensity.MEDIUM)
            self._notify({"type": "MODE_SELECTION_REQUESTED"})
            self._facade.announce_mode_selection()
            return
        self.toggle_detection()

    async def select_mode(self, mode: AccessibilityMode | str) -> None:
        """Apply a mode chosen by the user and start detecting right away."""
        try:
            self.mode = AccessibilityMode(mode)
        except ValueError:
            log_event({
                "event_type": "UNKNOWN_MODE_SELECTED",
                "session_id": self._session_id,
                "mode": str(mode),
            })
            self.mode = str(mode)

        self._toast(f"{_mode_label(self.mode)} Mode Enabled")
        await self._facade.announce_mode(self.mode)

        self.is_detecting = True
        self._facade.announce_detection_start(QUEUED)
        self._publish_state()

    def toggle_detection(self) -> None:
        self.is_detecting = not self.is_detecting
        if self.is_detecting:
            self._facade.announce_detection_start()
            self._toast("Detection Started")
            self._facade.signal(VibrationIntensity.SUCCESS)
        else:
            self._facade.announce_detection_stop()
            self._toast("Detection Stopped")
            self._facade.signal(VibrationIntensity.WARNING)
        self._publish_state()

    def report_obstacle(self, event: ObstacleEvent) -> bool:
        """Announce an externally detected obstacle; ignored while idle."""
        if not self.is_detecting:
            log_event({
                "event_type": "OBSTACLE_IGNORED_NOT_DETECTING",
                "session_id": self._session_id,
            })
            return False
        self._facade.obstacle_alert(event.distance_m, event.direction)
        return True

    # ------------------------------------------------------------------
    # Voice command handlers
    # ------------------------------------------------------------------

    def _on_start_command(self) -> None:
        if not self.is_detecting:
            self.toggle_detection()

    def _on_stop_command(self) -> None:
        if self.is_detecting:
            self.toggle_detection()

    def _on_detect_command(self) -> None:
        self._toast("Scanning environment")
        self._facade.speak(MSG_SCANNING_ENVIRONMENT)

    def _on_help_command(self) -> None:
        self._facade.speak(MSG_HELP_FULL)

    def _on_direction_command(self, utterance: str) -> None:
        event = self._obstacles.next_event()
        log_event({
            "event_type": "DIRECTION_REQUESTED",
            "session_id": self._session_id,
            "utterance_chars": len(utterance),
            "distance_m": event.distance_m,
            "direction": event.direction,
        })
        self._facade.obstacle_alert(event.distance_m, event.direction)

    # ------------------------------------------------------------------
    # Client view
    # ------------------------------------------------------------------

    def snapshot(self) -> dict[str, Any]:
        return {
            "mode": _mode_label(self.mode),
            "is_detecting": self.is_detecting,
            "recognition": self._facade.recognition.state.state.value,
        }

    def _publish_state(self) -> None:
        self._notify({"type": "STATE", **self.snapshot()})

    def _toast(self, message: str) -> None:
        self._notify({"type": "TOAST", "message": message})


def _mode_label(mode: AccessibilityMode | str) -> str:
    return mode.value if isinstance(mode, AccessibilityMode) else mode
