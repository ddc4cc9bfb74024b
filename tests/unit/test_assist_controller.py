# pylint: disable=missing-module-docstring,missing-function-docstring
import asyncio
from typing import Any

from adapters.haptics.base import HapticDevice
from adapters.recognition.base import RecognitionEngine, RecognitionListener
from constants import (
    MODE_MESSAGES,
    MSG_ACK_DIRECTION,
    MSG_DETECTION_START,
    MSG_DETECTION_STOP,
    MSG_HELP_FULL,
    MSG_MODE_SELECTION,
    MSG_SCANNING_ENVIRONMENT,
    MSG_SYSTEM_READY,
)
from feedback.announcer import AnnouncementOptions
from feedback.enums.mode import AccessibilityMode
from feedback.facade import FeedbackFacade
from feedback.haptics import HapticSignaler
from recognition.enums.state import RecognitionState
from session.controller import AssistController
from simulation.obstacles import ObstacleEvent, ScriptedObstacleSource


class RecordingAnnouncer:
    def __init__(self) -> None:
        self.spoken: list[tuple[str, AnnouncementOptions | None]] = []

    def speak(self, text: str, options: AnnouncementOptions | None = None) -> None:
        self.spoken.append((text, options))

    async def shutdown(self) -> None:
        return None

    @property
    def texts(self) -> list[str]:
        return [text for text, _ in self.spoken]


class RecordingDevice(HapticDevice):
    def __init__(self) -> None:
        self.fired: list[str] = []

    def fire(self, pattern_id: str) -> None:
        self.fired.append(pattern_id)


class FakeEngine(RecognitionEngine):
    def __init__(self) -> None:
        self.listeners: list[RecognitionListener] = []
        self.stop_calls = 0

    async def start(self, listener: RecognitionListener) -> None:
        self.listeners.append(listener)

    async def stop(self) -> None:
        self.stop_calls += 1


class Rig:
    """Controller wired to a real facade over recording fakes."""

    def __init__(self, events: list[ObstacleEvent] | None = None) -> None:
        self.announcer = RecordingAnnouncer()
        self.device = RecordingDevice()
        self.engine = FakeEngine()
        self.sent: list[dict[str, Any]] = []
        self.facade = FeedbackFacade(
            announcer=self.announcer,  # type: ignore[arg-type]
            haptics=HapticSignaler(self.device),
            engine=self.engine,
        )
        self.controller = AssistController(
            self.facade,
            ScriptedObstacleSource(events or [ObstacleEvent("2", "ahead")]),
            notify=self.sent.append,
        )

    def sent_of(self, msg_type: str) -> list[dict[str, Any]]:
        return [m for m in self.sent if m["type"] == msg_type]

    async def say(self, utterance: str) -> None:
        self.engine.listeners[-1].on_result(utterance)
        await self.facade.recognition.settle()


def test_attach_greets_and_publishes_initial_state() -> None:
    async def scenario() -> Rig:
        rig = Rig()
        rig.controller.attach()
        return rig

    rig = asyncio.run(scenario())

    assert rig.announcer.texts == [MSG_SYSTEM_READY]
    assert rig.device.fired == ["notification_success"]
    assert rig.sent == [{
        "type": "STATE",
        "mode": "",
        "is_detecting": False,
        "recognition": "IDLE",
    }]


def test_button_without_mode_requests_mode_selection() -> None:
    async def scenario() -> Rig:
        rig = Rig()
        rig.controller.press_button()
        return rig

    rig = asyncio.run(scenario())

    assert rig.announcer.texts == [MSG_MODE_SELECTION]
    assert rig.device.fired == ["impact_medium", "impact_medium"]
    assert rig.sent == [{"type": "MODE_SELECTION_REQUESTED"}]
    assert rig.controller.is_detecting is False


def test_select_low_vision_starts_detection_without_listening() -> None:
    async def scenario() -> Rig:
        rig = Rig()
        await rig.controller.select_mode("Low Vision")
        return rig

    rig = asyncio.run(scenario())

    assert rig.controller.mode is AccessibilityMode.LOW_VISION
    assert rig.controller.is_detecting is True
    assert rig.engine.listeners == []
    assert rig.announcer.spoken == [
        (MODE_MESSAGES["Low Vision"], None),
        (MSG_DETECTION_START, AnnouncementOptions(interrupt=False)),
    ]
    assert rig.sent_of("TOAST") == [{"type": "TOAST", "message": "Low Vision Mode Enabled"}]
    assert rig.sent_of("STATE")[-1]["is_detecting"] is True


def test_select_total_blindness_starts_listening() -> None:
    async def scenario() -> Rig:
        rig = Rig()
        await rig.controller.select_mode(AccessibilityMode.TOTAL_BLINDNESS)
        return rig

    rig = asyncio.run(scenario())

    assert len(rig.engine.listeners) == 1
    state = rig.sent_of("STATE")[-1]
    assert state["mode"] == "Total Blindness"
    assert state["recognition"] == "STARTING"


def test_unknown_mode_is_kept_and_spoken() -> None:
    async def scenario() -> Rig:
        rig = Rig()
        await rig.controller.select_mode("Night Mode")
        return rig

    rig = asyncio.run(scenario())

    assert rig.controller.mode == "Night Mode"
    assert rig.announcer.texts[0] == "Night Mode"
    assert rig.sent_of("STATE")[-1]["mode"] == "Night Mode"


def test_button_toggles_detection_once_mode_is_set() -> None:
    async def scenario() -> Rig:
        rig = Rig()
        await rig.controller.select_mode("Low Vision")
        rig.announcer.spoken.clear()
        rig.device.fired.clear()
        rig.controller.press_button()
        rig.controller.press_button()
        return rig

    rig = asyncio.run(scenario())

    assert rig.announcer.texts == [MSG_DETECTION_STOP, MSG_DETECTION_START]
    assert rig.device.fired == [
        "notification_warning", "notification_warning",
        "notification_success", "notification_success",
    ]
    toasts = [m["message"] for m in rig.sent_of("TOAST")]
    assert toasts[-2:] == ["Detection Stopped", "Detection Started"]
    assert rig.controller.is_detecting is True


def test_obstacles_are_announced_only_while_detecting() -> None:
    async def scenario() -> tuple[Rig, bool, bool]:
        rig = Rig()
        ignored = rig.controller.report_obstacle(ObstacleEvent("1", "behind you"))
        await rig.controller.select_mode("Low Vision")
        accepted = rig.controller.report_obstacle(ObstacleEvent("4", "to your right"))
        return rig, ignored, accepted

    rig, ignored, accepted = asyncio.run(scenario())

    assert ignored is False
    assert accepted is True
    assert rig.announcer.texts[-1] == "Obstacle detected 4 meters to your right"


def test_voice_commands_drive_detection() -> None:
    async def scenario() -> Rig:
        rig = Rig([ObstacleEvent("3", "to your left")])
        rig.controller.attach()
        await rig.controller.select_mode("Total Blindness")
        rig.engine.listeners[-1].on_start()
        await rig.facade.recognition.settle()
        rig.announcer.spoken.clear()

        await rig.say("stop")
        await rig.say("start")
        await rig.say("start")  # already detecting
        await rig.say("scan")
        await rig.say("help")
        await rig.say("where is it")
        return rig

    rig = asyncio.run(scenario())

    assert rig.announcer.texts == [
        "Stopping obstacle detection",
        MSG_DETECTION_STOP,
        "Starting obstacle detection",
        MSG_DETECTION_START,
        "Starting obstacle detection",
        "Scanning for obstacles",
        MSG_SCANNING_ENVIRONMENT,
        "Available commands are: start, stop, detect, scan, and help.",
        MSG_HELP_FULL,
        MSG_ACK_DIRECTION,
        "Obstacle detected 3 meters to your left",
    ]
    assert rig.controller.is_detecting is True
    assert {"type": "TOAST", "message": "Scanning environment"} in rig.sent


def test_switching_to_low_vision_stops_listening() -> None:
    async def scenario() -> Rig:
        rig = Rig()
        await rig.controller.select_mode("Total Blindness")
        rig.engine.listeners[-1].on_start()
        await rig.facade.recognition.settle()
        await rig.controller.select_mode("Low Vision")
        return rig

    rig = asyncio.run(scenario())

    assert rig.facade.recognition.state.state is RecognitionState.IDLE
    assert rig.engine.stop_calls == 1


def test_detach_stops_listening() -> None:
    async def scenario() -> Rig:
        rig = Rig()
        await rig.controller.select_mode("Total Blindness")
        await rig.controller.detach()
        return rig

    rig = asyncio.run(scenario())

    assert rig.facade.recognition.state.state is RecognitionState.IDLE
