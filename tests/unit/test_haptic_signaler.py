# pylint: disable=missing-module-docstring,missing-function-docstring
from typing import Any

import pytest

from adapters.haptics.base import HapticDevice, NullHapticDevice
from feedback import haptics as haptics_mod
from feedback.enums.intensity import VibrationIntensity
from feedback.haptics import HapticSignaler


class RecordingDevice(HapticDevice):
    def __init__(self) -> None:
        self.fired: list[str] = []

    def fire(self, pattern_id: str) -> None:
        self.fired.append(pattern_id)


class BrokenDevice(HapticDevice):
    def fire(self, pattern_id: str) -> None:
        raise OSError("motor unavailable")


@pytest.mark.parametrize(
    ("intensity", "pattern"),
    [
        (VibrationIntensity.LIGHT, "impact_light"),
        (VibrationIntensity.MEDIUM, "impact_medium"),
        (VibrationIntensity.HEAVY, "impact_heavy"),
        (VibrationIntensity.SUCCESS, "notification_success"),
        (VibrationIntensity.WARNING, "notification_warning"),
        (VibrationIntensity.ERROR, "notification_error"),
    ],
)
def test_intensity_maps_to_pattern(intensity: VibrationIntensity, pattern: str) -> None:
    device = RecordingDevice()
    HapticSignaler(device).signal(intensity)
    assert device.fired == [pattern]


def test_plain_string_intensity_is_accepted() -> None:
    device = RecordingDevice()
    HapticSignaler(device).signal("warning")  # type: ignore[arg-type]
    assert device.fired == ["notification_warning"]


def test_device_without_haptics_is_a_noop() -> None:
    signaler = HapticSignaler(NullHapticDevice())
    signaler.signal(VibrationIntensity.HEAVY)
    assert signaler.available is False


def test_device_fault_is_logged_not_raised(monkeypatch: pytest.MonkeyPatch) -> None:
    emitted: list[dict[str, Any]] = []
    monkeypatch.setattr(haptics_mod, "log_event", emitted.append)

    HapticSignaler(BrokenDevice(), session_id="sess_h").signal(VibrationIntensity.ERROR)

    assert emitted[0]["event_type"] == "HAPTIC_FAILED"
    assert emitted[0]["pattern"] == "notification_error"
    assert emitted[0]["session_id"] == "sess_h"


def test_unknown_intensity_is_logged_not_raised(monkeypatch: pytest.MonkeyPatch) -> None:
    emitted: list[dict[str, Any]] = []
    monkeypatch.setattr(haptics_mod, "log_event", emitted.append)
    device = RecordingDevice()

    HapticSignaler(device, session_id="sess_h").signal("loud")  # type: ignore[arg-type]

    assert device.fired == []
    assert emitted == [{
        "event_type": "HAPTIC_UNKNOWN_INTENSITY",
        "session_id": "sess_h",
        "intensity": "loud",
    }]
