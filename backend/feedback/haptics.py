"""
Intensity → haptic pattern, best effort.

A missing motor or a faulting device never surfaces to callers: the cue is
dropped and the fault is logged.
"""

from __future__ import annotations

from typing import Final, Mapping

from adapters.haptics.base import HapticDevice
from feedback.enums.intensity import VibrationIntensity
from observability.logger import log_event


PATTERNS: Final[Mapping[VibrationIntensity, str]] = {
    VibrationIntensity.LIGHT: "impact_light",
    VibrationIntensity.MEDIUM: "impact_medium",
    VibrationIntensity.HEAVY: "impact_heavy",
    VibrationIntensity.SUCCESS: "notification_success",
    VibrationIntensity.WARNING: "notification_warning",
    VibrationIntensity.ERROR: "notification_error",
}


class HapticSignaler:
    def __init__(
        self,
        device: HapticDevice,
        *,
        session_id: str | None = None,
    ) -> None:
        self._device = device
        self._session_id = session_id

    @property
    def available(self) -> bool:
        return self._device.available

    def signal(self, intensity: VibrationIntensity) -> None:
        """Fire the pattern for `intensity`. Never raises."""
        if not self._device.available:
            return

        try:
            pattern_id = PATTERNS[VibrationIntensity(intensity)]
        except ValueError:
            log_event({
                "event_type": "HAPTIC_UNKNOWN_INTENSITY",
                "session_id": self._session_id,
                "intensity": str(intensity),
            })
            return

        try:
            self._device.fire(pattern_id)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            log_event({
                "event_type": "HAPTIC_FAILED",
                "session_id": self._session_id,
                "pattern": pattern_id,
                "error": f"{type(exc).__name__}: {exc}",
            })
