"""
Haptic device backed by the browser's vibration API.
"""

from __future__ import annotations

from adapters.haptics.base import HapticDevice
from adapters.relay import ClientSend


class ClientHapticRelay(HapticDevice):
    def __init__(self, send: ClientSend) -> None:
        self._send = send

    def fire(self, pattern_id: str) -> None:
        self._send({"type": "HAPTIC", "pattern": pattern_id})
