"""
Haptic device contract.

Pattern ids are platform vocabulary ("impact_light", "notification_success",
...); intensity mapping lives in feedback.haptics.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class HapticDevice(ABC):
    """Abstract vibration motor."""

    # Hosts without a vibration motor override this with False
    available: bool = True

    @abstractmethod
    def fire(self, pattern_id: str) -> None:
        """Play one pattern. Fire-and-forget."""
        raise NotImplementedError


class NullHapticDevice(HapticDevice):
    """Device for hosts without haptics; every pattern is dropped."""

    available = False

    def fire(self, pattern_id: str) -> None:
        return None
