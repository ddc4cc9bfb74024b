"""
Haptic intensity enumeration.

A pure mapping key: the signaler translates each member into a
platform pattern id. No behavior lives here.
"""

from __future__ import annotations

from enum import Enum


class VibrationIntensity(str, Enum):
    """
    Semantic strength of a haptic cue.

    LIGHT / MEDIUM / HEAVY:
        Impact-style taps.

    SUCCESS / WARNING / ERROR:
        Notification-style patterns.
    """

    LIGHT = "light"
    MEDIUM = "medium"
    HEAVY = "heavy"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
