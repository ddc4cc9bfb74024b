"""
Accessibility mode enumeration.

Mode answers "how does the user perceive the app?", not "what is the
recognition session doing?". Only TOTAL_BLINDNESS enables voice commands.
"""

from __future__ import annotations

from enum import Enum

from constants import MODE_LOW_VISION, MODE_TOTAL_BLINDNESS, MODE_UNSELECTED


class AccessibilityMode(str, Enum):
    """Operating mode chosen by the user."""

    UNSELECTED = MODE_UNSELECTED
    LOW_VISION = MODE_LOW_VISION
    TOTAL_BLINDNESS = MODE_TOTAL_BLINDNESS

    @property
    def is_voice_centric(self) -> bool:
        return self is AccessibilityMode.TOTAL_BLINDNESS
