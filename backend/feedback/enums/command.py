"""
Voice command vocabulary.

Rules:
- Closed set: an utterance either maps to exactly one member or to None.
- No matching logic here; see feedback.classifier.
"""

from __future__ import annotations

from enum import Enum


class Command(str, Enum):
    """Commands recognized from free-form speech."""

    START = "start"
    STOP = "stop"
    DETECT = "detect"
    HELP = "help"
    DIRECTION = "direction"
