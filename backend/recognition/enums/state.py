"""
Authoritative recognition session state enumeration.

Rules:
- This enum defines ONLY the lifecycle states.
- No behavior, no helper methods, no side effects.
- Transitions are defined exclusively in the reducer.
"""

from __future__ import annotations

from enum import Enum


class RecognitionState(str, Enum):
    """
    Lifecycle states of one recognition session.

    STARTING covers both "waiting for the engine to confirm activation" and
    "waiting for the auto-restart timer after an unsolicited end".
    FAULTED carries its reason on the state dataclass (fault_reason).
    """

    IDLE = "IDLE"
    STARTING = "STARTING"
    LISTENING = "LISTENING"
    STOPPING = "STOPPING"
    FAULTED = "FAULTED"
