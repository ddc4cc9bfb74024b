"""
Authoritative recognition session state container.

Rules:
- This dataclass is a pure data model.
- It contains ALL state the reducer may ever need.
- No behavior, no helpers, no derived logic.
"""
from __future__ import annotations

from dataclasses import dataclass, field

from recognition.enums.state import RecognitionState
from recognition.retry import RestartAttempt


@dataclass(frozen=True)
class SessionState:
    """Immutable snapshot of all session-owned state."""

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    state: RecognitionState = RecognitionState.IDLE

    # True between an accepted start request and the next stop/abort/exhaustion.
    # Drives auto-restart: an unsolicited end only restarts while this is set.
    intends_listening: bool = False

    # Reason attached to FAULTED; None in every other state
    fault_reason: str | None = None

    # ------------------------------------------------------------------
    # Engine cycle tracking
    # ------------------------------------------------------------------
    # Bumped on every StartEngine; 0 means "never started".
    cycle: int = 0

    # ------------------------------------------------------------------
    # Announcements
    # ------------------------------------------------------------------
    # Activation is announced once per session, not once per auto-restart.
    activation_announced: bool = False

    # ------------------------------------------------------------------
    # Restart bookkeeping
    # ------------------------------------------------------------------
    restart_attempt: RestartAttempt = field(default_factory=RestartAttempt)

    # True while the restart timer is armed. A second ENGINE_ENDED for the
    # same cycle must not schedule another restart.
    restart_pending: bool = False
