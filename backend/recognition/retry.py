"""
Fault classification and restart policy.

Purpose:
- Centralize how engine error codes are treated
- Keep reducer pure
- Make restart decisions deterministic

This module contains NO timers, NO async, NO side effects.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from constants import (
    ERROR_ABORTED,
    ERROR_NETWORK,
    ERROR_NO_SPEECH,
    RECOGNITION_ERROR_BACKOFF_MS,
    RECOGNITION_MAX_AUTO_RESTARTS,
    RECOGNITION_RESTART_DELAY_MS,
)


# =============================================================================
# Fault Disposition
# =============================================================================

class FaultDisposition(str, Enum):
    """
    What the session does with an engine error code.

    IGNORE:
        Expected gap in ambient audio ("no-speech"). Session keeps listening,
        nothing is announced.

    TERMINAL:
        The cycle was aborted on purpose (e.g. another session claimed the
        microphone). Session returns to IDLE; the caller must start again.

    ANNOUNCE:
        Transient platform problem ("network"). The user is told, the session
        stays nominally LISTENING and the engine recovers on its own.

    BACKOFF:
        Anything else. Session is FAULTED and retries after a longer delay
        if it still intends to listen.
    """

    IGNORE = "ignore"
    TERMINAL = "terminal"
    ANNOUNCE = "announce"
    BACKOFF = "backoff"


def classify_error(code: str) -> FaultDisposition:
    """Map a platform error code to its disposition."""
    normalized = code.strip().lower()
    if normalized == ERROR_NO_SPEECH:
        return FaultDisposition.IGNORE
    if normalized == ERROR_ABORTED:
        return FaultDisposition.TERMINAL
    if normalized == ERROR_NETWORK:
        return FaultDisposition.ANNOUNCE
    return FaultDisposition.BACKOFF


# =============================================================================
# Restart Attempts
# =============================================================================

@dataclass(frozen=True)
class RestartAttempt:
    """
    Immutable count of consecutive auto-restarts.

    Semantics:
    - attempt == 0: no restart since the engine last confirmed activation.
    - Reset whenever the engine reports ENGINE_STARTED.
    """
    attempt: int = 0


def next_attempt(current: RestartAttempt) -> RestartAttempt:
    """Return a new RestartAttempt with attempt incremented by 1."""
    return RestartAttempt(attempt=current.attempt + 1)


def reset_attempt() -> RestartAttempt:
    """Returns a fresh restart counter."""
    return RestartAttempt(attempt=0)


def should_restart(attempt: RestartAttempt) -> bool:
    """
    True if another auto-restart is allowed.

    attempt = restarts already scheduled since the last confirmed activation
    """
    return attempt.attempt < RECOGNITION_MAX_AUTO_RESTARTS


def restart_delay_ms(*, after_error: bool) -> int:
    """Short delay after an unsolicited end, longer backoff after an error."""
    if after_error:
        return RECOGNITION_ERROR_BACKOFF_MS
    return RECOGNITION_RESTART_DELAY_MS
