"""
Side-effect command definitions for the recognition session.

Rules:
- Commands are declarative requests for side effects.
- Commands are emitted by the reducer and executed by the runtime.
- No behavior, no async, no I/O, no clocks.
Invariant:
    - All concrete Command subclasses MUST be frozen dataclasses.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from recognition.events import EventType


# =============================================================================
# Command Type Enumeration
# =============================================================================

class CommandType(str, Enum):
    """
    Canonical command types emitted by the reducer.

    These are stable discriminants used for logging and runtime dispatch.
    """

    # Engine
    START_ENGINE = "START_ENGINE"
    STOP_ENGINE = "STOP_ENGINE"

    # Feedback
    ANNOUNCE = "ANNOUNCE"
    DISPATCH_TRANSCRIPT = "DISPATCH_TRANSCRIPT"

    # Timers
    START_TIMER = "START_TIMER"
    CANCEL_TIMER = "CANCEL_TIMER"

    # Observability
    LOG_EVENT = "LOG_EVENT"


# =============================================================================
# Base Command
# =============================================================================

class SessionCommand:
    """
    Base command type.

    command_type is an explicit discriminant and must never be inferred
    from Python type identity.
    """

    command_type: CommandType


# =============================================================================
# Engine Commands
# =============================================================================

@dataclass(frozen=True)
class StartEngine(SessionCommand):
    """Request the platform engine to begin a new cycle."""
    cycle: int
    command_type: CommandType = CommandType.START_ENGINE


@dataclass(frozen=True)
class StopEngine(SessionCommand):
    """Request the platform engine to stop the given cycle."""
    cycle: int
    command_type: CommandType = CommandType.STOP_ENGINE


# =============================================================================
# Feedback Commands
# =============================================================================

@dataclass(frozen=True)
class Announce(SessionCommand):
    """Speak a session-status message."""
    text: str
    command_type: CommandType = CommandType.ANNOUNCE


@dataclass(frozen=True)
class DispatchTranscript(SessionCommand):
    """Hand a final transcript to the classifier/handler layer."""
    transcript: str
    command_type: CommandType = CommandType.DISPATCH_TRANSCRIPT


# =============================================================================
# Timer Commands
# =============================================================================

@dataclass(frozen=True)
class StartTimer(SessionCommand):
    """
    Start (or replace) a timer.

    On expiry the runtime feeds an event of timeout_event_type back into
    the reducer.
    """
    timer_id: str
    duration_ms: int
    timeout_event_type: EventType
    command_type: CommandType = CommandType.START_TIMER


@dataclass(frozen=True)
class CancelTimer(SessionCommand):
    """Cancel a pending timer (idempotent)."""
    timer_id: str
    command_type: CommandType = CommandType.CANCEL_TIMER


# =============================================================================
# Observability Commands
# =============================================================================

@dataclass(frozen=True)
class LogEvent(SessionCommand):
    """Structured log record describing a reducer decision."""
    event: dict[str, Any]
    command_type: CommandType = CommandType.LOG_EVENT
