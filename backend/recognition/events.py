"""
Event definitions for the recognition session reducer.

Rules:
- Events describe facts that have occurred.
- Events carry data only (no behavior).
- All reducer decisions are based on these events.
- No clocks, no timers, no async, no side effects.

Engine events carry the cycle they belong to so late callbacks from an
earlier engine start can be discarded.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


# =============================================================================
# Event Type Enumeration
# =============================================================================

class EventType(str, Enum):
    """
    Canonical event types understood by the reducer.

    Every (state, event_type) pair must be explicitly handled
    or explicitly ignored by the reducer.
    """

    # ------------------------------------------------------------------
    # Caller control
    # ------------------------------------------------------------------
    START_REQUESTED = "START_REQUESTED"
    STOP_REQUESTED = "STOP_REQUESTED"

    # ------------------------------------------------------------------
    # Engine callbacks
    # ------------------------------------------------------------------
    ENGINE_STARTED = "ENGINE_STARTED"
    ENGINE_RESULT = "ENGINE_RESULT"
    ENGINE_ERROR = "ENGINE_ERROR"
    ENGINE_ENDED = "ENGINE_ENDED"

    # ------------------------------------------------------------------
    # Runtime-observed engine outcomes
    # ------------------------------------------------------------------
    ENGINE_STOPPED = "ENGINE_STOPPED"
    ENGINE_START_FAILED = "ENGINE_START_FAILED"

    # ------------------------------------------------------------------
    # Timers
    # ------------------------------------------------------------------
    RESTART_TIMER_FIRED = "RESTART_TIMER_FIRED"


# =============================================================================
# Base Event
# =============================================================================

@dataclass(frozen=True)
class Event:
    """
    Base event type.

    All events must specify:
    - event_type: discriminant
    - ts_ms: timestamp provided by the source (or fake in tests)
    """

    event_type: EventType
    ts_ms: int


@dataclass(frozen=True)
class EngineEvent(Event):
    """
    Base class for events produced by one engine cycle.

    The reducer MUST ignore events whose cycle does not match the
    current cycle.
    """

    cycle: int


# =============================================================================
# Caller Control Events
# =============================================================================

@dataclass(frozen=True)
class StartRequested(Event):
    """Caller asked the session to listen."""


@dataclass(frozen=True)
class StopRequested(Event):
    """Caller asked the session to stop listening."""


# =============================================================================
# Engine Events
# =============================================================================

@dataclass(frozen=True)
class EngineStarted(EngineEvent):
    """Engine confirmed it is capturing audio."""


@dataclass(frozen=True)
class EngineResult(EngineEvent):
    """Recognized text; only final results are acted upon."""
    transcript: str
    is_final: bool = True


@dataclass(frozen=True)
class EngineError(EngineEvent):
    """Engine reported an error code (e.g. "no-speech", "network")."""
    code: str


@dataclass(frozen=True)
class EngineEnded(EngineEvent):
    """Engine stopped capturing, solicited or not."""


@dataclass(frozen=True)
class EngineStopped(EngineEvent):
    """Runtime finished executing a stop request against the engine."""


@dataclass(frozen=True)
class EngineStartFailed(EngineEvent):
    """engine.start() raised before activation."""
    reason: str


# =============================================================================
# Timer Events
# =============================================================================

@dataclass(frozen=True)
class RestartTimerFired(Event):
    """Auto-restart delay elapsed."""
