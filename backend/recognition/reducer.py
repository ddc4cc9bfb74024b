"""
Pure recognition session reducer.

(state, event) -> (new_state, commands)

Rules:
- Pure: no side effects, no IO, no clocks.
- Deterministic: output depends only on inputs.
- Total: every (state, event) pair is handled or explicitly ignored (logged).
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any

from constants import (
    MSG_NETWORK_ERROR,
    MSG_RECOGNITION_ACTIVE,
    MSG_RECOGNITION_DEACTIVATED,
    MSG_RECOGNITION_UNAVAILABLE,
)
from recognition.commands import (
    Announce,
    CancelTimer,
    DispatchTranscript,
    LogEvent,
    SessionCommand,
    StartEngine,
    StartTimer,
    StopEngine,
)
from recognition.enums.state import RecognitionState
from recognition.events import (
    EngineEnded,
    EngineError,
    EngineEvent,
    EngineResult,
    EngineStarted,
    EngineStartFailed,
    EngineStopped,
    Event,
    EventType,
    RestartTimerFired,
    StartRequested,
    StopRequested,
)
from recognition.retry import (
    FaultDisposition,
    classify_error,
    next_attempt,
    reset_attempt,
    restart_delay_ms,
    should_restart,
)
from recognition.state_dataclass import SessionState


# =============================================================================
# Timer IDs
# =============================================================================

TIMER_RESTART = "recognition_restart"

REASON_RESTART_EXHAUSTED = "restart_exhausted"

Result = tuple[SessionState, tuple[SessionCommand, ...]]


# =============================================================================
# Small helpers
# =============================================================================

def _log(
    state: SessionState,
    event: Event,
    decision: str,
    details: dict[str, Any] | None = None,
) -> LogEvent:
    return LogEvent(
        event={
            "ts_ms": event.ts_ms,
            "state": state.state.value,
            "event_type": event.event_type.value,
            "decision": decision,
            "cycle": state.cycle,
            "intends_listening": state.intends_listening,
            "fault_reason": state.fault_reason,
            "details": details or {},
        }
    )


def _state_changed(
    prev: SessionState,
    new: SessionState,
    event: Event,
    source: str,
) -> LogEvent:
    return _log(
        new,
        event,
        "state_changed",
        {
            "from_state": prev.state.value,
            "to_state": new.state.value,
            "source": source,
        },
    )


def _logs_last(commands: tuple[SessionCommand, ...]) -> tuple[SessionCommand, ...]:
    non_logs: list[SessionCommand] = []
    logs: list[SessionCommand] = []
    state_change_logs: list[SessionCommand] = []

    for command in commands:
        if isinstance(command, LogEvent):
            if command.event.get("decision") == "state_changed":
                state_change_logs.append(command)
            else:
                logs.append(command)
        else:
            non_logs.append(command)

    return tuple(non_logs + logs + state_change_logs)


def _ignore(state: SessionState, event: Event, reason: str) -> Result:
    return state, (_log(state, event, "ignore", {"reason": reason}),)


def _is_stale(state: SessionState, event: EngineEvent) -> bool:
    return event.cycle != state.cycle


def _schedule_restart(
    state: SessionState,
    event: Event,
    *,
    after_error: bool,
    fault_reason: str | None,
    source: str,
) -> Result:
    """
    Arm the restart timer, or give up when the bound is reached.

    The target state is STARTING after an unsolicited end and FAULTED after
    an error or a failed start.
    """
    if not should_restart(state.restart_attempt):
        return _exhaust(state, event, source=source)

    delay_ms = restart_delay_ms(after_error=after_error)
    new_state = replace(
        state,
        state=RecognitionState.FAULTED if after_error else RecognitionState.STARTING,
        fault_reason=fault_reason if after_error else None,
        restart_attempt=next_attempt(state.restart_attempt),
        restart_pending=True,
    )
    return new_state, _logs_last((
        StartTimer(
            timer_id=TIMER_RESTART,
            duration_ms=delay_ms,
            timeout_event_type=EventType.RESTART_TIMER_FIRED,
        ),
        _log(
            new_state,
            event,
            "schedule_restart",
            {
                "delay_ms": delay_ms,
                "attempt": new_state.restart_attempt.attempt,
                "source": source,
            },
        ),
        _state_changed(state, new_state, event, source),
    ))


def _exhaust(state: SessionState, event: Event, *, source: str) -> Result:
    """Stop auto-restarting; an explicit start is required from here."""
    new_state = replace(
        state,
        state=RecognitionState.FAULTED,
        fault_reason=REASON_RESTART_EXHAUSTED,
        intends_listening=False,
        restart_pending=False,
    )
    return new_state, _logs_last((
        CancelTimer(timer_id=TIMER_RESTART),
        StopEngine(cycle=state.cycle),
        Announce(text=MSG_RECOGNITION_UNAVAILABLE),
        _log(
            new_state,
            event,
            "restart_exhausted",
            {"attempts": state.restart_attempt.attempt, "source": source},
        ),
        _state_changed(state, new_state, event, source),
    ))


# =============================================================================
# Per-event handlers
# =============================================================================

def _on_start_requested(state: SessionState, event: StartRequested) -> Result:
    if state.state in (RecognitionState.LISTENING, RecognitionState.STARTING):
        return _ignore(state, event, "already_active")
    if state.state is RecognitionState.STOPPING:
        return _ignore(state, event, "stop_in_progress")

    cycle = state.cycle + 1
    new_state = replace(
        state,
        state=RecognitionState.STARTING,
        intends_listening=True,
        fault_reason=None,
        cycle=cycle,
        activation_announced=False,
        restart_attempt=reset_attempt(),
        restart_pending=False,
    )
    return new_state, _logs_last((
        CancelTimer(timer_id=TIMER_RESTART),
        StartEngine(cycle=cycle),
        _log(new_state, event, "start_engine", {"cycle": cycle}),
        _state_changed(state, new_state, event, "start_requested"),
    ))


def _on_stop_requested(state: SessionState, event: StopRequested) -> Result:
    if state.state is RecognitionState.FAULTED:
        # Cancel the pending restart and release any capture still running
        new_state = replace(
            state,
            state=RecognitionState.IDLE,
            intends_listening=False,
            fault_reason=None,
            restart_pending=False,
        )
        return new_state, _logs_last((
            CancelTimer(timer_id=TIMER_RESTART),
            StopEngine(cycle=state.cycle),
            _log(new_state, event, "clear_fault", {"cycle": state.cycle}),
            _state_changed(state, new_state, event, "stop_requested"),
        ))

    if state.state not in (RecognitionState.LISTENING, RecognitionState.STARTING):
        return _ignore(state, event, "not_active")

    new_state = replace(
        state,
        state=RecognitionState.STOPPING,
        intends_listening=False,
        restart_pending=False,
    )
    return new_state, _logs_last((
        CancelTimer(timer_id=TIMER_RESTART),
        StopEngine(cycle=state.cycle),
        Announce(text=MSG_RECOGNITION_DEACTIVATED),
        _log(new_state, event, "stop_engine", {"cycle": state.cycle}),
        _state_changed(state, new_state, event, "stop_requested"),
    ))


def _on_engine_started(state: SessionState, event: EngineStarted) -> Result:
    if _is_stale(state, event):
        return _ignore(state, event, "stale_cycle")
    if state.state is not RecognitionState.STARTING:
        return _ignore(state, event, "not_starting")

    announce = not state.activation_announced
    new_state = replace(
        state,
        state=RecognitionState.LISTENING,
        activation_announced=True,
        restart_attempt=reset_attempt(),
    )
    cmds: tuple[SessionCommand, ...] = ()
    if announce:
        cmds += (Announce(text=MSG_RECOGNITION_ACTIVE),)
    return new_state, _logs_last(cmds + (
        _log(new_state, event, "engine_active", {"announced": announce}),
        _state_changed(state, new_state, event, "engine_started"),
    ))


def _on_engine_result(state: SessionState, event: EngineResult) -> Result:
    if _is_stale(state, event):
        return _ignore(state, event, "stale_cycle")
    if not event.is_final:
        return _ignore(state, event, "interim_result")
    if state.state is not RecognitionState.LISTENING:
        return _ignore(state, event, "not_listening")
    if not event.transcript.strip():
        return _ignore(state, event, "empty_transcript")

    return state, (
        DispatchTranscript(transcript=event.transcript),
        _log(state, event, "dispatch_transcript", {"chars": len(event.transcript)}),
    )


def _on_engine_error(state: SessionState, event: EngineError) -> Result:
    if _is_stale(state, event):
        return _ignore(state, event, "stale_cycle")
    if state.state not in (RecognitionState.LISTENING, RecognitionState.STARTING):
        return _ignore(state, event, "not_active")

    disposition = classify_error(event.code)

    if disposition is FaultDisposition.IGNORE:
        return state, (
            _log(state, event, "error_ignored", {"code": event.code}),
        )

    if disposition is FaultDisposition.ANNOUNCE:
        return state, (
            Announce(text=MSG_NETWORK_ERROR),
            _log(state, event, "error_announced", {"code": event.code}),
        )

    if disposition is FaultDisposition.TERMINAL:
        new_state = replace(
            state,
            state=RecognitionState.IDLE,
            intends_listening=False,
            fault_reason=None,
            restart_pending=False,
        )
        return new_state, _logs_last((
            CancelTimer(timer_id=TIMER_RESTART),
            StopEngine(cycle=state.cycle),
            _log(new_state, event, "session_aborted", {"code": event.code}),
            _state_changed(state, new_state, event, "engine_aborted"),
        ))

    if not state.intends_listening:
        return _ignore(state, event, "not_intending_to_listen")
    if state.restart_pending:
        return _ignore(state, event, "restart_already_pending")

    return _schedule_restart(
        state,
        event,
        after_error=True,
        fault_reason=event.code,
        source="engine_error",
    )


def _on_engine_ended(state: SessionState, event: EngineEnded) -> Result:
    if _is_stale(state, event):
        return _ignore(state, event, "stale_cycle")

    if state.state is RecognitionState.STOPPING:
        new_state = replace(state, state=RecognitionState.IDLE)
        return new_state, _logs_last((
            _log(new_state, event, "engine_ended_after_stop"),
            _state_changed(state, new_state, event, "engine_ended"),
        ))

    if state.state not in (RecognitionState.LISTENING, RecognitionState.STARTING):
        return _ignore(state, event, "not_active")
    if state.restart_pending:
        return _ignore(state, event, "restart_already_pending")
    if not state.intends_listening:
        return _ignore(state, event, "not_intending_to_listen")

    return _schedule_restart(
        state,
        event,
        after_error=False,
        fault_reason=None,
        source="unsolicited_end",
    )


def _on_engine_stopped(state: SessionState, event: EngineStopped) -> Result:
    if _is_stale(state, event):
        return _ignore(state, event, "stale_cycle")
    if state.state is not RecognitionState.STOPPING:
        return _ignore(state, event, "not_stopping")

    new_state = replace(state, state=RecognitionState.IDLE)
    return new_state, _logs_last((
        _log(new_state, event, "engine_stopped"),
        _state_changed(state, new_state, event, "engine_stopped"),
    ))


def _on_engine_start_failed(state: SessionState, event: EngineStartFailed) -> Result:
    if _is_stale(state, event):
        return _ignore(state, event, "stale_cycle")
    if state.state is not RecognitionState.STARTING:
        return _ignore(state, event, "not_starting")
    if not state.intends_listening:
        return _ignore(state, event, "not_intending_to_listen")

    return _schedule_restart(
        state,
        event,
        after_error=True,
        fault_reason=event.reason,
        source="start_failed",
    )


def _on_restart_timer(state: SessionState, event: RestartTimerFired) -> Result:
    if not (state.intends_listening and state.restart_pending):
        return _ignore(state, event, "restart_not_wanted")
    if state.state not in (RecognitionState.STARTING, RecognitionState.FAULTED):
        return _ignore(state, event, "restart_wrong_state")

    cycle = state.cycle + 1
    new_state = replace(
        state,
        state=RecognitionState.STARTING,
        fault_reason=None,
        cycle=cycle,
        restart_pending=False,
    )
    return new_state, _logs_last((
        StartEngine(cycle=cycle),
        _log(
            new_state,
            event,
            "restart_engine",
            {"cycle": cycle, "attempt": state.restart_attempt.attempt},
        ),
        _state_changed(state, new_state, event, "restart_timer"),
    ))


# =============================================================================
# Reducer entrypoint
# =============================================================================

def reduce(state: SessionState, event: Event) -> Result:
    """
    Pure reducer for the recognition session state machine.

    Given the current session state and a single event, returns:
    - the next state
    - a tuple of commands describing required side effects

    Properties:
    - Deterministic: no IO, clocks, or randomness
    - Total: every (state, event) pair is handled or explicitly ignored
    - Cycle-safe: ignores engine events from earlier engine cycles
    """
    if isinstance(event, StartRequested):
        return _on_start_requested(state, event)
    if isinstance(event, StopRequested):
        return _on_stop_requested(state, event)
    if isinstance(event, EngineStarted):
        return _on_engine_started(state, event)
    if isinstance(event, EngineResult):
        return _on_engine_result(state, event)
    if isinstance(event, EngineError):
        return _on_engine_error(state, event)
    if isinstance(event, EngineEnded):
        return _on_engine_ended(state, event)
    if isinstance(event, EngineStopped):
        return _on_engine_stopped(state, event)
    if isinstance(event, EngineStartFailed):
        return _on_engine_start_failed(state, event)
    if isinstance(event, RestartTimerFired):
        return _on_restart_timer(state, event)

    return _ignore(state, event, "unhandled_event")
