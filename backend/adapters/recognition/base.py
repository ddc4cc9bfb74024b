"""
Recognition engine contract.

This module defines the *interface only*: no restart policy, no fault
classification, no timers and no command matching live here.

Key invariants:
- The engine reports facts through the listener it was started with; it does
  not call the reducer or make state transitions.
- Listener methods MUST be invoked on the event loop thread. Engines that
  capture audio on a worker thread marshal their callbacks with
  loop.call_soon_threadsafe().
- stop() MUST be idempotent and safe to call when the engine never started.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Protocol


class RecognitionListener(Protocol):
    """
    Callback slots for one engine cycle.

    on_start:  engine confirmed audio capture is active
    on_result: recognized text (is_final=False for interim hypotheses)
    on_error:  platform error code ("no-speech", "aborted", "network", ...)
    on_end:    engine stopped capturing, whether asked to or not
    """

    def on_start(self) -> None: ...
    def on_result(self, transcript: str, is_final: bool = True) -> None: ...
    def on_error(self, code: str) -> None: ...
    def on_end(self) -> None: ...


class RecognitionEngine(ABC):
    """
    Abstract continuous speech recognition engine.

    Implementations are responsible for:
    - Beginning continuous recognition on start(listener)
    - Reporting activation, final transcripts, errors and end to the listener
    - Stopping capture on stop()

    Non-responsibilities:
    - No auto-restart (the session decides when to start again)
    - No command classification
    - No announcements
    """

    # Variants without continuous recognition override this with False;
    # the session then treats start/stop as no-ops.
    available: bool = True

    @abstractmethod
    async def start(self, listener: RecognitionListener) -> None:
        """
        Begin one recognition cycle reporting to `listener`.

        Raising here is reported to the session as a failed start.
        """
        raise NotImplementedError

    @abstractmethod
    async def stop(self) -> None:
        """
        Stop the current cycle.

        Contract:
        - Idempotent; a no-op when nothing is running.
        - The engine MAY still deliver on_end() afterwards; the session
          discards anything that arrives after it stopped.
        """
        raise NotImplementedError
