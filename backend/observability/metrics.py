"""
Timing helpers for observability.

- Measure durations using monotonic time (immune to clock changes)
- Emit metrics as JSONL events via observability.logger
- Never aggregate: one metric = one log event
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Any, Iterator

from observability.logger import log_event


@contextmanager
def timed(
    name: str,
    *,
    session_id: str | None = None,
    details: dict[str, Any] | None = None,
) -> Iterator[dict[str, Any]]:
    """
    Measure the enclosed block and emit one METRIC_TIMER event.

    Guarantees:
    - Metric is emitted exactly once, even if the block raises
    - The yielded dict may be filled in by the block; its contents are
      merged into `details` at emission time (e.g. the outcome)

    Usage:
        with timed("speech_duration_ms", details={"chars": 42}) as extra:
            await synthesizer.speak(...)
            extra["outcome"] = "completed"
    """
    extra: dict[str, Any] = {}
    start_ns = time.monotonic_ns()
    try:
        yield extra
    finally:
        duration_ms = (time.monotonic_ns() - start_ns) // 1_000_000
        log_event({
            # Wall-clock timestamp for correlation; duration uses monotonic time
            "ts_ms": int(time.time() * 1000),
            "event_type": "METRIC_TIMER",
            "metric": name,
            "value_ms": duration_ms,
            "session_id": session_id,
            "details": {**(details or {}), **extra},
        })
