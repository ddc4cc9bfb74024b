"""
JSONL event logger.

- Write one JSON object per line
- Output to stdout
- No buffering, no batching
- No side effects beyond logging

Every component of the feedback engine reports through log_event(); there is
no other observability collaborator.
"""

from __future__ import annotations

import json
import sys
import time
from typing import Any, Mapping, Callable


# ------------------------------------------------------------------
# Explicit output sink (patchable in tests)
# ------------------------------------------------------------------

def _stdout_print(line: str) -> None:
    sys.stdout.write(line + "\n")
    sys.stdout.flush()

_print: Callable[[str], None] = _stdout_print

# When False, events are rendered as a single `key=value` line for humans.
_json_enabled: bool = True


def configure(*, enable_json_logs: bool) -> None:
    """Select JSONL (default) or plain key=value rendering."""
    global _json_enabled  # pylint: disable=global-statement
    _json_enabled = enable_json_logs


def log_event(event: Mapping[str, Any]) -> None:
    """
    Write a single event line to stdout.

    The caller supplies the event dict; `ts_ms` is stamped if absent.

    This function:
    - Serializes to JSON (or key=value)
    - Writes exactly one line
    - Flushes immediately (no buffering)
    - Never raises
    """
    payload: dict[str, Any] = dict(event)
    payload.setdefault("ts_ms", int(time.time() * 1000))

    if not _json_enabled:
        _print(" ".join(f"{k}={v!r}" for k, v in payload.items()))
        return

    try:
        line = json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
    except (TypeError, ValueError) as e:
        # Logging must never crash the engine
        fallback: dict[str, Any] = {
            "ts_ms": payload.get("ts_ms"),
            "event_type": "LOGGER_SERIALIZATION_ERROR",
            "error": str(e),
            "original_event_repr": repr(event),
        }
        line = json.dumps(fallback, ensure_ascii=False, separators=(",", ":"))

    _print(line)
