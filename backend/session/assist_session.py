"""
Assist session container.

- One per WebSocket connection
- Owned and mutated by SessionGateway
- Holds the platform adapters, the feedback engine and the screen controller
- Buffers outbound control messages until the socket sender picks them up
- NOT a state machine; contains no feedback logic
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from typing import Any

from adapters.capabilities import PlatformBundle
from feedback.facade import FeedbackFacade
from session.connection_status import ConnectionStatus
from session.controller import AssistController


@dataclass
class AssistSession:
    """Mutable runtime container for a single assist session."""

    # ------------------------------------------------------------------
    # Identity / lifecycle
    # ------------------------------------------------------------------

    session_id: str
    created_at: float = field(default_factory=time.time)

    connection_status: ConnectionStatus = ConnectionStatus.DOWN

    # ------------------------------------------------------------------
    # Wiring (attached by SessionGateway)
    # ------------------------------------------------------------------

    platform: PlatformBundle | None = None
    facade: FeedbackFacade | None = None
    controller: AssistController | None = None

    def __post_init__(self) -> None:
        self._control_out: asyncio.Queue[dict[str, Any]] = asyncio.Queue()

    # ------------------------------------------------------------------
    # Outbound control messages
    # ------------------------------------------------------------------

    def enqueue_control(self, msg: dict[str, Any]) -> None:
        """
        Buffer a message for delivery to the client, FIFO.

        Messages are dropped once the connection is no longer UP.
        """
        if self.connection_status is not ConnectionStatus.UP:
            return
        self._control_out.put_nowait(msg)

    async def next_control(self) -> dict[str, Any]:
        """Wait for the next outbound message."""
        return await self._control_out.get()

    def drain_control(self) -> tuple[dict[str, Any], ...]:
        """Take every pending message without waiting."""
        out: list[dict[str, Any]] = []
        while not self._control_out.empty():
            out.append(self._control_out.get_nowait())
        return tuple(out)

    # ------------------------------------------------------------------
    # Observability helpers (read-only)
    # ------------------------------------------------------------------

    def log_context(self) -> dict[str, Any]:
        return {
            "session_id": self.session_id,
            "connection_status": self.connection_status.value,
            "platform": self.platform.platform if self.platform else None,
        }
