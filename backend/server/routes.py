"""
Route registration for the assist API.

Responsibilities:
- Define HTTP and WebSocket endpoints
- Wire gateway to WebSocket lifecycle
- Pump the session's outbound queue onto the socket
- Pull dependencies from app.state
"""

from __future__ import annotations

import asyncio
import json

from fastapi import FastAPI, WebSocket, WebSocketDisconnect

from observability.logger import log_event
from session.assist_session import AssistSession
from session.gateway import SessionGateway


def register_routes(app: FastAPI) -> None:
    """Register all routes on the FastAPI app."""
    @app.get("/health")
    async def health() -> dict[str, str]: # pyright: ignore[reportUnusedFunction]
        return {"status": "ok", "platform": app.state.config.platform}

    @app.websocket("/ws")
    async def websocket_endpoint(ws: WebSocket) -> None: # pyright: ignore[reportUnusedFunction]
        """One connection = one session = one gateway."""
        await ws.accept()

        gateway = SessionGateway(
            config=app.state.config,
            obstacle_source=getattr(app.state, "obstacle_source", None),
        )
        sender: asyncio.Task[None] | None = None

        try:
            session = await gateway.on_ws_connect()
            sender = asyncio.create_task(_pump_outbound(ws, session))

            while True:
                text = await ws.receive_text()
                await gateway.on_json_message(text)

        except WebSocketDisconnect:
            await gateway.on_ws_disconnect(reason="client_disconnect")

        except Exception as exc:  # pylint: disable=broad-exception-caught
            log_event({
                "event_type": "WS_FATAL_ERROR",
                "session_id": gateway.session.session_id if gateway.session else None,
                "exception": type(exc).__name__,
                "message": str(exc),
            })
            await gateway.on_ws_disconnect(reason="server_error")

        finally:
            if sender is not None:
                sender.cancel()
                await asyncio.gather(sender, return_exceptions=True)


async def _pump_outbound(ws: WebSocket, session: AssistSession) -> None:
    """Send queued control messages in order until the socket goes away."""
    while True:
        msg = await session.next_control()
        try:
            await ws.send_text(json.dumps(msg))
        except (WebSocketDisconnect, RuntimeError) as exc:
            log_event({
                "event_type": "WS_SEND_FAILED",
                "session_id": session.session_id,
                "msg_type": msg.get("type"),
                "error": f"{type(exc).__name__}: {exc}",
            })
            return
