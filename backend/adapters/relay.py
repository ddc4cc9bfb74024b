"""
Outbound channel shared by the client-relayed adapters.

On the web platform the browser owns the microphone, the speech engine and
the vibration motor; adapters only describe what the browser should do.
Messages are plain JSON-able dicts queued for the WebSocket sender.
"""

from __future__ import annotations

from typing import Any, Callable

ClientSend = Callable[[dict[str, Any]], None]
