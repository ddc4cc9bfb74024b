"""
Recognition engine backed by the browser's continuous speech recognition.

start()/stop() become RECOGNITION_START / RECOGNITION_STOP messages; the
browser's onstart/onresult/onerror/onend arrive back through the gateway and
are forwarded to the listener of the current cycle.
"""

from __future__ import annotations

from adapters.recognition.base import RecognitionEngine, RecognitionListener
from adapters.relay import ClientSend
from observability.logger import log_event


class ClientRecognitionRelay(RecognitionEngine):
    def __init__(self, send: ClientSend, *, session_id: str | None = None) -> None:
        self._send = send
        self._session_id = session_id
        self._listener: RecognitionListener | None = None
        self._running = False

    async def start(self, listener: RecognitionListener) -> None:
        self._listener = listener
        self._running = True
        self._send({"type": "RECOGNITION_START"})

    async def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        self._send({"type": "RECOGNITION_STOP"})

    # ------------------------------------------------------------------
    # Inbound (called by the gateway on the event loop thread)
    # ------------------------------------------------------------------

    def client_started(self) -> None:
        if self._listener is not None:
            self._listener.on_start()
        else:
            self._log_orphan("RECOGNITION_STARTED")

    def client_result(self, transcript: str, is_final: bool = True) -> None:
        if self._listener is not None:
            self._listener.on_result(transcript, is_final)
        else:
            self._log_orphan("RECOGNITION_RESULT")

    def client_error(self, code: str) -> None:
        if self._listener is not None:
            self._listener.on_error(code)
        else:
            self._log_orphan("RECOGNITION_ERROR")

    def client_ended(self) -> None:
        self._running = False
        if self._listener is not None:
            self._listener.on_end()
        else:
            self._log_orphan("RECOGNITION_ENDED")

    def _log_orphan(self, msg_type: str) -> None:
        log_event({
            "event_type": "RECOGNITION_MESSAGE_WITHOUT_CYCLE",
            "session_id": self._session_id,
            "msg_type": msg_type,
        })
