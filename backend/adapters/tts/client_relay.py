"""
Speech synthesizer backed by the browser's speechSynthesis.

speak() sends SPEAK {id, ...} and waits for the browser to report
SPEECH_ENDED or SPEECH_ERROR for that id. cancel() sends SPEECH_CANCEL.
The voice catalog is whatever the browser reported in VOICES.
"""

from __future__ import annotations

import asyncio
import itertools
from typing import Any, Iterable, Mapping

from adapters.relay import ClientSend
from adapters.tts.base import SpeechSynthesizer, VoiceInfo, VoiceParams
from observability.logger import log_event


class ClientSpeechError(RuntimeError):
    """The browser reported a synthesis error for an utterance."""


class ClientSpeechRelay(SpeechSynthesizer):
    def __init__(self, send: ClientSend, *, session_id: str | None = None) -> None:
        self._send = send
        self._session_id = session_id
        self._ids = itertools.count(1)
        self._pending: dict[int, asyncio.Future[None]] = {}
        self._catalog: tuple[VoiceInfo, ...] = ()

    async def speak(self, text: str, params: VoiceParams) -> None:
        speech_id = next(self._ids)
        done: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._pending[speech_id] = done

        self._send({
            "type": "SPEAK",
            "id": speech_id,
            "text": text,
            "rate": params.rate,
            "pitch": params.pitch,
            "volume": params.volume,
            "lang": params.language,
            "voice": params.voice_id,
        })
        try:
            await done
        finally:
            self._pending.pop(speech_id, None)

    def cancel(self) -> None:
        self._send({"type": "SPEECH_CANCEL"})

    async def voices(self) -> tuple[VoiceInfo, ...]:
        return self._catalog

    # ------------------------------------------------------------------
    # Inbound (called by the gateway on the event loop thread)
    # ------------------------------------------------------------------

    def client_voices(self, voices: Iterable[Mapping[str, Any]]) -> None:
        self._catalog = tuple(
            VoiceInfo(
                voice_id=str(v.get("id") or v.get("name", "")),
                name=str(v.get("name", "")),
                language=str(v.get("lang", "")),
                gender=str(v.get("gender", "")),
            )
            for v in voices
        )

    def client_ended(self, speech_id: int) -> None:
        done = self._pending.get(speech_id)
        if done is None:
            self._log_unknown("SPEECH_ENDED", speech_id)
            return
        if not done.done():
            done.set_result(None)

    def client_error(self, speech_id: int, error: str) -> None:
        done = self._pending.get(speech_id)
        if done is None:
            self._log_unknown("SPEECH_ERROR", speech_id)
            return
        if not done.done():
            done.set_exception(ClientSpeechError(error))

    def _log_unknown(self, msg_type: str, speech_id: int) -> None:
        # Late replies for cancelled utterances land here
        log_event({
            "event_type": "SPEECH_REPLY_UNMATCHED",
            "session_id": self._session_id,
            "msg_type": msg_type,
            "speech_id": speech_id,
        })
