"""
Host microphone recognition using SpeechRecognition.

Audio is captured and recognized on the library's background thread; every
callback is marshalled onto the event loop with call_soon_threadsafe() before
it reaches the listener.

Error mapping onto the browser vocabulary the session classifies:
- UnknownValueError (nothing intelligible) -> "no-speech"
- RequestError (recognition service unreachable) -> "network"
- anything else -> the exception class name (generic, backed off)
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable

import speech_recognition as sr  # pyright: ignore[reportMissingTypeStubs]

from adapters.recognition.base import RecognitionEngine, RecognitionListener
from constants import ERROR_NETWORK, ERROR_NO_SPEECH
from observability.logger import log_event

# Seconds of ambient noise sampled before each cycle
AMBIENT_CALIBRATION_S = 0.3


class MicrophoneRecognitionEngine(RecognitionEngine):
    """
    Continuous recognition on the default input device.

    One background listener per cycle; starting again replaces the previous
    one.
    """

    def __init__(
        self,
        *,
        language: str,
        phrase_time_limit_s: float | None = None,
        recognizer: sr.Recognizer | None = None,
        microphone_factory: Callable[[], Any] = sr.Microphone,
        session_id: str | None = None,
    ) -> None:
        self._language = language
        self._phrase_time_limit_s = phrase_time_limit_s
        self._recognizer = recognizer or sr.Recognizer()
        self._microphone_factory = microphone_factory
        self._session_id = session_id

        self._stop_listening: Callable[..., None] | None = None
        self._listener: RecognitionListener | None = None

    async def start(self, listener: RecognitionListener) -> None:
        self._halt_background()

        loop = asyncio.get_running_loop()
        source = self._microphone_factory()
        await asyncio.to_thread(self._calibrate, source)

        def _on_audio(recognizer: sr.Recognizer, audio: sr.AudioData) -> None:
            # Runs on the SpeechRecognition worker thread
            try:
                text = recognizer.recognize_google(audio, language=self._language)
            except sr.UnknownValueError:
                loop.call_soon_threadsafe(listener.on_error, ERROR_NO_SPEECH)
                return
            except sr.RequestError as exc:
                log_event({
                    "event_type": "MIC_RECOGNITION_REQUEST_ERROR",
                    "session_id": self._session_id,
                    "error": str(exc),
                })
                loop.call_soon_threadsafe(listener.on_error, ERROR_NETWORK)
                return
            except Exception as exc:  # pylint: disable=broad-exception-caught
                loop.call_soon_threadsafe(listener.on_error, type(exc).__name__)
                return
            loop.call_soon_threadsafe(listener.on_result, text, True)

        self._listener = listener
        self._stop_listening = self._recognizer.listen_in_background(
            source,
            _on_audio,
            phrase_time_limit=self._phrase_time_limit_s,
        )
        listener.on_start()

    async def stop(self) -> None:
        if self._stop_listening is None:
            return
        listener = self._listener
        self._halt_background()
        if listener is not None:
            listener.on_end()

    def _calibrate(self, source: Any) -> None:
        with source as opened:
            self._recognizer.adjust_for_ambient_noise(
                opened, duration=AMBIENT_CALIBRATION_S
            )

    def _halt_background(self) -> None:
        stop_listening = self._stop_listening
        self._stop_listening = None
        self._listener = None
        if stop_listening is not None:
            stop_listening(wait_for_stop=False)
