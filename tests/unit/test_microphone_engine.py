# pylint: disable=missing-module-docstring,missing-function-docstring
import asyncio
from typing import Any, Callable

import speech_recognition as sr  # pyright: ignore[reportMissingTypeStubs]

from adapters.recognition.microphone import MicrophoneRecognitionEngine


class FakeMicrophone:
    def __init__(self) -> None:
        self.opened = 0

    def __enter__(self) -> "FakeMicrophone":
        self.opened += 1
        return self

    def __exit__(self, *exc: Any) -> None:
        return None


class FakeRecognizer:
    """Duck-types the parts of sr.Recognizer the engine uses."""

    def __init__(self) -> None:
        self.calibrations: list[float] = []
        self.callback: Callable[[Any, Any], None] | None = None
        self.phrase_time_limit: float | None = None
        self.stops: list[bool] = []
        self.next: Any = "start"

    def adjust_for_ambient_noise(self, source: Any, duration: float = 1) -> None:
        self.calibrations.append(duration)

    def listen_in_background(
        self,
        source: Any,
        callback: Callable[[Any, Any], None],
        phrase_time_limit: float | None = None,
    ) -> Callable[..., None]:
        self.callback = callback
        self.phrase_time_limit = phrase_time_limit
        return lambda wait_for_stop=True: self.stops.append(wait_for_stop)

    def recognize_google(self, audio: Any, language: str = "en-US") -> str:
        if isinstance(self.next, Exception):
            raise self.next
        return f"{self.next}|{language}"


class RecordingListener:
    def __init__(self) -> None:
        self.calls: list[tuple[Any, ...]] = []

    def on_start(self) -> None:
        self.calls.append(("start",))

    def on_result(self, transcript: str, is_final: bool = True) -> None:
        self.calls.append(("result", transcript, is_final))

    def on_error(self, code: str) -> None:
        self.calls.append(("error", code))

    def on_end(self) -> None:
        self.calls.append(("end",))


def make_engine() -> tuple[MicrophoneRecognitionEngine, FakeRecognizer, FakeMicrophone]:
    recognizer = FakeRecognizer()
    microphone = FakeMicrophone()
    engine = MicrophoneRecognitionEngine(
        language="en-GB",
        phrase_time_limit_s=4.0,
        recognizer=recognizer,  # type: ignore[arg-type]
        microphone_factory=lambda: microphone,
    )
    return engine, recognizer, microphone


async def hear(recognizer: FakeRecognizer, outcome: Any) -> None:
    """Deliver one phrase from a worker thread, then let the loop run."""
    recognizer.next = outcome
    assert recognizer.callback is not None
    await asyncio.to_thread(recognizer.callback, recognizer, object())
    await asyncio.sleep(0)


def test_start_calibrates_and_reports_activation() -> None:
    engine, recognizer, microphone = make_engine()
    listener = RecordingListener()

    asyncio.run(engine.start(listener))

    assert microphone.opened == 1
    assert recognizer.calibrations == [0.3]
    assert recognizer.phrase_time_limit == 4.0
    assert listener.calls == [("start",)]


def test_recognized_phrase_becomes_final_result() -> None:
    engine, recognizer, _ = make_engine()
    listener = RecordingListener()

    async def scenario() -> None:
        await engine.start(listener)
        await hear(recognizer, "stop")

    asyncio.run(scenario())

    assert listener.calls[-1] == ("result", "stop|en-GB", True)


def test_recognition_errors_map_to_fault_codes() -> None:
    engine, recognizer, _ = make_engine()
    listener = RecordingListener()

    async def scenario() -> None:
        await engine.start(listener)
        await hear(recognizer, sr.UnknownValueError())
        await hear(recognizer, sr.RequestError("offline"))
        await hear(recognizer, KeyError("bad"))

    asyncio.run(scenario())

    assert listener.calls[1:] == [
        ("error", "no-speech"),
        ("error", "network"),
        ("error", "KeyError"),
    ]


def test_stop_halts_background_listener_and_reports_end() -> None:
    engine, recognizer, _ = make_engine()
    listener = RecordingListener()

    async def scenario() -> None:
        await engine.start(listener)
        await engine.stop()
        await engine.stop()

    asyncio.run(scenario())

    assert recognizer.stops == [False]
    assert listener.calls == [("start",), ("end",)]


def test_restart_replaces_previous_listener() -> None:
    engine, recognizer, _ = make_engine()

    async def scenario() -> None:
        await engine.start(RecordingListener())
        await engine.start(RecordingListener())

    asyncio.run(scenario())

    assert recognizer.stops == [False]
