# pylint: disable=missing-module-docstring,missing-function-docstring
import asyncio
from types import SimpleNamespace
from typing import Any, AsyncIterator

import numpy as np
import pytest

try:
    from adapters.tts import elevenlabs_adapter as adapter_mod
except OSError:  # PortAudio missing on the test host
    pytest.skip("sounddevice needs PortAudio", allow_module_level=True)

from adapters.tts.base import VoiceInfo, VoiceParams


class FakeTextToSpeech:
    def __init__(self, chunks: list[bytes]) -> None:
        self.chunks = chunks
        self.calls: list[dict[str, Any]] = []

    def convert(self, **kwargs: Any) -> AsyncIterator[bytes]:
        self.calls.append(kwargs)

        async def stream() -> AsyncIterator[bytes]:
            for chunk in self.chunks:
                yield chunk

        return stream()


class FakeVoices:
    async def get_all(self) -> Any:
        return SimpleNamespace(voices=[
            SimpleNamespace(voice_id="rachel", name="Rachel",
                            labels={"gender": "female", "language": "en"}),
            SimpleNamespace(voice_id="adam", name=None, labels=None),
        ])


def make_synth(chunks: list[bytes]) -> tuple[Any, FakeTextToSpeech]:
    tts = FakeTextToSpeech(chunks)
    client = SimpleNamespace(text_to_speech=tts, voices=FakeVoices())
    synth = adapter_mod.ElevenLabsSynthesizer(
        api_key="k", voice_id="default-voice", model_id="eleven_turbo_v2", client=client,
    )
    return synth, tts


@pytest.fixture
def played(monkeypatch: pytest.MonkeyPatch) -> list[Any]:
    calls: list[Any] = []
    monkeypatch.setattr(adapter_mod.sd, "play", lambda data, rate: calls.append((data, rate)))
    monkeypatch.setattr(adapter_mod.sd, "wait", lambda: None)
    monkeypatch.setattr(adapter_mod.sd, "stop", lambda: calls.append("stop"))
    return calls


def test_speak_requests_pcm_and_plays_it(played: list[Any]) -> None:
    # Two samples split across chunks plus a dangling byte
    synth, tts = make_synth([b"\x00\x40", b"\x00", b"\xc0\x01"])

    asyncio.run(synth.speak(
        "hello",
        VoiceParams(rate=2.0, pitch=1.2, language="en-US", voice_id=None, volume=0.5),
    ))

    call = tts.calls[0]
    assert call["voice_id"] == "default-voice"
    assert call["model_id"] == "eleven_turbo_v2"
    assert call["output_format"] == "pcm_16000"
    assert call["voice_settings"].speed == 1.2

    samples, rate = played[0]
    assert rate == 16_000
    np.testing.assert_allclose(samples, [0.25, -0.25])


def test_selected_voice_overrides_default(played: list[Any]) -> None:
    synth, tts = make_synth([])

    asyncio.run(synth.speak(
        "hi", VoiceParams(rate=0.5, pitch=1.0, language="en-US", voice_id="rachel"),
    ))

    assert tts.calls[0]["voice_id"] == "rachel"
    assert tts.calls[0]["voice_settings"].speed == 0.7
    # Empty audio plays nothing
    assert played == []


def test_cancel_stops_output(played: list[Any]) -> None:
    synth, _ = make_synth([])
    synth.cancel()
    assert played == ["stop"]


def test_catalog_uses_voice_labels() -> None:
    synth, _ = make_synth([])
    assert asyncio.run(synth.voices()) == (
        VoiceInfo("rachel", "Rachel", "en", "female"),
        VoiceInfo("adam", "", "en", ""),
    )
