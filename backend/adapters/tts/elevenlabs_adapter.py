"""
ElevenLabs speech synthesis played on the host output device.

Audio is requested as raw PCM16 at 16 kHz, buffered, converted with numpy and
played through sounddevice on a worker thread. cancel() stops the output
stream; an in-flight HTTP request is abandoned by task cancellation.

Rate maps onto the provider's speed setting (clamped to its accepted range).
Pitch has no provider equivalent and is ignored.
"""

from __future__ import annotations

import asyncio

import numpy as np
import sounddevice as sd  # pyright: ignore[reportMissingTypeStubs]
from elevenlabs import VoiceSettings
from elevenlabs.client import AsyncElevenLabs

from adapters.tts.base import SpeechSynthesizer, VoiceInfo, VoiceParams

SAMPLE_RATE_HZ = 16_000
OUTPUT_FORMAT = "pcm_16000"

SPEED_MIN = 0.7
SPEED_MAX = 1.2


class ElevenLabsSynthesizer(SpeechSynthesizer):
    def __init__(
        self,
        *,
        api_key: str,
        voice_id: str,
        model_id: str,
        client: AsyncElevenLabs | None = None,
    ) -> None:
        self._client = client or AsyncElevenLabs(api_key=api_key)
        self._default_voice_id = voice_id
        self._model_id = model_id

    async def speak(self, text: str, params: VoiceParams) -> None:
        speed = min(max(params.rate, SPEED_MIN), SPEED_MAX)
        stream = self._client.text_to_speech.convert(
            voice_id=params.voice_id or self._default_voice_id,
            text=text,
            model_id=self._model_id,
            output_format=OUTPUT_FORMAT,
            voice_settings=VoiceSettings(speed=speed),
        )

        pcm = bytearray()
        async for chunk in stream:
            pcm.extend(chunk)

        # Provider chunks are not sample aligned; drop a dangling odd byte
        if len(pcm) % 2:
            del pcm[-1]
        if not pcm:
            return

        samples = np.frombuffer(bytes(pcm), dtype="<i2").astype(np.float32) / 32768.0
        samples *= params.volume
        await asyncio.to_thread(self._play_blocking, samples)

    def cancel(self) -> None:
        sd.stop()

    async def voices(self) -> tuple[VoiceInfo, ...]:
        response = await self._client.voices.get_all()
        catalog: list[VoiceInfo] = []
        for voice in response.voices:
            labels = voice.labels or {}
            catalog.append(VoiceInfo(
                voice_id=voice.voice_id,
                name=voice.name or "",
                language=labels.get("language", "en"),
                gender=labels.get("gender", ""),
            ))
        return tuple(catalog)

    @staticmethod
    def _play_blocking(samples: np.ndarray) -> None:
        sd.play(samples, SAMPLE_RATE_HZ)
        sd.wait()
