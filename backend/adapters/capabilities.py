"""
Platform capability selection.

The platform is chosen once per process from configuration; each session
gets its own adapter instances built here.

- web:         the browser recognizes, speaks and vibrates; adapters relay
               over the session's WebSocket
- native:      host microphone (SpeechRecognition) and host speech
               (pyttsx3 or ElevenLabs); no haptics
- unavailable: no recognition and no haptics; speech still goes to the
               client so announcements keep working

Native adapter modules are imported lazily: they need audio drivers that web
deployments do not have.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from adapters.haptics.base import HapticDevice, NullHapticDevice
from adapters.haptics.client_relay import ClientHapticRelay
from adapters.recognition.base import RecognitionEngine
from adapters.recognition.client_relay import ClientRecognitionRelay
from adapters.recognition.unavailable import UnavailableRecognitionEngine
from adapters.relay import ClientSend
from adapters.tts.base import SpeechSynthesizer
from adapters.tts.client_relay import ClientSpeechRelay

if TYPE_CHECKING:
    from config import AppConfig


PLATFORM_WEB: Final[str] = "web"
PLATFORM_NATIVE: Final[str] = "native"
PLATFORM_UNAVAILABLE: Final[str] = "unavailable"

PLATFORMS: Final[tuple[str, ...]] = (PLATFORM_WEB, PLATFORM_NATIVE, PLATFORM_UNAVAILABLE)
TTS_PROVIDERS: Final[tuple[str, ...]] = ("pyttsx3", "elevenlabs")


@dataclass(frozen=True)
class PlatformBundle:
    """
    Adapters for one session.

    The client_* fields are set when the matching capability is relayed to
    the browser, so the gateway can route inbound replies to them.
    """
    platform: str
    engine: RecognitionEngine
    synthesizer: SpeechSynthesizer
    haptics: HapticDevice
    client_recognition: ClientRecognitionRelay | None = None
    client_speech: ClientSpeechRelay | None = None


def validate_config(config: AppConfig) -> None:
    """Fail fast at startup on values no session could be built from."""
    if config.platform not in PLATFORMS:
        raise ValueError(
            f"Unknown ASSIST_PLATFORM: {config.platform!r} (expected one of {PLATFORMS})"
        )
    if config.platform != PLATFORM_NATIVE:
        return
    if config.tts_provider not in TTS_PROVIDERS:
        raise ValueError(
            f"Unknown TTS_PROVIDER: {config.tts_provider!r} (expected one of {TTS_PROVIDERS})"
        )
    if config.tts_provider == "elevenlabs":
        if not config.elevenlabs_api_key:
            raise ValueError("ELEVENLABS_API_KEY is required for TTS_PROVIDER=elevenlabs")
        if not config.elevenlabs_voice_id:
            raise ValueError("ELEVENLABS_VOICE_ID is required for TTS_PROVIDER=elevenlabs")


def build_platform(
    config: AppConfig,
    *,
    send: ClientSend,
    session_id: str | None = None,
) -> PlatformBundle:
    validate_config(config)

    if config.platform == PLATFORM_WEB:
        recognition = ClientRecognitionRelay(send, session_id=session_id)
        speech = ClientSpeechRelay(send, session_id=session_id)
        return PlatformBundle(
            platform=PLATFORM_WEB,
            engine=recognition,
            synthesizer=speech,
            haptics=ClientHapticRelay(send),
            client_recognition=recognition,
            client_speech=speech,
        )

    if config.platform == PLATFORM_UNAVAILABLE:
        speech = ClientSpeechRelay(send, session_id=session_id)
        return PlatformBundle(
            platform=PLATFORM_UNAVAILABLE,
            engine=UnavailableRecognitionEngine(),
            synthesizer=speech,
            haptics=NullHapticDevice(),
            client_speech=speech,
        )

    return PlatformBundle(
        platform=PLATFORM_NATIVE,
        engine=_native_engine(config, session_id=session_id),
        synthesizer=_native_synthesizer(config),
        haptics=NullHapticDevice(),
    )


def _native_engine(config: AppConfig, *, session_id: str | None) -> RecognitionEngine:
    # pylint: disable-next=import-outside-toplevel
    from adapters.recognition.microphone import MicrophoneRecognitionEngine

    return MicrophoneRecognitionEngine(
        language=config.speech_locale,
        phrase_time_limit_s=config.recognition_phrase_time_limit_s,
        session_id=session_id,
    )


def _native_synthesizer(config: AppConfig) -> SpeechSynthesizer:
    if config.tts_provider == "elevenlabs":
        # pylint: disable-next=import-outside-toplevel
        from adapters.tts.elevenlabs_adapter import ElevenLabsSynthesizer

        assert config.elevenlabs_api_key is not None
        assert config.elevenlabs_voice_id is not None
        return ElevenLabsSynthesizer(
            api_key=config.elevenlabs_api_key,
            voice_id=config.elevenlabs_voice_id,
            model_id=config.elevenlabs_model_id or "eleven_turbo_v2",
        )

    # pylint: disable-next=import-outside-toplevel
    from adapters.tts.pyttsx3_engine import Pyttsx3Synthesizer

    return Pyttsx3Synthesizer()
