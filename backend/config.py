"""
Application configuration.

Responsibilities:
- Load deployment-specific configuration
- Read environment variables
- Provide a typed, immutable config object

Non-responsibilities:
- No feedback/recognition logic
- No behavioral constants (see constants.py)
- No runtime mutation
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from constants import SPEECH_DEFAULT_GENDER_HINT, SPEECH_DEFAULT_LOCALE


@dataclass(frozen=True)
class AppConfig:
    """
    Immutable application configuration.

    Constructed once at process startup.
    Passed downward to the server and session bootstrap code.
    """

    # ------------------------------------------------------------------
    # Environment
    # ------------------------------------------------------------------

    env: str

    # ------------------------------------------------------------------
    # Platform capability (web | native | unavailable)
    # ------------------------------------------------------------------

    platform: str

    # ------------------------------------------------------------------
    # Recognition (native only)
    # ------------------------------------------------------------------

    recognition_phrase_time_limit_s: float | None

    # ------------------------------------------------------------------
    # Observability
    # ------------------------------------------------------------------

    enable_json_logs: bool

    # ------------------------------------------------------------------
    # TTS
    # ------------------------------------------------------------------
    tts_provider: str
    speech_locale: str
    voice_gender_hint: str
    elevenlabs_api_key: str | None
    elevenlabs_voice_id: str | None
    elevenlabs_model_id: str | None

    # ------------------------------------------------------------------
    # Factory
    # ------------------------------------------------------------------

    @staticmethod
    def load_from_env() -> AppConfig:
        """
        Load configuration from environment variables.

        Unknown values are validated later, when the platform bundle is built.
        """
        phrase_limit = os.environ.get("RECOGNITION_PHRASE_TIME_LIMIT_S")
        return AppConfig(
            env=os.environ.get("ENV", "dev"),

            platform=os.environ.get("ASSIST_PLATFORM", "web").lower(),
            recognition_phrase_time_limit_s=(
                float(phrase_limit) if phrase_limit else None
            ),

            enable_json_logs=os.environ.get("ENABLE_JSON_LOGS", "1") == "1",
            tts_provider=os.environ.get("TTS_PROVIDER", "pyttsx3").lower(),
            speech_locale=os.environ.get("SPEECH_LOCALE", SPEECH_DEFAULT_LOCALE),
            voice_gender_hint=os.environ.get(
                "VOICE_GENDER_HINT", SPEECH_DEFAULT_GENDER_HINT
            ),
            elevenlabs_api_key=os.environ.get("ELEVENLABS_API_KEY"),
            elevenlabs_voice_id=os.environ.get("ELEVENLABS_VOICE_ID", "21m00Tcm4TlvDq8ikWAM"),
            elevenlabs_model_id=os.environ.get("ELEVENLABS_MODEL_ID", "eleven_turbo_v2"),
        )
