"""
BEHAVIOR-AS-CONSTANTS
---------------------
Single source of truth for the timing, vocabulary and message constants of the
feedback engine.

Rules:
- If changing a value changes runtime behavior, it belongs here.
- No magic numbers elsewhere in the codebase.
- Other modules MUST import from this file.
"""

from __future__ import annotations

from typing import Final, Tuple

# =============================================================================
# Recognition session timing
# =============================================================================

# Delay before re-issuing start after the platform ended the session on its own
RECOGNITION_RESTART_DELAY_MS: Final[int] = 1_000

# Backoff before retrying start after a generic (non-classified) engine error
RECOGNITION_ERROR_BACKOFF_MS: Final[int] = 3_000

# Consecutive auto-restarts allowed without the engine confirming activation
RECOGNITION_MAX_AUTO_RESTARTS: Final[int] = 3

# =============================================================================
# Recognition error codes (platform vocabulary)
# =============================================================================

ERROR_NO_SPEECH: Final[str] = "no-speech"
ERROR_ABORTED: Final[str] = "aborted"
ERROR_NETWORK: Final[str] = "network"
ERROR_AUDIO_CAPTURE: Final[str] = "audio-capture"
ERROR_NOT_ALLOWED: Final[str] = "not-allowed"

# =============================================================================
# Speech synthesis defaults
# =============================================================================

SPEECH_DEFAULT_RATE: Final[float] = 1.0
SPEECH_DEFAULT_PITCH: Final[float] = 1.2
SPEECH_DEFAULT_INTERRUPT: Final[bool] = True
SPEECH_DEFAULT_VOLUME: Final[float] = 1.0

SPEECH_DEFAULT_LOCALE: Final[str] = "en-US"
SPEECH_DEFAULT_GENDER_HINT: Final[str] = "female"

# pyttsx3 expresses rate in words per minute; 1.0 maps to this
PYTTSX3_BASE_RATE_WPM: Final[int] = 180

# =============================================================================
# Command vocabulary (ordered: earlier groups win)
# =============================================================================

KEYWORDS_START: Final[Tuple[str, ...]] = ("start", "begin")
KEYWORDS_STOP: Final[Tuple[str, ...]] = ("stop", "end", "pause")
KEYWORDS_DETECT: Final[Tuple[str, ...]] = ("detect", "scan")
KEYWORDS_HELP: Final[Tuple[str, ...]] = ("help", "assist")
KEYWORDS_DIRECTION: Final[Tuple[str, ...]] = ("where", "direction", "location")

# =============================================================================
# Modes
# =============================================================================

MODE_UNSELECTED: Final[str] = ""
MODE_LOW_VISION: Final[str] = "Low Vision"
MODE_TOTAL_BLINDNESS: Final[str] = "Total Blindness"

# =============================================================================
# Spoken messages
# =============================================================================

MSG_RECOGNITION_ACTIVE: Final[str] = "Voice recognition is active"
MSG_RECOGNITION_DEACTIVATED: Final[str] = "Voice recognition deactivated"
MSG_RECOGNITION_UNAVAILABLE: Final[str] = (
    "Voice recognition stopped. Select the mode again to retry."
)
MSG_NETWORK_ERROR: Final[str] = "Network error. Please check your internet connection."

MSG_ACK_START: Final[str] = "Starting obstacle detection"
MSG_ACK_STOP: Final[str] = "Stopping obstacle detection"
MSG_ACK_DETECT: Final[str] = "Scanning for obstacles"
MSG_ACK_HELP: Final[str] = "Available commands are: start, stop, detect, scan, and help."
MSG_ACK_DIRECTION: Final[str] = "Detecting direction"

MSG_SYSTEM_START: Final[str] = "Welcome to EYES. System initializing. Please wait."
MSG_SYSTEM_READY: Final[str] = (
    "System ready. Tap the button below to select a visibility mode."
)
MSG_MODE_SELECTION: Final[str] = (
    "Please select your visibility mode. Choose Low Vision mode if you have "
    "partial vision, or Total Blindness mode if you have no vision."
)
MSG_DETECTION_START: Final[str] = (
    "Detection started. The system will now alert you of any obstacles in your path."
)
MSG_DETECTION_STOP: Final[str] = (
    "Detection stopped. Tap the button again to resume detection."
)
MSG_OBSTACLE_TEMPLATE: Final[str] = "Obstacle detected {distance} meters {direction}"

MODE_MESSAGES: Final[dict[str, str]] = {
    MODE_LOW_VISION: (
        "Low Vision mode activated. This mode provides visual aids and high "
        "contrast elements for users with partial vision. Tap the large button "
        "to start detection."
    ),
    MODE_TOTAL_BLINDNESS: (
        "Total Blindness mode activated. Full audio guidance and voice commands "
        "are enabled. Say \"start\" to begin detection, or tap anywhere on the "
        "screen. Say \"help\" for a list of available commands."
    ),
}

# Controller-level (screen) messages
MSG_SCANNING_ENVIRONMENT: Final[str] = "Scanning the environment for obstacles."
MSG_HELP_FULL: Final[str] = (
    "Available commands: Say \"start\" to begin detection, \"stop\" to end "
    "detection, \"detect\" to scan the environment, or \"help\" to hear these "
    "commands again."
)

# =============================================================================
# Obstacle simulation
# =============================================================================

OBSTACLE_DIRECTIONS: Final[Tuple[str, ...]] = (
    "ahead", "to your left", "to your right", "behind you",
)
OBSTACLE_MIN_DISTANCE_M: Final[int] = 1
OBSTACLE_MAX_DISTANCE_M: Final[int] = 5
