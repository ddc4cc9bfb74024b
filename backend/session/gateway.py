"""
Session gateway.

Responsibilities:
- Owns AssistSession lifecycle
- Tracks connection_status independently of recognition state
- Builds the per-session platform adapters, feedback engine and controller
- Routes inbound JSON messages to the controller or to the client relays

NOT responsible for:
- Socket I/O (server.routes pumps the outbound queue)
- Any state machine logic
- Command classification or announcement policy
"""

from __future__ import annotations

import json
from typing import Any, Callable, TYPE_CHECKING
from uuid import uuid4

from adapters.capabilities import PlatformBundle, build_platform
from feedback.announcer import SpeechAnnouncer
from feedback.facade import FeedbackFacade
from feedback.haptics import HapticSignaler
from observability.logger import log_event
from session.assist_session import AssistSession
from session.connection_status import ConnectionStatus
from session.controller import AssistController
from simulation.obstacles import ObstacleEvent, ObstacleEventSource, RandomObstacleSource

if TYPE_CHECKING:
    from adapters.relay import ClientSend
    from config import AppConfig


PlatformFactory = Callable[..., PlatformBundle]


def _new_session_id() -> str:
    return f"sess_{uuid4().hex[:12]}"


class MalformedMessage(ValueError):
    """An inbound message is missing a field or has the wrong type."""


def _require(data: dict[str, Any], key: str, kind: type | tuple[type, ...]) -> Any:
    value = data.get(key)
    # bool is an int subclass but never a valid field value here
    if isinstance(value, bool) or not isinstance(value, kind):
        raise MalformedMessage(f"invalid {key}: {value!r}")
    return value


class SessionGateway:
    """One gateway == one assist session."""

    def __init__(
        self,
        *,
        config: AppConfig,
        platform_factory: PlatformFactory = build_platform,
        obstacle_source: ObstacleEventSource | None = None,
    ) -> None:
        self._config = config
        self._platform_factory = platform_factory
        self._obstacle_source = obstacle_source
        self.session: AssistSession | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def on_ws_connect(self) -> AssistSession:
        """Create the session and queue its greeting. Must run on the loop."""
        session_id = _new_session_id()
        session = AssistSession(session_id=session_id)
        session.connection_status = ConnectionStatus.UP
        self.session = session

        send: ClientSend = session.enqueue_control
        bundle = self._platform_factory(self._config, send=send, session_id=session_id)
        session.platform = bundle

        session.facade = FeedbackFacade(
            announcer=SpeechAnnouncer(
                bundle.synthesizer,
                locale=self._config.speech_locale,
                gender_hint=self._config.voice_gender_hint,
                session_id=session_id,
            ),
            haptics=HapticSignaler(bundle.haptics, session_id=session_id),
            engine=bundle.engine,
            session_id=session_id,
        )
        session.controller = AssistController(
            session.facade,
            self._obstacle_source or RandomObstacleSource(),
            notify=send,
            session_id=session_id,
        )

        session.enqueue_control({
            "type": "SESSION_INIT",
            "session_id": session_id,
            "platform": bundle.platform,
            "capabilities": {
                "recognition": bundle.engine.available,
                "haptics": bundle.haptics.available,
                "client_speech": bundle.client_speech is not None,
            },
        })

        log_event({"event_type": "SESSION_STARTED", **session.log_context()})

        session.controller.attach()
        return session

    async def on_ws_disconnect(self, reason: str | None = None) -> None:
        session = self.session
        if session is None:
            log_event({
                "event_type": "WS_DISCONNECT_WITHOUT_SESSION",
                "reason": reason,
            })
            return

        session.connection_status = ConnectionStatus.CLOSING

        if session.controller is not None:
            await session.controller.detach()
        if session.facade is not None:
            await session.facade.shutdown()

        synthesizer = session.platform.synthesizer if session.platform else None
        close = getattr(synthesizer, "close", None)
        if callable(close):
            close()

        session.connection_status = ConnectionStatus.DOWN
        log_event({
            "event_type": "SESSION_ENDED",
            "reason": reason,
            **session.log_context(),
        })

    # ------------------------------------------------------------------
    # Inbound
    # ------------------------------------------------------------------

    async def on_json_message(self, payload: str) -> None:
        """Route one inbound JSON message. Malformed input is logged and dropped."""
        session = self.session
        if session is None:
            log_event({
                "event_type": "MESSAGE_WITHOUT_SESSION",
                "payload_preview": payload[:100],
            })
            return

        try:
            data = json.loads(payload)
        except json.JSONDecodeError as e:
            log_event({
                "event_type": "JSON_DECODE_ERROR",
                "session_id": session.session_id,
                "error": str(e),
                "payload_preview": payload[:100],
            })
            return

        if not isinstance(data, dict):
            log_event({
                "event_type": "MALFORMED_MESSAGE",
                "session_id": session.session_id,
                "error": "payload must be a JSON object",
            })
            return

        msg_type = data.get("type")
        try:
            handled = await self._route(session, msg_type, data)
        except MalformedMessage as e:
            log_event({
                "event_type": "MALFORMED_MESSAGE",
                "session_id": session.session_id,
                "msg_type": msg_type,
                "error": str(e),
            })
            return

        if not handled:
            log_event({
                "event_type": "UNKNOWN_MESSAGE_TYPE",
                "session_id": session.session_id,
                "msg_type": msg_type,
            })

    async def _route(
        self,
        session: AssistSession,
        msg_type: Any,
        data: dict[str, Any],
    ) -> bool:
        controller = session.controller
        bundle = session.platform
        assert controller is not None and bundle is not None

        # ---- UI actions ----
        if msg_type == "MODE_SELECTED":
            await controller.select_mode(_require(data, "mode", str))
        elif msg_type == "BUTTON_PRESSED":
            controller.press_button()
        elif msg_type == "OBSTACLE":
            controller.report_obstacle(ObstacleEvent(
                distance_m=str(_require(data, "distance_m", (str, int, float))),
                direction=_require(data, "direction", str),
            ))

        # ---- Browser recognition ----
        elif msg_type in (
            "RECOGNITION_STARTED",
            "RECOGNITION_RESULT",
            "RECOGNITION_ERROR",
            "RECOGNITION_ENDED",
        ):
            relay = bundle.client_recognition
            if relay is None:
                raise MalformedMessage("platform does not relay recognition")
            if msg_type == "RECOGNITION_STARTED":
                relay.client_started()
            elif msg_type == "RECOGNITION_RESULT":
                is_final = data.get("is_final", True)
                if not isinstance(is_final, bool):
                    raise MalformedMessage("is_final must be bool")
                relay.client_result(_require(data, "transcript", str), is_final)
            elif msg_type == "RECOGNITION_ERROR":
                relay.client_error(_require(data, "error", str))
            else:
                relay.client_ended()

        # ---- Browser speech ----
        elif msg_type in ("VOICES", "SPEECH_ENDED", "SPEECH_ERROR"):
            speech = bundle.client_speech
            if speech is None:
                raise MalformedMessage("platform does not relay speech")
            if msg_type == "VOICES":
                voices = _require(data, "voices", list)
                speech.client_voices(v for v in voices if isinstance(v, dict))
            elif msg_type == "SPEECH_ENDED":
                speech.client_ended(_require(data, "id", int))
            else:
                speech.client_error(
                    _require(data, "id", int),
                    str(data.get("error", "unknown")),
                )

        else:
            return False
        return True
