# pylint: disable=missing-module-docstring,missing-function-docstring
import dataclasses
from typing import Any

from fastapi.testclient import TestClient

from config import AppConfig
from server.app import create_app
from simulation.obstacles import ObstacleEvent, ScriptedObstacleSource


def make_config(**overrides: Any) -> AppConfig:
    base = AppConfig(
        env="test",
        platform="web",
        recognition_phrase_time_limit_s=None,
        enable_json_logs=True,
        tts_provider="pyttsx3",
        speech_locale="en-US",
        voice_gender_hint="female",
        elevenlabs_api_key=None,
        elevenlabs_voice_id=None,
        elevenlabs_model_id=None,
    )
    return dataclasses.replace(base, **overrides)


def receive_until(ws: Any, msg_type: str, limit: int = 20) -> dict[str, Any]:
    for _ in range(limit):
        msg = ws.receive_json()
        if msg["type"] == msg_type:
            return msg
    raise AssertionError(f"no {msg_type} within {limit} messages")


def test_health_reports_platform() -> None:
    client = TestClient(create_app(make_config(platform="unavailable")))
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "platform": "unavailable"}


def test_websocket_session_round_trip() -> None:
    app = create_app(make_config())
    app.state.obstacle_source = ScriptedObstacleSource([ObstacleEvent("1", "ahead")])
    client = TestClient(app)

    with client.websocket_connect("/ws") as ws:
        init = ws.receive_json()
        assert init["type"] == "SESSION_INIT"
        assert init["platform"] == "web"

        ws.send_json({"type": "BUTTON_PRESSED"})
        assert receive_until(ws, "MODE_SELECTION_REQUESTED") == {
            "type": "MODE_SELECTION_REQUESTED",
        }

        ws.send_json({"type": "MODE_SELECTED", "mode": "Low Vision"})
        toast = receive_until(ws, "TOAST")
        assert toast["message"] == "Low Vision Mode Enabled"
        state = receive_until(ws, "STATE")
        assert state["mode"] == "Low Vision"
        assert state["is_detecting"] is True


def test_malformed_frame_keeps_connection_open() -> None:
    client = TestClient(create_app(make_config()))

    with client.websocket_connect("/ws") as ws:
        assert ws.receive_json()["type"] == "SESSION_INIT"
        ws.send_text("{broken")
        ws.send_json({"type": "BUTTON_PRESSED"})
        receive_until(ws, "MODE_SELECTION_REQUESTED")
