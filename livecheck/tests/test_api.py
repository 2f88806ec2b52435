import json
import time

from fastapi.testclient import TestClient

from livecheck.api.main import app
from livecheck.internal_core.config import AppConfig
from livecheck.verify.mock import MockVerifier

_STATE_KEYS = ("livecheck_config", "verifier", "recognizer_bridge", "session_controller")


def _install(verifier: MockVerifier | None = None, **overrides: object) -> None:
    cfg = AppConfig(
        LIVECHECK_LANGUAGE="en-US",
        LIVECHECK_CONFIDENCE_THRESHOLD=0.5,
        LIVECHECK_VERIFY_ENABLED=True,
        LIVECHECK_CLOSE_DELAY_MS=20,
        LIVECHECK_CAPTURE_CLOSE_DELAY_MS=20,
        LIVECHECK_FALLBACK_DELAY_MS=20,
        LIVECHECK_RECOGNIZER="bridge",
        LIVECHECK_VERIFIER="mock",
        GEMINI_API_KEY=None,
        LIVECHECK_GEMINI_MODEL="gemini-2.5-flash",
        LIVECHECK_GEMINI_BASE_URL="https://generativelanguage.googleapis.com/v1beta",
        LIVECHECK_VERIFY_TIMEOUT_SEC=5.0,
        LIVECHECK_LOG_LEVEL="INFO",
    )
    _clear_app_state()
    app.state.livecheck_config = cfg.with_overrides(**overrides)
    app.state.verifier = verifier or MockVerifier()


def _clear_app_state() -> None:
    for key in _STATE_KEYS:
        if hasattr(app.state, key):
            delattr(app.state, key)


def _wait_for_state(client: TestClient, predicate, attempts: int = 100) -> dict:
    payload = client.get("/state").json()
    for _ in range(attempts):
        if predicate(payload):
            return payload
        time.sleep(0.02)
        payload = client.get("/state").json()
    return payload


def test_healthz() -> None:
    client = TestClient(app)
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_languages_lists_supported_codes() -> None:
    _install()
    try:
        client = TestClient(app)
        payload = client.get("/languages").json()
        codes = [item["code"] for item in payload["languages"]]
        assert payload["current"] == "en-US"
        assert len(codes) == 11
        assert {"en-US", "ja-JP", "hi-IN"} <= set(codes)
    finally:
        _clear_app_state()


def test_set_language_rejects_unknown_code() -> None:
    _install()
    try:
        client = TestClient(app)
        response = client.post("/language", json={"code": "xx-XX"})
        assert response.status_code == 400
        assert "Unsupported language" in response.json()["detail"]
    finally:
        _clear_app_state()


def test_set_language_without_recognizer_updates_snapshot() -> None:
    _install()
    try:
        client = TestClient(app)
        response = client.post("/language", json={"code": "ja-JP"})
        assert response.status_code == 200
        payload = response.json()
        assert payload["language"] == "ja-JP"
        assert payload["status"] == "initializing"
        assert client.get("/languages").json()["current"] == "ja-JP"
    finally:
        _clear_app_state()


def test_recognizer_ws_drives_verification_session() -> None:
    verifier = MockVerifier({"Water boils": "True: At sea level it boils at 100 degrees Celsius."})
    _install(verifier)
    try:
        with TestClient(app) as client:
            with client.websocket_connect("/ws/recognizer") as ws:
                start = ws.receive_json()
                assert start["type"] == "start"
                assert start["lang"] == "en-US"
                assert start["continuous"] is True
                assert start["interimResults"] is True
                pass_id = start["pass"]

                ws.send_text(json.dumps({"type": "start", "pass": pass_id}))
                ws.send_text(
                    json.dumps(
                        {
                            "type": "result",
                            "pass": pass_id,
                            "results": [
                                {
                                    "isFinal": True,
                                    "alternatives": [
                                        {"transcript": "Water boils at 100 degrees", "confidence": 0.92}
                                    ],
                                }
                            ],
                        }
                    )
                )
                stop = ws.receive_json()
                assert stop["type"] == "stop"

                ws.send_text(json.dumps({"type": "end", "pass": pass_id}))
                restart = ws.receive_json()
                assert restart["type"] == "start"
                assert restart["pass"] == pass_id + 1

                payload = _wait_for_state(
                    client,
                    lambda p: p["sessions"] and p["sessions"][0]["state"] == "completed",
                )

        session = payload["sessions"][0]
        assert session["source_text"] == "Water boils at 100 degrees"
        assert session["verdict"] == "True"
        assert session["explanation"] == "At sea level it boils at 100 degrees Celsius."
        assert session["language"] == "en-US"
    finally:
        _clear_app_state()


def test_recognizer_ws_reports_fatal_error() -> None:
    _install()
    try:
        with TestClient(app) as client:
            with client.websocket_connect("/ws/recognizer") as ws:
                start = ws.receive_json()
                ws.send_text(json.dumps({"type": "start", "pass": start["pass"]}))
                ws.send_text(json.dumps({"type": "error", "error": "audio-capture", "pass": start["pass"]}))
                ws.send_text(json.dumps({"type": "end", "pass": start["pass"]}))

                payload = _wait_for_state(client, lambda p: p["status"] == "error")

        assert payload["status"] == "error"
        assert payload["error"] == "Microphone not available. Check your microphone settings."
    finally:
        _clear_app_state()


def test_recognizer_ws_controller_failure_leaves_bridge_free() -> None:
    _install(LIVECHECK_LANGUAGE="xx-XX")
    try:
        with TestClient(app) as client:
            for _ in range(2):
                with client.websocket_connect("/ws/recognizer") as ws:
                    assert ws.receive_json() == {"type": "error", "detail": "controller_unavailable"}
        bridge = getattr(app.state, "recognizer_bridge", None)
        assert bridge is None or not bridge.connected
    finally:
        _clear_app_state()


def test_recognizer_ws_rejects_second_client() -> None:
    _install()
    try:
        with TestClient(app) as client:
            with client.websocket_connect("/ws/recognizer") as first:
                assert first.receive_json()["type"] == "start"
                with client.websocket_connect("/ws/recognizer") as second:
                    rejected = second.receive_json()
                    assert rejected == {"type": "error", "detail": "recognizer_already_connected"}
    finally:
        _clear_app_state()


def test_recognizer_ws_answers_invalid_json() -> None:
    _install()
    try:
        with TestClient(app) as client:
            with client.websocket_connect("/ws/recognizer") as ws:
                assert ws.receive_json()["type"] == "start"
                ws.send_text("{not json")
                assert ws.receive_json() == {"type": "error", "detail": "invalid_json"}
                ws.send_text(json.dumps(["start"]))
                assert ws.receive_json() == {"type": "error", "detail": "invalid_payload"}
    finally:
        _clear_app_state()


def test_transcript_export_returns_live_text() -> None:
    _install()
    try:
        with TestClient(app) as client:
            with client.websocket_connect("/ws/recognizer") as ws:
                start = ws.receive_json()
                ws.send_text(json.dumps({"type": "start", "pass": start["pass"]}))
                ws.send_text(
                    json.dumps(
                        {
                            "type": "result",
                            "pass": start["pass"],
                            "results": [{"isFinal": False, "alternatives": [{"transcript": "hello wor"}]}],
                        }
                    )
                )
                _wait_for_state(client, lambda p: p["live_transcript"] == "hello wor")
                exported = client.get("/transcript").json()

        assert exported == {"language": "en-US", "text": "hello wor"}
    finally:
        _clear_app_state()


def test_clear_sessions_reports_removed_count() -> None:
    _install()
    try:
        client = TestClient(app)
        response = client.delete("/sessions")
        assert response.status_code == 200
        assert response.json() == {"removed": 0}
    finally:
        _clear_app_state()


def test_state_ws_sends_initial_snapshot_and_updates() -> None:
    _install()
    try:
        with TestClient(app) as client:
            with client.websocket_connect("/ws/state") as ws:
                initial = ws.receive_json()
                assert initial["status"] == "initializing"
                assert initial["language"] == "en-US"
                assert initial["sessions"] == []

                client.post("/language", json={"code": "de-DE"})
                update = ws.receive_json()
                assert update["language"] == "de-DE"
                assert update["status_label"] == "Mikrofon wird initialisiert..."
    finally:
        _clear_app_state()
