import pathlib
import sys

import pytest
from fastapi.testclient import TestClient

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))
from motor_relay.app_factory import create_app
from motor_relay.settings import Settings


def test_plain_http_is_rejected():
    with TestClient(create_app(Settings())) as client:
        resp = client.get("/")
        assert resp.status_code == 500
        assert resp.text == "Upgrade failed"
        assert client.get("/some/path").status_code == 500


def test_relay_scenario():
    with TestClient(create_app(Settings())) as client:
        with client.websocket_connect("/") as ws_a:
            hello_a = ws_a.receive_json()
            assert hello_a["type"] == "state"
            assert hello_a["speed"] == 0
            assert hello_a["forward"] is True
            a_id = hello_a["userId"]
            assert ws_a.receive_json() == {"type": "users", "count": 1}

            with client.websocket_connect("/") as ws_b:
                hello_b = ws_b.receive_json()
                b_id = hello_b["userId"]
                assert b_id != a_id
                assert ws_b.receive_json() == {"type": "users", "count": 2}
                assert ws_a.receive_json() == {"type": "users", "count": 2}

                ws_a.send_json({"type": "cursor", "x": 10, "y": 20})
                ws_a.send_json({"type": "command", "speed": "42", "forward": False})

                state = {"type": "state", "speed": 42, "forward": False}
                # A never gets its own cursor back, so the state update comes first.
                assert ws_a.receive_json() == state
                assert ws_b.receive_json() == {"type": "cursor", "id": a_id, "x": 10, "y": 20}
                assert ws_b.receive_json() == state

            assert ws_a.receive_json() == {"type": "user_disconnected", "id": b_id}
            assert ws_a.receive_json() == {"type": "users", "count": 1}


def test_malformed_json_keeps_connection_open():
    with TestClient(create_app(Settings())) as client:
        with client.websocket_connect("/") as ws:
            ws.receive_json()
            ws.receive_json()
            ws.send_text("this is not json")
            ws.send_bytes(b'{"speed": "7"}')
            assert ws.receive_json() == {"type": "state", "speed": 7, "forward": True}


@pytest.mark.skipif(not hasattr(sys, "get_int_max_str_digits"), reason="no integer digit limit")
def test_oversized_payloads_keep_connection_open():
    with TestClient(create_app(Settings())) as client:
        with client.websocket_connect("/") as ws:
            ws.receive_json()
            ws.receive_json()
            ws.send_text("[" * 100000 + "]" * 100000)
            ws.send_text('{"type": "cursor", "x": ' + "1" * 5000 + "}")
            ws.send_json({"speed": "9" * 5000})
            assert ws.receive_json() == {"type": "state", "speed": 0, "forward": True}
            ws.send_json({"speed": 3})
            assert ws.receive_json() == {"type": "state", "speed": 3, "forward": True}


def test_upgrade_on_any_path():
    with TestClient(create_app(Settings())) as client:
        with client.websocket_connect("/motor") as ws:
            assert ws.receive_json()["type"] == "state"


def test_tls_settings():
    plain = Settings(APP_HOST="127.0.0.1", APP_PORT=9000, SSL_CERTFILE="", SSL_KEYFILE="")
    assert plain.tls_enabled is False
    assert plain.uvicorn_kwargs() == {"host": "127.0.0.1", "port": 9000}

    secure = Settings(SSL_CERTFILE="cert.pem", SSL_KEYFILE="key.pem")
    assert secure.tls_enabled is True
    kwargs = secure.uvicorn_kwargs()
    assert kwargs["ssl_certfile"] == "cert.pem"
    assert kwargs["ssl_keyfile"] == "key.pem"
