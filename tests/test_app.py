import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.testclient import TestClient

from gamers_challenge.core.config import Settings
from gamers_challenge.core.database import Database
from gamers_challenge.main import create_app


def test_store_requests_fail_when_database_never_connected(settings):
    app = create_app(settings, Database("mongodb://localhost:1", "gamers_challenge"))
    client = TestClient(app)

    response = client.get("/quiz/questions")
    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}

    response = client.post("/register", json={"username": "a", "password": "p", "email": "a@x.com"})
    assert response.status_code == 500


def test_auth_gate_runs_before_store_access(settings):
    app = create_app(settings, Database("mongodb://localhost:1", "gamers_challenge"))
    client = TestClient(app)

    response = client.get("/user/profile")
    assert response.status_code == 401
    assert response.json() == {"error": "Access denied"}


def test_health_reports_database_state(client, settings):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["checks"] == {"database": "connected"}

    offline = TestClient(create_app(settings, Database("mongodb://localhost:1", "db")))
    body = offline.get("/health").json()
    assert body["status"] == "degraded"
    assert body["checks"] == {"database": "disconnected"}


def test_unknown_route_uses_error_body(client):
    response = client.get("/does-not-exist")
    assert response.status_code == 404
    assert response.json() == {"error": "Not Found"}


def test_malformed_json_is_a_bad_request(client):
    response = client.post(
        "/login", content=b"{not json", headers={"Content-Type": "application/json"}
    )
    assert response.status_code == 400
    assert "error" in response.json()


def test_request_id_is_echoed(client):
    response = client.get("/health", headers={"X-Request-ID": "abc-123"})
    assert response.headers["X-Request-ID"] == "abc-123"
    assert client.get("/health").headers["X-Request-ID"]


def test_oversized_body_is_rejected(settings, database):
    settings.MAX_UPLOAD_SIZE = 1024
    client = TestClient(create_app(settings, database))

    response = client.post(
        "/quiz/questions/add-multiple",
        json={"questions": [{"text": "x" * (128 * 1024)}]},
    )
    assert response.status_code == 413
    assert response.json() == {"error": "Request entity too large"}


def test_oversized_upload_is_rejected(settings, database):
    settings.MAX_UPLOAD_SIZE = 1024
    with TestClient(create_app(settings, database)) as client:
        client.post("/register", json={"username": "a", "password": "p", "email": "a@x.com"})
        token = client.post("/login", json={"email": "a@x.com", "password": "p"}).json()["token"]

        response = client.post(
            "/user/profile/picture",
            headers={"Authorization": f"Bearer {token}"},
            files={"profilePicture": ("big.png", b"\x00" * 4096, "image/png")},
        )

    assert response.status_code == 413
    assert response.json() == {"error": "File too large"}


def test_chunked_upload_without_length_is_still_capped(settings, database):
    settings.MAX_UPLOAD_SIZE = 1024
    boundary = "gamers-boundary"
    body = (
        f"--{boundary}\r\n"
        'Content-Disposition: form-data; name="profilePicture"; filename="big.png"\r\n'
        "Content-Type: image/png\r\n\r\n"
    ).encode() + b"\x00" * 4096 + f"\r\n--{boundary}--\r\n".encode()

    def chunks():
        for start in range(0, len(body), 512):
            yield body[start:start + 512]

    with TestClient(create_app(settings, database)) as client:
        client.post("/register", json={"username": "a", "password": "p", "email": "a@x.com"})
        token = client.post("/login", json={"email": "a@x.com", "password": "p"}).json()["token"]

        response = client.post(
            "/user/profile/picture",
            headers={
                "Authorization": f"Bearer {token}",
                "Content-Type": f"multipart/form-data; boundary={boundary}",
            },
            content=chunks(),
        )

    assert response.status_code == 413
    assert response.json() == {"error": "File too large"}
    assert list(Path(settings.UPLOAD_DIR).iterdir()) == []


def test_module_exposes_default_app():
    from gamers_challenge import main

    assert isinstance(main.app, FastAPI)
    assert main.app.state.settings is main.default_settings


def test_unexpected_store_error_is_hidden_from_client(settings, database, fake_db, caplog):
    async def failing_insert_many(documents):
        raise RuntimeError("secret detail")

    fake_db["quiz"].insert_many = failing_insert_many
    client = TestClient(create_app(settings, database), raise_server_exceptions=False)

    response = client.post(
        "/quiz/questions/add-multiple", json={"questions": [{"correctAnswer": "a"}]}
    )

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}
    assert "secret detail" not in response.text
    assert "secret detail" in caplog.text


def test_missing_secret_key_is_warned_at_startup(monkeypatch, tmp_path, database, caplog):
    monkeypatch.delenv("SECRET_KEY", raising=False)
    settings = Settings(_env_file=None, BCRYPT_ROUNDS=4, UPLOAD_DIR=str(tmp_path / "uploads"))

    with caplog.at_level(logging.WARNING, logger="gamers_challenge.main"):
        with TestClient(create_app(settings, database)):
            pass

    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert any("SECRET_KEY" in r.getMessage() for r in warnings)


def test_configured_secret_key_is_not_warned(settings, database, caplog):
    with caplog.at_level(logging.WARNING, logger="gamers_challenge.main"):
        with TestClient(create_app(settings, database)):
            pass

    assert not any("SECRET_KEY" in r.getMessage() for r in caplog.records)
