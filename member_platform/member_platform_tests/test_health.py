from fastapi.testclient import TestClient
import pytest

from member_platform.member_platform.member_service.main import app
from member_platform.member_platform.member_service.config import settings
from member_platform.member_platform.member_service.errors import MissingSigningKeyError


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "healthy"
    assert "timestamp" in r.json()


def test_ready_when_connected(client):
    r = client.get("/ready")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "ready"
    assert body["database"] == "connected"
    assert body["attempts"] == 0


def test_ready_reports_not_ready(client):
    app.state.store.monitor.mark_disconnected()

    r = client.get("/ready")
    assert r.status_code == 503
    body = r.json()
    assert body["status"] == "not_ready"
    assert body["database"] == "disconnected"
    assert body["message"]


def test_unknown_route_has_message(client):
    r = client.get("/does-not-exist")
    assert r.status_code == 404
    assert "message" in r.json()


def test_startup_fails_without_signing_key(monkeypatch):
    monkeypatch.setattr(settings, "JWT_SECRET", None)

    with pytest.raises(MissingSigningKeyError):
        with TestClient(app):
            pass
