"""Tests for the health endpoints."""

from unittest.mock import MagicMock

from app.api.deps import get_store
from app.main import app


def test_health_returns_ok(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert "app" in data
    assert data["services"]["ai"] == "operational"
    assert data["services"]["provider"]["model"] == "scripted-model"


def test_health_reports_fallback_mode_when_unconfigured(client, provider):
    provider.configured = False
    data = client.get("/api/health").json()
    assert data["services"]["ai"] == "fallback_mode"
    assert data["services"]["provider"]["configured"] is False


def test_health_db(client):
    response = client.get("/api/health/db")
    assert response.status_code == 200
    assert response.json()["database"] == "connected"


def test_health_db_unhealthy(client):
    broken = MagicMock()
    broken.health_check.return_value = False
    app.dependency_overrides[get_store] = lambda: broken

    response = client.get("/api/health/db")
    assert response.status_code == 503
    assert response.json()["status"] == "unhealthy"


def test_health_deep_ok(client, provider):
    provider.script = ["OK"]
    data = client.get("/api/health/deep").json()
    assert data["status"] == "healthy"
    assert data["services"]["provider_api"] == "operational"


def test_health_deep_degraded(client, provider):
    provider.script = [RuntimeError("down")] * 3
    data = client.get("/api/health/deep").json()
    assert data["status"] == "degraded"
    assert data["services"]["ai"] == "fallback_mode"
