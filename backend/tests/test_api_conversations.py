"""Tests for conversation record endpoints."""

from unittest.mock import MagicMock

from app.api.deps import get_store
from app.core.errors import StoreError
from app.main import app


def _seed_conversation(store, messages=None):
    """Insert a conversation + messages through the store."""
    conv = store.create_conversation("member-42")
    for role, content in messages or []:
        store.append_message(conv.id, role, content)
    return conv.id


def test_get_conversation(client, store):
    cid = _seed_conversation(store, [("user", "hello"), ("assistant", "hi there")])
    response = client.get(f"/api/conversations/{cid}")
    assert response.status_code == 200
    data = response.json()
    assert data["id"] == cid
    assert data["owner_ref"] == "member-42"
    assert data["is_active"] is True
    assert data["message_count"] == 2
    assert data["started_at"].endswith("+00:00")
    assert data["last_message_at"].endswith("+00:00")


def test_get_conversation_not_found(client):
    response = client.get("/api/conversations/9999")
    assert response.status_code == 404


def test_deactivate_conversation(client, store):
    cid = _seed_conversation(store, [("user", "bye")])
    response = client.post(f"/api/conversations/{cid}/deactivate")
    assert response.status_code == 200
    assert response.json()["is_active"] is False

    # Soft-deactivated: still readable, messages kept
    response = client.get(f"/api/conversations/{cid}")
    assert response.status_code == 200
    assert response.json()["message_count"] == 1


def test_deactivate_conversation_not_found(client):
    response = client.post("/api/conversations/9999/deactivate")
    assert response.status_code == 404


def test_store_failure_returns_json_error(client):
    broken = MagicMock()
    broken.get_conversation.side_effect = StoreError("database is locked")
    app.dependency_overrides[get_store] = lambda: broken

    response = client.get("/api/conversations/abc")
    assert response.status_code == 500
    assert response.json() == {"error": "Database operation failed"}
