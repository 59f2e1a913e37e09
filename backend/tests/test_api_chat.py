"""Tests for the chat endpoints."""

from unittest.mock import MagicMock

from app.api.deps import get_store
from app.core.errors import StoreError
from app.main import app
from app.services.persona import GENERIC_FALLBACKS


def test_chat_creates_conversation(client, store):
    response = client.post("/api/chat/", json={"message": "hello", "user_id": "u1"})
    assert response.status_code == 200
    data = response.json()
    assert data["mode"] == "provider"
    assert data["response"] == "I hear you."
    assert data["source"] == "provider_api"
    assert data["conversation_id"]
    assert data["message_id"]
    assert "timestamp" in data
    assert "error" not in data

    assert len(store.get_messages(data["conversation_id"])) == 2


def test_chat_continues_conversation(client):
    first = client.post("/api/chat/", json={"message": "first"}).json()
    second = client.post(
        "/api/chat/", json={"message": "second", "conversation_id": first["conversation_id"]}
    ).json()
    assert second["conversation_id"] == first["conversation_id"]

    messages = client.get(f"/api/chat/conversations/{first['conversation_id']}").json()["messages"]
    assert [m["content"] for m in messages][::2] == ["first", "second"]


def test_chat_fallback_when_provider_down(client, provider):
    provider.script = [RuntimeError("down")] * 3
    response = client.post("/api/chat/", json={"message": "hi there"})
    assert response.status_code == 200
    data = response.json()
    assert data["mode"] == "fallback"
    assert data["model"] == "local_knowledge"
    assert data["response"] in GENERIC_FALLBACKS


def test_chat_emergency_returns_500_payload(client):
    broken = MagicMock()
    broken.create_conversation.side_effect = StoreError("database is locked")
    app.dependency_overrides[get_store] = lambda: broken

    response = client.post("/api/chat/", json={"message": "hello"})
    assert response.status_code == 500
    data = response.json()
    assert data["mode"] == "emergency"
    assert data["confidence"] == 0.7
    assert data["error"] == "Temporary service disruption"
    assert data["response"]


def test_chat_rejects_empty_message(client):
    response = client.post("/api/chat/", json={"message": "   "})
    assert response.status_code == 400
    data = response.json()
    assert data["error"] == "Invalid input"
    assert data["details"][0]["loc"][-1] == "message"


def test_chat_rejects_long_message(client):
    response = client.post("/api/chat/", json={"message": "x" * 2001})
    assert response.status_code == 400


def test_chat_requires_message(client):
    response = client.post("/api/chat/", json={"conversation_id": "abc"})
    assert response.status_code == 400


def test_list_messages(client):
    chat = client.post("/api/chat/", json={"message": "hello"}).json()
    response = client.get(f"/api/chat/conversations/{chat['conversation_id']}")
    assert response.status_code == 200
    data = response.json()
    assert data["conversation_id"] == chat["conversation_id"]
    assert [m["role"] for m in data["messages"]] == ["user", "assistant"]
    assert data["messages"][1]["metadata"]["source"] == "provider_api"
    assert data["messages"][1]["rating"] is None


def test_list_messages_unknown_conversation_is_empty(client):
    response = client.get("/api/chat/conversations/nope")
    assert response.status_code == 200
    assert response.json()["messages"] == []


def test_feedback_sets_rating(client):
    chat = client.post("/api/chat/", json={"message": "hello"}).json()
    response = client.post(
        "/api/chat/feedback",
        json={"message_id": chat["message_id"], "rating": 3, "feedback_text": "ok"},
    )
    assert response.status_code == 200
    assert response.json()["success"] is True

    messages = client.get(f"/api/chat/conversations/{chat['conversation_id']}").json()["messages"]
    assert messages[1]["rating"] == 3


def test_feedback_rating_out_of_range(client):
    chat = client.post("/api/chat/", json={"message": "hello"}).json()
    response = client.post("/api/chat/feedback", json={"message_id": chat["message_id"], "rating": 6})
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid input"


def test_feedback_unknown_message(client):
    response = client.post("/api/chat/feedback", json={"message_id": "missing", "rating": 4})
    assert response.status_code == 404


def test_list_messages_store_failure_returns_json_error(client):
    broken = MagicMock()
    broken.get_messages.side_effect = StoreError("disk I/O error")
    app.dependency_overrides[get_store] = lambda: broken

    response = client.get("/api/chat/conversations/abc")
    assert response.status_code == 500
    assert response.headers["content-type"].startswith("application/json")
    assert response.json() == {"error": "Failed to retrieve conversation"}


def test_feedback_store_failure_returns_json_error(client):
    broken = MagicMock()
    broken.record_feedback.side_effect = StoreError("disk I/O error")
    app.dependency_overrides[get_store] = lambda: broken

    response = client.post("/api/chat/feedback", json={"message_id": "m1", "rating": 4})
    assert response.status_code == 500
    assert response.headers["content-type"].startswith("application/json")
    assert response.json() == {"error": "Failed to record feedback"}


def test_message_timestamps_carry_utc_offset(client):
    chat = client.post("/api/chat/", json={"message": "hello"}).json()
    messages = client.get(f"/api/chat/conversations/{chat['conversation_id']}").json()["messages"]
    for m in messages:
        assert m["timestamp"].endswith("+00:00")
