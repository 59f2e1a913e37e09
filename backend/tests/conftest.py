"""Shared test fixtures for backend tests."""

import random
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

from app.api.deps import get_provider, get_store
from app.core.database import enable_foreign_keys
from app.services.llm.base import BaseLLMProvider
from app.services.persona import PersonaEngine
from app.services.store import ConversationStore

# In-memory SQLite with StaticPool so all connections (including threads) share one DB
test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
enable_foreign_keys(test_engine)


class ScriptedProvider(BaseLLMProvider):
    """Provider whose attempts play back a script of replies and exceptions."""

    name = "scripted"
    model = "scripted-model"

    def __init__(self, script=None, configured=True, **kwargs):
        kwargs.setdefault("retry_delay", 0)
        super().__init__(**kwargs)
        self.script = list(script or [])
        self.configured = configured
        self.prompts: list[str] = []

    async def generate(self, prompt):
        self.prompts.append(prompt)
        item = self.script.pop(0) if self.script else "I hear you."
        if isinstance(item, Exception):
            raise item
        return item

    def is_configured(self):
        return self.configured


@pytest.fixture(autouse=True)
def setup_test_db():
    """Create all tables before each test, drop after."""
    import app.models  # noqa: F401 - register models
    SQLModel.metadata.create_all(test_engine)
    yield
    SQLModel.metadata.drop_all(test_engine)


@pytest.fixture
def store():
    return ConversationStore(test_engine)


@pytest.fixture
def persona():
    return PersonaEngine(rng=random.Random(7))


@pytest.fixture
def provider():
    return ScriptedProvider()


@pytest.fixture
def client(store, provider):
    """FastAPI TestClient backed by the in-memory DB and the scripted provider."""
    with patch("app.main.init_db", lambda: None):
        from app.main import app

        app.dependency_overrides[get_store] = lambda: store
        app.dependency_overrides[get_provider] = lambda: provider

        with TestClient(app) as c:
            yield c

        app.dependency_overrides.clear()
