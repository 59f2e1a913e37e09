"""FastAPI dependencies wiring the store, provider and orchestrator."""

from fastapi import Depends

from app.core.database import engine
from app.services.llm import BaseLLMProvider, get_llm_provider
from app.services.orchestrator import ChatOrchestrator
from app.services.persona import persona
from app.services.store import ConversationStore


def get_store() -> ConversationStore:
    return ConversationStore(engine)


def get_provider() -> BaseLLMProvider:
    return get_llm_provider()


def get_orchestrator(
    store: ConversationStore = Depends(get_store),
    provider: BaseLLMProvider = Depends(get_provider),
) -> ChatOrchestrator:
    return ChatOrchestrator(store=store, persona=persona, provider=provider)
