"""AI provider client: retrying completion, health probing and status."""

from functools import lru_cache

from app.core.config import settings
from app.core.errors import ProviderError
from app.services.llm.base import BaseLLMProvider

__all__ = ["BaseLLMProvider", "ProviderError", "get_llm_provider"]


@lru_cache(maxsize=1)
def get_llm_provider() -> BaseLLMProvider:
    """Return the process-wide provider named by settings.llm_provider."""
    name = settings.llm_provider.lower()
    if name == "gemini":
        from app.services.llm.gemini import GeminiProvider
        return GeminiProvider()
    raise ValueError(f"Unknown LLM provider: {settings.llm_provider}")
