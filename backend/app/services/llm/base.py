"""Abstract LLM provider interface. Providers implement a single attempt; retries live here."""

import asyncio
import logging
from abc import ABC, abstractmethod

from app.core.config import settings
from app.core.errors import ProviderError

logger = logging.getLogger(__name__)

HEALTH_CHECK_PROMPT = "Hello, this is a health check. Please respond with 'OK'."


class BaseLLMProvider(ABC):
    name = "llm"
    model = ""

    def __init__(
        self,
        max_attempts: int | None = None,
        retry_delay: float | None = None,
        timeout: float | None = None,
    ):
        self.max_attempts = max_attempts if max_attempts is not None else settings.provider_max_attempts
        self.retry_delay = retry_delay if retry_delay is not None else settings.provider_retry_delay
        self.timeout = timeout if timeout is not None else settings.provider_timeout

    @abstractmethod
    async def generate(self, prompt: str) -> str | None:
        """Make one completion call. May raise or return an empty body."""
        ...

    @abstractmethod
    def is_configured(self) -> bool:
        """Whether credentials are present. Must not touch the network."""
        ...

    async def complete(self, prompt: str) -> str:
        """Single-turn completion with linear backoff between attempts.

        Raises ProviderError once every attempt has failed.
        """
        if not self.is_configured():
            raise ProviderError(f"{self.name} provider is not configured", attempts=0)

        last_error: Exception | None = None
        for attempt in range(1, self.max_attempts + 1):
            try:
                logger.info(f"{self.name} attempt {attempt}/{self.max_attempts}")
                reply = await asyncio.wait_for(self.generate(prompt), timeout=self.timeout)
                if not reply or not reply.strip():
                    raise ValueError(f"Empty response from {self.name}")

                logger.info(f"{self.name} attempt {attempt} succeeded ({len(reply)} chars)")
                return reply.strip()

            except Exception as e:
                last_error = e
                logger.warning(f"{self.name} attempt {attempt} failed: {e!r}")
                if attempt < self.max_attempts:
                    await asyncio.sleep(self.retry_delay * attempt)

        logger.error(f"All {self.max_attempts} {self.name} attempts failed: {last_error!r}")
        raise ProviderError(
            f"{self.name} failed after {self.max_attempts} attempts: {last_error}",
            attempts=self.max_attempts,
        )

    async def health_check(self) -> bool:
        try:
            reply = await self.complete(HEALTH_CHECK_PROMPT)
        except Exception as e:
            logger.error(f"{self.name} health check failed: {e}")
            return False
        return "ok" in reply.lower()

    def status(self) -> dict:
        configured = self.is_configured()
        return {"available": configured, "model": self.model, "configured": configured}
