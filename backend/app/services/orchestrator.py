"""Chat turn orchestration: provider reply, local knowledge fallback, or static emergency text.

A turn always produces a ChatResult. Its ``mode`` says which tier answered:

    provider   the AI provider replied (post-processed by the persona)
    fallback   the provider exhausted its retries; the persona answered locally
    emergency  anything else went wrong; a fixed apology, persistence not guaranteed
"""

import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import ClassVar, Union

from app.core.errors import ProviderError, ValidationError
from app.services.llm.base import BaseLLMProvider
from app.services.persona import PersonaEngine
from app.services.store import ConversationStore

logger = logging.getLogger(__name__)

MAX_MESSAGE_LENGTH = 2000

EMERGENCY_MESSAGE = (
    "I'm experiencing some technical difficulties right now, but I'm still here for you. "
    "The BLKOUT community is strong, and we support each other through all challenges. "
    "Please try again in a moment, or reach out through our other community channels."
)


@dataclass(frozen=True)
class ProviderReply:
    mode: ClassVar[str] = "provider"
    reply: str
    model: str
    source: str = "provider_api"
    confidence: float = 0.95

    def metadata(self) -> dict:
        return {"model": self.model, "source": self.source, "confidence": self.confidence}


@dataclass(frozen=True)
class FallbackReply:
    mode: ClassVar[str] = "fallback"
    reply: str
    model: str = "local_knowledge"
    source: str = "local_knowledge"
    confidence: float = 0.85
    fallback_reason: str = "provider_unavailable"

    def metadata(self) -> dict:
        return {
            "model": self.model,
            "source": self.source,
            "confidence": self.confidence,
            "fallback_reason": self.fallback_reason,
        }


@dataclass(frozen=True)
class EmergencyReply:
    mode: ClassVar[str] = "emergency"
    reply: str = EMERGENCY_MESSAGE
    model: str = "emergency_fallback"
    source: str = "static_response"
    confidence: float = 0.7


Outcome = Union[ProviderReply, FallbackReply, EmergencyReply]


@dataclass
class ChatResult:
    response: str
    model: str
    source: str
    confidence: float
    mode: str
    conversation_id: str | None
    message_id: str | None = None
    error: str | None = None
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    @classmethod
    def from_outcome(
        cls,
        outcome: Outcome,
        conversation_id: str | None,
        message_id: str | None = None,
        error: str | None = None,
    ) -> "ChatResult":
        return cls(
            response=outcome.reply,
            model=outcome.model,
            source=outcome.source,
            confidence=outcome.confidence,
            mode=outcome.mode,
            conversation_id=conversation_id,
            message_id=message_id,
            error=error,
        )

    @property
    def is_emergency(self) -> bool:
        return self.mode == EmergencyReply.mode

    def to_dict(self) -> dict:
        data = asdict(self)
        if data["error"] is None:
            del data["error"]
        return data


def validate_message(message: str) -> str:
    text = (message or "").strip()
    if not text:
        raise ValidationError("message", "must not be empty")
    if len(text) > MAX_MESSAGE_LENGTH:
        raise ValidationError("message", f"must be at most {MAX_MESSAGE_LENGTH} characters")
    return text


class ChatOrchestrator:
    """Runs one chat turn against a store, a persona and a provider."""

    def __init__(self, store: ConversationStore, persona: PersonaEngine, provider: BaseLLMProvider):
        self.store = store
        self.persona = persona
        self.provider = provider

    async def submit_chat(
        self,
        message: str,
        conversation_id: str | None = None,
        user_ref: str | None = None,
    ) -> ChatResult:
        """Process one user message. Raises ValidationError only for bad input."""
        message = validate_message(message)
        logger.info(
            f"Chat request received (length={len(message)}, "
            f"conversation_id={conversation_id}, user_ref={user_ref})"
        )

        try:
            if not conversation_id:
                conversation_id = self.store.create_conversation(user_ref).id
                logger.info(f"New conversation created: {conversation_id}")

            self.store.append_message(conversation_id, "user", message)

            prompt = self.persona.enhance(message)
            outcome = await self._answer(prompt, message)

            stored = self.store.append_message(
                conversation_id, "assistant", outcome.reply, outcome.metadata()
            )
            logger.info(f"Assistant reply stored (mode={outcome.mode}, conversation_id={conversation_id})")
            return ChatResult.from_outcome(outcome, conversation_id, message_id=stored.id)

        except Exception:
            logger.exception(f"Chat turn failed, sending emergency reply (conversation_id={conversation_id})")
            return ChatResult.from_outcome(
                EmergencyReply(), conversation_id, error="Temporary service disruption"
            )

    async def _answer(self, prompt: str, message: str) -> ProviderReply | FallbackReply:
        try:
            reply = await self.provider.complete(prompt)
        except ProviderError as e:
            logger.warning(f"Provider unavailable after {e.attempts} attempts, using local knowledge: {e}")
            return FallbackReply(reply=self.persona.enrich(self.persona.fallback(message), message))

        return ProviderReply(reply=self.persona.post_process(reply, message), model=self.provider.model)
