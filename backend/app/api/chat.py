"""Chat endpoints: submit a turn, read a conversation's messages, rate a reply."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, StringConstraints

from app.api.deps import get_orchestrator, get_store
from app.core.errors import NotFoundError, StoreError
from app.models.conversation import ChatMessage
from app.services.orchestrator import MAX_MESSAGE_LENGTH, ChatOrchestrator
from app.services.store import ConversationStore, as_utc

router = APIRouter()
logger = logging.getLogger(__name__)


class ChatRequest(BaseModel):
    message: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=MAX_MESSAGE_LENGTH)]
    conversation_id: str | None = None
    user_id: str | None = None


class FeedbackRequest(BaseModel):
    message_id: str
    rating: int = Field(ge=1, le=5)
    feedback_text: str | None = None
    user_id: str | None = None


def _message_dict(m: ChatMessage) -> dict:
    return {
        "id": m.id,
        "role": m.role,
        "content": m.content,
        "timestamp": as_utc(m.timestamp).isoformat(),
        "rating": m.rating,
        "metadata": m.meta or {},
    }


@router.post("/")
async def submit_chat(body: ChatRequest, orchestrator: ChatOrchestrator = Depends(get_orchestrator)):
    # ValidationError propagates to the app-level 400 handler
    result = await orchestrator.submit_chat(body.message, body.conversation_id, body.user_id)

    if result.is_emergency:
        return JSONResponse(status_code=500, content=result.to_dict())
    return result.to_dict()


@router.get("/conversations/{conversation_id}")
async def list_messages(conversation_id: str, store: ConversationStore = Depends(get_store)):
    try:
        messages = store.get_messages(conversation_id)
    except StoreError:
        logger.exception(f"Failed to load messages for conversation {conversation_id}")
        return JSONResponse(status_code=500, content={"error": "Failed to retrieve conversation"})

    return {
        "conversation_id": conversation_id,
        "messages": [_message_dict(m) for m in messages],
        "status": "active",
    }


@router.post("/feedback")
async def submit_feedback(body: FeedbackRequest, store: ConversationStore = Depends(get_store)):
    try:
        store.record_feedback(body.message_id, body.rating, body.feedback_text, body.user_id)
    except NotFoundError as e:
        logger.debug(f"Feedback for unknown message {body.message_id}")
        raise HTTPException(status_code=404, detail=str(e))
    except StoreError:
        logger.exception(f"Failed to record feedback for message {body.message_id}")
        return JSONResponse(status_code=500, content={"error": "Failed to record feedback"})

    logger.info(f"Feedback added for message {body.message_id} (rating {body.rating})")
    return {"success": True, "message": "Feedback recorded successfully"}
