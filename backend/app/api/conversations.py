"""REST API for conversation records. Conversations are never deleted, only deactivated."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_store
from app.core.errors import NotFoundError
from app.models.conversation import Conversation
from app.services.store import ConversationStore, as_utc

router = APIRouter()
logger = logging.getLogger(__name__)


def _conversation_dict(c: Conversation) -> dict:
    return {
        "id": c.id,
        "owner_ref": c.owner_ref,
        "started_at": as_utc(c.started_at).isoformat(),
        "last_message_at": as_utc(c.last_message_at).isoformat(),
        "context": c.context or {},
        "is_active": c.is_active,
    }


@router.get("/{conversation_id}")
async def get_conversation(conversation_id: str, store: ConversationStore = Depends(get_store)):
    conv = store.get_conversation(conversation_id)
    if not conv:
        logger.debug(f"Conversation {conversation_id} not found")
        raise HTTPException(status_code=404, detail="Conversation not found")

    data = _conversation_dict(conv)
    data["message_count"] = len(store.get_messages(conversation_id))
    return data


@router.post("/{conversation_id}/deactivate")
async def deactivate_conversation(conversation_id: str, store: ConversationStore = Depends(get_store)):
    try:
        conv = store.deactivate_conversation(conversation_id)
    except NotFoundError:
        logger.debug(f"Deactivate: conversation {conversation_id} not found")
        raise HTTPException(status_code=404, detail="Conversation not found")

    logger.info(f"Deactivated conversation {conversation_id}")
    return _conversation_dict(conv)
