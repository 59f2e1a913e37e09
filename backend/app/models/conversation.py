"""Conversation, message and feedback models for chat history persistence."""

import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import JSON, CheckConstraint, Column
from sqlmodel import Field, Relationship, SQLModel

MESSAGE_ROLES = ("user", "assistant")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return uuid.uuid4().hex


class Conversation(SQLModel, table=True):
    id: str = Field(default_factory=new_id, primary_key=True)
    owner_ref: Optional[str] = Field(default=None, index=True)
    started_at: datetime = Field(default_factory=utcnow)
    last_message_at: datetime = Field(default_factory=utcnow, index=True)
    context: dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    is_active: bool = Field(default=True)

    messages: list["ChatMessage"] = Relationship(back_populates="conversation", cascade_delete=True)


class ChatMessage(SQLModel, table=True):
    __table_args__ = (
        CheckConstraint("role IN ('user', 'assistant')", name="ck_chatmessage_role"),
        CheckConstraint("rating IS NULL OR (rating >= 1 AND rating <= 5)", name="ck_chatmessage_rating"),
    )

    id: str = Field(default_factory=new_id, primary_key=True)
    conversation_id: str = Field(foreign_key="conversation.id", ondelete="CASCADE", index=True)
    role: str  # "user" | "assistant"
    content: str
    timestamp: datetime = Field(default_factory=utcnow, index=True)
    rating: Optional[int] = None
    # model, source, confidence, fallback_reason
    meta: dict[str, Any] = Field(default_factory=dict, sa_column=Column("metadata", JSON, nullable=False))

    conversation: Optional[Conversation] = Relationship(back_populates="messages")


class Feedback(SQLModel, table=True):
    __table_args__ = (
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_feedback_rating"),
    )

    id: str = Field(default_factory=new_id, primary_key=True)
    message_id: str = Field(foreign_key="chatmessage.id", ondelete="CASCADE", index=True)
    rating: int
    feedback_text: Optional[str] = None
    user_ref: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
