"""Conversation store: durable conversations, messages, feedback and community reference data.

Every operation opens its own short Session, so each write commits on its own.
Nothing here spans operations in a transaction.
"""

import logging
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from typing import Any, Iterator

from sqlalchemy import func, or_
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, col, select

from app.core.errors import NotFoundError, StoreError, ValidationError
from app.models.community import CommunityResource, CommunityStat, Event
from app.models.conversation import MESSAGE_ROLES, ChatMessage, Conversation, Feedback, utcnow

logger = logging.getLogger(__name__)


def as_utc(value: datetime) -> datetime:
    """SQLite hands datetimes back naive; they were written as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class ConversationStore:
    def __init__(self, engine: Engine):
        self.engine = engine

    @contextmanager
    def _session(self) -> Iterator[Session]:
        with Session(self.engine) as session:
            try:
                yield session
            except IntegrityError:
                session.rollback()
                raise
            except SQLAlchemyError as e:
                session.rollback()
                logger.error(f"Store operation failed: {e}")
                raise StoreError(str(e)) from e

    # --- Conversations ---

    def create_conversation(self, owner_ref: str | None = None) -> Conversation:
        now = utcnow()
        with self._session() as session:
            conv = Conversation(owner_ref=owner_ref, started_at=now, last_message_at=now)
            session.add(conv)
            session.commit()
            session.refresh(conv)
            logger.debug(f"Created conversation {conv.id}")
            return conv

    def get_conversation(self, conversation_id: str) -> Conversation | None:
        with self._session() as session:
            return session.get(Conversation, conversation_id)

    def deactivate_conversation(self, conversation_id: str) -> Conversation:
        with self._session() as session:
            conv = session.get(Conversation, conversation_id)
            if not conv:
                raise NotFoundError("Conversation", conversation_id)
            conv.is_active = False
            session.add(conv)
            session.commit()
            session.refresh(conv)
            return conv

    # --- Messages ---

    def append_message(
        self,
        conversation_id: str,
        role: str,
        content: str,
        metadata: dict[str, Any] | None = None,
    ) -> ChatMessage:
        if role not in MESSAGE_ROLES:
            raise ValidationError("role", f"must be one of {', '.join(MESSAGE_ROLES)}")

        with self._session() as session:
            conv = session.get(Conversation, conversation_id)
            if not conv:
                raise NotFoundError("Conversation", conversation_id)

            # Keep timestamps strictly increasing within a conversation
            timestamp = utcnow()
            last = as_utc(conv.last_message_at)
            if timestamp <= last:
                timestamp = last + timedelta(microseconds=1)

            msg = ChatMessage(
                conversation_id=conversation_id,
                role=role,
                content=content,
                timestamp=timestamp,
                meta=metadata or {},
            )
            session.add(msg)
            try:
                session.commit()
            except IntegrityError as e:
                session.rollback()
                raise NotFoundError("Conversation", conversation_id) from e
            session.refresh(msg)

            # Message first, then the parent's timestamp
            conv = session.get(Conversation, conversation_id)
            if conv:
                conv.last_message_at = max(utcnow(), timestamp)
                session.add(conv)
                session.commit()
                session.refresh(msg)

            return msg

    def get_messages(self, conversation_id: str) -> list[ChatMessage]:
        with self._session() as session:
            return list(session.exec(
                select(ChatMessage)
                .where(ChatMessage.conversation_id == conversation_id)
                .order_by(col(ChatMessage.timestamp))
            ).all())

    # --- Feedback ---

    def record_feedback(
        self,
        message_id: str,
        rating: int,
        text: str | None = None,
        user_ref: str | None = None,
    ) -> Feedback:
        if isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5:
            raise ValidationError("rating", "must be an integer between 1 and 5")

        with self._session() as session:
            feedback = Feedback(message_id=message_id, rating=rating, feedback_text=text, user_ref=user_ref)
            session.add(feedback)
            try:
                session.commit()
            except IntegrityError as e:
                session.rollback()
                raise NotFoundError("Message", message_id) from e
            session.refresh(feedback)

            msg = session.get(ChatMessage, message_id)
            if msg and msg.rating is None:
                msg.rating = rating
                session.add(msg)
                session.commit()
                session.refresh(feedback)

            logger.info(f"Feedback recorded for message {message_id} (rating {rating})")
            return feedback

    # --- Community reference data ---

    def search_resources(self, query: str | None = None, category: str | None = None) -> list[CommunityResource]:
        stmt = select(CommunityResource).where(CommunityResource.is_active == True)  # noqa: E712
        if category:
            stmt = stmt.where(CommunityResource.category == category)
        if query:
            escaped = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
            pattern = f"%{escaped}%"
            stmt = stmt.where(or_(
                col(CommunityResource.title).ilike(pattern, escape="\\"),
                col(CommunityResource.content).ilike(pattern, escape="\\"),
                col(CommunityResource.organization).ilike(pattern, escape="\\"),
            ))
        with self._session() as session:
            return list(session.exec(stmt.order_by(col(CommunityResource.title))).all())

    def upcoming_events(self, limit: int = 10) -> list[Event]:
        with self._session() as session:
            return list(session.exec(
                select(Event)
                .where(Event.is_active == True)  # noqa: E712
                .where(Event.event_date >= utcnow())
                .order_by(col(Event.event_date))
                .limit(limit)
            ).all())

    def get_community_stats(self) -> list[CommunityStat]:
        with self._session() as session:
            return list(session.exec(
                select(CommunityStat).order_by(col(CommunityStat.category), col(CommunityStat.stat_name))
            ).all())

    def health_check(self) -> bool:
        try:
            with Session(self.engine) as session:
                count = session.exec(select(func.count()).select_from(CommunityStat)).one()
            return count >= 0
        except SQLAlchemyError as e:
            logger.error(f"Database health check failed: {e}")
            return False
