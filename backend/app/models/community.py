"""Community reference data: resources, statistics and events."""

from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel

from app.models.conversation import new_id, utcnow


class CommunityResource(SQLModel, table=True):
    id: str = Field(default_factory=new_id, primary_key=True)
    title: str
    content: str
    category: str = Field(index=True)
    url: Optional[str] = None
    organization: Optional[str] = None
    location: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    is_active: bool = Field(default=True, index=True)


class CommunityStat(SQLModel, table=True):
    id: str = Field(default_factory=new_id, primary_key=True)
    stat_name: str = Field(unique=True)
    stat_value: str
    category: str = Field(default="general")
    updated_at: datetime = Field(default_factory=utcnow)


class Event(SQLModel, table=True):
    id: str = Field(default_factory=new_id, primary_key=True)
    title: str
    description: Optional[str] = None
    event_date: datetime = Field(index=True)
    location: Optional[str] = None
    event_type: str = Field(default="community")  # community | workshop | celebration
    is_virtual: bool = Field(default=False)
    max_attendees: Optional[int] = None
    created_at: datetime = Field(default_factory=utcnow)
    is_active: bool = Field(default=True, index=True)
