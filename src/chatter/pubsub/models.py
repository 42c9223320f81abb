"""Pydantic models for events carried over Redis pub/sub."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

MESSAGE_ADDED_CHANNEL = "chatter:message_added"
GROUP_ADDED_CHANNEL = "chatter:group_added"


class MessageAddedEvent(BaseModel):
    id: UUID
    user_id: UUID
    group_id: UUID
    text: str
    created_at: datetime | None = None


class GroupAddedEvent(BaseModel):
    id: UUID
    name: str
    creator_id: UUID
    member_ids: list[UUID]
    created_at: datetime | None = None
    updated_at: datetime | None = None
