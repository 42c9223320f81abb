"""
Message GraphQL type definitions
"""

from datetime import datetime
from typing import TYPE_CHECKING, Annotated
from uuid import UUID

import strawberry

if TYPE_CHECKING:
    from ...dbmodels import Messages
    from .group import Group
    from .user import User


@strawberry.type
class Message:
    """Message type for GraphQL API."""

    id: UUID
    text: str
    created_at: datetime | None
    user_id: strawberry.Private[UUID]
    group_id: strawberry.Private[UUID]

    @classmethod
    def from_model(cls, message: "Messages") -> "Message":
        return cls(
            id=message.id,
            text=message.text,
            created_at=message.created_at,
            user_id=message.user_id,
            group_id=message.group_id,
        )

    @strawberry.field(name="from")
    async def from_(self, info: strawberry.Info) -> Annotated["User", strawberry.lazy(".user")]:
        """Author of the message."""
        from ..resolvers.message import resolve_message_from

        return await resolve_message_from(self, info)

    @strawberry.field
    async def to(self, info: strawberry.Info) -> Annotated["Group", strawberry.lazy(".group")]:
        """Group the message was sent to."""
        from ..resolvers.message import resolve_message_to

        return await resolve_message_to(self, info)
