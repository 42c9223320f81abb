"""
Group GraphQL type definitions
"""

from datetime import datetime
from typing import TYPE_CHECKING, Annotated
from uuid import UUID

import strawberry

if TYPE_CHECKING:
    from ...dbmodels import Groups
    from .message import Message
    from .user import User


@strawberry.type
class Group:
    """Group type for GraphQL API."""

    id: UUID
    name: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_model(cls, group: "Groups") -> "Group":
        return cls(
            id=group.id,
            name=group.name,
            created_at=group.created_at,
            updated_at=group.updated_at,
        )

    @strawberry.field
    async def users(
        self, info: strawberry.Info
    ) -> list[Annotated["User", strawberry.lazy(".user")]]:
        """Members of this group."""
        from ..resolvers.group import resolve_group_users

        return await resolve_group_users(self, info)

    @strawberry.field
    async def messages(
        self,
        info: strawberry.Info,
        limit: int | None = None,
        offset: int | None = 0,
    ) -> list[Annotated["Message", strawberry.lazy(".message")]]:
        """Messages in this group, newest first."""
        from ..resolvers.group import resolve_group_messages

        return await resolve_group_messages(self, info, limit, offset or 0)

    @strawberry.field
    async def last_read(
        self, info: strawberry.Info
    ) -> Annotated["Message", strawberry.lazy(".message")] | None:
        """The caller's last read message in this group."""
        from ..resolvers.group import resolve_group_last_read

        return await resolve_group_last_read(self, info)

    @strawberry.field
    async def unread_count(self, info: strawberry.Info) -> int:
        """Number of messages newer than the caller's last read message."""
        from ..resolvers.group import resolve_group_unread_count

        return await resolve_group_unread_count(self, info)
