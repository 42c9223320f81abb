"""
User GraphQL type definitions
"""

from datetime import datetime
from typing import TYPE_CHECKING, Annotated
from uuid import UUID

import strawberry

if TYPE_CHECKING:
    from ...dbmodels import Users
    from .group import Group
    from .message import Message


@strawberry.type
class User:
    """User type for GraphQL API.

    Only ``id`` and ``username`` are public. Everything else is resolved
    through a guard that requires the caller to be this user.
    """

    id: UUID
    username: str
    created_at: datetime | None = None
    token: strawberry.Private[str | None] = None

    @classmethod
    def from_model(cls, user: "Users", token: str | None = None) -> "User":
        return cls(id=user.id, username=user.username, created_at=user.created_at, token=token)

    @strawberry.field
    async def email(self, info: strawberry.Info) -> str | None:
        """Email address, visible only to the user themself."""
        from ..resolvers.user import resolve_user_email

        return await resolve_user_email(self, info)

    @strawberry.field
    async def friends(self, info: strawberry.Info) -> list["User"]:
        """Friends of this user."""
        from ..resolvers.user import resolve_user_friends

        return await resolve_user_friends(self, info)

    @strawberry.field
    async def groups(
        self, info: strawberry.Info
    ) -> list[Annotated["Group", strawberry.lazy(".group")]]:
        """Groups this user belongs to."""
        from ..resolvers.user import resolve_user_groups

        return await resolve_user_groups(self, info)

    @strawberry.field
    async def messages(
        self, info: strawberry.Info
    ) -> list[Annotated["Message", strawberry.lazy(".message")]]:
        """Messages written by this user, newest first."""
        from ..resolvers.user import resolve_user_messages

        return await resolve_user_messages(self, info)

    @strawberry.field
    def jwt(self) -> str | None:
        """Token issued by signup or login."""
        from ..resolvers.user import resolve_user_jwt

        return resolve_user_jwt(self)
