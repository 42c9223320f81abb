"""
Root GraphQL query definitions
"""

from uuid import UUID

import strawberry

from ..types.group import Group
from ..types.user import User


@strawberry.type
class Query:
    """Root GraphQL query type."""

    @strawberry.field
    async def user(
        self, info: strawberry.Info, id: UUID | None = None, email: str | None = None
    ) -> User | None:
        """Get the current user by ID or email."""
        from ..resolvers.user import resolve_user

        return await resolve_user(info, id, email)

    @strawberry.field
    async def group(self, info: strawberry.Info, id: UUID) -> Group | None:
        """Get a group the current user belongs to."""
        from ..resolvers.group import resolve_group_by_id

        return await resolve_group_by_id(info, id)
