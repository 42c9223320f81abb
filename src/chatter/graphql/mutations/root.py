"""
Root GraphQL mutation definitions
"""

from uuid import UUID

import strawberry

from ..types.group import Group
from ..types.message import Message
from ..types.user import User


# Input types for mutations
@strawberry.input
class CreateMessageInput:
    """Input for posting a message."""

    group_id: UUID
    text: str


@strawberry.input
class CreateGroupInput:
    """Input for creating a group."""

    name: str
    user_ids: list[UUID] | None = None


@strawberry.input
class UpdateGroupInput:
    """Input for updating a group."""

    id: UUID
    name: str | None = None
    last_read: UUID | None = None


@strawberry.input
class SigninUserInput:
    """Input for signup and login."""

    email: str
    password: str
    username: str | None = None


@strawberry.type
class Mutation:
    """Root GraphQL mutation type."""

    # Message mutations
    @strawberry.mutation(name="createMessage")
    async def create_message(self, info: strawberry.Info, message: CreateMessageInput) -> Message:
        """Post a message to a group."""
        from ..resolvers.message import create_message

        return await create_message(info, message)

    # Group mutations
    @strawberry.mutation(name="createGroup")
    async def create_group(self, info: strawberry.Info, group: CreateGroupInput) -> Group:
        """Create a group with the caller and some of their friends."""
        from ..resolvers.group import create_group

        return await create_group(info, group)

    @strawberry.mutation(name="deleteGroup")
    async def delete_group(self, info: strawberry.Info, id: UUID) -> Group:
        """Delete a group."""
        from ..resolvers.group import delete_group

        return await delete_group(info, id)

    @strawberry.mutation(name="leaveGroup")
    async def leave_group(self, info: strawberry.Info, id: UUID) -> Group:
        """Leave a group."""
        from ..resolvers.group import leave_group

        return await leave_group(info, id)

    @strawberry.mutation(name="updateGroup")
    async def update_group(self, info: strawberry.Info, group: UpdateGroupInput) -> Group:
        """Rename a group or mark messages as read."""
        from ..resolvers.group import update_group

        return await update_group(info, group)

    # Auth mutations
    @strawberry.mutation
    async def signup(self, info: strawberry.Info, user: SigninUserInput) -> User:
        """Create an account and receive a token."""
        from ..resolvers.auth import signup

        return await signup(info, user)

    @strawberry.mutation
    async def login(self, info: strawberry.Info, user: SigninUserInput) -> User:
        """Log in and receive a token."""
        from ..resolvers.auth import login

        return await login(info, user)
