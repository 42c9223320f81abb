"""
Root GraphQL subscription definitions
"""

from collections.abc import AsyncGenerator
from uuid import UUID

import strawberry

from ..types.group import Group
from ..types.message import Message


@strawberry.type
class Subscription:
    """Root GraphQL subscription type."""

    @strawberry.subscription(name="messageAdded")
    async def message_added(
        self, info: strawberry.Info, group_ids: list[UUID]
    ) -> AsyncGenerator[Message, None]:
        """New messages in groups the caller belongs to."""
        from ..resolvers.subscription import subscribe_message_added

        async for message in subscribe_message_added(info, group_ids):
            yield message

    @strawberry.subscription(name="groupAdded")
    async def group_added(
        self, info: strawberry.Info, user_id: UUID
    ) -> AsyncGenerator[Group, None]:
        """Groups the caller was added to."""
        from ..resolvers.subscription import subscribe_group_added

        async for group in subscribe_group_added(info, user_id):
            yield group
