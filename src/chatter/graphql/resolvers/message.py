from __future__ import annotations

from typing import TYPE_CHECKING

import strawberry
from sqlalchemy import select

from ...database.connection import get_async_session
from ...dbmodels import Groups, GroupUsers, Messages, Users
from ...logging import get_logger
from ...pubsub.publisher import get_event_publisher
from ..access_control import Unauthorized, get_authenticated_user, is_group_member

if TYPE_CHECKING:
    from ..mutations.root import CreateMessageInput
    from ..types.group import Group
    from ..types.message import Message
    from ..types.user import User

logger = get_logger(__name__)


# Message field resolvers
async def resolve_message_from(message: Message, info: strawberry.Info) -> User:
    """
    Resolve the author of a message, projected to id and username.

    Uses the request's user loader when one is present.
    """
    loaders = info.context.get("loaders")
    if loaders is not None:
        author = await loaders.user_loader.load(message.user_id)
    else:
        async with get_async_session() as session:
            stmt = select(Users.id, Users.username).where(Users.id == message.user_id)
            result = await session.execute(stmt)
            author = result.one_or_none()

    if author is None:
        raise RuntimeError("Message author not found")

    from ..types.user import User as UserType

    return UserType(id=author.id, username=author.username)


async def resolve_message_to(message: Message, info: strawberry.Info) -> Group:
    """
    Resolve the group a message was sent to, projected to id and name.

    Uses the request's group loader when one is present.
    """
    loaders = info.context.get("loaders")
    if loaders is not None:
        group = await loaders.group_loader.load(message.group_id)
    else:
        async with get_async_session() as session:
            stmt = select(Groups.id, Groups.name).where(Groups.id == message.group_id)
            result = await session.execute(stmt)
            group = result.one_or_none()

    if group is None:
        raise RuntimeError("Message group not found")

    from ..types.group import Group as GroupType

    return GroupType(id=group.id, name=group.name)


# Mutation resolvers
async def create_message(info: strawberry.Info, input: CreateMessageInput) -> Message:
    """
    Post a message to a group. The caller must be a member of the group.
    """
    user = await get_authenticated_user(info)

    async with get_async_session() as session:
        stmt = select(GroupUsers.group_id).where(
            GroupUsers.user_id == user.id, GroupUsers.group_id == input.group_id
        )
        result = await session.execute(stmt)
        if not is_group_member(result.scalars().all(), input.group_id):
            logger.info(
                "Message to group without membership",
                user_id=str(user.id),
                group_id=str(input.group_id),
            )
            raise Unauthorized()

        message = Messages(user_id=user.id, group_id=input.group_id, text=input.text)
        session.add(message)
        await session.flush()
        await session.refresh(message)

    logger.info("Message created", message_id=str(message.id), group_id=str(message.group_id))

    await get_event_publisher().publish_message_added(message)

    from ..types.message import Message as MessageType

    return MessageType.from_model(message)
