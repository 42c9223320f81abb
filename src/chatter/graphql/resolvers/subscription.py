from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import TYPE_CHECKING
from uuid import UUID

import strawberry
from sqlalchemy import select

from ...database.connection import get_async_session
from ...dbmodels import GroupUsers, Users
from ...logging import get_logger
from ...pubsub.models import (
    GROUP_ADDED_CHANNEL,
    MESSAGE_ADDED_CHANNEL,
    GroupAddedEvent,
    MessageAddedEvent,
)
from ...pubsub.publisher import get_event_publisher
from ..access_control import (
    Unauthorized,
    can_subscribe_to_groups,
    get_authenticated_user,
    is_same_user,
)

if TYPE_CHECKING:
    from ..types.group import Group
    from ..types.message import Message

logger = get_logger(__name__)


# Admission guards
async def admit_group_added(info: strawberry.Info, user_id: UUID) -> Users:
    """Only a user may listen for groups they were added to."""
    user = await get_authenticated_user(info)
    if not is_same_user(user, user_id):
        logger.info(
            "groupAdded subscription for another user denied",
            user_id=str(user.id),
            requested_user_id=str(user_id),
        )
        raise Unauthorized()
    return user


async def admit_message_added(info: strawberry.Info, group_ids: list[UUID]) -> Users:
    """A user may only listen to groups they belong to."""
    user = await get_authenticated_user(info)

    async with get_async_session() as session:
        stmt = select(GroupUsers.group_id).where(
            GroupUsers.user_id == user.id, GroupUsers.group_id.in_(group_ids)
        )
        result = await session.execute(stmt)
        member_group_ids = result.scalars().all()

    if not can_subscribe_to_groups(member_group_ids, group_ids):
        logger.info(
            "messageAdded subscription to foreign groups denied",
            user_id=str(user.id),
            requested=[str(group_id) for group_id in group_ids],
        )
        raise Unauthorized()
    return user


# Subscription resolvers
async def subscribe_group_added(
    info: strawberry.Info, user_id: UUID
) -> AsyncGenerator[Group, None]:
    """
    Stream groups the user was added to by someone else.
    """
    await admit_group_added(info, user_id)

    from ..types.group import Group as GroupType

    async for data in get_event_publisher().listen(GROUP_ADDED_CHANNEL):
        event = GroupAddedEvent.model_validate_json(data)
        if user_id in event.member_ids and event.creator_id != user_id:
            yield GroupType(
                id=event.id,
                name=event.name,
                created_at=event.created_at,
                updated_at=event.updated_at,
            )


async def subscribe_message_added(
    info: strawberry.Info, group_ids: list[UUID]
) -> AsyncGenerator[Message, None]:
    """
    Stream messages posted to the given groups by other users.
    """
    user = await admit_message_added(info, group_ids)
    watched = set(group_ids)

    from ..types.message import Message as MessageType

    async for data in get_event_publisher().listen(MESSAGE_ADDED_CHANNEL):
        event = MessageAddedEvent.model_validate_json(data)
        if event.group_id in watched and event.user_id != user.id:
            yield MessageType(
                id=event.id,
                text=event.text,
                created_at=event.created_at,
                user_id=event.user_id,
                group_id=event.group_id,
            )
