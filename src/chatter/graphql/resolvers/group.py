from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

import strawberry
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ...database.connection import get_async_session
from ...dbmodels import Friends, Groups, GroupUsers, LastRead, Messages, Users
from ...logging import get_logger
from ...pubsub.publisher import get_event_publisher
from ..access_control import NotFound, Unauthorized, get_authenticated_user

if TYPE_CHECKING:
    from ..mutations.root import CreateGroupInput, UpdateGroupInput
    from ..types.group import Group
    from ..types.message import Message
    from ..types.user import User

logger = get_logger(__name__)


async def get_member_group(session: AsyncSession, group_id: UUID, user_id: UUID) -> Groups | None:
    """Load a group only if the user belongs to it."""
    stmt = (
        select(Groups)
        .join(GroupUsers, GroupUsers.group_id == Groups.id)
        .where(Groups.id == group_id, GroupUsers.user_id == user_id)
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def get_last_read(session: AsyncSession, user_id: UUID, group_id: UUID) -> Messages | None:
    """The newest message in a group that the user marked as read."""
    stmt = (
        select(Messages)
        .join(LastRead, LastRead.message_id == Messages.id)
        .where(LastRead.user_id == user_id, Messages.group_id == group_id)
        .order_by(Messages.created_at.desc())
        .limit(1)
    )
    result = await session.execute(stmt)
    return result.scalars().first()


async def _destroy_group(session: AsyncSession, group: Groups) -> None:
    await session.execute(delete(GroupUsers).where(GroupUsers.group_id == group.id))
    await session.execute(delete(Messages).where(Messages.group_id == group.id))
    await session.execute(delete(Groups).where(Groups.id == group.id))


# Query resolvers
async def resolve_group_by_id(info: strawberry.Info, id: UUID) -> Group | None:
    """
    Resolve a group by its ID.

    Returns None unless the caller is a member of the group.
    """
    user = await get_authenticated_user(info)

    async with get_async_session() as session:
        group = await get_member_group(session, id, user.id)

    if group is None:
        logger.info("Group not found for user", group_id=str(id), user_id=str(user.id))
        return None

    from ..types.group import Group as GroupType

    return GroupType.from_model(group)


# Group field resolvers
async def resolve_group_users(group: Group, info: strawberry.Info) -> list[User]:
    """Resolve the members of a group, projected to id and username."""
    async with get_async_session() as session:
        stmt = (
            select(Users.id, Users.username)
            .join(GroupUsers, GroupUsers.user_id == Users.id)
            .where(GroupUsers.group_id == group.id)
        )
        result = await session.execute(stmt)
        rows = result.all()

    from ..types.user import User as UserType

    return [UserType(id=row.id, username=row.username) for row in rows]


async def resolve_group_messages(
    group: Group, info: strawberry.Info, limit: int | None, offset: int
) -> list[Message]:
    """Resolve messages in a group, newest first."""
    async with get_async_session() as session:
        stmt = (
            select(Messages)
            .where(Messages.group_id == group.id)
            .order_by(Messages.created_at.desc())
            .offset(offset)
        )
        if limit is not None:
            stmt = stmt.limit(limit)

        result = await session.execute(stmt)
        messages = result.scalars().all()

    from ..types.message import Message as MessageType

    return [MessageType.from_model(message) for message in messages]


async def resolve_group_last_read(group: Group, info: strawberry.Info) -> Message | None:
    """Resolve the caller's last read message in a group."""
    user = await get_authenticated_user(info)

    async with get_async_session() as session:
        last_read = await get_last_read(session, user.id, group.id)

    if last_read is None:
        return None

    from ..types.message import Message as MessageType

    return MessageType.from_model(last_read)


async def resolve_group_unread_count(group: Group, info: strawberry.Info) -> int:
    """
    Count messages in a group the caller has not read.

    With no last read message every message in the group is unread.
    """
    user = await get_authenticated_user(info)

    async with get_async_session() as session:
        last_read = await get_last_read(session, user.id, group.id)

        stmt = select(func.count(Messages.id)).where(Messages.group_id == group.id)
        if last_read is not None:
            stmt = stmt.where(Messages.created_at > last_read.created_at)

        result = await session.execute(stmt)
        return result.scalar() or 0


# Mutation resolvers
async def create_group(info: strawberry.Info, input: CreateGroupInput) -> Group:
    """
    Create a group with the caller and the requested users as members.

    Requested users who are not the caller's friends are left out.
    """
    user = await get_authenticated_user(info)

    async with get_async_session() as session:
        friend_ids: list[UUID] = []
        if input.user_ids:
            stmt = select(Friends.friend_id).where(
                Friends.user_id == user.id, Friends.friend_id.in_(input.user_ids)
            )
            result = await session.execute(stmt)
            friend_ids = list(result.scalars().all())

        dropped = set(input.user_ids or []) - set(friend_ids)
        if dropped:
            logger.info(
                "Skipping non-friends while creating group",
                user_id=str(user.id),
                skipped=[str(user_id) for user_id in dropped],
            )

        group = Groups(name=input.name)
        session.add(group)
        await session.flush()

        member_ids = [user.id, *friend_ids]
        session.add_all([GroupUsers(group_id=group.id, user_id=uid) for uid in member_ids])
        await session.flush()
        await session.refresh(group)

    logger.info("Group created", group_id=str(group.id), member_count=len(member_ids))

    await get_event_publisher().publish_group_added(group, user.id, member_ids)

    from ..types.group import Group as GroupType

    return GroupType.from_model(group)


async def delete_group(info: strawberry.Info, id: UUID) -> Group:
    """
    Delete a group with its memberships and messages. Caller must be a member.
    """
    user = await get_authenticated_user(info)

    async with get_async_session() as session:
        group = await get_member_group(session, id, user.id)
        if group is None:
            logger.info(
                "Delete of group without membership", group_id=str(id), user_id=str(user.id)
            )
            raise Unauthorized()

        from ..types.group import Group as GroupType

        deleted = GroupType.from_model(group)
        await _destroy_group(session, group)

    logger.info("Group deleted", group_id=str(id), user_id=str(user.id))
    return deleted


async def leave_group(info: strawberry.Info, id: UUID) -> Group:
    """
    Remove the caller from a group. The last member out destroys the group.
    """
    user = await get_authenticated_user(info)

    async with get_async_session() as session:
        group = await get_member_group(session, id, user.id)
        if group is None:
            raise NotFound("No group found")

        from ..types.group import Group as GroupType

        left = GroupType.from_model(group)

        await session.execute(
            delete(GroupUsers).where(GroupUsers.group_id == id, GroupUsers.user_id == user.id)
        )
        result = await session.execute(
            select(func.count()).select_from(GroupUsers).where(GroupUsers.group_id == id)
        )
        remaining = result.scalar() or 0

        if remaining == 0:
            await _destroy_group(session, group)
            logger.info("Last member left, group destroyed", group_id=str(id))

    logger.info("User left group", group_id=str(id), user_id=str(user.id))
    return left


async def update_group(info: strawberry.Info, input: UpdateGroupInput) -> Group:
    """
    Rename a group and/or move the caller's last read marker in it.
    """
    user = await get_authenticated_user(info)

    async with get_async_session() as session:
        group = await get_member_group(session, input.id, user.id)
        if group is None:
            logger.info(
                "Update of group without membership", group_id=str(input.id), user_id=str(user.id)
            )
            raise Unauthorized()

        if input.last_read is not None:
            result = await session.execute(
                select(Messages.id).where(
                    Messages.id == input.last_read, Messages.group_id == group.id
                )
            )
            if result.scalar_one_or_none() is None:
                logger.info(
                    "Last read message is not in group",
                    group_id=str(group.id),
                    message_id=str(input.last_read),
                )
                raise Unauthorized()

            group_message_ids = select(Messages.id).where(Messages.group_id == group.id)
            await session.execute(
                delete(LastRead).where(
                    LastRead.user_id == user.id, LastRead.message_id.in_(group_message_ids)
                )
            )
            session.add(LastRead(user_id=user.id, message_id=input.last_read))

        if input.name:
            group.name = input.name
            group.updated_at = func.now()

        await session.flush()
        await session.refresh(group)

    from ..types.group import Group as GroupType

    return GroupType.from_model(group)
