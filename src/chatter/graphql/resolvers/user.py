from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

import strawberry
from sqlalchemy import select

from ...database.connection import get_async_session
from ...dbmodels import Friends, Groups, GroupUsers, Messages, Users
from ...logging import get_logger
from ..access_control import Unauthorized, ensure_same_user, get_authenticated_user

if TYPE_CHECKING:
    from ..types.group import Group
    from ..types.message import Message
    from ..types.user import User

logger = get_logger(__name__)


# Query resolvers
async def resolve_user(
    info: strawberry.Info, id: UUID | None = None, email: str | None = None
) -> User:
    """
    Resolve a user by ID or email. Callers may only look themselves up.
    """
    current_user = await get_authenticated_user(info)

    if (id is not None and current_user.id == id) or (
        email is not None and current_user.email == email.strip().lower()
    ):
        from ..types.user import User as UserType

        return UserType.from_model(current_user)

    logger.info(
        "Lookup of another user denied",
        current_user_id=str(current_user.id),
        requested_id=str(id) if id else None,
    )
    raise Unauthorized()


# User field resolvers
async def resolve_user_email(user: User, info: strawberry.Info) -> str:
    current_user = await get_authenticated_user(info)
    ensure_same_user(current_user, user.id)
    return current_user.email


async def resolve_user_friends(user: User, info: strawberry.Info) -> list[User]:
    """Resolve a user's friends, projected to id and username."""
    current_user = await get_authenticated_user(info)
    ensure_same_user(current_user, user.id)

    async with get_async_session() as session:
        stmt = (
            select(Users.id, Users.username)
            .join(Friends, Friends.friend_id == Users.id)
            .where(Friends.user_id == user.id)
        )
        result = await session.execute(stmt)
        rows = result.all()

    from ..types.user import User as UserType

    return [UserType(id=row.id, username=row.username) for row in rows]


async def resolve_user_groups(user: User, info: strawberry.Info) -> list[Group]:
    current_user = await get_authenticated_user(info)
    ensure_same_user(current_user, user.id)

    async with get_async_session() as session:
        stmt = (
            select(Groups)
            .join(GroupUsers, GroupUsers.group_id == Groups.id)
            .where(GroupUsers.user_id == user.id)
        )
        result = await session.execute(stmt)
        groups = result.scalars().all()

    from ..types.group import Group as GroupType

    return [GroupType.from_model(group) for group in groups]


async def resolve_user_messages(user: User, info: strawberry.Info) -> list[Message]:
    current_user = await get_authenticated_user(info)
    ensure_same_user(current_user, user.id)

    async with get_async_session() as session:
        stmt = (
            select(Messages)
            .where(Messages.user_id == user.id)
            .order_by(Messages.created_at.desc())
        )
        result = await session.execute(stmt)
        messages = result.scalars().all()

    from ..types.message import Message as MessageType

    return [MessageType.from_model(message) for message in messages]


def resolve_user_jwt(user: User) -> str | None:
    return user.token
