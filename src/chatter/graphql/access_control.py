"""
Shared access control logic for GraphQL resolvers
"""

from collections.abc import Iterable
from typing import TYPE_CHECKING
from uuid import UUID

import strawberry

from ..logging import get_logger, set_user_context

if TYPE_CHECKING:
    from ..dbmodels import Users

logger = get_logger(__name__)

UNAUTHORIZED = "Unauthorized"


class Unauthorized(Exception):
    """The caller is anonymous or not allowed to touch the target."""

    def __init__(self, message: str = UNAUTHORIZED):
        super().__init__(message)


class NotFound(Exception):
    """A member-only lookup found nothing to act on."""

    pass


async def get_authenticated_user(info: strawberry.Info) -> "Users":
    """
    Await the pending principal on the request context.

    Raises:
        Unauthorized: If the request carries no valid principal
    """
    pending = info.context.get("user")
    user = await pending if pending is not None else None
    if user is None:
        raise Unauthorized()
    set_user_context(str(user.id))
    return user


def is_same_user(current_user: "Users", user_id: UUID | None) -> bool:
    """Check whether the caller is the given user."""
    return user_id is not None and current_user.id == user_id


def ensure_same_user(current_user: "Users", user_id: UUID | None) -> None:
    """Raise Unauthorized unless the caller is the given user."""
    if not is_same_user(current_user, user_id):
        logger.info(
            "Access denied to another user's data",
            current_user_id=str(current_user.id),
            target_user_id=str(user_id) if user_id else None,
        )
        raise Unauthorized()


def is_group_member(member_group_ids: Iterable[UUID], group_id: UUID) -> bool:
    """Check whether a group id is among the caller's group ids."""
    return group_id in set(member_group_ids)


def can_subscribe_to_groups(
    member_group_ids: Iterable[UUID], requested_group_ids: Iterable[UUID]
) -> bool:
    """Every requested group must be one the caller belongs to."""
    return set(requested_group_ids) <= set(member_group_ids)
