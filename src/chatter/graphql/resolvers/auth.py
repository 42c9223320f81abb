from __future__ import annotations

from typing import TYPE_CHECKING

import strawberry
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from ...auth.factory import get_auth_adapter
from ...auth.passwords import hash_password, verify_password
from ...database.connection import get_async_session
from ...dbmodels import Users
from ...logging import get_logger

if TYPE_CHECKING:
    from ..mutations.root import SigninUserInput
    from ..types.user import User

logger = get_logger(__name__)


class SigninError(Exception):
    """Signup or login could not be completed."""

    pass


async def _issue_token(user: Users) -> str:
    return await get_auth_adapter().issue_token(user.id, user.version, {"email": user.email})


async def signup(info: strawberry.Info, input: SigninUserInput) -> User:
    """
    Register a new user and return it with a fresh token.
    """
    email = input.email.strip().lower()

    async with get_async_session() as session:
        result = await session.execute(select(Users.id).where(Users.email == email))
        if result.scalar_one_or_none() is not None:
            raise SigninError("email already exists")

        user = Users(
            email=email,
            username=input.username or email.split("@")[0],
            password=hash_password(input.password),
        )
        session.add(user)
        try:
            await session.flush()
        except IntegrityError as e:
            raise SigninError("email already exists") from e
        await session.refresh(user)

    logger.info("User signed up", user_id=str(user.id))

    from ..types.user import User as UserType

    return UserType.from_model(user, token=await _issue_token(user))


async def login(info: strawberry.Info, input: SigninUserInput) -> User:
    """
    Verify credentials and return the user with a fresh token.
    """
    email = input.email.strip().lower()

    async with get_async_session() as session:
        result = await session.execute(select(Users).where(Users.email == email))
        user = result.scalar_one_or_none()

    if user is None:
        raise SigninError("email not found")

    if not verify_password(user.password, input.password):
        logger.info("Login with wrong password", user_id=str(user.id))
        raise SigninError("password incorrect")

    logger.info("User logged in", user_id=str(user.id))

    from ..types.user import User as UserType

    return UserType.from_model(user, token=await _issue_token(user))
