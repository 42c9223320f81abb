"""Per-request authentication context.

The current caller is held as a pending lookup on the GraphQL context under
``"user"``. It is started once when the context is built and every resolver
awaits the same task, so the token is verified and the user row loaded at
most once per request (or once per websocket connection).
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Mapping
from typing import Any
from uuid import UUID

from sqlalchemy import select

from ..database.connection import get_async_session
from ..dbmodels import Users
from ..logging import get_logger
from .adapters.base import AuthenticationError
from .factory import get_auth_adapter

logger = get_logger(__name__)

BEARER_PREFIX = "Bearer "


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        return None
    if not authorization.startswith(BEARER_PREFIX):
        logger.warning("Invalid authorization format received")
        return None
    return authorization[len(BEARER_PREFIX) :].strip() or None


def extract_connection_token(connection_params: Mapping[str, Any] | None) -> str | None:
    """Return the token sent in websocket connection params.

    Clients send either a raw ``jwt`` value or an ``authorization`` header value.
    """
    if not connection_params:
        return None
    token = connection_params.get("jwt")
    if isinstance(token, str) and token:
        return token
    authorization = connection_params.get("authorization") or connection_params.get(
        "Authorization"
    )
    if isinstance(authorization, str):
        return extract_bearer_token(authorization)
    return None


async def resolve_current_user(token: str | None) -> Users | None:
    """Verify a token and load the user it names.

    Any failure resolves to None: a request without a valid principal is
    anonymous, and each operation decides whether that is acceptable.
    """
    if not token:
        return None

    try:
        principal = await get_auth_adapter().verify_token(token)
    except AuthenticationError as e:
        logger.info("Rejected token", error=str(e))
        return None

    try:
        user_id = UUID(principal["subject"])
    except ValueError:
        logger.info("Token subject is not a user id", subject=principal["subject"])
        return None

    async with get_async_session() as session:
        result = await session.execute(select(Users).where(Users.id == user_id))
        user = result.scalar_one_or_none()

    if user is None:
        logger.info("Token refers to unknown user", user_id=str(user_id))
        return None

    if user.version != principal["version"]:
        logger.info(
            "Token version is stale",
            user_id=str(user_id),
            token_version=principal["version"],
            user_version=user.version,
        )
        return None

    return user


def create_pending_user(token: str | None) -> Awaitable[Users | None]:
    """Start resolving the caller and return the pending result.

    The returned task may be awaited any number of times.
    """
    return asyncio.ensure_future(resolve_current_user(token))
