"""
Helpers for resolver unit tests: a caller, GraphQL info objects carrying a
pending caller, and a patched async database session.
"""

import asyncio
import uuid
from contextlib import contextmanager
from unittest.mock import AsyncMock, MagicMock, patch

import strawberry

from chatter.dbmodels import Users


def make_user(email: str = "alice@example.com", username: str = "alice") -> MagicMock:
    user = MagicMock(spec=Users)
    user.id = uuid.uuid4()
    user.email = email
    user.username = username
    user.version = 1
    user.created_at = None
    return user


def make_info(user=None, loaders=None) -> MagicMock:
    """Build an info object whose context holds an already settled pending caller."""
    pending = asyncio.get_running_loop().create_future()
    pending.set_result(user)

    info = MagicMock(spec=strawberry.Info)
    info.context = {"user": pending}
    if loaders is not None:
        info.context["loaders"] = loaders
    return info


def make_result(scalar=None, scalars=None, rows=None, one=None) -> MagicMock:
    """Mock of an execute() result answering the accessors the resolvers use."""
    result = MagicMock()
    result.scalar_one_or_none.return_value = scalar
    result.scalar.return_value = scalar
    result.scalars.return_value.all.return_value = scalars or []
    result.scalars.return_value.first.return_value = scalar
    result.all.return_value = rows or []
    result.one_or_none.return_value = one
    return result


@contextmanager
def patched_session(module: str, *results):
    """Patch `get_async_session` in a resolver module.

    Each call to session.execute returns the next result in order.
    """
    with patch(f"{module}.get_async_session") as mock_get_session:
        session = AsyncMock()
        session.add = MagicMock()
        session.add_all = MagicMock()
        session.execute.side_effect = list(results)
        mock_get_session.return_value.__aenter__.return_value = session
        yield session


