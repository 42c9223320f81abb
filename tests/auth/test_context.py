"""Unit tests for resolving the caller from a token."""

import uuid
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from chatter.auth.adapters.base import AuthenticationError, Principal
from chatter.auth.context import (
    create_pending_user,
    extract_bearer_token,
    extract_connection_token,
    resolve_current_user,
)
from chatter.dbmodels import Users

MODULE = "chatter.auth.context"


class TestTokenExtraction:
    def test_bearer_header(self):
        assert extract_bearer_token("Bearer abc.def") == "abc.def"

    def test_missing_or_malformed_header(self):
        assert extract_bearer_token(None) is None
        assert extract_bearer_token("") is None
        assert extract_bearer_token("Basic dXNlcjpwdw==") is None
        assert extract_bearer_token("Bearer ") is None

    def test_connection_params_jwt(self):
        assert extract_connection_token({"jwt": "abc"}) == "abc"

    def test_connection_params_authorization(self):
        assert extract_connection_token({"authorization": "Bearer abc"}) == "abc"
        assert extract_connection_token({"Authorization": "Bearer xyz"}) == "xyz"

    def test_connection_params_empty(self):
        assert extract_connection_token(None) is None
        assert extract_connection_token({}) is None
        assert extract_connection_token({"jwt": 42}) is None


@pytest.fixture
def stored_user():
    user = MagicMock(spec=Users)
    user.id = uuid.uuid4()
    user.version = 2
    return user


@pytest.fixture
def adapter():
    adapter = MagicMock()
    adapter.verify_token = AsyncMock()
    with patch(f"{MODULE}.get_auth_adapter", return_value=adapter):
        yield adapter


@pytest.fixture
def session():
    with patch(f"{MODULE}.get_async_session") as mock_get_session:
        session = AsyncMock()
        mock_get_session.return_value.__aenter__.return_value = session
        yield session


def found(user):
    result = MagicMock()
    result.scalar_one_or_none.return_value = user
    return result


class TestResolveCurrentUser:
    @pytest.mark.asyncio
    async def test_no_token_is_anonymous(self, adapter):
        assert await resolve_current_user(None) is None
        adapter.verify_token.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_valid_token(self, adapter, session, stored_user):
        adapter.verify_token.return_value = Principal(subject=str(stored_user.id), version=2)
        session.execute.return_value = found(stored_user)

        assert await resolve_current_user("token") is stored_user

    @pytest.mark.asyncio
    async def test_invalid_token(self, adapter, session):
        adapter.verify_token.side_effect = AuthenticationError("Invalid token")

        assert await resolve_current_user("token") is None
        session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_subject_not_a_uuid(self, adapter, session):
        adapter.verify_token.return_value = Principal(subject="someone", version=1)

        assert await resolve_current_user("token") is None
        session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_user(self, adapter, session):
        adapter.verify_token.return_value = Principal(subject=str(uuid.uuid4()), version=1)
        session.execute.return_value = found(None)

        assert await resolve_current_user("token") is None

    @pytest.mark.asyncio
    async def test_stale_version(self, adapter, session, stored_user):
        adapter.verify_token.return_value = Principal(subject=str(stored_user.id), version=1)
        session.execute.return_value = found(stored_user)

        assert await resolve_current_user("token") is None


class TestPendingUser:
    @pytest.mark.asyncio
    async def test_can_be_awaited_repeatedly(self, adapter, session, stored_user):
        adapter.verify_token.return_value = Principal(subject=str(stored_user.id), version=2)
        session.execute.return_value = found(stored_user)

        pending = create_pending_user("token")

        assert await pending is stored_user
        assert await pending is stored_user
        adapter.verify_token.assert_awaited_once_with("token")

    @pytest.mark.asyncio
    async def test_anonymous(self):
        assert await create_pending_user(None) is None
