"""
Unit tests for user resolvers
"""

import uuid
from datetime import UTC, datetime
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from chatter.dbmodels import Groups, Messages
from chatter.graphql.access_control import Unauthorized
from chatter.graphql.resolvers.user import (
    resolve_user,
    resolve_user_email,
    resolve_user_friends,
    resolve_user_groups,
    resolve_user_jwt,
    resolve_user_messages,
)
from chatter.graphql.types.user import User

from .helpers import make_info, make_result, patched_session

MODULE = "chatter.graphql.resolvers.user"


class TestUserQuery:
    @pytest.mark.asyncio
    async def test_lookup_self_by_id(self, current_user):
        user = await resolve_user(make_info(current_user), id=current_user.id)
        assert user.id == current_user.id
        assert user.username == current_user.username

    @pytest.mark.asyncio
    async def test_lookup_self_by_email(self, current_user):
        user = await resolve_user(make_info(current_user), email=current_user.email)
        assert user.id == current_user.id

    @pytest.mark.asyncio
    async def test_lookup_self_by_email_ignores_case(self, current_user):
        user = await resolve_user(make_info(current_user), email=" Alice@Example.com ")
        assert user.id == current_user.id

    @pytest.mark.asyncio
    async def test_lookup_other_user_is_rejected(self, current_user, other_user):
        with pytest.raises(Unauthorized):
            await resolve_user(make_info(current_user), id=other_user.id)

        with pytest.raises(Unauthorized):
            await resolve_user(make_info(current_user), email=other_user.email)

    @pytest.mark.asyncio
    async def test_lookup_without_arguments_is_rejected(self, current_user):
        with pytest.raises(Unauthorized):
            await resolve_user(make_info(current_user))

    @pytest.mark.asyncio
    async def test_anonymous_is_rejected(self, current_user):
        with pytest.raises(Unauthorized):
            await resolve_user(make_info(None), id=current_user.id)


class TestEmail:
    @pytest.mark.asyncio
    async def test_own_email(self, current_user):
        user = User.from_model(current_user)
        assert await resolve_user_email(user, make_info(current_user)) == current_user.email

    @pytest.mark.asyncio
    async def test_other_users_email_is_rejected(self, current_user, other_user):
        user = User.from_model(other_user)
        with pytest.raises(Unauthorized):
            await resolve_user_email(user, make_info(current_user))


class TestFriends:
    @pytest.mark.asyncio
    async def test_own_friends(self, current_user):
        rows = [SimpleNamespace(id=uuid.uuid4(), username="bob")]
        with patched_session(MODULE, make_result(rows=rows)):
            friends = await resolve_user_friends(
                User.from_model(current_user), make_info(current_user)
            )

        assert [f.username for f in friends] == ["bob"]

    @pytest.mark.asyncio
    async def test_other_users_friends_are_rejected(self, current_user, other_user):
        with patched_session(MODULE) as session:
            with pytest.raises(Unauthorized):
                await resolve_user_friends(User.from_model(other_user), make_info(current_user))

        session.execute.assert_not_awaited()


class TestGroups:
    @pytest.mark.asyncio
    async def test_own_groups(self, current_user):
        group = MagicMock(spec=Groups)
        group.id = uuid.uuid4()
        group.name = "crew"
        group.created_at = group.updated_at = datetime.now(UTC)

        with patched_session(MODULE, make_result(scalars=[group])):
            groups = await resolve_user_groups(
                User.from_model(current_user), make_info(current_user)
            )

        assert [g.name for g in groups] == ["crew"]

    @pytest.mark.asyncio
    async def test_other_users_groups_are_rejected(self, current_user, other_user):
        with pytest.raises(Unauthorized):
            await resolve_user_groups(User.from_model(other_user), make_info(current_user))


class TestMessages:
    @pytest.mark.asyncio
    async def test_own_messages_newest_first(self, current_user):
        message = MagicMock(spec=Messages)
        message.id = uuid.uuid4()
        message.user_id = current_user.id
        message.group_id = uuid.uuid4()
        message.text = "hi"
        message.created_at = datetime.now(UTC)

        with patched_session(MODULE, make_result(scalars=[message])) as session:
            messages = await resolve_user_messages(
                User.from_model(current_user), make_info(current_user)
            )

        assert [m.id for m in messages] == [message.id]
        assert "ORDER BY messages.created_at DESC" in str(session.execute.call_args.args[0])

    @pytest.mark.asyncio
    async def test_other_users_messages_are_rejected(self, current_user, other_user):
        with pytest.raises(Unauthorized):
            await resolve_user_messages(User.from_model(other_user), make_info(current_user))


class TestJwt:
    def test_returns_attached_token(self, current_user):
        assert resolve_user_jwt(User.from_model(current_user, token="abc")) == "abc"

    def test_no_token(self, current_user):
        assert resolve_user_jwt(User.from_model(current_user)) is None
