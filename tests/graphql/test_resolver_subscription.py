"""
Unit tests for subscription admission and event filtering
"""

import uuid
from unittest.mock import MagicMock, patch

import pytest

from chatter.graphql.access_control import Unauthorized
from chatter.graphql.resolvers.subscription import (
    admit_group_added,
    admit_message_added,
    subscribe_group_added,
    subscribe_message_added,
)
from chatter.pubsub.models import (
    GROUP_ADDED_CHANNEL,
    MESSAGE_ADDED_CHANNEL,
    GroupAddedEvent,
    MessageAddedEvent,
)

from .helpers import make_info, make_result, patched_session

MODULE = "chatter.graphql.resolvers.subscription"


def fake_publisher(*events):
    """A publisher whose listen() replays the given events then stops."""
    publisher = MagicMock()
    channels = []

    async def listen(channel):
        channels.append(channel)
        for event in events:
            yield event.model_dump_json()

    publisher.listen = listen
    publisher.channels = channels
    return publisher


class TestGroupAddedAdmission:
    @pytest.mark.asyncio
    async def test_self_is_admitted(self, current_user):
        assert await admit_group_added(make_info(current_user), current_user.id) is current_user

    @pytest.mark.asyncio
    async def test_other_user_is_rejected(self, current_user, other_user):
        with pytest.raises(Unauthorized):
            await admit_group_added(make_info(current_user), other_user.id)

    @pytest.mark.asyncio
    async def test_anonymous_is_rejected(self, current_user):
        with pytest.raises(Unauthorized):
            await admit_group_added(make_info(None), current_user.id)


class TestMessageAddedAdmission:
    @pytest.mark.asyncio
    async def test_member_of_all_groups_is_admitted(self, current_user):
        group_ids = [uuid.uuid4(), uuid.uuid4()]
        with patched_session(MODULE, make_result(scalars=group_ids)):
            user = await admit_message_added(make_info(current_user), group_ids)
        assert user is current_user

    @pytest.mark.asyncio
    async def test_any_foreign_group_is_rejected(self, current_user):
        mine, theirs = uuid.uuid4(), uuid.uuid4()
        with patched_session(MODULE, make_result(scalars=[mine])):
            with pytest.raises(Unauthorized):
                await admit_message_added(make_info(current_user), [mine, theirs])


class TestGroupAddedStream:
    @pytest.mark.asyncio
    async def test_streams_groups_created_by_others(self, current_user, other_user):
        added_by_friend = GroupAddedEvent(
            id=uuid.uuid4(),
            name="invited",
            creator_id=other_user.id,
            member_ids=[other_user.id, current_user.id],
        )
        created_myself = GroupAddedEvent(
            id=uuid.uuid4(),
            name="mine",
            creator_id=current_user.id,
            member_ids=[current_user.id],
        )
        not_a_member = GroupAddedEvent(
            id=uuid.uuid4(),
            name="elsewhere",
            creator_id=other_user.id,
            member_ids=[other_user.id],
        )
        publisher = fake_publisher(added_by_friend, created_myself, not_a_member)

        with patch(f"{MODULE}.get_event_publisher", return_value=publisher):
            groups = [
                group
                async for group in subscribe_group_added(make_info(current_user), current_user.id)
            ]

        assert publisher.channels == [GROUP_ADDED_CHANNEL]
        assert [g.name for g in groups] == ["invited"]

    @pytest.mark.asyncio
    async def test_rejected_before_listening(self, current_user, other_user):
        publisher = fake_publisher()
        with patch(f"{MODULE}.get_event_publisher", return_value=publisher):
            with pytest.raises(Unauthorized):
                async for _ in subscribe_group_added(make_info(current_user), other_user.id):
                    pass

        assert publisher.channels == []


class TestMessageAddedStream:
    @pytest.mark.asyncio
    async def test_streams_other_users_messages_in_watched_groups(
        self, current_user, other_user
    ):
        watched, unwatched = uuid.uuid4(), uuid.uuid4()
        from_other = MessageAddedEvent(
            id=uuid.uuid4(), user_id=other_user.id, group_id=watched, text="hey"
        )
        own = MessageAddedEvent(
            id=uuid.uuid4(), user_id=current_user.id, group_id=watched, text="mine"
        )
        elsewhere = MessageAddedEvent(
            id=uuid.uuid4(), user_id=other_user.id, group_id=unwatched, text="nope"
        )
        publisher = fake_publisher(from_other, own, elsewhere)

        with patched_session(MODULE, make_result(scalars=[watched])):
            with patch(f"{MODULE}.get_event_publisher", return_value=publisher):
                messages = [
                    message
                    async for message in subscribe_message_added(
                        make_info(current_user), [watched]
                    )
                ]

        assert publisher.channels == [MESSAGE_ADDED_CHANNEL]
        assert [m.text for m in messages] == ["hey"]
        assert messages[0].group_id == watched
        assert messages[0].user_id == other_user.id
