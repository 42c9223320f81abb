"""Publisher and listener for subscription events via Redis pub/sub."""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterable
from uuid import UUID

import redis.asyncio as redis

from ..dbmodels import Groups, Messages
from ..logging import get_logger
from ..redis_pool import get_redis_client
from .models import (
    GROUP_ADDED_CHANNEL,
    MESSAGE_ADDED_CHANNEL,
    GroupAddedEvent,
    MessageAddedEvent,
)

logger = get_logger(__name__)


class EventPublisher:
    def __init__(self, client: redis.Redis | None = None) -> None:
        self._redis = client or get_redis_client()

    async def publish_message_added(self, message: Messages) -> None:
        """Announce a new message to messageAdded subscribers."""
        event = MessageAddedEvent(
            id=message.id,
            user_id=message.user_id,
            group_id=message.group_id,
            text=message.text,
            created_at=message.created_at,
        )
        await self._publish(MESSAGE_ADDED_CHANNEL, event.model_dump_json())

    async def publish_group_added(
        self, group: Groups, creator_id: UUID, member_ids: Iterable[UUID]
    ) -> None:
        """Announce a new group to groupAdded subscribers."""
        event = GroupAddedEvent(
            id=group.id,
            name=group.name,
            creator_id=creator_id,
            member_ids=list(member_ids),
            created_at=group.created_at,
            updated_at=group.updated_at,
        )
        await self._publish(GROUP_ADDED_CHANNEL, event.model_dump_json())

    async def _publish(self, channel: str, data: str) -> None:
        logger.debug("Publishing event to Redis", channel=channel, data_length=len(data))
        await self._redis.publish(channel, data)

    async def listen(self, channel: str) -> AsyncIterator[str]:
        """Yield raw payloads published on a channel until the consumer stops."""
        pubsub = self._redis.pubsub()
        await pubsub.subscribe(channel)
        logger.info("Subscribed to Redis channel", channel=channel)
        try:
            async for msg in pubsub.listen():
                if msg.get("type") == "message":
                    yield msg["data"]
        finally:
            logger.info("Cleaning up Redis subscription", channel=channel)
            await pubsub.unsubscribe(channel)
            await pubsub.aclose()


def get_event_publisher() -> EventPublisher:
    """Get a publisher bound to the shared Redis pool."""
    return EventPublisher()
