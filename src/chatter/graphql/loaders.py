from uuid import UUID

from sqlalchemy import select
from strawberry.dataloader import DataLoader

from ..database.connection import get_async_session
from ..dbmodels import Groups, Users


async def load_users(keys: list[UUID]) -> list[Users | None]:
    """Batch load users by ID."""
    async with get_async_session() as session:
        stmt = select(Users).where(Users.id.in_(keys))
        result = await session.execute(stmt)
        users = result.scalars().all()
        users_map = {user.id: user for user in users}
        return [users_map.get(key) for key in keys]


async def load_groups(keys: list[UUID]) -> list[Groups | None]:
    """Batch load groups by ID."""
    async with get_async_session() as session:
        stmt = select(Groups).where(Groups.id.in_(keys))
        result = await session.execute(stmt)
        groups = result.scalars().all()
        groups_map = {group.id: group for group in groups}
        return [groups_map.get(key) for key in keys]


class Loaders:
    def __init__(self):
        self.user_loader = DataLoader(load_fn=load_users)
        self.group_loader = DataLoader(load_fn=load_groups)
