from datetime import datetime, timezone
from typing import List, Optional, Tuple

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from ..common.enums import Role
from .entity import User
from .model import UserModel


def _to_entity(row: UserModel) -> User:
    return User(
        id=row.id,
        email=row.email,
        name=row.name,
        address=row.address,
        phone=row.phone,
        country=row.country,
        city=row.city,
        role=Role(row.role),
        credential_id=row.credential_id,
        deleted_at=row.deleted_at,
    )


class UserRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def _row(self, user_id: str) -> Optional[UserModel]:
        res = await self.session.execute(
            sa.select(UserModel).where(UserModel.id == user_id, UserModel.deleted_at.is_(None))
        )
        return res.scalar_one_or_none()

    async def get(self, user_id: str) -> Optional[User]:
        row = await self._row(user_id)
        return _to_entity(row) if row else None

    async def get_by_credential_id(self, credential_id: int) -> Optional[User]:
        res = await self.session.execute(
            sa.select(UserModel).where(UserModel.credential_id == credential_id, UserModel.deleted_at.is_(None))
        )
        row = res.scalar_one_or_none()
        return _to_entity(row) if row else None

    async def list(self, page: int, limit: int) -> Tuple[List[User], int]:
        where = UserModel.deleted_at.is_(None)
        total = await self.session.scalar(sa.select(sa.func.count(UserModel.id)).where(where))
        res = await self.session.execute(
            sa.select(UserModel).where(where).order_by(UserModel.email).offset((page - 1) * limit).limit(limit)
        )
        return [_to_entity(row) for row in res.scalars()], int(total or 0)

    async def add(self, user: User) -> User:
        row = UserModel(
            id=user.id,
            email=user.email,
            name=user.name,
            address=user.address,
            phone=user.phone,
            country=user.country,
            city=user.city,
            role=user.role.value,
            credential_id=user.credential_id,
        )
        self.session.add(row)
        await self.session.flush()
        return _to_entity(row)

    async def save(self, user: User) -> User:
        row = await self._row(user.id)
        row.email = user.email
        row.name = user.name
        row.address = user.address
        row.phone = user.phone
        row.country = user.country
        row.city = user.city
        row.role = user.role.value
        await self.session.flush()
        return _to_entity(row)

    async def soft_delete(self, user_id: str) -> int:
        res = await self.session.execute(
            sa.update(UserModel)
            .where(UserModel.id == user_id, UserModel.deleted_at.is_(None))
            .values(deleted_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        return res.rowcount or 0
