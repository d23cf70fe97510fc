from typing import Optional

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from .model import CredentialModel


class CredentialRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def add(self, email: str, password_hash: str) -> int:
        row = CredentialModel(email=email, password=password_hash)
        self.session.add(row)
        await self.session.flush()
        return row.id

    async def get_by_email(self, email: str) -> Optional[CredentialModel]:
        res = await self.session.execute(sa.select(CredentialModel).where(CredentialModel.email == email))
        return res.scalar_one_or_none()
