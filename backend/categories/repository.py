from typing import List, Optional, Tuple

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from .entity import Category
from .model import CategoryModel


def _to_entity(row: CategoryModel) -> Category:
    return Category(id=row.id, name=row.name)


class CategoryRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, category_id: str) -> Optional[Category]:
        row = await self.session.get(CategoryModel, category_id)
        return _to_entity(row) if row else None

    async def get_by_name(self, name: str) -> Optional[Category]:
        res = await self.session.execute(sa.select(CategoryModel).where(CategoryModel.name == name))
        row = res.scalar_one_or_none()
        return _to_entity(row) if row else None

    async def list(self, page: int, limit: int) -> Tuple[List[Category], int]:
        total = await self.session.scalar(sa.select(sa.func.count(CategoryModel.id)))
        res = await self.session.execute(
            sa.select(CategoryModel).order_by(CategoryModel.name).offset((page - 1) * limit).limit(limit)
        )
        return [_to_entity(row) for row in res.scalars()], int(total or 0)

    async def add(self, category: Category) -> Category:
        row = CategoryModel(id=category.id, name=category.name)
        self.session.add(row)
        await self.session.flush()
        return _to_entity(row)

    async def save(self, category: Category) -> Category:
        row = await self.session.get(CategoryModel, category.id)
        row.name = category.name
        await self.session.flush()
        return _to_entity(row)
