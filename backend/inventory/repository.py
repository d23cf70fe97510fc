from typing import Dict, List, Optional, Sequence, Tuple

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from .entity import Product
from .model import ProductModel


def _to_entity(row: ProductModel) -> Product:
    return Product(
        id=row.id,
        name=row.name,
        description=row.description,
        price=row.price,
        stock=row.stock,
        img_url=row.img_url,
        category_id=row.category_id,
    )


class ProductRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, product_id: str) -> Optional[Product]:
        row = await self.session.get(ProductModel, product_id, populate_existing=True)
        return _to_entity(row) if row else None

    async def get_many_in_stock(self, ids: Sequence[str]) -> List[Product]:
        """Products among ``ids`` that have stock left, in request order.

        Rows are locked for the rest of the transaction where the backend
        supports SELECT ... FOR UPDATE.
        """
        if not ids:
            return []
        stmt = (
            sa.select(ProductModel)
            .where(ProductModel.id.in_(list(ids)), ProductModel.stock > 0)
            .with_for_update()
        )
        res = await self.session.execute(stmt)
        by_id: Dict[str, Product] = {row.id: _to_entity(row) for row in res.scalars()}
        return [by_id[i] for i in ids if i in by_id]

    async def list_in_stock(self, page: int, limit: int) -> Tuple[List[Product], int]:
        where = ProductModel.stock > 0
        total = await self.session.scalar(sa.select(sa.func.count(ProductModel.id)).where(where))
        res = await self.session.execute(
            sa.select(ProductModel).where(where).order_by(ProductModel.name).offset((page - 1) * limit).limit(limit)
        )
        return [_to_entity(row) for row in res.scalars()], int(total or 0)

    async def list_all(self) -> List[Product]:
        res = await self.session.execute(sa.select(ProductModel).order_by(ProductModel.name))
        return [_to_entity(row) for row in res.scalars()]

    async def count(self) -> int:
        return int(await self.session.scalar(sa.select(sa.func.count(ProductModel.id))) or 0)

    async def add(self, product: Product) -> Product:
        row = ProductModel(
            id=product.id or None,
            name=product.name,
            description=product.description,
            price=product.price,
            stock=product.stock,
            img_url=product.img_url,
            category_id=product.category_id,
        )
        self.session.add(row)
        await self.session.flush()
        return _to_entity(row)

    async def save(self, product: Product) -> Product:
        row = await self.session.get(ProductModel, product.id)
        row.name = product.name
        row.description = product.description
        row.price = product.price
        row.stock = product.stock
        row.img_url = product.img_url
        row.category_id = product.category_id
        await self.session.flush()
        return _to_entity(row)

    async def delete(self, product_id: str) -> int:
        res = await self.session.execute(sa.delete(ProductModel).where(ProductModel.id == product_id))
        return res.rowcount or 0
