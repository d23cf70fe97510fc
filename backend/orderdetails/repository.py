from typing import List, Optional, Sequence

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from ..common.enums import OrderDetailStatus
from .entity import OrderDetail
from .model import OrderDetailModel


def to_entity(row: OrderDetailModel) -> OrderDetail:
    return OrderDetail(
        id=row.id,
        order_id=row.order_id,
        product_id=row.product_id,
        position=row.position,
        quantity=row.quantity,
        price=row.price,
        discount=row.discount,
        status=OrderDetailStatus(row.status),
        deleted_at=row.deleted_at,
    )


class OrderDetailRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    @staticmethod
    def _select(detail_id: str, for_update: bool = False):
        stmt = sa.select(OrderDetailModel).where(
            OrderDetailModel.id == detail_id,
            OrderDetailModel.deleted_at.is_(None),
        )
        if for_update:
            stmt = stmt.with_for_update()
        return stmt

    async def _row(self, detail_id: str, for_update: bool = False) -> Optional[OrderDetailModel]:
        res = await self.session.execute(self._select(detail_id, for_update))
        return res.scalar_one_or_none()

    async def get(self, detail_id: str, for_update: bool = False) -> Optional[OrderDetail]:
        """Load a live detail; ``for_update`` locks its row until the transaction ends."""
        row = await self._row(detail_id, for_update)
        return to_entity(row) if row else None

    async def add_all(self, details: Sequence[OrderDetail]) -> List[OrderDetail]:
        rows = [
            OrderDetailModel(
                id=d.id,
                order_id=d.order_id,
                product_id=d.product_id,
                position=d.position,
                quantity=d.quantity,
                price=d.price,
                discount=d.discount,
                status=d.status.value,
            )
            for d in details
        ]
        self.session.add_all(rows)
        await self.session.flush()
        return [to_entity(row) for row in rows]

    async def save(self, detail: OrderDetail) -> OrderDetail:
        row = await self._row(detail.id)
        row.product_id = detail.product_id
        row.quantity = detail.quantity
        row.price = detail.price
        row.discount = detail.discount
        row.status = detail.status.value
        await self.session.flush()
        return to_entity(row)
