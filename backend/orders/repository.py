from datetime import datetime
from typing import List, Optional, Tuple

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..common.enums import OrderStatus
from ..orderdetails.model import OrderDetailModel
from ..orderdetails.repository import to_entity as detail_to_entity
from .entity import Order
from .model import OrderModel


def _to_entity(row: OrderModel) -> Order:
    return Order(
        id=row.id,
        user_id=row.user_id,
        total=row.total,
        shipping=row.shipping,
        general_discount=row.general_discount,
        date=row.date,
        status=OrderStatus(row.status),
        details=[detail_to_entity(d) for d in row.details if d.deleted_at is None],
        deleted_at=row.deleted_at,
    )


class OrderRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    def _select(self):
        return (
            sa.select(OrderModel)
            .where(OrderModel.deleted_at.is_(None))
            .options(selectinload(OrderModel.details))
        )

    async def get(self, order_id: str) -> Optional[Order]:
        res = await self.session.execute(
            self._select().where(OrderModel.id == order_id).execution_options(populate_existing=True)
        )
        row = res.scalar_one_or_none()
        return _to_entity(row) if row else None

    async def list(self, page: int, limit: int) -> Tuple[List[Order], int]:
        total = await self.session.scalar(
            sa.select(sa.func.count(OrderModel.id)).where(OrderModel.deleted_at.is_(None))
        )
        res = await self.session.execute(
            self._select().order_by(OrderModel.date.desc()).offset((page - 1) * limit).limit(limit)
        )
        return [_to_entity(row) for row in res.scalars()], int(total or 0)

    async def add(self, order: Order) -> None:
        """Insert the order row only; details go through the detail repository."""
        row = OrderModel(
            id=order.id,
            user_id=order.user_id,
            total=order.total,
            shipping=order.shipping,
            general_discount=order.general_discount,
            date=order.date,
            status=order.status.value,
        )
        self.session.add(row)
        await self.session.flush()

    async def save(self, order: Order) -> None:
        await self.session.execute(
            sa.update(OrderModel)
            .where(OrderModel.id == order.id)
            .values(
                total=order.total,
                shipping=order.shipping,
                general_discount=order.general_discount,
                status=order.status.value,
            )
            .execution_options(synchronize_session=False)
        )

    async def soft_delete(self, order_id: str, when: datetime) -> None:
        """Stamp ``deleted_at`` on the order and every one of its details."""
        await self.session.execute(
            sa.update(OrderModel)
            .where(OrderModel.id == order_id)
            .values(deleted_at=when)
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(
            sa.update(OrderDetailModel)
            .where(OrderDetailModel.order_id == order_id, OrderDetailModel.deleted_at.is_(None))
            .values(deleted_at=when)
            .execution_options(synchronize_session=False)
        )
