import logging

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from ..common.errors import InsufficientStock, InvalidRequest, NotFound
from .model import ProductModel

_logger = logging.getLogger(__name__)


class StockLedger:
    """Stock movements for products, bound to the caller's transaction.

    Every movement is one conditional UPDATE, so the check and the write are
    the same statement and stock can never drop below zero.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def reserve(self, product_id: str, quantity: int) -> None:
        self._check_quantity(quantity)
        stmt = (
            sa.update(ProductModel)
            .where(ProductModel.id == product_id, ProductModel.stock >= quantity)
            .values(stock=ProductModel.stock - quantity)
            .execution_options(synchronize_session=False)
        )
        res = await self.session.execute(stmt)
        if (res.rowcount or 0) == 0:
            await self._ensure_exists(product_id)
            _logger.warning("Stock reservation refused | product_id=%s qty=%s", product_id, quantity)
            raise InsufficientStock(product_id, quantity)
        _logger.debug("Stock reserved | product_id=%s qty=%s", product_id, quantity)

    async def release(self, product_id: str, quantity: int) -> None:
        self._check_quantity(quantity)
        stmt = (
            sa.update(ProductModel)
            .where(ProductModel.id == product_id)
            .values(stock=ProductModel.stock + quantity)
            .execution_options(synchronize_session=False)
        )
        res = await self.session.execute(stmt)
        if (res.rowcount or 0) == 0:
            raise NotFound(f"Product ID {product_id} not found.")
        _logger.debug("Stock released | product_id=%s qty=%s", product_id, quantity)

    async def adjust(self, product_id: str, delta: int) -> None:
        """Consume ``delta`` units when positive, give them back when negative."""
        if delta > 0:
            await self.reserve(product_id, delta)
        elif delta < 0:
            await self.release(product_id, -delta)

    async def _ensure_exists(self, product_id: str) -> None:
        found = await self.session.scalar(sa.select(ProductModel.id).where(ProductModel.id == product_id))
        if found is None:
            raise NotFound(f"Product ID {product_id} not found.")

    @staticmethod
    def _check_quantity(quantity: int) -> None:
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity <= 0:
            raise InvalidRequest("Quantity must be a positive integer")
