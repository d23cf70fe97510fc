import logging
from typing import Optional

from ..common.errors import InvalidRequest, NotFound
from ..common.unit_of_work import UnitOfWorkFactory, guarded
from ..orders.pricing import compute_line_price
from .entity import OrderDetail

_logger = logging.getLogger(__name__)


class OrderDetailService:
    def __init__(self, uow_factory: UnitOfWorkFactory, tx_timeout: float):
        self._uow_factory = uow_factory
        self._tx_timeout = tx_timeout

    async def get_detail(self, detail_id: str) -> OrderDetail:
        async def _work():
            async with self._uow_factory() as uow:
                return await self._load(uow, detail_id)

        return await guarded(_work(), self._tx_timeout, f"Failed to retrieve order detail ID:{detail_id}")

    async def update_order_detail(
        self,
        detail_id: str,
        new_product_id: Optional[str] = None,
        quantity: Optional[int] = None,
        discount: Optional[int] = None,
    ) -> OrderDetail:
        """Swap the product, change the quantity and/or the line discount.

        Stock follows the detail: units held by the detail are given back to
        the product they came from and taken from the product now assigned.
        The price is always recomputed from the assigned product.
        """
        return await guarded(
            self._update(detail_id, new_product_id, quantity, discount),
            self._tx_timeout,
            f"Failed to update order detail ID:{detail_id}",
        )

    async def _update(
        self,
        detail_id: str,
        new_product_id: Optional[str],
        quantity: Optional[int],
        discount: Optional[int],
    ) -> OrderDetail:
        if quantity is not None and quantity < 1:
            raise InvalidRequest("Quantity must be at least 1")

        async with self._uow_factory() as uow:
            detail = await self._load(uow, detail_id, for_update=True)
            previous_quantity = detail.quantity

            if new_product_id is not None and new_product_id != detail.product_id:
                product = await uow.products.get(new_product_id)
                if product is None:
                    raise NotFound(f"Product ID {new_product_id} not found.")
                target_quantity = quantity if quantity is not None else previous_quantity
                if target_quantity > product.stock:
                    raise InvalidRequest("Insufficient product stock")
                await uow.ledger.release(detail.product_id, previous_quantity)
                await uow.ledger.reserve(product.id, target_quantity)
                _logger.info(
                    "Order detail product swapped | detail_id=%s from=%s to=%s qty=%s",
                    detail_id, detail.product_id, product.id, target_quantity,
                )
                detail.product_id = product.id
                detail.quantity = target_quantity
            else:
                product = await uow.products.get(detail.product_id)
                if product is None:
                    raise NotFound(f"Product ID {detail.product_id} not found.")
                if quantity is not None:
                    # units already held by this detail count as available
                    if quantity > product.stock + previous_quantity:
                        raise InvalidRequest("Insufficient product stock")
                    await uow.ledger.adjust(product.id, quantity - previous_quantity)
                    detail.quantity = quantity

            detail.price = compute_line_price(product.price, detail.quantity, discount)
            detail.discount = discount
            detail = await uow.details.save(detail)
            await uow.commit()

        _logger.info(
            "Order detail updated | detail_id=%s product_id=%s qty=%s price=%s",
            detail.id, detail.product_id, detail.quantity, detail.price,
        )
        return detail

    @staticmethod
    async def _load(uow, detail_id: str, for_update: bool = False) -> OrderDetail:
        detail = await uow.details.get(detail_id, for_update=for_update)
        if detail is None:
            raise NotFound(f"Detail ID:{detail_id}, not found.")
        return detail
