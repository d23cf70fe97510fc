import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence

from ..common.enums import OrderDetailStatus, OrderStatus
from ..common.errors import InvalidRequest, NotFound
from ..common.pagination import page_dict
from ..common.unit_of_work import UnitOfWorkFactory, guarded
from ..orderdetails.entity import OrderDetail
from .entity import Order
from .pricing import compute_order_total, to_money

_logger = logging.getLogger(__name__)


class OrderService:
    def __init__(self, uow_factory: UnitOfWorkFactory, default_shipping: Decimal, tx_timeout: float):
        self._uow_factory = uow_factory
        self._default_shipping = to_money(default_shipping)
        self._tx_timeout = tx_timeout

    async def place_order(
        self,
        user_id: str,
        product_ids: Sequence[str],
        shipping: Optional[Decimal] = None,
        general_discount: Optional[int] = None,
    ) -> Order:
        """Create an order with one detail per product, reserving one unit each.

        Stock reservations, the order row and its details are committed
        together or not at all.
        """
        return await guarded(
            self._place_order(user_id, list(product_ids), shipping, general_discount),
            self._tx_timeout,
            "Fail to process order",
        )

    async def _place_order(
        self,
        user_id: str,
        product_ids: List[str],
        shipping: Optional[Decimal],
        general_discount: Optional[int],
    ) -> Order:
        if not product_ids:
            raise InvalidRequest("An order needs at least one product")
        if len(set(product_ids)) != len(product_ids):
            raise InvalidRequest("Duplicate product IDs in order")
        shipping_cost = to_money(shipping) if shipping is not None else self._default_shipping

        async with self._uow_factory() as uow:
            user = await uow.users.get(user_id)
            if user is None:
                raise NotFound(f"User with ID {user_id} not found")

            products = await uow.products.get_many_in_stock(product_ids)
            if len(products) < len(product_ids):
                raise InvalidRequest("One or more items out of stock")

            for product in products:
                await uow.ledger.reserve(product.id, 1)

            total = compute_order_total((p.price for p in products), shipping_cost, general_discount)
            order = Order(
                user_id=user.id,
                total=total,
                shipping=shipping_cost,
                general_discount=general_discount,
                date=datetime.now(timezone.utc),
                status=OrderStatus.PENDING,
            )
            await uow.orders.add(order)

            details = [
                OrderDetail(
                    order_id=order.id,
                    product_id=product.id,
                    price=to_money(product.price),
                    quantity=1,
                    status=OrderDetailStatus.PENDING,
                    position=position,
                )
                for position, product in enumerate(products)
            ]
            order.details = await uow.details.add_all(details)
            await uow.commit()

        _logger.info(
            "Order placed | order_id=%s user_id=%s items=%s total=%s",
            order.id, user_id, len(order.details), order.total,
        )
        return order

    async def list_orders(self, page: int, limit: int) -> Dict[str, Any]:
        async def _work():
            async with self._uow_factory() as uow:
                orders, total = await uow.orders.list(page, limit)
            return page_dict(orders, total, page, limit)

        return await guarded(_work(), self._tx_timeout, "Fail to retrieve orders")

    async def get_order(self, order_id: str) -> Order:
        async def _work():
            async with self._uow_factory() as uow:
                return await self._load(uow, order_id)

        return await guarded(_work(), self._tx_timeout, f"Fail to retrieve order ID:{order_id}")

    async def update_order(
        self,
        order_id: str,
        total: Decimal,
        shipping: Decimal,
        general_discount: Optional[int] = None,
    ) -> Order:
        """Overwrite the stored amounts of an order as given by an admin."""

        async def _work():
            async with self._uow_factory() as uow:
                order = await self._load(uow, order_id)
                order.total = to_money(total)
                order.shipping = to_money(shipping)
                order.general_discount = general_discount
                await uow.orders.save(order)
                await uow.commit()
            return order

        return await guarded(_work(), self._tx_timeout, "Fail to update order")

    async def update_status(self, order_id: str, status: OrderStatus) -> Order:
        async def _work():
            async with self._uow_factory() as uow:
                order = await self._load(uow, order_id)
                order.status = status
                await uow.orders.save(order)
                await uow.commit()
            _logger.info("Order status changed | order_id=%s status=%s", order_id, status.value)
            return order

        return await guarded(_work(), self._tx_timeout, "Fail to update order Status")

    async def soft_delete(self, order_id: str) -> Order:
        async def _work():
            async with self._uow_factory() as uow:
                order = await self._load(uow, order_id)
                order.deleted_at = datetime.now(timezone.utc)
                await uow.orders.soft_delete(order_id, order.deleted_at)
                await uow.commit()
            _logger.info("Order soft-deleted | order_id=%s", order_id)
            return order

        return await guarded(_work(), self._tx_timeout, "Fail to delete order")

    @staticmethod
    async def _load(uow, order_id: str) -> Order:
        order = await uow.orders.get(order_id)
        if order is None:
            raise NotFound(f"Order ID: {order_id}, not found.")
        return order
