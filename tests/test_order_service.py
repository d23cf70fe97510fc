"""Tests for order placement and order maintenance."""

import asyncio
from decimal import Decimal

import pytest
import sqlalchemy as sa

from backend.common.db import new_id
from backend.common.enums import OrderDetailStatus, OrderStatus
from backend.common.errors import InvalidRequest, NotFound, OperationFailed
from backend.inventory.repository import ProductRepository
from backend.orderdetails.repository import OrderDetailRepository
from backend.orders.model import OrderModel
from backend.orders.service import OrderService


async def _order_count(session_factory):
    async with session_factory() as session:
        return await session.scalar(sa.select(sa.func.count(OrderModel.id)))


class TestPlaceOrder:
    async def test_total_and_stock(self, order_service, catalog, stock_of):
        order = await order_service.place_order(catalog.user_id, [catalog.mouse, catalog.keyboard])

        # 25.00 + 75.50 + default shipping
        assert order.total == Decimal("150.49")
        assert order.shipping == Decimal("49.99")
        assert order.status is OrderStatus.PENDING
        assert await stock_of(catalog.mouse) == 9
        assert await stock_of(catalog.keyboard) == 2

    async def test_discount_and_shipping_override(self, order_service, catalog):
        order = await order_service.place_order(
            catalog.user_id,
            [catalog.mouse, catalog.keyboard, catalog.monitor],
            shipping=Decimal("10"),
            general_discount=15,
        )
        # round(200.50 * 0.85 + 10, 2) = 180.425 -> 180.43
        assert order.total == Decimal("180.43")
        assert order.general_discount == 15
        assert order.shipping == Decimal("10.00")

    async def test_details_follow_request_order(self, order_service, catalog):
        order = await order_service.place_order(catalog.user_id, [catalog.monitor, catalog.mouse])

        assert [d.product_id for d in order.details] == [catalog.monitor, catalog.mouse]
        assert [d.price for d in order.details] == [Decimal("100.00"), Decimal("25.00")]
        assert all(d.quantity == 1 for d in order.details)
        assert all(d.status is OrderDetailStatus.PENDING for d in order.details)
        assert all(d.order_id == order.id for d in order.details)

    async def test_persisted(self, order_service, catalog):
        placed = await order_service.place_order(catalog.user_id, [catalog.mouse], general_discount=10)
        loaded = await order_service.get_order(placed.id)

        assert loaded.total == placed.total == Decimal("72.49")
        assert loaded.user_id == catalog.user_id
        assert [d.id for d in loaded.details] == [d.id for d in placed.details]

    async def test_unknown_user(self, order_service, catalog, stock_of):
        with pytest.raises(NotFound):
            await order_service.place_order(new_id(), [catalog.mouse])
        assert await stock_of(catalog.mouse) == 10

    async def test_out_of_stock_rolls_back_everything(self, order_service, catalog, stock_of, session_factory):
        with pytest.raises(InvalidRequest, match="out of stock"):
            await order_service.place_order(catalog.user_id, [catalog.mouse, catalog.keyboard, catalog.headset])

        assert await stock_of(catalog.mouse) == 10
        assert await stock_of(catalog.keyboard) == 3
        assert await _order_count(session_factory) == 0

    async def test_unknown_product_is_out_of_stock(self, order_service, catalog, stock_of):
        with pytest.raises(InvalidRequest):
            await order_service.place_order(catalog.user_id, [catalog.mouse, new_id()])
        assert await stock_of(catalog.mouse) == 10

    async def test_failure_after_reservation_rolls_back(self, order_service, catalog, stock_of, session_factory):
        # the discount is validated after stock has been reserved
        with pytest.raises(InvalidRequest):
            await order_service.place_order(catalog.user_id, [catalog.mouse], general_discount=150)

        assert await stock_of(catalog.mouse) == 10
        assert await _order_count(session_factory) == 0

    async def test_duplicates_rejected(self, order_service, catalog, stock_of):
        with pytest.raises(InvalidRequest, match="Duplicate"):
            await order_service.place_order(catalog.user_id, [catalog.mouse, catalog.mouse])
        assert await stock_of(catalog.mouse) == 10

    async def test_empty_order_rejected(self, order_service, catalog):
        with pytest.raises(InvalidRequest):
            await order_service.place_order(catalog.user_id, [])

    async def test_unexpected_error_is_wrapped(self, order_service, catalog, stock_of, session_factory, monkeypatch):
        async def boom(self, details):
            raise RuntimeError("disk on fire")

        monkeypatch.setattr(OrderDetailRepository, "add_all", boom)

        with pytest.raises(OperationFailed) as exc_info:
            await order_service.place_order(catalog.user_id, [catalog.mouse])

        assert exc_info.value.message == "Fail to process order"
        assert exc_info.value.detail == "disk on fire"
        assert await stock_of(catalog.mouse) == 10
        assert await _order_count(session_factory) == 0

    async def test_timeout_is_wrapped(self, uow_factory, catalog, stock_of, monkeypatch):
        original = ProductRepository.get_many_in_stock

        async def slow(self, ids):
            products = await original(self, ids)
            await asyncio.sleep(1)
            return products

        monkeypatch.setattr(ProductRepository, "get_many_in_stock", slow)
        service = OrderService(uow_factory, Decimal("49.99"), tx_timeout=0.2)

        with pytest.raises(OperationFailed):
            await service.place_order(catalog.user_id, [catalog.mouse])
        assert await stock_of(catalog.mouse) == 10

    async def test_concurrent_orders_for_last_unit(self, order_service, catalog, stock_of, session_factory):
        results = await asyncio.gather(
            order_service.place_order(catalog.user_id, [catalog.monitor]),
            order_service.place_order(catalog.user_id, [catalog.monitor]),
            return_exceptions=True,
        )

        placed = [r for r in results if not isinstance(r, Exception)]
        failed = [r for r in results if isinstance(r, Exception)]
        assert len(placed) == 1
        assert len(failed) == 1
        assert isinstance(failed[0], InvalidRequest)
        assert "out of stock" in failed[0].message
        assert await stock_of(catalog.monitor) == 0
        assert await _order_count(session_factory) == 1


class TestOrderMaintenance:
    async def test_get_unknown(self, order_service, catalog):
        with pytest.raises(NotFound):
            await order_service.get_order(new_id())

    async def test_list_paginates(self, order_service, catalog):
        for _ in range(3):
            await order_service.place_order(catalog.user_id, [catalog.mouse])

        first = await order_service.list_orders(page=1, limit=2)
        second = await order_service.list_orders(page=2, limit=2)

        assert first["total"] == 3
        assert len(first["data"]) == 2
        assert len(second["data"]) == 1
        assert first["data"][0]["details"][0]["product_id"] == catalog.mouse

    async def test_update_status(self, order_service, catalog):
        order = await order_service.place_order(catalog.user_id, [catalog.mouse])

        updated = await order_service.update_status(order.id, OrderStatus.SHIPPED)

        assert updated.status is OrderStatus.SHIPPED
        assert (await order_service.get_order(order.id)).status is OrderStatus.SHIPPED

    async def test_legacy_return_value(self):
        assert OrderStatus("retunr") is OrderStatus.RETURN
        assert OrderStatus.RETURN.value == "return"

    async def test_update_order_amounts(self, order_service, catalog):
        order = await order_service.place_order(catalog.user_id, [catalog.mouse])

        await order_service.update_order(order.id, Decimal("60"), Decimal("5.5"), 10)
        loaded = await order_service.get_order(order.id)

        assert loaded.total == Decimal("60.00")
        assert loaded.shipping == Decimal("5.50")
        assert loaded.general_discount == 10

    async def test_soft_delete_hides_order_and_keeps_stock(self, order_service, detail_service, catalog, stock_of):
        order = await order_service.place_order(catalog.user_id, [catalog.mouse])

        deleted = await order_service.soft_delete(order.id)

        assert deleted.deleted_at is not None
        with pytest.raises(NotFound):
            await order_service.get_order(order.id)
        with pytest.raises(NotFound):
            await detail_service.get_detail(order.details[0].id)
        with pytest.raises(NotFound):
            await order_service.soft_delete(order.id)
        assert await stock_of(catalog.mouse) == 9
        assert (await order_service.list_orders(1, 5))["total"] == 0
