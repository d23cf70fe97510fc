"""Tests for order detail updates and the stock they move."""

import asyncio
from decimal import Decimal

import pytest
from sqlalchemy.dialects import postgresql

from backend.common.db import new_id
from backend.common.errors import InvalidRequest, NotFound, OperationFailed
from backend.orderdetails.repository import OrderDetailRepository


@pytest.fixture
async def keyboard_detail(order_service, catalog):
    """An order holding one keyboard; keyboard stock drops from 3 to 2."""
    order = await order_service.place_order(catalog.user_id, [catalog.keyboard])
    return order.details[0]


@pytest.fixture
async def mouse_detail(order_service, catalog):
    order = await order_service.place_order(catalog.user_id, [catalog.mouse])
    return order.details[0]


class TestQuantityChange:
    async def test_increase_consumes_stock(self, detail_service, keyboard_detail, catalog, stock_of):
        detail = await detail_service.update_order_detail(keyboard_detail.id, quantity=3)

        assert detail.quantity == 3
        assert detail.price == Decimal("226.50")
        assert await stock_of(catalog.keyboard) == 0

    async def test_reduce_returns_stock(self, detail_service, keyboard_detail, catalog, stock_of):
        await detail_service.update_order_detail(keyboard_detail.id, quantity=3)

        detail = await detail_service.update_order_detail(keyboard_detail.id, quantity=1)

        assert detail.quantity == 1
        assert detail.price == Decimal("75.50")
        assert await stock_of(catalog.keyboard) == 2

    async def test_reduce_with_discount(self, detail_service, keyboard_detail, catalog, stock_of):
        await detail_service.update_order_detail(keyboard_detail.id, quantity=3)

        detail = await detail_service.update_order_detail(keyboard_detail.id, quantity=1, discount=10)

        assert detail.price == Decimal("67.95")
        assert detail.discount == 10
        assert await stock_of(catalog.keyboard) == 2

    async def test_exceeding_stock_changes_nothing(self, detail_service, keyboard_detail, catalog, stock_of):
        with pytest.raises(InvalidRequest, match="Insufficient"):
            await detail_service.update_order_detail(keyboard_detail.id, quantity=4)

        detail = await detail_service.get_detail(keyboard_detail.id)
        assert detail.quantity == 1
        assert detail.price == Decimal("75.50")
        assert await stock_of(catalog.keyboard) == 2

    async def test_zero_quantity_rejected(self, detail_service, keyboard_detail):
        with pytest.raises(InvalidRequest):
            await detail_service.update_order_detail(keyboard_detail.id, quantity=0)


class TestProductSwap:
    async def test_swap_with_quantity(self, detail_service, mouse_detail, catalog, stock_of):
        detail = await detail_service.update_order_detail(
            mouse_detail.id, new_product_id=catalog.keyboard, quantity=2
        )

        assert detail.product_id == catalog.keyboard
        assert detail.quantity == 2
        assert detail.price == Decimal("151.00")
        assert await stock_of(catalog.mouse) == 10
        assert await stock_of(catalog.keyboard) == 1

    async def test_swap_with_discount(self, detail_service, mouse_detail, catalog):
        detail = await detail_service.update_order_detail(
            mouse_detail.id, new_product_id=catalog.keyboard, quantity=2, discount=10
        )

        assert detail.price == Decimal("135.90")

    async def test_swap_keeps_quantity(self, detail_service, mouse_detail, catalog, stock_of):
        detail = await detail_service.update_order_detail(mouse_detail.id, new_product_id=catalog.monitor)

        assert detail.product_id == catalog.monitor
        assert detail.quantity == 1
        assert detail.price == Decimal("100.00")
        assert await stock_of(catalog.monitor) == 0
        assert await stock_of(catalog.mouse) == 10

    async def test_swap_to_unknown_product(self, detail_service, mouse_detail, catalog, stock_of):
        with pytest.raises(NotFound):
            await detail_service.update_order_detail(mouse_detail.id, new_product_id=new_id(), quantity=1)
        assert await stock_of(catalog.mouse) == 9

    async def test_swap_insufficient_stock_changes_nothing(self, detail_service, mouse_detail, catalog, stock_of):
        with pytest.raises(InvalidRequest):
            await detail_service.update_order_detail(mouse_detail.id, new_product_id=catalog.monitor, quantity=2)

        detail = await detail_service.get_detail(mouse_detail.id)
        assert detail.product_id == catalog.mouse
        assert await stock_of(catalog.mouse) == 9
        assert await stock_of(catalog.monitor) == 1

    async def test_same_product_is_a_quantity_change(self, detail_service, mouse_detail, catalog, stock_of):
        detail = await detail_service.update_order_detail(
            mouse_detail.id, new_product_id=catalog.mouse, quantity=4
        )

        assert detail.quantity == 4
        assert await stock_of(catalog.mouse) == 6


class TestPriceOnly:
    async def test_discount_only(self, detail_service, mouse_detail, catalog, stock_of):
        detail = await detail_service.update_order_detail(mouse_detail.id, discount=20)

        assert detail.price == Decimal("20.00")
        assert detail.quantity == 1
        assert await stock_of(catalog.mouse) == 9

    async def test_omitting_discount_clears_it(self, detail_service, mouse_detail):
        await detail_service.update_order_detail(mouse_detail.id, discount=20)

        detail = await detail_service.update_order_detail(mouse_detail.id)

        assert detail.discount is None
        assert detail.price == Decimal("25.00")


async def test_order_total_is_a_snapshot(order_service, detail_service, mouse_detail):
    before = await order_service.get_order(mouse_detail.order_id)

    await detail_service.update_order_detail(mouse_detail.id, quantity=5)

    after = await order_service.get_order(mouse_detail.order_id)
    assert after.total == before.total
    assert after.details[0].quantity == 5


async def test_unknown_detail(detail_service, catalog):
    with pytest.raises(NotFound):
        await detail_service.update_order_detail(new_id(), quantity=1)


async def test_unexpected_error_is_wrapped(detail_service, mouse_detail, catalog, stock_of, monkeypatch):
    async def boom(self, detail):
        raise RuntimeError("lost connection")

    monkeypatch.setattr(OrderDetailRepository, "save", boom)

    with pytest.raises(OperationFailed) as exc_info:
        await detail_service.update_order_detail(mouse_detail.id, quantity=3)

    assert mouse_detail.id in exc_info.value.message
    assert "lost connection" not in exc_info.value.message
    assert await stock_of(catalog.mouse) == 9


async def test_concurrent_updates_of_one_detail_keep_stock_consistent(detail_service, mouse_detail, catalog, stock_of):
    results = await asyncio.gather(
        detail_service.update_order_detail(mouse_detail.id, quantity=3),
        detail_service.update_order_detail(mouse_detail.id, quantity=3),
    )

    assert [d.quantity for d in results] == [3, 3]
    detail = await detail_service.get_detail(mouse_detail.id)
    assert detail.quantity == 3
    # units held by the detail plus units on the shelf add up to the initial stock
    assert await stock_of(catalog.mouse) + detail.quantity == 10


def test_detail_row_is_locked_for_update():
    locked = OrderDetailRepository._select("some-id", for_update=True).compile(dialect=postgresql.dialect())
    plain = OrderDetailRepository._select("some-id").compile(dialect=postgresql.dialect())

    assert "FOR UPDATE" in str(locked)
    assert "FOR UPDATE" not in str(plain)
