"""Tests for the product stock ledger."""

import pytest

from backend.common.errors import InsufficientStock, InvalidRequest, NotFound
from backend.common.db import new_id


async def test_reserve_decrements(uow_factory, catalog, stock_of):
    async with uow_factory() as uow:
        await uow.ledger.reserve(catalog.mouse, 4)
        await uow.commit()
    assert await stock_of(catalog.mouse) == 6


async def test_reserve_exact_stock_reaches_zero(uow_factory, catalog, stock_of):
    async with uow_factory() as uow:
        await uow.ledger.reserve(catalog.keyboard, 3)
        await uow.commit()
    assert await stock_of(catalog.keyboard) == 0


async def test_reserve_more_than_stock_fails(uow_factory, catalog, stock_of):
    async with uow_factory() as uow:
        with pytest.raises(InsufficientStock) as exc_info:
            await uow.ledger.reserve(catalog.keyboard, 4)
    assert exc_info.value.product_id == catalog.keyboard
    assert isinstance(exc_info.value, InvalidRequest)
    assert await stock_of(catalog.keyboard) == 3


async def test_reserve_unknown_product(uow_factory, catalog):
    async with uow_factory() as uow:
        with pytest.raises(NotFound):
            await uow.ledger.reserve(new_id(), 1)


async def test_release_increments(uow_factory, catalog, stock_of):
    async with uow_factory() as uow:
        await uow.ledger.release(catalog.headset, 2)
        await uow.commit()
    assert await stock_of(catalog.headset) == 2


async def test_adjust_both_directions(uow_factory, catalog, stock_of):
    async with uow_factory() as uow:
        await uow.ledger.adjust(catalog.mouse, 3)
        await uow.ledger.adjust(catalog.keyboard, -2)
        await uow.ledger.adjust(catalog.monitor, 0)
        await uow.commit()
    assert await stock_of(catalog.mouse) == 7
    assert await stock_of(catalog.keyboard) == 5
    assert await stock_of(catalog.monitor) == 1


@pytest.mark.parametrize("quantity", [0, -2])
async def test_non_positive_quantity_rejected(uow_factory, catalog, quantity):
    async with uow_factory() as uow:
        with pytest.raises(InvalidRequest):
            await uow.ledger.reserve(catalog.mouse, quantity)


async def test_uncommitted_movements_are_rolled_back(uow_factory, catalog, stock_of):
    with pytest.raises(RuntimeError):
        async with uow_factory() as uow:
            await uow.ledger.reserve(catalog.mouse, 5)
            raise RuntimeError("abort")
    assert await stock_of(catalog.mouse) == 10

