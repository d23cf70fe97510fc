from backend.inventory.repository import ProductRepository
from backend.seed import SAMPLE_PRODUCTS, seed_catalog


async def test_seed_fills_empty_catalog(session_factory):
    added = await seed_catalog(session_factory)

    assert added == len(SAMPLE_PRODUCTS)
    async with session_factory() as session:
        products = await ProductRepository(session).list_all()
    assert {p.name for p in products} == {p["name"] for p in SAMPLE_PRODUCTS}
    assert all(p.category_id for p in products)


async def test_seed_skips_populated_catalog(session_factory, catalog):
    assert await seed_catalog(session_factory) == 0

    async with session_factory() as session:
        assert await ProductRepository(session).count() == 4
