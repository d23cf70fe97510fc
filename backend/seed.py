import asyncio
import logging
from decimal import Decimal

import sqlalchemy as sa

from .categories.model import CategoryModel
from .common.config import settings
from .common.database import build_engine, build_session_factory, init_db
from .inventory.model import ProductModel
from .inventory.repository import ProductRepository

_logger = logging.getLogger(__name__)


SAMPLE_PRODUCTS = [
    {"name": "Laptop Pro 14", "category": "computers", "stock": 20, "price": "1499.00",
     "description": "14 inch laptop for work and play"},
    {"name": "Wireless Mouse", "category": "peripherals", "stock": 150, "price": "24.99",
     "description": "Ergonomic 2.4GHz mouse"},
    {"name": "Mechanical Keyboard", "category": "keyboard", "stock": 80, "price": "89.99",
     "description": "Hot-swappable switches, RGB backlight"},
    {"name": "USB-C Hub", "category": "peripherals", "stock": 120, "price": "39.99",
     "description": "7-in-1 hub with HDMI and card reader"},
    {"name": "Noise-cancelling Headphones", "category": "audio", "stock": 35, "price": "199.99",
     "description": "Over-ear, 30h battery"},
    {"name": "4K Monitor 27\"", "category": "monitor", "stock": 25, "price": "329.99",
     "description": "IPS panel, 60Hz"},
    {"name": "Portable SSD 1TB", "category": "storage", "stock": 60, "price": "99.99",
     "description": "USB 3.2 Gen 2"},
    {"name": "Smartphone Charger 65W", "category": "peripherals", "stock": 200, "price": "19.99",
     "description": "GaN fast charger"},
    {"name": "Webcam 1080p", "category": "peripherals", "stock": 75, "price": "49.99",
     "description": "Autofocus with dual microphones"},
    {"name": "Bluetooth Speaker", "category": "audio", "stock": 40, "price": "59.99",
     "description": "Waterproof, 12h battery"},
]


async def seed_catalog(session_factory) -> int:
    """Insert sample categories and products when the catalog is empty.

    Returns the number of products added.
    """
    async with session_factory() as session:
        count = await ProductRepository(session).count()
        if count:
            _logger.info("DB contains products | count=%s", count)
            return 0

        categories = {}
        for name in sorted({p["category"] for p in SAMPLE_PRODUCTS}):
            res = await session.execute(sa.select(CategoryModel).where(CategoryModel.name == name))
            category = res.scalar_one_or_none()
            if category is None:
                category = CategoryModel(name=name)
                session.add(category)
            categories[name] = category
        await session.flush()

        for p in SAMPLE_PRODUCTS:
            session.add(ProductModel(
                name=p["name"],
                description=p["description"],
                stock=p["stock"],
                price=Decimal(p["price"]),
                category_id=categories[p["category"]].id,
            ))
        await session.commit()
    _logger.info("Products seeded successfully | added=%s", len(SAMPLE_PRODUCTS))
    return len(SAMPLE_PRODUCTS)


async def amain():
    logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
    engine = build_engine(settings)
    try:
        await init_db(engine)
        await seed_catalog(build_session_factory(engine))
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(amain())
