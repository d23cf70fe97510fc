"""Pytest fixtures for the shop backend tests."""

from decimal import Decimal
from types import SimpleNamespace

import pytest
import sqlalchemy as sa

from backend.app import create_app
from backend.auth.security import TokenService
from backend.categories.model import CategoryModel
from backend.common.config import Settings
from backend.common.database import build_engine, build_session_factory, init_db
from backend.common.unit_of_work import unit_of_work_factory
from backend.inventory.model import ProductModel
from backend.orderdetails.service import OrderDetailService
from backend.orders.service import OrderService
from backend.users.model import UserModel


@pytest.fixture
def test_settings(tmp_path):
    return Settings(
        DB_URL=f"sqlite+aiosqlite:///{(tmp_path / 'shop.db').as_posix()}",
        JWT_SECRET="test-secret",
        TX_TIMEOUT_SECONDS=5,
    )


@pytest.fixture
async def engine(test_settings):
    eng = build_engine(test_settings)
    await init_db(eng)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def uow_factory(session_factory):
    return unit_of_work_factory(session_factory)


@pytest.fixture
async def catalog(session_factory):
    """One customer, one category and four products with different stock."""
    async with session_factory() as session:
        user = UserModel(email="ana@example.com", name="Ana", address="Main St 1", phone="+15555550100")
        category = CategoryModel(name="peripherals")
        session.add_all([user, category])
        await session.flush()

        products = {
            "mouse": ProductModel(name="Mouse", price=Decimal("25.00"), stock=10, category_id=category.id),
            "keyboard": ProductModel(name="Keyboard", price=Decimal("75.50"), stock=3, category_id=category.id),
            "monitor": ProductModel(name="Monitor", price=Decimal("100.00"), stock=1, category_id=category.id),
            "headset": ProductModel(name="Headset", price=Decimal("60.00"), stock=0, category_id=category.id),
        }
        session.add_all(products.values())
        await session.commit()

        return SimpleNamespace(
            user_id=user.id,
            category_id=category.id,
            **{key: row.id for key, row in products.items()},
        )


@pytest.fixture
def stock_of(session_factory):
    """Read current stock straight from the database."""

    async def _stock_of(product_id):
        async with session_factory() as session:
            return await session.scalar(sa.select(ProductModel.stock).where(ProductModel.id == product_id))

    return _stock_of


@pytest.fixture
def order_service(uow_factory):
    return OrderService(uow_factory, Decimal("49.99"), tx_timeout=5)


@pytest.fixture
def detail_service(uow_factory):
    return OrderDetailService(uow_factory, tx_timeout=5)


@pytest.fixture
def app(test_settings, engine):
    return create_app(test_settings, engine)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def tokens(test_settings):
    return TokenService(test_settings.JWT_SECRET, test_settings.JWT_ALGORITHM)
