import logging
from typing import Optional

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from .config import Settings, settings
from .db import Base

# Register every mapped table on Base.metadata
from ..auth import model as _auth_model  # noqa: F401
from ..users import model as _users_model  # noqa: F401
from ..categories import model as _categories_model  # noqa: F401
from ..inventory import model as _inventory_model  # noqa: F401
from ..orders import model as _orders_model  # noqa: F401
from ..orderdetails import model as _orderdetails_model  # noqa: F401

_logger = logging.getLogger(__name__)


def _configure_sqlite(engine: AsyncEngine) -> None:
    """Enforce foreign keys and start every SQLite transaction with BEGIN IMMEDIATE.

    pysqlite defers BEGIN until the first write, so two transactions can both
    read the same stock before either writes. Taking the write lock up front
    makes concurrent units of work queue on the busy timeout instead.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def build_engine(app_settings: Optional[Settings] = None) -> AsyncEngine:
    app_settings = app_settings or settings
    connect_args = {}
    is_sqlite = app_settings.DB_URL.startswith("sqlite")
    if is_sqlite:
        connect_args["timeout"] = app_settings.DB_BUSY_TIMEOUT
    engine = create_async_engine(
        app_settings.DB_URL,
        echo=app_settings.DB_ECHO,
        connect_args=connect_args,
    )
    if is_sqlite:
        _configure_sqlite(engine)
    return engine


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


async def init_db(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    _logger.info("Database schema ready | url=%s", engine.url.render_as_string(hide_password=True))
