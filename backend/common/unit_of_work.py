import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..auth.repository import CredentialRepository
from ..categories.repository import CategoryRepository
from ..inventory.ledger import StockLedger
from ..inventory.repository import ProductRepository
from ..orderdetails.repository import OrderDetailRepository
from ..orders.repository import OrderRepository
from ..users.repository import UserRepository
from .errors import PASSTHROUGH_ERRORS, OperationFailed

_logger = logging.getLogger(__name__)

T = TypeVar("T")


class UnitOfWork:
    """One database transaction and the repositories bound to it.

    Use as ``async with uow_factory() as uow``. Nothing is written unless
    :meth:`commit` is called; an exception inside the block rolls back, and
    the session is closed on every exit path.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory
        self.session: Optional[AsyncSession] = None

    async def __aenter__(self) -> "UnitOfWork":
        self.session = self._session_factory()
        self.credentials = CredentialRepository(self.session)
        self.users = UserRepository(self.session)
        self.categories = CategoryRepository(self.session)
        self.products = ProductRepository(self.session)
        self.ledger = StockLedger(self.session)
        self.orders = OrderRepository(self.session)
        self.details = OrderDetailRepository(self.session)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        try:
            if exc_type is not None:
                await self.rollback()
        finally:
            await self.session.close()
            self.session = None

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()


UnitOfWorkFactory = Callable[[], UnitOfWork]


def unit_of_work_factory(session_factory: async_sessionmaker[AsyncSession]) -> UnitOfWorkFactory:
    def _factory() -> UnitOfWork:
        return UnitOfWork(session_factory)

    return _factory


async def guarded(work: Awaitable[T], timeout: float, failure_message: str) -> T:
    """Run ``work`` within ``timeout`` seconds.

    Domain errors pass through untouched; anything else, timeouts included,
    becomes :class:`OperationFailed` with ``failure_message``.
    """
    try:
        return await asyncio.wait_for(work, timeout=timeout)
    except PASSTHROUGH_ERRORS:
        raise
    except asyncio.TimeoutError as e:
        _logger.error("Unit of work timed out | op=%r timeout=%ss", failure_message, timeout)
        raise OperationFailed(failure_message, detail=f"timed out after {timeout}s") from e
    except Exception as e:
        _logger.exception("Unit of work failed | op=%r err=%s", failure_message, e)
        raise OperationFailed(failure_message, detail=str(e)) from e
