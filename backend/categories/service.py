import logging
from typing import Any, Dict

from sqlalchemy.exc import IntegrityError

from ..common.db import new_id
from ..common.errors import Conflict, NotFound
from ..common.pagination import page_dict
from ..common.unit_of_work import UnitOfWorkFactory, guarded
from .entity import Category

_logger = logging.getLogger(__name__)


class CategoryService:
    def __init__(self, uow_factory: UnitOfWorkFactory, tx_timeout: float):
        self._uow_factory = uow_factory
        self._tx_timeout = tx_timeout

    async def list_categories(self, page: int, limit: int) -> Dict[str, Any]:
        async def _work():
            async with self._uow_factory() as uow:
                categories, total = await uow.categories.list(page, limit)
            return page_dict(categories, total, page, limit)

        return await guarded(_work(), self._tx_timeout, "Failed to retrieve categories")

    async def get_category(self, category_id: str) -> Category:
        async def _work():
            async with self._uow_factory() as uow:
                category = await uow.categories.get(category_id)
            if category is None:
                raise NotFound(f"Category ID {category_id} not found.")
            return category

        return await guarded(_work(), self._tx_timeout, "Failed to retrieve category")

    async def create_category(self, name: str) -> Category:
        async def _work():
            async with self._uow_factory() as uow:
                if await uow.categories.get_by_name(name) is not None:
                    raise Conflict("Category already registered")
                try:
                    category = await uow.categories.add(Category(id=new_id(), name=name))
                    await uow.commit()
                except IntegrityError:
                    raise Conflict("Category already registered")
            _logger.info("Category created | category_id=%s name=%s", category.id, name)
            return category

        return await guarded(_work(), self._tx_timeout, "Failed to create new Category")

    async def update_category(self, category_id: str, name: str) -> Category:
        async def _work():
            async with self._uow_factory() as uow:
                category = await uow.categories.get(category_id)
                if category is None:
                    raise NotFound(f"Category ID {category_id} not found.")
                category.name = name
                try:
                    category = await uow.categories.save(category)
                    await uow.commit()
                except IntegrityError:
                    raise Conflict("Category already registered")
            return category

        return await guarded(_work(), self._tx_timeout, "Fail to update category")
