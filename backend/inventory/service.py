import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError

from ..common.db import new_id
from ..common.errors import Conflict, InvalidRequest, NotFound
from ..common.pagination import page_dict
from ..common.unit_of_work import UnitOfWorkFactory, guarded
from ..orders.pricing import to_money
from .entity import Product
from .model import DEFAULT_IMG_URL

_logger = logging.getLogger(__name__)


class ProductService:
    def __init__(self, uow_factory: UnitOfWorkFactory, tx_timeout: float):
        self._uow_factory = uow_factory
        self._tx_timeout = tx_timeout

    async def list_products(self, page: int, limit: int) -> Dict[str, Any]:
        """Products with stock left, one page at a time."""

        async def _work():
            async with self._uow_factory() as uow:
                products, total = await uow.products.list_in_stock(page, limit)
            return page_dict(products, total, page, limit)

        return await guarded(_work(), self._tx_timeout, "Failed to retrieve products")

    async def list_all_products(self) -> List[Product]:
        async def _work():
            async with self._uow_factory() as uow:
                return await uow.products.list_all()

        return await guarded(_work(), self._tx_timeout, "Failed to retrieve products")

    async def get_product(self, product_id: str) -> Product:
        async def _work():
            async with self._uow_factory() as uow:
                product = await uow.products.get(product_id)
            if product is None:
                raise NotFound(f"Product ID {product_id} not found.")
            return product

        return await guarded(_work(), self._tx_timeout, f"Failed to retrieve product ID:{product_id}")

    async def create_product(
        self,
        name: str,
        description: str,
        price: Decimal,
        stock: int,
        category_id: str,
        img_url: Optional[str] = None,
    ) -> Product:
        async def _work():
            async with self._uow_factory() as uow:
                await self._require_category(uow, category_id)
                product = Product(
                    id=new_id(),
                    name=name,
                    description=description,
                    price=to_money(price),
                    stock=stock,
                    img_url=img_url or DEFAULT_IMG_URL,
                    category_id=category_id,
                )
                try:
                    product = await uow.products.add(product)
                    await uow.commit()
                except IntegrityError:
                    raise self._integrity_error(name, stock)
            _logger.info("Product created | product_id=%s name=%s stock=%s", product.id, name, stock)
            return product

        return await guarded(_work(), self._tx_timeout, "Failed to create product")

    async def update_product(
        self,
        product_id: str,
        name: str,
        description: str,
        price: Decimal,
        stock: int,
        category_id: str,
        img_url: Optional[str] = None,
    ) -> Product:
        async def _work():
            async with self._uow_factory() as uow:
                product = await uow.products.get(product_id)
                if product is None:
                    raise NotFound(f"Product ID {product_id} not found.")
                await self._require_category(uow, category_id)
                product.name = name
                product.description = description
                product.price = to_money(price)
                product.stock = stock
                product.category_id = category_id
                if img_url:
                    product.img_url = img_url
                try:
                    product = await uow.products.save(product)
                    await uow.commit()
                except IntegrityError:
                    raise self._integrity_error(name, stock)
            return product

        return await guarded(_work(), self._tx_timeout, f"Failed to update product ID:{product_id}")

    async def delete_product(self, product_id: str) -> Product:
        async def _work():
            async with self._uow_factory() as uow:
                product = await uow.products.get(product_id)
                if product is None:
                    raise NotFound(f"Product ID {product_id} not found.")
                try:
                    await uow.products.delete(product_id)
                    await uow.commit()
                except IntegrityError:
                    raise Conflict("Product is referenced by existing orders")
            _logger.info("Product deleted | product_id=%s", product_id)
            return product

        return await guarded(_work(), self._tx_timeout, f"Failed to delete product with ID {product_id}")

    @staticmethod
    async def _require_category(uow, category_id: str) -> None:
        if await uow.categories.get(category_id) is None:
            raise NotFound(f"Category ID {category_id} not found.")

    @staticmethod
    def _integrity_error(name: str, stock: int):
        if stock < 0:
            return InvalidRequest("Invalid stock amount")
        return Conflict(f"Product with name {name!r} already exists")
