from uuid import UUID

from quart import Blueprint, jsonify, request

from ..auth.security import TokenService, require_roles
from ..common.enums import Role
from ..common.http import parse_body
from ..common.pagination import parse_pagination
from .schemas import ProductIn
from .service import ProductService


def create_blueprint(service: ProductService, tokens: TokenService, page_limit: int) -> Blueprint:
    bp = Blueprint("inventory", __name__)
    admin_only = require_roles(tokens, Role.ADMIN, Role.SUPERADMIN)

    @bp.get("/products")
    async def products_list():
        page, limit = parse_pagination(request.args, page_limit)
        return jsonify(await service.list_products(page, limit))

    @bp.get("/products/stock0")
    @admin_only
    async def products_all():
        products = await service.list_all_products()
        return jsonify([p.to_dict() for p in products])

    @bp.get("/products/<uuid:product_id>")
    async def product_detail(product_id: UUID):
        product = await service.get_product(str(product_id))
        return jsonify(product.to_dict(with_stock=False))

    @bp.post("/products")
    async def product_create():
        payload = await parse_body(ProductIn)
        product = await service.create_product(
            payload.name,
            payload.description,
            payload.price,
            payload.stock,
            str(payload.category),
            img_url=payload.img_url,
        )
        return jsonify(product.to_dict()), 201

    @bp.put("/products/<uuid:product_id>")
    @admin_only
    async def product_update(product_id: UUID):
        payload = await parse_body(ProductIn)
        product = await service.update_product(
            str(product_id),
            payload.name,
            payload.description,
            payload.price,
            payload.stock,
            str(payload.category),
            img_url=payload.img_url,
        )
        return jsonify(product.to_dict())

    @bp.delete("/products/<uuid:product_id>")
    @admin_only
    async def product_delete(product_id: UUID):
        product = await service.delete_product(str(product_id))
        return jsonify(product.to_dict())

    return bp
