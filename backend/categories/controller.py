from uuid import UUID

from quart import Blueprint, jsonify, request

from ..auth.security import TokenService, require_roles
from ..common.enums import Role
from ..common.http import parse_body
from ..common.pagination import parse_pagination
from .schemas import CategoryIn
from .service import CategoryService


def create_blueprint(service: CategoryService, tokens: TokenService, page_limit: int) -> Blueprint:
    bp = Blueprint("categories", __name__)
    admin_only = require_roles(tokens, Role.ADMIN, Role.SUPERADMIN)

    @bp.get("/categories")
    async def categories_list():
        page, limit = parse_pagination(request.args, page_limit)
        return jsonify(await service.list_categories(page, limit))

    @bp.get("/categories/<uuid:category_id>")
    async def category_detail(category_id: UUID):
        category = await service.get_category(str(category_id))
        return jsonify(category.to_dict())

    @bp.post("/categories")
    @admin_only
    async def category_create():
        payload = await parse_body(CategoryIn)
        category = await service.create_category(payload.name)
        return jsonify(category.to_dict()), 201

    @bp.put("/categories/<uuid:category_id>")
    @admin_only
    async def category_update(category_id: UUID):
        payload = await parse_body(CategoryIn)
        category = await service.update_category(str(category_id), payload.name)
        return jsonify(category.to_dict())

    return bp
