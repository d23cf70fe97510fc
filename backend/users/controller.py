from uuid import UUID

from quart import Blueprint, jsonify, request

from ..auth.security import TokenService, require_roles
from ..common.enums import Role
from ..common.http import parse_body
from ..common.pagination import parse_pagination
from .schemas import UpdateUserIn
from .service import UserService


def create_blueprint(service: UserService, tokens: TokenService, page_limit: int) -> Blueprint:
    bp = Blueprint("users", __name__)
    admin_only = require_roles(tokens, Role.ADMIN, Role.SUPERADMIN)

    @bp.get("/users")
    @admin_only
    async def users_list():
        page, limit = parse_pagination(request.args, page_limit)
        return jsonify(await service.list_users(page, limit))

    @bp.get("/users/<uuid:user_id>")
    @require_roles(tokens)
    async def user_detail(user_id: UUID):
        user = await service.get_user(str(user_id))
        return jsonify(user.to_dict())

    @bp.put("/users/<uuid:user_id>")
    @admin_only
    async def user_update(user_id: UUID):
        payload = await parse_body(UpdateUserIn)
        user = await service.update_user(str(user_id), payload.model_dump(exclude_none=True))
        return jsonify(user.to_dict())

    @bp.delete("/users/<uuid:user_id>")
    @admin_only
    async def user_delete(user_id: UUID):
        user = await service.delete_user(str(user_id))
        return jsonify(user.to_dict())

    @bp.put("/users/<uuid:user_id>/admin")
    @require_roles(tokens, Role.ADMIN)
    async def user_promote(user_id: UUID):
        user = await service.promote_to_admin(str(user_id))
        return jsonify(user.to_dict())

    return bp
