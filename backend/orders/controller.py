from uuid import UUID

from quart import Blueprint, jsonify, request

from ..common.http import parse_body
from ..common.pagination import parse_pagination
from .schemas import PlaceOrderIn, UpdateOrderIn, UpdateOrderStatusIn
from .service import OrderService


def create_blueprint(service: OrderService, page_limit: int) -> Blueprint:
    bp = Blueprint("orders", __name__)

    @bp.get("/orders")
    async def orders_list():
        page, limit = parse_pagination(request.args, page_limit)
        return jsonify(await service.list_orders(page, limit))

    @bp.get("/orders/<uuid:order_id>")
    async def order_detail(order_id: UUID):
        order = await service.get_order(str(order_id))
        return jsonify(order.to_dict())

    @bp.post("/orders")
    async def order_create():
        payload = await parse_body(PlaceOrderIn)
        order = await service.place_order(
            str(payload.user_id),
            [str(p) for p in payload.products],
            shipping=payload.shipping,
            general_discount=payload.general_discount,
        )
        return jsonify(order.to_dict()), 201

    @bp.put("/orders/status/<uuid:order_id>")
    async def order_status(order_id: UUID):
        payload = await parse_body(UpdateOrderStatusIn)
        order = await service.update_status(str(order_id), payload.status)
        return jsonify(order.to_dict())

    @bp.put("/orders/update/<uuid:order_id>")
    async def order_update(order_id: UUID):
        payload = await parse_body(UpdateOrderIn)
        order = await service.update_order(
            str(order_id), payload.total, payload.shipping, payload.general_discount
        )
        return jsonify(order.to_dict())

    @bp.delete("/orders/<uuid:order_id>")
    async def order_delete(order_id: UUID):
        order = await service.soft_delete(str(order_id))
        return jsonify({"id": order.id, "deleted_at": order.deleted_at.isoformat()})

    return bp
