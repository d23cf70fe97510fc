from uuid import UUID

from quart import Blueprint, jsonify

from ..common.http import parse_body
from .schemas import UpdateDetailIn
from .service import OrderDetailService


def create_blueprint(service: OrderDetailService) -> Blueprint:
    bp = Blueprint("orderdetails", __name__)

    @bp.get("/detail/<uuid:detail_id>")
    async def detail_get(detail_id: UUID):
        detail = await service.get_detail(str(detail_id))
        return jsonify(detail.to_dict())

    @bp.put("/detail/<uuid:detail_id>")
    async def detail_update(detail_id: UUID):
        payload = await parse_body(UpdateDetailIn)
        detail = await service.update_order_detail(
            str(detail_id),
            new_product_id=str(payload.new_product) if payload.new_product else None,
            quantity=payload.quantity,
            discount=payload.discount,
        )
        return jsonify(detail.to_dict())

    return bp
