from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..common.db import new_id
from ..common.enums import OrderDetailStatus


@dataclass
class OrderDetail:
    order_id: str
    product_id: str
    price: Decimal
    quantity: int = 1
    discount: Optional[int] = None
    status: OrderDetailStatus = OrderDetailStatus.PENDING
    position: int = 0
    id: str = ""
    deleted_at: Optional[datetime] = None

    def __post_init__(self):
        if not self.id:
            self.id = new_id()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "order_id": self.order_id,
            "product_id": self.product_id,
            "quantity": self.quantity,
            "price": str(self.price),
            "discount": self.discount,
            "status": self.status.value,
        }
