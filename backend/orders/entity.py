from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from ..common.db import new_id
from ..common.enums import OrderStatus
from ..orderdetails.entity import OrderDetail


@dataclass
class Order:
    user_id: str
    total: Decimal
    shipping: Decimal
    date: datetime
    general_discount: Optional[int] = None
    status: OrderStatus = OrderStatus.PENDING
    details: List[OrderDetail] = field(default_factory=list)
    id: str = ""
    deleted_at: Optional[datetime] = None

    def __post_init__(self):
        if not self.id:
            self.id = new_id()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "total": str(self.total),
            "shipping": str(self.shipping),
            "general_discount": self.general_discount,
            "date": self.date.isoformat(),
            "status": self.status.value,
            "details": [d.to_dict() for d in self.details],
        }
