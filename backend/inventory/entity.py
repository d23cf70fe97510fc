from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from .model import DEFAULT_IMG_URL


@dataclass
class Product:
    id: str
    name: str
    price: Decimal
    stock: int
    description: str = ""
    img_url: str = DEFAULT_IMG_URL
    category_id: Optional[str] = None

    def to_dict(self, with_stock: bool = True) -> dict:
        data = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": str(self.price),
            "img_url": self.img_url,
            "category_id": self.category_id,
        }
        if with_stock:
            data["stock"] = self.stock
        return data
