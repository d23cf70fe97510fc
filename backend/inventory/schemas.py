from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import AliasChoices, BaseModel, Field


class ProductIn(BaseModel):
    name: str = Field(min_length=1, max_length=50)
    description: str = ""
    price: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    stock: int = Field(ge=0)
    category: UUID = Field(validation_alias=AliasChoices("category", "category_id"))
    img_url: Optional[str] = Field(default=None, validation_alias=AliasChoices("img_url", "imgUrl"))
