from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import AliasChoices, BaseModel, Field

from ..common.enums import OrderStatus


class PlaceOrderIn(BaseModel):
    user_id: UUID = Field(validation_alias=AliasChoices("user_id", "userId"))
    products: List[UUID] = Field(min_length=1)
    shipping: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    general_discount: Optional[int] = Field(
        default=None, ge=0, le=100, validation_alias=AliasChoices("general_discount", "generalDiscount")
    )


class UpdateOrderIn(BaseModel):
    total: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    shipping: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    general_discount: Optional[int] = Field(
        default=None, ge=0, le=100, validation_alias=AliasChoices("general_discount", "generalDiscount")
    )


class UpdateOrderStatusIn(BaseModel):
    status: OrderStatus
