from typing import Optional
from uuid import UUID

from pydantic import AliasChoices, BaseModel, Field


class UpdateDetailIn(BaseModel):
    new_product: Optional[UUID] = Field(
        default=None, validation_alias=AliasChoices("new_product", "newProduct", "new_product_id")
    )
    quantity: Optional[int] = Field(default=None, gt=0)
    discount: Optional[int] = Field(default=None, gt=0, le=100)
