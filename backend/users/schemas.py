from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class UpdateUserIn(BaseModel):
    email: Optional[EmailStr] = None
    name: Optional[str] = Field(default=None, min_length=3, max_length=80)
    address: Optional[str] = Field(default=None, min_length=3, max_length=80)
    phone: Optional[str] = Field(default=None, min_length=7, max_length=30)
    country: Optional[str] = Field(default=None, min_length=5, max_length=20)
    city: Optional[str] = Field(default=None, min_length=5, max_length=20)
