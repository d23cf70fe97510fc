import re
from typing import Optional

from pydantic import AliasChoices, BaseModel, EmailStr, Field, field_validator, model_validator


class SignUpIn(BaseModel):
    email: EmailStr
    name: str = Field(min_length=3, max_length=80)
    address: str = Field(min_length=3, max_length=80)
    phone: str = Field(min_length=7, max_length=30)
    country: Optional[str] = Field(default=None, min_length=5, max_length=20)
    city: Optional[str] = Field(default=None, min_length=5, max_length=20)
    password: str = Field(min_length=8, max_length=15)
    confirm_password: str = Field(validation_alias=AliasChoices("confirm_password", "confirmPassword"))

    @field_validator("password")
    @classmethod
    def strong_password(cls, value: str) -> str:
        checks = (r"[a-z]", r"[A-Z]", r"\d", r"[^A-Za-z0-9]")
        if not all(re.search(pattern, value) for pattern in checks):
            raise ValueError(
                "Password must contain at least one uppercase letter, one lowercase letter, one number and one symbol"
            )
        return value

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords must match")
        return self


class SignInIn(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)
