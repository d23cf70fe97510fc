from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.enums import Role


@dataclass
class User:
    id: str
    email: str
    name: str
    address: str = ""
    phone: str = ""
    country: Optional[str] = None
    city: Optional[str] = None
    role: Role = Role.USER
    credential_id: Optional[int] = None
    deleted_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "address": self.address,
            "phone": self.phone,
            "country": self.country,
            "city": self.city,
            "role": self.role.value,
        }
