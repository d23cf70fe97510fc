from enum import Enum


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"
    SUPERADMIN = "superadmin"


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELED = "canceled"
    RETURN = "return"
    EXCHANGE = "exchange"

    @classmethod
    def _missing_(cls, value):
        # rows written before the value was corrected
        if value == "retunr":
            return cls.RETURN
        return None


class OrderDetailStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELED = "canceled"
    RETURN = "return"
    EXCHANGE = "exchange"

    @classmethod
    def _missing_(cls, value):
        if value == "retunr":
            return cls.RETURN
        return None
