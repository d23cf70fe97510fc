"""Error taxonomy shared by services and the HTTP layer.

Services raise these; the app registers one handler that turns them into JSON
responses with the matching status code. Anything that is not a ``ShopError``
is wrapped into :class:`OperationFailed` at the service boundary.
"""
from typing import Optional


class ShopError(Exception):
    status_code = 500
    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.kind, "message": self.message}


class NotFound(ShopError):
    status_code = 404
    kind = "not_found"


class InvalidRequest(ShopError):
    status_code = 400
    kind = "invalid_request"


class InsufficientStock(InvalidRequest):
    """Raised by the stock ledger when a reservation cannot be covered."""

    def __init__(self, product_id: str, requested: int):
        super().__init__(f"Insufficient stock for product {product_id}")
        self.product_id = product_id
        self.requested = requested


class Unauthorized(ShopError):
    status_code = 401
    kind = "unauthorized"


class Forbidden(ShopError):
    status_code = 403
    kind = "forbidden"


class Conflict(ShopError):
    status_code = 409
    kind = "conflict"


class OperationFailed(ShopError):
    """Generic failure after rollback.

    ``detail`` keeps the original error text for logs; it is never rendered
    to the client.
    """

    status_code = 500
    kind = "operation_failed"

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.detail = detail


# Errors a service lets through unchanged.
PASSTHROUGH_ERRORS = (NotFound, InvalidRequest, Conflict, Unauthorized, Forbidden)
