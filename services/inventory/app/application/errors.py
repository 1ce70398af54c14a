"""Typed failures raised by the inventory core.

Each error carries a human-readable ``message`` that is safe to show to the
client and the HTTP status the transport layer should answer with. The
exception handler in ``app.main`` turns them into the response envelope.
"""

from typing import Dict, Optional


class InventoryError(Exception):
    status_code: int = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def data(self) -> Optional[dict]:
        return None


class ValidationError(InventoryError):
    """One or more field violations on a write; nothing was persisted."""

    status_code = 400

    def __init__(self, errors: Dict[str, str], message: str = "Please fill in all required fields"):
        super().__init__(message)
        self.errors = dict(errors)

    @property
    def data(self) -> Optional[dict]:
        return self.errors


class NotFoundError(InventoryError):
    status_code = 404

    def __init__(self, message: str = "Item not found"):
        super().__init__(message)


class ForbiddenError(InventoryError):
    status_code = 403

    def __init__(self, message: str = "User not authorized"):
        super().__init__(message)


class ConflictError(InventoryError):
    status_code = 409

    def __init__(self, sku: str):
        super().__init__(f"SKU already exists: {sku}")
        self.sku = sku


class ExportError(InventoryError):
    status_code = 400

    def __init__(self, message: str = "No data to export"):
        super().__init__(message)
