from enum import Enum
from typing import Optional
from app.domain.models import InventoryItem
from app.application.errors import ForbiddenError, NotFoundError
from shared.core import get_logger

logger = get_logger(__name__)

class AccessDecision(str, Enum):
    ALLOWED = "allowed"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"

def authorize(item: Optional[InventoryItem], requester_id: str) -> AccessDecision:
    """Decide whether ``requester_id`` may read or change ``item``.

    ``item`` is whatever the store returned for the requested id, so ``None``
    means the record does not exist.
    """
    if item is None:
        return AccessDecision.NOT_FOUND
    if item.owner_id != requester_id:
        return AccessDecision.FORBIDDEN
    return AccessDecision.ALLOWED

def ensure_owner(item: Optional[InventoryItem], requester_id: str, item_id: str) -> InventoryItem:
    """Return ``item`` when the requester owns it, otherwise raise."""
    decision = authorize(item, requester_id)
    if decision is AccessDecision.NOT_FOUND:
        raise NotFoundError()
    if decision is AccessDecision.FORBIDDEN:
        logger.warning(
            "Denied access to inventory item",
            extra={'extra_fields': {'item_id': item_id, 'requester_id': requester_id}}
        )
        raise ForbiddenError()
    return item
