"""SQLAlchemy-backed store for inventory records."""

from datetime import datetime, timezone
from typing import List, Optional
import uuid

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.application.errors import ConflictError
from app.application.schemas import InventoryItemData
from app.domain.models import InventoryItem
from shared.core import get_logger

logger = get_logger(__name__)

def _now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)

def _parse_id(item_id) -> Optional[uuid.UUID]:
    if isinstance(item_id, uuid.UUID):
        return item_id
    try:
        return uuid.UUID(str(item_id))
    except ValueError:
        return None

class InventoryRepository:
    def __init__(self, db: Session):
        self.db = db

    def _sku_taken(self, sku: str, exclude_id: Optional[uuid.UUID] = None) -> bool:
        query = select(InventoryItem.id).where(InventoryItem.sku == sku)
        if exclude_id is not None:
            query = query.where(InventoryItem.id != exclude_id)
        return self.db.execute(query).first() is not None

    def _commit(self, sku: str) -> None:
        try:
            self.db.commit()
        except IntegrityError:
            # Lost a race on the unique SKU index
            self.db.rollback()
            logger.warning(f"SKU conflict on commit: {sku}")
            raise ConflictError(sku)

    def create(self, owner_id: str, data: InventoryItemData) -> InventoryItem:
        if self._sku_taken(data.sku):
            raise ConflictError(data.sku)
        now = _now()
        obj = InventoryItem(
            owner_id=owner_id,
            name=data.name,
            sku=data.sku,
            category=data.category,
            quantity=data.quantity,
            price=data.price,
            description=data.description,
            created_at=now,
            updated_at=now,
        )
        self.db.add(obj)
        self._commit(data.sku)
        self.db.refresh(obj)
        return obj

    def get_by_id(self, item_id) -> Optional[InventoryItem]:
        """Fetch a record by id; ids that are not valid UUIDs simply do not exist."""
        parsed = _parse_id(item_id)
        if parsed is None:
            return None
        return self.db.get(InventoryItem, parsed)

    def list_by_owner(self, owner_id: str) -> List[InventoryItem]:
        query = (
            select(InventoryItem)
            .where(InventoryItem.owner_id == owner_id)
            .order_by(InventoryItem.created_at.desc(), InventoryItem.sku)
        )
        return list(self.db.execute(query).scalars().all())

    def update(self, item: InventoryItem, data: InventoryItemData) -> InventoryItem:
        """Replace every editable field; ``id`` and ``owner_id`` are never touched."""
        if self._sku_taken(data.sku, exclude_id=item.id):
            raise ConflictError(data.sku)
        item.name = data.name
        item.sku = data.sku
        item.category = data.category
        item.quantity = data.quantity
        item.price = data.price
        item.description = data.description
        item.updated_at = _now()
        self._commit(data.sku)
        self.db.refresh(item)
        return item

    def delete(self, item: InventoryItem) -> None:
        self.db.delete(item)
        self.db.commit()
