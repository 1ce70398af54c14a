from sqlalchemy.orm import Session
from typing import List, Optional
from app.domain.models import InventoryItem
from app.infrastructure.repository import InventoryRepository
from shared.core import get_logger
from .errors import ValidationError
from .export import EXPORTERS, ExportFile
from .ownership import ensure_owner
from .query import InventoryQuery, apply_query, list_categories
from .schemas import InventoryItemInput
from .stats import InventoryStats, compute_stats
from .validation import validate_item

logger = get_logger(__name__)

class InventoryService:
    """Inventory operations on behalf of one authenticated user."""

    def __init__(self, db: Session, user_id: str):
        self.db = db
        self.user_id = user_id
        self.repo = InventoryRepository(db)

    def list(self, query: Optional[InventoryQuery] = None) -> List[InventoryItem]:
        return apply_query(self.repo.list_by_owner(self.user_id), query)

    def get(self, item_id: str) -> InventoryItem:
        return ensure_owner(self.repo.get_by_id(item_id), self.user_id, item_id)

    def create(self, payload: InventoryItemInput) -> InventoryItem:
        data = validate_item(payload)
        item = self.repo.create(self.user_id, data)
        logger.info(
            f"Created inventory item {item.sku}",
            extra={'extra_fields': {'item_id': str(item.id), 'sku': item.sku}}
        )
        return item

    def update(self, item_id: str, payload: InventoryItemInput) -> InventoryItem:
        item = self.get(item_id)
        data = validate_item(payload)
        item = self.repo.update(item, data)
        logger.info(
            f"Updated inventory item {item.sku}",
            extra={'extra_fields': {'item_id': str(item.id), 'sku': item.sku}}
        )
        return item

    def delete(self, item_id: str) -> None:
        item = self.get(item_id)
        sku = item.sku
        self.repo.delete(item)
        logger.info(
            f"Deleted inventory item {sku}",
            extra={'extra_fields': {'item_id': item_id, 'sku': sku}}
        )

    def stats(self) -> InventoryStats:
        return compute_stats(self.repo.list_by_owner(self.user_id))

    def categories(self) -> List[str]:
        return list_categories(self.repo.list_by_owner(self.user_id))

    def export(self, fmt: str, query: Optional[InventoryQuery] = None) -> ExportFile:
        exporter = EXPORTERS.get(fmt)
        if exporter is None:
            raise ValidationError({"format": f"Unsupported export format: {fmt}"}, message="Unsupported export format")
        items = self.list(query)
        if fmt == "html":
            return exporter(items, compute_stats(items))
        return exporter(items)
