from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List

from .query import collation_key

# Items with fewer units than this count as low stock
LOW_STOCK_THRESHOLD = 10


@dataclass
class CategoryStats:
    category: str
    count: int = 0
    quantity: int = 0
    value: Decimal = Decimal(0)


@dataclass
class InventoryStats:
    total_items: int
    low_stock_count: int
    total_value: Decimal
    categories: List[CategoryStats] = field(default_factory=list)

    @property
    def total_value_display(self) -> int:
        """Total value rounded to the nearest whole unit, for display only."""
        return int(self.total_value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def item_value(item: Any) -> Decimal:
    """price * quantity at full precision."""
    price = item.price if isinstance(item.price, Decimal) else Decimal(str(item.price))
    return price * (item.quantity or 0)


def is_low_stock(item: Any) -> bool:
    return (item.quantity or 0) < LOW_STOCK_THRESHOLD


def compute_stats(items: Iterable[Any]) -> InventoryStats:
    """Reduce a record collection to dashboard metrics.

    Recomputed on every call; nothing is cached between requests.
    """
    total_items = 0
    low_stock = 0
    total_value = Decimal(0)
    by_category: Dict[str, CategoryStats] = {}

    for item in items:
        value = item_value(item)
        total_items += 1
        total_value += value
        if is_low_stock(item):
            low_stock += 1

        bucket = by_category.get(item.category)
        if bucket is None:
            bucket = by_category[item.category] = CategoryStats(category=item.category)
        bucket.count += 1
        bucket.quantity += item.quantity or 0
        bucket.value += value

    categories = sorted(by_category.values(), key=lambda c: collation_key(c.category))
    return InventoryStats(
        total_items=total_items,
        low_stock_count=low_stock,
        total_value=total_value,
        categories=categories,
    )
