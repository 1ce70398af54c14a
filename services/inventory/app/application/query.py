"""Search, category filter and sort over an owner's records.

The engine works on records already fetched from the store and always
returns a new list; the input sequence is never reordered in place.
"""

from __future__ import annotations

import unicodedata
from decimal import Decimal
from typing import Any, Iterable, List, Literal, Optional, Sequence

from pydantic import BaseModel, Field

ALL_CATEGORIES = "all"
SEARCH_FIELDS = ("name", "sku", "category")
TEXT_SORT_FIELDS = ("name", "sku", "category")
NUMERIC_SORT_FIELDS = ("quantity", "price")

SortField = Literal["name", "sku", "category", "quantity", "price"]
SortOrder = Literal["asc", "desc"]


class InventoryQuery(BaseModel):
    """Query parameters for listing and exporting records."""
    search: Optional[str] = Field(default=None, description="Case-insensitive text matched against name, SKU and category")
    category: Optional[str] = Field(default=ALL_CATEGORIES, description="Exact category, or 'all' for every category")
    sort_by: Optional[SortField] = Field(default=None, description="Field to sort by; store order when omitted")
    sort_order: SortOrder = Field(default="asc", description="Sort direction")


def collation_key(value: Optional[str]) -> tuple:
    """Sort key approximating locale-aware string comparison.

    Accents and case are ignored on the first level so that "apple", "Apple"
    and "Äpfel" sort together; the exact text breaks ties deterministically.
    """
    text = value or ""
    decomposed = unicodedata.normalize("NFKD", text)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()
    return (base, text)


def _matches_search(item: Any, needle: str) -> bool:
    for field in SEARCH_FIELDS:
        value = getattr(item, field, None) or ""
        if needle in value.lower():
            return True
    return False


def _numeric(value: Any) -> Decimal:
    if value is None:
        return Decimal(0)
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def sort_items(items: Iterable[Any], sort_by: SortField, sort_order: SortOrder = "asc") -> List[Any]:
    """Stable sort; equal keys keep their incoming order in both directions."""
    if sort_by in TEXT_SORT_FIELDS:
        key = lambda item: collation_key(getattr(item, sort_by, None))
    elif sort_by in NUMERIC_SORT_FIELDS:
        key = lambda item: _numeric(getattr(item, sort_by, None))
    else:
        raise ValueError(f"Unsupported sort field: {sort_by}")
    return sorted(items, key=key, reverse=(sort_order == "desc"))


def apply_query(items: Sequence[Any], query: Optional[InventoryQuery] = None) -> List[Any]:
    """Filter and order ``items`` according to ``query``.

    Args:
        items: owner-scoped records in store order
        query: search/category/sort parameters; ``None`` returns a copy

    Returns:
        A new list with the matching records.
    """
    result = list(items)
    if query is None:
        return result

    # Blank searches match everything; otherwise the raw text is the substring
    if query.search and query.search.strip():
        needle = query.search.lower()
        result = [item for item in result if _matches_search(item, needle)]

    category = query.category
    if category and category != ALL_CATEGORIES:
        result = [item for item in result if item.category == category]

    if query.sort_by:
        result = sort_items(result, query.sort_by, query.sort_order)
    return result


def list_categories(items: Iterable[Any]) -> List[str]:
    """Distinct categories of ``items`` in collation order."""
    return sorted({item.category for item in items if item.category}, key=collation_key)
