from pydantic import BaseModel, Field
from typing import Any, List, Optional
from datetime import datetime
from decimal import Decimal
from uuid import UUID

class InventoryItemInput(BaseModel):
    """Raw write payload; checked by ``validate_item`` before anything is stored."""
    # Untyped so that validate_item reports every bad field in one envelope
    name: Optional[Any] = None
    sku: Optional[Any] = None
    category: Optional[Any] = None
    quantity: Optional[Any] = None
    price: Optional[Any] = None
    description: Optional[Any] = None

class InventoryItemData(BaseModel):
    name: str
    sku: str
    category: str
    quantity: int
    price: Decimal
    description: str = ""

class InventoryItemRead(BaseModel):
    id: UUID
    owner_id: str
    name: str
    sku: str
    category: str
    quantity: int
    price: float
    description: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class CategoryStatsRead(BaseModel):
    category: str
    count: int
    quantity: int
    value: float

    class Config:
        from_attributes = True

class InventoryStatsRead(BaseModel):
    total_items: int
    low_stock_count: int
    total_value: float
    total_value_display: int = Field(description="Total value rounded to the nearest whole unit")
    categories: List[CategoryStatsRead] = []

    class Config:
        from_attributes = True

# ---- Response envelopes ----

class ItemResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: InventoryItemRead

class ItemListResponse(BaseModel):
    success: bool = True
    count: int
    data: List[InventoryItemRead]

class StatsResponse(BaseModel):
    success: bool = True
    data: InventoryStatsRead

class CategoryListResponse(BaseModel):
    success: bool = True
    count: int
    data: List[str]

class MessageResponse(BaseModel):
    success: bool = True
    message: str
