from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session
from typing import Optional
from app.infrastructure.db import get_db
from app.api.deps import get_current_user_id
from app.application.service import InventoryService
from app.application.query import InventoryQuery, SortField, SortOrder, ALL_CATEGORIES
from app.application.schemas import (
    InventoryItemInput,
    InventoryItemRead,
    InventoryStatsRead,
    CategoryStatsRead,
    ItemResponse,
    ItemListResponse,
    StatsResponse,
    CategoryListResponse,
    MessageResponse,
)

router = APIRouter(prefix="/inventory", tags=["inventory"])

def get_service(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> InventoryService:
    return InventoryService(db, user_id)

def get_inventory_query(
    search: Optional[str] = Query(None, max_length=200, description="Match name, SKU or category"),
    category: Optional[str] = Query(ALL_CATEGORIES, max_length=100, description="Exact category or 'all'"),
    sort_by: Optional[SortField] = Query(None, description="name, sku, category, quantity or price"),
    sort_order: SortOrder = Query("asc", description="asc or desc"),
) -> InventoryQuery:
    return InventoryQuery(search=search, category=category, sort_by=sort_by, sort_order=sort_order)

@router.get("/", response_model=ItemListResponse)
def list_inventory(
    query: InventoryQuery = Depends(get_inventory_query),
    service: InventoryService = Depends(get_service),
):
    """List the current user's items, optionally searched, filtered and sorted."""
    items = service.list(query)
    return ItemListResponse(count=len(items), data=[InventoryItemRead.model_validate(i) for i in items])

@router.post("/", response_model=ItemResponse, response_model_exclude_none=True, status_code=201)
def create_inventory(payload: InventoryItemInput, service: InventoryService = Depends(get_service)):
    item = service.create(payload)
    return ItemResponse(message="Item created successfully", data=InventoryItemRead.model_validate(item))

@router.get("/stats", response_model=StatsResponse)
def inventory_stats(service: InventoryService = Depends(get_service)):
    stats = service.stats()
    return StatsResponse(data=InventoryStatsRead(
        total_items=stats.total_items,
        low_stock_count=stats.low_stock_count,
        total_value=stats.total_value,
        total_value_display=stats.total_value_display,
        categories=[CategoryStatsRead.model_validate(c) for c in stats.categories],
    ))

@router.get("/categories", response_model=CategoryListResponse)
def inventory_categories(service: InventoryService = Depends(get_service)):
    categories = service.categories()
    return CategoryListResponse(count=len(categories), data=categories)

@router.get("/export")
def export_inventory(
    format: str = Query("csv", description="Export format: csv, json or html"),
    query: InventoryQuery = Depends(get_inventory_query),
    service: InventoryService = Depends(get_service),
):
    """Download the current user's items as a file."""
    export = service.export(format.lower(), query)
    return Response(
        content=export.content,
        media_type=export.media_type,
        headers={"Content-Disposition": f'attachment; filename="{export.filename}"'},
    )

@router.get("/{item_id}", response_model=ItemResponse, response_model_exclude_none=True)
def get_inventory_item(item_id: str, service: InventoryService = Depends(get_service)):
    return ItemResponse(data=InventoryItemRead.model_validate(service.get(item_id)))

@router.put("/{item_id}", response_model=ItemResponse, response_model_exclude_none=True)
def update_inventory(item_id: str, payload: InventoryItemInput, service: InventoryService = Depends(get_service)):
    item = service.update(item_id, payload)
    return ItemResponse(message="Item updated successfully", data=InventoryItemRead.model_validate(item))

@router.delete("/{item_id}", response_model=MessageResponse)
def delete_inventory(item_id: str, service: InventoryService = Depends(get_service)):
    service.delete(item_id)
    return MessageResponse(message="Item deleted successfully")
