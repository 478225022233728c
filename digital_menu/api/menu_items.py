"""Menu item management endpoints"""

from typing import List, Optional
from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import NoResultFound
from sqlalchemy.ext.asyncio import AsyncSession

from digital_menu.api.auth import get_current_user
from digital_menu.api.deps import get_menu_store
from digital_menu.database import get_db
from digital_menu.models.user import User
from digital_menu.schemas.menu import (
    CategorySelection,
    MenuItemCreate,
    MenuItemResponse,
    MenuItemUpdate,
)
from digital_menu.services import menu_service
from digital_menu.services.pricing import toggle_special_offer
from digital_menu.state.menu_store import MenuStore

logger = structlog.get_logger()

router = APIRouter()


@router.get("", response_model=List[MenuItemResponse])
async def list_menu_items(
    category_id: Optional[UUID] = None,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List menu items, oldest first, optionally for one category"""
    if category_id is not None:
        return await menu_service.get_menu_items_by_category(db, category_id)
    return await menu_service.get_menu_items(db)


@router.post("", response_model=MenuItemResponse, status_code=201)
async def create_menu_item(
    item_data: MenuItemCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    store: MenuStore = Depends(get_menu_store),
):
    """Create a new menu item"""
    item = await menu_service.create_menu_item(db, item_data)
    logger.info("Menu item created", item_id=str(item.id))
    await store.refresh()
    return item


@router.get("/{item_id}", response_model=MenuItemResponse)
async def get_menu_item(
    item_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get a specific menu item"""
    try:
        return await menu_service.get_menu_item(db, item_id)
    except NoResultFound:
        raise HTTPException(status_code=404, detail="Menu item not found")


@router.put("/{item_id}", response_model=MenuItemResponse)
async def update_menu_item(
    item_id: UUID,
    item_data: MenuItemUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    store: MenuStore = Depends(get_menu_store),
):
    """Update a menu item"""
    try:
        item = await menu_service.get_menu_item(db, item_id)
    except NoResultFound:
        raise HTTPException(status_code=404, detail="Menu item not found")
    
    changes = item_data.model_dump(exclude_unset=True)
    if changes.get("is_special_offer"):
        # Turning the offer on keeps the stored original price, if any
        fields = toggle_special_offer(
            {
                "price": changes.get("price", item.price),
                "original_price": changes.get("original_price", item.original_price),
            },
            True,
        )
        changes["original_price"] = fields["original_price"]
    
    item = await menu_service.update_menu_item(db, item_id, changes)
    await store.refresh()
    return item


@router.delete("/{item_id}", status_code=204)
async def delete_menu_item(
    item_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    store: MenuStore = Depends(get_menu_store),
):
    """Delete a menu item"""
    await menu_service.delete_menu_item(db, item_id)
    logger.info("Menu item deleted", item_id=str(item_id))
    await store.refresh()


selection_router = APIRouter()


@selection_router.put("/selection", response_model=CategorySelection)
async def select_category(
    selection: CategorySelection,
    current_user: User = Depends(get_current_user),
    store: MenuStore = Depends(get_menu_store),
):
    """Set the category the public menu opens on; null shows all"""
    store.select_category(selection.category_id)
    return CategorySelection(category_id=store.selected_category)
