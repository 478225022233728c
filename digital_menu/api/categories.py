"""Category management endpoints, including drag-and-drop reordering"""

from functools import partial
from typing import List
from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import NoResultFound, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from digital_menu.api.auth import get_current_user
from digital_menu.api.deps import get_menu_store
from digital_menu.database import get_db
from digital_menu.models.user import User
from digital_menu.schemas.menu import (
    CategoryCreate,
    CategoryMove,
    CategoryOrder,
    CategoryResponse,
    CategoryUpdate,
    ReorderResult,
)
from digital_menu.services import menu_service
from digital_menu.state.menu_store import MenuStore
from digital_menu.state.ordering import CategoryOrdering

logger = structlog.get_logger()

router = APIRouter()


@router.get("", response_model=List[CategoryResponse])
async def list_categories(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List categories in display order, straight from the store"""
    return await menu_service.get_categories(db)


@router.post("", response_model=CategoryResponse, status_code=201)
async def create_category(
    category_data: CategoryCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    store: MenuStore = Depends(get_menu_store),
):
    """Create a new category"""
    category = await menu_service.create_category(db, category_data)
    logger.info("Category created", category_id=str(category.id))
    await store.refresh()
    return category


@router.put("/order", response_model=ReorderResult)
async def set_category_order(
    order: CategoryOrder,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    store: MenuStore = Depends(get_menu_store),
):
    """Replace the whole category order"""
    try:
        await menu_service.reorder_categories(db, order.category_ids)
    except NoResultFound as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SQLAlchemyError as e:
        logger.error("Error reordering categories", error=str(e))
        raise HTTPException(status_code=502, detail="Failed to reorder categories")
    
    await store.refresh()
    return ReorderResult(reordered=True, categories=list(store.categories))


@router.put("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: UUID,
    category_data: CategoryUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    store: MenuStore = Depends(get_menu_store),
):
    """Update a category"""
    try:
        category = await menu_service.update_category(
            db, category_id, category_data.model_dump(exclude_unset=True)
        )
    except NoResultFound:
        raise HTTPException(status_code=404, detail="Category not found")
    
    await store.refresh()
    return category


@router.delete("/{category_id}", status_code=204)
async def delete_category(
    category_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    store: MenuStore = Depends(get_menu_store),
):
    """Delete a category; its menu items are not touched"""
    await menu_service.delete_category(db, category_id)
    logger.info("Category deleted", category_id=str(category_id))
    await store.refresh()


@router.post("/reorder", response_model=ReorderResult)
async def move_category(
    move: CategoryMove,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    store: MenuStore = Depends(get_menu_store),
):
    """Apply one drag-and-drop move to the current category order"""
    ordering = CategoryOrdering(store, partial(menu_service.reorder_categories, db))
    
    try:
        if move.active_id is not None:
            reordered = await ordering.drop(move.active_id, move.over_id)
        else:
            reordered = await ordering.reorder(move.source, move.target)
    except LookupError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SQLAlchemyError as e:
        logger.error("Error reordering categories", error=str(e))
        raise HTTPException(status_code=502, detail="Failed to reorder categories")
    
    return ReorderResult(reordered=reordered, categories=list(store.categories))
