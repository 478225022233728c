"""Menu data access: categories, menu items and their change feed.

Each function maps one logical operation onto one backend call. Backend
errors are not caught here; callers decide how to report them.
"""

from typing import Any, Callable, Dict, List, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import NoResultFound
from sqlalchemy.ext.asyncio import AsyncSession

from digital_menu.models.menu import Category, MenuItem
from digital_menu.realtime.feed import ChangeEvent, ChangeFeed, Unsubscribe
from digital_menu.schemas.menu import CategoryCreate, MenuItemCreate

MENU_TABLES = (MenuItem.__tablename__, Category.__tablename__)


# Menu items

async def get_menu_items(db: AsyncSession) -> List[MenuItem]:
    result = await db.execute(
        select(MenuItem).order_by(MenuItem.created_at.asc())
    )
    return list(result.scalars().all())


async def get_menu_items_by_category(db: AsyncSession, category_id: UUID) -> List[MenuItem]:
    result = await db.execute(
        select(MenuItem)
        .where(MenuItem.category_id == category_id)
        .order_by(MenuItem.created_at.asc())
    )
    return list(result.scalars().all())


async def get_menu_item(db: AsyncSession, item_id: UUID) -> MenuItem:
    result = await db.execute(select(MenuItem).where(MenuItem.id == item_id))
    return result.scalar_one()


async def create_menu_item(db: AsyncSession, item_data: MenuItemCreate) -> MenuItem:
    item = MenuItem(**item_data.model_dump())
    db.add(item)
    await db.commit()
    return item


async def update_menu_item(db: AsyncSession, item_id: UUID, changes: Dict[str, Any]) -> MenuItem:
    item = await get_menu_item(db, item_id)
    for field, value in changes.items():
        setattr(item, field, value)
    await db.commit()
    return item


async def delete_menu_item(db: AsyncSession, item_id: UUID) -> None:
    result = await db.execute(select(MenuItem).where(MenuItem.id == item_id))
    item = result.scalar_one_or_none()
    if item is None:
        return
    await db.delete(item)
    await db.commit()


# Categories

async def get_categories(db: AsyncSession) -> List[Category]:
    result = await db.execute(
        select(Category).order_by(
            Category.order_index.asc().nulls_last(),
            Category.created_at.asc(),
        )
    )
    return list(result.scalars().all())


async def get_category(db: AsyncSession, category_id: UUID) -> Category:
    result = await db.execute(select(Category).where(Category.id == category_id))
    return result.scalar_one()


async def create_category(db: AsyncSession, category_data: CategoryCreate) -> Category:
    category = Category(**category_data.model_dump())
    db.add(category)
    await db.commit()
    return category


async def update_category(db: AsyncSession, category_id: UUID, changes: Dict[str, Any]) -> Category:
    category = await get_category(db, category_id)
    for field, value in changes.items():
        setattr(category, field, value)
    await db.commit()
    return category


async def delete_category(db: AsyncSession, category_id: UUID) -> None:
    """Delete a category; its menu items are left in place"""
    result = await db.execute(select(Category).where(Category.id == category_id))
    category = result.scalar_one_or_none()
    if category is None:
        return
    await db.delete(category)
    await db.commit()


async def reorder_categories(db: AsyncSession, category_ids: Sequence[UUID]) -> None:
    """Set ``order_index = position`` for every id, in one transaction.

    Unknown ids abort the whole reorder; nothing is written in that case.
    """
    result = await db.execute(select(Category).where(Category.id.in_(category_ids)))
    by_id = {category.id: category for category in result.scalars().all()}

    missing = [str(cid) for cid in category_ids if cid not in by_id]
    if missing:
        await db.rollback()
        raise NoResultFound(f"Unknown category ids: {', '.join(missing)}")

    for position, category_id in enumerate(category_ids):
        by_id[category_id].order_index = position
    await db.commit()


# Change feed

def subscribe_to_menu_changes(feed: ChangeFeed, callback: Callable[[], None]) -> Unsubscribe:
    """Call ``callback`` whenever menu items or categories change"""
    return feed.subscribe(
        MENU_TABLES,
        callback,
        events=(ChangeEvent.ALL,),
        name="menu-changes",
    )
