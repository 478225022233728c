"""Category drag-and-drop ordering.

A drag gesture moves one category to a new position. The new order is shown
immediately through the store's speculative order, persisted as a full id
list, and then confirmed by a store refresh. A failed persist is not rolled
back locally; the next successful refresh replaces the speculative order.
"""

from typing import Awaitable, Callable, List, Optional, Sequence, Tuple, TypeVar
from uuid import UUID

import structlog

from digital_menu.schemas.menu import CategoryResponse
from digital_menu.state.menu_store import MenuStore

logger = structlog.get_logger()

T = TypeVar("T")

PersistOrder = Callable[[List[UUID]], Awaitable[None]]


def move_item(sequence: Sequence[T], source: int, target: int) -> List[T]:
    """Move the element at ``source`` to ``target``, shifting the rest"""
    size = len(sequence)
    if not 0 <= source < size:
        raise IndexError(f"source position {source} out of range for {size} items")
    if not 0 <= target < size:
        raise IndexError(f"target position {target} out of range for {size} items")
    items = list(sequence)
    items.insert(target, items.pop(source))
    return items


def drop_positions(
    categories: Sequence[CategoryResponse],
    active_id: UUID,
    over_id: Optional[UUID],
) -> Optional[Tuple[int, int]]:
    """Positions for dropping ``active_id`` onto ``over_id``.

    Returns None when the drop landed on nothing.
    """
    if over_id is None:
        return None
    ids = [category.id for category in categories]
    try:
        return ids.index(active_id), ids.index(over_id)
    except ValueError:
        raise LookupError("Dragged or target category is not in the current order") from None


class CategoryOrdering:
    """Turns drag gestures over the store's categories into persisted order"""

    def __init__(self, store: MenuStore, persist: PersistOrder):
        self._store = store
        self._persist = persist

    async def reorder(self, source: int, target: int) -> bool:
        """Move one category; returns False when there was nothing to do"""
        if source == target:
            return False

        new_order = move_item(self._store.categories, source, target)
        self._store.speculate_category_order(new_order)

        category_ids = [category.id for category in new_order]
        logger.info("Persisting category order", source=source, target=target)
        await self._persist(category_ids)

        await self._store.refresh()
        return True

    async def drop(self, active_id: UUID, over_id: Optional[UUID]) -> bool:
        positions = drop_positions(self._store.categories, active_id, over_id)
        if positions is None:
            return False
        return await self.reorder(*positions)
