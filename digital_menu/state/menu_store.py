"""Shared source of truth for categories and menu items"""

import asyncio
from dataclasses import dataclass, replace
from typing import Iterable, List, Optional, Set, Tuple
from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import async_sessionmaker

from digital_menu.realtime.feed import ChangeFeed, Unsubscribe
from digital_menu.schemas.menu import (
    CategoryResponse,
    MenuItemResponse,
    MenuSection,
    SpecialOfferResponse,
)
from digital_menu.services import menu_service

logger = structlog.get_logger()


@dataclass(frozen=True)
class MenuSnapshot:
    """Categories and items from the same load, never mixed across loads"""
    categories: Tuple[CategoryResponse, ...] = ()
    items: Tuple[MenuItemResponse, ...] = ()

    def items_in(self, category_id: Optional[UUID]) -> List[MenuItemResponse]:
        if category_id is None:
            return list(self.items)
        return [item for item in self.items if item.category_id == category_id]

    def sections(self, category_id: Optional[UUID] = None) -> List[MenuSection]:
        """Items grouped under their category, in category display order"""
        visible = self.items_in(category_id)
        sections = []
        for category in self.categories:
            if category_id is not None and category.id != category_id:
                continue
            sections.append(
                MenuSection(
                    category=category,
                    items=[item for item in visible if item.category_id == category.id],
                )
            )
        return sections

    def special_offers(self) -> List[SpecialOfferResponse]:
        return [
            SpecialOfferResponse.from_item(item)
            for item in self.items
            if item.is_special_offer and item.original_price
        ]


class MenuStore:
    """Holds the latest menu snapshot and re-fetches it on change.

    Every load fetches both collections, so readers always see one
    consistent snapshot. Overlapping refreshes are neither debounced nor
    sequenced: whichever finishes last wins.
    """

    def __init__(self, session_factory: async_sessionmaker):
        self._sessions = session_factory
        self.snapshot = MenuSnapshot()
        self.selected_category: Optional[UUID] = None
        self.loading = False
        self.error: Optional[Exception] = None
        self._unsubscribe: Optional[Unsubscribe] = None
        self._refreshes: Set[asyncio.Task] = set()

    @property
    def categories(self) -> Tuple[CategoryResponse, ...]:
        return self.snapshot.categories

    @property
    def items(self) -> Tuple[MenuItemResponse, ...]:
        return self.snapshot.items

    async def load(self) -> None:
        """Fetch categories and items together and swap in the new snapshot.

        On failure the previous snapshot is kept and ``error`` is set.
        """
        self.loading = True
        try:
            async with self._sessions() as category_db, self._sessions() as item_db:
                # Wait for both before leaving the sessions, even if one fails
                results = await asyncio.gather(
                    menu_service.get_categories(category_db),
                    menu_service.get_menu_items(item_db),
                    return_exceptions=True,
                )
            for result in results:
                if isinstance(result, BaseException):
                    raise result
            categories, items = results
            snapshot = MenuSnapshot(
                categories=tuple(CategoryResponse.model_validate(c) for c in categories),
                items=tuple(MenuItemResponse.model_validate(i) for i in items),
            )
        except Exception as e:
            self.error = e
            logger.error("Failed to load menu", error=str(e))
        else:
            self.snapshot = snapshot
            self.error = None
            logger.debug(
                "Menu loaded",
                categories=len(snapshot.categories),
                items=len(snapshot.items),
            )
        finally:
            self.loading = False

    async def refresh(self) -> None:
        await self.load()

    def select_category(self, category_id: Optional[UUID]) -> None:
        """Change the category filter; does not fetch"""
        self.selected_category = category_id

    def visible_items(self) -> List[MenuItemResponse]:
        return self.snapshot.items_in(self.selected_category)

    def speculate_category_order(self, categories: Iterable[CategoryResponse]) -> None:
        """Show a local category order until the next load confirms or replaces it"""
        self.snapshot = replace(self.snapshot, categories=tuple(categories))

    def start(self, feed: ChangeFeed) -> None:
        """Refresh whenever the change feed reports a menu change"""
        if self._unsubscribe is not None:
            return
        self._unsubscribe = menu_service.subscribe_to_menu_changes(feed, self._on_change)

    def _on_change(self) -> None:
        task = asyncio.get_running_loop().create_task(self.refresh())
        self._refreshes.add(task)
        task.add_done_callback(self._refreshes.discard)

    async def wait_for_refreshes(self) -> None:
        """Wait until refreshes scheduled by the change feed have finished"""
        while self._refreshes:
            await asyncio.gather(*list(self._refreshes), return_exceptions=True)

    async def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        # In-flight refreshes are allowed to finish, not cancelled
        await self.wait_for_refreshes()
