"""Shared menu state and category ordering"""

from digital_menu.state.menu_store import MenuSnapshot, MenuStore
from digital_menu.state.ordering import CategoryOrdering, drop_positions, move_item

__all__ = [
    "MenuSnapshot",
    "MenuStore",
    "CategoryOrdering",
    "drop_positions",
    "move_item",
]
