"""Database models"""

from digital_menu.models.menu import Category, MenuItem
from digital_menu.models.news import NewsEvent, NewsEventType
from digital_menu.models.user import User

__all__ = [
    "Category",
    "MenuItem",
    "NewsEvent",
    "NewsEventType",
    "User",
]
