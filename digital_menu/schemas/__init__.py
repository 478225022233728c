"""Pydantic schemas for request/response validation"""

from digital_menu.schemas.auth import (
    Token,
    SignUpRequest,
    RefreshRequest,
    UserResponse,
)
from digital_menu.schemas.menu import (
    CategoryCreate,
    CategoryUpdate,
    CategoryResponse,
    CategoryMove,
    CategoryOrder,
    CategorySelection,
    MenuItemCreate,
    MenuItemUpdate,
    MenuItemResponse,
    MenuResponse,
    MenuSection,
    ReorderResult,
    ShareLink,
    SpecialOfferResponse,
)
from digital_menu.schemas.news import (
    NewsEventCreate,
    NewsEventUpdate,
    NewsEventResponse,
)

__all__ = [
    "Token",
    "SignUpRequest",
    "RefreshRequest",
    "UserResponse",
    "CategoryCreate",
    "CategoryUpdate",
    "CategoryResponse",
    "CategoryMove",
    "CategoryOrder",
    "CategorySelection",
    "MenuItemCreate",
    "MenuItemUpdate",
    "MenuItemResponse",
    "MenuResponse",
    "MenuSection",
    "ReorderResult",
    "ShareLink",
    "SpecialOfferResponse",
    "NewsEventCreate",
    "NewsEventUpdate",
    "NewsEventResponse",
]
