"""Menu schemas"""

from datetime import datetime
from decimal import Decimal
from typing import Optional, List, Tuple
from uuid import UUID
from pydantic import BaseModel, Field, field_validator, model_validator

from digital_menu.services.pricing import discount_percent, toggle_special_offer


def reject_explicit_nulls(model: BaseModel, fields: Tuple[str, ...]) -> None:
    """Fields that may be omitted from an update but never cleared"""
    cleared = [
        name for name in fields
        if name in model.model_fields_set and getattr(model, name) is None
    ]
    if cleared:
        raise ValueError(f"{', '.join(cleared)} cannot be null")


class CategoryCreate(BaseModel):
    """Create category request"""
    name: str = Field(..., min_length=1, max_length=100)
    order_index: Optional[int] = Field(None, ge=0)


class CategoryUpdate(BaseModel):
    """Update category request"""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    order_index: Optional[int] = Field(None, ge=0)

    @model_validator(mode="after")
    def check_required(self):
        reject_explicit_nulls(self, ("name",))
        return self


class CategoryResponse(BaseModel):
    """Category response"""
    id: UUID
    name: str
    order_index: Optional[int]
    created_at: datetime

    class Config:
        from_attributes = True


def _dedupe_tags(tags: Optional[List[str]]) -> Optional[List[str]]:
    if tags is None:
        return None
    seen = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in seen:
            seen.append(tag)
    return seen


class MenuItemCreate(BaseModel):
    """Create menu item request"""
    name: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    category_id: UUID
    image_url: Optional[str] = None
    tags: List[str] = []
    sub_category: Optional[str] = None
    is_special_offer: bool = False
    original_price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)

    normalize_tags = field_validator("tags")(_dedupe_tags)

    @model_validator(mode="after")
    def default_original_price(self):
        """A new special offer keeps its price as the original price"""
        if self.is_special_offer:
            fields = toggle_special_offer(
                {"price": self.price, "original_price": self.original_price},
                True,
            )
            self.original_price = fields["original_price"]
        return self


class MenuItemUpdate(BaseModel):
    """Update menu item request"""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    category_id: Optional[UUID] = None
    image_url: Optional[str] = None
    tags: Optional[List[str]] = None
    sub_category: Optional[str] = None
    is_special_offer: Optional[bool] = None
    original_price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)

    normalize_tags = field_validator("tags")(_dedupe_tags)

    @model_validator(mode="after")
    def check_required(self):
        reject_explicit_nulls(
            self, ("name", "description", "price", "category_id", "is_special_offer")
        )
        return self


class MenuItemResponse(BaseModel):
    """Menu item response"""
    id: UUID
    name: str
    description: str
    price: Decimal
    category_id: UUID
    image_url: Optional[str]
    tags: List[str] = []
    sub_category: Optional[str]
    is_special_offer: bool = False
    original_price: Optional[Decimal]
    created_at: datetime

    @field_validator("tags", mode="before")
    @classmethod
    def _tags_default(cls, value):
        return value or []

    @field_validator("is_special_offer", mode="before")
    @classmethod
    def _flag_default(cls, value):
        return bool(value)

    class Config:
        from_attributes = True


class SpecialOfferResponse(MenuItemResponse):
    """Special offer with its computed discount"""
    discount_percent: int

    @classmethod
    def from_item(cls, item: MenuItemResponse) -> "SpecialOfferResponse":
        return cls(
            **item.model_dump(),
            discount_percent=discount_percent(item.original_price, item.price),
        )


class MenuSection(BaseModel):
    """A category with the items displayed under it"""
    category: CategoryResponse
    items: List[MenuItemResponse]


class MenuResponse(BaseModel):
    """Public menu view"""
    categories: List[CategoryResponse]
    sections: List[MenuSection]
    selected_category: Optional[UUID] = None
    loading: bool = False
    error: Optional[str] = None


class CategorySelection(BaseModel):
    """Selected category filter; null shows every category"""
    category_id: Optional[UUID] = None


class CategoryMove(BaseModel):
    """Drag gesture: by positions or by (dragged id, id released over)"""
    source: Optional[int] = Field(None, ge=0)
    target: Optional[int] = Field(None, ge=0)
    active_id: Optional[UUID] = None
    over_id: Optional[UUID] = None

    @model_validator(mode="after")
    def check_form(self):
        by_position = self.source is not None and self.target is not None
        by_id = self.active_id is not None
        if by_position == by_id:
            raise ValueError("Provide either source/target or active_id/over_id")
        return self


class CategoryOrder(BaseModel):
    """Full category order, first id displayed first"""
    category_ids: List[UUID] = Field(..., min_length=1)

    @field_validator("category_ids")
    @classmethod
    def unique_ids(cls, value: List[UUID]) -> List[UUID]:
        if len(set(value)) != len(value):
            raise ValueError("category_ids must not contain duplicates")
        return value


class ReorderResult(BaseModel):
    """Outcome of a reorder request"""
    reordered: bool
    categories: List[CategoryResponse]


class ShareLink(BaseModel):
    """Public menu link encoded in the QR code"""
    title: str
    url: str
    qr_code_url: str
