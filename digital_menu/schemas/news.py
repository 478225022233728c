"""News and event schemas"""

from datetime import date, datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, Field, model_validator

from digital_menu.models.news import NewsEventType
from digital_menu.schemas.menu import reject_explicit_nulls


def check_event_date(kind: NewsEventType, event_date: Optional[date]) -> None:
    """Events need a date; plain news may go without one"""
    if kind == NewsEventType.EVENT and not event_date:
        raise ValueError("event_date is required for events")


class NewsEventCreate(BaseModel):
    """Create news/event request"""
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)
    type: NewsEventType = NewsEventType.NEWS
    active: bool = True
    event_date: Optional[date] = None

    @model_validator(mode="after")
    def require_event_date(self):
        check_event_date(self.type, self.event_date)
        return self


class NewsEventUpdate(BaseModel):
    """Update news/event request; checked against the stored row on apply"""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    content: Optional[str] = Field(None, min_length=1)
    type: Optional[NewsEventType] = None
    active: Optional[bool] = None
    event_date: Optional[date] = None

    @model_validator(mode="after")
    def check_required(self):
        reject_explicit_nulls(self, ("title", "content", "type", "active"))
        return self


class NewsEventResponse(BaseModel):
    """News/event response"""
    id: UUID
    title: str
    content: str
    type: NewsEventType
    active: bool
    event_date: Optional[date]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
