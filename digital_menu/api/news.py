"""News and event endpoints: public ticker feed and admin management"""

from typing import List
from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import NoResultFound
from sqlalchemy.ext.asyncio import AsyncSession

from digital_menu.api.auth import get_current_user
from digital_menu.database import get_db
from digital_menu.models.user import User
from digital_menu.schemas.news import (
    NewsEventCreate,
    NewsEventResponse,
    NewsEventUpdate,
    check_event_date,
)
from digital_menu.services import news_service

logger = structlog.get_logger()

router = APIRouter()
admin_router = APIRouter()


@router.get("", response_model=List[NewsEventResponse])
async def list_active_news(db: AsyncSession = Depends(get_db)):
    """Active news and events for the menu ticker, newest first"""
    return await news_service.get_active_news_events(db)


@admin_router.get("", response_model=List[NewsEventResponse])
async def list_news(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """All news and events, newest first"""
    return await news_service.get_news_events(db)


@admin_router.post("", response_model=NewsEventResponse, status_code=201)
async def create_news_event(
    news_data: NewsEventCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Create a news item or event"""
    news_event = await news_service.create_news_event(db, news_data)
    logger.info("News event created", news_event_id=str(news_event.id), type=news_event.type.value)
    return news_event


@admin_router.put("/{news_event_id}", response_model=NewsEventResponse)
async def update_news_event(
    news_event_id: UUID,
    news_data: NewsEventUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Update a news item or event"""
    try:
        news_event = await news_service.get_news_event(db, news_event_id)
    except NoResultFound:
        raise HTTPException(status_code=404, detail="News/event not found")
    
    changes = news_data.model_dump(exclude_unset=True)
    try:
        check_event_date(
            changes.get("type", news_event.type),
            changes.get("event_date", news_event.event_date),
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    
    return await news_service.update_news_event(db, news_event_id, changes)


@admin_router.delete("/{news_event_id}", status_code=204)
async def delete_news_event(
    news_event_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Delete a news item or event"""
    await news_service.delete_news_event(db, news_event_id)
