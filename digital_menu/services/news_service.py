"""News and event data access"""

from datetime import datetime
from typing import Any, Callable, Dict, List
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from digital_menu.models.news import NewsEvent
from digital_menu.realtime.feed import ChangeFeed, Unsubscribe
from digital_menu.schemas.news import NewsEventCreate


async def get_news_events(db: AsyncSession) -> List[NewsEvent]:
    """All announcements, newest first"""
    result = await db.execute(
        select(NewsEvent).order_by(NewsEvent.created_at.desc())
    )
    return list(result.scalars().all())


async def get_active_news_events(db: AsyncSession) -> List[NewsEvent]:
    """Announcements shown in the public ticker, newest first"""
    result = await db.execute(
        select(NewsEvent)
        .where(NewsEvent.active == True)  # noqa: E712
        .order_by(NewsEvent.created_at.desc())
    )
    return list(result.scalars().all())


async def get_news_event(db: AsyncSession, news_event_id: UUID) -> NewsEvent:
    result = await db.execute(select(NewsEvent).where(NewsEvent.id == news_event_id))
    return result.scalar_one()


async def create_news_event(db: AsyncSession, news_data: NewsEventCreate) -> NewsEvent:
    news_event = NewsEvent(**news_data.model_dump())
    db.add(news_event)
    await db.commit()
    return news_event


async def update_news_event(db: AsyncSession, news_event_id: UUID, changes: Dict[str, Any]) -> NewsEvent:
    news_event = await get_news_event(db, news_event_id)
    for field, value in changes.items():
        setattr(news_event, field, value)
    news_event.updated_at = datetime.utcnow()
    await db.commit()
    return news_event


async def delete_news_event(db: AsyncSession, news_event_id: UUID) -> None:
    result = await db.execute(select(NewsEvent).where(NewsEvent.id == news_event_id))
    news_event = result.scalar_one_or_none()
    if news_event is None:
        return
    await db.delete(news_event)
    await db.commit()


def subscribe_to_news_changes(feed: ChangeFeed, callback: Callable[[], None]) -> Unsubscribe:
    return feed.subscribe(
        [NewsEvent.__tablename__],
        callback,
        name="news-changes",
    )
