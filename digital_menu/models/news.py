"""News and event announcements shown in the menu ticker"""

import enum
import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, Date, DateTime, Enum, Text, Uuid

from digital_menu.database import Base


class NewsEventType(str, enum.Enum):
    """Announcement kinds"""
    NEWS = "news"
    EVENT = "event"


class NewsEvent(Base):
    """News/event announcements"""
    __tablename__ = "news_events"
    
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    type = Column(
        Enum(
            NewsEventType,
            name="news_event_type",
            values_callable=lambda kinds: [k.value for k in kinds],
        ),
        nullable=False,
        default=NewsEventType.NEWS,
    )
    active = Column(Boolean, default=True, nullable=False, index=True)
    event_date = Column(Date)  # Required for events
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)
