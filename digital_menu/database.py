"""Database engine, session factory and request-scoped session dependency"""

from typing import AsyncIterator, Optional

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase, Session

from digital_menu.realtime.feed import ChangeFeed


class Base(DeclarativeBase):
    """Declarative base for all tables"""


class FeedSession(Session):
    """Session whose committed row changes are published to a change feed.

    The feed is looked up in ``session.info["change_feed"]``; see
    ``digital_menu.realtime.capture`` for the hooks.
    """


def create_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create the async engine for the table store"""
    return create_async_engine(database_url, echo=echo, pool_pre_ping=True)


def create_session_factory(
    engine: AsyncEngine,
    change_feed: Optional[ChangeFeed] = None,
) -> async_sessionmaker:
    """Session factory whose sessions report commits to ``change_feed``"""
    # Registers the FeedSession listeners
    from digital_menu.realtime import capture  # noqa: F401

    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        sync_session_class=FeedSession,
        expire_on_commit=False,
        info={"change_feed": change_feed},
    )


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """Yield a session from the running application's session factory"""
    async with request.app.state.runtime.session_factory() as session:
        yield session
