"""Application-scoped services, created on start-up and torn down on shutdown"""

from dataclasses import dataclass, field
from typing import Callable, List

import structlog
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

from digital_menu.config import Settings
from digital_menu.database import Base, create_engine, create_session_factory
from digital_menu.realtime.feed import ChangeFeed
from digital_menu.services.auth_service import AuthStateFeed
from digital_menu.services.news_service import subscribe_to_news_changes
from digital_menu.state.menu_store import MenuStore

logger = structlog.get_logger()


@dataclass
class Runtime:
    """Everything request handlers share, injected through ``app.state``"""
    settings: Settings
    engine: AsyncEngine
    session_factory: async_sessionmaker
    change_feed: ChangeFeed
    auth_events: AuthStateFeed
    menu_store: MenuStore
    cleanups: List[Callable[[], None]] = field(default_factory=list)


async def start_runtime(settings: Settings) -> Runtime:
    """Connect to the store, load the menu and start listening for changes"""
    import digital_menu.models  # noqa: F401  register tables

    engine = create_engine(settings.database_url, echo=settings.database_echo)
    if settings.create_tables_on_startup:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    change_feed = ChangeFeed()
    session_factory = create_session_factory(engine, change_feed)
    auth_events = AuthStateFeed()
    menu_store = MenuStore(session_factory)

    runtime = Runtime(
        settings=settings,
        engine=engine,
        session_factory=session_factory,
        change_feed=change_feed,
        auth_events=auth_events,
        menu_store=menu_store,
    )

    runtime.cleanups.append(
        auth_events.on_auth_state_change(
            lambda user: logger.info(
                "Auth state changed",
                user_id=str(user.id) if user else None,
            )
        )
    )
    runtime.cleanups.append(
        subscribe_to_news_changes(
            change_feed, lambda: logger.info("News and events changed")
        )
    )

    await menu_store.load()
    menu_store.start(change_feed)
    return runtime


async def stop_runtime(runtime: Runtime) -> None:
    await runtime.menu_store.close()
    for cleanup in runtime.cleanups:
        cleanup()
    runtime.change_feed.clear()
    await runtime.engine.dispose()
