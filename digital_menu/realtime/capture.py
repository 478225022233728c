"""Session hooks that turn committed ORM writes into change feed events.

Changes seen during flushes are collected per session and only published
once the transaction commits; a rollback discards them.
"""

from typing import Set, Tuple

from sqlalchemy import event

from digital_menu.database import FeedSession
from digital_menu.realtime.feed import ChangeEvent

_PENDING_KEY = "pending_changes"


def _table_of(instance) -> str:
    return type(instance).__tablename__


def _pending(session) -> Set[Tuple[str, ChangeEvent]]:
    return session.info.setdefault(_PENDING_KEY, set())


@event.listens_for(FeedSession, "after_flush")
def collect_changes(session, flush_context):
    pending = _pending(session)
    for instance in session.new:
        pending.add((_table_of(instance), ChangeEvent.INSERT))
    for instance in session.dirty:
        if session.is_modified(instance):
            pending.add((_table_of(instance), ChangeEvent.UPDATE))
    for instance in session.deleted:
        pending.add((_table_of(instance), ChangeEvent.DELETE))


@event.listens_for(FeedSession, "after_commit")
def publish_changes(session):
    changes = session.info.pop(_PENDING_KEY, set())
    feed = session.info.get("change_feed")
    if feed is None:
        return
    for table, change in sorted(changes):
        feed.publish(table, change)


@event.listens_for(FeedSession, "after_rollback")
def discard_changes(session):
    session.info.pop(_PENDING_KEY, None)
