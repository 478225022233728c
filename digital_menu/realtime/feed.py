"""In-process publish/subscribe channel for table change events"""

import enum
from dataclasses import dataclass, field
from typing import Callable, FrozenSet, Iterable, List, Union

import structlog

logger = structlog.get_logger()

Notify = Callable[[], None]
Unsubscribe = Callable[[], None]


class ChangeEvent(str, enum.Enum):
    """Kinds of row change a subscriber can listen for"""
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"
    ALL = "*"


@dataclass(eq=False)
class Subscription:
    """One registered interest: tables x event kinds -> callback"""
    tables: FrozenSet[str]
    events: FrozenSet[ChangeEvent]
    callback: Notify
    name: str = "anonymous"
    active: bool = field(default=True)

    def matches(self, table: str, event: ChangeEvent) -> bool:
        if table not in self.tables:
            return False
        return ChangeEvent.ALL in self.events or event in self.events


class ChangeFeed:
    """Delivers "this table changed" signals to subscribers.

    Callbacks receive no payload; they are expected to re-fetch.
    """

    def __init__(self):
        self._subscriptions: List[Subscription] = []

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def subscribe(
        self,
        tables: Iterable[str],
        callback: Notify,
        events: Iterable[Union[ChangeEvent, str]] = (ChangeEvent.ALL,),
        name: str = "anonymous",
    ) -> Unsubscribe:
        """Register ``callback`` and return the handle that removes it"""
        subscription = Subscription(
            tables=frozenset(tables),
            events=frozenset(ChangeEvent(e) for e in events),
            callback=callback,
            name=name,
        )
        self._subscriptions.append(subscription)
        logger.debug(
            "Change feed subscribed",
            channel=name,
            tables=sorted(subscription.tables),
        )

        def unsubscribe() -> None:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)
                subscription.active = False
                logger.debug("Change feed unsubscribed", channel=name)

        return unsubscribe

    def publish(self, table: str, event: Union[ChangeEvent, str]) -> int:
        """Notify every matching subscriber, returning how many were called"""
        event = ChangeEvent(event)
        delivered = 0
        # Copy: callbacks may unsubscribe while we iterate
        for subscription in list(self._subscriptions):
            if not subscription.active or not subscription.matches(table, event):
                continue
            try:
                subscription.callback()
            except Exception:
                logger.exception(
                    "Change feed callback failed",
                    channel=subscription.name,
                    table=table,
                    change=event.value,
                )
            delivered += 1
        return delivered

    def clear(self) -> None:
        for subscription in self._subscriptions:
            subscription.active = False
        self._subscriptions.clear()
