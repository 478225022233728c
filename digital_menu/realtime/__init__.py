"""Change feed: table-level change notifications without row payloads"""

from digital_menu.realtime.feed import ChangeEvent, ChangeFeed, Unsubscribe

__all__ = ["ChangeEvent", "ChangeFeed", "Unsubscribe"]
