"""
In-process change feed and broadcast channels.

The change feed carries row-level INSERT/UPDATE/DELETE notifications for the
tournament tables; consumers treat every event as "something changed" and
re-fetch or merge. Broadcast channels carry ad-hoc messages that are not tied
to a row change (the round start wake-up signal).
"""
import asyncio
import enum
import logging
from collections import defaultdict
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel

logger = logging.getLogger(__name__)

ALL_EVENTS = "*"


class ChangeEvent(BaseModel):
    table: str
    event_type: str  # INSERT | UPDATE | DELETE
    old_row: Optional[Dict[str, Any]] = None
    new_row: Optional[Dict[str, Any]] = None

    @property
    def row(self) -> Dict[str, Any]:
        return self.new_row if self.new_row is not None else (self.old_row or {})


def serialize_row(obj) -> Dict[str, Any]:
    """Plain JSON-safe dict of a model instance's column values."""
    row = {}
    for column in obj.__table__.columns:
        value = getattr(obj, column.name)
        if isinstance(value, enum.Enum):
            value = value.value
        elif isinstance(value, datetime):
            value = value.isoformat()
        row[column.name] = value
    return row


def _current_loop() -> Optional[asyncio.AbstractEventLoop]:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


class Subscription:
    """
    Handle returned by ChangeFeed.subscribe.

    Either a handler is called synchronously for each event, or events are
    queued for `async for event in subscription`. Closing the handle (or
    leaving its `with` block) detaches it from the feed.
    """

    def __init__(self, feed: "ChangeFeed", table: str, event: str,
                 filters: Optional[Dict[str, Any]] = None,
                 handler: Optional[Callable[[ChangeEvent], Any]] = None):
        self.feed = feed
        self.table = table
        self.event = event.upper() if event != ALL_EVENTS else ALL_EVENTS
        self.filters = filters or {}
        self.handler = handler
        self.queue: asyncio.Queue = asyncio.Queue()
        self.loop = _current_loop()
        self.closed = False

    def matches(self, change: ChangeEvent) -> bool:
        if change.table != self.table:
            return False
        if self.event != ALL_EVENTS and change.event_type != self.event:
            return False
        row = change.row
        return all(row.get(column) == value for column, value in self.filters.items())

    def deliver(self, change: ChangeEvent):
        target = self.handler or self.queue.put_nowait
        # Publishers may run in a worker thread; hop onto the subscriber's loop
        if self.loop is not None and self.loop is not _current_loop():
            if not self.loop.is_closed():
                self.loop.call_soon_threadsafe(target, change)
            return
        target(change)

    async def get(self) -> ChangeEvent:
        return await self.queue.get()

    def get_nowait(self) -> Optional[ChangeEvent]:
        try:
            return self.queue.get_nowait()
        except asyncio.QueueEmpty:
            return None

    def close(self):
        if not self.closed:
            self.closed = True
            self.feed.unsubscribe(self)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def __aiter__(self):
        return self

    async def __anext__(self) -> ChangeEvent:
        if self.closed:
            raise StopAsyncIteration
        return await self.get()


class ChangeFeed:
    def __init__(self):
        self._subscriptions: List[Subscription] = []

    def subscribe(self, table: str, event: str = ALL_EVENTS,
                  filters: Optional[Dict[str, Any]] = None,
                  handler: Optional[Callable[[ChangeEvent], Any]] = None) -> Subscription:
        subscription = Subscription(self, table, event, filters, handler)
        self._subscriptions.append(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription):
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)

    def publish(self, table: str, event_type: str, old_row: Optional[dict] = None,
                new_row: Optional[dict] = None) -> ChangeEvent:
        change = ChangeEvent(table=table, event_type=event_type, old_row=old_row, new_row=new_row)
        for subscription in list(self._subscriptions):
            if not subscription.matches(change):
                continue
            try:
                subscription.deliver(change)
            except Exception as e:
                logger.error(f"Change handler failed for {table} {event_type}: {e}")
        return change

    def subscriber_count(self, table: Optional[str] = None) -> int:
        if table is None:
            return len(self._subscriptions)
        return len([s for s in self._subscriptions if s.table == table])


class Channel:
    """Named fire-and-forget message channel."""

    def __init__(self, name: str):
        self.name = name
        self._handlers: Dict[str, List[Callable]] = defaultdict(list)

    def on(self, event: str, handler: Callable) -> Callable[[], None]:
        self._handlers[event].append(handler)

        def off():
            if handler in self._handlers[event]:
                self._handlers[event].remove(handler)

        return off

    async def send(self, event: str, payload: dict) -> int:
        """Deliver to every handler; returns how many handled it without error."""
        delivered = 0
        for handler in list(self._handlers[event]):
            try:
                result = handler(payload)
                if asyncio.iscoroutine(result):
                    await result
                delivered += 1
            except Exception as e:
                logger.warning(f"Broadcast handler on {self.name}/{event} failed: {e}")
        return delivered


class BroadcastHub:
    def __init__(self):
        self._channels: Dict[str, Channel] = {}

    def channel(self, name: str) -> Channel:
        if name not in self._channels:
            self._channels[name] = Channel(name)
        return self._channels[name]


# Global instances
changefeed = ChangeFeed()
broadcast = BroadcastHub()
