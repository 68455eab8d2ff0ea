"""
Change feed for the orders table.

Every Flet client runs in the same process, so a single in-process feed is
shared by all dashboards. The order service publishes after each successful
commit; subscribers receive typed events and usually refetch.
"""
import itertools
import threading
import traceback
from dataclasses import dataclass, field
from typing import Callable, Optional

INSERT = "INSERT"
UPDATE = "UPDATE"
ALL_EVENTS = "*"

ORDERS_TABLE = "orders"


@dataclass(frozen=True)
class OrderInserted:
    order_id: str
    order_number: str
    table_number: str
    status: str
    table: str = field(default=ORDERS_TABLE, init=False)
    event_type: str = field(default=INSERT, init=False)

    @property
    def new_status(self):
        return self.status


@dataclass(frozen=True)
class OrderUpdated:
    order_id: str
    order_number: str
    table_number: str
    old_status: str
    new_status: str
    table: str = field(default=ORDERS_TABLE, init=False)
    event_type: str = field(default=UPDATE, init=False)

    @property
    def status(self):
        return self.new_status


def status_eq(status: str) -> Callable:
    """Match events whose resulting row has the given status."""
    def predicate(event):
        return event.status == status
    return predicate


def touches_status(status: str) -> Callable:
    """Match events that move an order into or out of the given status."""
    def predicate(event):
        return event.status == status or getattr(event, "old_status", None) == status
    return predicate


class Subscription:
    """Handle returned by ChangeFeed.subscribe; release with close() or a with-block."""

    def __init__(self, feed, sub_id, table, event_types, predicate, callback):
        self._feed = feed
        self.id = sub_id
        self.table = table
        self.event_types = event_types
        self.predicate = predicate
        self.callback = callback

    @property
    def active(self):
        return self._feed.is_subscribed(self)

    def matches(self, event) -> bool:
        if event.table != self.table:
            return False
        if ALL_EVENTS not in self.event_types and event.event_type not in self.event_types:
            return False
        return self.predicate is None or bool(self.predicate(event))

    def close(self):
        self._feed.unsubscribe(self)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def __repr__(self):
        return f"<Subscription {self.id} {self.table} {sorted(self.event_types)}>"


class ChangeFeed:
    """Publish/subscribe hub for row-level change events."""

    def __init__(self):
        self._subscriptions = {}
        self._lock = threading.Lock()
        self._ids = itertools.count(1)

    def subscribe(self, table: str, event_types, predicate: Optional[Callable], callback: Callable) -> Subscription:
        """Register a callback for matching events.

        Args:
            table: table name, e.g. "orders"
            event_types: "INSERT", "UPDATE", "*" or an iterable of those
            predicate: optional filter called with the event
            callback: called with the event on every match
        """
        if isinstance(event_types, str):
            event_types = {event_types}
        event_types = frozenset(event_types)
        unknown = event_types - {INSERT, UPDATE, ALL_EVENTS}
        if unknown:
            raise ValueError(f"Unknown event types: {sorted(unknown)}")

        with self._lock:
            sub = Subscription(self, next(self._ids), table, event_types, predicate, callback)
            self._subscriptions[sub.id] = sub
        return sub

    def unsubscribe(self, subscription: Subscription) -> bool:
        """Release a subscription. Returns False if it was already released."""
        with self._lock:
            return self._subscriptions.pop(subscription.id, None) is not None

    def is_subscribed(self, subscription: Subscription) -> bool:
        with self._lock:
            return subscription.id in self._subscriptions

    def subscriber_count(self, table: str = None) -> int:
        with self._lock:
            if table is None:
                return len(self._subscriptions)
            return sum(1 for s in self._subscriptions.values() if s.table == table)

    def publish(self, event) -> int:
        """Deliver an event to every matching subscriber; returns how many were called.

        A failing callback is reported and skipped so the others still get the event.
        """
        with self._lock:
            targets = list(self._subscriptions.values())

        delivered = 0
        for sub in targets:
            # Released by an earlier callback in this same delivery
            if not self.is_subscribed(sub):
                continue
            try:
                if not sub.matches(event):
                    continue
                sub.callback(event)
                delivered += 1
            except Exception as ex:
                print(f"❌ Change feed callback error ({sub}): {ex}")
                traceback.print_exc()
        return delivered


# Shared by every dashboard in this process
change_feed = ChangeFeed()
