"""
Live order lists for the dashboards.

A LiveOrderList subscribes to the change feed and, on every matching event,
re-runs its list query against the store and hands the full result to the
view. It never patches rows in place, so out-of-order or repeated events
cannot leave a dashboard out of sync with the database.
"""
import threading

from core.change_feed import ORDERS_TABLE, ALL_EVENTS
from core.db import SessionLocal
from core.errors import OrderError


class LiveOrderList:
    """Scoped subscription that refetches a list query on change.

    Args:
        feed: ChangeFeed to subscribe on
        query: callable(db) -> list of orders, e.g. order_service.list_ready
        on_refresh: callable(orders) receiving each fresh result
        predicate: optional event filter (see change_feed.status_eq)
        event_types: "INSERT", "UPDATE" or "*"
        session_factory: opens a session per refetch
        on_error: callable(exc) for store failures during a refetch
    """

    def __init__(self, feed, query, on_refresh, predicate=None, event_types=ALL_EVENTS,
                 session_factory=SessionLocal, on_error=None, name=None):
        self.feed = feed
        self.query = query
        self.on_refresh = on_refresh
        self.predicate = predicate
        self.event_types = event_types
        self.session_factory = session_factory
        self.on_error = on_error
        self.name = name or getattr(query, "__name__", "orders")
        self.orders = []
        self.refresh_count = 0
        self._subscription = None
        # Held across query and render so an older snapshot never paints over a newer one
        self._lock = threading.RLock()

    @property
    def active(self):
        return self._subscription is not None and self._subscription.active

    def start(self, initial_fetch: bool = True):
        if self._subscription is None:
            self._subscription = self.feed.subscribe(ORDERS_TABLE, self.event_types, self.predicate, self._on_event)
        if initial_fetch:
            self.refresh()
        return self

    def refresh(self):
        """Re-read the list from the store and push it to the view."""
        with self._lock:
            db = self.session_factory()
            try:
                orders = self.query(db)
            except OrderError as e:
                print(f"❌ {self.name} refresh failed: {e}")
                if self.on_error:
                    self.on_error(e)
                return None
            finally:
                db.close()
            self.orders = orders
            self.refresh_count += 1
            self.on_refresh(orders)
        return orders

    def rerender(self):
        """Push the last fetched list to the view again, e.g. to age time badges."""
        with self._lock:
            self.on_refresh(self.orders)

    def _on_event(self, event):
        if not self.active:
            return
        self.refresh()

    def close(self):
        if self._subscription is not None:
            self._subscription.close()
            self._subscription = None

    def __enter__(self):
        return self.start()

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
