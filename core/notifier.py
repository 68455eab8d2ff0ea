"""
Ready-to-serve alerts for cashier and admin dashboards.
"""
import threading

from core.change_feed import ORDERS_TABLE, UPDATE, status_eq
from models.order import READY

NOTIFY_ROLES = ("cashier", "admin")


def ready_message(event) -> str:
    return f"Order #{event.order_number} (Table {event.table_number}) is ready to serve!"


class ReadyNotifier:
    """
    Toast plus a short sound, once per order entering ready.

    Only UPDATE events count since orders are never inserted as ready.
    The last status seen per order suppresses repeated deliveries of the
    same transition within this session.
    """

    def __init__(self, feed, role: str, show_toast, play_sound=None):
        self.feed = feed
        self.role = role
        self.show_toast = show_toast
        self.play_sound = play_sound
        self.last_seen = {}
        self.fired = 0
        self._subscription = None
        self._lock = threading.Lock()

    @property
    def enabled(self):
        return self.role in NOTIFY_ROLES

    def start(self):
        if self.enabled and self._subscription is None:
            self._subscription = self.feed.subscribe(ORDERS_TABLE, UPDATE, status_eq(READY), self.handle)
        return self

    def handle(self, event):
        with self._lock:
            if self.last_seen.get(event.order_id) == event.new_status:
                return False
            self.last_seen[event.order_id] = event.new_status
            self.fired += 1

        self.show_toast(ready_message(event))
        self._beep()
        return True

    def _beep(self):
        if self.play_sound is None:
            return
        try:
            self.play_sound()
        except Exception as ex:
            # Playback may be blocked before the first user interaction
            print(f"🔇 Notification sound skipped: {ex}")

    def close(self):
        if self._subscription is not None:
            self._subscription.close()
            self._subscription = None

    def __enter__(self):
        return self.start()

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
