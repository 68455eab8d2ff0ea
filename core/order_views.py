"""
Derived values shown on the dashboards.

Pure functions over Order rows; recomputed on every refresh.
"""
from datetime import datetime, timedelta

from core.config import URGENT_AFTER_MINUTES
from models.order import ACTIVE_STATUSES


def _elapsed(order, now=None) -> timedelta:
    now = now or datetime.now()
    return now - order.created_at


def elapsed_minutes(order, now=None) -> int:
    """Whole minutes since the order was created (floored, never negative)."""
    seconds = _elapsed(order, now).total_seconds()
    return max(0, int(seconds // 60))


def is_urgent(order, now=None, threshold_minutes: int = URGENT_AFTER_MINUTES) -> bool:
    """True once the order has waited strictly longer than the threshold.

    Compared on the exact elapsed time: 5:00 is not urgent, 5:01 is.
    """
    return _elapsed(order, now) > timedelta(minutes=threshold_minutes)


def status_counts(orders) -> dict:
    """Badge counts per active status, zero-filled."""
    counts = {status: 0 for status in ACTIVE_STATUSES}
    for order in orders:
        counts[order.status] = counts.get(order.status, 0) + 1
    return counts


def filter_by_status(orders, status=None):
    if status is None or status == "all":
        return list(orders)
    return [o for o in orders if o.status == status]


def format_elapsed(minutes: int) -> str:
    if minutes < 1:
        return "just now"
    return f"{minutes}m ago"
