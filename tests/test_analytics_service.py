from datetime import timedelta

from core.analytics_service import get_daily_sales_summary, get_hourly_sales_pattern
from core.order_service import create_order


def test_empty_day_summary(db, now):
    summary = get_daily_sales_summary(db, now=now)

    assert summary == {
        "total_sales": 0.0,
        "total_orders": 0,
        "average_order_value": 0.0,
        "payments": {"cash": 0.0, "card": 0.0, "upi": 0.0},
        "total_tax": 0.0,
        "total_service_charge": 0.0,
    }


def test_summary_splits_by_payment_mode(db, feed, customer, now):
    line = {"name": "Dosa", "price": 100, "quantity": 1}
    create_order(db, customer, [line], payment_mode="cash", created_at=now - timedelta(hours=1), feed=feed)
    create_order(db, customer, [dict(line, quantity=2)], payment_mode="upi", created_at=now - timedelta(hours=2), feed=feed)
    # Yesterday is excluded
    create_order(db, customer, [line], payment_mode="card", created_at=now - timedelta(days=1), feed=feed)

    summary = get_daily_sales_summary(db, now=now)

    assert summary["total_orders"] == 2
    assert summary["total_sales"] == 330.0
    assert summary["average_order_value"] == 165.0
    assert summary["payments"] == {"cash": 110.0, "card": 0.0, "upi": 220.0}
    assert summary["total_tax"] == 15.0
    assert summary["total_service_charge"] == 15.0


def test_hourly_pattern(db, feed, customer, now):
    line = {"name": "Chai", "price": 40, "quantity": 1}
    create_order(db, customer, [line], created_at=now.replace(hour=9), feed=feed)
    create_order(db, customer, [line], created_at=now.replace(hour=9, minute=45), feed=feed)
    create_order(db, customer, [line], created_at=now.replace(hour=12), feed=feed)

    pattern = get_hourly_sales_pattern(db, now=now)

    assert len(pattern["hours"]) == 24
    assert pattern["orders"][9] == 2
    assert pattern["orders"][12] == 1
    assert sum(pattern["orders"]) == 3
