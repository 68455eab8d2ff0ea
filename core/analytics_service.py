from sqlalchemy.orm import Session
from datetime import datetime
import pandas as pd

from core.order_service import list_completed_today
from models.order import PAYMENT_MODES

def orders_frame(orders) -> pd.DataFrame:
    """Flatten order rows into a DataFrame of the monetary columns"""
    return pd.DataFrame(
        [
            {
                "order_number": o.order_number,
                "status": o.status,
                "payment_mode": o.payment_mode,
                "subtotal": o.subtotal,
                "tax": o.tax,
                "service_charge": o.service_charge,
                "total": o.total,
                "created_at": o.created_at,
            }
            for o in orders
        ],
        columns=["order_number", "status", "payment_mode", "subtotal", "tax", "service_charge", "total", "created_at"],
    )

def get_daily_sales_summary(db: Session, now: datetime = None):
    """
    Get today's sales report
    Returns: dict with totals, average order value and per-payment-mode sales
    """
    df = orders_frame(list_completed_today(db, now=now))

    total_sales = float(df["total"].sum()) if not df.empty else 0.0
    total_orders = int(len(df))

    by_mode = df.groupby("payment_mode")["total"].sum() if not df.empty else pd.Series(dtype=float)
    payments = {mode: round(float(by_mode.get(mode, 0.0)), 2) for mode in PAYMENT_MODES}

    return {
        "total_sales": round(total_sales, 2),
        "total_orders": total_orders,
        "average_order_value": round(total_sales / total_orders, 2) if total_orders else 0.0,
        "payments": payments,
        "total_tax": round(float(df["tax"].sum()), 2) if not df.empty else 0.0,
        "total_service_charge": round(float(df["service_charge"].sum()), 2) if not df.empty else 0.0,
    }

def get_hourly_sales_pattern(db: Session, now: datetime = None):
    """
    Get today's order count per hour of day
    Returns: dict with hours and order counts
    """
    df = orders_frame(list_completed_today(db, now=now))
    counts = df["created_at"].dt.hour.value_counts() if not df.empty else pd.Series(dtype=int)
    hours = list(range(24))
    return {
        "hours": hours,
        "orders": [int(counts.get(h, 0)) for h in hours],
    }
