"""
Bill arithmetic for the cashier flow.

Amounts are computed once when the order is placed and stored on the order row.
"""
import time
from dataclasses import dataclass, asdict

from core.config import TAX_RATE, SERVICE_CHARGE_RATE, ORDER_NUMBER_PREFIX


@dataclass(frozen=True)
class Bill:
    subtotal: float
    tax: float
    discount: float
    service_charge: float
    total: float

    def as_dict(self):
        return asdict(self)


def line_total(line: dict) -> float:
    return round(float(line["price"]) * int(line["quantity"]), 2)


def compute_bill(lines, tax_rate: float = TAX_RATE, service_rate: float = SERVICE_CHARGE_RATE, discount: float = 0.0) -> Bill:
    """Subtotal of all cart lines plus tax and service charge, less discount."""
    subtotal = round(sum(line_total(line) for line in lines), 2)
    tax = round(subtotal * tax_rate, 2)
    service_charge = round(subtotal * service_rate, 2)
    discount = round(float(discount or 0.0), 2)
    total = round(subtotal + tax - discount + service_charge, 2)
    return Bill(subtotal=subtotal, tax=tax, discount=discount, service_charge=service_charge, total=total)


def generate_order_number(now_ms: int = None, prefix: str = ORDER_NUMBER_PREFIX) -> str:
    """Short display code: prefix + last 8 digits of the millisecond clock."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{prefix}{str(now_ms)[-8:]}"
