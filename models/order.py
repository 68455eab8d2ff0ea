import uuid
from datetime import datetime

from sqlalchemy import Column, Integer, Float, String, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from core.db import Base
from models.menu_item import MenuItem  # noqa: F401  registers menu_items for the FK
from models.user import User  # noqa: F401

PENDING = "pending"
COOKING = "cooking"
READY = "ready"
COMPLETED = "completed"

ORDER_STATUSES = (PENDING, COOKING, READY, COMPLETED)
ACTIVE_STATUSES = (PENDING, COOKING, READY)
PAYMENT_MODES = ("cash", "card", "upi")


def _new_order_id():
    return str(uuid.uuid4())


class Order(Base):
    __tablename__ = "orders"
    __table_args__ = (
        CheckConstraint("status IN ('pending', 'cooking', 'ready', 'completed')", name="ck_orders_status"),
        CheckConstraint("payment_mode IN ('cash', 'card', 'upi')", name="ck_orders_payment_mode"),
    )

    id = Column(String(36), primary_key=True, default=_new_order_id)
    order_number = Column(String, nullable=False, index=True)
    customer_name = Column(String, nullable=False)
    customer_contact = Column(String, nullable=True)
    table_number = Column(String, nullable=False)

    # Fixed at creation, never recomputed
    subtotal = Column(Float, nullable=False)
    tax = Column(Float, nullable=False, default=0.0)
    discount = Column(Float, nullable=False, default=0.0)
    service_charge = Column(Float, nullable=False, default=0.0)
    total = Column(Float, nullable=False)
    payment_mode = Column(String, nullable=False, default="cash")

    status = Column(String, nullable=False, default=PENDING, index=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.now, index=True)

    # Relationships
    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan", lazy="selectin")
    creator = relationship("User", back_populates="orders")

    def __repr__(self):
        return f"<Order #{self.order_number} {self.status}>"


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(String(36), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    menu_item_id = Column(Integer, ForeignKey("menu_items.id"), nullable=True)
    # Snapshot so later menu edits leave invoices untouched
    item_name = Column(String, nullable=False)
    quantity = Column(Integer, nullable=False)
    price = Column(Float, nullable=False)
    line_total = Column(Float, nullable=False)

    # Relationships
    order = relationship("Order", back_populates="items")
    menu_item = relationship("MenuItem")
