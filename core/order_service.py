# core/order_service.py
"""
Order lifecycle: creation, status transitions and the list queries
each dashboard refetches.

Status only moves forward: pending -> cooking -> ready -> completed.
Every transition is a conditional write on the expected prior status, so a
stale client can never overwrite a newer status.
"""
from datetime import datetime

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.billing import compute_bill, generate_order_number, line_total
from core.change_feed import change_feed, OrderInserted, OrderUpdated
from core.config import TAX_RATE, SERVICE_CHARGE_RATE
from core.errors import (
    OrderValidationError,
    InvalidTransitionError,
    TransitionConflictError,
    OrderCreationError,
    StoreUnavailableError,
)
from core.logger import log_action
from models.order import (
    Order, OrderItem,
    PENDING, COOKING, READY, COMPLETED,
    ORDER_STATUSES, ACTIVE_STATUSES, PAYMENT_MODES,
)

# (from, to) -> roles allowed to make the move, and the dashboard label
TRANSITIONS = {
    (PENDING, COOKING): {"roles": ("kitchen",), "label": "Start Cooking"},
    (COOKING, READY): {"roles": ("kitchen",), "label": "Mark as Ready"},
    (READY, COMPLETED): {"roles": ("kitchen", "cashier"), "label": "Complete Order"},
}


# ===================== STATE MACHINE =====================

def next_action(status: str):
    """Legal next status from the given one, or None when terminal."""
    for (src, dst) in TRANSITIONS:
        if src == status:
            return dst
    return None

def action_label(status: str, role: str = None):
    """Button text for the next move from this status."""
    dst = next_action(status)
    if dst is None:
        return None
    if dst == COMPLETED and role in ("cashier", "admin"):
        return "Mark as Served"
    return TRANSITIONS[(status, dst)]["label"]

def can_transition(from_status: str, to_status: str, role: str = None) -> bool:
    edge = TRANSITIONS.get((from_status, to_status))
    if edge is None:
        return False
    # Admins may perform any legal move
    return role is None or role == "admin" or role in edge["roles"]

def validate_transition(from_status: str, to_status: str, role: str = None):
    """Raise InvalidTransitionError unless the move is a legal edge for the role."""
    if from_status not in ORDER_STATUSES or to_status not in ORDER_STATUSES:
        raise InvalidTransitionError(from_status, to_status, role)
    if (from_status, to_status) not in TRANSITIONS:
        raise InvalidTransitionError(from_status, to_status)
    if not can_transition(from_status, to_status, role):
        raise InvalidTransitionError(from_status, to_status, role)


# ===================== QUERIES =====================

def start_of_day(now: datetime = None) -> datetime:
    now = now or datetime.now()
    return now.replace(hour=0, minute=0, second=0, microsecond=0)

def list_orders(db: Session, status_in=None, created_after: datetime = None, ascending: bool = False):
    """Filtered order query backing every dashboard list."""
    try:
        query = db.query(Order)
        if status_in is not None:
            query = query.filter(Order.status.in_(list(status_in)))
        if created_after is not None:
            query = query.filter(Order.created_at >= created_after)
        if ascending:
            query = query.order_by(Order.created_at.asc(), Order.order_number.asc())
        else:
            query = query.order_by(Order.created_at.desc(), Order.order_number.desc())
        return query.all()
    except SQLAlchemyError as e:
        db.rollback()
        raise StoreUnavailableError(f"Failed to load orders: {e}") from e

def list_active(db: Session):
    """Kitchen view: pending, cooking and ready orders, newest first."""
    return list_orders(db, status_in=ACTIVE_STATUSES)

def list_ready(db: Session):
    """Ready-to-serve view: oldest first, they have waited longest."""
    return list_orders(db, status_in=(READY,), ascending=True)

def list_completed_today(db: Session, now: datetime = None):
    """Today's orders for history and reporting, newest first."""
    return list_orders(db, created_after=start_of_day(now))

def get_order(db: Session, order_id: str):
    try:
        return db.query(Order).filter(Order.id == order_id).first()
    except SQLAlchemyError as e:
        db.rollback()
        raise StoreUnavailableError(f"Failed to load order: {e}") from e


# ===================== TRANSITIONS =====================

def transition(db: Session, order_id: str, expected_from: str, to: str,
               actor_role: str = None, actor: str = None, feed=None):
    """
    Move an order from expected_from to `to`.

    The update is conditioned on the stored status still being expected_from.
    If no row matches, TransitionConflictError is raised and nothing changes;
    the caller should refetch to see the authoritative state.

    Args:
        db: Database session
        order_id: Order to move
        expected_from: Status the caller believes the order is in
        to: Target status
        actor_role: Role of the acting staff member (checked when given)
        actor: Email recorded in the audit log
        feed: ChangeFeed to publish on (defaults to the shared feed)

    Returns:
        Order: the refreshed order row
    """
    validate_transition(expected_from, to, actor_role)
    feed = feed if feed is not None else change_feed

    try:
        row = db.execute(
            update(Order)
            .where(Order.id == order_id, Order.status == expected_from)
            .values(status=to)
            .returning(Order.order_number, Order.table_number)
            .execution_options(synchronize_session=False)
        ).first()
        if row is None:
            db.rollback()
            current = db.query(Order.status).filter(Order.id == order_id).scalar()
            raise TransitionConflictError(order_id, expected_from, current)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise StoreUnavailableError(f"Failed to update order: {e}") from e

    # Committed: announce from the written row before anything else can fail
    order_number, table_number = row
    print(f"🔄 Order #{order_number} {expected_from} → {to}")
    feed.publish(OrderUpdated(
        order_id=order_id,
        order_number=order_number,
        table_number=table_number,
        old_status=expected_from,
        new_status=to,
    ))
    log_action(actor, f"Order #{order_number}: {expected_from} -> {to}", order_id=order_id, db=db)

    try:
        return db.get(Order, order_id, populate_existing=True)
    except SQLAlchemyError as e:
        db.rollback()
        raise StoreUnavailableError(f"Order #{order_number} updated but could not be reloaded: {e}") from e

def advance(db: Session, order: Order, actor_role: str = None, actor: str = None, feed=None):
    """Move an order to its next status, using the status this client last saw."""
    to = next_action(order.status)
    if to is None:
        raise InvalidTransitionError(order.status, None, actor_role)
    return transition(db, order.id, order.status, to, actor_role=actor_role, actor=actor, feed=feed)


# ===================== CREATION =====================

def _validate_new_order(customer: dict, lines, payment_mode: str):
    if not lines:
        raise OrderValidationError("Cart is empty")
    if not (customer.get("name") or "").strip() or not str(customer.get("table_number") or "").strip():
        raise OrderValidationError("Please enter customer details")
    if payment_mode not in PAYMENT_MODES:
        raise OrderValidationError(f"Unknown payment mode: {payment_mode}")
    for line in lines:
        try:
            quantity = int(line.get("quantity", 0))
        except (TypeError, ValueError):
            raise OrderValidationError(f"Invalid quantity for {line.get('name')}")
        if quantity <= 0:
            raise OrderValidationError(f"Invalid quantity for {line.get('name')}")
        try:
            price = float(line.get("price", -1))
        except (TypeError, ValueError):
            raise OrderValidationError(f"Invalid price for {line.get('name')}")
        if price < 0:
            raise OrderValidationError(f"Invalid price for {line.get('name')}")

def create_order(db: Session, customer: dict, lines, payment_mode: str = "cash", created_by: int = None,
                 actor: str = None, discount: float = 0.0, tax_rate: float = TAX_RATE,
                 service_rate: float = SERVICE_CHARGE_RATE, order_number: str = None,
                 created_at: datetime = None, feed=None):
    """
    Insert an order and its items as one unit, always starting at pending.

    Args:
        customer: {"name", "table_number", "contact"}
        lines: cart lines {"menu_item_id", "name", "price", "quantity"}

    Raises:
        OrderValidationError: before any write
        OrderCreationError: the store rejected part of the write; nothing was kept
    """
    _validate_new_order(customer, lines, payment_mode)
    feed = feed if feed is not None else change_feed
    bill = compute_bill(lines, tax_rate=tax_rate, service_rate=service_rate, discount=discount)

    order = Order(
        order_number=order_number or generate_order_number(),
        customer_name=customer["name"].strip(),
        customer_contact=(customer.get("contact") or "").strip() or None,
        table_number=str(customer["table_number"]).strip(),
        subtotal=bill.subtotal,
        tax=bill.tax,
        discount=bill.discount,
        service_charge=bill.service_charge,
        total=bill.total,
        payment_mode=payment_mode,
        status=PENDING,
        created_by=created_by,
        created_at=created_at or datetime.now(),
    )

    try:
        db.add(order)
        db.flush()  # assigns order.id for the items
        db.add_all([
            OrderItem(
                order_id=order.id,
                menu_item_id=line.get("menu_item_id"),
                item_name=line["name"],
                quantity=int(line["quantity"]),
                price=float(line["price"]),
                line_total=line_total(line),
            )
            for line in lines
        ])
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        print(f"❌ Failed to save order: {e}")
        raise OrderCreationError("Failed to save order. Please try again.") from e

    db.refresh(order)
    log_action(actor, f"Created order #{order.order_number} (Table {order.table_number}, {order.total:.2f})",
               order_id=order.id, db=db)
    print(f"✅ Order #{order.order_number} created for table {order.table_number}")

    feed.publish(OrderInserted(
        order_id=order.id,
        order_number=order.order_number,
        table_number=order.table_number,
        status=order.status,
    ))
    return order
