from datetime import datetime, timedelta

import pytest
from sqlalchemy.exc import OperationalError

from core.change_feed import OrderInserted, OrderUpdated
from core.errors import (
    OrderValidationError,
    InvalidTransitionError,
    TransitionConflictError,
    OrderCreationError,
    StoreUnavailableError,
)
from core.logger import get_order_audit_trail
from core.order_service import (
    create_order,
    transition,
    advance,
    get_order,
    list_active,
    list_ready,
    list_completed_today,
    list_orders,
)
from models.order import Order, OrderItem


# ===================== CREATE =====================

def test_create_order_starts_pending_with_fixed_amounts(db, feed, customer, dosa_line):
    order = create_order(db, customer, [dosa_line], payment_mode="cash", feed=feed)

    assert order.status == "pending"
    assert order.subtotal == 160.0
    assert order.tax == 8.0
    assert order.service_charge == 8.0
    assert order.total == 176.0
    assert order.customer_contact is None
    assert order.order_number.startswith("TP")
    assert len(order.items) == 1
    item = order.items[0]
    assert (item.item_name, item.quantity, item.price, item.line_total) == ("Dosa", 2, 80.0, 160.0)


def test_create_order_publishes_insert_event(db, feed, recorder, customer, dosa_line):
    feed.subscribe("orders", "INSERT", None, recorder)

    order = create_order(db, customer, [dosa_line], feed=feed)

    assert recorder.events == [OrderInserted(order.id, order.order_number, "4", "pending")]


def test_create_order_writes_audit_entry(db, feed, customer, dosa_line):
    order = create_order(db, customer, [dosa_line], actor="cashier@tablepay.com", feed=feed)

    trail = get_order_audit_trail(db, order.id)
    assert len(trail) == 1
    assert trail[0].user_email == "cashier@tablepay.com"
    assert "Created order" in trail[0].action


@pytest.mark.parametrize("customer_data, lines, mode, message", [
    ({"name": "Asha", "table_number": "4"}, [], "cash", "Cart is empty"),
    ({"name": "", "table_number": "4"}, None, "cash", "customer details"),
    ({"name": "Asha", "table_number": ""}, None, "cash", "customer details"),
    ({"name": "Asha", "table_number": "4"}, None, "cheque", "payment mode"),
])
def test_create_order_validation(db, feed, dosa_line, customer_data, lines, mode, message):
    lines = [dosa_line] if lines is None else lines

    with pytest.raises(OrderValidationError, match=message):
        create_order(db, customer_data, lines, payment_mode=mode, feed=feed)

    assert db.query(Order).count() == 0


def test_create_order_rejects_non_positive_quantity(db, feed, customer, dosa_line):
    with pytest.raises(OrderValidationError):
        create_order(db, customer, [dict(dosa_line, quantity=0)], feed=feed)


@pytest.mark.parametrize("field, value, message", [
    ("quantity", "two", "Invalid quantity"),
    ("quantity", None, "Invalid quantity"),
    ("price", "eighty", "Invalid price"),
])
def test_create_order_rejects_non_numeric_line_values(db, feed, customer, dosa_line, field, value, message):
    with pytest.raises(OrderValidationError, match=message):
        create_order(db, customer, [dict(dosa_line, **{field: value})], feed=feed)

    assert db.query(Order).count() == 0


def test_item_failure_leaves_no_orphan_order(db, feed, recorder, customer, dosa_line):
    feed.subscribe("orders", "*", None, recorder)
    broken_line = dict(dosa_line, name=None)  # item_name is NOT NULL

    with pytest.raises(OrderCreationError):
        create_order(db, customer, [dosa_line, broken_line], feed=feed)

    assert db.query(Order).count() == 0
    assert db.query(OrderItem).count() == 0
    assert recorder.events == []


def test_item_snapshot_survives_menu_edit(db, feed, menu, customer, dosa_line):
    order = create_order(db, customer, [dosa_line], feed=feed)
    menu["Dosa"].name = "Ghee Roast Dosa"
    menu["Dosa"].price = 120.0
    db.commit()

    db.expire_all()
    reloaded = get_order(db, order.id)
    assert reloaded.items[0].item_name == "Dosa"
    assert reloaded.items[0].price == 80.0
    assert reloaded.total == 176.0


# ===================== TRANSITIONS =====================

def test_transition_follows_forward_path(db, feed, place_order):
    order = place_order()

    order = transition(db, order.id, "pending", "cooking", actor_role="kitchen", feed=feed)
    assert order.status == "cooking"
    order = transition(db, order.id, "cooking", "ready", actor_role="kitchen", feed=feed)
    assert order.status == "ready"
    order = transition(db, order.id, "ready", "completed", actor_role="cashier", feed=feed)
    assert order.status == "completed"


def test_transition_publishes_update_event(db, feed, recorder, place_order):
    order = place_order()
    feed.subscribe("orders", "UPDATE", None, recorder)

    transition(db, order.id, "pending", "cooking", feed=feed)

    assert recorder.events == [OrderUpdated(order.id, order.order_number, "4", "pending", "cooking")]


def test_committed_transition_is_published_even_if_reload_fails(db, session_factory, feed, recorder, place_order, monkeypatch):
    order = place_order(status="cooking")
    feed.subscribe("orders", "UPDATE", None, recorder)

    def broken_get(*args, **kwargs):
        raise OperationalError("SELECT orders", {}, Exception("connection dropped"))

    monkeypatch.setattr(db, "get", broken_get)

    with pytest.raises(StoreUnavailableError, match="could not be reloaded"):
        transition(db, order.id, "cooking", "ready", feed=feed)

    assert recorder.events == [OrderUpdated(order.id, order.order_number, "4", "cooking", "ready")]
    fresh = session_factory()
    try:
        assert fresh.query(Order.status).filter(Order.id == order.id).scalar() == "ready"
    finally:
        fresh.close()


@pytest.mark.parametrize("src, dst", [
    ("pending", "ready"),
    ("pending", "completed"),
    ("cooking", "completed"),
    ("ready", "pending"),
    ("ready", "cooking"),
    ("cooking", "pending"),
    ("completed", "ready"),
    ("pending", "pending"),
    ("pending", "served"),
])
def test_illegal_transition_is_rejected_before_write(db, feed, recorder, place_order, src, dst):
    order = place_order(status=src)
    feed.subscribe("orders", "UPDATE", None, recorder)

    with pytest.raises(InvalidTransitionError):
        transition(db, order.id, src, dst, feed=feed)

    db.expire_all()
    assert get_order(db, order.id).status == src
    assert recorder.events == []


@pytest.mark.parametrize("role, src, dst", [
    ("cashier", "pending", "cooking"),
    ("cashier", "cooking", "ready"),
])
def test_role_not_allowed_for_edge(db, feed, place_order, role, src, dst):
    order = place_order(status=src)

    with pytest.raises(InvalidTransitionError, match=role):
        transition(db, order.id, src, dst, actor_role=role, feed=feed)


def test_admin_may_complete_ready_order(db, feed, place_order):
    order = place_order(status="ready")
    assert transition(db, order.id, "ready", "completed", actor_role="admin", feed=feed).status == "completed"


def test_stale_transition_is_a_conflict(db, feed, recorder, place_order):
    order = place_order()
    transition(db, order.id, "pending", "cooking", feed=feed)
    feed.subscribe("orders", "*", None, recorder)

    with pytest.raises(TransitionConflictError) as exc:
        transition(db, order.id, "pending", "cooking", feed=feed)

    assert exc.value.expected == "pending"
    assert exc.value.current == "cooking"
    assert not exc.value.not_found
    assert get_order(db, order.id).status == "cooking"
    assert recorder.events == []


def test_stale_client_cannot_revert_ready_order(db, feed, place_order):
    order = place_order(status="ready")

    # A slow client still thinks the order is cooking
    with pytest.raises(TransitionConflictError):
        transition(db, order.id, "cooking", "ready", feed=feed)

    assert get_order(db, order.id).status == "ready"


def test_completed_order_cannot_be_advanced_again(db, feed, place_order):
    order = place_order(status="completed")

    with pytest.raises(InvalidTransitionError):
        advance(db, order, feed=feed)
    with pytest.raises(TransitionConflictError):
        transition(db, order.id, "ready", "completed", feed=feed)


def test_transition_unknown_order_is_not_found(db, feed):
    with pytest.raises(TransitionConflictError) as exc:
        transition(db, "missing-id", "pending", "cooking", feed=feed)

    assert exc.value.not_found


def test_transition_leaves_money_untouched(db, feed, place_order):
    order = place_order()
    before = (order.subtotal, order.tax, order.discount, order.service_charge, order.total)

    updated = advance(db, order, feed=feed)

    assert updated.status == "cooking"
    assert (updated.subtotal, updated.tax, updated.discount, updated.service_charge, updated.total) == before


def test_transitions_are_audited(db, feed, place_order):
    order = place_order(status="completed")

    actions = [entry.action for entry in get_order_audit_trail(db, order.id)]
    assert len(actions) == 4
    assert actions[1].endswith("pending -> cooking")
    assert actions[3].endswith("ready -> completed")


# ===================== QUERIES =====================

def test_list_active_is_newest_first_and_excludes_completed(db, place_order, now):
    first = place_order(created_at=now - timedelta(minutes=30), status="cooking")
    second = place_order(created_at=now - timedelta(minutes=20), status="ready")
    place_order(created_at=now - timedelta(minutes=10), status="completed")
    third = place_order(created_at=now - timedelta(minutes=5))

    assert [o.id for o in list_active(db)] == [third.id, second.id, first.id]


def test_list_ready_is_oldest_first(db, place_order, now):
    late = place_order(created_at=now - timedelta(minutes=2), status="ready")
    early = place_order(created_at=now - timedelta(minutes=12), status="ready")
    place_order(created_at=now - timedelta(minutes=30), status="cooking")

    assert [o.id for o in list_ready(db)] == [early.id, late.id]


def test_list_completed_today_filters_by_day(db, place_order, now):
    yesterday = place_order(created_at=now - timedelta(days=1), status="completed")
    morning = place_order(created_at=now.replace(hour=9), status="completed")
    lunch = place_order(created_at=now.replace(hour=12))

    ids = [o.id for o in list_completed_today(db, now=now)]
    assert ids == [lunch.id, morning.id]
    assert yesterday.id not in ids


def test_list_orders_combines_filters(db, place_order, now):
    place_order(created_at=now - timedelta(days=2), status="ready")
    today_ready = place_order(created_at=now - timedelta(hours=1), status="ready")

    result = list_orders(db, status_in=["ready"], created_after=now - timedelta(hours=3))
    assert [o.id for o in result] == [today_ready.id]
