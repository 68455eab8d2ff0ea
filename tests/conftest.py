from datetime import datetime

import pytest
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlalchemy import create_engine

from core.db import Base, make_engine
from core.change_feed import ChangeFeed
from models.audit_log import AuditLog  # noqa: F401
from models.menu_item import MenuItem
from models.order import Order, OrderItem  # noqa: F401
from models.user import User  # noqa: F401


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False, future=True)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def file_session_factory(tmp_path):
    """File-backed SQLite so separate threads get separate connections."""
    eng = make_engine(f"sqlite:///{tmp_path / 'orders.db'}")
    Base.metadata.create_all(bind=eng)
    yield sessionmaker(bind=eng, autoflush=False, autocommit=False, expire_on_commit=False, future=True)
    eng.dispose()


@pytest.fixture
def feed():
    return ChangeFeed()


@pytest.fixture
def recorder():
    """Callable that remembers every event it receives."""
    class Recorder:
        def __init__(self):
            self.events = []

        def __call__(self, event):
            self.events.append(event)

    return Recorder()


@pytest.fixture
def menu(db):
    items = [
        MenuItem(name="Dosa", category="Main Course", price=80.0),
        MenuItem(name="Masala Chai", category="Beverages", price=40.0),
        MenuItem(name="Gulab Jamun", category="Desserts", price=90.0, available=False),
    ]
    db.add_all(items)
    db.commit()
    return {item.name: item for item in items}


@pytest.fixture
def customer():
    return {"name": "Asha", "table_number": "4", "contact": ""}


@pytest.fixture
def dosa_line(menu):
    dosa = menu["Dosa"]
    return {"menu_item_id": dosa.id, "name": dosa.name, "price": dosa.price, "quantity": 2}


@pytest.fixture
def now():
    return datetime(2026, 10, 18, 13, 30, 0)


@pytest.fixture
def place_order(db, feed, customer, dosa_line):
    """Create an order and walk it forward to the requested status."""
    from core.order_service import create_order, advance

    def _place(status="pending", created_at=None, table_number=None, order_number=None):
        order = create_order(
            db,
            customer=dict(customer, table_number=table_number or customer["table_number"]),
            lines=[dict(dosa_line)],
            payment_mode="cash",
            created_at=created_at,
            order_number=order_number,
            feed=feed,
        )
        while order.status != status:
            order = advance(db, order, feed=feed)
        return order

    return _place
