import pytest

from core.auth_service import hash_password, verify_password, create_user, authenticate_user
from core.user_service import create_default_staff
from models.user import User


def test_hash_and_verify():
    hashed = hash_password("secret")
    assert hashed != "secret"
    assert verify_password("secret", hashed)
    assert not verify_password("wrong", hashed)
    assert not verify_password("secret", "not-a-hash")


def test_create_user_rejects_duplicates_and_unknown_roles(db):
    assert create_user(db, "Chef", "chef@tablepay.com", "pw", role="kitchen") is not None
    assert create_user(db, "Chef", "chef@tablepay.com", "pw", role="kitchen") is None
    with pytest.raises(ValueError):
        create_user(db, "Guest", "guest@tablepay.com", "pw", role="customer")


def test_authenticate_user(db):
    create_user(db, "Front Cashier", "cashier@tablepay.com", "cashier123", role="cashier")

    user, message = authenticate_user(db, "Cashier@TablePay.com ", "cashier123")
    assert user.role == "cashier"
    assert message == "Login successful."

    user, message = authenticate_user(db, "cashier@tablepay.com", "nope")
    assert user is None
    assert message == "Invalid credentials."

    user, message = authenticate_user(db, "", "")
    assert user is None


def test_default_staff_has_one_account_per_role(db):
    created = create_default_staff(db)
    assert sorted(u.role for u in created) == ["admin", "cashier", "kitchen"]

    assert create_default_staff(db) == []
    assert db.query(User).count() == 3
