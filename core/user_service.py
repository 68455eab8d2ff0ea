# core/user_service.py
from sqlalchemy.orm import Session
from core.auth_service import create_user
from core.config import (
    ADMIN_EMAIL, ADMIN_PASSWORD,
    CASHIER_EMAIL, CASHIER_PASSWORD,
    KITCHEN_EMAIL, KITCHEN_PASSWORD,
)

DEFAULT_STAFF = [
    ("Admin User", ADMIN_EMAIL, ADMIN_PASSWORD, "admin"),
    ("Front Cashier", CASHIER_EMAIL, CASHIER_PASSWORD, "cashier"),
    ("Head Chef", KITCHEN_EMAIL, KITCHEN_PASSWORD, "kitchen"),
]

def create_default_staff(db: Session):
    """Create one account per role if missing; returns the ones created."""
    created = []
    for full_name, email, password, role in DEFAULT_STAFF:
        user = create_user(db, full_name, email.lower(), password, role=role)
        if user:
            created.append(user)
            print(f"✅ Default {role} created: {email} / {password}")
        else:
            print(f"{role.capitalize()} already exists.")
    return created
