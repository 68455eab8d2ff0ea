# core/auth_service.py
import bcrypt
from sqlalchemy.orm import Session
from models.user import User, STAFF_ROLES

def hash_password(password: str) -> str:
    salt = bcrypt.gensalt()
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

def verify_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except Exception:
        return False

def create_user(db: Session, full_name, email, password, role="cashier"):
    if role not in STAFF_ROLES:
        raise ValueError(f"Unknown staff role: {role}")
    if db.query(User).filter(User.email == email).first():
        return None
    user = User(full_name=full_name, email=email,
                password_hash=hash_password(password), role=role)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user

def authenticate_user(db: Session, email, password):
    """Return (user, message). message is helpful for UI."""
    if not email or not password:
        return None, "Please enter email and password."
    user = db.query(User).filter(User.email == email.strip().lower()).first()
    if not user or not verify_password(password, user.password_hash):
        return None, "Invalid credentials."
    if user.role not in STAFF_ROLES:
        return None, "This account has no dashboard access."
    return user, "Login successful."
