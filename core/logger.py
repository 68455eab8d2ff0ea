# core/logger.py
from datetime import datetime

from core.db import SessionLocal
from models.audit_log import AuditLog

def log_action(user_email: str, action: str, order_id: str = None, db=None):
    """Record a staff action into the audit log.

    Uses the given session when provided, otherwise opens its own.
    Failures are reported and rolled back, never raised.
    """
    session = db or SessionLocal()
    try:
        log = AuditLog(user_email=user_email or "system", action=action, order_id=order_id, timestamp=datetime.now())
        session.add(log)
        session.commit()
    except Exception as e:
        print("Audit log error:", e)
        session.rollback()
    finally:
        if db is None:
            session.close()

def get_order_audit_trail(db, order_id: str):
    """All audit entries for one order, oldest first."""
    return (
        db.query(AuditLog)
        .filter(AuditLog.order_id == order_id)
        .order_by(AuditLog.timestamp.asc(), AuditLog.id.asc())
        .all()
    )
