from sqlalchemy import Column, Integer, String, DateTime
from datetime import datetime
from core.db import Base

class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True)
    user_email = Column(String, nullable=False)
    action = Column(String, nullable=False)
    # Set for order creation and status transitions
    order_id = Column(String(36), nullable=True, index=True)
    timestamp = Column(DateTime, default=datetime.now)

    def __repr__(self):
        return f"<AuditLog {self.user_email}: {self.action}>"
