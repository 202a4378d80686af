# app/system_models/audit_model/audit_model.py
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON, CheckConstraint
from app.database.connection import Base
from app.helpers.time import utcnow

class AuditLog(Base):
    """Append-only record of who changed what."""
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True)
    action = Column(String, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    entity_type = Column(String, nullable=False, index=True)
    entity_id = Column(Integer, nullable=True, index=True)
    old_values = Column(JSON, nullable=True)
    new_values = Column(JSON, nullable=True)
    ip_address = Column(String, nullable=True)
    user_agent = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow)

    __table_args__ = (
        CheckConstraint(
            "action IN ('create', 'update', 'delete', 'export', 'login', 'logout')",
            name="check_audit_action",
        ),
    )
