# app/system_models/alert_model/alert_model.py
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from app.database.connection import Base
from app.helpers.time import utcnow
from app.system_models.enums import AlertPriority

class Alert(Base):
    """
    Follow-up obligation for a patient.

    Lifecycle: created -> read -> resolved, or created -> resolved.
    Resolved is terminal.
    """
    __tablename__ = "alerts"

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=False, index=True)

    type = Column(String, nullable=False)
    priority = Column(String, default=AlertPriority.MEDIUM.value, nullable=False)
    title = Column(String, nullable=False)
    message = Column(Text, nullable=False)
    due_date = Column(DateTime(timezone=True), nullable=True)

    is_read = Column(Boolean, default=False, nullable=False)
    is_resolved = Column(Boolean, default=False, nullable=False)
    resolved_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    resolved_at = Column(DateTime(timezone=True), nullable=True)

    related_culture_id = Column(Integer, ForeignKey("cultures.id"), nullable=True, index=True)
    related_antibiotic_id = Column(Integer, ForeignKey("antibiotics.id"), nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), default=utcnow)

    __table_args__ = (
        CheckConstraint(
            "type IN ('culture_pending', 'atb_review', 'lab_critical', 'prophylaxis', 'custom')",
            name="check_alert_type",
        ),
        CheckConstraint(
            "priority IN ('low', 'medium', 'high', 'critical')", name="check_alert_priority"
        ),
    )

    patient = relationship("Patient", back_populates="alerts")

    def __repr__(self):
        return f"<Alert {self.id}: {self.type}/{self.priority} resolved={self.is_resolved}>"
