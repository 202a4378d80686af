# app/system_models/message_model/message_model.py
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from app.database.connection import Base
from app.helpers.time import utcnow
from app.system_models.enums import MessageType

class PatientMessage(Base):
    __tablename__ = "patient_messages"

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=False, index=True)

    role = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    message_type = Column(String, default=MessageType.CHAT.value, nullable=False)
    evolution_id = Column(Integer, ForeignKey("evolutions.id"), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow)

    __table_args__ = (
        CheckConstraint("role IN ('user', 'assistant')", name="check_message_role"),
        CheckConstraint(
            "message_type IN ('chat', 'evolution', 'alert', 'summary')",
            name="check_message_type",
        ),
    )

    patient = relationship("Patient", back_populates="messages")
