# app/system_models/culture_model/culture_model.py
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON, CheckConstraint
from sqlalchemy.orm import relationship
from app.database.connection import Base
from app.helpers.time import utcnow
from app.system_models.enums import CultureStatus

class Culture(Base):
    __tablename__ = "cultures"

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=False, index=True)

    type = Column(String, nullable=False)        # HMC, URC, LBA...
    site = Column(String, nullable=True)         # SP, CVC, MSD...
    collection_date = Column(DateTime(timezone=True), nullable=False)
    result_date = Column(DateTime(timezone=True), nullable=True)
    status = Column(String, default=CultureStatus.PENDING.value, nullable=False)
    organism = Column(String, nullable=True)
    antibiogram = Column(JSON, nullable=True)    # {"Meropenem": "R", ...}
    positivity_time = Column(String, nullable=True)  # TP

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'negative', 'positive', 'contaminated')",
            name="check_culture_status",
        ),
    )

    patient = relationship("Patient", back_populates="cultures")

    def __repr__(self):
        return f"<Culture {self.id}: {self.type} ({self.status})>"
