# app/system_models/antibiotic_model/antibiotic_model.py
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from app.database.connection import Base
from app.helpers.time import utcnow, treatment_day
from app.system_models.enums import AntibioticStatus

class Antibiotic(Base):
    __tablename__ = "antibiotics"

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=False, index=True)

    name = Column(String, nullable=False)
    dose = Column(String, nullable=True)
    frequency = Column(String, nullable=True)
    route = Column(String, nullable=True)
    start_date = Column(DateTime(timezone=True), nullable=False)  # D1
    end_date = Column(DateTime(timezone=True), nullable=True)
    indication = Column(Text, nullable=True)
    status = Column(String, default=AntibioticStatus.ACTIVE.value, nullable=False)
    suspension_reason = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    __table_args__ = (
        CheckConstraint(
            "status IN ('active', 'completed', 'suspended')", name="check_antibiotic_status"
        ),
    )

    patient = relationship("Patient", back_populates="antibiotics")

    @property
    def current_day(self) -> int:
        return treatment_day(self.start_date)

    def __repr__(self):
        return f"<Antibiotic {self.id}: {self.name} ({self.status})>"
