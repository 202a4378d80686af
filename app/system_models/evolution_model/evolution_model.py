# app/system_models/evolution_model/evolution_model.py
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship
from app.database.connection import Base
from app.helpers.time import utcnow

class Evolution(Base):
    """Dated consult note. Append-only: no update or delete path exists."""
    __tablename__ = "evolutions"

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=False, index=True)

    date = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    content = Column(Text, nullable=False)
    impression = Column(Text, nullable=True)

    # Structured sections
    hd_infecto = Column(JSON, nullable=True)
    hd_resolvidos = Column(JSON, nullable=True)
    atb_atuais = Column(JSON, nullable=True)
    atb_previos = Column(JSON, nullable=True)
    labs = Column(JSON, nullable=True)
    devices = Column(JSON, nullable=True)
    exams = Column(JSON, nullable=True)
    images = Column(JSON, nullable=True)
    cultures = Column(JSON, nullable=True)
    pendencies = Column(JSON, nullable=True)
    conducts = Column(JSON, nullable=True)

    reading_suggestions = Column(JSON, nullable=True)
    missing_data_alerts = Column(JSON, nullable=True)

    preceptor_name = Column(String, nullable=True)
    is_draft = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow)

    patient = relationship("Patient", back_populates="evolutions")
