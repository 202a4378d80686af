# app/system_models/patient_model/patient_model.py
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime
from sqlalchemy.orm import relationship
from app.database.connection import Base
from app.helpers.time import utcnow

class Patient(Base):
    __tablename__ = "patients"

    id = Column(Integer, primary_key=True, index=True)

    # Identification
    name = Column(String, nullable=False)
    age = Column(Integer, nullable=False)
    city = Column(String, nullable=True)
    state = Column(String(2), nullable=True)
    leito = Column(String, nullable=True)
    unidade = Column(String, nullable=True)
    dih = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    # Hematology
    hematological_diagnosis = Column(Text, nullable=True)
    hematological_diagnosis_date = Column(DateTime(timezone=True), nullable=True)
    current_protocol = Column(Text, nullable=True)
    previous_protocols = Column(Text, nullable=True)
    tcth = Column(Text, nullable=True)

    # Infection risk (colonization is "KPC", "KPC+NDM", "VRE, ESBL"...)
    colonization = Column(String, nullable=True)
    colonization_date = Column(DateTime(timezone=True), nullable=True)
    comorbidities = Column(Text, nullable=True)
    antecedents = Column(Text, nullable=True)

    # Pre-chemotherapy checklist
    eco_tt = Column(Text, nullable=True)
    carenciais = Column(Text, nullable=True)
    serologias = Column(Text, nullable=True)
    ivermectina = Column(Text, nullable=True)

    prophylaxis = Column(Text, nullable=True)
    muc = Column(Text, nullable=True)
    default_preceptor = Column(String, nullable=True)

    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    evolutions = relationship("Evolution", back_populates="patient")
    antibiotics = relationship("Antibiotic", back_populates="patient")
    cultures = relationship("Culture", back_populates="patient")
    alerts = relationship("Alert", back_populates="patient")
    messages = relationship("PatientMessage", back_populates="patient")

    def __repr__(self):
        return f"<Patient {self.id}: {self.name} (leito {self.leito})>"
