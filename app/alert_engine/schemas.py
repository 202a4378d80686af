# app/alert_engine/schemas.py
from typing import Dict, List

from pydantic import BaseModel

from app.system_models.alert_model.alert_schemas import AlertResponse
from app.system_models.antibiotic_model.antibiotic_schemas import AntibioticResponse
from app.system_models.patient_model.patient_schemas import PatientResponse


class DashboardStats(BaseModel):
    total_patients: int
    active_patients: int
    neutropenic_patients: int
    colonized_patients: int
    pending_cultures: int
    active_antibiotics: int
    atb_reviews_today: int
    by_unit: Dict[str, int]
    by_colonization: Dict[str, int]
    recent_alerts: List[AlertResponse]

    class Config:
        from_attributes = True


class ReviewMarker(BaseModel):
    day: int
    date: str  # ISO yyyy-mm-dd
    is_past: bool


class AntibioticTimelineEntry(BaseModel):
    antibiotic: AntibioticResponse
    current_day: int
    review_dates: List[ReviewMarker]

    class Config:
        from_attributes = True


class PatientTimeline(BaseModel):
    patient: PatientResponse
    antibiotics: List[AntibioticTimelineEntry]

    class Config:
        from_attributes = True
