# app/system_models/alert_model/alert_schemas.py
from typing import Optional
from app.helpers.time import UTCDateTime
from pydantic import BaseModel, Field
from app.system_models.enums import AlertPriority, AlertType


class AlertBase(BaseModel):
    patient_id: int
    type: AlertType
    priority: AlertPriority = AlertPriority.MEDIUM
    title: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)
    due_date: Optional[UTCDateTime] = None
    related_culture_id: Optional[int] = None
    related_antibiotic_id: Optional[int] = None


class AlertCreate(AlertBase):
    pass


class AlertResponse(AlertBase):
    id: int
    is_read: bool
    is_resolved: bool
    resolved_by: Optional[int] = None
    resolved_at: Optional[UTCDateTime] = None
    created_at: UTCDateTime

    class Config:
        from_attributes = True
