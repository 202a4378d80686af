# app/system_models/antibiotic_model/antibiotic_schemas.py
from typing import Optional
from app.helpers.time import UTCDateTime
from pydantic import BaseModel, Field
from app.system_models.enums import AntibioticStatus


class AntibioticBase(BaseModel):
    patient_id: int
    name: str = Field(..., min_length=1)
    dose: Optional[str] = None
    frequency: Optional[str] = None
    route: Optional[str] = None
    start_date: UTCDateTime
    end_date: Optional[UTCDateTime] = None
    indication: Optional[str] = None


class AntibioticCreate(AntibioticBase):
    pass


class AntibioticUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    dose: Optional[str] = None
    frequency: Optional[str] = None
    route: Optional[str] = None
    start_date: Optional[UTCDateTime] = None
    end_date: Optional[UTCDateTime] = None
    indication: Optional[str] = None
    status: Optional[AntibioticStatus] = None
    suspension_reason: Optional[str] = None


class AntibioticStop(BaseModel):
    reason: Optional[str] = None


class AntibioticResponse(AntibioticBase):
    id: int
    status: AntibioticStatus
    suspension_reason: Optional[str] = None
    current_day: int
    created_at: UTCDateTime

    class Config:
        from_attributes = True
