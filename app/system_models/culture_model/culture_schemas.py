# app/system_models/culture_model/culture_schemas.py
from typing import Dict, Literal, Optional
from app.helpers.time import UTCDateTime
from pydantic import BaseModel, Field
from app.system_models.enums import CultureStatus


class CultureBase(BaseModel):
    patient_id: int
    type: str = Field(..., min_length=1)
    site: Optional[str] = None
    collection_date: UTCDateTime


class CultureCreate(CultureBase):
    pass


class CultureUpdate(BaseModel):
    type: Optional[str] = Field(None, min_length=1)
    site: Optional[str] = None
    collection_date: Optional[UTCDateTime] = None
    organism: Optional[str] = None
    antibiogram: Optional[Dict[str, str]] = None
    positivity_time: Optional[str] = None


class CultureResultUpdate(BaseModel):
    status: Literal["negative", "positive", "contaminated"]
    organism: Optional[str] = None
    antibiogram: Optional[Dict[str, str]] = None
    positivity_time: Optional[str] = None
    result_date: Optional[UTCDateTime] = None


class CultureResponse(CultureBase):
    id: int
    status: CultureStatus
    result_date: Optional[UTCDateTime] = None
    organism: Optional[str] = None
    antibiogram: Optional[Dict[str, str]] = None
    positivity_time: Optional[str] = None
    created_at: UTCDateTime

    class Config:
        from_attributes = True
