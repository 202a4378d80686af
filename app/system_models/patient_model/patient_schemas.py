# app/system_models/patient_model/patient_schemas.py
from typing import List, Optional, Literal
from app.helpers.time import UTCDateTime
from pydantic import BaseModel, Field, field_validator


class PatientBase(BaseModel):
    name: str = Field(..., min_length=1)
    age: int = Field(..., ge=0, le=130)
    city: Optional[str] = None
    state: Optional[str] = Field(None, max_length=2)
    leito: Optional[str] = None
    unidade: Optional[str] = None
    dih: UTCDateTime

    hematological_diagnosis: Optional[str] = None
    hematological_diagnosis_date: Optional[UTCDateTime] = None
    current_protocol: Optional[str] = None
    previous_protocols: Optional[str] = None
    tcth: Optional[str] = None

    colonization: Optional[str] = None
    colonization_date: Optional[UTCDateTime] = None
    comorbidities: Optional[str] = None
    antecedents: Optional[str] = None

    eco_tt: Optional[str] = None
    carenciais: Optional[str] = None
    serologias: Optional[str] = None
    ivermectina: Optional[str] = None

    prophylaxis: Optional[str] = None
    muc: Optional[str] = None
    default_preceptor: Optional[str] = None

    @field_validator("state")
    def upper_state(cls, v):
        return v.upper() if isinstance(v, str) else v


class PatientCreate(PatientBase):
    is_active: bool = True


class PatientUpdate(BaseModel):
    """Partial update; only the fields sent are applied."""
    name: Optional[str] = Field(None, min_length=1)
    age: Optional[int] = Field(None, ge=0, le=130)
    city: Optional[str] = None
    state: Optional[str] = Field(None, max_length=2)
    leito: Optional[str] = None
    unidade: Optional[str] = None
    dih: Optional[UTCDateTime] = None

    hematological_diagnosis: Optional[str] = None
    hematological_diagnosis_date: Optional[UTCDateTime] = None
    current_protocol: Optional[str] = None
    previous_protocols: Optional[str] = None
    tcth: Optional[str] = None

    colonization: Optional[str] = None
    colonization_date: Optional[UTCDateTime] = None
    comorbidities: Optional[str] = None
    antecedents: Optional[str] = None

    eco_tt: Optional[str] = None
    carenciais: Optional[str] = None
    serologias: Optional[str] = None
    ivermectina: Optional[str] = None

    prophylaxis: Optional[str] = None
    muc: Optional[str] = None
    default_preceptor: Optional[str] = None

    is_active: Optional[bool] = None


class PatientResponse(PatientBase):
    id: int
    is_active: bool
    created_at: UTCDateTime
    updated_at: Optional[UTCDateTime] = None

    class Config:
        from_attributes = True


# ── Advanced search ──
SORT_COLUMNS = Literal["name", "leito", "unidade", "dih", "age", "created_at"]


class PatientSearchRequest(BaseModel):
    query: Optional[str] = None
    colonization: List[str] = Field(default_factory=list)
    unit: List[str] = Field(default_factory=list)
    has_active_atb: Optional[bool] = None
    has_pending_cultures: Optional[bool] = None
    date_from: Optional[UTCDateTime] = None
    date_to: Optional[UTCDateTime] = None
    sort_by: SORT_COLUMNS = "name"
    sort_order: Literal["asc", "desc"] = "asc"


class ProphylaxisPlanResponse(BaseModel):
    patient_id: int
    colonization_codes: List[str]
    recommendations: List[str]
