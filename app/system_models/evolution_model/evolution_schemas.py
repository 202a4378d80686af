# app/system_models/evolution_model/evolution_schemas.py
from typing import Any, Dict, List, Optional
from app.helpers.time import UTCDateTime
from pydantic import BaseModel, Field


class ReadingSuggestion(BaseModel):
    title: str
    source: str
    summary: str


class ReadingSuggestionList(BaseModel):
    """Structured output of the reading-suggestions call."""

    suggestions: List[ReadingSuggestion] = Field(default_factory=list)


class EvolutionBase(BaseModel):
    patient_id: int
    date: Optional[UTCDateTime] = None
    content: str = Field(..., min_length=1)
    impression: Optional[str] = None

    hd_infecto: Optional[List[Any]] = None
    hd_resolvidos: Optional[List[Any]] = None
    atb_atuais: Optional[List[Any]] = None
    atb_previos: Optional[List[Any]] = None
    labs: Optional[Dict[str, Any]] = None
    devices: Optional[Dict[str, Any]] = None
    exams: Optional[Dict[str, Any]] = None
    images: Optional[List[Any]] = None
    cultures: Optional[List[Any]] = None
    pendencies: Optional[List[Any]] = None
    conducts: Optional[List[Any]] = None

    reading_suggestions: Optional[List[ReadingSuggestion]] = None
    missing_data_alerts: Optional[List[str]] = None

    preceptor_name: Optional[str] = None
    is_draft: bool = False


class EvolutionCreate(EvolutionBase):
    pass


class EvolutionResponse(EvolutionBase):
    id: int
    date: UTCDateTime
    created_at: UTCDateTime

    class Config:
        from_attributes = True
