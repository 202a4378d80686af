# app/system_models/template_model/template_schemas.py
from typing import Optional
from app.helpers.time import UTCDateTime
from pydantic import BaseModel, Field


class TemplateBase(BaseModel):
    name: str = Field(..., min_length=1)
    category: str = "evolution"
    description: Optional[str] = None
    content: str = Field(..., min_length=1)
    is_default: bool = False


class TemplateCreate(TemplateBase):
    pass


class TemplateUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = None
    description: Optional[str] = None
    content: Optional[str] = Field(None, min_length=1)
    is_default: Optional[bool] = None


class TemplateResponse(TemplateBase):
    id: int
    created_by: Optional[int] = None
    created_at: UTCDateTime

    class Config:
        from_attributes = True
