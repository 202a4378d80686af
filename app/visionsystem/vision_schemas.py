# app/visionsystem/vision_schemas.py
from typing import Dict, Optional

from pydantic import BaseModel, Field


class LabSheetResponse(BaseModel):
    """Response from the lab-sheet OCR endpoint."""

    text: str = Field(..., description="Transcribed text of the sheet")
    labs: Optional[Dict[str, str]] = Field(None, description="Lab values parsed from the model's JSON block")
    structured: bool = Field(..., description="Whether lab values were parsed")
    model_used: str = Field(..., description="Vision model used")
    processing_time_ms: float = Field(..., description="Processing time")
