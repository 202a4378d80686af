# app/note_engine/schemas.py
from typing import List, Optional

from pydantic import BaseModel, Field

from app.system_models.evolution_model.evolution_schemas import EvolutionResponse, ReadingSuggestion
from app.system_models.message_model.message_schemas import MessageResponse


class GenerateEvolutionRequest(BaseModel):
    patient_id: int
    raw_input: str = Field(..., description="Free-text data of the day: dictation, labs, notes")
    include_impression: bool = True
    include_suggestions: bool = False


class GenerateEvolutionResponse(BaseModel):
    content: str
    impression: Optional[str] = None
    missing_data_alerts: Optional[List[str]] = None
    reading_suggestions: Optional[List[ReadingSuggestion]] = None


class ChatReplyResponse(BaseModel):
    user_message: MessageResponse
    assistant_message: MessageResponse
    evolution: Optional[EvolutionResponse] = None
