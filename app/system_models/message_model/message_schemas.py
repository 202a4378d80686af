# app/system_models/message_model/message_schemas.py
from typing import Optional
from app.helpers.time import UTCDateTime
from pydantic import BaseModel, Field
from app.system_models.enums import MessageRole, MessageType


class MessageSend(BaseModel):
    content: str = Field(..., min_length=1)


class MessageResponse(BaseModel):
    id: int
    patient_id: int
    role: MessageRole
    content: str
    message_type: MessageType
    evolution_id: Optional[int] = None
    created_at: UTCDateTime

    class Config:
        from_attributes = True
