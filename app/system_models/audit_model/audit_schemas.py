# app/system_models/audit_model/audit_schemas.py
from typing import Any, Dict, Optional
from app.helpers.time import UTCDateTime
from pydantic import BaseModel
from app.system_models.enums import AuditAction


class AuditLogResponse(BaseModel):
    id: int
    action: AuditAction
    user_id: Optional[int] = None
    entity_type: str
    entity_id: Optional[int] = None
    old_values: Optional[Dict[str, Any]] = None
    new_values: Optional[Dict[str, Any]] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: UTCDateTime

    class Config:
        from_attributes = True
