# app/system_services/audit_service.py
"""
Audit trail writes.

Recorded after the primary change is committed, on a separate session bound to
the same engine, so a failed audit insert never undoes or expires the clinical
action it describes.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from fastapi.encoders import jsonable_encoder
from sqlalchemy.ext.asyncio import AsyncSession

from app.system_models.audit_model.audit_model import AuditLog
from app.system_models.enums import AuditAction
from app.system_services.audit_repository import AuditLogRepository

logger = logging.getLogger(__name__)


@dataclass
class AuditContext:
    """Who is acting and from where; built once per request."""
    user_id: Optional[int] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None


def snapshot(obj: Any) -> Optional[Dict[str, Any]]:
    """JSON-safe column values of an ORM row."""
    if obj is None:
        return None
    return jsonable_encoder({column.name: getattr(obj, column.name) for column in obj.__table__.columns})


class AuditService:
    def __init__(self, db: AsyncSession, context: Optional[AuditContext] = None):
        self.bind = db.bind
        self.context = context or AuditContext()

    async def record(
        self,
        action: AuditAction,
        entity_type: str,
        entity_id: Optional[int] = None,
        old_values: Optional[Dict[str, Any]] = None,
        new_values: Optional[Dict[str, Any]] = None,
        user_id: Optional[int] = None,
    ) -> Optional[AuditLog]:
        """Write one audit row. Failures are logged and swallowed."""
        try:
            async with AsyncSession(bind=self.bind, expire_on_commit=False) as session:
                repository = AuditLogRepository(session)
                entry = await repository.add(
                    AuditLog(
                        action=action.value,
                        user_id=user_id if user_id is not None else self.context.user_id,
                        entity_type=entity_type,
                        entity_id=entity_id,
                        old_values=old_values,
                        new_values=new_values,
                        ip_address=self.context.ip_address,
                        user_agent=self.context.user_agent,
                    )
                )
                await repository.commit()
            return entry
        except Exception:
            logger.exception(f"Audit write failed: {action.value} {entity_type}#{entity_id}")
            return None
