# app/system_services/alert_repository.py
from datetime import datetime
from typing import List, Optional

from sqlalchemy import case, func, select

from app.system_models.alert_model.alert_model import Alert
from app.system_models.enums import AlertPriority, AlertType
from app.system_services.base_repository import BaseRepository

PRIORITY_ORDER = case(
    {priority.value: priority.rank for priority in AlertPriority},
    value=Alert.priority,
    else_=len(AlertPriority),
)


class AlertRepository(BaseRepository[Alert]):
    model = Alert

    async def list_recent(self, limit: int = 100) -> List[Alert]:
        result = await self.db.execute(
            select(Alert).order_by(Alert.created_at.desc(), Alert.id.desc()).limit(limit)
        )
        return list(result.scalars().all())

    async def list_unread(self, limit: Optional[int] = None) -> List[Alert]:
        """Unread, unresolved; critical first, newest first within a priority."""
        stmt = (
            select(Alert)
            .where(Alert.is_read.is_(False), Alert.is_resolved.is_(False))
            .order_by(PRIORITY_ORDER.asc(), Alert.created_at.desc(), Alert.id.desc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def list_for_patient(self, patient_id: int) -> List[Alert]:
        result = await self.db.execute(
            select(Alert)
            .where(Alert.patient_id == patient_id)
            .order_by(Alert.created_at.desc(), Alert.id.desc())
        )
        return list(result.scalars().all())

    async def unresolved_for_antibiotic(self, antibiotic_id: int) -> List[Alert]:
        result = await self.db.execute(
            select(Alert).where(
                Alert.related_antibiotic_id == antibiotic_id,
                Alert.is_resolved.is_(False),
            )
        )
        return list(result.scalars().all())

    async def unresolved_for_culture(self, culture_id: int) -> List[Alert]:
        result = await self.db.execute(
            select(Alert).where(
                Alert.related_culture_id == culture_id,
                Alert.is_resolved.is_(False),
            )
        )
        return list(result.scalars().all())

    async def count_reviews_due_between(self, start: datetime, end: datetime) -> int:
        """Unresolved atb_review alerts with start <= due_date < end."""
        result = await self.db.execute(
            select(func.count(Alert.id)).where(
                Alert.type == AlertType.ATB_REVIEW.value,
                Alert.is_resolved.is_(False),
                Alert.due_date >= start,
                Alert.due_date < end,
            )
        )
        return result.scalar_one()
