# app/system_services/message_repository.py
from typing import List

from sqlalchemy import select

from app.system_models.message_model.message_model import PatientMessage
from app.system_services.base_repository import BaseRepository


class MessageRepository(BaseRepository[PatientMessage]):
    model = PatientMessage

    async def list_for_patient(self, patient_id: int) -> List[PatientMessage]:
        result = await self.db.execute(
            select(PatientMessage)
            .where(PatientMessage.patient_id == patient_id)
            .order_by(PatientMessage.created_at.asc(), PatientMessage.id.asc())
        )
        return list(result.scalars().all())

    async def recent_for_patient(self, patient_id: int, limit: int) -> List[PatientMessage]:
        """Last ``limit`` messages, oldest first."""
        result = await self.db.execute(
            select(PatientMessage)
            .where(PatientMessage.patient_id == patient_id)
            .order_by(PatientMessage.created_at.desc(), PatientMessage.id.desc())
            .limit(limit)
        )
        return list(reversed(result.scalars().all()))
