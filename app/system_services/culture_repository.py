# app/system_services/culture_repository.py
from typing import List

from sqlalchemy import func, select

from app.system_models.culture_model.culture_model import Culture
from app.system_models.enums import CultureStatus
from app.system_services.base_repository import BaseRepository


class CultureRepository(BaseRepository[Culture]):
    model = Culture

    async def list_for_patient(self, patient_id: int) -> List[Culture]:
        result = await self.db.execute(
            select(Culture)
            .where(Culture.patient_id == patient_id)
            .order_by(Culture.collection_date.desc(), Culture.id.desc())
        )
        return list(result.scalars().all())

    async def list_pending(self) -> List[Culture]:
        result = await self.db.execute(
            select(Culture)
            .where(Culture.status == CultureStatus.PENDING.value)
            .order_by(Culture.collection_date.asc(), Culture.id.asc())
        )
        return list(result.scalars().all())

    async def pending_for_patient(self, patient_id: int) -> List[Culture]:
        result = await self.db.execute(
            select(Culture)
            .where(
                Culture.patient_id == patient_id,
                Culture.status == CultureStatus.PENDING.value,
            )
            .order_by(Culture.collection_date.asc(), Culture.id.asc())
        )
        return list(result.scalars().all())

    async def count_pending(self) -> int:
        result = await self.db.execute(
            select(func.count(Culture.id)).where(Culture.status == CultureStatus.PENDING.value)
        )
        return result.scalar_one()
