# app/system_services/antibiotic_repository.py
from typing import List

from sqlalchemy import func, select

from app.system_models.antibiotic_model.antibiotic_model import Antibiotic
from app.system_models.enums import AntibioticStatus
from app.system_services.base_repository import BaseRepository


class AntibioticRepository(BaseRepository[Antibiotic]):
    model = Antibiotic

    async def list_for_patient(self, patient_id: int) -> List[Antibiotic]:
        result = await self.db.execute(
            select(Antibiotic)
            .where(Antibiotic.patient_id == patient_id)
            .order_by(Antibiotic.start_date.desc(), Antibiotic.id.desc())
        )
        return list(result.scalars().all())

    async def list_active(self) -> List[Antibiotic]:
        result = await self.db.execute(
            select(Antibiotic)
            .where(Antibiotic.status == AntibioticStatus.ACTIVE.value)
            .order_by(Antibiotic.start_date.asc(), Antibiotic.id.asc())
        )
        return list(result.scalars().all())

    async def active_for_patient(self, patient_id: int) -> List[Antibiotic]:
        result = await self.db.execute(
            select(Antibiotic)
            .where(
                Antibiotic.patient_id == patient_id,
                Antibiotic.status == AntibioticStatus.ACTIVE.value,
            )
            .order_by(Antibiotic.start_date.asc(), Antibiotic.id.asc())
        )
        return list(result.scalars().all())

    async def count_active(self) -> int:
        result = await self.db.execute(
            select(func.count(Antibiotic.id)).where(
                Antibiotic.status == AntibioticStatus.ACTIVE.value
            )
        )
        return result.scalar_one()
