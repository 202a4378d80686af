# app/system_services/evolution_repository.py
from typing import List, Optional

from sqlalchemy import select

from app.system_models.evolution_model.evolution_model import Evolution
from app.system_services.base_repository import BaseRepository


class EvolutionRepository(BaseRepository[Evolution]):
    model = Evolution

    async def list_for_patient(self, patient_id: int) -> List[Evolution]:
        result = await self.db.execute(
            select(Evolution)
            .where(Evolution.patient_id == patient_id)
            .order_by(Evolution.date.desc(), Evolution.id.desc())
        )
        return list(result.scalars().all())

    async def latest_for_patient(self, patient_id: int) -> Optional[Evolution]:
        result = await self.db.execute(
            select(Evolution)
            .where(Evolution.patient_id == patient_id)
            .order_by(Evolution.date.desc(), Evolution.id.desc())
            .limit(1)
        )
        return result.scalars().first()
