# app/system_services/patient_repository.py
from typing import List

from sqlalchemy import asc, desc, exists, func, or_, select

from app.system_models.antibiotic_model.antibiotic_model import Antibiotic
from app.system_models.culture_model.culture_model import Culture
from app.system_models.enums import AntibioticStatus, CultureStatus
from app.system_models.patient_model.patient_model import Patient
from app.system_models.patient_model.patient_schemas import PatientSearchRequest
from app.system_services.base_repository import BaseRepository


class PatientRepository(BaseRepository[Patient]):
    model = Patient

    async def list_all(self) -> List[Patient]:
        result = await self.db.execute(
            select(Patient).order_by(Patient.created_at.desc(), Patient.id.desc())
        )
        return list(result.scalars().all())

    async def list_active(self) -> List[Patient]:
        """Ward round order: bed, then name."""
        result = await self.db.execute(
            select(Patient)
            .where(Patient.is_active.is_(True))
            .order_by(Patient.leito.asc(), Patient.name.asc())
        )
        return list(result.scalars().all())

    async def count_all(self) -> int:
        result = await self.db.execute(select(func.count(Patient.id)))
        return result.scalar_one()

    async def search(self, params: PatientSearchRequest) -> List[Patient]:
        """Advanced search over active patients."""
        stmt = select(Patient).where(Patient.is_active.is_(True))

        if params.query:
            term = f"%{params.query}%"
            stmt = stmt.where(
                or_(
                    Patient.name.ilike(term),
                    Patient.hematological_diagnosis.ilike(term),
                    Patient.leito.ilike(term),
                )
            )
        if params.colonization:
            stmt = stmt.where(
                or_(*[Patient.colonization.ilike(f"%{code}%") for code in params.colonization])
            )
        if params.unit:
            stmt = stmt.where(Patient.unidade.in_(params.unit))
        if params.date_from:
            stmt = stmt.where(Patient.dih >= params.date_from)
        if params.date_to:
            stmt = stmt.where(Patient.dih <= params.date_to)

        if params.has_active_atb is not None:
            active_atb = exists().where(
                Antibiotic.patient_id == Patient.id,
                Antibiotic.status == AntibioticStatus.ACTIVE.value,
            )
            stmt = stmt.where(active_atb if params.has_active_atb else ~active_atb)
        if params.has_pending_cultures is not None:
            pending = exists().where(
                Culture.patient_id == Patient.id,
                Culture.status == CultureStatus.PENDING.value,
            )
            stmt = stmt.where(pending if params.has_pending_cultures else ~pending)

        column = getattr(Patient, params.sort_by)
        order = desc if params.sort_order == "desc" else asc
        stmt = stmt.order_by(order(column), Patient.id.asc())

        result = await self.db.execute(stmt)
        return list(result.scalars().all())
