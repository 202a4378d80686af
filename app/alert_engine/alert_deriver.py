# app/alert_engine/alert_deriver.py
"""
Alert Deriver
Keeps the alert set in step with antibiotic courses and cultures:
- D3/D7/D14 review alerts when a course starts
- retire a course's alerts when it stops
- culture-pending alert on collection, retired when the result arrives
- one high-priority alert for a positive culture
"""
import logging
from datetime import datetime, timedelta
from typing import List, Optional

from app.helpers.time import as_utc, format_br_date, utcnow
from app.shared.exceptions import NotFound, ValidationError
from app.system_models.alert_model.alert_model import Alert
from app.system_models.alert_model.alert_schemas import AlertCreate
from app.system_models.antibiotic_model.antibiotic_model import Antibiotic
from app.system_models.antibiotic_model.antibiotic_schemas import AntibioticCreate, AntibioticUpdate
from app.system_models.culture_model.culture_model import Culture
from app.system_models.culture_model.culture_schemas import (
    CultureCreate,
    CultureResultUpdate,
    CultureUpdate,
)
from app.system_models.enums import (
    AlertPriority,
    AlertType,
    AntibioticStatus,
    CultureStatus,
)
from app.system_services.alert_repository import AlertRepository
from app.system_services.antibiotic_repository import AntibioticRepository
from app.system_services.culture_repository import CultureRepository
from app.system_services.patient_repository import PatientRepository

logger = logging.getLogger(__name__)

# (treatment day, priority)
REVIEW_SCHEDULE = (
    (3, AlertPriority.HIGH),
    (7, AlertPriority.MEDIUM),
    (14, AlertPriority.MEDIUM),
)

TERMINAL_ANTIBIOTIC_STATUSES = (AntibioticStatus.COMPLETED, AntibioticStatus.SUSPENDED)


def review_due_date(start_date: datetime, day: int) -> datetime:
    """Dn falls on start + (n - 1) days."""
    return as_utc(start_date) + timedelta(days=day - 1)


def review_markers(start_date: datetime, now: Optional[datetime] = None) -> List[dict]:
    """Timeline markers for each scheduled review day."""
    now = as_utc(now or utcnow())
    markers = []
    for day, _ in REVIEW_SCHEDULE:
        due = review_due_date(start_date, day)
        markers.append({"day": day, "date": due.date().isoformat(), "is_past": due < now})
    return markers


class AlertDeriver:
    """Creates and retires alerts as antibiotic and culture records change."""

    def __init__(
        self,
        alerts: AlertRepository,
        antibiotics: AntibioticRepository,
        cultures: CultureRepository,
        patients: PatientRepository,
    ):
        self.alerts = alerts
        self.antibiotics = antibiotics
        self.cultures = cultures
        self.patients = patients

    async def _require_patient(self, patient_id: int) -> None:
        if await self.patients.get(patient_id) is None:
            raise NotFound(f"Patient {patient_id} not found")

    async def _resolve_all(self, alerts: List[Alert], user_id: Optional[int] = None) -> int:
        now = utcnow()
        for alert in alerts:
            alert.is_resolved = True
            alert.resolved_at = now
            alert.resolved_by = user_id
        await self.alerts.db.flush()
        return len(alerts)

    # ============================================================================
    # ANTIBIOTIC COURSES
    # ============================================================================
    async def start_antibiotic(self, data: AntibioticCreate) -> Antibiotic:
        """Create the course and its three review alerts in one commit."""
        await self._require_patient(data.patient_id)

        antibiotic = await self.antibiotics.create(
            {**data.model_dump(exclude_none=True), "status": AntibioticStatus.ACTIVE.value}
        )
        indication = antibiotic.indication or "Indicação não especificada"
        for day, priority in REVIEW_SCHEDULE:
            await self.alerts.add(
                Alert(
                    patient_id=antibiotic.patient_id,
                    type=AlertType.ATB_REVIEW.value,
                    priority=priority.value,
                    title=f"Reavaliação ATB D{day}: {antibiotic.name}",
                    message=f"Reavaliar necessidade de {antibiotic.name} ({indication})",
                    due_date=review_due_date(antibiotic.start_date, day),
                    related_antibiotic_id=antibiotic.id,
                )
            )
        await self.antibiotics.commit()
        logger.info(f"💊 ATB started: {antibiotic.name} for patient {antibiotic.patient_id}")
        return antibiotic

    async def update_antibiotic(self, antibiotic_id: int, changes: AntibioticUpdate) -> Antibiotic:
        antibiotic = await self._get_antibiotic(antibiotic_id)
        was_active = antibiotic.status == AntibioticStatus.ACTIVE.value

        values = changes.model_dump(exclude_unset=True)
        if values.get("status") is not None:
            values["status"] = AntibioticStatus(values["status"]).value
        await self.antibiotics.update(antibiotic, values)

        if was_active and antibiotic.status in {s.value for s in TERMINAL_ANTIBIOTIC_STATUSES}:
            if antibiotic.end_date is None:
                antibiotic.end_date = utcnow()
            resolved = await self._resolve_all(
                await self.alerts.unresolved_for_antibiotic(antibiotic.id)
            )
            logger.info(f"💊 ATB {antibiotic.id} -> {antibiotic.status}, {resolved} alert(s) retired")

        await self.antibiotics.commit()
        return antibiotic

    async def stop_antibiotic(self, antibiotic_id: int, reason: Optional[str] = None) -> Antibiotic:
        """Manual stop: completed now, optional reason, retire this course's alerts. Only active courses stop."""
        antibiotic = await self._get_antibiotic(antibiotic_id)
        if antibiotic.status != AntibioticStatus.ACTIVE.value:
            logger.info(f"ATB {antibiotic.id} already {antibiotic.status}, stop ignored")
            return antibiotic
        await self.antibiotics.update(
            antibiotic,
            {
                "status": AntibioticStatus.COMPLETED.value,
                "end_date": utcnow(),
                "suspension_reason": reason,
            },
        )
        resolved = await self._resolve_all(
            await self.alerts.unresolved_for_antibiotic(antibiotic.id)
        )
        await self.antibiotics.commit()
        logger.info(f"🛑 ATB {antibiotic.id} stopped, {resolved} alert(s) retired")
        return antibiotic

    async def _get_antibiotic(self, antibiotic_id: int) -> Antibiotic:
        antibiotic = await self.antibiotics.get(antibiotic_id)
        if antibiotic is None:
            raise NotFound(f"Antibiotic {antibiotic_id} not found")
        return antibiotic

    # ============================================================================
    # CULTURES
    # ============================================================================
    async def register_culture(self, data: CultureCreate) -> Culture:
        await self._require_patient(data.patient_id)

        culture = await self.cultures.create(
            {**data.model_dump(exclude_none=True), "status": CultureStatus.PENDING.value}
        )
        await self.alerts.add(
            Alert(
                patient_id=culture.patient_id,
                type=AlertType.CULTURE_PENDING.value,
                priority=AlertPriority.MEDIUM.value,
                title=f"Cultura pendente: {culture.type}",
                message=(
                    f"{culture.type} coletada em {format_br_date(culture.collection_date)} "
                    "aguardando resultado"
                ),
                related_culture_id=culture.id,
            )
        )
        await self.cultures.commit()
        logger.info(f"🧫 Culture registered: {culture.type} for patient {culture.patient_id}")
        return culture

    async def update_culture(self, culture_id: int, changes: CultureUpdate) -> Culture:
        """Edit specimen details; status changes go through record_result."""
        culture = await self._get_culture(culture_id)
        await self.cultures.update(culture, changes.model_dump(exclude_unset=True))
        await self.cultures.commit()
        return culture

    async def record_result(self, culture_id: int, result: CultureResultUpdate) -> Culture:
        culture = await self._get_culture(culture_id)
        status = CultureStatus(result.status)
        if status == CultureStatus.PENDING:
            raise ValidationError("Result status cannot be pending", field="status")

        values = result.model_dump(exclude_unset=True, exclude={"result_date"})
        values["status"] = status.value
        values["result_date"] = result.result_date or utcnow()
        await self.cultures.update(culture, values)

        resolved = await self._resolve_all(await self.alerts.unresolved_for_culture(culture.id))

        if status == CultureStatus.POSITIVE:
            organism = culture.organism or "Organismo"
            await self.alerts.add(
                Alert(
                    patient_id=culture.patient_id,
                    type=AlertType.CULTURE_PENDING.value,
                    priority=AlertPriority.HIGH.value,
                    title=f"Cultura POSITIVA: {culture.type}",
                    message=(
                        f"{organism} isolado em {culture.type}. "
                        "Verificar antibiograma e ajustar terapia."
                    ),
                    related_culture_id=culture.id,
                )
            )
        await self.cultures.commit()
        logger.info(f"🧫 Culture {culture.id} -> {status.value}, {resolved} alert(s) retired")
        return culture

    async def _get_culture(self, culture_id: int) -> Culture:
        culture = await self.cultures.get(culture_id)
        if culture is None:
            raise NotFound(f"Culture {culture_id} not found")
        return culture

    # ============================================================================
    # ALERT LIFECYCLE
    # ============================================================================
    async def create_alert(self, data: AlertCreate) -> Alert:
        await self._require_patient(data.patient_id)
        values = data.model_dump(exclude_none=True)
        values["type"] = data.type.value
        values["priority"] = data.priority.value
        alert = await self.alerts.create(values)
        await self.alerts.commit()
        return alert

    async def mark_read(self, alert_id: int) -> Alert:
        """created -> read. No-op once resolved or already read."""
        alert = await self._get_alert(alert_id)
        if not alert.is_resolved and not alert.is_read:
            alert.is_read = True
            await self.alerts.commit()
        return alert

    async def resolve(self, alert_id: int, user_id: Optional[int] = None) -> Alert:
        """created|read -> resolved. Resolving twice leaves the first resolution intact."""
        alert = await self._get_alert(alert_id)
        if not alert.is_resolved:
            await self._resolve_all([alert], user_id)
            await self.alerts.commit()
        return alert

    async def _get_alert(self, alert_id: int) -> Alert:
        alert = await self.alerts.get(alert_id)
        if alert is None:
            raise NotFound(f"Alert {alert_id} not found")
        return alert
