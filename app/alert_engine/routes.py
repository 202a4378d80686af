# app/alert_engine/routes.py
"""
Antibiotic courses, cultures, alerts and the ward dashboard.
Writes go through the AlertDeriver so the alert set follows every change.
"""
from typing import List

from fastapi import APIRouter, Depends, status

from app.alert_engine.alert_deriver import AlertDeriver
from app.alert_engine.dashboard import DashboardService
from app.alert_engine.schemas import DashboardStats, PatientTimeline
from app.system_models.alert_model.alert_schemas import AlertCreate, AlertResponse
from app.system_models.antibiotic_model.antibiotic_schemas import (
    AntibioticCreate,
    AntibioticResponse,
    AntibioticStop,
    AntibioticUpdate,
)
from app.system_models.culture_model.culture_schemas import (
    CultureCreate,
    CultureResponse,
    CultureResultUpdate,
    CultureUpdate,
)
from app.system_models.enums import AuditAction
from app.system_services.alert_repository import AlertRepository
from app.system_services.antibiotic_repository import AntibioticRepository
from app.system_services.audit_service import AuditService, snapshot
from app.system_services.culture_repository import CultureRepository
from app.system_services.dependencies import (
    get_alert_deriver,
    get_alert_repository,
    get_antibiotic_repository,
    get_audit_service,
    get_culture_repository,
    get_dashboard_service,
)
from app.users.auth_dependencies import get_current_user, get_current_user_id

router = APIRouter(dependencies=[Depends(get_current_user)])


# ===========================================
# ✅ Antibiotics
# ===========================================
@router.get("/patients/{patient_id}/antibiotics", response_model=List[AntibioticResponse])
async def list_patient_antibiotics(
    patient_id: int,
    antibiotics: AntibioticRepository = Depends(get_antibiotic_repository),
):
    return await antibiotics.list_for_patient(patient_id)


@router.get("/antibiotics/active", response_model=List[AntibioticResponse])
async def list_active_antibiotics(antibiotics: AntibioticRepository = Depends(get_antibiotic_repository)):
    return await antibiotics.list_active()


@router.post("/antibiotics", response_model=AntibioticResponse, status_code=status.HTTP_201_CREATED)
async def start_antibiotic(
    data: AntibioticCreate,
    deriver: AlertDeriver = Depends(get_alert_deriver),
    audit: AuditService = Depends(get_audit_service),
):
    """Start a course. Schedules the D3 / D7 / D14 review alerts."""
    antibiotic = await deriver.start_antibiotic(data)
    await audit.record(AuditAction.CREATE, "antibiotic", antibiotic.id, new_values=snapshot(antibiotic))
    return antibiotic


@router.patch("/antibiotics/{antibiotic_id}", response_model=AntibioticResponse)
async def update_antibiotic(
    antibiotic_id: int,
    changes: AntibioticUpdate,
    deriver: AlertDeriver = Depends(get_alert_deriver),
    audit: AuditService = Depends(get_audit_service),
):
    """Edit a course. Moving it to completed/suspended retires its review alerts."""
    antibiotic = await deriver.update_antibiotic(antibiotic_id, changes)
    await audit.record(
        AuditAction.UPDATE, "antibiotic", antibiotic.id,
        new_values=changes.model_dump(mode="json", exclude_unset=True),
    )
    return antibiotic


@router.post("/antibiotics/{antibiotic_id}/stop", response_model=AntibioticResponse)
async def stop_antibiotic(
    antibiotic_id: int,
    body: AntibioticStop,
    deriver: AlertDeriver = Depends(get_alert_deriver),
    audit: AuditService = Depends(get_audit_service),
):
    antibiotic = await deriver.stop_antibiotic(antibiotic_id, body.reason)
    await audit.record(AuditAction.UPDATE, "antibiotic", antibiotic.id, new_values=snapshot(antibiotic))
    return antibiotic


# ===========================================
# ✅ Cultures
# ===========================================
@router.get("/patients/{patient_id}/cultures", response_model=List[CultureResponse])
async def list_patient_cultures(
    patient_id: int,
    cultures: CultureRepository = Depends(get_culture_repository),
):
    return await cultures.list_for_patient(patient_id)


@router.get("/cultures/pending", response_model=List[CultureResponse])
async def list_pending_cultures(cultures: CultureRepository = Depends(get_culture_repository)):
    return await cultures.list_pending()


@router.post("/cultures", response_model=CultureResponse, status_code=status.HTTP_201_CREATED)
async def register_culture(
    data: CultureCreate,
    deriver: AlertDeriver = Depends(get_alert_deriver),
    audit: AuditService = Depends(get_audit_service),
):
    """Register a collected specimen. Raises a culture-pending alert."""
    culture = await deriver.register_culture(data)
    await audit.record(AuditAction.CREATE, "culture", culture.id, new_values=snapshot(culture))
    return culture


@router.patch("/cultures/{culture_id}", response_model=CultureResponse)
async def update_culture(
    culture_id: int,
    changes: CultureUpdate,
    deriver: AlertDeriver = Depends(get_alert_deriver),
    audit: AuditService = Depends(get_audit_service),
):
    culture = await deriver.update_culture(culture_id, changes)
    await audit.record(
        AuditAction.UPDATE, "culture", culture.id,
        new_values=changes.model_dump(mode="json", exclude_unset=True),
    )
    return culture


@router.post("/cultures/{culture_id}/result", response_model=CultureResponse)
async def record_culture_result(
    culture_id: int,
    result: CultureResultUpdate,
    deriver: AlertDeriver = Depends(get_alert_deriver),
    audit: AuditService = Depends(get_audit_service),
):
    """
    Record the final result. Retires the pending alert; a positive culture
    raises a high-priority alert to check the antibiogram.
    """
    culture = await deriver.record_result(culture_id, result)
    await audit.record(AuditAction.UPDATE, "culture", culture.id, new_values=snapshot(culture))
    return culture


# ===========================================
# ✅ Alerts
# ===========================================
@router.get("/alerts", response_model=List[AlertResponse])
async def list_alerts(alerts: AlertRepository = Depends(get_alert_repository)):
    """Latest 100 alerts."""
    return await alerts.list_recent()


@router.get("/alerts/unread", response_model=List[AlertResponse])
async def list_unread_alerts(alerts: AlertRepository = Depends(get_alert_repository)):
    """Unread and unresolved, most urgent first."""
    return await alerts.list_unread()


@router.get("/patients/{patient_id}/alerts", response_model=List[AlertResponse])
async def list_patient_alerts(patient_id: int, alerts: AlertRepository = Depends(get_alert_repository)):
    return await alerts.list_for_patient(patient_id)


@router.post("/alerts", response_model=AlertResponse, status_code=status.HTTP_201_CREATED)
async def create_alert(
    data: AlertCreate,
    deriver: AlertDeriver = Depends(get_alert_deriver),
    audit: AuditService = Depends(get_audit_service),
):
    alert = await deriver.create_alert(data)
    await audit.record(AuditAction.CREATE, "alert", alert.id, new_values=snapshot(alert))
    return alert


@router.post("/alerts/{alert_id}/read", response_model=AlertResponse)
async def mark_alert_read(alert_id: int, deriver: AlertDeriver = Depends(get_alert_deriver)):
    return await deriver.mark_read(alert_id)


@router.post("/alerts/{alert_id}/resolve", response_model=AlertResponse)
async def resolve_alert(
    alert_id: int,
    deriver: AlertDeriver = Depends(get_alert_deriver),
    user_id: int = Depends(get_current_user_id),
):
    """Resolving an already resolved alert returns it unchanged."""
    return await deriver.resolve(alert_id, user_id)


# ===========================================
# ✅ Dashboard
# ===========================================
@router.get("/dashboard/stats", response_model=DashboardStats)
async def dashboard_stats(dashboard: DashboardService = Depends(get_dashboard_service)):
    return await dashboard.stats()


@router.get("/dashboard/atb-timeline", response_model=List[PatientTimeline])
async def atb_timeline(dashboard: DashboardService = Depends(get_dashboard_service)):
    """Active patients on antibiotics with Dn and review markers."""
    return await dashboard.atb_timeline()
