# app/system_services/system_routes.py
"""
Patient registry, templates, advanced search and the audit trail.
"""
from typing import List

from fastapi import APIRouter, Depends, status

from app.shared.exceptions import NotFound
from app.system_models.audit_model.audit_schemas import AuditLogResponse
from app.system_models.enums import AuditAction
from app.system_models.patient_model.patient_schemas import (
    PatientCreate,
    PatientResponse,
    PatientSearchRequest,
    PatientUpdate,
    ProphylaxisPlanResponse,
)
from app.system_models.template_model.template_schemas import (
    TemplateCreate,
    TemplateResponse,
    TemplateUpdate,
)
from app.system_services.audit_repository import AuditLogRepository
from app.system_services.audit_service import AuditService, snapshot
from app.system_services.dependencies import (
    get_audit_repository,
    get_audit_service,
    get_patient_repository,
    get_template_repository,
)
from app.system_services.patient_repository import PatientRepository
from app.system_services.patient_services import (
    create_patient,
    get_patient_or_404,
    prophylaxis_plan,
    update_patient,
)
from app.system_services.template_repository import TemplateRepository
from app.users.auth_dependencies import get_current_user
from app.users.user_models.user_model import User

router = APIRouter(dependencies=[Depends(get_current_user)])


# ===========================================
# ✅ Patients
# ===========================================
@router.get("/patients", response_model=List[PatientResponse])
async def list_patients(patients: PatientRepository = Depends(get_patient_repository)):
    """All patients, newest first."""
    return await patients.list_all()


@router.get("/patients/active", response_model=List[PatientResponse])
async def list_active_patients(patients: PatientRepository = Depends(get_patient_repository)):
    """Admitted patients in bed order."""
    return await patients.list_active()


@router.get("/patients/{patient_id}", response_model=PatientResponse)
async def get_patient(patient_id: int, patients: PatientRepository = Depends(get_patient_repository)):
    return await get_patient_or_404(patients, patient_id)


@router.post("/patients", response_model=PatientResponse, status_code=status.HTTP_201_CREATED)
async def create_patient_endpoint(
    patient: PatientCreate,
    patients: PatientRepository = Depends(get_patient_repository),
    audit: AuditService = Depends(get_audit_service),
):
    """Register a new patient."""
    db_patient = await create_patient(patients, patient)
    await audit.record(AuditAction.CREATE, "patient", db_patient.id, new_values=snapshot(db_patient))
    return db_patient


@router.patch("/patients/{patient_id}", response_model=PatientResponse)
async def update_patient_endpoint(
    patient_id: int,
    changes: PatientUpdate,
    patients: PatientRepository = Depends(get_patient_repository),
    audit: AuditService = Depends(get_audit_service),
):
    """Partial update; only the fields sent change."""
    old_values = snapshot(await get_patient_or_404(patients, patient_id))
    db_patient = await update_patient(patients, patient_id, changes)
    await audit.record(
        AuditAction.UPDATE, "patient", db_patient.id,
        old_values=old_values, new_values=snapshot(db_patient),
    )
    return db_patient


@router.get("/patients/{patient_id}/prophylaxis-plan", response_model=ProphylaxisPlanResponse)
async def get_prophylaxis_plan(patient_id: int, patients: PatientRepository = Depends(get_patient_repository)):
    """Empiric plan for febrile neutropenia derived from the colonization swab."""
    return prophylaxis_plan(await get_patient_or_404(patients, patient_id))


@router.post("/search/advanced", response_model=List[PatientResponse])
async def advanced_search(
    params: PatientSearchRequest,
    patients: PatientRepository = Depends(get_patient_repository),
):
    """Filter active patients by text, colonization, unit, dates, ATB and culture status."""
    return await patients.search(params)


# ===========================================
# ✅ Templates
# ===========================================
async def _get_template_or_404(templates: TemplateRepository, template_id: int):
    template = await templates.get(template_id)
    if template is None:
        raise NotFound(f"Template {template_id} not found")
    return template


@router.get("/templates", response_model=List[TemplateResponse])
async def list_templates(templates: TemplateRepository = Depends(get_template_repository)):
    return await templates.list_all()


@router.get("/templates/{template_id}", response_model=TemplateResponse)
async def get_template(template_id: int, templates: TemplateRepository = Depends(get_template_repository)):
    return await _get_template_or_404(templates, template_id)


@router.post("/templates", response_model=TemplateResponse, status_code=status.HTTP_201_CREATED)
async def create_template(
    template: TemplateCreate,
    templates: TemplateRepository = Depends(get_template_repository),
    audit: AuditService = Depends(get_audit_service),
    current_user: User = Depends(get_current_user),
):
    db_template = await templates.create({**template.model_dump(), "created_by": current_user.id})
    await templates.commit()
    await audit.record(AuditAction.CREATE, "template", db_template.id, new_values=snapshot(db_template))
    return db_template


@router.patch("/templates/{template_id}", response_model=TemplateResponse)
async def update_template(
    template_id: int,
    changes: TemplateUpdate,
    templates: TemplateRepository = Depends(get_template_repository),
    audit: AuditService = Depends(get_audit_service),
):
    db_template = await _get_template_or_404(templates, template_id)
    old_values = snapshot(db_template)
    await templates.update(db_template, changes.model_dump(exclude_unset=True))
    await templates.commit()
    await templates.refresh(db_template)
    await audit.record(
        AuditAction.UPDATE, "template", db_template.id,
        old_values=old_values, new_values=snapshot(db_template),
    )
    return db_template


@router.delete("/templates/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_template(
    template_id: int,
    templates: TemplateRepository = Depends(get_template_repository),
    audit: AuditService = Depends(get_audit_service),
):
    db_template = await _get_template_or_404(templates, template_id)
    old_values = snapshot(db_template)
    await templates.delete(db_template)
    await templates.commit()
    await audit.record(AuditAction.DELETE, "template", template_id, old_values=old_values)


# ===========================================
# ✅ Audit trail
# ===========================================
@router.get("/audit", response_model=List[AuditLogResponse])
async def list_audit_logs(audit_logs: AuditLogRepository = Depends(get_audit_repository)):
    """Latest 100 audit entries."""
    return await audit_logs.list_recent()


@router.get("/audit/{entity_type}/{entity_id}", response_model=List[AuditLogResponse])
async def list_entity_audit_logs(
    entity_type: str,
    entity_id: int,
    audit_logs: AuditLogRepository = Depends(get_audit_repository),
):
    return await audit_logs.list_for_entity(entity_type, entity_id)
