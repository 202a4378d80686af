# app/system_services/patient_services.py
from app.alert_engine.prophylaxis import empiric_plan, parse_colonization
from app.shared.exceptions import NotFound
from app.system_models.patient_model.patient_model import Patient
from app.system_models.patient_model.patient_schemas import (
    PatientCreate,
    PatientUpdate,
    ProphylaxisPlanResponse,
)
from app.system_services.patient_repository import PatientRepository


async def get_patient_or_404(patients: PatientRepository, patient_id: int) -> Patient:
    patient = await patients.get(patient_id)
    if patient is None:
        raise NotFound(f"Patient {patient_id} not found")
    return patient


async def create_patient(patients: PatientRepository, patient: PatientCreate) -> Patient:
    """Create a new patient."""
    db_patient = await patients.create(patient.model_dump())
    await patients.commit()
    return db_patient


async def update_patient(
    patients: PatientRepository,
    patient_id: int,
    changes: PatientUpdate,
) -> Patient:
    """Apply only the fields that were sent. Discharge is ``is_active=False``."""
    db_patient = await get_patient_or_404(patients, patient_id)
    await patients.update(db_patient, changes.model_dump(exclude_unset=True))
    await patients.commit()
    await patients.refresh(db_patient)
    return db_patient


def prophylaxis_plan(patient: Patient) -> ProphylaxisPlanResponse:
    """Empiric neutropenic-fever plan from the colonization swab."""
    codes = parse_colonization(patient.colonization)
    return ProphylaxisPlanResponse(
        patient_id=patient.id,
        colonization_codes=list(codes),
        recommendations=empiric_plan(codes),
    )
