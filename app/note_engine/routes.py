# app/note_engine/routes.py
"""
Evolutions (manual, generated, exported) and the per-patient chat.
"""
from typing import List

from fastapi import APIRouter, Depends, status
from fastapi.responses import HTMLResponse, Response

from app.export.docx_export import (
    DOCX_MEDIA_TYPE,
    export_filename,
    render_docx,
    render_html,
)
from app.note_engine.chat_service import ChatService
from app.note_engine.note_generator import NoteGenerator
from app.note_engine.schemas import (
    ChatReplyResponse,
    GenerateEvolutionRequest,
    GenerateEvolutionResponse,
)
from app.shared.exceptions import NotFound
from app.system_models.enums import AuditAction
from app.system_models.evolution_model.evolution_schemas import EvolutionCreate, EvolutionResponse
from app.system_models.message_model.message_schemas import MessageResponse, MessageSend
from app.system_services.audit_service import AuditService, snapshot
from app.system_services.dependencies import (
    get_audit_service,
    get_chat_service,
    get_evolution_repository,
    get_message_repository,
    get_note_generator,
    get_patient_repository,
)
from app.system_services.evolution_repository import EvolutionRepository
from app.system_services.message_repository import MessageRepository
from app.system_services.patient_repository import PatientRepository
from app.system_services.patient_services import get_patient_or_404
from app.users.auth_dependencies import get_current_user

router = APIRouter(dependencies=[Depends(get_current_user)])


async def _get_evolution_or_404(evolutions: EvolutionRepository, evolution_id: int):
    evolution = await evolutions.get(evolution_id)
    if evolution is None:
        raise NotFound(f"Evolution {evolution_id} not found")
    return evolution


# ===========================================
# ✅ Evolutions
# ===========================================
@router.get("/patients/{patient_id}/evolutions", response_model=List[EvolutionResponse])
async def list_evolutions(
    patient_id: int,
    evolutions: EvolutionRepository = Depends(get_evolution_repository),
):
    """Newest first."""
    return await evolutions.list_for_patient(patient_id)


@router.get("/evolutions/{evolution_id}", response_model=EvolutionResponse)
async def get_evolution(evolution_id: int, evolutions: EvolutionRepository = Depends(get_evolution_repository)):
    return await _get_evolution_or_404(evolutions, evolution_id)


@router.post("/evolutions", response_model=EvolutionResponse, status_code=status.HTTP_201_CREATED)
async def create_evolution(
    evolution: EvolutionCreate,
    evolutions: EvolutionRepository = Depends(get_evolution_repository),
    patients: PatientRepository = Depends(get_patient_repository),
    audit: AuditService = Depends(get_audit_service),
):
    """Save an evolution (typed by hand or accepted from a generated draft)."""
    await get_patient_or_404(patients, evolution.patient_id)
    db_evolution = await evolutions.create(evolution.model_dump(exclude_none=True))
    await evolutions.commit()
    await audit.record(AuditAction.CREATE, "evolution", db_evolution.id, new_values=snapshot(db_evolution))
    return db_evolution


@router.post("/evolutions/generate", response_model=GenerateEvolutionResponse)
async def generate_evolution(
    request: GenerateEvolutionRequest,
    generator: NoteGenerator = Depends(get_note_generator),
):
    """
    Draft an evolution from the day's free-text input.

    Nothing is saved: the clinician reviews the draft and posts it to
    ``/evolutions`` to keep it.

    **Returns:** the note text, the extracted IMPRESSÃO section, missing-data
    flags and (when asked) reading suggestions.
    """
    return await generator.generate(
        patient_id=request.patient_id,
        raw_input=request.raw_input,
        include_impression=request.include_impression,
        include_suggestions=request.include_suggestions,
    )


async def _export_target(evolution_id: int, evolutions: EvolutionRepository, patients: PatientRepository):
    evolution = await _get_evolution_or_404(evolutions, evolution_id)
    patient = await patients.get(evolution.patient_id)
    return evolution, patient.name if patient else None


@router.post("/evolutions/{evolution_id}/export")
async def export_evolution_docx(
    evolution_id: int,
    evolutions: EvolutionRepository = Depends(get_evolution_repository),
    patients: PatientRepository = Depends(get_patient_repository),
    audit: AuditService = Depends(get_audit_service),
):
    """Download the evolution as a Word document."""
    evolution, patient_name = await _export_target(evolution_id, evolutions, patients)
    filename = export_filename(patient_name, evolution.id)
    data = render_docx(evolution.content)
    await audit.record(AuditAction.EXPORT, "evolution", evolution.id, new_values={"format": "docx", "filename": filename})
    return Response(
        content=data,
        media_type=DOCX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/evolutions/{evolution_id}/export-html", response_class=HTMLResponse)
async def export_evolution_html(
    evolution_id: int,
    evolutions: EvolutionRepository = Depends(get_evolution_repository),
    patients: PatientRepository = Depends(get_patient_repository),
    audit: AuditService = Depends(get_audit_service),
):
    """The evolution as a printable HTML page."""
    evolution, patient_name = await _export_target(evolution_id, evolutions, patients)
    filename = export_filename(patient_name, evolution.id, extension="html")
    page = render_html(evolution.content, title=filename)
    await audit.record(AuditAction.EXPORT, "evolution", evolution.id, new_values={"format": "html", "filename": filename})
    return HTMLResponse(content=page)


# ===========================================
# ✅ Chat
# ===========================================
@router.get("/patients/{patient_id}/messages", response_model=List[MessageResponse])
async def list_messages(
    patient_id: int,
    patients: PatientRepository = Depends(get_patient_repository),
    messages: MessageRepository = Depends(get_message_repository),
):
    """Conversation in chronological order."""
    await get_patient_or_404(patients, patient_id)
    return await messages.list_for_patient(patient_id)


@router.post("/patients/{patient_id}/messages", response_model=ChatReplyResponse)
async def send_message(
    patient_id: int,
    message: MessageSend,
    chat: ChatService = Depends(get_chat_service),
):
    """
    Send a message to the assistant. Asking for an "evolução" switches the reply
    to the full note template and keeps a complete note as a draft evolution.
    """
    return await chat.send(patient_id, message.content)
