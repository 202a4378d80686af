# app/system_services/dependencies.py
"""
FastAPI providers for repositories and services.
Every provider shares the request's AsyncSession through Depends(get_db).
"""
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.alert_engine.alert_deriver import AlertDeriver
from app.alert_engine.dashboard import DashboardService
from app.database.connection import get_db
from app.llmsystem.llm_client import TextGenerator, llm_client
from app.note_engine.chat_service import ChatService
from app.note_engine.context_builder import ContextBuilder
from app.note_engine.note_generator import NoteGenerator
from app.system_services.alert_repository import AlertRepository
from app.system_services.antibiotic_repository import AntibioticRepository
from app.system_services.audit_repository import AuditLogRepository
from app.system_services.audit_service import AuditContext, AuditService
from app.system_services.culture_repository import CultureRepository
from app.system_services.evolution_repository import EvolutionRepository
from app.system_services.message_repository import MessageRepository
from app.system_services.patient_repository import PatientRepository
from app.system_services.template_repository import TemplateRepository
from app.users.auth_dependencies import get_current_user
from app.users.user_models.user_model import User


# ===========================================
# ✅ Repositories
# ===========================================
def get_patient_repository(db: AsyncSession = Depends(get_db)) -> PatientRepository:
    return PatientRepository(db)


def get_evolution_repository(db: AsyncSession = Depends(get_db)) -> EvolutionRepository:
    return EvolutionRepository(db)


def get_antibiotic_repository(db: AsyncSession = Depends(get_db)) -> AntibioticRepository:
    return AntibioticRepository(db)


def get_culture_repository(db: AsyncSession = Depends(get_db)) -> CultureRepository:
    return CultureRepository(db)


def get_alert_repository(db: AsyncSession = Depends(get_db)) -> AlertRepository:
    return AlertRepository(db)


def get_message_repository(db: AsyncSession = Depends(get_db)) -> MessageRepository:
    return MessageRepository(db)


def get_template_repository(db: AsyncSession = Depends(get_db)) -> TemplateRepository:
    return TemplateRepository(db)


def get_audit_repository(db: AsyncSession = Depends(get_db)) -> AuditLogRepository:
    return AuditLogRepository(db)


# ===========================================
# ✅ Services
# ===========================================
def get_text_generator() -> TextGenerator:
    """Overridden in tests with a canned generator."""
    return llm_client


def get_alert_deriver(db: AsyncSession = Depends(get_db)) -> AlertDeriver:
    return AlertDeriver(
        alerts=AlertRepository(db),
        antibiotics=AntibioticRepository(db),
        cultures=CultureRepository(db),
        patients=PatientRepository(db),
    )


def get_dashboard_service(db: AsyncSession = Depends(get_db)) -> DashboardService:
    return DashboardService(
        patients=PatientRepository(db),
        antibiotics=AntibioticRepository(db),
        cultures=CultureRepository(db),
        alerts=AlertRepository(db),
    )


def get_context_builder(db: AsyncSession = Depends(get_db)) -> ContextBuilder:
    return ContextBuilder(
        patients=PatientRepository(db),
        antibiotics=AntibioticRepository(db),
        cultures=CultureRepository(db),
        evolutions=EvolutionRepository(db),
    )


def get_note_generator(
    db: AsyncSession = Depends(get_db),
    context_builder: ContextBuilder = Depends(get_context_builder),
    text_generator: TextGenerator = Depends(get_text_generator),
) -> NoteGenerator:
    return NoteGenerator(context_builder, PatientRepository(db), text_generator)


def get_chat_service(
    db: AsyncSession = Depends(get_db),
    text_generator: TextGenerator = Depends(get_text_generator),
) -> ChatService:
    return ChatService(
        patients=PatientRepository(db),
        messages=MessageRepository(db),
        evolutions=EvolutionRepository(db),
        text_generator=text_generator,
    )


def audit_context_from(request: Request, user_id: int = None) -> AuditContext:
    return AuditContext(
        user_id=user_id,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )


def get_audit_service(
    request: Request,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> AuditService:
    return AuditService(db, audit_context_from(request, current_user.id))
