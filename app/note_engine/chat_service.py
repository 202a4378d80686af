# app/note_engine/chat_service.py
"""
Per-patient chat with the note assistant.
A message that asks for an evolution gets the full note template; a reply that
comes back as a complete consult note is kept as a draft evolution.
"""
import logging
from datetime import datetime
from typing import Optional

from app.helpers.text import contains_any, is_blank
from app.helpers.time import format_br_date, utcnow
from app.llmsystem.llm_client import TextGenerator
from app.note_engine.prompts import build_chat_system_prompt
from app.note_engine.schemas import ChatReplyResponse
from app.shared.exceptions import GenerationFailed, NotFound, ValidationError
from app.system_models.enums import MessageRole, MessageType
from app.system_models.evolution_model.evolution_model import Evolution
from app.system_models.evolution_model.evolution_schemas import EvolutionResponse
from app.system_models.message_model.message_model import PatientMessage
from app.system_models.message_model.message_schemas import MessageResponse
from app.system_models.patient_model.patient_model import Patient
from app.system_services.evolution_repository import EvolutionRepository
from app.system_services.message_repository import MessageRepository
from app.system_services.patient_repository import PatientRepository
from config.llmconfig import llm_settings

logger = logging.getLogger(__name__)

# Matched as lower-case substrings; "update" also catches unrelated phrasing
EVOLUTION_TRIGGERS = ("evolução", "evoluç", "gera", "update")
NOTE_MARKER = "INTERCONSULTA"


def is_evolution_request(content: str) -> bool:
    return contains_any(content, EVOLUTION_TRIGGERS)


def short_context(patient: Patient, latest: Optional[Evolution]) -> str:
    header = [f"Paciente: {patient.name}"]
    if patient.age is not None:
        header.append(f"{patient.age}a")
    header.append(f"Leito: {patient.leito or '?'}")
    lines = [", ".join(header)]
    if not is_blank(patient.hematological_diagnosis):
        lines.append(f"HD Hemato: {patient.hematological_diagnosis}")
    if not is_blank(patient.colonization):
        lines.append(f"Colonização: {patient.colonization}")
    if latest is not None:
        lines.append(f"Última evolução: {format_br_date(latest.date)}")
    return "\n".join(lines) + "\n"


class ChatService:
    def __init__(
        self,
        patients: PatientRepository,
        messages: MessageRepository,
        evolutions: EvolutionRepository,
        text_generator: TextGenerator,
    ):
        self.patients = patients
        self.messages = messages
        self.evolutions = evolutions
        self.text_generator = text_generator

    async def send(self, patient_id: int, content: str, now: Optional[datetime] = None) -> ChatReplyResponse:
        """
        One exchange. Both messages (and the draft evolution, if any) are
        committed together only after the model has answered.
        """
        now = now or utcnow()
        if is_blank(content):
            raise ValidationError("Message content is required", field="content")
        patient = await self.patients.get(patient_id)
        if patient is None:
            raise NotFound(f"Patient {patient_id} not found")

        history = await self.messages.recent_for_patient(patient_id, llm_settings.CHAT_HISTORY_LIMIT)
        latest = await self.evolutions.latest_for_patient(patient_id)
        evolution_request = is_evolution_request(content)

        prompt = [{"role": "system", "content": build_chat_system_prompt(short_context(patient, latest), evolution_request)}]
        prompt += [{"role": message.role, "content": message.content} for message in history]
        prompt.append({"role": "user", "content": content})

        logger.info(
            f"💬 Chat for patient {patient_id}: {len(history)} previous message(s), "
            f"evolution request: {evolution_request}"
        )
        try:
            reply = await self.text_generator.generate(prompt, max_tokens=llm_settings.LLM_MAX_TOKENS)
        except Exception as e:
            logger.error(f"❌ Chat generation failed: {e}")
            raise GenerationFailed("Failed to process message") from e

        user_message = await self.messages.add(
            PatientMessage(
                patient_id=patient_id,
                role=MessageRole.USER.value,
                content=content,
                message_type=MessageType.CHAT.value,
                created_at=now,
            )
        )

        evolution = None
        if evolution_request and NOTE_MARKER in reply:
            evolution = await self.evolutions.add(
                Evolution(patient_id=patient_id, date=now, content=reply, is_draft=True)
            )

        assistant_message = await self.messages.add(
            PatientMessage(
                patient_id=patient_id,
                role=MessageRole.ASSISTANT.value,
                content=reply,
                message_type=(MessageType.EVOLUTION if evolution_request else MessageType.CHAT).value,
                evolution_id=evolution.id if evolution is not None else None,
                created_at=now,
            )
        )
        await self.messages.commit()

        if evolution is not None:
            logger.info(f"📝 Draft evolution {evolution.id} saved from chat")
        return ChatReplyResponse(
            user_message=MessageResponse.model_validate(user_message),
            assistant_message=MessageResponse.model_validate(assistant_message),
            evolution=EvolutionResponse.model_validate(evolution) if evolution is not None else None,
        )
