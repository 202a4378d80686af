# app/note_engine/note_generator.py
"""
Note Generator
Turns the patient context plus the clinician's free-text input into a
standardized evolution note.

Pipeline:
1. validate input (patient must exist, raw input must have text)
2. build context -> one generation call for the note
3. optional second call for reading suggestions (never blocks the note)
4. missing-data checklist + impression extraction
"""
import logging
import re
from datetime import datetime
from typing import List, Optional

from app.helpers.text import contains_any, is_blank
from app.helpers.time import format_br_date, utcnow
from app.llmsystem.llm_client import TextGenerator
from app.note_engine.context_builder import ContextBuilder
from app.note_engine.prompts import (
    SUGGESTIONS_SYSTEM_PROMPT,
    build_note_system_prompt,
    build_suggestions_prompt,
    build_user_prompt,
)
from app.note_engine.schemas import GenerateEvolutionResponse
from app.shared.exceptions import GenerationFailed, ValidationError
from app.system_models.evolution_model.evolution_schemas import ReadingSuggestion, ReadingSuggestionList
from app.system_models.patient_model.patient_model import Patient
from app.system_services.patient_repository import PatientRepository
from config.llmconfig import llm_settings

logger = logging.getLogger(__name__)

LAB_KEYWORDS = ("labs", "hb", "leuco")

IMPRESSION_PATTERN = re.compile(r"IMPRESSÃO:\n([\s\S]*?)(?=───────|CONDUTA:|$)")


def detect_missing_data(patient: Patient, raw_input: str) -> Optional[List[str]]:
    """Checklist of data the note will lack. None when nothing is missing."""
    flags = []
    if is_blank(patient.colonization):
        flags.append("Swab de vigilância não cadastrado")
    if is_blank(patient.prophylaxis):
        flags.append("Profilaxias não cadastradas")
    if is_blank(patient.default_preceptor):
        flags.append("Preceptor não cadastrado")
    if not contains_any(raw_input, LAB_KEYWORDS):
        flags.append("Labs do dia não informados")
    return flags or None


def extract_impression(content: str) -> Optional[str]:
    match = IMPRESSION_PATTERN.search(content or "")
    if match is None:
        return None
    return match.group(1).strip()


class NoteGenerator:
    """Drafts evolutions. Never writes to the database; callers decide what to keep."""

    def __init__(
        self,
        context_builder: ContextBuilder,
        patients: PatientRepository,
        text_generator: TextGenerator,
    ):
        self.context_builder = context_builder
        self.patients = patients
        self.text_generator = text_generator

    async def generate(
        self,
        patient_id: int,
        raw_input: str,
        include_impression: bool = True,
        include_suggestions: bool = False,
        now: Optional[datetime] = None,
    ) -> GenerateEvolutionResponse:
        now = now or utcnow()

        if is_blank(raw_input):
            raise ValidationError("Raw input is required", field="raw_input")
        patient = await self.patients.get(patient_id)
        if patient is None:
            raise ValidationError("Patient not found", field="patient_id")

        logger.info("=" * 60)
        logger.info(f"📝 GENERATING EVOLUTION: patient {patient_id}")
        logger.info("=" * 60)

        context = await self.context_builder.build(patient_id, now=now)
        messages = [
            {"role": "system", "content": build_note_system_prompt()},
            {
                "role": "user",
                "content": build_user_prompt(context, raw_input, format_br_date(now), include_impression),
            },
        ]

        try:
            content = await self.text_generator.generate(messages, max_tokens=llm_settings.LLM_MAX_TOKENS)
        except Exception as e:
            logger.error(f"❌ Evolution generation failed: {e}")
            raise GenerationFailed("Failed to generate evolution") from e
        if is_blank(content):
            logger.error("❌ Evolution generation returned empty text")
            raise GenerationFailed("Failed to generate evolution")

        reading_suggestions = None
        if include_suggestions:
            reading_suggestions = await self.suggest_readings(patient, raw_input)

        missing = detect_missing_data(patient, raw_input)
        if missing:
            logger.info(f"⚠️  Missing data: {', '.join(missing)}")

        logger.info(f"✅ Evolution drafted: {len(content)} characters")
        return GenerateEvolutionResponse(
            content=content,
            impression=extract_impression(content),
            missing_data_alerts=missing,
            reading_suggestions=reading_suggestions,
        )

    async def suggest_readings(self, patient: Patient, raw_input: str) -> Optional[List[ReadingSuggestion]]:
        """Second, independent call. Any failure means no suggestions."""
        messages = [
            {"role": "system", "content": SUGGESTIONS_SYSTEM_PROMPT},
            {"role": "user", "content": build_suggestions_prompt(patient.hematological_diagnosis, raw_input)},
        ]
        try:
            result = await self.text_generator.generate_json(
                messages, max_tokens=llm_settings.SUGGESTIONS_MAX_TOKENS, schema=ReadingSuggestionList
            )
        except Exception as e:
            logger.warning(f"Reading suggestions call failed: {e}")
            return None
        logger.info(f"📚 {len(result.suggestions)} reading suggestion(s)")
        return result.suggestions or None
