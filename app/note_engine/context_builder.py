# app/note_engine/context_builder.py
"""
Context Builder
Renders the registered patient record, its active antibiotics, pending cultures
and the previous evolution into the text block the note generator sends along
with the clinician's input.

Fields that are empty are left out. Nothing here ever writes a placeholder.
"""
import logging
from datetime import datetime
from typing import List, Optional

from app.helpers.text import is_blank
from app.helpers.time import days_since, format_br_date, treatment_day, utcnow
from app.note_engine.prompts import CONTEXT_RULE
from app.shared.exceptions import NotFound
from app.system_models.antibiotic_model.antibiotic_model import Antibiotic
from app.system_models.culture_model.culture_model import Culture
from app.system_models.evolution_model.evolution_model import Evolution
from app.system_models.patient_model.patient_model import Patient
from app.system_services.antibiotic_repository import AntibioticRepository
from app.system_services.culture_repository import CultureRepository
from app.system_services.evolution_repository import EvolutionRepository
from app.system_services.patient_repository import PatientRepository

logger = logging.getLogger(__name__)

# (label, attribute) in render order; each line only when the attribute has text
CLINICAL_FIELDS = (
    ("HD Hemato", "hematological_diagnosis"),
    ("Protocolo Atual", "current_protocol"),
    ("Protocolos Prévios", "previous_protocols"),
    ("TCTH", "tcth"),
    ("Colonização", "colonization"),
    ("Comorbidades", "comorbidities"),
    ("Antecedentes", "antecedents"),
    ("ECO TT", "eco_tt"),
    ("Carenciais", "carenciais"),
    ("Sorologias", "serologias"),
    ("Ivermectina", "ivermectina"),
    ("Profilaxias", "prophylaxis"),
    ("MUC", "muc"),
    ("Preceptor", "default_preceptor"),
)


def _line(label: str, value) -> Optional[str]:
    if value is None or is_blank(str(value)):
        return None
    return f"{label}: {str(value).strip()}"


def render_demographics(patient: Patient) -> List[str]:
    lines = [f"Nome: {patient.name}"]
    if patient.age is not None:
        lines.append(f"Idade: {patient.age} anos")

    place = " - ".join(part.strip() for part in (patient.city, patient.state) if not is_blank(part))
    lines.append(_line("Cidade/UF", place))
    lines.append(_line("Leito", patient.leito))
    lines.append(_line("Unidade", patient.unidade))
    if patient.dih is not None:
        lines.append(f"DIH: {format_br_date(patient.dih)}")
    return [line for line in lines if line]


def render_clinical(patient: Patient) -> List[str]:
    lines = []
    for label, attribute in CLINICAL_FIELDS:
        lines.append(_line(label, getattr(patient, attribute)))
        # diagnosis date sits right under the diagnosis
        if attribute == "hematological_diagnosis" and patient.hematological_diagnosis_date:
            lines.append(f"Data Dx Hemato: {format_br_date(patient.hematological_diagnosis_date)}")
    return [line for line in lines if line]


def render_antibiotic(course: Antibiotic, now: datetime) -> str:
    parts = [course.name]
    parts += [value.strip() for value in (course.dose, course.frequency) if not is_blank(value)]
    line = f"- {' '.join(parts)} (D{treatment_day(course.start_date, now)})"
    if not is_blank(course.indication):
        line += f" - {course.indication.strip()}"
    return line


def render_culture(culture: Culture, now: datetime) -> str:
    specimen = culture.type
    if not is_blank(culture.site):
        specimen += f" ({culture.site.strip()})"
    return f"- {specimen}: coletada há {days_since(culture.collection_date, now)} dia(s)"


def render_previous_evolution(evolution: Evolution) -> str:
    return (
        f"\n{CONTEXT_RULE}\n"
        f"EVOLUÇÃO ANTERIOR ({format_br_date(evolution.date)}):\n"
        f"{evolution.content}\n"
    )


class ContextBuilder:
    """Read-only; the same stored state and ``now`` always give the same text."""

    def __init__(
        self,
        patients: PatientRepository,
        antibiotics: AntibioticRepository,
        cultures: CultureRepository,
        evolutions: EvolutionRepository,
    ):
        self.patients = patients
        self.antibiotics = antibiotics
        self.cultures = cultures
        self.evolutions = evolutions

    async def build(self, patient_id: int, now: Optional[datetime] = None) -> str:
        now = now or utcnow()
        patient = await self.patients.get(patient_id)
        if patient is None:
            raise NotFound(f"Patient {patient_id} not found")

        lines = ["DADOS DO PACIENTE CADASTRADO:"]
        lines += render_demographics(patient)
        lines += render_clinical(patient)

        courses = await self.antibiotics.active_for_patient(patient_id)
        if courses:
            lines.append("")
            lines.append("ATB EM USO:")
            lines += [render_antibiotic(course, now) for course in courses]

        pending = await self.cultures.pending_for_patient(patient_id)
        if pending:
            lines.append("")
            lines.append("CULTURAS PENDENTES:")
            lines += [render_culture(culture, now) for culture in pending]

        context = "\n".join(lines) + "\n"

        previous = await self.evolutions.latest_for_patient(patient_id)
        if previous is not None:
            context += render_previous_evolution(previous)

        logger.info(
            f"📋 Context for patient {patient_id}: {len(courses)} ATB, "
            f"{len(pending)} pending culture(s), previous evolution: {previous is not None}"
        )
        return context
