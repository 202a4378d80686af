# tests/test_note_generator.py
from datetime import datetime, timezone

import pytest

from app.note_engine.context_builder import ContextBuilder
from app.note_engine.note_generator import (
    NoteGenerator,
    detect_missing_data,
    extract_impression,
)
from app.shared.exceptions import GenerationFailed, ValidationError
from app.system_models.patient_model.patient_model import Patient
from app.system_services.antibiotic_repository import AntibioticRepository
from app.system_services.culture_repository import CultureRepository
from app.system_services.evolution_repository import EvolutionRepository
from app.system_services.patient_repository import PatientRepository
from tests.conftest import FakeTextGenerator

NOW = datetime(2024, 7, 3, 14, 0, tzinfo=timezone.utc)

NOTE = (
    "INTERCONSULTA HEMATOINFECTO\n"
    "───────────────────────────────────\n"
    "IMPRESSÃO:\n"
    "Paciente estável, sem febre há 48h.\n"
    "───────────────────────────────────\n"
    "CONDUTA:\n"
    "- Manter Meropenem\n"
)


def _generator(db, text_generator):
    context_builder = ContextBuilder(
        PatientRepository(db), AntibioticRepository(db), CultureRepository(db), EvolutionRepository(db)
    )
    return NoteGenerator(context_builder, PatientRepository(db), text_generator)


def test_missing_data_example():
    patient = Patient(colonization=None, prophylaxis="Aciclovir + Bactrim", default_preceptor="Dr. X")
    assert detect_missing_data(patient, "paciente estável, sem queixas") == [
        "Swab de vigilância não cadastrado",
        "Labs do dia não informados",
    ]


def test_missing_data_none_when_complete():
    patient = Patient(colonization="KPC", prophylaxis="Aciclovir", default_preceptor="Dr. X")
    assert detect_missing_data(patient, "Hb 8.2, leuco 300") is None


def test_missing_data_all_flags_in_order():
    patient = Patient(colonization="  ", prophylaxis=None, default_preceptor="")
    assert detect_missing_data(patient, "sem queixas") == [
        "Swab de vigilância não cadastrado",
        "Profilaxias não cadastradas",
        "Preceptor não cadastrado",
        "Labs do dia não informados",
    ]


def test_extract_impression():
    assert extract_impression(NOTE) == "Paciente estável, sem febre há 48h."
    assert extract_impression("sem a seção") is None
    assert extract_impression("IMPRESSÃO:\nFim do texto") == "Fim do texto"


async def test_generate_builds_prompt_and_flags(db, make_patient):
    patient = await make_patient(colonization=None, prophylaxis="Aciclovir", default_preceptor="Dr. X")
    fake = FakeTextGenerator(replies=[NOTE])

    result = await _generator(db, fake).generate(
        patient.id, "paciente estável, sem queixas", now=NOW
    )

    assert result.content == NOTE
    assert result.impression == "Paciente estável, sem febre há 48h."
    assert result.missing_data_alerts == ["Swab de vigilância não cadastrado", "Labs do dia não informados"]
    assert result.reading_suggestions is None
    assert fake.json_calls == []

    system, user = fake.calls[0]
    assert system["role"] == "system"
    assert "INTERCONSULTA" in system["content"]
    assert user["content"].startswith("DADOS DO PACIENTE CADASTRADO:")
    assert "paciente estável, sem queixas" in user["content"]
    assert "A data de hoje é 03/07/2024." in user["content"]
    assert user["content"].endswith("Inclua a seção IMPRESSÃO com um resumo do caso.")


async def test_generate_without_impression_request(db, make_patient):
    patient = await make_patient()
    fake = FakeTextGenerator(replies=[NOTE])

    await _generator(db, fake).generate(patient.id, "Hb 9", include_impression=False, now=NOW)

    assert "Inclua a seção IMPRESSÃO" not in fake.calls[0][1]["content"]


async def test_generate_with_suggestions(db, make_patient):
    patient = await make_patient(hematological_diagnosis="LLA")
    item = {"title": "ECIL-8", "source": "Lancet Oncol", "summary": "Neutropenia febril"}
    fake = FakeTextGenerator(replies=[NOTE], json_replies=[{"suggestions": [item]}])

    result = await _generator(db, fake).generate(patient.id, "Hb 9", include_suggestions=True, now=NOW)

    assert [s.title for s in result.reading_suggestions] == ["ECIL-8"]
    assert fake.json_calls[0][1]["content"].startswith("Caso: LLA.")


async def test_suggestion_failure_still_returns_note(db, make_patient):
    patient = await make_patient()
    fake = FakeTextGenerator(replies=[NOTE], json_error=RuntimeError("rate limited"))

    result = await _generator(db, fake).generate(patient.id, "Hb 9", include_suggestions=True, now=NOW)

    assert result.content == NOTE
    assert result.reading_suggestions is None


async def test_invalid_suggestions_are_dropped(db, make_patient):
    patient = await make_patient()
    fake = FakeTextGenerator(replies=[NOTE], json_replies=[{"suggestions": [{"title": "Sem fonte"}]}])

    result = await _generator(db, fake).generate(patient.id, "Hb 9", include_suggestions=True, now=NOW)

    assert result.reading_suggestions is None


async def test_generation_error_raises(db, make_patient):
    patient = await make_patient()
    fake = FakeTextGenerator(error=RuntimeError("provider down"))

    with pytest.raises(GenerationFailed):
        await _generator(db, fake).generate(patient.id, "Hb 9", now=NOW)


async def test_empty_generation_raises(db, make_patient):
    patient = await make_patient()

    with pytest.raises(GenerationFailed):
        await _generator(db, FakeTextGenerator(replies=["   "])).generate(patient.id, "Hb 9", now=NOW)


async def test_blank_input_rejected_before_any_call(db, make_patient):
    patient = await make_patient()
    fake = FakeTextGenerator(replies=[NOTE])

    with pytest.raises(ValidationError) as exc_info:
        await _generator(db, fake).generate(patient.id, "   ", now=NOW)

    assert exc_info.value.field == "raw_input"
    assert fake.calls == []


async def test_unknown_patient_rejected(db):
    with pytest.raises(ValidationError) as exc_info:
        await _generator(db, FakeTextGenerator(replies=[NOTE])).generate(999, "Hb 9", now=NOW)
    assert exc_info.value.field == "patient_id"
