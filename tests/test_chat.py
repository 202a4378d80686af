# tests/test_chat.py
from datetime import datetime, timedelta, timezone

import pytest

from app.note_engine.chat_service import ChatService, is_evolution_request, short_context
from app.shared.exceptions import GenerationFailed, NotFound, ValidationError
from app.system_services.evolution_repository import EvolutionRepository
from app.system_services.message_repository import MessageRepository
from app.system_services.patient_repository import PatientRepository
from tests.conftest import FakeTextGenerator

NOW = datetime(2024, 7, 3, 14, 0, tzinfo=timezone.utc)


def _chat(db, fake):
    return ChatService(PatientRepository(db), MessageRepository(db), EvolutionRepository(db), fake)


@pytest.mark.parametrize(
    "content, expected",
    [
        ("Faz a evolução de hoje", True),
        ("EVOLUÇÃO por favor", True),
        ("gera a nota", True),
        ("update do caso", True),
        ("Qual a dose de vancomicina?", False),
    ],
)
def test_is_evolution_request(content, expected):
    assert is_evolution_request(content) is expected


async def test_short_context_leaves_out_unknown_age(make_patient):
    patient = await make_patient(age=None, leito=None)

    assert short_context(patient, None) == "Paciente: Maria Silva, Leito: ?\n"


async def test_plain_question(db, make_patient):
    patient = await make_patient(hematological_diagnosis="LMA", colonization="KPC")
    fake = FakeTextGenerator(replies=["Sugiro manter Meropenem."])

    reply = await _chat(db, fake).send(patient.id, "Mantenho o meropenem?", now=NOW)

    assert reply.user_message.role == "user"
    assert reply.assistant_message.content == "Sugiro manter Meropenem."
    assert reply.assistant_message.message_type == "chat"
    assert reply.evolution is None

    system = fake.calls[0][0]["content"]
    assert "Paciente: Maria Silva, 54a, Leito: 12A" in system
    assert "Colonização: KPC" in system
    assert fake.calls[0][-1] == {"role": "user", "content": "Mantenho o meropenem?"}


async def test_evolution_request_keeps_draft(db, make_patient):
    patient = await make_patient()
    note = "INTERCONSULTA HEMATOINFECTO\nIMPRESSÃO:\nEstável"
    fake = FakeTextGenerator(replies=[note])

    reply = await _chat(db, fake).send(patient.id, "Gera a evolução de hoje", now=NOW)

    assert reply.assistant_message.message_type == "evolution"
    assert reply.evolution is not None
    assert reply.evolution.is_draft is True
    assert reply.evolution.content == note
    assert reply.assistant_message.evolution_id == reply.evolution.id
    assert "INTERCONSULTA" in fake.calls[0][0]["content"]


async def test_evolution_request_without_note_saves_no_draft(db, make_patient):
    patient = await make_patient()
    fake = FakeTextGenerator(replies=["Preciso dos labs de hoje."])

    reply = await _chat(db, fake).send(patient.id, "faz a evolução", now=NOW)

    assert reply.evolution is None
    assert await EvolutionRepository(db).list_for_patient(patient.id) == []


async def test_history_is_replayed_once(db, make_patient):
    patient = await make_patient()
    fake = FakeTextGenerator(replies=["primeira", "segunda"])
    chat = _chat(db, fake)

    await chat.send(patient.id, "oi", now=NOW)
    await chat.send(patient.id, "e agora?", now=NOW + timedelta(minutes=1))

    roles = [(m["role"], m["content"]) for m in fake.calls[1][1:]]
    assert roles == [("user", "oi"), ("assistant", "primeira"), ("user", "e agora?")]
    assert len(await MessageRepository(db).list_for_patient(patient.id)) == 4


async def test_failed_generation_persists_nothing(db, make_patient):
    patient = await make_patient()

    with pytest.raises(GenerationFailed):
        await _chat(db, FakeTextGenerator(error=RuntimeError("timeout"))).send(patient.id, "oi", now=NOW)

    assert await MessageRepository(db).list_for_patient(patient.id) == []


async def test_blank_message_and_unknown_patient(db, make_patient):
    patient = await make_patient()
    with pytest.raises(ValidationError):
        await _chat(db, FakeTextGenerator()).send(patient.id, "  ", now=NOW)
    with pytest.raises(NotFound):
        await _chat(db, FakeTextGenerator()).send(999, "oi", now=NOW)
