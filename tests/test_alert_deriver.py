# tests/test_alert_deriver.py
from datetime import datetime, timedelta, timezone

import pytest

from app.alert_engine.alert_deriver import AlertDeriver, review_due_date, review_markers
from app.helpers.time import as_utc
from app.shared.exceptions import NotFound, ValidationError
from app.system_models.alert_model.alert_schemas import AlertCreate
from app.system_models.antibiotic_model.antibiotic_schemas import AntibioticCreate, AntibioticUpdate
from app.system_models.culture_model.culture_schemas import CultureCreate, CultureResultUpdate
from app.system_models.enums import AlertType
from app.system_services.alert_repository import AlertRepository
from app.system_services.antibiotic_repository import AntibioticRepository
from app.system_services.culture_repository import CultureRepository
from app.system_services.patient_repository import PatientRepository

START = datetime(2024, 5, 10, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def deriver(db):
    return AlertDeriver(
        alerts=AlertRepository(db),
        antibiotics=AntibioticRepository(db),
        cultures=CultureRepository(db),
        patients=PatientRepository(db),
    )


async def _start(deriver, patient_id, name="Meropenem", start=START):
    return await deriver.start_antibiotic(
        AntibioticCreate(patient_id=patient_id, name=name, dose="1g", frequency="8/8h",
                         start_date=start, indication="Neutropenia febril")
    )


def test_review_due_dates():
    assert review_due_date(START, 3) == START + timedelta(days=2)
    assert review_due_date(START, 14) == START + timedelta(days=13)


def test_review_markers_flag_past_days():
    markers = review_markers(START, now=START + timedelta(days=3))
    assert [m["day"] for m in markers] == [3, 7, 14]
    assert [m["is_past"] for m in markers] == [True, False, False]
    assert markers[0]["date"] == "2024-05-12"


async def test_start_creates_three_review_alerts(deriver, make_patient):
    patient = await make_patient()
    antibiotic = await _start(deriver, patient.id)

    alerts = await deriver.alerts.list_for_patient(patient.id)
    reviews = sorted(
        (a for a in alerts if a.related_antibiotic_id == antibiotic.id), key=lambda a: as_utc(a.due_date)
    )
    assert len(reviews) == 3
    assert all(a.type == AlertType.ATB_REVIEW.value for a in reviews)
    assert [as_utc(a.due_date) - START for a in reviews] == [
        timedelta(days=2), timedelta(days=6), timedelta(days=13)
    ]
    assert [a.priority for a in reviews] == ["high", "medium", "medium"]
    assert reviews[0].title == "Reavaliação ATB D3: Meropenem"
    assert antibiotic.status == "active"


async def test_start_for_unknown_patient_writes_nothing(deriver):
    with pytest.raises(NotFound):
        await _start(deriver, 999)
    assert await deriver.antibiotics.list_active() == []


async def test_stop_resolves_only_its_own_alerts(deriver, make_patient):
    patient = await make_patient()
    meropenem = await _start(deriver, patient.id, "Meropenem")
    vanco = await _start(deriver, patient.id, "Vancomicina")

    stopped = await deriver.stop_antibiotic(meropenem.id, reason="Culturas negativas")

    assert stopped.status == "completed"
    assert stopped.end_date is not None
    assert stopped.suspension_reason == "Culturas negativas"
    assert await deriver.alerts.unresolved_for_antibiotic(meropenem.id) == []
    assert len(await deriver.alerts.unresolved_for_antibiotic(vanco.id)) == 3


async def test_stopping_a_finished_course_changes_nothing(deriver, make_patient):
    patient = await make_patient()
    antibiotic = await _start(deriver, patient.id)
    first = await deriver.stop_antibiotic(antibiotic.id, reason="Culturas negativas")
    end_date = first.end_date

    again = await deriver.stop_antibiotic(antibiotic.id)

    assert again.status == "completed"
    assert again.end_date == end_date
    assert again.suspension_reason == "Culturas negativas"


async def test_suspending_through_update_retires_alerts(deriver, make_patient):
    patient = await make_patient()
    antibiotic = await _start(deriver, patient.id)

    updated = await deriver.update_antibiotic(antibiotic.id, AntibioticUpdate(status="suspended"))

    assert updated.status == "suspended"
    assert updated.end_date is not None
    assert await deriver.alerts.unresolved_for_antibiotic(antibiotic.id) == []


async def test_dose_change_keeps_alerts(deriver, make_patient):
    patient = await make_patient()
    antibiotic = await _start(deriver, patient.id)

    await deriver.update_antibiotic(antibiotic.id, AntibioticUpdate(dose="2g"))

    assert len(await deriver.alerts.unresolved_for_antibiotic(antibiotic.id)) == 3


async def test_culture_pending_then_positive(deriver, make_patient):
    patient = await make_patient()
    culture = await deriver.register_culture(
        CultureCreate(patient_id=patient.id, type="Hemocultura", site="CVC", collection_date=START)
    )
    pending = await deriver.alerts.unresolved_for_culture(culture.id)
    assert len(pending) == 1
    assert pending[0].priority == "medium"
    assert pending[0].title == "Cultura pendente: Hemocultura"

    await deriver.record_result(
        culture.id, CultureResultUpdate(status="positive", organism="Klebsiella pneumoniae")
    )

    open_alerts = await deriver.alerts.unresolved_for_culture(culture.id)
    assert len(open_alerts) == 1
    assert open_alerts[0].id != pending[0].id
    assert open_alerts[0].priority == "high"
    assert "Klebsiella pneumoniae" in open_alerts[0].message
    assert culture.status == "positive"
    assert culture.result_date is not None


@pytest.mark.parametrize("status", ["negative", "contaminated"])
async def test_culture_without_growth_leaves_no_open_alert(deriver, make_patient, status):
    patient = await make_patient()
    culture = await deriver.register_culture(
        CultureCreate(patient_id=patient.id, type="Urocultura", collection_date=START)
    )

    await deriver.record_result(culture.id, CultureResultUpdate(status=status))

    assert await deriver.alerts.unresolved_for_culture(culture.id) == []
    assert len(await deriver.alerts.list_for_patient(patient.id)) == 1


async def test_mark_read_removes_alert_from_unread(deriver, make_patient):
    patient = await make_patient()
    await _start(deriver, patient.id)
    before = await deriver.alerts.list_unread()
    assert len(before) == 3

    await deriver.mark_read(before[0].id)

    after = await deriver.alerts.list_unread()
    assert [a.id for a in after] == [a.id for a in before[1:]]


async def test_unread_orders_by_priority(deriver, make_patient):
    patient = await make_patient()
    await _start(deriver, patient.id)
    await deriver.create_alert(
        AlertCreate(patient_id=patient.id, type="lab_critical", priority="critical",
                    title="K+ 6.8", message="Hipercalemia")
    )

    unread = await deriver.alerts.list_unread()
    assert [a.priority for a in unread] == ["critical", "high", "medium", "medium"]


async def test_resolve_twice_keeps_first_resolution(deriver, make_patient):
    patient = await make_patient()
    await _start(deriver, patient.id)
    alert = (await deriver.alerts.list_unread())[0]

    first = await deriver.resolve(alert.id, user_id=None)
    resolved_at = first.resolved_at
    second = await deriver.resolve(alert.id, user_id=42)

    assert second.is_resolved is True
    assert second.resolved_at == resolved_at
    assert second.resolved_by is None


async def test_mark_read_missing_alert(deriver):
    with pytest.raises(NotFound):
        await deriver.mark_read(12345)


async def test_result_cannot_be_pending(deriver, make_patient):
    patient = await make_patient()
    culture = await deriver.register_culture(
        CultureCreate(patient_id=patient.id, type="Hemocultura", collection_date=START)
    )
    result = CultureResultUpdate.model_construct(status="pending")
    with pytest.raises(ValidationError):
        await deriver.record_result(culture.id, result)
