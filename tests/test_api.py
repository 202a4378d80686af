# tests/test_api.py
from datetime import timedelta

from app.helpers.time import utcnow
from tests.conftest import register_and_login


async def _create_patient(client, headers, **overrides):
    payload = {
        "name": "Carlos Lima",
        "age": 61,
        "leito": "07B",
        "unidade": "TMO",
        "dih": (utcnow() - timedelta(days=5)).isoformat(),
        "colonization": "KPC",
    }
    payload.update(overrides)
    response = await client.post("/api/patients", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


async def test_routes_require_token(client):
    response = await client.get("/api/patients")
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"
    assert "message" in response.json()


async def test_login_and_me(client):
    tokens = await register_and_login(client, username="preceptora", role="preceptor")
    headers = {"Authorization": f"Bearer {tokens['access_token']}"}

    response = await client.get("/api/auth/me", headers=headers)

    assert response.status_code == 200
    assert response.json()["username"] == "preceptora"
    assert response.json()["role"] == "preceptor"
    assert response.json()["last_login"] is not None


async def test_wrong_password(client):
    await register_and_login(client)
    response = await client.post("/api/auth/login", json={"username": "residente", "password": "errada-123"})
    assert response.status_code == 401


async def test_duplicate_username(client):
    await register_and_login(client)
    response = await client.post(
        "/api/auth/register",
        json={"username": "residente", "email": "outro@hospital.org", "password": "senha-segura-123",
              "name": "Outro"},
    )
    assert response.status_code == 400
    assert response.json()["field"] == "username"


async def test_logout_revokes_token(client, auth_headers):
    assert (await client.post("/api/auth/logout", headers=auth_headers)).status_code == 200
    assert (await client.get("/api/patients", headers=auth_headers)).status_code == 401


async def test_refresh_rotates_token(client):
    tokens = await register_and_login(client)

    response = await client.post("/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert response.status_code == 200
    new_access = response.json()["access_token"]
    assert (await client.get("/api/auth/me", headers={"Authorization": f"Bearer {new_access}"})).status_code == 200

    reused = await client.post("/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert reused.status_code == 401


async def test_request_validation_shape(client, auth_headers):
    response = await client.post("/api/patients", json={"age": 40}, headers=auth_headers)
    assert response.status_code == 400
    body = response.json()
    assert set(body) == {"message", "field"}


async def test_kpc_patient_on_meropenem_timeline(client, auth_headers):
    patient = await _create_patient(client, auth_headers)
    start = utcnow() - timedelta(days=3) + timedelta(minutes=5)

    response = await client.post(
        "/api/antibiotics",
        json={"patient_id": patient["id"], "name": "Meropenem", "dose": "2g", "frequency": "8/8h",
              "start_date": start.isoformat(), "indication": "Neutropenia febril"},
        headers=auth_headers,
    )
    assert response.status_code == 201, response.text
    assert response.json()["current_day"] == 3

    timeline = (await client.get("/api/dashboard/atb-timeline", headers=auth_headers)).json()
    assert len(timeline) == 1
    entry = timeline[0]["antibiotics"][0]
    assert entry["current_day"] == 3
    day3 = next(marker for marker in entry["review_dates"] if marker["day"] == 3)
    assert day3["is_past"] is True

    alerts = (await client.get(f"/api/patients/{patient['id']}/alerts", headers=auth_headers)).json()
    assert len(alerts) == 3

    plan = (await client.get(f"/api/patients/{patient['id']}/prophylaxis-plan", headers=auth_headers)).json()
    assert plan["colonization_codes"] == ["KPC"]
    assert plan["recommendations"] == ["KPC: Meropenem + Polimixina + HMC"]


async def test_stop_antibiotic_resolves_alerts(client, auth_headers):
    patient = await _create_patient(client, auth_headers)
    antibiotic = (await client.post(
        "/api/antibiotics",
        json={"patient_id": patient["id"], "name": "Vancomicina", "start_date": utcnow().isoformat()},
        headers=auth_headers,
    )).json()

    response = await client.post(
        f"/api/antibiotics/{antibiotic['id']}/stop", json={"reason": "Descalonamento"}, headers=auth_headers
    )

    assert response.status_code == 200
    assert response.json()["status"] == "completed"
    unread = (await client.get("/api/alerts/unread", headers=auth_headers)).json()
    assert unread == []


async def test_failed_audit_write_keeps_clinical_change(client, auth_headers, monkeypatch):
    from app.system_services.audit_repository import AuditLogRepository

    patient = await _create_patient(client, auth_headers)

    async def broken_add(self, obj):
        raise RuntimeError("audit table unavailable")

    monkeypatch.setattr(AuditLogRepository, "add", broken_add)

    saved = await client.post(
        "/api/evolutions",
        json={"patient_id": patient["id"], "content": "INTERCONSULTA\nIMPRESSÃO:\nEstável"},
        headers=auth_headers,
    )
    assert saved.status_code == 201, saved.text

    started = await client.post(
        "/api/antibiotics",
        json={"patient_id": patient["id"], "name": "Cefepime", "start_date": utcnow().isoformat()},
        headers=auth_headers,
    )
    assert started.status_code == 201, started.text

    evolutions = (await client.get(f"/api/patients/{patient['id']}/evolutions", headers=auth_headers)).json()
    assert [e["id"] for e in evolutions] == [saved.json()["id"]]
    antibiotics = (await client.get(f"/api/patients/{patient['id']}/antibiotics", headers=auth_headers)).json()
    assert [a["name"] for a in antibiotics] == ["Cefepime"]
    audit = (await client.get(f"/api/audit/evolution/{saved.json()['id']}", headers=auth_headers)).json()
    assert audit == []


async def test_rejected_audit_row_keeps_clinical_change(client, auth_headers, monkeypatch):
    from app.system_services.audit_repository import AuditLogRepository

    patient = await _create_patient(client, auth_headers)
    original_add = AuditLogRepository.add

    async def rejected_add(self, obj):
        obj.action = "rewrite"  # outside check_audit_action
        return await original_add(self, obj)

    monkeypatch.setattr(AuditLogRepository, "add", rejected_add)

    saved = await client.post(
        "/api/evolutions",
        json={"patient_id": patient["id"], "content": "INTERCONSULTA\nIMPRESSÃO:\nEstável"},
        headers=auth_headers,
    )

    assert saved.status_code == 201, saved.text
    assert saved.json()["content"] == "INTERCONSULTA\nIMPRESSÃO:\nEstável"
    fetched = await client.get(f"/api/evolutions/{saved.json()['id']}", headers=auth_headers)
    assert fetched.status_code == 200


async def test_unknown_patient_is_404(client, auth_headers):
    response = await client.get("/api/patients/999", headers=auth_headers)
    assert response.status_code == 404
    assert "message" in response.json()


async def test_generate_and_save_evolution(client, auth_headers, text_generator):
    patient = await _create_patient(client, auth_headers, prophylaxis="Aciclovir", default_preceptor="Dr. X")
    text_generator.replies.append("INTERCONSULTA\nIMPRESSÃO:\nEstável\nCONDUTA:\n- manter")

    response = await client.post(
        "/api/evolutions/generate",
        json={"patient_id": patient["id"], "raw_input": "Hb 8, afebril"},
        headers=auth_headers,
    )
    assert response.status_code == 200, response.text
    draft = response.json()
    assert draft["impression"] == "Estável"
    assert draft["missing_data_alerts"] is None

    saved = await client.post(
        "/api/evolutions",
        json={"patient_id": patient["id"], "content": draft["content"], "impression": draft["impression"]},
        headers=auth_headers,
    )
    assert saved.status_code == 201
    evolution_id = saved.json()["id"]

    listed = (await client.get(f"/api/patients/{patient['id']}/evolutions", headers=auth_headers)).json()
    assert [e["id"] for e in listed] == [evolution_id]

    exported = await client.post(f"/api/evolutions/{evolution_id}/export", headers=auth_headers)
    assert exported.status_code == 200
    assert exported.headers["content-type"].startswith(
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
    )
    assert "evolucao-Carlos_Lima-" in exported.headers["content-disposition"]

    audit = (await client.get(f"/api/audit/evolution/{evolution_id}", headers=auth_headers)).json()
    assert sorted(entry["action"] for entry in audit) == ["create", "export"]


async def test_generate_with_blank_input(client, auth_headers):
    patient = await _create_patient(client, auth_headers)
    response = await client.post(
        "/api/evolutions/generate", json={"patient_id": patient["id"], "raw_input": "  "}, headers=auth_headers
    )
    assert response.status_code == 400
    assert response.json()["field"] == "raw_input"


async def test_generation_failure_is_502(client, auth_headers, text_generator):
    patient = await _create_patient(client, auth_headers)
    text_generator.error = RuntimeError("provider down")
    response = await client.post(
        "/api/evolutions/generate", json={"patient_id": patient["id"], "raw_input": "Hb 9"}, headers=auth_headers
    )
    assert response.status_code == 502


async def test_patient_update_is_audited(client, auth_headers):
    patient = await _create_patient(client, auth_headers)

    response = await client.patch(
        f"/api/patients/{patient['id']}", json={"colonization": "KPC+VRE"}, headers=auth_headers
    )

    assert response.status_code == 200
    assert response.json()["colonization"] == "KPC+VRE"
    audit = (await client.get(f"/api/audit/patient/{patient['id']}", headers=auth_headers)).json()
    update = next(entry for entry in audit if entry["action"] == "update")
    assert update["old_values"]["colonization"] == "KPC"
    assert update["new_values"]["colonization"] == "KPC+VRE"


async def test_llm_config_update(client, auth_headers):
    from config.llmconfig import llm_settings

    original = llm_settings.LLM_TEMPERATURE
    try:
        response = await client.post("/api/system/llm-config", json={"llm_temperature": 0.5}, headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["llm_temperature"] == 0.5
    finally:
        llm_settings.LLM_TEMPERATURE = original
