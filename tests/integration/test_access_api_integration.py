import pytest
from httpx import ASGITransport, AsyncClient

from clinicguard.domain.audit import AuditResult, RiskLevel
from clinicguard.domain.permission import Role
from clinicguard.infrastructure.session.token_session import TokenSessionProvider
from clinicguard.wiring import create_app
from tests.conftest import TEST_JWT_SECRET, make_session


def _client(app):
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


@pytest.mark.anyio
async def test_me_for_anonymous(test_app):
    app, provider, sink = test_app

    async with _client(app) as ac:
        resp = await ac.get("/api/v1/access/me")

    assert resp.status_code == 200
    data = resp.json()
    assert data["is_authenticated"] is False
    assert data["permissions"] == []
    assert data["default_route"] == "/auth/login"
    assert data["available_routes"] == []


@pytest.mark.anyio
async def test_me_for_doctor(test_app):
    app, provider, sink = test_app
    provider.session = make_session(Role.DOCTOR, user_id="doc-1", clinic_id="c1")

    async with _client(app) as ac:
        resp = await ac.get("/api/v1/access/me")

    data = resp.json()
    assert data["user_id"] == "doc-1"
    assert data["role"] == "DOCTOR"
    assert data["clinic_id"] == "c1"
    assert "CALL_NEXT_PATIENT" in data["permissions"]
    assert data["default_route"] == "/doctor/dashboard"
    assert [r["path"] for r in data["available_routes"]] == [
        "/appointments",
        "/patients",
        "/queue",
        "/pharmacy",
        "/ehr",
    ]
    assert data["facades"]["queue"]["can_call_next_patient"] is True
    assert data["facades"]["queue"]["can_manage_queue"] is False


@pytest.mark.anyio
async def test_check_single_permission(test_app):
    app, provider, sink = test_app
    provider.session = make_session(Role.DOCTOR)

    async with _client(app) as ac:
        granted = await ac.post("/api/v1/access/check", json={"permission": "VIEW_QUEUE"})
        denied = await ac.post("/api/v1/access/check", json={"permission": "MANAGE_QUEUE"})

    assert granted.json()["allowed"] is True
    assert granted.json()["check"]["permission"] == "VIEW_QUEUE"
    assert denied.json() == {
        "allowed": False,
        "reason": "missing_permission",
        "check": {"permission": "MANAGE_QUEUE", "require_all": False},
    }


@pytest.mark.anyio
async def test_check_list_and_resource(test_app):
    app, provider, sink = test_app
    provider.session = make_session(Role.DOCTOR)

    async with _client(app) as ac:
        any_of = await ac.post(
            "/api/v1/access/check", json={"permissions": ["VIEW_QUEUE", "MANAGE_QUEUE"]}
        )
        all_of = await ac.post(
            "/api/v1/access/check",
            json={"permissions": ["VIEW_QUEUE", "MANAGE_QUEUE"], "require_all": True},
        )
        resource = await ac.post(
            "/api/v1/access/check", json={"resource": "spaceships", "action": "launch"}
        )

    assert any_of.json()["allowed"] is True
    assert all_of.json()["allowed"] is False
    assert resource.json()["reason"] == "unknown_resource_action"


@pytest.mark.anyio
async def test_check_rejects_malformed_predicates(test_app):
    app, provider, sink = test_app
    provider.session = make_session(Role.DOCTOR)

    async with _client(app) as ac:
        empty = await ac.post("/api/v1/access/check", json={})
        empty_list = await ac.post("/api/v1/access/check", json={"permissions": []})
        half_pair = await ac.post("/api/v1/access/check", json={"resource": "queue"})

    assert empty.status_code == 422
    assert empty_list.status_code == 422
    assert half_pair.status_code == 422


@pytest.mark.anyio
async def test_role_grants_by_slug(test_app):
    app, provider, sink = test_app

    async with _client(app) as ac:
        resp = await ac.get("/api/v1/access/roles/pharmacist")
        missing = await ac.get("/api/v1/access/roles/janitor")

    assert resp.status_code == 200
    data = resp.json()
    assert data["role"] == "PHARMACIST"
    assert len(data["permissions"]) == 9
    assert set(data["categorized_permissions"]) == {"PATIENTS", "PHARMACY", "NOTIFICATIONS", "SETTINGS"}
    assert missing.status_code == 404


@pytest.mark.anyio
async def test_call_next_allowed_is_audited(test_app):
    app, provider, sink = test_app
    provider.session = make_session(Role.RECEPTIONIST, user_id="rec-1")

    async with _client(app) as ac:
        resp = await ac.post("/queue/call-next")

    assert resp.status_code == 200
    assert resp.json() == {"status": "called", "called_by": "rec-1"}
    assert len(sink.events) == 1
    assert sink.events[0].result is AuditResult.SUCCESS
    assert sink.events[0].actor_id == "rec-1"


@pytest.mark.anyio
async def test_call_next_denied_is_audited(test_app):
    app, provider, sink = test_app
    provider.session = make_session(Role.PHARMACIST, user_id="ph-1")

    async with _client(app) as ac:
        resp = await ac.post("/queue/call-next")

    assert resp.status_code == 403
    event = sink.events[0]
    assert event.result is AuditResult.FAILURE
    assert event.risk_level is RiskLevel.MEDIUM
    assert event.metadata["reason"] == "missing_permission"
    assert event.metadata["role"] == "PHARMACIST"


@pytest.mark.anyio
async def test_call_next_anonymous_is_unauthorized(test_app):
    app, provider, sink = test_app

    async with _client(app) as ac:
        resp = await ac.post("/queue/call-next")

    assert resp.status_code == 401
    assert sink.events[0].metadata["reason"] == "not_authenticated"


@pytest.mark.anyio
async def test_bearer_token_end_to_end(settings):
    app = create_app(settings)
    token = TokenSessionProvider(TEST_JWT_SECRET).issue("doc-9", "DOCTOR")

    async with _client(app) as ac:
        anon = await ac.get("/queue")
        authed = await ac.get("/queue", headers={"Authorization": f"Bearer {token}"})
        me = await ac.get("/api/v1/access/me", headers={"Cookie": f"session_token={token}"})

    assert anon.status_code == 303
    assert authed.status_code == 200
    assert "Call next patient" in authed.text
    assert me.json()["user_id"] == "doc-9"
