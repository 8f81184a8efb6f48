"""Component guards composed inside guarded pages."""

import pytest
from httpx import ASGITransport, AsyncClient

from clinicguard.domain.permission import Role
from tests.conftest import make_session


async def _get(app, provider, role, path):
    provider.session = make_session(role)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        return await ac.get(path)


@pytest.mark.anyio
async def test_appointments_page_for_doctor(test_app):
    app, provider, sink = test_app
    resp = await _get(app, provider, Role.DOCTOR, "/appointments")

    assert resp.status_code == 200
    assert "Book appointment" in resp.text
    assert "Reschedule" in resp.text
    assert "Cancel appointment" not in resp.text
    assert "Showing all clinic appointments" not in resp.text


@pytest.mark.anyio
async def test_appointments_page_for_receptionist(test_app):
    app, provider, sink = test_app
    resp = await _get(app, provider, Role.RECEPTIONIST, "/appointments")

    assert resp.status_code == 200
    assert "Showing all clinic appointments" in resp.text


@pytest.mark.anyio
async def test_queue_page_doctor_gets_fallback_for_reordering(test_app):
    app, provider, sink = test_app
    resp = await _get(app, provider, Role.DOCTOR, "/queue")

    assert resp.status_code == 200
    assert "Call next patient" in resp.text
    assert "Update status" in resp.text
    assert "Reorder queue" not in resp.text
    assert "Queue order is managed by reception." in resp.text


@pytest.mark.anyio
async def test_queue_page_receptionist_can_reorder(test_app):
    app, provider, sink = test_app
    resp = await _get(app, provider, Role.RECEPTIONIST, "/queue")

    assert "Reorder queue" in resp.text
    assert "managed by reception" not in resp.text


@pytest.mark.anyio
async def test_pharmacy_page_for_doctor_shows_prescriptions_only(test_app):
    app, provider, sink = test_app
    resp = await _get(app, provider, Role.DOCTOR, "/pharmacy")

    assert resp.status_code == 200
    assert "Prescriptions" in resp.text
    assert "Dispense" not in resp.text
    assert "Inventory" not in resp.text


@pytest.mark.anyio
async def test_medical_records_page_for_patient_is_read_only(test_app):
    app, provider, sink = test_app
    resp = await _get(app, provider, Role.PATIENT, "/ehr")

    assert resp.status_code == 200
    assert "New record" not in resp.text
    assert "Edit record" not in resp.text
    assert "All clinic records" not in resp.text


@pytest.mark.anyio
async def test_analytics_page_for_clinic_admin(test_app):
    app, provider, sink = test_app
    resp = await _get(app, provider, Role.CLINIC_ADMIN, "/analytics")

    assert resp.status_code == 200
    for panel in ("Clinic", "Doctors", "Patients", "Revenue"):
        assert f'<div class="panel">{panel}</div>' in resp.text
    assert "Export report" in resp.text


@pytest.mark.anyio
async def test_patients_page_for_receptionist(test_app):
    app, provider, sink = test_app
    resp = await _get(app, provider, Role.RECEPTIONIST, "/patients")

    assert resp.status_code == 200
    assert "Register patient" in resp.text
    assert "Edit patient" in resp.text
    assert "Remove patient" not in resp.text
    assert "Medical history" not in resp.text


@pytest.mark.anyio
async def test_doctors_page_for_clinic_admin_and_doctor(test_app):
    app, provider, sink = test_app
    admin = await _get(app, provider, Role.CLINIC_ADMIN, "/doctors")
    doctor = await _get(app, provider, Role.DOCTOR, "/doctors")

    assert admin.status_code == 200
    for label in ("Add doctor", "Edit doctor", "Schedules"):
        assert label in admin.text
    assert doctor.status_code == 403


@pytest.mark.anyio
async def test_every_navigation_entry_is_served(test_app):
    app, provider, sink = test_app
    provider.session = make_session(Role.SUPER_ADMIN)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        me = await ac.get("/api/v1/access/me")
        paths = [r["path"] for r in me.json()["available_routes"]]
        statuses = {path: (await ac.get(path)).status_code for path in paths}

    assert "/patients" in paths and "/doctors" in paths
    assert statuses == {path: 200 for path in paths}
