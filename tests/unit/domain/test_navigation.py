import pytest

from clinicguard.domain.navigation import (
    DEFAULT_LOGIN_PATH,
    dashboard_path,
    get_available_routes,
    get_default_route,
)
from clinicguard.domain.permission import Role
from clinicguard.domain.session import SessionState
from tests.conftest import make_evaluator, make_session


@pytest.mark.parametrize(
    "role, expected",
    [
        (Role.SUPER_ADMIN, "/super-admin/dashboard"),
        (Role.CLINIC_ADMIN, "/clinic-admin/dashboard"),
        (Role.DOCTOR, "/doctor/dashboard"),
        (Role.RECEPTIONIST, "/receptionist/dashboard"),
        (Role.PHARMACIST, "/pharmacist/dashboard"),
        (Role.PATIENT, "/patient/dashboard"),
    ],
)
def test_default_route_per_role(role, expected):
    assert dashboard_path(role) == expected
    assert get_default_route(make_session(role)) == expected


def test_default_route_for_anonymous_is_login():
    assert get_default_route(SessionState.anonymous()) == DEFAULT_LOGIN_PATH
    assert get_default_route(SessionState.anonymous(), login_path="/signin") == "/signin"


def test_unknown_role_lands_on_least_privileged_dashboard():
    assert get_default_route(make_session("JANITOR")) == "/patient/dashboard"


def test_landing_override_by_value_or_slug():
    assert get_default_route(make_session(Role.DOCTOR), {"DOCTOR": "/queue"}) == "/queue"
    assert (
        get_default_route(make_session(Role.CLINIC_ADMIN), {"clinic-admin": "/analytics"})
        == "/analytics"
    )
    assert get_default_route(make_session(Role.PATIENT), {"DOCTOR": "/queue"}) == "/patient/dashboard"


def test_doctor_navigation():
    paths = [r.path for r in get_available_routes(make_evaluator(Role.DOCTOR))]
    assert paths == ["/appointments", "/patients", "/queue", "/pharmacy", "/ehr"]


def test_patient_navigation():
    routes = get_available_routes(make_evaluator(Role.PATIENT))
    assert [(r.path, r.label) for r in routes] == [
        ("/appointments", "Appointments"),
        ("/ehr", "Medical Records"),
    ]


def test_super_admin_sees_every_entry():
    assert len(get_available_routes(make_evaluator(Role.SUPER_ADMIN))) == 7


def test_anonymous_navigation_is_empty():
    assert get_available_routes(make_evaluator(Role.DOCTOR, is_authenticated=False)) == []
