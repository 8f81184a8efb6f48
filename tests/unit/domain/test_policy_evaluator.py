import itertools
from types import MappingProxyType

import pytest

from clinicguard.domain.permission import Permission, Role
from clinicguard.domain.policy import AccessDecision, DenialReason, PolicyEvaluator
from clinicguard.domain.session import SessionState
from tests.conftest import make_evaluator, make_session

SAMPLE = [
    Permission.VIEW_APPOINTMENTS,
    Permission.DELETE_APPOINTMENTS,
    Permission.CALL_NEXT_PATIENT,
    Permission.VIEW_ANALYTICS,
]


def test_has_permission_follows_role_grants():
    rbac = make_evaluator(Role.DOCTOR)
    assert rbac.has_permission(Permission.VIEW_APPOINTMENTS)
    assert rbac.has_permission("VIEW_APPOINTMENTS")
    assert not rbac.has_permission(Permission.DELETE_APPOINTMENTS)


def test_unknown_permission_is_denied_not_raised():
    rbac = make_evaluator(Role.SUPER_ADMIN)
    assert rbac.has_permission("LAUNCH_ROCKETS") is False
    assert rbac.has_all_permissions([Permission.VIEW_USERS, "LAUNCH_ROCKETS"]) is False
    assert rbac.has_any_permission(["LAUNCH_ROCKETS", Permission.VIEW_USERS]) is True


def test_any_of_empty_list_is_false():
    rbac = make_evaluator(Role.SUPER_ADMIN)
    assert rbac.has_any_permission([]) is False


def test_all_of_empty_list_is_vacuously_true():
    rbac = make_evaluator(Role.PATIENT)
    assert rbac.has_all_permissions([]) is True


@pytest.mark.parametrize("role", [Role.DOCTOR, Role.RECEPTIONIST, Role.PATIENT])
def test_all_of_union_is_conjunction(role):
    rbac = make_evaluator(role)
    for r1, r2 in itertools.product(range(len(SAMPLE) + 1), repeat=2):
        p1, p2 = SAMPLE[:r1], SAMPLE[r2:]
        assert rbac.has_all_permissions(p1 + p2) == (
            rbac.has_all_permissions(p1) and rbac.has_all_permissions(p2)
        )


@pytest.mark.parametrize("role", list(Role))
def test_any_of_is_disjunction_of_singles(role):
    rbac = make_evaluator(role)
    assert rbac.has_any_permission(SAMPLE) == any(rbac.has_permission(p) for p in SAMPLE)


def test_can_access_known_pair():
    rbac = make_evaluator(Role.RECEPTIONIST)
    assert rbac.can_access("queue", "manage") is True
    assert rbac.can_access("pharmacy", "read") is False


def test_can_access_unknown_pair_is_false_for_everyone():
    assert make_evaluator(Role.SUPER_ADMIN).can_access("spaceships", "launch") is False
    assert make_evaluator(Role.SUPER_ADMIN).can_access("patients", "export") is False


def test_queries_are_idempotent():
    rbac = make_evaluator(Role.PHARMACIST)
    first = [rbac.has_permission(p) for p in Permission]
    second = [rbac.has_permission(p) for p in Permission]
    assert first == second
    assert rbac.permissions is rbac.permissions


def test_unauthenticated_session_has_no_permissions():
    rbac = PolicyEvaluator(SessionState(user_id="u", role=Role.SUPER_ADMIN, is_authenticated=False))
    assert rbac.permissions == frozenset()
    assert not rbac.has_permission(Permission.VIEW_APPOINTMENTS)


def test_loading_session_has_no_permissions():
    rbac = PolicyEvaluator(SessionState.loading())
    assert rbac.permissions == frozenset()


def test_unknown_role_is_denied_everything():
    rbac = make_evaluator("JANITOR")
    assert rbac.permissions == frozenset()
    assert not rbac.can_access("appointments", "read")


def test_role_change_mid_session_is_reflected_immediately():
    session = make_session(Role.PATIENT)
    rbac = PolicyEvaluator(session)
    assert not rbac.has_permission(Permission.VIEW_PATIENTS)
    assert not rbac.has_permission(Permission.CALL_NEXT_PATIENT)

    session.role = Role.DOCTOR

    assert rbac.has_permission(Permission.VIEW_PATIENTS)
    assert rbac.has_permission(Permission.CALL_NEXT_PATIENT)
    assert rbac.permissions == frozenset(
        p for p in Permission if make_evaluator(Role.DOCTOR).has_permission(p)
    )


def test_logout_clears_permissions():
    session = make_session(Role.CLINIC_ADMIN)
    rbac = PolicyEvaluator(session)
    assert rbac.has_permission(Permission.VIEW_USERS)
    session.logout()
    assert rbac.permissions == frozenset()


def test_injected_role_table_is_used_instead_of_global():
    table = MappingProxyType({Role.PATIENT: frozenset({Permission.VIEW_ANALYTICS})})
    rbac = make_evaluator(Role.PATIENT, role_permissions=table)
    assert rbac.has_permission(Permission.VIEW_ANALYTICS)
    assert not rbac.has_permission(Permission.VIEW_APPOINTMENTS)
    assert make_evaluator(Role.PATIENT).has_permission(Permission.VIEW_APPOINTMENTS)


def test_check_permission_reasons():
    rbac = make_evaluator(Role.PATIENT)
    assert rbac.check_permission(Permission.VIEW_APPOINTMENTS) == AccessDecision(True)
    assert rbac.check_permission(Permission.VIEW_USERS) == AccessDecision(
        False, DenialReason.MISSING_PERMISSION
    )
    assert rbac.check_permission("NOPE").reason == DenialReason.UNKNOWN_PERMISSION

    anon = PolicyEvaluator(SessionState.anonymous())
    assert anon.check_permission(Permission.VIEW_APPOINTMENTS).reason == DenialReason.NOT_AUTHENTICATED


def test_check_permissions_and_access_reasons():
    rbac = make_evaluator(Role.RECEPTIONIST)
    assert rbac.check_permissions([]).reason == DenialReason.EMPTY_REQUIREMENT
    assert rbac.check_permissions([Permission.VIEW_QUEUE, Permission.VIEW_PHARMACY])
    assert not rbac.check_permissions(
        [Permission.VIEW_QUEUE, Permission.VIEW_PHARMACY], require_all=True
    )
    assert rbac.check_access("queue", "read")
    assert rbac.check_access("nope", "read").reason == DenialReason.UNKNOWN_RESOURCE_ACTION
    assert rbac.check_access("billing", "manage").reason == DenialReason.MISSING_PERMISSION


def test_access_decision_is_truthy_only_when_allowed():
    assert AccessDecision.allow()
    assert not AccessDecision.deny(DenialReason.NOT_OWNER)
