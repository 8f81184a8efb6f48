from prometheus_client import REGISTRY

from clinicguard.domain.permission import Permission, Role
from clinicguard.guards import (
    ConditionalRender,
    ProtectedComponent,
    QueueProtectedComponent,
    RouteGuard,
    route_config,
)
from clinicguard.metrics import ROUTE_GUARD_DECISIONS, metrics_response
from tests.conftest import make_evaluator


def _checks(result: str, check: str) -> float:
    value = REGISTRY.get_sample_value(
        "permission_checks_total", {"result": result, "check": check}
    )
    return value or 0.0


def test_evaluator_queries_leave_the_registry_alone():
    rbac = make_evaluator(Role.DOCTOR)
    before = {
        (result, check): _checks(result, check)
        for result in ("granted", "denied")
        for check in ("permission", "any", "all", "resource")
    }

    rbac.has_permission(Permission.VIEW_APPOINTMENTS)
    rbac.has_permission(Permission.MANAGE_QUEUE)
    rbac.has_any_permission([Permission.VIEW_QUEUE])
    rbac.has_all_permissions([Permission.VIEW_QUEUE, Permission.MANAGE_QUEUE])
    rbac.can_access("queue", "read")
    rbac.check_permission(Permission.VIEW_QUEUE)

    after = {key: _checks(*key) for key in before}
    assert after == before


def test_component_guards_are_counted():
    rbac = make_evaluator(Role.DOCTOR)
    granted = _checks("granted", "permission")
    denied = _checks("denied", "permission")

    ProtectedComponent("x", permission=Permission.VIEW_QUEUE).render(rbac)
    ProtectedComponent("x", permission=Permission.MANAGE_QUEUE).render(rbac)

    assert _checks("granted", "permission") == granted + 1
    assert _checks("denied", "permission") == denied + 1


def test_conditional_and_domain_guards_use_their_own_labels():
    rbac = make_evaluator(Role.DOCTOR)
    resource = _checks("granted", "resource")
    domain = _checks("denied", "domain")

    ConditionalRender(rbac).render_with_access("queue", "read", "q")
    QueueProtectedComponent("x", "manage").render(rbac)

    assert _checks("granted", "resource") == resource + 1
    assert _checks("denied", "domain") == domain + 1


def test_route_guard_decisions_are_counted():
    counter = ROUTE_GUARD_DECISIONS.labels(state="ROLE_DENIED")
    before = counter._value.get()
    rbac = make_evaluator(Role.PATIENT)
    RouteGuard(route_config(allowed_roles=[Role.DOCTOR])).evaluate(rbac.session, rbac)
    assert counter._value.get() == before + 1


def test_metrics_exposition_contains_authorization_counters():
    ProtectedComponent("x", permission=Permission.VIEW_APPOINTMENTS).render(make_evaluator(Role.PATIENT))
    body, content_type = metrics_response()
    assert b"permission_checks_total" in body
    assert b"route_guard_decisions_total" in body
    assert content_type.startswith("text/plain")
