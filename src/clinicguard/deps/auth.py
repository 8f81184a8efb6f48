"""Route protection dependencies for FastAPI endpoints.

This module provides dependency factories for:
- Page guards built from a RouteGuardConfig (role allow-lists and predicates)
- Prebuilt guards for the shared clinic pages
- Wrappers that protect an existing endpoint function
"""

import inspect
from typing import Any, Callable, Iterable, Optional

from fastapi import Depends, Request
from starlette.concurrency import run_in_threadpool

from ..domain.permission import Permission, Role
from ..domain.policy import PolicyEvaluator
from ..guards.route import RouteGuard, RouteGuardConfig, RouteGuardInterrupt, route_config
from ..logging_config import get_logger
from .providers import get_settings
from .session import get_evaluator

logger = get_logger(__name__)


def build_route_guard(config: RouteGuardConfig) -> RouteGuard:
    s = get_settings()
    return RouteGuard(
        config,
        login_path=s.login_path,
        login_next_param=s.login_next_param,
        landing_routes=s.role_landing_routes,
    )


def guard_dependency(config: RouteGuardConfig):
    """Dependency that lets the request through only when ``config`` authorizes it.

    Returns the request's PolicyEvaluator so endpoints can keep composing
    component guards with it. Any other outcome raises RouteGuardInterrupt,
    rendered by the handler registered in ``wiring.create_app``.
    """

    async def dependency(
        request: Request,
        rbac: PolicyEvaluator = Depends(get_evaluator),
    ) -> PolicyEvaluator:
        guard = build_route_guard(config)
        requested = request.url.path
        if request.url.query:
            requested = f"{requested}?{request.url.query}"
        decision = guard.evaluate(rbac.session, rbac, requested)
        if decision.authorized:
            return rbac

        if decision.reason not in (None, "not_authenticated"):
            logger.info(
                "route_guard_denied",
                extra={
                    "path": request.url.path,
                    "state": decision.state.value,
                    "reason": decision.reason,
                    "user_id": rbac.session.user_id,
                    "role": str(rbac.session.role),
                },
            )
        raise RouteGuardInterrupt(decision, guard.default_route(rbac.session))

    return dependency


def protected_route(
    permission: Any = None,
    permissions: Optional[Iterable[Any]] = None,
    require_all: bool = False,
    resource: Optional[str] = None,
    action: Optional[str] = None,
    allowed_roles: Optional[Iterable[Any]] = None,
    redirect_to: Optional[str] = None,
    show_unauthorized: bool = True,
):
    """Keyword form of :func:`guard_dependency`; validates the config eagerly."""
    return guard_dependency(
        route_config(
            permission=permission,
            permissions=permissions,
            require_all=require_all,
            resource=resource,
            action=action,
            allowed_roles=allowed_roles,
            redirect_to=redirect_to,
            show_unauthorized=show_unauthorized,
        )
    )


# Shared page protections
appointment_route = protected_route(permission=Permission.VIEW_APPOINTMENTS)
patient_route = protected_route(permission=Permission.VIEW_PATIENTS)
doctors_route = protected_route(permission=Permission.VIEW_DOCTORS)
queue_route = protected_route(permission=Permission.VIEW_QUEUE)
analytics_route = protected_route(permission=Permission.VIEW_ANALYTICS)
pharmacy_route = protected_route(permission=Permission.VIEW_PHARMACY)
medical_records_route = protected_route(permission=Permission.VIEW_MEDICAL_RECORDS)

ADMIN_ROLES = (Role.SUPER_ADMIN, Role.CLINIC_ADMIN)
DOCTOR_ROLES = (Role.DOCTOR, Role.SUPER_ADMIN, Role.CLINIC_ADMIN)
STAFF_ROLES = (
    Role.SUPER_ADMIN,
    Role.CLINIC_ADMIN,
    Role.DOCTOR,
    Role.RECEPTIONIST,
    Role.PHARMACIST,
)

admin_route = protected_route(allowed_roles=ADMIN_ROLES)
doctor_route = protected_route(allowed_roles=DOCTOR_ROLES)
staff_route = protected_route(allowed_roles=STAFF_ROLES)


def _protect(endpoint: Callable[..., Any], guard) -> Callable[..., Any]:
    """Return ``endpoint`` with ``guard`` injected as an extra dependency.

    FastAPI reads the wrapper's ``__signature__``, so the endpoint's own
    parameters keep working unchanged.
    """
    sig = inspect.signature(endpoint, eval_str=True)
    guard_param = inspect.Parameter(
        "route_guard_rbac",
        inspect.Parameter.KEYWORD_ONLY,
        default=Depends(guard),
        annotation=PolicyEvaluator,
    )
    params = list(sig.parameters.values())
    # keyword-only parameters sit before **kwargs
    insert_at = len(params)
    for i, p in enumerate(params):
        if p.kind is inspect.Parameter.VAR_KEYWORD:
            insert_at = i
            break
    params.insert(insert_at, guard_param)

    is_coroutine = inspect.iscoroutinefunction(endpoint)

    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        kwargs.pop("route_guard_rbac", None)
        if is_coroutine:
            return await endpoint(*args, **kwargs)
        # sync endpoints run in the threadpool, as FastAPI would run them
        return await run_in_threadpool(endpoint, *args, **kwargs)

    # no __wrapped__: FastAPI must see the async wrapper, not a sync endpoint
    wrapper.__name__ = endpoint.__name__
    wrapper.__qualname__ = endpoint.__qualname__
    wrapper.__doc__ = endpoint.__doc__
    wrapper.__module__ = endpoint.__module__
    wrapper.__signature__ = sig.replace(parameters=params)  # type: ignore[attr-defined]
    return wrapper


def with_role_protection(endpoint: Callable[..., Any], allowed_roles: Iterable[Any]):
    return _protect(endpoint, protected_route(allowed_roles=allowed_roles))


def with_permission_protection(
    endpoint: Callable[..., Any], permission: Any, require_all: bool = False
):
    perms = list(permission) if isinstance(permission, (list, tuple, set, frozenset)) else [permission]
    return _protect(endpoint, protected_route(permissions=perms, require_all=require_all))


__all__ = [
    "ADMIN_ROLES",
    "DOCTOR_ROLES",
    "STAFF_ROLES",
    "admin_route",
    "analytics_route",
    "appointment_route",
    "build_route_guard",
    "doctor_route",
    "doctors_route",
    "guard_dependency",
    "medical_records_route",
    "patient_route",
    "pharmacy_route",
    "protected_route",
    "queue_route",
    "staff_route",
    "with_role_protection",
    "with_permission_protection",
]
