from fastapi import APIRouter, Depends, HTTPException

from ..deps import get_evaluator, get_settings
from ..domain.facades import all_facades
from ..domain.navigation import get_available_routes, get_default_route
from ..domain.permission import coerce_role, get_permissions_for_role, permissions_by_category
from ..domain.policy import PolicyEvaluator
from ..guards.predicate import AccessPredicate, GuardConfigurationError
from ..logging_config import get_logger
from ..schemas.access import (
    AccessCheckRequest,
    AccessDecisionResponse,
    NavRouteResponse,
    RolePermissionsResponse,
    SessionResponse,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/access", tags=["access"])


@router.get("/me", response_model=SessionResponse)
async def who_am_i(rbac: PolicyEvaluator = Depends(get_evaluator)):
    """
    Effective access for the calling session.

    Anonymous callers get an empty permission set and the login route.
    """
    session = rbac.session
    s = get_settings()
    role = session.resolved_role
    return SessionResponse(
        user_id=session.user_id,
        role=role.value if role is not None else (str(session.role) if session.role else None),
        clinic_id=session.clinic_id,
        is_authenticated=session.is_authenticated,
        permissions=sorted(p.value for p in rbac.permissions),
        facades=all_facades(rbac),
        default_route=get_default_route(session, s.role_landing_routes, s.login_path),
        available_routes=[
            NavRouteResponse(path=r.path, label=r.label) for r in get_available_routes(rbac)
        ],
    )


@router.post("/check", response_model=AccessDecisionResponse)
async def check_access(
    payload: AccessCheckRequest,
    rbac: PolicyEvaluator = Depends(get_evaluator),
):
    """
    Evaluate an ad hoc predicate against the calling session.
    """
    try:
        predicate = AccessPredicate(
            permission=payload.permission,
            permissions=payload.permissions,
            require_all=payload.require_all,
            resource=payload.resource,
            action=payload.action,
        )
    except GuardConfigurationError as e:
        raise HTTPException(status_code=422, detail=str(e))

    decision = predicate.decide(rbac)
    return AccessDecisionResponse(
        allowed=decision.allowed,
        reason=decision.reason,
        check=payload.model_dump(exclude_none=True),
    )


@router.get("/roles/{role}", response_model=RolePermissionsResponse)
async def get_role_permissions(role: str):
    """
    Static grants of a role, accepted by value (``CLINIC_ADMIN``) or slug (``clinic-admin``).
    """
    resolved = coerce_role(role)
    if resolved is None:
        raise HTTPException(status_code=404, detail="Role not found")
    perms = get_permissions_for_role(resolved)
    grouped = permissions_by_category(perms)
    return RolePermissionsResponse(
        role=resolved.value,
        permissions=sorted(p.value for p in perms),
        categorized_permissions={
            category.value: [p.value for p in members] for category, members in grouped.items()
        },
    )
