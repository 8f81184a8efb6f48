"""Authorization domain: catalog, resolver, evaluator and the views built on it."""

from .permission import (
    RESOURCE_ACTIONS,
    ROLE_PERMISSIONS,
    Permission,
    PermissionCategory,
    Role,
    get_permissions_for_role,
    resolve_resource_action,
)
from .policy import AccessDecision, DenialReason, PolicyEvaluator
from .session import SessionState

__all__ = [
    "AccessDecision",
    "DenialReason",
    "Permission",
    "PermissionCategory",
    "PolicyEvaluator",
    "RESOURCE_ACTIONS",
    "ROLE_PERMISSIONS",
    "Role",
    "SessionState",
    "get_permissions_for_role",
    "resolve_resource_action",
]
