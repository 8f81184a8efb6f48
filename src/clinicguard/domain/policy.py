"""Policy evaluation against a session's effective permission set."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, FrozenSet, Iterable, List, Mapping, Optional, Tuple

from ..logging_config import get_logger
from .permission import (
    RESOURCE_ACTIONS,
    ROLE_PERMISSIONS,
    Permission,
    ResourceActionKey,
    Role,
    coerce_permission,
    get_permissions_for_role,
    resolve_resource_action,
)
from .session import SessionState

logger = get_logger(__name__)


class DenialReason:
    NOT_AUTHENTICATED = "not_authenticated"
    MISSING_PERMISSION = "missing_permission"
    UNKNOWN_PERMISSION = "unknown_permission"
    UNKNOWN_RESOURCE_ACTION = "unknown_resource_action"
    EMPTY_REQUIREMENT = "empty_requirement"
    ROLE_NOT_ALLOWED = "role_not_allowed"
    NOT_OWNER = "not_owner"
    DIFFERENT_CLINIC = "different_clinic"


@dataclass(frozen=True, slots=True)
class AccessDecision:
    """Outcome of a single evaluation."""

    allowed: bool
    reason: Optional[str] = None

    def __bool__(self) -> bool:
        return self.allowed

    @classmethod
    def allow(cls) -> "AccessDecision":
        return cls(True)

    @classmethod
    def deny(cls, reason: str) -> "AccessDecision":
        return cls(False, reason)


class PolicyEvaluator:
    """Answer permission queries for one session.

    The effective permission set is derived lazily from the session's role and
    recomputed as soon as the session's identity, auth flag or role changes, so
    a result computed for one role can never answer a query for another.
    Instances must be scoped to a single session (one per request in the web
    app); the role and resource tables are shared read-only.
    """

    def __init__(
        self,
        session: SessionState,
        role_permissions: Mapping[Role, FrozenSet[Permission]] = ROLE_PERMISSIONS,
        resource_actions: Mapping[ResourceActionKey, FrozenSet[Permission]] = RESOURCE_ACTIONS,
        warn_on_unknown: bool = True,
    ):
        self.session = session
        self.role_permissions = role_permissions
        self.resource_actions = resource_actions
        self.warn_on_unknown = warn_on_unknown
        self._cached: Optional[Tuple[tuple, FrozenSet[Permission]]] = None

    @property
    def permissions(self) -> FrozenSet[Permission]:
        key = self.session.identity_key()
        if self._cached is not None and self._cached[0] == key:
            return self._cached[1]
        if not self.session.is_authenticated:
            effective: FrozenSet[Permission] = frozenset()
        else:
            effective = get_permissions_for_role(self.session.role, self.role_permissions)
            if not effective and self.session.resolved_role is None and self.session.role:
                self._warn("unknown_role", role=str(self.session.role))
        self._cached = (key, effective)
        return effective

    def invalidate(self) -> None:
        self._cached = None

    def _warn(self, event: str, **kw: Any) -> None:
        if self.warn_on_unknown:
            logger.warning(event, extra=kw)

    def _coerce_all(self, permissions: Iterable[Any]) -> Tuple[List[Permission], List[Any]]:
        known: List[Permission] = []
        unknown: List[Any] = []
        for p in permissions:
            perm = coerce_permission(p)
            if perm is None:
                unknown.append(p)
            else:
                known.append(perm)
        if unknown:
            self._warn("unknown_permission", permissions=[str(u) for u in unknown])
        return known, unknown

    def _all_granted(self, permissions: Iterable[Any]) -> bool:
        known, unknown = self._coerce_all(permissions)
        if unknown:
            return False
        granted = self.permissions
        return all(p in granted for p in known)

    def has_permission(self, permission: Any) -> bool:
        perm = coerce_permission(permission)
        if perm is None:
            self._warn("unknown_permission", permissions=[str(permission)])
            return False
        return perm in self.permissions

    def has_any_permission(self, permissions: Iterable[Any]) -> bool:
        """True when at least one of ``permissions`` is granted; an empty list denies."""
        known, _ = self._coerce_all(permissions)
        granted = self.permissions
        return any(p in granted for p in known)

    def has_all_permissions(self, permissions: Iterable[Any]) -> bool:
        """True when every one of ``permissions`` is granted.

        An empty requirement is vacuously satisfied. Guards reject empty lists
        when they are configured, so this only matters for direct callers.
        """
        return self._all_granted(permissions)

    def can_access(self, resource: Any, action: Any) -> bool:
        required = resolve_resource_action(resource, action, self.resource_actions)
        if not required:
            self._warn("unknown_resource_action", resource=str(resource), action=str(action))
            return False
        return self._all_granted(required)

    # -- decisions with reasons, for audit callers ------------------------------

    def _unauthenticated(self) -> Optional[AccessDecision]:
        if not self.session.is_authenticated:
            return AccessDecision.deny(DenialReason.NOT_AUTHENTICATED)
        return None

    def check_permission(self, permission: Any) -> AccessDecision:
        denied = self._unauthenticated()
        if denied is not None:
            return denied
        if coerce_permission(permission) is None:
            return AccessDecision.deny(DenialReason.UNKNOWN_PERMISSION)
        if self.has_permission(permission):
            return AccessDecision.allow()
        return AccessDecision.deny(DenialReason.MISSING_PERMISSION)

    def check_permissions(self, permissions: Iterable[Any], require_all: bool = False) -> AccessDecision:
        perms = list(permissions)
        denied = self._unauthenticated()
        if denied is not None:
            return denied
        if not perms:
            return AccessDecision.deny(DenialReason.EMPTY_REQUIREMENT)
        ok = self.has_all_permissions(perms) if require_all else self.has_any_permission(perms)
        if ok:
            return AccessDecision.allow()
        return AccessDecision.deny(DenialReason.MISSING_PERMISSION)

    def check_access(self, resource: Any, action: Any) -> AccessDecision:
        denied = self._unauthenticated()
        if denied is not None:
            return denied
        if not resolve_resource_action(resource, action, self.resource_actions):
            self._warn("unknown_resource_action", resource=str(resource), action=str(action))
            return AccessDecision.deny(DenialReason.UNKNOWN_RESOURCE_ACTION)
        if self.can_access(resource, action):
            return AccessDecision.allow()
        return AccessDecision.deny(DenialReason.MISSING_PERMISSION)


__all__ = ["AccessDecision", "DenialReason", "PolicyEvaluator"]
