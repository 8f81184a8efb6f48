"""The predicate shape shared by route and component guards."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Optional, Tuple

from ..domain.policy import AccessDecision, DenialReason, PolicyEvaluator


class GuardConfigurationError(ValueError):
    """A guard was declared with a predicate that can never be evaluated sensibly."""


def normalize_permissions(permissions: Any) -> Optional[Tuple[Any, ...]]:
    if permissions is None:
        return None
    if isinstance(permissions, str):
        return (permissions,)
    return tuple(permissions)


@dataclass(frozen=True, slots=True)
class AccessPredicate:
    """What a guard requires, checked in priority order.

    A single ``permission`` wins over a ``permissions`` list (ANY unless
    ``require_all``), which wins over a ``resource``/``action`` pair. A
    predicate with none of them set always allows.
    """

    permission: Any = None
    permissions: Optional[Tuple[Any, ...]] = None
    require_all: bool = False
    resource: Optional[str] = None
    action: Optional[str] = None

    def __post_init__(self) -> None:
        perms = normalize_permissions(self.permissions)
        object.__setattr__(self, "permissions", perms)
        if perms is not None and not perms:
            raise GuardConfigurationError("permissions must not be an empty list")
        if (self.resource is None) != (self.action is None):
            raise GuardConfigurationError("resource and action must be given together")
        if self.resource is not None and (not self.resource or not self.action):
            raise GuardConfigurationError("resource and action must be non-empty")

    @classmethod
    def any_of(cls, permissions: Iterable[Any]) -> "AccessPredicate":
        return cls(permissions=tuple(permissions))

    @classmethod
    def all_of(cls, permissions: Iterable[Any]) -> "AccessPredicate":
        return cls(permissions=tuple(permissions), require_all=True)

    @property
    def is_unconditional(self) -> bool:
        return self.permission is None and self.permissions is None and self.resource is None

    @property
    def kind(self) -> str:
        """Metric label for the branch :meth:`evaluate` takes."""
        if self.permission is not None:
            return "permission"
        if self.permissions:
            return "all" if self.require_all else "any"
        if self.resource is not None:
            return "resource"
        return "none"

    def evaluate(self, rbac: PolicyEvaluator) -> bool:
        if self.permission is not None:
            return rbac.has_permission(self.permission)
        if self.permissions:
            if self.require_all:
                return rbac.has_all_permissions(self.permissions)
            return rbac.has_any_permission(self.permissions)
        if self.resource is not None and self.action is not None:
            return rbac.can_access(self.resource, self.action)
        return True

    def decide(self, rbac: PolicyEvaluator) -> AccessDecision:
        """Same as :meth:`evaluate` but with a denial reason."""
        if self.permission is not None:
            return rbac.check_permission(self.permission)
        if self.permissions:
            return rbac.check_permissions(self.permissions, require_all=self.require_all)
        if self.resource is not None and self.action is not None:
            return rbac.check_access(self.resource, self.action)
        if not rbac.session.is_authenticated:
            return AccessDecision.deny(DenialReason.NOT_AUTHENTICATED)
        return AccessDecision.allow()


__all__ = ["AccessPredicate", "GuardConfigurationError"]
