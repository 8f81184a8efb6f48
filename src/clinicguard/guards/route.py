"""Page-level access control.

:class:`RouteGuard` is a pure function of (session, evaluator, requested path)
producing a :class:`RouteDecision`. Turning that decision into an HTTP
response is the job of :mod:`clinicguard.deps.auth` and the exception handler
registered in :mod:`clinicguard.wiring`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any, FrozenSet, Iterable, Mapping, Optional, Tuple
from urllib.parse import urlencode

from ..domain.navigation import DEFAULT_LOGIN_PATH, get_default_route
from ..domain.permission import Role, coerce_role
from ..domain.policy import DenialReason, PolicyEvaluator
from ..domain.session import SessionState
from ..metrics import record_route_decision
from .predicate import AccessPredicate, GuardConfigurationError, normalize_permissions


class GuardState(StrEnum):
    LOADING = "LOADING"
    UNAUTHENTICATED = "UNAUTHENTICATED"
    ROLE_DENIED = "ROLE_DENIED"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    AUTHORIZED = "AUTHORIZED"


class GuardOutcome(StrEnum):
    RENDER_LOADING = "RENDER_LOADING"
    REDIRECT = "REDIRECT"
    RENDER_UNAUTHORIZED = "RENDER_UNAUTHORIZED"
    RENDER_CHILDREN = "RENDER_CHILDREN"


@dataclass(frozen=True, slots=True)
class RouteGuardConfig:
    permission: Any = None
    permissions: Optional[Tuple[Any, ...]] = None
    require_all: bool = False
    resource: Optional[str] = None
    action: Optional[str] = None
    allowed_roles: Optional[FrozenSet[Role]] = None
    redirect_to: Optional[str] = None
    show_unauthorized: bool = True

    def __post_init__(self) -> None:
        # builds and validates the predicate eagerly
        object.__setattr__(self, "permissions", self.predicate.permissions)
        if self.allowed_roles is not None:
            roles = set()
            for r in self.allowed_roles:
                role = coerce_role(r)
                if role is None:
                    raise GuardConfigurationError(f"unknown role in allowed_roles: {r!r}")
                roles.add(role)
            if not roles:
                raise GuardConfigurationError("allowed_roles must not be empty")
            object.__setattr__(self, "allowed_roles", frozenset(roles))

    @property
    def predicate(self) -> AccessPredicate:
        return AccessPredicate(
            permission=self.permission,
            permissions=self.permissions,
            require_all=self.require_all,
            resource=self.resource,
            action=self.action,
        )


@dataclass(frozen=True, slots=True)
class RouteDecision:
    state: GuardState
    outcome: GuardOutcome
    location: Optional[str] = None
    reason: Optional[str] = None

    @property
    def authorized(self) -> bool:
        return self.state is GuardState.AUTHORIZED


class RouteGuardInterrupt(Exception):
    """Raised by route dependencies when a page must not render.

    Carries the decision and the values needed to render it; the app's
    exception handler produces the response.
    """

    def __init__(self, decision: RouteDecision, dashboard_url: str):
        super().__init__(decision.state.value)
        self.decision = decision
        self.dashboard_url = dashboard_url


class RouteGuard:
    """Evaluate one page's access rules against a session.

    Checks run in a fixed order: loading, authentication, role allow-list,
    predicate. A configured role allow-list and predicate must both pass.
    """

    def __init__(
        self,
        config: RouteGuardConfig,
        login_path: str = DEFAULT_LOGIN_PATH,
        login_next_param: str = "next",
        landing_routes: Optional[Mapping[str, str]] = None,
    ):
        self.config = config
        self.login_path = login_path
        self.login_next_param = login_next_param
        self.landing_routes = landing_routes

    def login_location(self, requested_path: Optional[str]) -> str:
        if not requested_path or requested_path == self.login_path:
            return self.login_path
        return f"{self.login_path}?{urlencode({self.login_next_param: requested_path})}"

    def default_route(self, session: SessionState) -> str:
        return get_default_route(session, self.landing_routes, self.login_path)

    def _deny(
        self, state: GuardState, reason: str, session: SessionState, requested_path: Optional[str]
    ) -> RouteDecision:
        if self.config.redirect_to:
            return RouteDecision(state, GuardOutcome.REDIRECT, self.config.redirect_to, reason)
        if self.config.show_unauthorized:
            return RouteDecision(state, GuardOutcome.RENDER_UNAUTHORIZED, None, reason)
        landing = self.default_route(session)
        if requested_path and landing == requested_path:
            # redirecting to the page being denied would loop
            return RouteDecision(state, GuardOutcome.RENDER_UNAUTHORIZED, None, reason)
        return RouteDecision(state, GuardOutcome.REDIRECT, landing, reason)

    def _decide(
        self, session: SessionState, rbac: PolicyEvaluator, requested_path: Optional[str]
    ) -> RouteDecision:
        if session.is_loading:
            return RouteDecision(GuardState.LOADING, GuardOutcome.RENDER_LOADING)

        if not session.is_authenticated:
            return RouteDecision(
                GuardState.UNAUTHENTICATED,
                GuardOutcome.REDIRECT,
                self.login_location(requested_path),
                DenialReason.NOT_AUTHENTICATED,
            )

        allowed_roles = self.config.allowed_roles
        if allowed_roles is not None and session.resolved_role not in allowed_roles:
            return self._deny(
                GuardState.ROLE_DENIED, DenialReason.ROLE_NOT_ALLOWED, session, requested_path
            )

        decision = self.config.predicate.decide(rbac)
        if not decision.allowed:
            return self._deny(
                GuardState.PERMISSION_DENIED,
                decision.reason or DenialReason.MISSING_PERMISSION,
                session,
                requested_path,
            )

        return RouteDecision(GuardState.AUTHORIZED, GuardOutcome.RENDER_CHILDREN)

    def evaluate(
        self,
        session: SessionState,
        rbac: PolicyEvaluator,
        requested_path: Optional[str] = None,
    ) -> RouteDecision:
        decision = self._decide(session, rbac, requested_path)
        record_route_decision(decision.state.value)
        return decision


def route_config(
    permission: Any = None,
    permissions: Optional[Iterable[Any]] = None,
    require_all: bool = False,
    resource: Optional[str] = None,
    action: Optional[str] = None,
    allowed_roles: Optional[Iterable[Any]] = None,
    redirect_to: Optional[str] = None,
    show_unauthorized: bool = True,
) -> RouteGuardConfig:
    """Keyword-friendly constructor accepting any iterables."""
    return RouteGuardConfig(
        permission=permission,
        permissions=normalize_permissions(permissions),
        require_all=require_all,
        resource=resource,
        action=action,
        allowed_roles=frozenset(allowed_roles) if allowed_roles is not None else None,
        redirect_to=redirect_to,
        show_unauthorized=show_unauthorized,
    )


__all__ = [
    "GuardOutcome",
    "GuardState",
    "RouteDecision",
    "RouteGuard",
    "RouteGuardConfig",
    "RouteGuardInterrupt",
    "route_config",
]
