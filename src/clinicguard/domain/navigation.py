"""Role-aware navigation helpers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Mapping, Optional, Tuple

from .permission import Role
from .policy import PolicyEvaluator
from .session import SessionState

DEFAULT_LOGIN_PATH = "/auth/login"


@dataclass(frozen=True, slots=True)
class NavRoute:
    path: str
    label: str


# (resource, action) gate, path, label; order is the sidebar order
NAVIGATION_ENTRIES: Tuple[Tuple[str, str, str, str], ...] = (
    ("appointments", "read", "/appointments", "Appointments"),
    ("patients", "read", "/patients", "Patients"),
    ("doctors", "read", "/doctors", "Doctors"),
    ("queue", "read", "/queue", "Queue"),
    ("pharmacy", "read", "/pharmacy", "Pharmacy"),
    ("analytics", "read", "/analytics", "Analytics"),
    ("medical-records", "read", "/ehr", "Medical Records"),
)


def dashboard_path(role: Role) -> str:
    return f"/{role.slug}/dashboard"


def get_default_route(
    session: SessionState,
    overrides: Optional[Mapping[str, str]] = None,
    login_path: str = DEFAULT_LOGIN_PATH,
) -> str:
    """Where a session lands after login or after a route denial.

    Unauthenticated sessions go to the login page. A role that cannot be
    resolved lands on the patient dashboard, the least privileged one.
    """
    if not session.is_authenticated:
        return login_path
    role = session.resolved_role or Role.PATIENT
    if overrides:
        override = overrides.get(role.value) or overrides.get(role.slug)
        if override:
            return override
    return dashboard_path(role)


def get_available_routes(rbac: PolicyEvaluator) -> List[NavRoute]:
    return [
        NavRoute(path=path, label=label)
        for resource, action, path, label in NAVIGATION_ENTRIES
        if rbac.can_access(resource, action)
    ]


__all__ = [
    "DEFAULT_LOGIN_PATH",
    "NAVIGATION_ENTRIES",
    "NavRoute",
    "dashboard_path",
    "get_available_routes",
    "get_default_route",
]
