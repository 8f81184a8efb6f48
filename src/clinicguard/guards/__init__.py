"""Enforcement points: blocking route guards and inline component guards."""

from .component import (
    ConditionalRender,
    ProtectedComponent,
    protected_button,
    protected_link,
    with_permission,
)
from .domain_components import (
    AdminProtectedComponent,
    AppointmentProtectedComponent,
    MedicalRecordsProtectedComponent,
    PatientProtectedComponent,
    PharmacyProtectedComponent,
    QueueProtectedComponent,
)
from .predicate import AccessPredicate, GuardConfigurationError
from .route import (
    GuardOutcome,
    GuardState,
    RouteDecision,
    RouteGuard,
    RouteGuardConfig,
    RouteGuardInterrupt,
    route_config,
)

__all__ = [
    "AccessPredicate",
    "AdminProtectedComponent",
    "AppointmentProtectedComponent",
    "ConditionalRender",
    "GuardConfigurationError",
    "GuardOutcome",
    "GuardState",
    "MedicalRecordsProtectedComponent",
    "PatientProtectedComponent",
    "PharmacyProtectedComponent",
    "ProtectedComponent",
    "QueueProtectedComponent",
    "RouteDecision",
    "RouteGuard",
    "RouteGuardConfig",
    "RouteGuardInterrupt",
    "protected_button",
    "protected_link",
    "route_config",
    "with_permission",
]
