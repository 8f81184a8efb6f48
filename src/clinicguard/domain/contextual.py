"""Ownership and clinic scoped checks layered on top of role permissions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .permission import Role
from .policy import AccessDecision, DenialReason
from .session import SessionState


@dataclass(frozen=True, slots=True)
class ResourceContext:
    """Who owns a resource and where it lives."""

    resource_owner_id: Optional[str] = None
    patient_id: Optional[str] = None
    clinic_id: Optional[str] = None


def can_access_resource(
    session: SessionState,
    resource_type: str,
    context: ResourceContext,
    resource_id: Optional[str] = None,
) -> AccessDecision:
    """Decide whether ``session`` may touch one concrete resource.

    Rules, first match wins:

    * super admins see everything;
    * patients only see resources they own or that are filed under them;
    * doctors may open patient resources;
    * everyone else is confined to their own clinic when both sides carry one.

    ``resource_id`` is accepted for call-site symmetry; assignment lookups
    belong to the domain services.
    """
    if not session.is_authenticated or session.user_id is None:
        return AccessDecision.deny(DenialReason.NOT_AUTHENTICATED)

    role = session.resolved_role
    if role is Role.SUPER_ADMIN:
        return AccessDecision.allow()

    if role is Role.PATIENT:
        if session.user_id in (context.resource_owner_id, context.patient_id):
            return AccessDecision.allow()
        return AccessDecision.deny(DenialReason.NOT_OWNER)

    if role is Role.DOCTOR and resource_type == "patient":
        return AccessDecision.allow()

    if context.clinic_id and session.clinic_id and context.clinic_id != session.clinic_id:
        return AccessDecision.deny(DenialReason.DIFFERENT_CLINIC)

    return AccessDecision.allow()


__all__ = ["ResourceContext", "can_access_resource"]
