"""Component guards keyed by a domain action instead of a permission name.

Each action reads one field of the matching permission facade, so these
guards decide exactly like a :class:`ProtectedComponent` built on the
permission behind that field. Like the generic guard they are silent by
default.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any, ClassVar, Dict, Optional, Type

from ..domain.facades import (
    AdminPermissions,
    AppointmentPermissions,
    MedicalRecordPermissions,
    PatientPermissions,
    PharmacyPermissions,
    QueuePermissions,
)
from ..domain.policy import PolicyEvaluator
from ..metrics import record_permission_check
from .component import Renderable, choose
from .predicate import GuardConfigurationError


class AppointmentAction(StrEnum):
    VIEW = "view"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    MANAGE = "manage"


class PatientAction(StrEnum):
    VIEW = "view"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    MEDICAL_RECORDS = "medical-records"


class QueueAction(StrEnum):
    VIEW = "view"
    MANAGE = "manage"
    CALL_NEXT = "call-next"
    UPDATE_STATUS = "update-status"


class PharmacyAction(StrEnum):
    VIEW = "view"
    MANAGE_MEDICINES = "manage-medicines"
    DISPENSE = "dispense"
    MANAGE_PRESCRIPTIONS = "manage-prescriptions"
    MANAGE_INVENTORY = "manage-inventory"


class MedicalRecordsAction(StrEnum):
    VIEW = "view"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class AdminAction(StrEnum):
    VIEW = "view"
    MANAGE_USERS = "manage-users"
    MANAGE_CLINICS = "manage-clinics"
    VIEW_ANALYTICS = "view-analytics"
    SYSTEM_SETTINGS = "system-settings"


class DomainProtectedComponent:
    """Base for the per-domain guards; subclasses only declare their tables."""

    facade: ClassVar[Type[Any]]
    actions: ClassVar[Type[StrEnum]]
    fields: ClassVar[Dict[str, str]]

    def __init__(
        self,
        children: Renderable,
        action: Any,
        fallback: Optional[Renderable] = None,
        show_fallback: bool = False,
    ):
        try:
            self.action = self.actions(action)
        except ValueError:
            raise GuardConfigurationError(
                f"unknown {type(self).__name__} action: {action!r}"
            ) from None
        self.children = children
        self.fallback = fallback
        self.show_fallback = show_fallback

    def allowed(self, rbac: PolicyEvaluator) -> bool:
        view = self.facade.from_evaluator(rbac)
        result = bool(getattr(view, self.fields[self.action.value]))
        record_permission_check("domain", result)
        return result

    def render(self, rbac: PolicyEvaluator) -> str:
        return choose(self.allowed(rbac), self.children, self.fallback, self.show_fallback)


class AppointmentProtectedComponent(DomainProtectedComponent):
    facade = AppointmentPermissions
    actions = AppointmentAction
    fields = {
        "view": "can_view_appointments",
        "create": "can_create_appointments",
        "update": "can_update_appointments",
        "delete": "can_delete_appointments",
        "manage": "can_manage_queue",
    }


class PatientProtectedComponent(DomainProtectedComponent):
    facade = PatientPermissions
    actions = PatientAction
    fields = {
        "view": "can_view_patients",
        "create": "can_create_patients",
        "update": "can_update_patients",
        "delete": "can_delete_patients",
        "medical-records": "can_view_medical_records",
    }


class QueueProtectedComponent(DomainProtectedComponent):
    facade = QueuePermissions
    actions = QueueAction
    fields = {
        "view": "can_view_queue",
        "manage": "can_manage_queue",
        "call-next": "can_call_next_patient",
        "update-status": "can_update_queue_status",
    }


class PharmacyProtectedComponent(DomainProtectedComponent):
    facade = PharmacyPermissions
    actions = PharmacyAction
    fields = {
        "view": "can_view_pharmacy",
        "manage-medicines": "can_manage_medicines",
        "dispense": "can_dispense_medicines",
        "manage-prescriptions": "can_manage_prescriptions",
        "manage-inventory": "can_manage_inventory",
    }


class MedicalRecordsProtectedComponent(DomainProtectedComponent):
    facade = MedicalRecordPermissions
    actions = MedicalRecordsAction
    fields = {
        "view": "can_view_records",
        "create": "can_create_records",
        "update": "can_update_records",
        "delete": "can_delete_records",
    }


class AdminProtectedComponent(DomainProtectedComponent):
    facade = AdminPermissions
    actions = AdminAction
    fields = {
        "view": "can_view_users",
        "manage-users": "can_manage_users",
        "manage-clinics": "can_manage_clinics",
        "view-analytics": "can_view_analytics",
        "system-settings": "can_manage_system_settings",
    }


__all__ = [
    "AdminAction",
    "AdminProtectedComponent",
    "AppointmentAction",
    "AppointmentProtectedComponent",
    "DomainProtectedComponent",
    "MedicalRecordsAction",
    "MedicalRecordsProtectedComponent",
    "PatientAction",
    "PatientProtectedComponent",
    "PharmacyAction",
    "PharmacyProtectedComponent",
    "QueueAction",
    "QueueProtectedComponent",
]
