"""Permission catalog, roles and the static grant tables.

Everything in this module is a build-time constant: the role map and the
resource/action table are read-only mappings created once at import.
"""

from __future__ import annotations

from enum import StrEnum
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional, Tuple


class PermissionCategory(StrEnum):
    APPOINTMENTS = "APPOINTMENTS"
    PATIENTS = "PATIENTS"
    DOCTORS = "DOCTORS"
    CLINICS = "CLINICS"
    USERS = "USERS"
    ANALYTICS = "ANALYTICS"
    PHARMACY = "PHARMACY"
    QUEUE = "QUEUE"
    MEDICAL_RECORDS = "MEDICAL_RECORDS"
    NOTIFICATIONS = "NOTIFICATIONS"
    SETTINGS = "SETTINGS"
    REPORTS = "REPORTS"
    BILLING = "BILLING"


class Permission(StrEnum):
    """Atomic capabilities granted to roles."""

    # Appointments
    VIEW_APPOINTMENTS = "VIEW_APPOINTMENTS"
    CREATE_APPOINTMENTS = "CREATE_APPOINTMENTS"
    UPDATE_APPOINTMENTS = "UPDATE_APPOINTMENTS"
    DELETE_APPOINTMENTS = "DELETE_APPOINTMENTS"
    MANAGE_APPOINTMENT_QUEUE = "MANAGE_APPOINTMENT_QUEUE"
    VIEW_ALL_APPOINTMENTS = "VIEW_ALL_APPOINTMENTS"

    # Patients
    VIEW_PATIENTS = "VIEW_PATIENTS"
    CREATE_PATIENTS = "CREATE_PATIENTS"
    UPDATE_PATIENTS = "UPDATE_PATIENTS"
    DELETE_PATIENTS = "DELETE_PATIENTS"
    VIEW_PATIENT_MEDICAL_RECORDS = "VIEW_PATIENT_MEDICAL_RECORDS"
    CREATE_PATIENT_MEDICAL_RECORDS = "CREATE_PATIENT_MEDICAL_RECORDS"
    UPDATE_PATIENT_MEDICAL_RECORDS = "UPDATE_PATIENT_MEDICAL_RECORDS"
    DELETE_PATIENT_MEDICAL_RECORDS = "DELETE_PATIENT_MEDICAL_RECORDS"

    # Doctors
    VIEW_DOCTORS = "VIEW_DOCTORS"
    CREATE_DOCTORS = "CREATE_DOCTORS"
    UPDATE_DOCTORS = "UPDATE_DOCTORS"
    DELETE_DOCTORS = "DELETE_DOCTORS"
    MANAGE_DOCTOR_SCHEDULE = "MANAGE_DOCTOR_SCHEDULE"

    # Clinics
    VIEW_CLINICS = "VIEW_CLINICS"
    CREATE_CLINICS = "CREATE_CLINICS"
    UPDATE_CLINICS = "UPDATE_CLINICS"
    DELETE_CLINICS = "DELETE_CLINICS"
    MANAGE_CLINIC_SETTINGS = "MANAGE_CLINIC_SETTINGS"
    MANAGE_CLINIC_STAFF = "MANAGE_CLINIC_STAFF"

    # User management
    VIEW_USERS = "VIEW_USERS"
    CREATE_USERS = "CREATE_USERS"
    UPDATE_USERS = "UPDATE_USERS"
    DELETE_USERS = "DELETE_USERS"
    MANAGE_USER_ROLES = "MANAGE_USER_ROLES"
    VIEW_USER_SESSIONS = "VIEW_USER_SESSIONS"

    # Analytics
    VIEW_ANALYTICS = "VIEW_ANALYTICS"
    VIEW_CLINIC_ANALYTICS = "VIEW_CLINIC_ANALYTICS"
    VIEW_DOCTOR_ANALYTICS = "VIEW_DOCTOR_ANALYTICS"
    VIEW_PATIENT_ANALYTICS = "VIEW_PATIENT_ANALYTICS"
    VIEW_REVENUE_ANALYTICS = "VIEW_REVENUE_ANALYTICS"
    EXPORT_ANALYTICS = "EXPORT_ANALYTICS"

    # Pharmacy
    VIEW_PHARMACY = "VIEW_PHARMACY"
    MANAGE_MEDICINES = "MANAGE_MEDICINES"
    MANAGE_PRESCRIPTIONS = "MANAGE_PRESCRIPTIONS"
    MANAGE_INVENTORY = "MANAGE_INVENTORY"
    DISPENSE_MEDICINES = "DISPENSE_MEDICINES"

    # Queue
    VIEW_QUEUE = "VIEW_QUEUE"
    MANAGE_QUEUE = "MANAGE_QUEUE"
    CALL_NEXT_PATIENT = "CALL_NEXT_PATIENT"
    UPDATE_QUEUE_STATUS = "UPDATE_QUEUE_STATUS"

    # Medical records
    VIEW_MEDICAL_RECORDS = "VIEW_MEDICAL_RECORDS"
    CREATE_MEDICAL_RECORDS = "CREATE_MEDICAL_RECORDS"
    UPDATE_MEDICAL_RECORDS = "UPDATE_MEDICAL_RECORDS"
    DELETE_MEDICAL_RECORDS = "DELETE_MEDICAL_RECORDS"
    VIEW_ALL_MEDICAL_RECORDS = "VIEW_ALL_MEDICAL_RECORDS"

    # Notifications
    VIEW_NOTIFICATIONS = "VIEW_NOTIFICATIONS"
    SEND_NOTIFICATIONS = "SEND_NOTIFICATIONS"
    MANAGE_NOTIFICATION_TEMPLATES = "MANAGE_NOTIFICATION_TEMPLATES"
    SEND_BULK_NOTIFICATIONS = "SEND_BULK_NOTIFICATIONS"

    # Settings
    VIEW_SETTINGS = "VIEW_SETTINGS"
    MANAGE_SYSTEM_SETTINGS = "MANAGE_SYSTEM_SETTINGS"
    MANAGE_CLINIC_SETTINGS_ADVANCED = "MANAGE_CLINIC_SETTINGS_ADVANCED"
    MANAGE_USER_SETTINGS = "MANAGE_USER_SETTINGS"

    # Reports
    VIEW_REPORTS = "VIEW_REPORTS"
    GENERATE_REPORTS = "GENERATE_REPORTS"
    EXPORT_REPORTS = "EXPORT_REPORTS"
    SCHEDULE_REPORTS = "SCHEDULE_REPORTS"

    # Billing
    VIEW_BILLING = "VIEW_BILLING"
    MANAGE_BILLING = "MANAGE_BILLING"
    PROCESS_PAYMENTS = "PROCESS_PAYMENTS"
    VIEW_FINANCIAL_REPORTS = "VIEW_FINANCIAL_REPORTS"


class Role(StrEnum):
    SUPER_ADMIN = "SUPER_ADMIN"
    CLINIC_ADMIN = "CLINIC_ADMIN"
    DOCTOR = "DOCTOR"
    RECEPTIONIST = "RECEPTIONIST"
    PHARMACIST = "PHARMACIST"
    PATIENT = "PATIENT"

    @property
    def slug(self) -> str:
        """URL form of the role, e.g. ``clinic-admin``."""
        return self.value.lower().replace("_", "-")


def _grant(*permissions: Permission) -> FrozenSet[Permission]:
    return frozenset(permissions)


P = Permission
C = PermissionCategory

_CATEGORY_MEMBERS: Dict[PermissionCategory, Tuple[Permission, ...]] = {
    C.APPOINTMENTS: (
        P.VIEW_APPOINTMENTS,
        P.CREATE_APPOINTMENTS,
        P.UPDATE_APPOINTMENTS,
        P.DELETE_APPOINTMENTS,
        P.MANAGE_APPOINTMENT_QUEUE,
        P.VIEW_ALL_APPOINTMENTS,
    ),
    C.PATIENTS: (
        P.VIEW_PATIENTS,
        P.CREATE_PATIENTS,
        P.UPDATE_PATIENTS,
        P.DELETE_PATIENTS,
        P.VIEW_PATIENT_MEDICAL_RECORDS,
        P.CREATE_PATIENT_MEDICAL_RECORDS,
        P.UPDATE_PATIENT_MEDICAL_RECORDS,
        P.DELETE_PATIENT_MEDICAL_RECORDS,
    ),
    C.DOCTORS: (
        P.VIEW_DOCTORS,
        P.CREATE_DOCTORS,
        P.UPDATE_DOCTORS,
        P.DELETE_DOCTORS,
        P.MANAGE_DOCTOR_SCHEDULE,
    ),
    C.CLINICS: (
        P.VIEW_CLINICS,
        P.CREATE_CLINICS,
        P.UPDATE_CLINICS,
        P.DELETE_CLINICS,
        P.MANAGE_CLINIC_SETTINGS,
        P.MANAGE_CLINIC_STAFF,
    ),
    C.USERS: (
        P.VIEW_USERS,
        P.CREATE_USERS,
        P.UPDATE_USERS,
        P.DELETE_USERS,
        P.MANAGE_USER_ROLES,
        P.VIEW_USER_SESSIONS,
    ),
    C.ANALYTICS: (
        P.VIEW_ANALYTICS,
        P.VIEW_CLINIC_ANALYTICS,
        P.VIEW_DOCTOR_ANALYTICS,
        P.VIEW_PATIENT_ANALYTICS,
        P.VIEW_REVENUE_ANALYTICS,
        P.EXPORT_ANALYTICS,
    ),
    C.PHARMACY: (
        P.VIEW_PHARMACY,
        P.MANAGE_MEDICINES,
        P.MANAGE_PRESCRIPTIONS,
        P.MANAGE_INVENTORY,
        P.DISPENSE_MEDICINES,
    ),
    C.QUEUE: (
        P.VIEW_QUEUE,
        P.MANAGE_QUEUE,
        P.CALL_NEXT_PATIENT,
        P.UPDATE_QUEUE_STATUS,
    ),
    C.MEDICAL_RECORDS: (
        P.VIEW_MEDICAL_RECORDS,
        P.CREATE_MEDICAL_RECORDS,
        P.UPDATE_MEDICAL_RECORDS,
        P.DELETE_MEDICAL_RECORDS,
        P.VIEW_ALL_MEDICAL_RECORDS,
    ),
    C.NOTIFICATIONS: (
        P.VIEW_NOTIFICATIONS,
        P.SEND_NOTIFICATIONS,
        P.MANAGE_NOTIFICATION_TEMPLATES,
        P.SEND_BULK_NOTIFICATIONS,
    ),
    C.SETTINGS: (
        P.VIEW_SETTINGS,
        P.MANAGE_SYSTEM_SETTINGS,
        P.MANAGE_CLINIC_SETTINGS_ADVANCED,
        P.MANAGE_USER_SETTINGS,
    ),
    C.REPORTS: (
        P.VIEW_REPORTS,
        P.GENERATE_REPORTS,
        P.EXPORT_REPORTS,
        P.SCHEDULE_REPORTS,
    ),
    C.BILLING: (
        P.VIEW_BILLING,
        P.MANAGE_BILLING,
        P.PROCESS_PAYMENTS,
        P.VIEW_FINANCIAL_REPORTS,
    ),
}

PERMISSION_CATEGORIES: Mapping[Permission, PermissionCategory] = MappingProxyType(
    {perm: category for category, members in _CATEGORY_MEMBERS.items() for perm in members}
)

ROLE_PERMISSIONS: Mapping[Role, FrozenSet[Permission]] = MappingProxyType(
    {
        Role.SUPER_ADMIN: frozenset(Permission),
        Role.CLINIC_ADMIN: _grant(
            P.VIEW_APPOINTMENTS,
            P.CREATE_APPOINTMENTS,
            P.UPDATE_APPOINTMENTS,
            P.DELETE_APPOINTMENTS,
            P.MANAGE_APPOINTMENT_QUEUE,
            P.VIEW_ALL_APPOINTMENTS,
            P.VIEW_PATIENTS,
            P.CREATE_PATIENTS,
            P.UPDATE_PATIENTS,
            P.DELETE_PATIENTS,
            P.VIEW_PATIENT_MEDICAL_RECORDS,
            P.VIEW_DOCTORS,
            P.CREATE_DOCTORS,
            P.UPDATE_DOCTORS,
            P.DELETE_DOCTORS,
            P.MANAGE_DOCTOR_SCHEDULE,
            P.VIEW_CLINICS,
            P.UPDATE_CLINICS,
            P.MANAGE_CLINIC_SETTINGS,
            P.MANAGE_CLINIC_STAFF,
            P.VIEW_USERS,
            P.CREATE_USERS,
            P.UPDATE_USERS,
            P.DELETE_USERS,
            P.MANAGE_USER_ROLES,
            P.VIEW_USER_SESSIONS,
            P.VIEW_ANALYTICS,
            P.VIEW_CLINIC_ANALYTICS,
            P.VIEW_DOCTOR_ANALYTICS,
            P.VIEW_PATIENT_ANALYTICS,
            P.VIEW_REVENUE_ANALYTICS,
            P.EXPORT_ANALYTICS,
            P.VIEW_PHARMACY,
            P.MANAGE_MEDICINES,
            P.MANAGE_PRESCRIPTIONS,
            P.MANAGE_INVENTORY,
            P.VIEW_QUEUE,
            P.MANAGE_QUEUE,
            P.CALL_NEXT_PATIENT,
            P.UPDATE_QUEUE_STATUS,
            P.VIEW_MEDICAL_RECORDS,
            P.VIEW_ALL_MEDICAL_RECORDS,
            P.VIEW_NOTIFICATIONS,
            P.SEND_NOTIFICATIONS,
            P.MANAGE_NOTIFICATION_TEMPLATES,
            P.SEND_BULK_NOTIFICATIONS,
            P.VIEW_SETTINGS,
            P.MANAGE_CLINIC_SETTINGS_ADVANCED,
            P.VIEW_REPORTS,
            P.GENERATE_REPORTS,
            P.EXPORT_REPORTS,
            P.SCHEDULE_REPORTS,
            P.VIEW_BILLING,
            P.MANAGE_BILLING,
            P.PROCESS_PAYMENTS,
            P.VIEW_FINANCIAL_REPORTS,
        ),
        Role.DOCTOR: _grant(
            P.VIEW_APPOINTMENTS,
            P.CREATE_APPOINTMENTS,
            P.UPDATE_APPOINTMENTS,
            P.MANAGE_APPOINTMENT_QUEUE,
            P.VIEW_PATIENTS,
            P.CREATE_PATIENTS,
            P.UPDATE_PATIENTS,
            P.VIEW_PATIENT_MEDICAL_RECORDS,
            P.CREATE_PATIENT_MEDICAL_RECORDS,
            P.UPDATE_PATIENT_MEDICAL_RECORDS,
            # own schedule only
            P.MANAGE_DOCTOR_SCHEDULE,
            P.VIEW_PHARMACY,
            P.MANAGE_PRESCRIPTIONS,
            P.VIEW_QUEUE,
            P.CALL_NEXT_PATIENT,
            P.UPDATE_QUEUE_STATUS,
            P.VIEW_MEDICAL_RECORDS,
            P.CREATE_MEDICAL_RECORDS,
            P.UPDATE_MEDICAL_RECORDS,
            P.VIEW_NOTIFICATIONS,
            P.SEND_NOTIFICATIONS,
            P.MANAGE_USER_SETTINGS,
            P.VIEW_DOCTOR_ANALYTICS,
        ),
        Role.RECEPTIONIST: _grant(
            P.VIEW_APPOINTMENTS,
            P.CREATE_APPOINTMENTS,
            P.UPDATE_APPOINTMENTS,
            P.MANAGE_APPOINTMENT_QUEUE,
            P.VIEW_ALL_APPOINTMENTS,
            P.VIEW_PATIENTS,
            P.CREATE_PATIENTS,
            P.UPDATE_PATIENTS,
            P.VIEW_QUEUE,
            P.MANAGE_QUEUE,
            P.CALL_NEXT_PATIENT,
            P.UPDATE_QUEUE_STATUS,
            P.VIEW_NOTIFICATIONS,
            P.SEND_NOTIFICATIONS,
            P.MANAGE_USER_SETTINGS,
        ),
        Role.PHARMACIST: _grant(
            P.VIEW_PHARMACY,
            P.MANAGE_MEDICINES,
            P.MANAGE_PRESCRIPTIONS,
            P.MANAGE_INVENTORY,
            P.DISPENSE_MEDICINES,
            P.VIEW_PATIENTS,
            P.VIEW_NOTIFICATIONS,
            P.SEND_NOTIFICATIONS,
            P.MANAGE_USER_SETTINGS,
        ),
        Role.PATIENT: _grant(
            # own appointments and records only; ownership is checked in contextual.py
            P.VIEW_APPOINTMENTS,
            P.CREATE_APPOINTMENTS,
            P.VIEW_MEDICAL_RECORDS,
            P.VIEW_NOTIFICATIONS,
            P.MANAGE_USER_SETTINGS,
        ),
    }
)


ResourceActionKey = Tuple[str, str]

RESOURCE_ACTIONS: Mapping[ResourceActionKey, FrozenSet[Permission]] = MappingProxyType(
    {
        ("appointments", "create"): _grant(P.CREATE_APPOINTMENTS),
        ("appointments", "read"): _grant(P.VIEW_APPOINTMENTS),
        ("appointments", "update"): _grant(P.UPDATE_APPOINTMENTS),
        ("appointments", "delete"): _grant(P.DELETE_APPOINTMENTS),
        ("appointments", "manage"): _grant(P.MANAGE_APPOINTMENT_QUEUE),
        ("patients", "create"): _grant(P.CREATE_PATIENTS),
        ("patients", "read"): _grant(P.VIEW_PATIENTS),
        ("patients", "update"): _grant(P.UPDATE_PATIENTS),
        ("patients", "delete"): _grant(P.DELETE_PATIENTS),
        ("doctors", "create"): _grant(P.CREATE_DOCTORS),
        ("doctors", "read"): _grant(P.VIEW_DOCTORS),
        ("doctors", "update"): _grant(P.UPDATE_DOCTORS),
        ("doctors", "delete"): _grant(P.DELETE_DOCTORS),
        ("clinics", "create"): _grant(P.CREATE_CLINICS),
        ("clinics", "read"): _grant(P.VIEW_CLINICS),
        ("clinics", "update"): _grant(P.UPDATE_CLINICS),
        ("clinics", "delete"): _grant(P.DELETE_CLINICS),
        ("clinics", "manage"): _grant(P.MANAGE_CLINIC_SETTINGS),
        ("users", "create"): _grant(P.CREATE_USERS),
        ("users", "read"): _grant(P.VIEW_USERS),
        ("users", "update"): _grant(P.UPDATE_USERS),
        ("users", "delete"): _grant(P.DELETE_USERS),
        ("users", "manage"): _grant(P.MANAGE_USER_ROLES),
        ("analytics", "read"): _grant(P.VIEW_ANALYTICS),
        ("analytics", "export"): _grant(P.EXPORT_ANALYTICS),
        ("pharmacy", "read"): _grant(P.VIEW_PHARMACY),
        ("pharmacy", "manage"): _grant(P.MANAGE_MEDICINES),
        ("queue", "read"): _grant(P.VIEW_QUEUE),
        ("queue", "manage"): _grant(P.MANAGE_QUEUE),
        ("medical-records", "create"): _grant(P.CREATE_MEDICAL_RECORDS),
        ("medical-records", "read"): _grant(P.VIEW_MEDICAL_RECORDS),
        ("medical-records", "update"): _grant(P.UPDATE_MEDICAL_RECORDS),
        ("medical-records", "delete"): _grant(P.DELETE_MEDICAL_RECORDS),
        ("notifications", "read"): _grant(P.VIEW_NOTIFICATIONS),
        ("notifications", "send"): _grant(P.SEND_NOTIFICATIONS),
        ("settings", "read"): _grant(P.VIEW_SETTINGS),
        ("settings", "manage"): _grant(P.MANAGE_SYSTEM_SETTINGS),
        ("reports", "read"): _grant(P.VIEW_REPORTS),
        ("reports", "generate"): _grant(P.GENERATE_REPORTS),
        ("reports", "export"): _grant(P.EXPORT_REPORTS),
        ("billing", "read"): _grant(P.VIEW_BILLING),
        ("billing", "manage"): _grant(P.MANAGE_BILLING),
    }
)

del P, C


def coerce_role(role: Any) -> Optional[Role]:
    """Map a role value from a session onto :class:`Role`.

    Accepts the enum itself, its value (``"CLINIC_ADMIN"``) or the URL slug
    (``"clinic-admin"``). Anything else yields ``None``.
    """
    if isinstance(role, Role):
        return role
    if not isinstance(role, str) or not role:
        return None
    try:
        return Role(role)
    except ValueError:
        pass
    normalized = role.strip().upper().replace("-", "_")
    try:
        return Role(normalized)
    except ValueError:
        return None


def coerce_permission(permission: Any) -> Optional[Permission]:
    if isinstance(permission, Permission):
        return permission
    if not isinstance(permission, str):
        return None
    try:
        return Permission(permission)
    except ValueError:
        return None


def get_permissions_for_role(
    role: Any,
    role_permissions: Mapping[Role, FrozenSet[Permission]] = ROLE_PERMISSIONS,
) -> FrozenSet[Permission]:
    """Resolve the permission set granted to ``role``.

    Total: an unknown, empty or ``None`` role resolves to the empty set so
    callers rendering during session hydration never see an exception.
    """
    resolved = coerce_role(role)
    if resolved is None:
        return frozenset()
    return frozenset(role_permissions.get(resolved, frozenset()))


def resolve_resource_action(
    resource: Any,
    action: Any,
    resource_actions: Mapping[ResourceActionKey, FrozenSet[Permission]] = RESOURCE_ACTIONS,
) -> FrozenSet[Permission]:
    """Look up the permissions a (resource, action) pair requires; empty when unknown."""
    if not isinstance(resource, str) or not isinstance(action, str):
        return frozenset()
    return resource_actions.get((resource, action), frozenset())


def category_of(permission: Permission) -> PermissionCategory:
    return PERMISSION_CATEGORIES[permission]


def permissions_by_category(
    permissions: Iterable[Permission],
) -> Dict[PermissionCategory, list[Permission]]:
    grouped: Dict[PermissionCategory, list[Permission]] = {}
    for perm in sorted(permissions):
        grouped.setdefault(category_of(perm), []).append(perm)
    return grouped


__all__ = [
    "Permission",
    "PermissionCategory",
    "Role",
    "ROLE_PERMISSIONS",
    "RESOURCE_ACTIONS",
    "ResourceActionKey",
    "PERMISSION_CATEGORIES",
    "category_of",
    "coerce_permission",
    "coerce_role",
    "get_permissions_for_role",
    "permissions_by_category",
    "resolve_resource_action",
]
