"""Named, per-domain views over a :class:`PolicyEvaluator`.

Call sites ask "can this session call the next patient?" instead of spelling
out permission names; changing which permission backs an action is a one-line
edit here. Facades hold no state of their own: each is a frozen snapshot built
from the evaluator at the moment it is requested.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict

from .permission import Permission
from .policy import PolicyEvaluator


@dataclass(frozen=True, slots=True)
class AppointmentPermissions:
    can_view_appointments: bool
    can_create_appointments: bool
    can_update_appointments: bool
    can_delete_appointments: bool
    can_manage_queue: bool
    can_view_all_appointments: bool

    @classmethod
    def from_evaluator(cls, rbac: PolicyEvaluator) -> "AppointmentPermissions":
        return cls(
            can_view_appointments=rbac.has_permission(Permission.VIEW_APPOINTMENTS),
            can_create_appointments=rbac.has_permission(Permission.CREATE_APPOINTMENTS),
            can_update_appointments=rbac.has_permission(Permission.UPDATE_APPOINTMENTS),
            can_delete_appointments=rbac.has_permission(Permission.DELETE_APPOINTMENTS),
            can_manage_queue=rbac.has_permission(Permission.MANAGE_APPOINTMENT_QUEUE),
            can_view_all_appointments=rbac.has_permission(Permission.VIEW_ALL_APPOINTMENTS),
        )


@dataclass(frozen=True, slots=True)
class PatientPermissions:
    can_view_patients: bool
    can_create_patients: bool
    can_update_patients: bool
    can_delete_patients: bool
    can_view_medical_records: bool
    can_create_medical_records: bool
    can_update_medical_records: bool
    can_delete_medical_records: bool

    @classmethod
    def from_evaluator(cls, rbac: PolicyEvaluator) -> "PatientPermissions":
        return cls(
            can_view_patients=rbac.has_permission(Permission.VIEW_PATIENTS),
            can_create_patients=rbac.has_permission(Permission.CREATE_PATIENTS),
            can_update_patients=rbac.has_permission(Permission.UPDATE_PATIENTS),
            can_delete_patients=rbac.has_permission(Permission.DELETE_PATIENTS),
            can_view_medical_records=rbac.has_permission(Permission.VIEW_MEDICAL_RECORDS),
            can_create_medical_records=rbac.has_permission(Permission.CREATE_MEDICAL_RECORDS),
            can_update_medical_records=rbac.has_permission(Permission.UPDATE_MEDICAL_RECORDS),
            can_delete_medical_records=rbac.has_permission(Permission.DELETE_MEDICAL_RECORDS),
        )


@dataclass(frozen=True, slots=True)
class DoctorPermissions:
    can_view_doctors: bool
    can_create_doctors: bool
    can_update_doctors: bool
    can_delete_doctors: bool
    can_manage_schedule: bool

    @classmethod
    def from_evaluator(cls, rbac: PolicyEvaluator) -> "DoctorPermissions":
        return cls(
            can_view_doctors=rbac.has_permission(Permission.VIEW_DOCTORS),
            can_create_doctors=rbac.has_permission(Permission.CREATE_DOCTORS),
            can_update_doctors=rbac.has_permission(Permission.UPDATE_DOCTORS),
            can_delete_doctors=rbac.has_permission(Permission.DELETE_DOCTORS),
            can_manage_schedule=rbac.has_permission(Permission.MANAGE_DOCTOR_SCHEDULE),
        )


@dataclass(frozen=True, slots=True)
class ClinicPermissions:
    can_view_clinics: bool
    can_create_clinics: bool
    can_update_clinics: bool
    can_delete_clinics: bool
    can_manage_settings: bool
    can_manage_staff: bool

    @classmethod
    def from_evaluator(cls, rbac: PolicyEvaluator) -> "ClinicPermissions":
        return cls(
            can_view_clinics=rbac.has_permission(Permission.VIEW_CLINICS),
            can_create_clinics=rbac.has_permission(Permission.CREATE_CLINICS),
            can_update_clinics=rbac.has_permission(Permission.UPDATE_CLINICS),
            can_delete_clinics=rbac.has_permission(Permission.DELETE_CLINICS),
            can_manage_settings=rbac.has_permission(Permission.MANAGE_CLINIC_SETTINGS),
            can_manage_staff=rbac.has_permission(Permission.MANAGE_CLINIC_STAFF),
        )


@dataclass(frozen=True, slots=True)
class AnalyticsPermissions:
    can_view_analytics: bool
    can_view_clinic_analytics: bool
    can_view_doctor_analytics: bool
    can_view_patient_analytics: bool
    can_view_revenue_analytics: bool
    can_export_analytics: bool

    @classmethod
    def from_evaluator(cls, rbac: PolicyEvaluator) -> "AnalyticsPermissions":
        return cls(
            can_view_analytics=rbac.has_permission(Permission.VIEW_ANALYTICS),
            can_view_clinic_analytics=rbac.has_permission(Permission.VIEW_CLINIC_ANALYTICS),
            can_view_doctor_analytics=rbac.has_permission(Permission.VIEW_DOCTOR_ANALYTICS),
            can_view_patient_analytics=rbac.has_permission(Permission.VIEW_PATIENT_ANALYTICS),
            can_view_revenue_analytics=rbac.has_permission(Permission.VIEW_REVENUE_ANALYTICS),
            can_export_analytics=rbac.has_permission(Permission.EXPORT_ANALYTICS),
        )


@dataclass(frozen=True, slots=True)
class PharmacyPermissions:
    can_view_pharmacy: bool
    can_manage_medicines: bool
    can_manage_prescriptions: bool
    can_manage_inventory: bool
    can_dispense_medicines: bool

    @classmethod
    def from_evaluator(cls, rbac: PolicyEvaluator) -> "PharmacyPermissions":
        return cls(
            can_view_pharmacy=rbac.has_permission(Permission.VIEW_PHARMACY),
            can_manage_medicines=rbac.has_permission(Permission.MANAGE_MEDICINES),
            can_manage_prescriptions=rbac.has_permission(Permission.MANAGE_PRESCRIPTIONS),
            can_manage_inventory=rbac.has_permission(Permission.MANAGE_INVENTORY),
            can_dispense_medicines=rbac.has_permission(Permission.DISPENSE_MEDICINES),
        )


@dataclass(frozen=True, slots=True)
class QueuePermissions:
    can_view_queue: bool
    can_manage_queue: bool
    can_call_next_patient: bool
    can_update_queue_status: bool

    @classmethod
    def from_evaluator(cls, rbac: PolicyEvaluator) -> "QueuePermissions":
        return cls(
            can_view_queue=rbac.has_permission(Permission.VIEW_QUEUE),
            can_manage_queue=rbac.has_permission(Permission.MANAGE_QUEUE),
            can_call_next_patient=rbac.has_permission(Permission.CALL_NEXT_PATIENT),
            can_update_queue_status=rbac.has_permission(Permission.UPDATE_QUEUE_STATUS),
        )


@dataclass(frozen=True, slots=True)
class MedicalRecordPermissions:
    can_view_records: bool
    can_create_records: bool
    can_update_records: bool
    can_delete_records: bool
    can_view_all_records: bool

    @classmethod
    def from_evaluator(cls, rbac: PolicyEvaluator) -> "MedicalRecordPermissions":
        return cls(
            can_view_records=rbac.has_permission(Permission.VIEW_MEDICAL_RECORDS),
            can_create_records=rbac.has_permission(Permission.CREATE_MEDICAL_RECORDS),
            can_update_records=rbac.has_permission(Permission.UPDATE_MEDICAL_RECORDS),
            can_delete_records=rbac.has_permission(Permission.DELETE_MEDICAL_RECORDS),
            can_view_all_records=rbac.has_permission(Permission.VIEW_ALL_MEDICAL_RECORDS),
        )


@dataclass(frozen=True, slots=True)
class AdminPermissions:
    can_view_users: bool
    can_manage_users: bool
    can_manage_clinics: bool
    can_view_analytics: bool
    can_manage_system_settings: bool

    @classmethod
    def from_evaluator(cls, rbac: PolicyEvaluator) -> "AdminPermissions":
        return cls(
            can_view_users=rbac.has_permission(Permission.VIEW_USERS),
            can_manage_users=rbac.has_permission(Permission.UPDATE_USERS),
            can_manage_clinics=rbac.has_permission(Permission.UPDATE_CLINICS),
            can_view_analytics=rbac.has_permission(Permission.VIEW_ANALYTICS),
            can_manage_system_settings=rbac.has_permission(Permission.MANAGE_SYSTEM_SETTINGS),
        )


def appointment_permissions(rbac: PolicyEvaluator) -> AppointmentPermissions:
    return AppointmentPermissions.from_evaluator(rbac)


def patient_permissions(rbac: PolicyEvaluator) -> PatientPermissions:
    return PatientPermissions.from_evaluator(rbac)


def doctor_permissions(rbac: PolicyEvaluator) -> DoctorPermissions:
    return DoctorPermissions.from_evaluator(rbac)


def clinic_permissions(rbac: PolicyEvaluator) -> ClinicPermissions:
    return ClinicPermissions.from_evaluator(rbac)


def analytics_permissions(rbac: PolicyEvaluator) -> AnalyticsPermissions:
    return AnalyticsPermissions.from_evaluator(rbac)


def pharmacy_permissions(rbac: PolicyEvaluator) -> PharmacyPermissions:
    return PharmacyPermissions.from_evaluator(rbac)


def queue_permissions(rbac: PolicyEvaluator) -> QueuePermissions:
    return QueuePermissions.from_evaluator(rbac)


def medical_record_permissions(rbac: PolicyEvaluator) -> MedicalRecordPermissions:
    return MedicalRecordPermissions.from_evaluator(rbac)


def admin_permissions(rbac: PolicyEvaluator) -> AdminPermissions:
    return AdminPermissions.from_evaluator(rbac)


FACADES = {
    "appointments": AppointmentPermissions,
    "patients": PatientPermissions,
    "doctors": DoctorPermissions,
    "clinics": ClinicPermissions,
    "analytics": AnalyticsPermissions,
    "pharmacy": PharmacyPermissions,
    "queue": QueuePermissions,
    "medical_records": MedicalRecordPermissions,
    "admin": AdminPermissions,
}


def all_facades(rbac: PolicyEvaluator) -> Dict[str, Dict[str, Any]]:
    """Materialize every facade as plain dicts (used by the access API)."""
    return {name: asdict(facade.from_evaluator(rbac)) for name, facade in FACADES.items()}


__all__ = [
    "AdminPermissions",
    "AnalyticsPermissions",
    "AppointmentPermissions",
    "ClinicPermissions",
    "DoctorPermissions",
    "FACADES",
    "MedicalRecordPermissions",
    "PatientPermissions",
    "PharmacyPermissions",
    "QueuePermissions",
    "admin_permissions",
    "all_facades",
    "analytics_permissions",
    "appointment_permissions",
    "clinic_permissions",
    "doctor_permissions",
    "medical_record_permissions",
    "patient_permissions",
    "pharmacy_permissions",
    "queue_permissions",
]
