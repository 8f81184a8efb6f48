"""Server-rendered clinic pages.

Each page sits behind a route guard and composes component guards for the
actions inside it. Domain data is out of scope here; the pages only show which
parts a session is allowed to see.
"""

from html import escape

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse

from ..deps import get_audit_sink_from_request, get_evaluator, get_settings
from ..deps.auth import (
    admin_route,
    analytics_route,
    appointment_route,
    doctors_route,
    medical_records_route,
    patient_route,
    pharmacy_route,
    queue_route,
    with_role_protection,
)
from ..domain.audit import AuditResult, RiskLevel, log_audit_event
from ..domain.facades import DoctorPermissions
from ..domain.navigation import get_available_routes
from ..domain.permission import Permission, Role
from ..domain.policy import DenialReason, PolicyEvaluator
from ..guards import (
    AccessPredicate,
    AdminProtectedComponent,
    AppointmentProtectedComponent,
    ConditionalRender,
    MedicalRecordsProtectedComponent,
    PatientProtectedComponent,
    PharmacyProtectedComponent,
    ProtectedComponent,
    QueueProtectedComponent,
    protected_button,
    protected_link,
)
from ..guards.views import page
from ..logging_config import get_logger
from ..schemas.access import CallNextResponse

logger = get_logger(__name__)

router = APIRouter(tags=["dashboard"])


def _layout(title: str, rbac: PolicyEvaluator, body: str) -> HTMLResponse:
    nav = "".join(
        f'<li><a href="{escape(r.path, quote=True)}">{escape(r.label)}</a></li>'
        for r in get_available_routes(rbac)
    )
    who = escape(str(rbac.session.role or ""))
    html = page(
        f"{title} | {get_settings().app_name}",
        f'<header><span class="role">{who}</span><nav><ul>{nav}</ul></nav></header>'
        f"<main><h1>{escape(title)}</h1>{body}</main>",
    )
    return HTMLResponse(html)


def _section(name: str, inner: str) -> str:
    if not inner:
        return ""
    return f'<section class="{name}">{inner}</section>'


def _role_dashboard_body(role: Role, rbac: PolicyEvaluator) -> str:
    appointments = AppointmentProtectedComponent(
        lambda: "<h2>Appointments</h2>"
        + protected_link(
            rbac,
            "/appointments",
            "Open appointments",
            AccessPredicate(resource="appointments", action="read"),
        ),
        "view",
    )
    patients = PatientProtectedComponent(
        lambda: "<h2>Patients</h2>"
        + protected_button(
            rbac,
            "Register patient",
            AccessPredicate(permission=Permission.CREATE_PATIENTS),
            class_="btn",
        ),
        "view",
    )
    sections = [
        ("appointments", appointments),
        ("patients", patients),
        ("queue", QueueProtectedComponent('<h2>Queue</h2><a href="/queue">Open queue</a>', "view")),
        (
            "pharmacy",
            PharmacyProtectedComponent('<h2>Pharmacy</h2><a href="/pharmacy">Open pharmacy</a>', "view"),
        ),
        (
            "records",
            MedicalRecordsProtectedComponent('<h2>Medical records</h2><a href="/ehr">Open records</a>', "view"),
        ),
        (
            "admin",
            AdminProtectedComponent('<h2>Administration</h2><a href="/admin/users">Manage users</a>', "view"),
        ),
    ]
    intro = f'<p class="welcome">Signed in as {escape(role.value)}</p>'
    return intro + "".join(_section(name, guard.render(rbac)) for name, guard in sections)


def _make_role_dashboard(role: Role):
    title = f"{role.value.replace('_', ' ').title()} dashboard"

    async def dashboard(request: Request, rbac: PolicyEvaluator = Depends(get_evaluator)):
        return _layout(title, rbac, _role_dashboard_body(role, rbac))

    dashboard.__name__ = f"{role.name.lower()}_dashboard"
    return dashboard


for _role in Role:
    router.add_api_route(
        f"/{_role.slug}/dashboard",
        with_role_protection(_make_role_dashboard(_role), [_role]),
        methods=["GET"],
        response_class=HTMLResponse,
        name=f"{_role.name.lower()}_dashboard",
    )
del _role


@router.get("/appointments", response_class=HTMLResponse)
async def appointments_page(rbac: PolicyEvaluator = Depends(appointment_route)):
    actions = "".join(
        AppointmentProtectedComponent(
            f'<button type="button" class="btn" data-action="{action}">{label}</button>', action
        ).render(rbac)
        for action, label in (
            ("create", "Book appointment"),
            ("update", "Reschedule"),
            ("delete", "Cancel appointment"),
            ("manage", "Manage queue"),
        )
    )
    scope = ConditionalRender(rbac).render_with_permission(
        Permission.VIEW_ALL_APPOINTMENTS, '<p class="scope">Showing all clinic appointments</p>'
    )
    return _layout("Appointments", rbac, scope + _section("actions", actions))


@router.get("/patients", response_class=HTMLResponse)
async def patients_page(rbac: PolicyEvaluator = Depends(patient_route)):
    actions = "".join(
        PatientProtectedComponent(
            f'<button type="button" class="btn" data-action="{action}">{label}</button>', action
        ).render(rbac)
        for action, label in (
            ("create", "Register patient"),
            ("update", "Edit patient"),
            ("delete", "Remove patient"),
            ("medical-records", "Medical history"),
        )
    )
    return _layout("Patients", rbac, _section("actions", actions))


@router.get("/doctors", response_class=HTMLResponse)
async def doctors_page(rbac: PolicyEvaluator = Depends(doctors_route)):
    view = DoctorPermissions.from_evaluator(rbac)
    cr = ConditionalRender(rbac)
    actions = (
        cr.render_if(view.can_create_doctors, '<button type="button" class="btn">Add doctor</button>')
        + cr.render_if(view.can_update_doctors, '<button type="button" class="btn">Edit doctor</button>')
        + cr.render_if(view.can_manage_schedule, '<button type="button" class="btn">Schedules</button>')
    )
    return _layout("Doctors", rbac, _section("actions", actions))


@router.get("/queue", response_class=HTMLResponse)
async def queue_page(rbac: PolicyEvaluator = Depends(queue_route)):
    call_next = QueueProtectedComponent(
        '<form method="post" action="/queue/call-next">'
        '<button type="submit" class="btn">Call next patient</button></form>',
        "call-next",
    ).render(rbac)
    update = QueueProtectedComponent(
        '<button type="button" class="btn">Update status</button>', "update-status"
    ).render(rbac)
    manage = QueueProtectedComponent(
        '<button type="button" class="btn">Reorder queue</button>',
        "manage",
        fallback='<p class="muted">Queue order is managed by reception.</p>',
    ).render(rbac)
    return _layout("Queue", rbac, _section("actions", call_next + update + manage))


@router.post("/queue/call-next", response_model=CallNextResponse)
async def call_next_patient(
    request: Request,
    rbac: PolicyEvaluator = Depends(get_evaluator),
):
    """
    Advance the queue. Checked server-side on its own; denials are audited.
    """
    decision = rbac.check_permission(Permission.CALL_NEXT_PATIENT)
    sink = get_audit_sink_from_request(request)
    if not decision.allowed:
        await log_audit_event(
            sink,
            rbac.session,
            action="call_next_patient",
            resource="queue",
            result=AuditResult.FAILURE,
            risk_level=RiskLevel.MEDIUM,
            metadata={"reason": decision.reason, "role": str(rbac.session.role)},
            request=request,
        )
        if decision.reason == DenialReason.NOT_AUTHENTICATED:
            raise HTTPException(status_code=401, detail="Not authenticated")
        raise HTTPException(status_code=403, detail="Forbidden")

    await log_audit_event(
        sink,
        rbac.session,
        action="call_next_patient",
        resource="queue",
        result=AuditResult.SUCCESS,
        request=request,
    )
    logger.info("queue_call_next", extra={"user_id": rbac.session.user_id})
    return CallNextResponse(status="called", called_by=rbac.session.user_id)


@router.get("/pharmacy", response_class=HTMLResponse)
async def pharmacy_page(rbac: PolicyEvaluator = Depends(pharmacy_route)):
    actions = "".join(
        PharmacyProtectedComponent(
            f'<button type="button" class="btn" data-action="{action}">{label}</button>', action
        ).render(rbac)
        for action, label in (
            ("dispense", "Dispense"),
            ("manage-prescriptions", "Prescriptions"),
            ("manage-medicines", "Medicines"),
            ("manage-inventory", "Inventory"),
        )
    )
    return _layout("Pharmacy", rbac, _section("actions", actions))


@router.get("/ehr", response_class=HTMLResponse)
async def medical_records_page(rbac: PolicyEvaluator = Depends(medical_records_route)):
    create = MedicalRecordsProtectedComponent(
        '<button type="button" class="btn">New record</button>', "create"
    ).render(rbac)
    edit = ProtectedComponent(
        '<button type="button" class="btn">Edit record</button>',
        permissions=[Permission.UPDATE_MEDICAL_RECORDS, Permission.DELETE_MEDICAL_RECORDS],
        show_fallback=False,
    ).render(rbac)
    export = ProtectedComponent(
        '<button type="button" class="btn">Export</button>',
        permission=Permission.EXPORT_REPORTS,
        show_fallback=False,
    ).render(rbac)
    scope = ConditionalRender(rbac).render_with_permission(
        Permission.VIEW_ALL_MEDICAL_RECORDS, '<p class="scope">All clinic records</p>'
    )
    return _layout("Medical records", rbac, scope + _section("actions", create + edit + export))


@router.get("/analytics", response_class=HTMLResponse)
async def analytics_page(rbac: PolicyEvaluator = Depends(analytics_route)):
    cr = ConditionalRender(rbac)
    panels = (
        cr.render_with_permission(Permission.VIEW_CLINIC_ANALYTICS, '<div class="panel">Clinic</div>')
        + cr.render_with_permission(Permission.VIEW_DOCTOR_ANALYTICS, '<div class="panel">Doctors</div>')
        + cr.render_with_permission(Permission.VIEW_PATIENT_ANALYTICS, '<div class="panel">Patients</div>')
        + cr.render_with_permission(Permission.VIEW_REVENUE_ANALYTICS, '<div class="panel">Revenue</div>')
    )
    export = ProtectedComponent(
        '<button type="button" class="btn">Export report</button>',
        resource="analytics",
        action="export",
    ).render(rbac)
    return _layout("Analytics", rbac, _section("panels", panels) + _section("export", export))


@router.get("/admin/users", response_class=HTMLResponse)
async def admin_users_page(rbac: PolicyEvaluator = Depends(admin_route)):
    actions = "".join(
        AdminProtectedComponent(
            f'<button type="button" class="btn" data-action="{action}">{label}</button>', action
        ).render(rbac)
        for action, label in (
            ("manage-users", "Edit users"),
            ("manage-clinics", "Edit clinics"),
            ("system-settings", "System settings"),
        )
    )
    roles = ConditionalRender(rbac).render_with_all_permissions(
        [Permission.VIEW_USERS, Permission.MANAGE_USER_ROLES],
        '<a href="/api/v1/access/roles/' + Role.DOCTOR.slug + '">Role grants</a>',
    )
    return _layout("Users", rbac, _section("actions", actions) + roles)
