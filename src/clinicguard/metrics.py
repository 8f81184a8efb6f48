import prometheus_client
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

# Guard against duplicated metric registration when the module is imported
# multiple times (for example, when running uvicorn with the reloader).
REQUEST_COUNT = getattr(prometheus_client, "clinicguard_REQUEST_COUNT", None)
REQUEST_LATENCY = getattr(prometheus_client, "clinicguard_REQUEST_LATENCY", None)
PERMISSION_CHECKS = getattr(prometheus_client, "clinicguard_PERMISSION_CHECKS", None)
ROUTE_GUARD_DECISIONS = getattr(prometheus_client, "clinicguard_ROUTE_GUARD_DECISIONS", None)
AUDIT_EVENTS = getattr(prometheus_client, "clinicguard_AUDIT_EVENTS", None)

if REQUEST_COUNT is None:
    # HTTP Metrics
    REQUEST_COUNT = Counter(
        "http_requests_total", "Total HTTP requests", ["method", "endpoint", "http_status"]
    )
    REQUEST_LATENCY = Histogram(
        "http_request_latency_seconds", "HTTP request latency in seconds", ["method", "endpoint"]
    )

    # Authorization Metrics
    PERMISSION_CHECKS = Counter(
        "permission_checks_total",
        "Permission checks made by component guards",
        ["result", "check"],  # check: permission/any/all/resource/domain/none
    )
    ROUTE_GUARD_DECISIONS = Counter(
        "route_guard_decisions_total",
        "Route guard outcomes",
        ["state"],
    )

    AUDIT_EVENTS = Counter(
        "audit_events_total", "Total audit events written", ["action", "result"]
    )

    prometheus_client.clinicguard_REQUEST_COUNT = REQUEST_COUNT  # type: ignore[attr-defined]
    prometheus_client.clinicguard_REQUEST_LATENCY = REQUEST_LATENCY  # type: ignore[attr-defined]
    prometheus_client.clinicguard_PERMISSION_CHECKS = PERMISSION_CHECKS  # type: ignore[attr-defined]
    prometheus_client.clinicguard_ROUTE_GUARD_DECISIONS = ROUTE_GUARD_DECISIONS  # type: ignore[attr-defined]
    prometheus_client.clinicguard_AUDIT_EVENTS = AUDIT_EVENTS  # type: ignore[attr-defined]


def record_permission_check(check: str, granted: bool) -> None:
    try:
        if PERMISSION_CHECKS is not None:
            PERMISSION_CHECKS.labels(
                result="granted" if granted else "denied", check=check
            ).inc()
    except Exception:
        pass  # Don't fail authorization on metrics errors


def metrics_response():
    data = generate_latest()
    return data, CONTENT_TYPE_LATEST


def record_route_decision(state: str) -> None:
    try:
        if ROUTE_GUARD_DECISIONS is not None:
            ROUTE_GUARD_DECISIONS.labels(state=state).inc()
    except Exception:
        pass
