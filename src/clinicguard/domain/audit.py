"""Audit domain models and value objects."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import StrEnum
from typing import Any, Dict, Optional


class AuditResult(StrEnum):
    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"
    PENDING = "PENDING"


class RiskLevel(StrEnum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


@dataclass(slots=True)
class AuditEvent:
    """A single audit record prior to being handed to a sink."""

    actor_id: Optional[str]
    action: str
    resource: str
    resource_id: Optional[str] = None
    result: AuditResult = AuditResult.SUCCESS
    risk_level: RiskLevel = RiskLevel.LOW
    metadata: Dict[str, Any] = field(default_factory=dict)
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_record(self) -> Dict[str, Any]:
        """Materialize the event into a JSON-serializable dictionary."""

        return {
            "actor_id": self.actor_id,
            "action": str(self.action),
            "resource": str(self.resource),
            "resource_id": self.resource_id,
            "result": str(self.result),
            "risk_level": str(self.risk_level),
            "metadata": dict(self.metadata),
            "ip_address": self.ip_address,
            "user_agent": self.user_agent,
            "timestamp": self.timestamp.isoformat(),
        }


async def log_audit_event(
    audit_sink,
    session: Any,
    action: str,
    resource: str,
    result: AuditResult = AuditResult.SUCCESS,
    risk_level: RiskLevel = RiskLevel.LOW,
    metadata: Optional[dict] = None,
    resource_id: Optional[str] = None,
    request: Optional[Any] = None,
) -> None:
    """Helper to log audit events with consistent formatting.

    Args:
        audit_sink: Audit sink instance (can be None, will skip logging)
        session: Session state of the acting user
        action: Short verb describing what was attempted
        resource: Resource family the action targeted
        result: Outcome of the attempt
        risk_level: Sensitivity of the action
        metadata: Extra structured details
        resource_id: Optional identifier of the concrete resource
        request: Optional FastAPI Request for IP/user-agent extraction
    """
    if audit_sink is None:
        return

    try:
        ip_address = None
        user_agent = None
        if request is not None:
            ip_address = request.client.host if request.client else None
            user_agent = request.headers.get("user-agent")

        event = AuditEvent(
            actor_id=getattr(session, "user_id", None),
            action=action,
            resource=resource,
            resource_id=resource_id,
            result=result,
            risk_level=risk_level,
            metadata=dict(metadata or {}),
            ip_address=ip_address,
            user_agent=user_agent,
        )
        await audit_sink.log_event(event)

        try:
            from ..metrics import AUDIT_EVENTS

            if AUDIT_EVENTS is not None:
                AUDIT_EVENTS.labels(action=str(action), result=str(result)).inc()
        except Exception:
            pass  # Don't fail audit on metrics errors
    except Exception as e:
        # Import logger here to avoid circular dependency
        from ..logging_config import get_logger

        get_logger(__name__).warning(
            "audit_log_failed", extra={"action": str(action), "error": str(e)}
        )


__all__ = [
    "AuditEvent",
    "AuditResult",
    "RiskLevel",
    "log_audit_event",
]
