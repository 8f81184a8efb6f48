from typing import Any, Dict, List, Optional

from ...domain.audit import AuditEvent, AuditResult, RiskLevel
from ...logging_config import get_logger


class StructlogAuditSink:
    """Write audit events as structured JSON log lines.

    High and critical risk events and failures are logged at warning level so
    they stand out in aggregated logs; everything else is info.
    """

    def __init__(self, logger: Optional[Any] = None, keep_last: int = 0):
        self.logger = logger or get_logger("clinicguard.audit")
        # optional in-memory tail, handy for dashboards and tests
        self.keep_last = keep_last
        self.recent: List[Dict[str, Any]] = []

    async def log_event(self, event: AuditEvent) -> None:
        record = event.to_record()
        loud = event.result == AuditResult.FAILURE or event.risk_level in (
            RiskLevel.HIGH,
            RiskLevel.CRITICAL,
        )
        if loud:
            self.logger.warning("audit_event", extra=record)
        else:
            self.logger.info("audit_event", extra=record)
        if self.keep_last > 0:
            self.recent.append(record)
            del self.recent[: -self.keep_last]
