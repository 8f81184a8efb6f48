from typing import Protocol

from ..domain.audit import AuditEvent


class AuditSink(Protocol):
    async def log_event(self, event: AuditEvent) -> None: ...
