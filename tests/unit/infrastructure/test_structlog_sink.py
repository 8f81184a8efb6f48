import pytest

from clinicguard.domain.audit import AuditEvent, AuditResult, RiskLevel
from clinicguard.infrastructure.audit.structlog_sink import StructlogAuditSink


class CapturingLogger:
    def __init__(self):
        self.lines = []

    def info(self, event, **kw):
        self.lines.append(("info", event, kw))

    def warning(self, event, **kw):
        self.lines.append(("warning", event, kw))


@pytest.mark.asyncio
async def test_routine_events_log_at_info():
    log = CapturingLogger()
    sink = StructlogAuditSink(logger=log)
    await sink.log_event(AuditEvent(actor_id="u1", action="call_next_patient", resource="queue"))
    level, event, kw = log.lines[0]
    assert (level, event) == ("info", "audit_event")
    assert kw["extra"]["actor_id"] == "u1"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "result, risk",
    [
        (AuditResult.FAILURE, RiskLevel.LOW),
        (AuditResult.SUCCESS, RiskLevel.HIGH),
        (AuditResult.SUCCESS, RiskLevel.CRITICAL),
    ],
)
async def test_failures_and_risky_events_log_at_warning(result, risk):
    log = CapturingLogger()
    sink = StructlogAuditSink(logger=log)
    await sink.log_event(
        AuditEvent(actor_id="u1", action="x", resource="y", result=result, risk_level=risk)
    )
    assert log.lines[0][0] == "warning"


@pytest.mark.asyncio
async def test_recent_tail_is_bounded():
    sink = StructlogAuditSink(logger=CapturingLogger(), keep_last=2)
    for i in range(5):
        await sink.log_event(AuditEvent(actor_id=str(i), action="a", resource="r"))
    assert [r["actor_id"] for r in sink.recent] == ["3", "4"]


@pytest.mark.asyncio
async def test_no_tail_by_default():
    sink = StructlogAuditSink(logger=CapturingLogger())
    await sink.log_event(AuditEvent(actor_id="u", action="a", resource="r"))
    assert sink.recent == []
