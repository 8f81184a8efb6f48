"""Dependency injection package.

Re-exports the pieces routers and tests reach for most often.
"""

from .providers import (
    get_audit_sink,
    get_audit_sink_from_request,
    get_session_provider,
    get_session_provider_from_request,
    get_settings,
)
from .session import get_evaluator, get_session

__all__ = [
    "get_audit_sink",
    "get_audit_sink_from_request",
    "get_evaluator",
    "get_session",
    "get_session_provider",
    "get_session_provider_from_request",
    "get_settings",
]
