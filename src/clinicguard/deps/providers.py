"""Singleton providers for application-wide services and clients.

This module handles lazy initialization of singleton instances like Settings,
the session provider and the audit sink.
"""

from typing import Any

from ..config import Settings
from ..infrastructure.audit.structlog_sink import StructlogAuditSink
from ..infrastructure.session.token_session import TokenSessionProvider
from ..ports.audit import AuditSink
from ..ports.session import SessionProvider

# Lazy singletons to avoid import-time side-effects
_settings: Settings | None = None
_session_provider: TokenSessionProvider | None = None
_audit_sink: StructlogAuditSink | None = None


def get_settings() -> Settings:
    """Get or create singleton Settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def get_session_provider() -> SessionProvider:
    """Get or create the token-backed session provider."""
    global _session_provider
    if _session_provider is None:
        s = get_settings()
        _session_provider = TokenSessionProvider(
            s.jwt_secret, algorithm=s.jwt_algorithm, cookie_name=s.session_cookie_name
        )
    return _session_provider


def get_audit_sink() -> AuditSink:
    """Get or create the structlog audit sink."""
    global _audit_sink
    if _audit_sink is None:
        _audit_sink = StructlogAuditSink()
    return _audit_sink


def get_session_provider_from_request(request: Any = None) -> SessionProvider:
    """Get session provider from request.app.state with fallback to get_session_provider().

    Tests and alternative deployments swap the collaborator by assigning
    ``app.state.session_provider``.
    """
    if request is not None:
        provider = getattr(request.app.state, "session_provider", None)
        if provider is not None:
            return provider  # type: ignore[no-any-return]
    return get_session_provider()


def get_audit_sink_from_request(request: Any = None) -> AuditSink:
    """Get audit sink from request.app.state with fallback to get_audit_sink()."""
    if request is not None:
        sink = getattr(request.app.state, "audit_sink", None)
        if sink is not None:
            return sink  # type: ignore[no-any-return]
    return get_audit_sink()


def use_settings(settings: Settings) -> None:
    """Install ``settings`` as the process-wide instance and drop derived singletons."""
    global _settings, _session_provider
    _settings = settings
    _session_provider = None
