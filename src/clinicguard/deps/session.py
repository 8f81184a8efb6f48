"""Per-request session and evaluator dependencies."""

from fastapi import Depends, Request

from ..domain.policy import PolicyEvaluator
from ..domain.session import SessionState
from .providers import get_session_provider_from_request, get_settings


async def get_session(request: Request) -> SessionState:
    """Return the session resolved by CurrentSessionMiddleware.

    Falls back to resolving it here when the middleware did not run (for
    example on routes excluded from it, or in unit tests that mount a bare
    router).
    """
    session = getattr(request.state, "session", None)
    if session is None:
        provider = get_session_provider_from_request(request)
        session = await provider.resolve(request)
        request.state.session = session
    return session


async def get_evaluator(
    request: Request, session: SessionState = Depends(get_session)
) -> PolicyEvaluator:
    """One evaluator per request, shared by every guard that request touches."""
    rbac = getattr(request.state, "rbac", None)
    if rbac is None or rbac.session is not session:
        rbac = PolicyEvaluator(session, warn_on_unknown=get_settings().dev_warnings)
        request.state.rbac = rbac
    return rbac
