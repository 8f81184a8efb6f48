from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from ..deps.providers import get_session_provider_from_request
from ..domain.session import SessionState
from ..logging_config import get_logger

logger = get_logger(__name__)

SKIP_PREFIXES = ("/health", "/api/v1/health", "/metrics")


class CurrentSessionMiddleware(BaseHTTPMiddleware):
    """Resolve the caller's session once per request and attach it to request.state.session.

    Behavior:
    - The configured SessionProvider (app.state.session_provider, or the
      token-backed default) is awaited exactly once.
    - Provider failures do not short-circuit the request: the session falls
      back to anonymous and route guards send the caller to the login page.
    - Health and metrics endpoints are skipped.
    """

    async def dispatch(self, request: Request, call_next):
        path = request.url.path or ""
        if path.startswith(SKIP_PREFIXES):
            return await call_next(request)

        provider = get_session_provider_from_request(request)
        try:
            session = await provider.resolve(request)
        except Exception as e:
            logger.exception("session_resolution_failed", extra={"error": str(e), "path": path})
            session = SessionState.anonymous()
        request.state.session = session
        if session.is_authenticated:
            logger.debug(
                "session_attached",
                extra={
                    "path": path,
                    "user_id": session.user_id,
                    "authenticated": session.is_authenticated,
                },
            )

        return await call_next(request)
