from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response

from .config import Settings
from .guards.route import GuardOutcome, RouteGuardInterrupt
from .guards.views import loading_page, unauthorized_page
from .logging_config import get_logger

logger = get_logger(__name__)


def _create_minimal_app(settings: Settings) -> FastAPI:
    """Create the FastAPI app object without routers or middleware.
    Tests can import and call this to create fresh apps.
    """
    app = FastAPI(title=settings.app_name)

    from .deps import providers as _providers

    # collaborators live on app.state so tests can swap them per app
    app.state.settings = settings
    app.state.session_provider = _providers.get_session_provider()
    app.state.audit_sink = _providers.get_audit_sink()
    return app


def render_route_interrupt(request: Request, exc: RouteGuardInterrupt, app_name: str) -> Response:
    decision = exc.decision
    if decision.outcome is GuardOutcome.REDIRECT and decision.location:
        return RedirectResponse(decision.location, status_code=303)
    if decision.outcome is GuardOutcome.RENDER_LOADING:
        return HTMLResponse(loading_page(app_name), status_code=200, headers={"Retry-After": "1"})
    back = request.headers.get("referer")
    return HTMLResponse(unauthorized_page(app_name, exc.dashboard_url, back), status_code=403)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and wire a FastAPI application.

    Passing ``settings`` installs them process-wide before any collaborator
    is built, so guards and the session provider agree on paths and secrets.
    """
    from .deps import providers as _providers

    if settings is None:
        settings = _providers.get_settings()
    else:
        _providers.use_settings(settings)

    app = _create_minimal_app(settings)

    from .metrics import metrics_response
    from .middleware.current_user import CurrentSessionMiddleware
    from .middleware.metrics_middleware import MetricsMiddleware
    from .routers import access, dashboard, health

    app.include_router(health.router)
    app.include_router(access.router)
    app.include_router(dashboard.router)

    # session resolution runs once per request before any guard
    app.add_middleware(CurrentSessionMiddleware)
    app.add_middleware(MetricsMiddleware)

    @app.get("/metrics")
    async def _metrics():
        data, content_type = metrics_response()
        return Response(content=data, media_type=content_type)

    @app.exception_handler(RouteGuardInterrupt)
    async def _route_guard_handler(request: Request, exc: RouteGuardInterrupt):
        return render_route_interrupt(request, exc, settings.app_name)

    return app


__all__ = ["create_app", "render_route_interrupt"]
