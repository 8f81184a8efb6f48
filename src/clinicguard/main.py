from .deps import get_settings
from .logging_config import configure_logging, get_logger

# configure logging early so library messages go through structlog from the start
configure_logging(get_settings().log_level)
logger = get_logger(__name__)

# Create app using wiring.create_app() to avoid duplicating router/middleware registration
from .wiring import create_app  # noqa: E402

app = create_app()


@app.on_event("startup")
async def on_startup():
    logger.info("startup complete", extra={"app": app.title, "login_path": get_settings().login_path})


if __name__ == "__main__":
    import uvicorn

    s = get_settings()
    uvicorn.run("clinicguard.main:app", host=s.server_host, port=s.server_port, reload=True)
