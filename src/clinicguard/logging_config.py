import logging
import warnings

import structlog


def configure_logging(level: int | str = logging.INFO):
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logging.basicConfig(level=level, format="%(message)s")
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
    )

    # python-jose logs a noisy debug line per failed decode
    logging.getLogger("jose").setLevel(logging.WARNING)

    # Suppress a known PendingDeprecationWarning from starlette.formparsers about
    # `multipart` import; it's noisy in test output and not actionable for us.
    warnings.filterwarnings(
        "ignore",
        category=PendingDeprecationWarning,
        module=r"starlette\.formparsers",
    )


def get_logger(name: str | None = None):
    if not structlog.is_configured():
        configure_logging()
    return structlog.get_logger(name)
