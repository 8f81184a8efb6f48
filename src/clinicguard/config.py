from typing import Dict

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Clinic Portal"
    server_host: str = "0.0.0.0"
    server_port: int = 8080
    log_level: str = "INFO"
    # Login entry point used by the route guard for unauthenticated sessions
    login_path: str = "/auth/login"
    # Query parameter carrying the originally requested path to the login page
    login_next_param: str = "next"
    # Session collaborator: tokens are issued elsewhere, we only verify them
    session_cookie_name: str = "session_token"
    jwt_secret: str = "changeme"
    jwt_algorithm: str = "HS256"
    # Surface configuration gaps (unknown resource/action pairs, unknown roles)
    # as warnings. Decisions stay fail-closed either way.
    dev_warnings: bool = True
    # Per-deployment override of role landing routes, keyed by role value
    role_landing_routes: Dict[str, str] = {}

    model_config = SettingsConfigDict(
        env_prefix="CLINICGUARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


# module-level settings instance for convenience across the app
settings = Settings()
