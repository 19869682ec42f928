"""quota-gate configuration via pydantic-settings."""

import warnings
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

_INSECURE_DEFAULTS = {
    "secret_key": "insecure-dev-key-change-me",
}


class QuotaGateSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="QUOTA_GATE_")

    environment: str = "development"
    secret_key: str = "insecure-dev-key-change-me"

    # Database
    db_url: str = "sqlite+aiosqlite:///./data/quota_gate.db"

    # API
    api_title: str = "quota-gate"
    api_version: str = "0.1.0"
    host: str = "0.0.0.0"
    port: int = 3001
    api_prefix: str = "/api"
    cors_origins: list[str] = ["http://localhost:3000"]

    # Sessions (issued by the auth collaborator, verified here)
    session_cookie_name: str = "session_token"
    session_max_age: int = 604800  # 7 days

    # Content listing
    default_list_limit: int = 50
    max_list_limit: int = 100

    # Compare-and-swap attempts per grant before giving up
    grant_max_attempts: int = 5

    log_level: str = "INFO"

    def validate_for_production(self) -> None:
        """Raise if insecure defaults are used in non-development environments."""
        insecure_fields = [
            field
            for field, default in _INSECURE_DEFAULTS.items()
            if getattr(self, field) == default
        ]

        if self.environment != "development" and insecure_fields:
            env_vars = ", ".join(f"QUOTA_GATE_{f.upper()}" for f in insecure_fields)
            raise RuntimeError(
                f"Insecure default values detected in '{self.environment}' environment. "
                f"Set these environment variables to secure values: {env_vars}. "
                "Generate secrets with: python -c \"import secrets; print(secrets.token_urlsafe(48))\""
            )

        if insecure_fields:
            warnings.warn(
                "Using insecure default session secret. Set QUOTA_GATE_SECRET_KEY for production",
                UserWarning,
                stacklevel=2,
            )


@lru_cache
def get_settings() -> QuotaGateSettings:
    settings = QuotaGateSettings()
    settings.validate_for_production()
    return settings
