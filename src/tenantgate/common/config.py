"""TenantGate configuration via pydantic-settings."""

import warnings
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

_INSECURE_DEFAULTS = {
    "admin_api_key": "insecure-admin-key-change-me",
}


class TenantGateSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="TENANTGATE_")

    environment: str = "development"
    log_level: str = "INFO"

    # Database
    db_url: str = "sqlite+aiosqlite:///./data/tenantgate.db"

    # API
    api_title: str = "TenantGate"
    api_version: str = "0.1.0"
    admin_api_key: str = "insecure-admin-key-change-me"
    host: str = "0.0.0.0"
    port: int = 8080
    api_prefix: str = ""
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:8000"]

    # Key issuance
    license_key_max_attempts: int = 10

    # Federation (outbound calls to tenant websites)
    federation_timeout: float = 10.0  # seconds
    federation_user_agent: str = "TenantGate-Admin/1.0"
    default_users_page_size: int = 50
    max_users_page_size: int = 200

    def validate_for_production(self) -> None:
        """Raise if insecure defaults are used in non-development environments."""
        insecure_fields = [
            field
            for field, default in _INSECURE_DEFAULTS.items()
            if getattr(self, field) == default
        ]

        if self.environment != "development" and insecure_fields:
            env_vars = ", ".join(f"TENANTGATE_{f.upper()}" for f in insecure_fields)
            raise RuntimeError(
                f"Insecure default values detected in '{self.environment}' environment. "
                f"Set these environment variables to secure values: {env_vars}. "
                "Generate secrets with: python -c \"import secrets; print(secrets.token_urlsafe(48))\""
            )

        if insecure_fields:
            warnings.warn(
                "Using insecure default admin key, set TENANTGATE_ADMIN_API_KEY for production",
                UserWarning,
                stacklevel=2,
            )


@lru_cache
def get_settings() -> TenantGateSettings:
    settings = TenantGateSettings()
    settings.validate_for_production()
    return settings
