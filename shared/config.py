"""
Shared configuration management for the Storefront Gateway.
"""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    log_level: str = Field(default="info")
    metrics_port: Optional[int] = Field(default=None)


class GatewayConfig(BaseConfig):
    """Gateway configuration, read once at startup and never mutated."""

    port: int = Field(default=8080)

    # Backends
    postgrest_url: str = Field(default="https://postgrest-server.fly.dev")
    backend_api_url: str = Field(default="https://backend-api-dfcflow.fly.dev")
    mcp_service_url: str = Field(default="https://mcp-service-dfcflow.fly.dev")
    worker_service_url: str = Field(default="https://worker-service-dfcflow.fly.dev")
    backend_timeout_seconds: float = Field(default=30.0, gt=0)

    # Security
    api_key: Optional[str] = Field(default=None)

    @field_validator(
        "postgrest_url",
        "backend_api_url",
        "mcp_service_url",
        "worker_service_url",
    )
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("api_key")
    @classmethod
    def _blank_key_disables_auth(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        return value

    @property
    def auth_enabled(self) -> bool:
        return self.api_key is not None


def get_config() -> GatewayConfig:
    """Build the gateway configuration from the environment."""
    return GatewayConfig()
