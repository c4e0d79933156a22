"""Application settings for FastAPI configuration."""

from __future__ import annotations

from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["development", "staging", "production", "test"]


class AppSettings(BaseSettings):
    """FastAPI application settings.

    Environment variables use APP_ prefix.
    Example: APP_DEBUG=true, APP_TITLE="Agenda API"

    The listening port and allowed origin also honour the bare ``PORT`` and
    ``FRONTEND_URL`` variables used by container platforms.
    """

    # Service identity
    service_name: str = Field(
        default="agenda-service",
        min_length=1,
        max_length=100,
        pattern=r"^[a-z0-9]+(-[a-z0-9]+)*$",
        description="Service name for logging (lowercase, hyphens allowed)",
    )
    title: str = Field(
        default="Agenda Service API",
        min_length=1,
        max_length=200,
        description="API title displayed in documentation",
    )
    description: str = Field(
        default="Agenda events with scheduled reminder evaluation",
        description="API description (supports Markdown)",
    )
    version: str = Field(
        default="2.0.0",
        min_length=1,
        max_length=50,
        pattern=r"^\d+\.\d+\.\d+(-[a-zA-Z0-9]+)?$",
        description="API version (semver format)",
    )
    environment: Environment = Field(
        default="development", description="Environment: development|staging|production|test",
    )
    api_prefix: str = Field(
        default="/api",
        min_length=1,
        max_length=255,
        pattern=r"^/.*$",
        description="Base URL prefix for API routes",
    )

    # FastAPI toggles
    debug: bool = Field(default=False, description="Enable debug mode")
    docs_url: str | None = Field(default="/docs", description="Swagger UI path")
    openapi_url: str | None = Field(default="/openapi.json", description="OpenAPI schema path")

    # Server configuration
    host: str = Field(default="0.0.0.0", description="Server bind address")
    port: int = Field(
        default=3000,
        ge=1,
        le=65535,
        validation_alias=AliasChoices("APP_PORT", "PORT", "port"),
        description="Server listening port",
    )

    # CORS
    cors_origin: str = Field(
        default="*",
        validation_alias=AliasChoices("APP_CORS_ORIGIN", "FRONTEND_URL", "cors_origin"),
        description="Single allowed request origin, or '*' for any",
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        populate_by_name=True,
        extra="ignore",
        env_ignore_empty=True,
    )

    @property
    def cors_origins(self) -> list[str]:
        return [self.cors_origin]

    @property
    def is_production(self) -> bool:
        return self.environment == "production"
