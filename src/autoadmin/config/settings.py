from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="AUTOADMIN_",
        env_file=".env",
        extra="ignore",
    )

    # Runtime
    ENVIRONMENT: str = Field(default="dev", description="Environment name")
    HOST: str = Field(default="0.0.0.0", description="Bind host")
    PORT: int = Field(default=8080, description="Bind port")
    LOG_LEVEL: str = Field(default="INFO", description="Root log level for the CLI")

    # Panel
    PREFIX: str = Field(default="/admin", description="Path prefix of every admin route")
    NAME: str = Field(default="Admin Panel", description="Panel title")
    DEFAULT_INSTANCES_PER_PAGE: int = Field(
        default=25, description="Page size when perPage is missing or invalid"
    )
    FORM_STYLE: str = Field(default="panel", description="p|ul|table|panel")

    # Audit
    AUDIT_LOGGER_NAME: str = Field(
        default="autoadmin.audit", description="Logger used by the default audit sink"
    )

    # Demo application
    DATABASE_URL: str = Field(default="sqlite:///autoadmin_demo.db")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
