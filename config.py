"""Configuration for the telemetry client and relay service."""

from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_ENDPOINT_URL = "https://dc.services.visualstudio.com/v2/track"


class AppInsightsOptions(BaseSettings):
    """Client options, loaded from APPINSIGHTS_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="APPINSIGHTS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    instrumentation_key: str = Field("", description="Application Insights instrumentation key")
    application_name: str = Field("", description="Prefix used for automatic page view names")
    auto_page_view_tracking: bool = Field(True, description="Track page views on navigation")
    auto_exception_tracking: bool = Field(True, description="Track reported errors as exceptions")
    session_inactivity_timeout: int = Field(1800000, description="Session expiry in milliseconds")
    developer_mode: bool = Field(False, description="Log telemetry instead of sending it")

    endpoint_url: str = Field(DEFAULT_ENDPOINT_URL, description="Collector endpoint")
    request_timeout: float = Field(10.0, description="HTTP timeout in seconds")

    # Storage
    redis_host: Optional[str] = Field(None, description="Redis host; memory storage when unset")
    redis_port: int = Field(6379, description="Redis port")
    storage_prefix: str = Field("ls", description="Prefix for stored keys")
    cookie_expiry_days: int = Field(30, description="Fallback storage expiry, 0 never expires")

    # Logging
    log_level: str = Field("INFO", description="Log level")
    log_json: bool = Field(False, description="Render logs as JSON")
