"""
Application Configuration - Pydantic Settings for type-safe config.

NO DICTIONARIES - All configuration is strongly typed.
FAIL FAST - Flow credentials are validated before any client is built.
"""

import sys

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from flowbridge.models.flow import FlowConfig


class ConfigurationError(Exception):
    """Raised when critical configuration is missing or invalid."""

    pass


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Flow connection - NO DEFAULTS, validated by get_flow_config()
    flow_api_key: str = ""
    flow_secret_key: str = ""
    flow_base_url: str = ""

    # Outbound request deadline in seconds
    flow_timeout_seconds: float = 30.0

    # Redacted signature trace for debugging rejected signatures
    flow_signing_trace: bool = False

    # Service identity
    service_name: str = "flowbridge"
    service_version: str = "0.1.0"

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"  # json or console

    # Observability - Metrics
    metrics_enabled: bool = True

    # Observability - Tracing
    tracing_enabled: bool = False
    otlp_endpoint: str = "http://otel-collector:4317"
    otlp_insecure: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("flow_base_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        """Endpoints start with '/', so the base URL must not end with one."""
        return value.strip().rstrip("/")


# Global settings instance - never fails on missing Flow credentials
settings = Settings()


def get_flow_config(config: Settings | None = None) -> FlowConfig:
    """
    FAIL FAST: Build the Flow connection triple from settings.

    The client MUST NOT be constructed if any credential is missing.

    Raises:
        ConfigurationError: If FLOW_API_KEY, FLOW_SECRET_KEY or FLOW_BASE_URL is empty
    """
    config = config or settings
    errors: list[str] = []

    if not config.flow_api_key:
        errors.append("FLOW_API_KEY is required but empty or missing")
    if not config.flow_secret_key:
        errors.append("FLOW_SECRET_KEY is required but empty or missing")
    if not config.flow_base_url:
        errors.append("FLOW_BASE_URL is required but empty or missing")
    elif not config.flow_base_url.startswith(("https://", "http://")):
        errors.append(f"FLOW_BASE_URL must be an http(s) URL, got: {config.flow_base_url[:20]}...")

    if errors:
        error_msg = "\n".join(
            [
                "",
                "=" * 60,
                "FLOW API CONFIGURATION ERROR - CLIENT CANNOT BE CREATED",
                "=" * 60,
                *[f"  ✗ {e}" for e in errors],
                "=" * 60,
                "",
            ]
        )
        print(error_msg, file=sys.stderr)
        raise ConfigurationError(error_msg)

    return FlowConfig(
        base_url=config.flow_base_url,
        api_key=config.flow_api_key,
        secret_key=config.flow_secret_key,
    )
