"""
Application configuration models and helpers.

Centralizes settings management so both the Lambda entry point and the local
FastAPI app share a consistent configuration surface.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

import os

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _load_env_file(path: str = ".env") -> None:
    """Best-effort load key=value pairs from a .env file without extra deps."""
    env_path = Path(path)
    if not env_path.exists():
        return
    for raw_line in env_path.read_text().splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            continue
        key = key.strip()
        if not key or key in os.environ:
            continue
        cleaned = value.strip().strip('"').strip("'")
        os.environ[key] = cleaned


_load_env_file()


class _Settings(BaseSettings):
    model_config = SettingsConfigDict(populate_by_name=True, extra="ignore")


class AWSSettings(_Settings):
    """DynamoDB tables backing the three record collections."""

    region_name: str = Field("eu-west-1", validation_alias="AWS_REGION")
    auth_code_table_name: str = Field(
        "OAuthAuthorizationCodes", validation_alias="AUTH_CODE_TABLE"
    )
    access_token_table_name: str = Field(
        "OAuthAccessTokens", validation_alias="ACCESS_TOKEN_TABLE"
    )
    user_table_name: str = Field("veluxusers", validation_alias="USER_TABLE")
    dynamodb_endpoint_url: Optional[str] = Field(
        None,
        validation_alias="DYNAMODB_ENDPOINT_URL",
        description="Override for DynamoDB Local or LocalStack.",
    )


class StoreSettings(_Settings):
    """Selects the record store implementation."""

    backend: Literal["dynamodb", "sqlite"] = Field(
        "dynamodb", validation_alias="RECORD_STORE_BACKEND"
    )
    sqlite_path: str = Field(
        "data/idp.sqlite3", validation_alias="RECORD_STORE_SQLITE_PATH"
    )


class OAuthSettings(_Settings):
    """Lifetimes and validation switches for the code/token exchange."""

    auth_code_ttl_seconds: int = Field(600, validation_alias="AUTH_CODE_TTL_SECONDS")
    access_token_ttl_seconds: int = Field(
        3600, validation_alias="ACCESS_TOKEN_TTL_SECONDS"
    )
    single_use_codes: bool = Field(True, validation_alias="AUTH_CODE_SINGLE_USE")
    enforce_client_binding: bool = Field(
        True,
        validation_alias="ENFORCE_CLIENT_BINDING",
        description="Reject exchanges whose client_id/redirect_uri differ from the authorize call.",
    )

    @field_validator("auth_code_ttl_seconds", "access_token_ttl_seconds")
    @classmethod
    def _positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("Lifetimes must be positive.")
        return value


class VeluxSettings(_Settings):
    """Connection details for the Velux ACTIVE identity and home APIs."""

    base_url: str = Field("https://app.velux-active.com", validation_alias="VELUX_BASE_URL")
    client_id: str = Field(..., validation_alias="VELUX_CLIENT_ID")
    client_secret: str = Field(..., validation_alias="VELUX_CLIENT_SECRET")
    user_prefix: str = Field("velux", validation_alias="VELUX_USER_PREFIX")
    timeout_seconds: float = Field(10.0, validation_alias="VELUX_TIMEOUT_SECONDS")
    retry_attempts: int = Field(3, validation_alias="VELUX_RETRY_ATTEMPTS")
    retry_backoff_seconds: float = Field(
        1.0, validation_alias="VELUX_RETRY_BACKOFF_SECONDS"
    )


class SecuritySettings(_Settings):
    """Security-related configuration."""

    credential_encryption_secret: str = Field(
        ...,
        validation_alias="CREDENTIAL_ENCRYPTION_SECRET",
        description=(
            "Secret used to derive the symmetric key for encrypting stored "
            "Velux passwords and tokens."
        ),
    )


class AppSettings(_Settings):
    """Root settings object shared by the Lambda handler and the FastAPI app."""

    environment: str = Field("development", validation_alias="APP_ENV")
    log_level: str = Field("INFO", validation_alias="APP_LOG_LEVEL")
    aws: AWSSettings = Field(default_factory=AWSSettings)
    store: StoreSettings = Field(default_factory=StoreSettings)
    oauth: OAuthSettings = Field(default_factory=OAuthSettings)
    velux: VeluxSettings = Field(default_factory=VeluxSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings object."""
    return AppSettings()  # type: ignore[call-arg]


__all__ = [
    "AppSettings",
    "AWSSettings",
    "OAuthSettings",
    "SecuritySettings",
    "StoreSettings",
    "VeluxSettings",
    "get_settings",
]
