"""
Application configuration using Pydantic Settings
"""

from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Repository root, holding alembic.ini and the migration scripts
PROJECT_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Application
    app_name: str = Field(default="HospitalBackend", description="Application name")
    app_env: str = Field(default="development", description="Environment")
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Root log level")
    secret_key: str = Field(description="Secret key for JWT encoding")
    api_v1_prefix: str = Field(default="/api/v1", description="API v1 prefix")

    # Database
    postgres_host: str = Field(default="localhost")
    postgres_port: int = Field(default=5432)
    postgres_user: str = Field(default="hms_admin")
    postgres_password: str = Field(default="hms_secure_password_123")
    postgres_db: str = Field(default="hms_db")
    database_url: str | None = Field(default=None)
    db_pool_size: int = Field(default=10, ge=1)
    db_max_overflow: int = Field(default=20, ge=0)

    # Tenancy
    tenant_header: str = Field(default="X-Tenant-ID")
    admin_tenant_id: str = Field(
        default="admin",
        description="Reserved tenant identifier of the platform administrators",
    )
    migrations_table: str = Field(
        default="alembic_version",
        description="Migrations table name, shared by the public and every tenant schema",
    )
    alembic_config_path: str = Field(
        default="alembic.ini",
        description="Alembic config file; relative paths resolve against the project root",
        validate_default=True,
    )

    # Tokens and one-time codes
    access_token_expire_minutes: int = Field(default=60 * 24, ge=1)
    verification_code_ttl_minutes: int = Field(default=60 * 24, ge=1)
    reset_code_ttl_minutes: int = Field(default=60, ge=1)

    # AWS
    aws_region: str = Field(default="us-east-1")
    aws_endpoint_url: str | None = Field(
        default=None,
        description="Override endpoint (e.g. LocalStack) for every AWS client",
    )
    cognito_user_pool_id: str = Field(default="")
    cognito_client_id: str = Field(default="")
    cognito_client_secret: str | None = Field(default=None)
    email_sender: str = Field(default="noreply@hospital.example.com")
    admin_email_sender: str = Field(default="noreply@admin.hospital.example.com")
    sns_topic_arn: str | None = Field(default=None)
    s3_bucket_name: str = Field(default="hospital-medical-records")
    presigned_url_expires_in: int = Field(default=3600, ge=60, le=604800)

    # CORS
    cors_origins: List[str] = Field(
        default=["http://localhost:3001", "http://localhost:3002"]
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            import json
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                return [origin.strip() for origin in v.split(",")]
        return v

    @field_validator("alembic_config_path")
    @classmethod
    def resolve_alembic_config_path(cls, v: str) -> str:
        path = Path(v).expanduser()
        if not path.is_absolute():
            path = PROJECT_ROOT / path
        return str(path)

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        return str(v).upper()

    @property
    def async_database_url(self) -> str:
        """Build async database URL."""
        if self.database_url:
            return self.database_url
        return (
            f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()


settings = get_settings()
