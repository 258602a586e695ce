"""Pydantic models for parsing the config.yaml configuration file.

This module contains Pydantic models that correspond to the structure of config.yaml.
These models handle validation and type conversion of the YAML configuration data.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

# Signing key used outside production when jwt.secret is unset. Publicly known.
DEVELOPMENT_JWT_SECRET = "dev-only-insecure-signing-key-change-me-0123456789"


class RetryConfig(BaseModel):
    """Transient-failure retry policy for establishing database connectivity."""

    maximum_attempts: int = Field(
        default=5, description="Maximum connection attempts before giving up"
    )
    initial_interval_seconds: float = Field(
        default=0.5, description="Delay before the second attempt"
    )
    backoff_coefficient: float = Field(
        default=2.0, description="Multiplier applied to the delay after each attempt"
    )
    maximum_interval_seconds: float = Field(
        default=10.0, description="Upper bound for the delay between attempts"
    )


class DatabaseConfig(BaseModel):
    """Database configuration model."""

    url: str = Field(
        default="sqlite:///./storefront.db",
        description="Database connection URL",
    )
    pool_size: int = Field(default=20, description="Connection pool size")
    max_overflow: int = Field(default=10, description="Maximum pool overflow")
    pool_timeout: int = Field(default=30, description="Pool timeout in seconds")
    pool_recycle: int = Field(default=1800, description="Pool recycle time in seconds")
    echo: bool = Field(default=False, description="Echo SQL statements")
    connect_retry: RetryConfig = Field(
        default_factory=RetryConfig,
        description="Retry policy for transient connection failures",
    )

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")


class JWTConfig(BaseModel):
    """JWT issuance and validation configuration."""

    secret: str | None = Field(
        default=None, description="Symmetric key used to sign and verify tokens"
    )
    issuer: str = Field(
        default="storefront-api", description="Issuer (iss) for generated tokens"
    )
    audience: str = Field(
        default="storefront-clients", description="Audience (aud) for generated tokens"
    )
    allowed_algorithms: list[str] = Field(
        default_factory=lambda: ["HS256"],
        description="JWT algorithms allowed for token validation",
    )
    algorithm: str = Field(default="HS256", description="Signing algorithm")
    expires_in_seconds: int = Field(
        default=7200, description="Absolute token lifetime in seconds"
    )
    clock_skew: int = Field(default=0, description="Clock skew tolerance in seconds")


class PasswordPolicyConfig(BaseModel):
    """Rules a password must satisfy to be accepted at registration."""

    required_length: int = Field(default=8, description="Minimum password length")
    require_digit: bool = Field(default=True, description="Require a digit")
    require_lowercase: bool = Field(
        default=True, description="Require a lowercase letter"
    )
    require_uppercase: bool = Field(
        default=True, description="Require an uppercase letter"
    )
    require_non_alphanumeric: bool = Field(
        default=True, description="Require a non-alphanumeric character"
    )


class IdentityConfig(BaseModel):
    """Identity (credential store) configuration."""

    password: PasswordPolicyConfig = Field(
        default_factory=PasswordPolicyConfig, description="Password policy"
    )
    bcrypt_rounds: int = Field(default=12, description="bcrypt work factor")


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default="INFO", description="Logging level")
    format: Literal["json", "plain"] = Field(default="plain", description="Log format")
    file: str | None = Field(default=None, description="Log file path")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(
        default=5, description="Number of backup log files to keep"
    )


class SeedConfig(BaseModel):
    """Demo data seeding at startup."""

    enabled: bool | None = Field(
        default=None,
        description="Insert demo products when the table is empty. "
        "Unset means on outside production and off in production.",
    )


class AppConfig(BaseModel):
    """Application configuration model."""

    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Application environment"
    )
    host: str = Field(default="localhost", description="Application host")
    port: int = Field(default=8000, description="Application port")


class ConfigData(BaseModel):
    """Root configuration model that matches the config.yaml structure."""

    app: AppConfig = Field(
        default_factory=AppConfig, description="Application configuration"
    )
    database: DatabaseConfig = Field(
        default_factory=DatabaseConfig, description="Database configuration"
    )
    jwt: JWTConfig = Field(
        default_factory=JWTConfig, description="JWT configuration"
    )
    identity: IdentityConfig = Field(
        default_factory=IdentityConfig, description="Identity configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    seed: SeedConfig = Field(
        default_factory=SeedConfig, description="Demo data configuration"
    )

    def resolve_defaults(self) -> ConfigData:
        """Return a copy with the environment-dependent defaults filled in.

        Outside production an unset ``jwt.secret`` becomes
        ``DEVELOPMENT_JWT_SECRET``. An unset ``seed.enabled`` becomes true
        everywhere except production. Explicit values are never replaced.
        """
        is_production = self.app.environment == "production"

        jwt = self.jwt
        if jwt.secret is None and not is_production:
            jwt = jwt.model_copy(update={"secret": DEVELOPMENT_JWT_SECRET})

        seed = self.seed
        if seed.enabled is None:
            seed = seed.model_copy(update={"enabled": not is_production})

        return self.model_copy(update={"jwt": jwt, "seed": seed})

    def validate_runtime(self) -> None:
        """Fail fast on configuration that cannot work in the current environment."""
        if self.app.environment != "production":
            return
        if not self.jwt.secret:
            raise ValueError("jwt.secret must be configured in production")
        if self.jwt.secret == DEVELOPMENT_JWT_SECRET:
            raise ValueError("jwt.secret must not be the development key in production")
        if self.database.is_sqlite:
            raise ValueError("SQLite is not supported in production")
        if self.seed.enabled:
            raise ValueError("seed.enabled must be false in production")
