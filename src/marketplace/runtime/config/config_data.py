"""Pydantic models for parsing the config.yaml configuration file.

This module contains Pydantic models that correspond to the structure of config.yaml.
These models handle validation and type conversion of the YAML configuration data.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, computed_field, field_validator


class CORSConfig(BaseModel):
    """CORS configuration for the application."""

    origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:3001"]
    )
    allow_credentials: bool = True
    allow_methods: list[str] = Field(
        default=["GET", "POST", "PATCH", "DELETE", "OPTIONS"]
    )
    allow_headers: list[str] = Field(default=["Authorization", "Content-Type"])


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default="INFO", description="Logging level")
    format: Literal["json", "plain"] = Field(default="plain", description="Log format")
    file: str | None = Field(default=None, description="Log file path")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(
        default=5, description="Number of backup log files to keep"
    )


class DatabaseConfig(BaseModel):
    """Database configuration model."""

    url: str = Field(
        default="sqlite:///./marketplace.db",
        description="Database connection URL (sqlite or postgresql)",
    )
    pool_size: int = Field(default=10, description="Connection pool size")
    max_overflow: int = Field(default=10, description="Maximum pool overflow")
    pool_timeout: int = Field(default=30, description="Pool timeout in seconds")
    pool_recycle: int = Field(default=1800, description="Pool recycle time in seconds")
    echo: bool = Field(default=False, description="Echo SQL statements")
    auto_migrate: bool = Field(
        default=True, description="Create missing tables on application startup"
    )

    @computed_field
    @property
    def backend(self) -> str:
        """Name of the SQL engine the URL points at."""
        from sqlalchemy.engine import make_url

        return make_url(self.url).get_backend_name()


class AppConfig(BaseModel):
    """Application configuration model."""

    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Application environment"
    )
    name: str = Field(default="Marketplace API", description="Application title")
    host: str = Field(default="localhost", description="Application host")
    port: int = Field(default=8080, description="Application port")
    api_prefix: str = Field(default="/api/v1", description="Prefix for business routes")
    cors: CORSConfig = Field(
        default_factory=CORSConfig, description="CORS configuration"
    )


class PaginationConfig(BaseModel):
    """Pagination defaults applied by the list operations."""

    default_page_size: int = Field(default=10, ge=1)
    max_page_size: int = Field(default=100, ge=1)


class ValidationConfig(BaseModel):
    """Input validation limits."""

    min_password_length: int = Field(default=8, ge=1)
    max_name_length: int = Field(default=100, ge=1)


class BusinessRulesConfig(BaseModel):
    """Business rules enforced by the product service."""

    max_products_per_user: int = Field(default=1000, ge=0)
    default_product_status: str = Field(default="active", min_length=1)


class AuthConfig(BaseModel):
    """Credential and token settings."""

    jwt_secret: str | None = Field(
        default=None, description="Shared secret used to sign access tokens"
    )
    token_expiration: int = Field(
        default=72, ge=1, description="Token lifetime in hours"
    )
    password_cost: int = Field(default=10, description="bcrypt cost factor")
    algorithm: Literal["HS256", "HS384", "HS512"] = Field(default="HS256")

    @field_validator("password_cost")
    @classmethod
    def _check_cost(cls, value: int) -> int:
        if not 4 <= value <= 31:
            raise ValueError("password_cost must be between 4 and 31")
        return value


class ConstantsConfig(BaseModel):
    """Business constants shared by the service layer."""

    pagination: PaginationConfig = Field(default_factory=PaginationConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    business_rules: BusinessRulesConfig = Field(default_factory=BusinessRulesConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)


class ConfigData(BaseModel):
    """Root configuration model that matches the config.yaml structure."""

    app: AppConfig = Field(
        default_factory=AppConfig, description="Application configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    database: DatabaseConfig = Field(
        default_factory=DatabaseConfig, description="Database configuration"
    )
    constants: ConstantsConfig = Field(
        default_factory=ConstantsConfig, description="Business constants"
    )
