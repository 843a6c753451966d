"""Pydantic models for parsing the config.yaml configuration file.

This module contains Pydantic models that correspond to the structure of config.yaml.
These models handle validation and type conversion of the YAML configuration data.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

DEFAULT_COLLECTIONS = ["category", "image", "product", "product_category", "spec"]


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default="INFO", description="Logging level")
    format: Literal["json", "plain"] = Field(default="plain", description="Log format for the file sink")
    file: str | None = Field(default=None, description="Log file path, no file sink when empty")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB before rotation")
    backup_count: int = Field(default=5, description="Number of rotated log files to keep")


class DatabaseConfig(BaseModel):
    """Database configuration model.

    ``url`` accepts either a SQLAlchemy URL (``postgresql://localhost/rel``) or a
    libpq keyword DSN (``dbname=rel sslmode=disable``). Structured fields, when
    set, take precedence over the matching part of ``url``.
    """

    url: str | None = Field(
        default="dbname=rel sslmode=disable",
        description="Database connection URL or libpq keyword DSN",
    )
    driver: str = Field(default="postgresql", description="SQLAlchemy driver used for DSNs and structured settings")
    host: str | None = Field(default=None, description="Database host")
    port: int | None = Field(default=None, description="Database port")
    database: str | None = Field(default=None, description="Database name")
    user: str | None = Field(default=None, description="Database username")
    password: str | None = Field(default=None, description="Database password")
    sslmode: str | None = Field(default=None, description="libpq sslmode")

    pool_size: int = Field(default=2, description="Connections kept idle in the pool")
    max_overflow: int = Field(default=0, description="Connections opened beyond pool_size")
    pool_timeout: int = Field(default=30, description="Pool checkout timeout in seconds")
    pool_recycle: int = Field(default=-1, description="Connection max lifetime in seconds, -1 for unlimited")
    trace: bool = Field(default=False, description="Log every SQL statement")


class NamingConfig(BaseModel):
    """Naming convention applied between Python names and database names."""

    style: Literal["snake", "verbatim"] = Field(default="snake", description="Identifier mapping style")


class DemoConfig(BaseModel):
    """Settings shared by the demo programs."""

    collections: list[str] = Field(
        default_factory=lambda: list(DEFAULT_COLLECTIONS),
        description="Tables emptied before each run",
    )


class AppConfig(BaseModel):
    """Application configuration model."""

    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Application environment"
    )


class ConfigData(BaseModel):
    """Root configuration model that matches the config.yaml structure."""

    app: AppConfig = Field(default_factory=AppConfig, description="Application configuration")
    logging: LoggingConfig = Field(default_factory=LoggingConfig, description="Logging configuration")
    database: DatabaseConfig = Field(default_factory=DatabaseConfig, description="Database configuration")
    naming: NamingConfig = Field(default_factory=NamingConfig, description="Naming convention")
    demo: DemoConfig = Field(default_factory=DemoConfig, description="Demo program settings")
