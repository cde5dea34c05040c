"""Configuration management for the fleet governance engine.

This module handles loading and validating configuration from environment
variables with sensible defaults.
"""

from typing import Optional
from pydantic import Field, AliasChoices
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have sensible defaults for local development.
    In production, these should be set via environment variables
    or a .env file.
    """

    # Server Configuration
    host: str = Field(
        default="0.0.0.0",
        description="Host to bind the server to",
        validation_alias=AliasChoices("FLEET_SERVER_HOST", "HOST")
    )
    port: int = Field(
        default=8080,
        description="Port to run the server on",
        validation_alias=AliasChoices("FLEET_SERVER_PORT", "PORT")
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
        validation_alias="LOG_LEVEL"
    )
    environment: str = Field(
        default="development",
        description="Environment name (development, staging, production)",
        validation_alias=AliasChoices("ENVIRONMENT", "ENV")
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
        validation_alias="DEBUG"
    )

    # Redis Configuration
    redis_enabled: bool = Field(
        default=True,
        description="Cache query results in Redis",
        validation_alias="REDIS_ENABLED"
    )
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL",
        validation_alias="REDIS_URL"
    )
    redis_ttl: int = Field(
        default=300,
        description="TTL for cached query results in seconds",
        validation_alias="REDIS_TTL"
    )

    # Database Configuration
    audit_db_path: str = Field(
        default="audit_logs.db",
        description="Path to the audit logs SQLite database",
        validation_alias="AUDIT_DB_PATH"
    )

    # Inventory Configuration
    inventory_path: Optional[str] = Field(
        default=None,
        description="Path to an inventory JSON snapshot (a mock fleet is generated if not set)",
        validation_alias=AliasChoices("INVENTORY_PATH", "INVENTORY_FILE_PATH")
    )
    mock_fleet_size: int = Field(
        default=30,
        ge=0,
        description="Number of mock resources generated when no inventory file is set",
        validation_alias="MOCK_FLEET_SIZE"
    )
    mock_fleet_seed: Optional[int] = Field(
        default=None,
        description="Seed for reproducible mock fleets",
        validation_alias="MOCK_FLEET_SEED"
    )

    # Table Configuration
    default_page_size: int = Field(
        default=25,
        ge=1,
        description="Rows per page when a query does not specify one",
        validation_alias="DEFAULT_PAGE_SIZE"
    )
    max_page_size: int = Field(
        default=500,
        ge=1,
        description="Largest accepted page size",
        validation_alias="MAX_PAGE_SIZE"
    )

    # Naming Advisory Configuration
    advisory_url: Optional[str] = Field(
        default=None,
        description="Naming advisory endpoint (local heuristic used if not set)",
        validation_alias="ADVISORY_URL"
    )
    advisory_api_key: Optional[str] = Field(
        default=None,
        description="Bearer token for the naming advisory endpoint",
        validation_alias="ADVISORY_API_KEY"
    )
    advisory_timeout_seconds: float = Field(
        default=15.0,
        gt=0,
        description="Timeout for naming advisory requests",
        validation_alias="ADVISORY_TIMEOUT_SECONDS"
    )

    # Governance Configuration
    default_actor: str = Field(
        default="system",
        description="Actor recorded in label history when a request names none",
        validation_alias="DEFAULT_ACTOR"
    )

    model_config = SettingsConfigDict(
        env_prefix="",  # No prefix for environment variables
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
    )


def get_settings() -> Settings:
    """
    Get application settings.

    Loads settings from environment variables and .env file.

    Returns:
        Settings instance with all configuration values
    """
    return Settings()


# Global settings instance (lazy loaded)
_settings: Optional[Settings] = None


def settings() -> Settings:
    """
    Get the global settings instance.

    Creates the settings instance on first call and caches it.

    Returns:
        Global Settings instance
    """
    global _settings
    if _settings is None:
        _settings = get_settings()
    return _settings
