"""Health check data models."""

from datetime import datetime, timezone

from pydantic import BaseModel, Field


class HealthStatus(BaseModel):
    """Health status response for the governance service."""

    status: str = Field(
        ...,
        description="Overall health status: 'healthy', 'degraded' or 'unhealthy'",
        examples=["healthy"],
    )
    version: str = Field(..., description="Version of the service", examples=["0.1.0"])
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Timestamp when health check was performed",
    )
    resource_count: int = Field(..., ge=0, description="Resources in the active inventory")
    redis_connected: bool = Field(..., description="Whether Redis cache is connected")
    sqlite_connected: bool = Field(..., description="Whether the audit database is accessible")
