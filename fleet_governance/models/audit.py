"""Audit records for label mutations."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_serializer


class AuditStatus(str, Enum):
    """Outcome of an audited label mutation."""

    SUCCESS = "success"
    FAILURE = "failure"


class AuditLogEntry(BaseModel):
    """
    One audited label mutation.

    ``resource_ids`` lists the resources the request targeted, whether or
    not the mutation went through, so the audit trail of a single resource
    can be read back with ``AuditService.get_logs(resource_id=...)``.
    """

    id: int | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    operation: str = Field(..., description='Mutation name, e.g. "labels.apply"')
    resource_ids: list[str] = Field(default_factory=list)
    parameters: dict[str, Any] = Field(default_factory=dict)
    status: AuditStatus
    error_message: str | None = None
    execution_time_ms: float | None = Field(default=None, ge=0)
    correlation_id: str | None = None

    @field_serializer("timestamp")
    def serialize_timestamp(self, timestamp: datetime) -> str:
        return timestamp.isoformat()
