"""HTTP middleware for the fleet governance service."""

from .audit_middleware import audit_operation
from .correlation_middleware import (
    CorrelationIDMiddleware,
    correlation_scope,
    current_correlation_id,
)

__all__ = [
    "audit_operation",
    "CorrelationIDMiddleware",
    "correlation_scope",
    "current_correlation_id",
]
