# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Audit logging decorator for governance operations."""

import functools
import time
from typing import Any, Awaitable, Callable, Optional, TypeVar, ParamSpec

from pydantic import BaseModel

from ..models.audit import AuditStatus
from ..services.audit_service import AuditService
from .correlation_middleware import current_correlation_id


# Type variables for generic decorator
P = ParamSpec("P")
R = TypeVar("R")


def _capture(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    return value


def targeted_resources(parameters: dict[str, Any]) -> list[str]:
    """
    Resource IDs an operation was asked to touch.

    Collects a ``resource_id`` argument and the ``resource_ids`` of any
    captured request body, first occurrence first.
    """
    resource_ids: list[str] = []
    for name, value in parameters.items():
        if name == "resource_id" and isinstance(value, str):
            resource_ids.append(value)
        elif isinstance(value, dict) and isinstance(value.get("resource_ids"), list):
            resource_ids.extend(str(item) for item in value["resource_ids"])
    return list(dict.fromkeys(resource_ids))


def audit_operation(
    operation: str,
    audit_service_provider: Callable[[], Optional[AuditService]],
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """
    Decorator to audit an async governance operation.

    Logs every invocation with its operation name, parameters, targeted
    resources, result status and error if any. Failures are logged and
    re-raised.

    Args:
        operation: Name recorded in the audit log (e.g. "labels.apply")
        audit_service_provider: Returns the audit service, or None when
            auditing is unavailable

    Returns:
        Decorator wrapping the operation
    """

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            audit_service = audit_service_provider()
            start_time = time.time()

            # Capture keyword parameters; FastAPI passes everything by keyword
            parameters = {name: _capture(value) for name, value in kwargs.items()}
            resource_ids = targeted_resources(parameters)
            correlation_id = current_correlation_id()

            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                if audit_service is not None:
                    audit_service.log_invocation(
                        operation=operation,
                        parameters=parameters,
                        status=AuditStatus.FAILURE,
                        error_message=str(e),
                        execution_time_ms=(time.time() - start_time) * 1000,
                        correlation_id=correlation_id,
                        resource_ids=resource_ids,
                    )
                raise

            if audit_service is not None:
                audit_service.log_invocation(
                    operation=operation,
                    parameters=parameters,
                    status=AuditStatus.SUCCESS,
                    execution_time_ms=(time.time() - start_time) * 1000,
                    correlation_id=correlation_id,
                    resource_ids=resource_ids,
                )
            return result

        return wrapper

    return decorator
