# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""HTTP middleware for correlation ID propagation.

The correlation ID of the request being served lives in a context
variable for the duration of the request, so log lines and audit
records written while serving it can be tied together.
"""

import contextvars
import logging
import re
import time
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

logger = logging.getLogger(__name__)

_CORRELATION_ID_PATTERN = re.compile(r"[\w.:-]{1,128}", re.ASCII)

_current_correlation_id: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "correlation_id", default=None
)


def current_correlation_id() -> Optional[str]:
    """Correlation ID bound to the current context, or None outside a request."""
    return _current_correlation_id.get()


@contextmanager
def correlation_scope(correlation_id: str) -> Iterator[str]:
    """Bind ``correlation_id`` to the current context until the block exits."""
    token = _current_correlation_id.set(correlation_id)
    try:
        yield correlation_id
    finally:
        _current_correlation_id.reset(token)


def resolve_correlation_id(header_value: Optional[str]) -> str:
    """
    Pick the correlation ID for a request.

    A caller-supplied ID is reused when it is 1-128 ASCII word characters,
    dots, colons or dashes. Anything else is replaced by a fresh UUID4.
    """
    if header_value and _CORRELATION_ID_PATTERN.fullmatch(header_value):
        return header_value
    return str(uuid.uuid4())


class CorrelationIDMiddleware(BaseHTTPMiddleware):
    """
    Tags every request with a correlation ID.

    The ID is bound to the request context, stored on ``request.state``
    and echoed in the ``X-Correlation-ID`` response header.
    """

    CORRELATION_ID_HEADER = "X-Correlation-ID"

    async def dispatch(
        self,
        request: Request,
        call_next,
    ) -> Response:
        correlation_id = resolve_correlation_id(request.headers.get(self.CORRELATION_ID_HEADER))
        request.state.correlation_id = correlation_id

        with correlation_scope(correlation_id):
            start_time = time.time()
            logger.debug(f"{request.method} {request.url.path} started")

            response = await call_next(request)
            response.headers[self.CORRELATION_ID_HEADER] = correlation_id

            logger.debug(
                f"{request.method} {request.url.path} -> {response.status_code} "
                f"in {(time.time() - start_time) * 1000:.1f}ms"
            )
        return response
