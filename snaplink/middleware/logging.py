"""
Request logging middleware for FastAPI using Loguru.

Every request gets an ``X-Request-ID`` and one ``REQUEST``-level log line
with its method, path, status, client IP and latency.
"""

import time
import uuid

from fastapi import Request, Response
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware

from snaplink.api.dependencies import get_client_ip
from snaplink.core.logging import REQUEST_LEVEL


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Times each request and logs it once the response is ready."""

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        start_time = time.time()
        with logger.contextualize(request_id=request_id):
            response = await call_next(request)
        process_time_ms = round((time.time() - start_time) * 1000, 2)

        response.headers["X-Request-ID"] = request_id

        log_record = {
            "request_id": request_id,
            "client_ip": get_client_ip(request),
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "process_time_ms": process_time_ms,
        }
        if request.query_params:
            log_record["query_params"] = dict(request.query_params)

        logger.log(
            REQUEST_LEVEL,
            "{method} {path} {status_code} {process_time_ms}ms {client_ip} {request_id}",
            **log_record
        )
        return response
