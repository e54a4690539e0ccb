"""
Core middleware: request IDs and request timing.
"""

from __future__ import annotations

import time
import uuid
from typing import Callable

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from backoffice.core.logging import get_struct_logger, request_id

logger = get_struct_logger(__name__)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Attach a request ID to every request.

    The ID is taken from the incoming header when present, stored on
    request.state and in the logging context, and echoed back.
    """

    def __init__(self, app: ASGIApp, header_name: str = "X-Request-ID"):
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        req_id = request.headers.get(self.header_name) or str(uuid.uuid4())
        request.state.request_id = req_id
        token = request_id.set(req_id)
        try:
            response = await call_next(request)
        finally:
            request_id.reset(token)

        response.headers[self.header_name] = req_id
        return response


class TimingMiddleware(BaseHTTPMiddleware):
    """Log each request with its processing time and set X-Process-Time."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time

        response.headers["X-Process-Time"] = f"{process_time:.4f}"
        logger.info(
            "request_completed",
            request_id=getattr(request.state, "request_id", None),
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            process_time=round(process_time, 4),
        )
        return response


def register_middlewares(app: FastAPI) -> None:
    """Register core middlewares; the last one added runs first."""
    app.add_middleware(TimingMiddleware)
    app.add_middleware(RequestIDMiddleware)
