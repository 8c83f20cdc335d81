"""HTTP middleware for the catalog API.

Two layers wrap every request: request correlation on the outside and a
last-resort error guard inside it.
"""

import time
from typing import Callable
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = structlog.get_logger()

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Tag each request with a correlation id.

    The id is taken from the ``X-Request-ID`` header when the caller sends
    one, otherwise a UUID4 is minted. It is stored on ``request.state`` for
    error bodies, bound into the structlog context for the duration of the
    request, and echoed back on the response.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        request.state.request_id = request_id
        structlog.contextvars.bind_contextvars(request_id=request_id)

        started = time.perf_counter()
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        try:
            response = await call_next(request)
            status_code = response.status_code
        finally:
            logger.info(
                "Request completed",
                method=request.method,
                path=request.url.path,
                status_code=status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            structlog.contextvars.unbind_contextvars("request_id", "subject_id")

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Turn exceptions that escaped every handler into a 500 error body."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            logger.exception(
                "Request failed",
                method=request.method,
                path=request.url.path,
                error=str(e),
            )
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={
                    "error_code": "INTERNAL_ERROR",
                    "message": "An internal error occurred",
                    "details": [],
                    "request_id": getattr(request.state, "request_id", None),
                },
            )


def setup_middleware(app: FastAPI) -> None:
    """Install the catalog middleware stack.

    Starlette runs the most recently added middleware first, so the error
    guard is added before request correlation to sit inside it.

    Args:
        app: FastAPI application instance.
    """
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(RequestIdMiddleware)
