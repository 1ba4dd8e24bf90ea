"""FastAPI middleware for request ID injection and problem+json error handling."""

from collections.abc import Callable
from contextvars import ContextVar
from typing import Any
from uuid import uuid4

import structlog
from fastapi import Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from shared.exceptions import ProblemDetailError, ValidationError

request_id_var: ContextVar[str] = ContextVar("request_id", default="")

logger = structlog.get_logger()


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Inject a unique request ID into every request, response and log line.

    Header name: X-Request-ID. Default format: UUID v4.
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Callable[..., Response]]
    ):
        rid = request.headers.get("X-Request-ID", str(uuid4()))
        request_id_var.set(rid)
        structlog.contextvars.bind_contextvars(request_id=rid)

        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = rid
            return response
        finally:
            structlog.contextvars.unbind_contextvars("request_id")


def _problem_response(request: Request, body: dict[str, Any]) -> JSONResponse:
    body["instance"] = str(request.url.path)
    return JSONResponse(
        status_code=body["status"],
        content=body,
        media_type="application/problem+json",
    )


async def problem_detail_handler(request: Request, exc: ProblemDetailError) -> JSONResponse:
    """Convert ProblemDetailError exceptions into RFC 9457 responses."""
    logger.info("problem_response", title=exc.title, status=exc.status, detail=exc.detail)
    body: dict[str, Any] = {
        "type": exc.type_uri,
        "title": exc.title,
        "status": exc.status,
        "detail": exc.detail,
    }
    if exc.violations:
        body["violations"] = exc.violations
    return _problem_response(request, body)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Convert FastAPI/Pydantic validation errors (bad HH:MM, level out of range) into RFC 9457.

    Every 422 carries a violations array instead of FastAPI's default {detail: [...]}.
    """
    violations = []
    for err in exc.errors():
        loc = err.get("loc", ())
        field = ".".join(str(part) for part in loc if part not in ("body", "query", "path"))
        violations.append(
            {
                "field": field or "(root)",
                "message": err.get("msg", "Validation error"),
                "constraint": err.get("type", "validation"),
            }
        )

    return await problem_detail_handler(request, ValidationError(violations))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Convert generic HTTP exceptions (404 route, 405 method) into RFC 9457 format."""
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return _problem_response(
        request,
        {
            "type": "about:blank",
            "title": detail or "Error",
            "status": exc.status_code,
            "detail": detail,
        },
    )
