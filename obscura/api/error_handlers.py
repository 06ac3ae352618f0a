"""Error Handlers — global exception handlers for the Obscura API.

Invariants:
    - ObscuraError → structured JSON with error code, message, severity
    - RequestValidationError → 400 with field-level error details
    - Framework 404/405 use the same {"error": ...} envelope, Allow header kept
    - Exception (catch-all) → 500, never leaks internal details

Design Decisions:
    - Layered handlers: domain (ObscuraError), validation (Pydantic),
      routing (Starlette HTTPException), catch-all (Exception)
    - Extracted from main.py to keep the composition root small
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from obscura.core.errors import (
    ErrorCategory, ErrorSeverity, FieldViolation, MalformedRequestError,
    ObscuraError,
)

HTTP_ERROR_CODES = {
    404: "ROUTE_NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
}

logger = logging.getLogger(__name__)


class UTF8JSONResponse(JSONResponse):
    """JSON response that states its charset explicitly."""
    media_type = "application/json; charset=utf-8"


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_obscura_error_handler(app)
    _register_validation_error_handler(app)
    _register_http_error_handler(app)
    _register_generic_error_handler(app)


def _register_obscura_error_handler(app: FastAPI) -> None:
    """Register Obscura domain/infrastructure error handler."""

    @app.exception_handler(ObscuraError)
    async def obscura_error_handler(request: Request, exc: ObscuraError):
        """Handle all Obscura domain/infrastructure errors."""
        log = logger.error if exc.http_status >= 500 else logger.warning
        log(
            f"ObscuraError: {exc.message}",
            extra={
                "error_code": exc.code,
                "path": request.url.path,
                "story_id": exc.context.story_id,
            },
        )
        return UTF8JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors (malformed body or path)."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return UTF8JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_http_error_handler(app: FastAPI) -> None:
    """Register framework HTTP error handler (unknown route, wrong method)."""

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        """Render routing errors in the same envelope as domain errors."""
        error = ObscuraError(
            str(exc.detail),
            HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR"),
            ErrorCategory.RESOURCE_NOT_FOUND
            if exc.status_code == status.HTTP_404_NOT_FOUND
            else ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING,
            http_status=exc.status_code,
        )
        return UTF8JSONResponse(
            status_code=exc.status_code,
            content=error.to_response(),
            headers=exc.headers,
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return UTF8JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                    "category": "internal",
                    "severity": ErrorSeverity.CRITICAL.value,
                },
            },
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    """Build structured malformed-request response."""
    return MalformedRequestError(
        "Malformed request",
        [
            FieldViolation(
                field=".".join(str(loc) for loc in e["loc"]),
                message=e["msg"],
                type=e["type"],
            )
            for e in exc.errors()
        ],
    ).to_response()
