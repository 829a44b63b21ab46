"""
Error handling middleware with error sanitization.

Domain errors carry their own HTTP status; everything else is mapped here.
Messages are scrubbed of credentials and contact details before they are
logged or returned.
"""

import logging
import re
import traceback
from typing import Any, Callable, Optional
from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy.exc import SQLAlchemyError, IntegrityError, OperationalError

from core.exceptions import ATSError

logger = logging.getLogger(__name__)

# Patterns for sensitive data that should never be logged
SENSITIVE_PATTERNS = [
    re.compile(r'password["\s:=]+[^"\s,}]+', re.IGNORECASE),
    re.compile(r'token["\s:=]+[^"\s,}]+', re.IGNORECASE),
    re.compile(r'api[_-]?key["\s:=]+[^"\s,}]+', re.IGNORECASE),
    re.compile(r'secret["\s:=]+[^"\s,}]+', re.IGNORECASE),
    re.compile(r'authorization["\s:]+[^"\s,}]+', re.IGNORECASE),
    re.compile(r'\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b'),  # Email
]


def sanitize_error_message(message: Any) -> str:
    """
    Remove sensitive information from error messages.

    Args:
        message: Original error message

    Returns:
        Sanitized error message
    """
    sanitized = str(message)
    for pattern in SENSITIVE_PATTERNS:
        sanitized = pattern.sub('[REDACTED]', sanitized)
    return sanitized


def get_safe_error_details(exc: Exception, include_traceback: bool = False) -> dict[str, Any]:
    """Type and sanitized message of an exception, plus the traceback in debug mode."""
    details = {
        "type": type(exc).__name__,
        "message": sanitize_error_message(str(exc)),
    }
    if include_traceback:
        details["traceback"] = traceback.format_exc()
    return details


def format_validation_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    """Flatten pydantic validation errors; input values are never echoed back."""
    return [
        {
            "field": ".".join(str(loc) for loc in error["loc"]),
            "message": sanitize_error_message(error["msg"]),
            "type": error["type"],
        }
        for error in exc.errors()
    ]


def error_body(
    code: str,
    message: str,
    path: str,
    method: str,
    details: Optional[Any] = None,
    request_id: Optional[str] = None,
) -> dict[str, Any]:
    """Structured error payload shared by all handlers."""
    body = {
        "code": code,
        "message": message,
        "path": path,
        "method": method,
    }
    if details is not None:
        body["details"] = details
    if request_id:
        body["request_id"] = request_id
    return {"error": body}


def classify_exception(exc: Exception, debug: bool = False) -> tuple[int, str, str, Optional[Any]]:
    """
    Map an exception to (status code, error code, message, details).

    Args:
        exc: The exception raised while handling a request
        debug: Include tracebacks for server errors

    Returns:
        Response parts for the error payload
    """
    if isinstance(exc, ATSError):
        return exc.status_code, exc.error_code, sanitize_error_message(exc.message), None

    if isinstance(exc, StarletteHTTPException):
        return exc.status_code, "HTTP_EXCEPTION", sanitize_error_message(exc.detail), None

    if isinstance(exc, RequestValidationError):
        return (
            status.HTTP_422_UNPROCESSABLE_CONTENT,
            "VALIDATION_ERROR",
            "Request validation failed",
            format_validation_errors(exc),
        )

    details = get_safe_error_details(exc, include_traceback=True) if debug else None

    if isinstance(exc, IntegrityError):
        return status.HTTP_409_CONFLICT, "INTEGRITY_ERROR", "Database integrity constraint violated", details

    if isinstance(exc, OperationalError):
        return (
            status.HTTP_503_SERVICE_UNAVAILABLE,
            "DATABASE_ERROR",
            "Database service temporarily unavailable",
            None,
        )

    if isinstance(exc, SQLAlchemyError):
        return status.HTTP_500_INTERNAL_SERVER_ERROR, "DATABASE_ERROR", "A database error occurred", details

    return status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_SERVER_ERROR", "An unexpected error occurred", details


def log_exception(exc: Exception, status_code: int, method: str, path: str) -> None:
    """Client errors are warnings; server errors are logged with their traceback."""
    summary = f"{method} {path} - {type(exc).__name__}: {sanitize_error_message(str(exc))}"
    if status_code >= 500:
        logger.error(f"Request failed ({status_code}): {summary}", exc_info=exc)
    else:
        logger.warning(f"Request rejected ({status_code}): {summary}")


class ErrorHandlingMiddleware:
    """
    Outermost ASGI middleware turning escaped exceptions into JSON errors.

    Exceptions are normally handled by the handlers registered in
    setup_error_handlers; this catches anything raised outside the router,
    such as failures inside other middleware.
    """

    def __init__(self, app: Callable, debug: bool = False):
        self.app = app
        self.debug = debug

    async def __call__(self, scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        try:
            await self.app(scope, receive, send)
        except Exception as exc:
            response = self._handle_exception(exc, scope)
            await response(scope, receive, send)

    def _handle_exception(self, exc: Exception, scope: dict) -> Response:
        path = scope.get("path", "unknown")
        method = scope.get("method", "unknown")
        status_code, code, message, details = classify_exception(exc, self.debug)
        log_exception(exc, status_code, method, path)

        request_id = None
        for name, value in scope.get("headers", []):
            if name == b"x-request-id":
                request_id = value.decode()
                break

        return JSONResponse(
            status_code=status_code,
            content=error_body(code, message, path, method, details, request_id),
        )


def setup_error_handlers(app, debug: bool = False):
    """
    Set up exception handlers for FastAPI application.

    Args:
        app: FastAPI application instance
        debug: Include tracebacks for server errors
    """

    async def handle(request: Request, exc: Exception) -> JSONResponse:
        status_code, code, message, details = classify_exception(exc, debug)
        log_exception(exc, status_code, request.method, request.url.path)
        return JSONResponse(
            status_code=status_code,
            content=error_body(
                code,
                message,
                str(request.url.path),
                request.method,
                details,
                request.headers.get("x-request-id"),
            ),
        )

    app.add_exception_handler(ATSError, handle)
    app.add_exception_handler(StarletteHTTPException, handle)
    app.add_exception_handler(RequestValidationError, handle)
    app.add_exception_handler(SQLAlchemyError, handle)
    app.add_exception_handler(Exception, handle)
