"""Terminal error handling — every failure becomes the error envelope.

Learn: normalize_error() is a pure function from an exception to
(status, body). The kind table below is the whole mapping; the FastAPI
handlers registered by register_error_handlers() only translate
framework exceptions into tagged errors, log, and render.

Envelope: {"success": false, "error": str | list[str], field?, errors?, stack?}
"""

import traceback
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from inkwell.errors import (
    AccessError,
    AppError,
    ErrorKind,
    NotFoundError,
    ServerError,
    ValidationFailedError,
)
from inkwell.validation import violation_details, violations_from_errors

# kind → (status, fixed client message)
_FIXED_RESPONSES: dict[ErrorKind, tuple[int, str]] = {
    ErrorKind.INVALID_ID: (404, "Resource not found"),
    ErrorKind.INVALID_TOKEN: (401, "Invalid token"),
    ErrorKind.TOKEN_EXPIRED: (401, "Token expired"),
}


def _stack(exc: BaseException) -> str:
    return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))


def normalize_error(exc: Exception, *, debug: bool) -> tuple[int, dict[str, Any]]:
    """Map any exception to (HTTP status, error envelope).

    ``debug`` is true outside production; it exposes messages of
    unexpected exceptions and adds a stack trace to fallback responses.
    """
    error = exc if isinstance(exc, AppError) else ServerError(exc, expose=debug)

    if error.kind in _FIXED_RESPONSES:
        status, message = _FIXED_RESPONSES[error.kind]
        return status, {"success": False, "error": message}

    if error.kind is ErrorKind.DUPLICATE_KEY:
        return 400, {
            "success": False,
            "error": f"{error.field} already exists",
            "field": error.field,
        }

    if error.kind is ErrorKind.VALIDATION_FAILED:
        return 400, {
            "success": False,
            "error": [v.message for v in error.violations],
            "errors": violation_details(error.violations),
        }

    status = error.status_code or 500
    body: dict[str, Any] = {"success": False, "error": error.message or "Server Error"}
    if debug:
        body["stack"] = _stack(getattr(error, "cause", error))
    return status, body


def register_error_handlers(app: FastAPI) -> None:
    """Install the access-error handler and the terminal error handler."""

    def respond(request: Request, exc: Exception) -> JSONResponse:
        settings = request.app.state.settings
        logger = request.app.state.logger
        status, body = normalize_error(exc, debug=not settings.is_production)
        fields = {
            "method": request.method,
            "path": request.url.path,
            "status": status,
            "error": getattr(exc, "message", None) or str(exc) or type(exc).__name__,
        }
        if status >= 500:
            logger.error("request.error", exc_info=exc, **fields)
        else:
            logger.warning("request.error", **fields)
        return JSONResponse(status_code=status, content=body)

    @app.exception_handler(AccessError)
    async def handle_access_error(request: Request, exc: AccessError) -> JSONResponse:
        """Authentication/authorization rejections answer immediately."""
        request.app.state.logger.info(
            "auth.rejected",
            method=request.method,
            path=request.url.path,
            kind=exc.kind.value,
        )
        headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": exc.label, "message": exc.message},
            headers=headers,
        )

    @app.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
        return respond(request, exc)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return respond(request, ValidationFailedError(violations_from_errors(exc.errors())))

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        # Unmatched routes arrive here as a bare 404
        if exc.status_code == 404:
            return respond(request, NotFoundError(f"Not Found - {request.url.path}"))
        return respond(request, AppError(str(exc.detail), status_code=exc.status_code))

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        return respond(request, exc)
