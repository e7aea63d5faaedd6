"""Translate errors into HTTP responses at the application boundary"""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from slowapi.errors import RateLimitExceeded
from starlette.background import BackgroundTask

from pricereports.api.responses import envelope
from pricereports.core.errors import (
    ErrorKind,
    MalformedBodyError,
    ReportsError,
    UnknownError,
    ValidationError,
)

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.UNSUPPORTED_VERSION: 400,
    ErrorKind.MALFORMED_BODY: 406,
    ErrorKind.STORE: 500,
    ErrorKind.UNKNOWN: 500,
}


def error_response(request: Request, error: ReportsError):
    status = STATUS_BY_KIND[error.kind]
    background = None
    if status >= 500:
        logger.error(
            "Error in %s %s: %s", request.method, request.url.path, error.message,
            exc_info=error.__cause__ or error,
        )
        notifier = getattr(request.app.state, "notifier", None)
        if notifier is not None:
            background = BackgroundTask(
                notifier.report_critical,
                f"Error in {request.method} {request.url.path}: {error.message}",
            )
    return envelope(status, error.message, error.data, background=background)


async def reports_error_handler(request: Request, exc: ReportsError):
    return error_response(request, exc)


def _field_path(loc) -> str:
    # loc starts with "body" / "query"
    return ".".join(str(part) for part in loc[1:]) or str(loc[0])


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if any(error.get("type") == "json_invalid" for error in errors):
        return error_response(request, MalformedBodyError())

    messages = [f"{_field_path(error['loc'])}: {error['msg']}" for error in errors]
    if errors and all(error["loc"][0] == "query" for error in errors):
        error = ValidationError("Bad request: Invalid query parameters", data=messages)
    else:
        error = ValidationError(data=messages)
    return error_response(request, error)


async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    return envelope(429, f"Too many requests: {exc.detail}")


async def unhandled_error_handler(request: Request, exc: Exception):
    unknown = UnknownError()
    unknown.__cause__ = exc
    return error_response(request, unknown)


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ReportsError, reports_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
