import logging
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from time_tracking.exceptions import StoreUnavailable, TimeTrackingError

logger = logging.getLogger(__name__)

# Validation error types that mean "the field was not provided"
MISSING_TYPES = {"missing", "string_too_short"}


def error_response(status_code: int, message: str, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message},
        headers={"Access-Control-Allow-Origin": "*", **(headers or {})},
    )


def _field_name(loc) -> str:
    # ("body", "staffId") -> "staffId"; ("body",) -> "request body"
    fields = [str(part) for part in loc[1:] if not isinstance(part, int)]
    return ".".join(fields) if fields else "request body"


def describe_validation_errors(errors) -> str:
    missing = []
    invalid = []
    for error in errors:
        name = _field_name(error.get("loc", ()))
        if error.get("type") in MISSING_TYPES:
            missing.append(name)
        else:
            invalid.append(name)

    if missing:
        return "Missing " + " or ".join(dict.fromkeys(missing))
    return "Invalid " + ", ".join(dict.fromkeys(invalid))


async def time_tracking_error_handler(request: Request, exc: TimeTrackingError):
    if isinstance(exc, StoreUnavailable):
        # Detail stays in the server log, the client gets a generic message
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return error_response(exc.status_code, exc.public_message)

    return error_response(exc.status_code, exc.message)


async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    return error_response(400, describe_validation_errors(exc.errors()))


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, exc.detail, getattr(exc, "headers", None))


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(TimeTrackingError, time_tracking_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Last line of defence: anything not handled above becomes a 500 payload."""

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)

        except Exception:
            logger.exception("Unhandled error on %s %s", request.method, request.url.path)
            return error_response(500, "An internal error occurred.")
