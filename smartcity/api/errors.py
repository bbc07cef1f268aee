"""Exception handlers installed on the service apps.

The identity service answers errors as ``{"detail": ...}``. The admin service
wraps every failure in the same ``ApiResponse`` envelope as its successes, with
``success=False``, a short ``message`` and the specific ``error``.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from smartcity.core.errors import INTERNAL_ERROR_DETAIL
from smartcity.schemas.admin import ApiResponse

logger = logging.getLogger(__name__)

# Short summary per status for the admin envelope's "message"; the detail goes in "error".
ENVELOPE_MESSAGES: dict[int, str] = {
    status.HTTP_400_BAD_REQUEST: "Invalid input",
    status.HTTP_401_UNAUTHORIZED: "Authentication required",
    status.HTTP_403_FORBIDDEN: "Access denied",
    status.HTTP_404_NOT_FOUND: "Not found",
    status.HTTP_405_METHOD_NOT_ALLOWED: "Method not allowed",
    status.HTTP_500_INTERNAL_SERVER_ERROR: "An unexpected error occurred",
    status.HTTP_502_BAD_GATEWAY: "Service communication failed",
    status.HTTP_503_SERVICE_UNAVAILABLE: "Service communication failed",
}


def _validation_errors(exc: RequestValidationError) -> list[dict]:
    # Submitted values (passwords included) are never echoed back.
    return jsonable_encoder(exc.errors(), exclude={"input", "ctx"})


def _log_unhandled(request: Request) -> None:
    logger.exception(
        "Unhandled error",
        extra={"method": request.method, "path": request.url.path},
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed or missing input is a 400, not FastAPI's default 422."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": _validation_errors(exc)},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log the failure in full; the client only learns that something went wrong."""
    _log_unhandled(request)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": INTERNAL_ERROR_DETAIL},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


def envelope_response(
    status_code: int,
    error: str,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body = ApiResponse(
        success=False,
        message=ENVELOPE_MESSAGES.get(status_code, "Request failed"),
        error=error,
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json"),
        headers=headers,
    )


async def envelope_http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return envelope_response(exc.status_code, str(exc.detail), headers=exc.headers)


async def envelope_validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    messages = []
    for err in _validation_errors(exc):
        field = ".".join(str(part) for part in err["loc"] if part != "body")
        messages.append(f"{field}: {err['msg']}" if field else err["msg"])
    return envelope_response(status.HTTP_400_BAD_REQUEST, "; ".join(messages))


async def envelope_unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    _log_unhandled(request)
    return envelope_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_DETAIL)


def register_envelope_exception_handlers(app: FastAPI) -> None:
    """Admin service: every error response uses the ApiResponse envelope."""
    app.add_exception_handler(StarletteHTTPException, envelope_http_exception_handler)
    app.add_exception_handler(RequestValidationError, envelope_validation_exception_handler)
    app.add_exception_handler(Exception, envelope_unhandled_exception_handler)
