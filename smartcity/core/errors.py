"""Error taxonomy shared by both services.

Services return either their success value or a ``ServiceError``; route
handlers branch on the kind and turn it into an HTTP response with
``raise_for_error``. Exceptions are reserved for the HTTP boundary.
"""

from dataclasses import dataclass
from enum import Enum
from typing import NoReturn

from fastapi import HTTPException, status


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    UPSTREAM = "upstream"


HTTP_STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.AUTHENTICATION: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.AUTHORIZATION: status.HTTP_403_FORBIDDEN,
    ErrorKind.CONFLICT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.UPSTREAM: status.HTTP_503_SERVICE_UNAVAILABLE,
}

INTERNAL_ERROR_DETAIL = "Internal server error"


@dataclass(frozen=True)
class ServiceError:
    """Failure value returned by service operations."""

    kind: ErrorKind
    message: str
    # Overrides the kind's default status (e.g. 502 for a bad upstream response).
    status_code: int | None = None

    @property
    def http_status(self) -> int:
        if self.status_code is not None:
            return self.status_code
        return HTTP_STATUS_BY_KIND[self.kind]


def validation_error(message: str) -> ServiceError:
    return ServiceError(ErrorKind.VALIDATION, message)


def authentication_error(message: str = "Not authenticated") -> ServiceError:
    return ServiceError(ErrorKind.AUTHENTICATION, message)


def authorization_error(message: str) -> ServiceError:
    return ServiceError(ErrorKind.AUTHORIZATION, message)


def conflict_error(message: str) -> ServiceError:
    return ServiceError(ErrorKind.CONFLICT, message)


def not_found_error(message: str) -> ServiceError:
    return ServiceError(ErrorKind.NOT_FOUND, message)


def upstream_error(message: str, status_code: int | None = None) -> ServiceError:
    return ServiceError(ErrorKind.UPSTREAM, message, status_code)


def raise_for_error(error: ServiceError) -> NoReturn:
    """Raise the HTTPException that corresponds to a ServiceError."""
    headers = None
    if error.kind is ErrorKind.AUTHENTICATION:
        headers = {"WWW-Authenticate": "Bearer"}
    raise HTTPException(status_code=error.http_status, detail=error.message, headers=headers)
