"""Client for identity-service calls made on behalf of the current caller.

The caller's Authorization header is forwarded unchanged; the identity service
validates and authorizes it independently. No service-level credential exists.
"""

import logging
import time

import httpx
from pydantic import TypeAdapter, ValidationError

from smartcity.core.errors import (
    ServiceError,
    authentication_error,
    authorization_error,
    upstream_error,
)
from smartcity.schemas.auth import UserOut

logger = logging.getLogger(__name__)

_USER_LIST = TypeAdapter(list[UserOut])


def _downstream_detail(response: httpx.Response, default: str) -> str:
    try:
        body = response.json()
    except ValueError:
        return default
    if isinstance(body, dict) and isinstance(body.get("detail"), str):
        return body["detail"]
    return default


class IdentityServiceClient:
    """Calls the identity service with the propagated bearer token."""

    def __init__(
        self,
        base_url: str,
        timeout_sec: float,
        api_prefix: str = "",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_prefix = api_prefix
        self.timeout = httpx.Timeout(timeout_sec)
        self._transport = transport

    async def list_users(self, authorization: str | None) -> list[UserOut] | ServiceError:
        """GET /auth/users as the caller. Returns the user list or a classified failure."""
        url = f"{self.base_url}{self.api_prefix}/auth/users"
        headers = {"Authorization": authorization} if authorization else {}
        start = time.perf_counter()
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(url, headers=headers)
        except httpx.ConnectError as e:
            logger.error(
                "Identity service unreachable",
                extra={"url": url, "latency_seconds": time.perf_counter() - start, "error": str(e)},
            )
            return upstream_error(
                "Cannot connect to the identity service. Please ensure it is running."
            )
        except httpx.TimeoutException:
            logger.error(
                "Identity service request timed out",
                extra={"url": url, "latency_seconds": time.perf_counter() - start},
            )
            return upstream_error("Identity service request timed out.")
        except httpx.HTTPError as e:
            logger.error("Identity service request failed", extra={"url": url, "error": str(e)})
            return upstream_error("Service communication failed.")

        elapsed = time.perf_counter() - start
        if response.status_code == 401:
            logger.warning("Identity service rejected caller token", extra={"status": 401})
            return authentication_error(_downstream_detail(response, "Not authenticated"))
        if response.status_code == 403:
            logger.warning("Identity service denied caller", extra={"status": 403})
            return authorization_error(_downstream_detail(response, "Admin access required"))
        if response.status_code >= 400:
            logger.error(
                "Identity service returned an error",
                extra={"status": response.status_code, "latency_seconds": elapsed},
            )
            return upstream_error(
                f"Identity service returned {response.status_code}", status_code=502
            )

        try:
            users = _USER_LIST.validate_python(response.json())
        except (ValueError, ValidationError):
            logger.error("Identity service response did not match the user list schema")
            return upstream_error("Identity service returned an invalid response.", status_code=502)

        logger.info(
            "Identity service users retrieved",
            extra={"user_count": len(users), "latency_seconds": elapsed},
        )
        return users
