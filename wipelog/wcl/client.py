import logging
from typing import Any

import httpx

from wipelog.wcl.models import RateLimitData

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://www.warcraftlogs.com/api/v2/client"


class TransportError(Exception):
    """Raised when a WCL request fails at the HTTP or network level."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class WCLAPIError(TransportError):
    """Raised when the WCL GraphQL API returns errors.

    ``data`` holds whatever partial result came back alongside the errors.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        data: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, status_code=status_code)
        self.data = data or {}


class WCLClient:
    """Async GraphQL client for WCL API v2 using a pre-issued bearer token.

    Each query() is exactly one POST. Nothing is retried; callers decide
    whether a failure is fatal.
    """

    def __init__(
        self,
        access_token: str,
        *,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
    ) -> None:
        self._access_token = access_token
        self._api_url = api_url
        self._timeout = timeout
        self._http: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "WCLClient":
        self._http = httpx.AsyncClient(timeout=self._timeout)
        return self

    async def __aexit__(self, *exc: object) -> None:
        if self._http:
            await self._http.aclose()
            self._http = None

    async def query(
        self,
        graphql_query: str,
        variables: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Execute a GraphQL query and return its ``data`` object.

        Raises TransportError on network failures and non-2xx responses,
        WCLAPIError when the response carries GraphQL errors.
        """
        if self._http is None:
            raise RuntimeError("Use WCLClient as an async context manager")

        body: dict[str, Any] = {"query": graphql_query}
        if variables:
            body["variables"] = variables

        logger.debug("POST %s variables=%s", self._api_url, variables)
        try:
            response = await self._http.post(
                self._api_url,
                json=body,
                headers={
                    "Authorization": f"Bearer {self._access_token}",
                    "Content-Type": "application/json",
                },
            )
        except httpx.HTTPError as exc:
            raise TransportError(f"Network error: {exc}") from exc

        if not response.is_success:
            raise TransportError(
                f"API request failed: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
            )

        try:
            result = response.json()
        except ValueError as exc:
            raise TransportError(
                "API returned a non-JSON body", status_code=response.status_code,
            ) from exc

        rate_limit = (result.get("data") or {}).get("rateLimitData")
        if rate_limit:
            _log_rate_limit(rate_limit)

        if result.get("errors"):
            messages = "; ".join(e.get("message", "?") for e in result["errors"])
            raise WCLAPIError(
                messages,
                status_code=response.status_code,
                data=result.get("data"),
            )

        return result.get("data") or {}


def _log_rate_limit(raw: dict[str, Any]) -> None:
    try:
        data = RateLimitData.model_validate(raw)
    except ValueError:
        return
    logger.debug(
        "Rate limit: %d/%d points used, resets in %ds",
        data.points_spent_this_hour,
        data.limit_per_hour,
        data.points_reset_in,
    )
