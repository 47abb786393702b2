"""Async HTTP client for the Fathom external API."""

import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any

import httpx

from .config import FATHOM_API_BASE_URL
from .errors import (
    ConfigurationError,
    ErrorKind,
    FathomAPIError,
    error_from_response,
    error_from_transport,
)

log = logging.getLogger(__name__)

QueryParams = list[tuple[str, str]]


def encode_params(params: Mapping[str, Any] | None) -> QueryParams:
    """Encode query parameters the way the Fathom API expects them.

    List values become repeated ``key[]=value`` pairs, booleans become
    ``true``/``false`` and ``None`` values are dropped.
    """
    encoded: QueryParams = []
    if not params:
        return encoded

    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            encoded.extend((f"{key}[]", _scalar(item)) for item in value)
        else:
            encoded.append((key, _scalar(value)))
    return encoded


def _scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


class FathomClient:
    """Thin async wrapper around ``httpx.AsyncClient``.

    Created once per server lifespan and shared read-only by every tool
    invocation. Every failure is raised as a
    :class:`~fathom_fast_mcp.errors.FathomAPIError`.
    """

    def __init__(
        self,
        api_key: str | None,
        base_url: str = FATHOM_API_BASE_URL,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not api_key:
            raise ConfigurationError(
                "API client not initialized. Please set FATHOM_API_KEY environment variable."
            )
        self._http = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json",
                "X-Api-Key": api_key,
            },
        )

    async def __aenter__(self) -> "FathomClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        log.debug("%s %s", method, path)
        try:
            response = await self._http.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            error = error_from_transport(e)
            log.warning("%s %s failed: %s (%s)", method, path, error.kind.value, e)
            raise error from e

        if response.is_error:
            error = error_from_response(response)
            log.warning("%s %s -> HTTP %d (%s)", method, path, response.status_code, error.kind.value)
            raise error
        return response

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise FathomAPIError(
                ErrorKind.UNKNOWN, f"Error: Unexpected error occurred: invalid JSON response ({e})"
            ) from e

    async def get(self, path: str, params: Mapping[str, Any] | None = None) -> Any:
        """GET *path* and return the decoded JSON body."""
        response = await self._request("GET", path, params=encode_params(params))
        return self._json(response)

    async def post(self, path: str, body: Mapping[str, Any] | None = None) -> Any:
        """POST a JSON body to *path* and return the decoded JSON body."""
        response = await self._request("POST", path, json=dict(body) if body else None)
        return self._json(response)

    async def delete(self, path: str) -> None:
        await self._request("DELETE", path)
