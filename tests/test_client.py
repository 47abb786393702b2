"""Tests for the HTTP client, query encoding and the error taxonomy."""

import httpx
import pytest

from fathom_fast_mcp.client import FathomClient, encode_params
from fathom_fast_mcp.errors import (
    ConfigurationError,
    ErrorKind,
    FathomAPIError,
    describe_error,
)
from fathom_fast_mcp.types import CalendarInviteesDomainType

from .conftest import BASE_URL, FakeFathom


def _client(api: FakeFathom) -> FathomClient:
    return FathomClient("test-key", base_url=BASE_URL, transport=api.transport)


def _failing(exc_type: type[httpx.HTTPError]):
    def route(request: httpx.Request) -> httpx.Response:
        raise exc_type("boom", request=request)

    return route


# ---------------------------------------------------------------------------
# encode_params
# ---------------------------------------------------------------------------


class TestEncodeParams:
    def test_lists_become_repeated_bracketed_keys(self):
        encoded = encode_params({"teams": ["Sales", "Eng"]})
        assert encoded == [("teams[]", "Sales"), ("teams[]", "Eng")]

    def test_booleans_and_none(self):
        encoded = encode_params(
            {"include_summary": True, "include_transcript": False, "cursor": None}
        )
        assert encoded == [("include_summary", "true"), ("include_transcript", "false")]

    def test_enum_values(self):
        encoded = encode_params(
            {"calendar_invitees_domains_type": CalendarInviteesDomainType.ONLY_INTERNAL}
        )
        assert encoded == [("calendar_invitees_domains_type", "only_internal")]

    def test_empty(self):
        assert encode_params(None) == []
        assert encode_params({}) == []


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class TestRequests:
    def test_missing_api_key_fails_before_any_request(self):
        api = FakeFathom()
        with pytest.raises(ConfigurationError):
            FathomClient("", base_url=BASE_URL, transport=api.transport)
        with pytest.raises(ConfigurationError):
            FathomClient(None, base_url=BASE_URL, transport=api.transport)
        assert api.requests == []

    @pytest.mark.asyncio
    async def test_get_sends_headers_and_bracketed_query(self):
        api = FakeFathom()
        api.routes["GET /meetings"] = {"items": []}

        async with _client(api) as client:
            data = await client.get("/meetings", {"teams": ["Sales", "Eng"], "cursor": "abc"})

        assert data == {"items": []}
        request = api.requests[0]
        assert request.headers["X-Api-Key"] == "test-key"
        assert request.headers["Accept"] == "application/json"
        assert request.url.params.get_list("teams[]") == ["Sales", "Eng"]
        assert "teams%5B%5D=Sales&teams%5B%5D=Eng" in str(request.url)
        assert request.url.params["cursor"] == "abc"

    @pytest.mark.asyncio
    async def test_post_sends_json_body(self):
        api = FakeFathom()
        api.routes["POST /webhooks"] = lambda request: httpx.Response(
            201, content=request.content, headers={"Content-Type": "application/json"}
        )

        async with _client(api) as client:
            data = await client.post("/webhooks", {"destination_url": "https://x.test/hook"})

        assert data == {"destination_url": "https://x.test/hook"}

    @pytest.mark.asyncio
    async def test_delete(self):
        api = FakeFathom()
        api.routes["DELETE /webhooks/abc"] = httpx.Response(204)

        async with _client(api) as client:
            assert await client.delete("/webhooks/abc") is None

        assert api.requests[0].method == "DELETE"


# ---------------------------------------------------------------------------
# Error taxonomy
# ---------------------------------------------------------------------------


class TestErrorMapping:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("response", "kind", "fragment"),
        [
            (
                httpx.Response(400, json={"message": "bad cursor"}),
                ErrorKind.INVALID_REQUEST,
                "Bad request. bad cursor",
            ),
            (httpx.Response(400), ErrorKind.INVALID_REQUEST, "check your input parameters"),
            (httpx.Response(401), ErrorKind.AUTHENTICATION_FAILED, "FATHOM_API_KEY"),
            (httpx.Response(403), ErrorKind.FORBIDDEN, "Access denied"),
            (httpx.Response(404), ErrorKind.NOT_FOUND, "verify the ID"),
            (
                httpx.Response(429, headers={"ratelimit-reset": "42"}),
                ErrorKind.RATE_LIMITED,
                "Please wait 42 before",
            ),
            (httpx.Response(429), ErrorKind.RATE_LIMITED, "wait a moment"),
            (httpx.Response(500), ErrorKind.REMOTE_UNAVAILABLE, "temporarily unavailable"),
            (httpx.Response(504), ErrorKind.REMOTE_UNAVAILABLE, "temporarily unavailable"),
            (
                httpx.Response(409, json={"message": "conflict"}),
                ErrorKind.UNKNOWN,
                "failed with status 409. conflict",
            ),
        ],
    )
    async def test_status_codes(self, response, kind, fragment):
        api = FakeFathom()
        api.routes["GET /teams"] = response

        async with _client(api) as client:
            with pytest.raises(FathomAPIError) as excinfo:
                await client.get("/teams")

        assert excinfo.value.kind is kind
        assert excinfo.value.status_code == response.status_code
        assert excinfo.value.message.startswith("Error: ")
        assert fragment in excinfo.value.message

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("exc_type", "kind", "message"),
        [
            (httpx.ConnectTimeout, ErrorKind.TIMEOUT, "Error: Request timed out. Please try again."),
            (httpx.ReadTimeout, ErrorKind.TIMEOUT, "Error: Request timed out. Please try again."),
            (
                httpx.ConnectError,
                ErrorKind.NETWORK_UNREACHABLE,
                "Error: Unable to connect to Fathom API. Please check your network connection.",
            ),
            (
                httpx.RemoteProtocolError,
                ErrorKind.UNKNOWN,
                "Error: Unexpected error occurred: boom",
            ),
        ],
    )
    async def test_transport_failures(self, exc_type, kind, message):
        api = FakeFathom()
        api.routes["GET /teams"] = _failing(exc_type)

        async with _client(api) as client:
            with pytest.raises(FathomAPIError) as excinfo:
                await client.get("/teams")

        assert excinfo.value.kind is kind
        assert excinfo.value.status_code is None
        assert excinfo.value.message == message

    @pytest.mark.asyncio
    async def test_invalid_json_is_unknown(self):
        api = FakeFathom()
        api.routes["GET /teams"] = httpx.Response(200, content=b"<html>")

        async with _client(api) as client:
            with pytest.raises(FathomAPIError) as excinfo:
                await client.get("/teams")

        assert excinfo.value.kind is ErrorKind.UNKNOWN

    def test_describe_error(self):
        assert describe_error(ConfigurationError("missing key")) == "missing key"
        assert describe_error(ValueError("nope")) == "Error: Unexpected error occurred: nope"
