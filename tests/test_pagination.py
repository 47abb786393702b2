"""Tests for cursor-following meeting aggregation."""

import httpx
import pytest

from fathom_fast_mcp.client import FathomClient
from fathom_fast_mcp.errors import ErrorKind, FathomAPIError
from fathom_fast_mcp.pagination import MAX_PAGES, build_meeting_params, fetch_all_meetings

from .conftest import BASE_URL, FakeFathom, make_meeting, paged


def _client(api: FakeFathom) -> FathomClient:
    return FathomClient("test-key", base_url=BASE_URL, transport=api.transport)


class TestBuildMeetingParams:
    def test_only_set_values(self):
        assert build_meeting_params() == {}

    def test_all_domains_type_is_not_sent(self):
        assert build_meeting_params(calendar_invitees_domains_type="all") == {}
        assert build_meeting_params(calendar_invitees_domains_type="only_internal") == {
            "calendar_invitees_domains_type": "only_internal"
        }

    def test_flags_lists_and_cursor(self):
        params = build_meeting_params(
            teams=["Sales"],
            recorded_by=["a@acme.com"],
            include_summary=True,
            include_transcript=False,
            cursor="xyz",
        )
        assert params == {
            "teams": ["Sales"],
            "recorded_by": ["a@acme.com"],
            "include_summary": True,
            "cursor": "xyz",
        }


class TestFetchAllMeetings:
    @pytest.mark.asyncio
    async def test_follows_cursor_and_concatenates_in_order(self):
        api = FakeFathom()
        api.routes["GET /meetings"] = paged(
            [[make_meeting(1), make_meeting(2)], [make_meeting(3)], [make_meeting(4)]]
        )

        async with _client(api) as client:
            meetings = await fetch_all_meetings(client)

        assert [m.recording_id for m in meetings] == [1, 2, 3, 4]
        cursors = [r.url.params.get("cursor") for r in api.requests]
        assert cursors == [None, "c1", "c2"]

    @pytest.mark.asyncio
    async def test_stops_at_page_ceiling(self):
        api = FakeFathom()
        # 11 pages, each pointing at another one
        api.routes["GET /meetings"] = paged([[make_meeting(i)] for i in range(12)])

        async with _client(api) as client:
            meetings = await fetch_all_meetings(client)

        assert MAX_PAGES == 10
        assert len(api.requests) == 10
        assert [m.recording_id for m in meetings] == list(range(10))

    @pytest.mark.asyncio
    async def test_forwards_filters_on_every_page(self):
        api = FakeFathom()
        api.routes["GET /meetings"] = paged([[make_meeting(1)], [make_meeting(2)]])

        async with _client(api) as client:
            await fetch_all_meetings(
                client,
                created_after="2024-01-01T00:00:00Z",
                teams=["Sales", "Eng"],
                include_transcript=True,
                include_summary=True,
            )

        for request in api.requests:
            params = request.url.params
            assert params["created_after"] == "2024-01-01T00:00:00Z"
            assert params.get_list("teams[]") == ["Sales", "Eng"]
            assert params["include_transcript"] == "true"
            assert params["include_summary"] == "true"

    @pytest.mark.asyncio
    async def test_empty_collection(self):
        api = FakeFathom()
        api.routes["GET /meetings"] = {"limit": 10, "next_cursor": None, "items": []}

        async with _client(api) as client:
            assert await fetch_all_meetings(client) == []

    @pytest.mark.asyncio
    async def test_failure_aborts_without_partial_results(self):
        api = FakeFathom()
        pages = paged([[make_meeting(1)], [make_meeting(2)], [make_meeting(3)]])

        def route(request: httpx.Request) -> httpx.Response:
            if request.url.params.get("cursor") == "c2":
                return httpx.Response(503)
            return pages(request)

        api.routes["GET /meetings"] = route

        async with _client(api) as client:
            with pytest.raises(FathomAPIError) as excinfo:
                await fetch_all_meetings(client)

        assert excinfo.value.kind is ErrorKind.REMOTE_UNAVAILABLE
        assert len(api.requests) == 3
