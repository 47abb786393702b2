"""Shared fixtures for tests."""

import copy
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from fathom_fast_mcp.config import Config
from fathom_fast_mcp.types import Meeting

BASE_URL = "https://api.fathom.test/external/v1"


def make_meeting(
    recording_id: int,
    *,
    title: str = "Weekly Sync",
    meeting_title: str | None = None,
    start: str = "2024-01-15T10:00:00Z",
    end: str = "2024-01-15T10:30:00Z",
    domains_type: str = "only_internal",
    recorder: tuple[str, str] = ("Alice Smith", "alice@acme.com"),
    team: str | None = "Engineering",
    invitees: list[tuple[str, str]] | None = None,
    transcript: list[tuple[str, str, str]] | None = None,
    summary: str | None = None,
) -> dict[str, Any]:
    """Build a meeting dict shaped like the Fathom API's ``/meetings`` items.

    ``transcript`` entries are ``(timestamp, speaker, text)`` tuples.
    """
    name, email = recorder
    data: dict[str, Any] = {
        "title": title,
        "meeting_title": meeting_title,
        "recording_id": recording_id,
        "url": f"https://fathom.video/calls/{recording_id}",
        "share_url": f"https://fathom.video/share/{recording_id}",
        "created_at": end,
        "scheduled_start_time": start,
        "scheduled_end_time": end,
        "recording_start_time": start,
        "recording_end_time": end,
        "calendar_invitees_domains_type": domains_type,
        "transcript_language": "en",
        "calendar_invitees": [
            {
                "name": invitee_name,
                "email": invitee_email,
                "email_domain": invitee_email.split("@")[1].lower(),
                "is_external": not invitee_email.lower().endswith("@acme.com"),
            }
            for invitee_name, invitee_email in (invitees or [])
        ],
        "recorded_by": {
            "name": name,
            "email": email,
            "email_domain": email.split("@")[1],
            "team": team,
        },
    }
    if transcript is not None:
        data["transcript"] = [
            {"speaker": {"display_name": speaker}, "text": text, "timestamp": ts}
            for ts, speaker, text in transcript
        ]
    if summary is not None:
        data["default_summary"] = {
            "template_name": "General",
            "markdown_formatted": summary,
        }
    return data


SAMPLE_MEETINGS: list[dict[str, Any]] = [
    make_meeting(
        101,
        title="Q1 Budget Review",
        start="2024-01-15T10:00:00Z",
        end="2024-01-15T11:30:30Z",  # 90.5 minutes
        domains_type="one_or_more_external",
        invitees=[
            ("Alice Smith", "alice@acme.com"),
            ("Bob Jones", "Bob@Client.com"),
        ],
        transcript=[
            ("00:00:05", "Alice Smith", "Welcome everyone."),
            ("00:12:34", "Dana", "...we need to revisit the budget plan before Friday..."),
        ],
        summary="## Summary\nThe team reviewed the budget for Q1.",
    ),
    make_meeting(
        102,
        title="Design Standup",
        meeting_title="Daily Standup",
        start="2024-01-16T09:00:00Z",
        end="2024-01-16T09:15:00Z",
        team=None,
        recorder=("Carol White", "carol@acme.com"),
        invitees=[
            ("Alice Smith", "ALICE@acme.com"),
            ("Carol White", "carol@acme.com"),
        ],
        transcript=[("00:01:00", "Carol White", "Nothing blocking today.")],
        summary="Short standup.",
    ),
    make_meeting(
        103,
        title="Client Kickoff",
        start="2024-02-01T14:00:00Z",
        end="2024-02-01T14:45:00Z",
        domains_type="one_or_more_external",
        invitees=[
            ("Bob Jones", "bob@client.com"),
            ("Eve Adams", "eve@client.com"),
            ("Alice Smith", "alice@acme.com"),
        ],
    ),
]


class FakeFathom:
    """In-memory stand-in for the Fathom API, served through ``httpx.MockTransport``.

    ``routes`` maps ``"METHOD /path"`` to a JSON body, an ``httpx.Response``
    or a callable taking the request. Every request is recorded.
    """

    def __init__(self) -> None:
        self.routes: dict[str, Any] = {}
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/external/v1")
        route = self.routes.get(f"{request.method} {path}")
        if route is None:
            return httpx.Response(404, json={"message": "no such route"})
        if callable(route):
            route = route(request)
        if isinstance(route, httpx.Response):
            return route
        return httpx.Response(200, json=route)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


def paged(pages: list[list[dict[str, Any]]]) -> Callable[[httpx.Request], httpx.Response]:
    """Serve *pages* in order, linking them with cursors ``c1``, ``c2``..."""

    def route(request: httpx.Request) -> httpx.Response:
        cursor = request.url.params.get("cursor")
        index = int(cursor[1:]) if cursor else 0
        next_cursor = f"c{index + 1}" if index + 1 < len(pages) else None
        return httpx.Response(
            200, json={"limit": 10, "next_cursor": next_cursor, "items": pages[index]}
        )

    return route


@pytest.fixture
def config() -> Config:
    return Config(api_key="test-key", base_url=BASE_URL)


@pytest.fixture
def fake_api() -> FakeFathom:
    api = FakeFathom()
    api.routes["GET /meetings"] = {
        "limit": 10,
        "next_cursor": None,
        "items": copy.deepcopy(SAMPLE_MEETINGS),
    }
    return api


@pytest.fixture
def meetings() -> list[Meeting]:
    return [Meeting.model_validate(m) for m in SAMPLE_MEETINGS]
