"""Cursor-following aggregation over the ``/meetings`` list endpoint."""

import logging
from typing import Any

from .client import FathomClient
from .types import Cursor, Meeting, Page

log = logging.getLogger(__name__)

MEETINGS_PATH = "/meetings"

# Safety bound against a remote that never stops handing out cursors.
MAX_PAGES = 10


def build_meeting_params(
    *,
    created_after: str | None = None,
    created_before: str | None = None,
    teams: list[str] | None = None,
    recorded_by: list[str] | None = None,
    calendar_invitees_domains: list[str] | None = None,
    calendar_invitees_domains_type: str | None = None,
    include_transcript: bool = False,
    include_summary: bool = False,
    include_action_items: bool = False,
    include_crm_matches: bool = False,
    cursor: Cursor | None = None,
) -> dict[str, Any]:
    """Build the ``/meetings`` query, leaving out anything unset.

    ``calendar_invitees_domains_type="all"`` is the API's default and is
    not sent.
    """
    params: dict[str, Any] = {}
    if calendar_invitees_domains:
        params["calendar_invitees_domains"] = calendar_invitees_domains
    if calendar_invitees_domains_type and calendar_invitees_domains_type != "all":
        params["calendar_invitees_domains_type"] = calendar_invitees_domains_type
    if created_after:
        params["created_after"] = created_after
    if created_before:
        params["created_before"] = created_before
    if cursor:
        params["cursor"] = cursor
    if include_action_items:
        params["include_action_items"] = True
    if include_crm_matches:
        params["include_crm_matches"] = True
    if include_summary:
        params["include_summary"] = True
    if include_transcript:
        params["include_transcript"] = True
    if recorded_by:
        params["recorded_by"] = recorded_by
    if teams:
        params["teams"] = teams
    return params


async def fetch_meeting_page(client: FathomClient, params: dict[str, Any]) -> Page[Meeting]:
    data = await client.get(MEETINGS_PATH, params)
    return Page[Meeting].model_validate(data)


async def fetch_all_meetings(
    client: FathomClient,
    *,
    created_after: str | None = None,
    created_before: str | None = None,
    teams: list[str] | None = None,
    include_transcript: bool = False,
    include_summary: bool = False,
    max_pages: int = MAX_PAGES,
) -> list[Meeting]:
    """Fetch every meeting matching the filters, following ``next_cursor``.

    Pages are requested one after another and concatenated in the order
    received. Stops when the cursor runs out or after *max_pages* pages.
    Any failed request aborts the whole aggregation.
    """
    meetings: list[Meeting] = []
    cursor: Cursor | None = None
    pages = 0

    while True:
        params = build_meeting_params(
            created_after=created_after,
            created_before=created_before,
            teams=teams,
            include_transcript=include_transcript,
            include_summary=include_summary,
            cursor=cursor,
        )
        page = await fetch_meeting_page(client, params)
        meetings.extend(page.items)
        pages += 1
        cursor = page.next_cursor or None

        if cursor is None:
            break
        if pages >= max_pages:
            log.info("Stopped meeting aggregation at the %d-page ceiling", max_pages)
            break

    log.debug("Aggregated %d meetings from %d page(s)", len(meetings), pages)
    return meetings
