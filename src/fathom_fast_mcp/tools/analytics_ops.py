"""MCP tools for searching meetings and computing meeting/participant statistics.

All three tools aggregate meetings across pages (see
:func:`fathom_fast_mcp.pagination.fetch_all_meetings`) before working on the
combined collection.
"""

from collections.abc import Sequence
from datetime import tzinfo
from typing import Annotated, Any

from fastmcp import Context, FastMCP
from fastmcp.tools.tool import ToolResult
from pydantic import Field

from fathom_fast_mcp.analytics import (
    compute_meeting_stats,
    compute_participant_stats,
    format_minutes,
    percentage,
)
from fathom_fast_mcp.pagination import fetch_all_meetings
from fathom_fast_mcp.render import clip, fit_to_limit, to_json
from fathom_fast_mcp.search import DEFAULT_LIMIT, search_meetings as run_search
from fathom_fast_mcp.timezone import format_local_time
from fathom_fast_mcp.types import MeetingStats, ParticipantStats, ResponseFormat, SearchResult
from fathom_fast_mcp.tools.common import (
    READ_ONLY,
    CreatedAfter,
    CreatedBefore,
    Format,
    Teams,
    get_client,
    get_tz,
    respond,
    tool_error,
)

NO_MEETINGS = "No meetings found matching the specified criteria."


def register(mcp: FastMCP) -> None:
    @mcp.tool(annotations=READ_ONLY)
    async def search_meetings(
        query: Annotated[
            str,
            Field(
                description="Text to find in meeting titles, transcripts and summaries",
                min_length=2,
                max_length=200,
            ),
        ],
        ctx: Context,
        created_after: CreatedAfter = None,
        created_before: CreatedBefore = None,
        teams: Teams = None,
        limit: Annotated[
            int, Field(description="Maximum number of results", ge=1, le=50)
        ] = DEFAULT_LIMIT,
        response_format: Format = ResponseFormat.MARKDOWN,
    ) -> ToolResult:
        """Search meeting titles, transcripts and summaries (case-insensitive).

        Transcripts and summaries are fetched automatically. Each match
        reports where the text was found with up to three context snippets.
        Only the most recent meetings (up to 10 pages) are searched.
        """
        try:
            meetings = await fetch_all_meetings(
                get_client(ctx),
                created_after=created_after,
                created_before=created_before,
                teams=teams,
                include_transcript=True,
                include_summary=True,
            )
        except Exception as e:
            raise tool_error("search_meetings", e) from e

        results = run_search(meetings, query, limit)
        tz = get_tz(ctx)

        def build(kept: Sequence[SearchResult]) -> dict[str, Any]:
            return {
                "query": query,
                "total_searched": len(meetings),
                "matches_found": len(kept),
                "results": [_search_entry(r) for r in kept],
            }

        def markdown(kept: Sequence[SearchResult]) -> str:
            return format_search_markdown(query, len(meetings), kept, tz)

        text, output = fit_to_limit(results, build, markdown, response_format, "results")
        return respond(text, output)

    @mcp.tool(annotations=READ_ONLY)
    async def meeting_stats(
        ctx: Context,
        created_after: CreatedAfter = None,
        created_before: CreatedBefore = None,
        teams: Teams = None,
        response_format: Format = ResponseFormat.MARKDOWN,
    ) -> ToolResult:
        """Meeting count, duration statistics, meetings per team and internal vs external split.

        Durations use the actual recording start and end. Teams are the
        recorder's team. External means at least one external invitee.
        """
        try:
            meetings = await fetch_all_meetings(
                get_client(ctx),
                created_after=created_after,
                created_before=created_before,
                teams=teams,
            )
        except Exception as e:
            raise tool_error("meeting_stats", e) from e

        stats = compute_meeting_stats(meetings)
        if stats is None:
            return _no_meetings(response_format)

        output = stats.model_dump(mode="json")
        if response_format == ResponseFormat.JSON:
            text = to_json(output)
        else:
            text = format_meeting_stats_markdown(stats, created_after, created_before)
        return respond(clip(text), output)

    @mcp.tool(annotations=READ_ONLY)
    async def participant_stats(
        ctx: Context,
        created_after: CreatedAfter = None,
        created_before: CreatedBefore = None,
        limit: Annotated[
            int,
            Field(description="Maximum number of top participants/recorders/domains", ge=1, le=100),
        ] = 10,
        response_format: Format = ResponseFormat.MARKDOWN,
    ) -> ToolResult:
        """Most frequent invitees, most active recorders and invitee email domains."""
        try:
            meetings = await fetch_all_meetings(
                get_client(ctx),
                created_after=created_after,
                created_before=created_before,
            )
        except Exception as e:
            raise tool_error("participant_stats", e) from e

        stats = compute_participant_stats(meetings, limit)
        if stats is None:
            return _no_meetings(response_format)

        output = stats.model_dump(mode="json")
        if response_format == ResponseFormat.JSON:
            text = to_json(output)
        else:
            text = format_participant_stats_markdown(stats)
        return respond(clip(text), output)


def _no_meetings(response_format: ResponseFormat) -> ToolResult:
    output = {"total_meetings": 0, "message": NO_MEETINGS}
    text = to_json(output) if response_format == ResponseFormat.JSON else NO_MEETINGS
    return respond(text, output)


def _search_entry(result: SearchResult) -> dict[str, Any]:
    meeting = result.meeting
    return {
        "recording_id": meeting.recording_id,
        "title": meeting.title,
        "created_at": meeting.model_dump(mode="json")["created_at"],
        "recorded_by": meeting.recorded_by.name,
        "url": meeting.url,
        "matches": result.matches.model_dump(mode="json"),
    }


# ---------------------------------------------------------------------------
# Markdown formatting
# ---------------------------------------------------------------------------


def format_search_markdown(
    query: str, total_searched: int, results: Sequence[SearchResult], tz: tzinfo
) -> str:
    lines = [
        f'# Search Results: "{query}"',
        "",
        f"Searched {total_searched} meetings, found {len(results)} matches",
        "",
    ]
    if not results:
        lines.append("*No matches found. Try different search terms or adjust filters.*")
        return "\n".join(lines)

    for result in results:
        meeting, matches = result.meeting, result.matches
        lines += [
            f"## {meeting.title}",
            f"**Recording ID**: {meeting.recording_id}",
            f"**Date**: {format_local_time(meeting.created_at, tz)}",
            f"**URL**: {meeting.url}",
            "",
        ]
        found = [
            name
            for name, hit in (
                ("title", matches.in_title),
                ("transcript", matches.in_transcript),
                ("summary", matches.in_summary),
            )
            if hit
        ]
        lines += [f"*Found in: {', '.join(found)}*", ""]
        if matches.context_snippets:
            lines.append("**Context:**")
            lines += [f"> {snippet}" for snippet in matches.context_snippets]
        lines += ["", "---", ""]

    return "\n".join(lines)


def format_meeting_stats_markdown(
    stats: MeetingStats, created_after: str | None, created_before: str | None
) -> str:
    lines = ["# Meeting Statistics", ""]

    if created_after or created_before:
        bounds = []
        if created_after:
            bounds.append(f"from {created_after}")
        if created_before:
            bounds.append(f"to {created_before}")
        lines += [f"*Date range: {' '.join(bounds)}*", ""]

    total = stats.total_meetings
    durations = stats.duration_stats
    split = stats.internal_vs_external
    lines += [
        "## Overview",
        f"- **Total Meetings**: {total}",
        f"- **Total Time**: {format_minutes(durations.total_minutes)}",
        "",
        "## Duration Statistics",
        f"- **Average**: {durations.average_minutes} min",
        f"- **Shortest**: {durations.min_minutes} min",
        f"- **Longest**: {durations.max_minutes} min",
        "",
        "## Meeting Types",
        f"- **Internal**: {split.internal} ({percentage(split.internal, total)}%)",
        f"- **External**: {split.external} ({percentage(split.external, total)}%)",
        "",
        "## Meetings by Team",
    ]
    lines += [f"- **{team}**: {count}" for team, count in stats.meetings_by_team.items()]
    return "\n".join(lines)


def format_participant_stats_markdown(stats: ParticipantStats) -> str:
    lines = [
        "# Participant Statistics",
        "",
        f"*Based on {stats.total_meetings} meetings*",
        "",
        "## Top Participants",
    ]
    for rank, p in enumerate(stats.top_participants, start=1):
        lines.append(f"{rank}. **{p.name}** ({p.email}) - {p.meeting_count} meetings")
    lines += ["", "## Top Recorders"]
    for rank, r in enumerate(stats.top_recorders, start=1):
        lines.append(f"{rank}. **{r.name}** ({r.email}) - {r.recording_count} recordings")
    lines += ["", "## Domain Breakdown"]
    for domain, count in stats.domain_breakdown.items():
        lines.append(f"- **{domain}**: {count} participant appearances")
    return "\n".join(lines)
