"""MCP tool for listing Fathom meetings."""

from collections.abc import Sequence
from datetime import tzinfo
from typing import Annotated, Any

from fastmcp import Context, FastMCP
from fastmcp.tools.tool import ToolResult
from pydantic import Field

from fathom_fast_mcp.analytics import format_minutes, meeting_duration
from fathom_fast_mcp.pagination import build_meeting_params, fetch_meeting_page
from fathom_fast_mcp.render import cursor_hint, fit_to_limit
from fathom_fast_mcp.timezone import format_local_time
from fathom_fast_mcp.types import (
    CalendarInviteesDomainType,
    Cursor,
    Meeting,
    ResponseFormat,
)
from fathom_fast_mcp.tools.common import (
    READ_ONLY,
    CreatedAfter,
    CreatedBefore,
    CursorParam,
    Format,
    Teams,
    get_client,
    get_tz,
    respond,
    tool_error,
)

TRANSCRIPT_PREVIEW_ENTRIES = 5


def register(mcp: FastMCP) -> None:
    @mcp.tool(annotations=READ_ONLY)
    async def list_meetings(
        ctx: Context,
        calendar_invitees_domains: Annotated[
            list[str] | None,
            Field(description="Filter by company domains of invitees (e.g. ['acme.com'])"),
        ] = None,
        calendar_invitees_domains_type: Annotated[
            CalendarInviteesDomainType,
            Field(description="'all', 'only_internal' or 'one_or_more_external'"),
        ] = CalendarInviteesDomainType.ALL,
        created_after: CreatedAfter = None,
        created_before: CreatedBefore = None,
        cursor: CursorParam = None,
        include_action_items: Annotated[
            bool, Field(description="Include action items for each meeting")
        ] = False,
        include_crm_matches: Annotated[
            bool, Field(description="Include CRM matches (contacts, companies, deals)")
        ] = False,
        include_summary: Annotated[
            bool, Field(description="Include the AI-generated summary")
        ] = False,
        include_transcript: Annotated[
            bool, Field(description="Include the full transcript")
        ] = False,
        recorded_by: Annotated[
            list[str] | None, Field(description="Filter by recorder email addresses")
        ] = None,
        teams: Teams = None,
        response_format: Format = ResponseFormat.MARKDOWN,
    ) -> ToolResult:
        """List Fathom meetings with optional filters and cursor pagination.

        Filters: invitee company domains, internal vs external meetings,
        creation date range, recorder emails and team names. Summaries,
        transcripts, action items and CRM matches are only included when
        requested. Pass ``next_cursor`` back as ``cursor`` for the next page.
        """
        try:
            params = build_meeting_params(
                calendar_invitees_domains=calendar_invitees_domains,
                calendar_invitees_domains_type=calendar_invitees_domains_type.value,
                created_after=created_after,
                created_before=created_before,
                cursor=Cursor(cursor) if cursor else None,
                include_action_items=include_action_items,
                include_crm_matches=include_crm_matches,
                include_summary=include_summary,
                include_transcript=include_transcript,
                recorded_by=recorded_by,
                teams=teams,
            )
            page = await fetch_meeting_page(get_client(ctx), params)
        except Exception as e:
            raise tool_error("list_meetings", e) from e

        tz = get_tz(ctx)
        includes = {
            "summary": include_summary,
            "transcript": include_transcript,
            "action_items": include_action_items,
            "crm_matches": include_crm_matches,
        }
        details = any(includes.values())

        def build(meetings: Sequence[Meeting]) -> dict[str, Any]:
            return {
                "total_returned": len(meetings),
                "has_more": page.next_cursor is not None,
                "next_cursor": page.next_cursor,
                "meetings": [project_meeting(m, includes) for m in meetings],
            }

        def markdown(meetings: Sequence[Meeting]) -> str:
            return format_meetings_markdown(meetings, page.next_cursor, tz, details)

        text, output = fit_to_limit(page.items, build, markdown, response_format, "meetings")
        return respond(text, output)


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def project_meeting(meeting: Meeting, includes: dict[str, bool]) -> dict[str, Any]:
    """Compact structured view of a meeting; optional sections only when fetched."""
    data = meeting.model_dump(mode="json")
    projected = {
        "recording_id": meeting.recording_id,
        "title": meeting.title,
        "created_at": data["created_at"],
        "duration_minutes": meeting_duration(meeting),
        "recorded_by": data["recorded_by"],
        "participants_count": len(meeting.calendar_invitees),
        "type": meeting.calendar_invitees_domains_type,
        "url": meeting.url,
    }
    sources = {
        "summary": "default_summary",
        "transcript": "transcript",
        "action_items": "action_items",
        "crm_matches": "crm_matches",
    }
    for key, field in sources.items():
        if includes.get(key) and data[field] is not None:
            projected[key] = data[field]
    return projected


def format_meetings_markdown(
    meetings: Sequence[Meeting], next_cursor: Cursor | None, tz: tzinfo, details: bool
) -> str:
    more = " (more available)" if next_cursor else ""
    lines = ["# Fathom Meetings", "", f"Found {len(meetings)} meetings{more}", ""]
    for meeting in meetings:
        lines.append(format_meeting_markdown(meeting, tz, details))
        lines.append("---")
        lines.append("")
    if next_cursor:
        lines.append(cursor_hint(next_cursor))
    return "\n".join(lines)


def format_meeting_markdown(meeting: Meeting, tz: tzinfo, details: bool = False) -> str:
    lines = [f"## {meeting.title}"]
    if meeting.meeting_title and meeting.meeting_title != meeting.title:
        lines.append(f"*Calendar event: {meeting.meeting_title}*")
    lines.append("")

    recorder = meeting.recorded_by
    lines.append(f"- **Recording ID**: {meeting.recording_id}")
    lines.append(f"- **Date**: {format_local_time(meeting.created_at, tz)}")
    lines.append(f"- **Duration**: {format_minutes(meeting_duration(meeting))}")
    lines.append(f"- **Recorded by**: {recorder.name} ({recorder.email})")
    if recorder.team:
        lines.append(f"- **Team**: {recorder.team}")
    lines.append(f"- **Type**: {'Internal' if meeting.is_internal else 'External'}")
    lines.append(f"- **URL**: {meeting.url}")
    lines.append("")

    if meeting.calendar_invitees:
        lines.append("### Participants")
        for invitee in meeting.calendar_invitees:
            external = " (external)" if invitee.is_external else ""
            lines.append(f"- {invitee.name} <{invitee.email}>{external}")
        lines.append("")

    if details:
        lines.extend(_detail_sections(meeting))

    return "\n".join(lines)


def _detail_sections(meeting: Meeting) -> list[str]:
    lines: list[str] = []

    summary = meeting.default_summary
    if summary and summary.markdown_formatted:
        lines += ["### Summary", summary.markdown_formatted, ""]

    if meeting.action_items:
        lines.append("### Action Items")
        for item in meeting.action_items:
            status = "[x]" if item.completed else "[ ]"
            assignee = f" (@{item.assignee.name})" if item.assignee else ""
            lines.append(f"- {status} {item.description}{assignee}")
        lines.append("")

    if meeting.transcript:
        lines.append("### Transcript Preview")
        for entry in meeting.transcript[:TRANSCRIPT_PREVIEW_ENTRIES]:
            lines.append(f"**{entry.speaker.display_name}** ({entry.timestamp}): {entry.text}")
        remaining = len(meeting.transcript) - TRANSCRIPT_PREVIEW_ENTRIES
        if remaining > 0:
            lines.append(f"*... and {remaining} more entries*")
        lines.append("")

    crm = meeting.crm_matches
    if crm:
        if crm.error:
            lines.append(f"*CRM: {crm.error}*")
        elif crm.contacts or crm.companies or crm.deals:
            lines.append("### CRM Matches")
            if crm.contacts:
                lines.append("**Contacts:**")
                lines += [f"- [{c.name}]({c.record_url})" for c in crm.contacts]
            if crm.companies:
                lines.append("**Companies:**")
                lines += [f"- [{c.name}]({c.record_url})" for c in crm.companies]
            if crm.deals:
                lines.append("**Deals:**")
                lines += [f"- [{d.name}]({d.record_url}) - ${d.amount:,.0f}" for d in crm.deals]
            lines.append("")

    return lines
