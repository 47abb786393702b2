"""MCP tools for Fathom teams and team members."""

from collections.abc import Sequence
from datetime import tzinfo
from typing import Annotated, Any

from fastmcp import Context, FastMCP
from fastmcp.tools.tool import ToolResult
from pydantic import Field

from fathom_fast_mcp.render import cursor_hint, fit_to_limit, plural
from fathom_fast_mcp.timezone import format_local_date
from fathom_fast_mcp.types import Page, ResponseFormat, Team, TeamMember
from fathom_fast_mcp.tools.common import (
    READ_ONLY,
    CursorParam,
    Format,
    get_client,
    get_tz,
    respond,
    tool_error,
)


def register(mcp: FastMCP) -> None:
    @mcp.tool(annotations=READ_ONLY)
    async def list_teams(
        ctx: Context,
        cursor: CursorParam = None,
        response_format: Format = ResponseFormat.MARKDOWN,
    ) -> ToolResult:
        """List the teams in the Fathom workspace that the API key can see."""
        try:
            data = await get_client(ctx).get("/teams", {"cursor": cursor or None})
            page = Page[Team].model_validate(data)
        except Exception as e:
            raise tool_error("list_teams", e) from e

        tz = get_tz(ctx)

        def build(teams: Sequence[Team]) -> dict[str, Any]:
            return {
                "total_returned": len(teams),
                "has_more": page.next_cursor is not None,
                "next_cursor": page.next_cursor,
                "teams": [team.model_dump(mode="json") for team in teams],
            }

        def markdown(teams: Sequence[Team]) -> str:
            return _with_cursor(format_teams_markdown(teams, tz), page.next_cursor)

        text, output = fit_to_limit(page.items, build, markdown, response_format, "teams")
        return respond(text, output)

    @mcp.tool(annotations=READ_ONLY)
    async def list_team_members(
        ctx: Context,
        team: Annotated[
            str | None, Field(description="Team name; all members when omitted")
        ] = None,
        cursor: CursorParam = None,
        response_format: Format = ResponseFormat.MARKDOWN,
    ) -> ToolResult:
        """List members of one team, or of every team, with email and join date."""
        try:
            data = await get_client(ctx).get(
                "/team_members", {"team": team or None, "cursor": cursor or None}
            )
            page = Page[TeamMember].model_validate(data)
        except Exception as e:
            raise tool_error("list_team_members", e) from e

        tz = get_tz(ctx)

        def build(members: Sequence[TeamMember]) -> dict[str, Any]:
            return {
                "total_returned": len(members),
                "has_more": page.next_cursor is not None,
                "next_cursor": page.next_cursor,
                "team_filter": team or None,
                "members": [member.model_dump(mode="json") for member in members],
            }

        def markdown(members: Sequence[TeamMember]) -> str:
            return _with_cursor(format_members_markdown(members, team, tz), page.next_cursor)

        text, output = fit_to_limit(page.items, build, markdown, response_format, "members")
        return respond(text, output)


def _with_cursor(text: str, cursor: str | None) -> str:
    return f"{text}\n\n{cursor_hint(cursor)}" if cursor else text


def format_teams_markdown(teams: Sequence[Team], tz: tzinfo) -> str:
    lines = ["# Fathom Teams", "", f"Found {plural(len(teams), 'team')}", ""]
    if not teams:
        lines.append("*No teams found.*")
        return "\n".join(lines)

    lines += ["| Team Name | Created |", "|-----------|---------|"]
    for team in teams:
        lines.append(f"| {team.name} | {format_local_date(team.created_at, tz)} |")
    return "\n".join(lines)


def format_members_markdown(
    members: Sequence[TeamMember], team: str | None, tz: tzinfo
) -> str:
    heading = f"# Team Members: {team}" if team else "# All Team Members"
    lines = [heading, "", f"Found {plural(len(members), 'member')}", ""]
    if not members:
        lines.append("*No team members found.*")
        return "\n".join(lines)

    lines += ["| Name | Email | Joined |", "|------|-------|--------|"]
    for member in members:
        joined = format_local_date(member.created_at, tz)
        lines.append(f"| {member.name} | {member.email} | {joined} |")
    return "\n".join(lines)
