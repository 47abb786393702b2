"""MCP tools for a single recording's summary and transcript."""

from collections.abc import Sequence
from typing import Annotated, Any

from fastmcp import Context, FastMCP
from fastmcp.tools.tool import ToolResult
from pydantic import Field

from fathom_fast_mcp.render import clip, fit_to_limit, to_json
from fathom_fast_mcp.types import (
    ResponseFormat,
    SummaryResponse,
    TranscriptEntry,
    TranscriptResponse,
)
from fathom_fast_mcp.tools.common import READ_ONLY, Format, get_client, respond, tool_error

RecordingId = Annotated[
    int, Field(description="Recording ID, as returned by list_meetings", gt=0)
]


def register(mcp: FastMCP) -> None:
    @mcp.tool(annotations=READ_ONLY)
    async def get_summary(
        recording_id: RecordingId,
        ctx: Context,
        response_format: Format = ResponseFormat.MARKDOWN,
    ) -> ToolResult:
        """Get the AI-generated summary of a Fathom recording.

        Summaries cover key discussion points, decisions and topics, and
        are always in English.
        """
        try:
            data = await get_client(ctx).get(f"/recordings/{recording_id}/summary")
            summary = SummaryResponse.model_validate(data).summary
        except Exception as e:
            raise tool_error("get_summary", e) from e

        output = {"recording_id": recording_id, "summary": summary.model_dump(mode="json")}

        if response_format == ResponseFormat.JSON:
            text = to_json(output)
        else:
            lines = ["# Meeting Summary", f"**Recording ID**: {recording_id}", ""]
            if summary.template_name:
                lines += [f"*Template: {summary.template_name}*", ""]
            lines.append(
                summary.markdown_formatted or "*No summary available for this recording.*"
            )
            text = "\n".join(lines)

        return respond(clip(text), output)

    @mcp.tool(annotations=READ_ONLY)
    async def get_transcript(
        recording_id: RecordingId,
        ctx: Context,
        response_format: Format = ResponseFormat.MARKDOWN,
    ) -> ToolResult:
        """Get the timestamped, speaker-attributed transcript of a Fathom recording.

        Timestamps are HH:MM:SS from the start of the recording. Long
        transcripts are cut to their first half when they exceed the
        response size limit.
        """
        try:
            data = await get_client(ctx).get(f"/recordings/{recording_id}/transcript")
            entries = TranscriptResponse.model_validate(data).transcript
        except Exception as e:
            raise tool_error("get_transcript", e) from e

        def build(kept: Sequence[TranscriptEntry]) -> dict[str, Any]:
            return {
                "recording_id": recording_id,
                "entry_count": len(kept),
                "transcript": [entry.model_dump(mode="json") for entry in kept],
            }

        def markdown(kept: Sequence[TranscriptEntry]) -> str:
            return (
                f"**Recording ID**: {recording_id}\n**Total entries**: {len(entries)}\n\n"
                + format_transcript_markdown(kept)
            )

        text, output = fit_to_limit(entries, build, markdown, response_format, "entries")
        return respond(text, output)


def format_transcript_markdown(entries: Sequence[TranscriptEntry]) -> str:
    """Group consecutive utterances under a heading for their speaker."""
    lines = ["# Meeting Transcript", ""]
    current_speaker: str | None = None

    for entry in entries:
        speaker = entry.speaker
        if speaker.display_name != current_speaker:
            current_speaker = speaker.display_name
            lines += ["", f"### {current_speaker}"]
            if speaker.matched_calendar_invitee_email:
                lines.append(f"*{speaker.matched_calendar_invitee_email}*")
            lines.append("")
        lines += [f"**[{entry.timestamp}]** {entry.text}", ""]

    return "\n".join(lines)
