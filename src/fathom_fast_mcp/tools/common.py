"""Helpers shared by the tool modules."""

import logging
from datetime import tzinfo
from typing import Annotated, Any

from fastmcp import Context
from fastmcp.exceptions import ToolError
from fastmcp.tools.tool import ToolResult
from pydantic import Field

from fathom_fast_mcp.client import FathomClient
from fathom_fast_mcp.errors import describe_error
from fathom_fast_mcp.types import ResponseFormat

log = logging.getLogger("fathom_fast_mcp.tools")

READ_ONLY = {
    "readOnlyHint": True,
    "destructiveHint": False,
    "idempotentHint": True,
    "openWorldHint": True,
}

# ---------------------------------------------------------------------------
# Parameter types reused across tools
# ---------------------------------------------------------------------------

Format = Annotated[
    ResponseFormat,
    Field(description="Output format: 'markdown' for human-readable or 'json' for structured data"),
]
CursorParam = Annotated[
    str | None, Field(description="Pagination cursor from a previous response")
]
CreatedAfter = Annotated[
    str | None,
    Field(description="Only meetings created after this ISO 8601 timestamp (e.g. 2024-01-01T00:00:00Z)"),
]
CreatedBefore = Annotated[
    str | None, Field(description="Only meetings created before this ISO 8601 timestamp")
]
Teams = Annotated[list[str] | None, Field(description="Filter by team names")]


def get_client(ctx: Context) -> FathomClient:
    """The API client opened by the server lifespan."""
    return ctx.request_context.lifespan_context["client"]


def get_tz(ctx: Context) -> tzinfo:
    return ctx.request_context.lifespan_context["tz"]


def respond(text: str, output: dict[str, Any]) -> ToolResult:
    return ToolResult(content=text, structured_content=output)


def tool_error(tool: str, exc: Exception) -> ToolError:
    """Convert any failure into the error result shown to the assistant."""
    message = describe_error(exc)
    log.warning("%s failed: %s", tool, message)
    return ToolError(message)
