"""Fathom MCP Server: FastMCP v2 implementation."""

import json
import logging
import sys
from contextlib import asynccontextmanager

import httpx
from fastmcp import FastMCP
from pydantic import ValidationError

from .client import FathomClient
from .config import Config
from .timezone import resolve_timezone
from .tools import analytics_ops, meeting_ops, recording_ops, team_ops, webhook_ops

log = logging.getLogger("fathom_fast_mcp")

SERVER_NAME = "fathom"

_TOOL_MODULES = (meeting_ops, recording_ops, team_ops, webhook_ops, analytics_ops)

# ---------------------------------------------------------------------------
# Server factory
# ---------------------------------------------------------------------------


def create_server(
    config: Config, transport: httpx.AsyncBaseTransport | None = None
) -> FastMCP:
    """Build the server; every tool shares the one client opened in the lifespan.

    *transport* replaces httpx's network transport (tests pass a
    ``MockTransport``).
    """

    @asynccontextmanager
    async def lifespan(server: FastMCP):
        async with FathomClient(
            config.api_key,
            base_url=config.base_url,
            timeout=config.timeout,
            transport=transport,
        ) as client:
            yield {
                "client": client,
                "config": config,
                "tz": resolve_timezone(config.timezone),
            }

    mcp = FastMCP(SERVER_NAME, lifespan=lifespan)
    for module in _TOOL_MODULES:
        module.register(mcp)
    return mcp


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

_SAMPLE_CLIENT_CONFIG = {
    "mcpServers": {
        "fathom": {
            "command": "fathom-fast-mcp",
            "env": {"FATHOM_API_KEY": "your-api-key-here"},
        }
    }
}


def _configure_logging(level: str) -> None:
    # stdout carries the MCP protocol; logs go to stderr.
    logging.basicConfig(
        level=level.upper(),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        force=True,
    )


def _report_config_error(error: ValidationError) -> None:
    if any(err["loc"] and err["loc"][0] == "api_key" for err in error.errors()):
        log.error(
            "FATHOM_API_KEY environment variable is required.\n\n"
            "To use this MCP server:\n"
            "1. Get your API key from Fathom (Settings > API)\n"
            "2. Set the environment variable:\n"
            "   export FATHOM_API_KEY=your-api-key-here\n\n"
            "Or configure it in your MCP client's config:\n%s",
            json.dumps(_SAMPLE_CLIENT_CONFIG, indent=2),
        )
    else:
        log.error("Invalid configuration:\n%s", error)


def main():
    _configure_logging("info")
    try:
        config = Config()
    except ValidationError as e:
        _report_config_error(e)
        sys.exit(1)

    _configure_logging(config.log_level)
    mcp = create_server(config)
    log.info("%s server starting on stdio", SERVER_NAME)
    mcp.run()
