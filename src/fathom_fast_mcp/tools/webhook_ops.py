"""MCP tools for creating and deleting Fathom webhooks."""

from typing import Annotated

from fastmcp import Context, FastMCP
from fastmcp.tools.tool import ToolResult
from pydantic import Field

from fathom_fast_mcp.types import DestinationUrl, TriggerTypes, Webhook, WebhookRequest
from fathom_fast_mcp.tools.common import get_client, respond, tool_error

_CREATE_ANNOTATIONS = {
    "readOnlyHint": False,
    "destructiveHint": False,
    "idempotentHint": False,
    "openWorldHint": True,
}

_DELETE_ANNOTATIONS = {
    "readOnlyHint": False,
    "destructiveHint": True,
    "idempotentHint": True,
    "openWorldHint": True,
}


def register(mcp: FastMCP) -> None:
    @mcp.tool(annotations=_CREATE_ANNOTATIONS)
    async def create_webhook(
        destination_url: Annotated[
            DestinationUrl, Field(description="Absolute URL that will receive webhook POSTs")
        ],
        triggered_for: Annotated[
            TriggerTypes,
            Field(
                description=(
                    "One or more of: 'my_recordings', 'shared_external_recordings', "
                    "'my_shared_with_team_recordings', 'shared_team_recordings'"
                )
            ),
        ],
        ctx: Context,
        include_action_items: Annotated[
            bool, Field(description="Include action items in the payload")
        ] = False,
        include_crm_matches: Annotated[
            bool, Field(description="Include CRM matches in the payload")
        ] = False,
        include_summary: Annotated[
            bool, Field(description="Include the meeting summary in the payload")
        ] = False,
        include_transcript: Annotated[
            bool, Field(description="Include the transcript in the payload")
        ] = False,
    ) -> ToolResult:
        """Create a webhook that POSTs meeting data whenever new content is ready.

        The response contains the webhook secret used to verify HMAC-SHA256
        signatures. It is only shown once. Keep the webhook ``id`` for
        deletion.
        """
        body = WebhookRequest(
            destination_url=destination_url,
            triggered_for=triggered_for,
            include_action_items=include_action_items,
            include_crm_matches=include_crm_matches,
            include_summary=include_summary,
            include_transcript=include_transcript,
        )
        try:
            data = await get_client(ctx).post("/webhooks", body.model_dump(mode="json"))
            webhook = Webhook.model_validate(data)
        except Exception as e:
            raise tool_error("create_webhook", e) from e

        output = {"success": True, "webhook": webhook.model_dump(mode="json")}
        return respond(format_webhook_markdown(webhook), output)

    @mcp.tool(annotations=_DELETE_ANNOTATIONS)
    async def delete_webhook(
        id: Annotated[str, Field(description="ID of the webhook to delete", min_length=1)],
        ctx: Context,
    ) -> ToolResult:
        """Delete a webhook; its endpoint stops receiving notifications. Cannot be undone."""
        try:
            await get_client(ctx).delete(f"/webhooks/{id}")
        except Exception as e:
            raise tool_error("delete_webhook", e) from e

        text = "\n".join(
            [
                "# Webhook Deleted",
                "",
                f"Successfully deleted webhook `{id}`.",
                "",
                "The endpoint will no longer receive notifications from Fathom.",
            ]
        )
        return respond(text, {"success": True, "deleted_webhook_id": id})


def _yes_no(flag: bool) -> str:
    return "Yes" if flag else "No"


def format_webhook_markdown(webhook: Webhook) -> str:
    lines = [
        "# Webhook Created Successfully",
        "",
        f"**Webhook ID**: `{webhook.id}`",
        f"**Destination URL**: {webhook.url}",
        f"**Secret**: `{webhook.secret}`",
        "",
        "**Configuration**:",
        f"- Include Transcript: {_yes_no(webhook.include_transcript)}",
        f"- Include Summary: {_yes_no(webhook.include_summary)}",
        f"- Include Action Items: {_yes_no(webhook.include_action_items)}",
        f"- Include CRM Matches: {_yes_no(webhook.include_crm_matches)}",
        "",
        "**Triggers**:",
    ]
    lines += [f"- {trigger.value}" for trigger in webhook.triggered_for]
    lines += [
        "",
        "---",
        "",
        "**IMPORTANT**: Save the webhook secret securely. It will not be shown again.",
        "Use the secret to verify webhook signatures using HMAC-SHA256.",
    ]
    return "\n".join(lines)
