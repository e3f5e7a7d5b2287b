"""Webhook tools.

Create and update send ``payload`` as the request body unchanged: the remote
webhook contract is not modelled here.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field

from modusign_mcp.foundation.core import ModusignTool, ToolMetadata, ToolParams, segment

from .schemas import PageParams

CATEGORY = "webhooks"


class WebhookIdParams(ToolParams):
    webhook_id: str = Field(min_length=1, description="Webhook ID")


class WebhookCreateParams(ToolParams):
    payload: dict[str, Any] = Field(
        description="Webhook create payload. See Modusign API docs for required fields.",
    )


class WebhookUpdateParams(WebhookIdParams):
    payload: dict[str, Any] = Field(
        description="Webhook update payload. See Modusign API docs for updatable fields.",
    )


class WebhookListTool(ModusignTool[PageParams]):
    metadata = ToolMetadata(name="webhook_list", description="List webhooks with pagination.", category=CATEGORY)
    params_schema = PageParams

    async def _async_run(self, params: PageParams) -> Any:
        return await self.client.get("/webhooks", params.wire())


class WebhookGetTool(ModusignTool[WebhookIdParams]):
    metadata = ToolMetadata(name="webhook_get", description="Get webhook details.", category=CATEGORY)
    params_schema = WebhookIdParams

    async def _async_run(self, params: WebhookIdParams) -> Any:
        return await self.client.get(f"/webhooks/{segment(params.webhook_id)}")


class WebhookCreateTool(ModusignTool[WebhookCreateParams]):
    metadata = ToolMetadata(name="webhook_create", description="Create a webhook.", category=CATEGORY)
    params_schema = WebhookCreateParams

    async def _async_run(self, params: WebhookCreateParams) -> Any:
        return await self.client.post("/webhooks", params.payload)


class WebhookUpdateTool(ModusignTool[WebhookUpdateParams]):
    metadata = ToolMetadata(name="webhook_update", description="Update a webhook.", category=CATEGORY)
    params_schema = WebhookUpdateParams

    async def _async_run(self, params: WebhookUpdateParams) -> Any:
        return await self.client.put(f"/webhooks/{segment(params.webhook_id)}", params.payload)


class WebhookDeleteTool(ModusignTool[WebhookIdParams]):
    metadata = ToolMetadata(name="webhook_delete", description="Delete a webhook.", category=CATEGORY)
    params_schema = WebhookIdParams

    async def _async_run(self, params: WebhookIdParams) -> Any:
        return await self.client.delete(f"/webhooks/{segment(params.webhook_id)}")


WEBHOOK_TOOLS: tuple[type[ModusignTool[Any]], ...] = (
    WebhookListTool,
    WebhookGetTool,
    WebhookCreateTool,
    WebhookUpdateTool,
    WebhookDeleteTool,
)
